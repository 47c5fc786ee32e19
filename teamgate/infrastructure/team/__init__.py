from .di import TeamInfraProvider

__all__ = ["TeamInfraProvider"]
