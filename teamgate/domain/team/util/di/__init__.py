from .provider import TeamProvider

__all__ = ["TeamProvider"]
