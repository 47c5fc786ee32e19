"""Auth domain services."""

from .authorization import UserAuthorizationService

__all__ = ["UserAuthorizationService"]
