"""Auth domain models."""

from .identity import Anonymous, Identity
from .principal import Principal
from .user import User
from .value import RoleStrategy, UserId

__all__ = [
    "Anonymous",
    "Identity",
    "Principal",
    "RoleStrategy",
    "User",
    "UserId",
]
