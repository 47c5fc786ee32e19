"""Auth domain ports."""

from .external_role_map import ExternalRoleMapProvider
from .repository import UserRepository

__all__ = [
    "ExternalRoleMapProvider",
    "UserRepository",
]
