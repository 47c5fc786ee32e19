from abc import abstractmethod
from typing import Protocol

from teamgate.domain.auth.model.user import User
from teamgate.domain.shared.port import Port


class ExternalRoleMapProvider(Port, Protocol):
    """Decides whether a user's external (SSO) attributes grant a system role."""

    @abstractmethod
    def has_role(self, user: User, role: str) -> bool: ...
