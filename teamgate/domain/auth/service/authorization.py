"""User authorization service: system roles (not team roles)."""

import logging

from teamgate.config import AuthConfig
from teamgate.domain.auth.model.user import User
from teamgate.domain.auth.model.value import RoleStrategy
from teamgate.domain.auth.port.external_role_map import ExternalRoleMapProvider
from teamgate.domain.shared.service import Service

logger = logging.getLogger(__name__)


class UserAuthorizationService(Service):
    """Resolves a user's system roles.

    Under the ``local`` strategy roles come from ``user.roles`` only, under
    ``external`` from the external role map provider only, and under
    ``hybrid`` either source grants the role.
    """

    config: AuthConfig
    provider: ExternalRoleMapProvider

    def has_role(self, user: User, role: str) -> bool:
        strategy = self.config.role_strategy
        has_local_role = bool(user.roles.get(role, False))
        if strategy == RoleStrategy.LOCAL:
            return has_local_role

        has_external_role = self.provider.has_role(user, role)
        if strategy == RoleStrategy.EXTERNAL:
            return has_external_role

        return has_local_role or has_external_role

    def has_roles(self, user: User, roles: list[str] | None = None) -> bool:
        """True if the user holds every role. An empty list passes."""
        return all(self.has_role(user, r) for r in roles or [])

    def has_any_role(self, user: User, roles: list[str] | None = None) -> bool:
        """True if the user holds at least one role. An empty list passes."""
        if not roles:
            return True
        return any(self.has_role(user, r) for r in roles)

    def is_admin(self, user: User) -> bool:
        return self.has_role(user, self.config.admin_role)

    def update_roles(self, user: User) -> None:
        """Refresh ``user.roles`` from the external provider.

        Under ``hybrid`` the locally granted roles are first preserved in
        ``user.local_roles`` and stay granted. Under ``local`` nothing changes.
        """
        strategy = self.config.role_strategy
        if strategy == RoleStrategy.LOCAL:
            return

        is_hybrid = strategy == RoleStrategy.HYBRID
        if is_hybrid:
            user.local_roles = dict(user.roles)

        user.roles = {
            role: (is_hybrid and bool(user.local_roles.get(role)))
            or self.provider.has_role(user, role)
            for role in self.config.roles
        }
        logger.debug("Updated system roles for user %s: %s", user.id, user.roles)
