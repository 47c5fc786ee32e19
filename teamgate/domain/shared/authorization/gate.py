"""Handler-level authorization gates.

Every CommandHandler/QueryHandler declares ``__auth__: ClassVar[Gate]``:

- ``public()``: no identified user required
- ``authenticated()``: any identified user
- ``system_role(name)``: the user holds a system role; the handler exposes
  ``user_authorization``
- ``team_role(role)``: the user holds at least ``role`` in the team named by
  ``cmd.team_id`` (system admins pass); the handler exposes ``team_service``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from teamgate.domain.shared.error import AuthorizationError, ConfigurationError

if TYPE_CHECKING:
    from teamgate.domain.team.model.role import TeamRole

logger = logging.getLogger("teamgate.authz")


class Gate:
    """Base for handler-level authorization gates."""


@dataclass(frozen=True)
class Public(Gate):
    """No authentication required."""


@dataclass(frozen=True)
class Authenticated(Gate):
    """Any identified user."""


@dataclass(frozen=True)
class SystemRole(Gate):
    """Gate that requires a system role (e.g. ``editor``)."""

    role: str


@dataclass(frozen=True)
class TeamRoleAtLeast(Gate):
    """Gate that requires at least the given role in the command's team."""

    role: "TeamRole"


_PUBLIC = Public()
_AUTHENTICATED = Authenticated()


def public() -> Public:
    """Mark a handler as publicly accessible (no auth required)."""
    return _PUBLIC


def authenticated() -> Authenticated:
    """Mark a handler as requiring an identified user."""
    return _AUTHENTICATED


def system_role(role: str) -> SystemRole:
    """Mark a handler as requiring the given system role."""
    return SystemRole(role=role)


def team_role(role: "TeamRole") -> TeamRoleAtLeast:
    """Mark a handler as requiring at least the given role in the command's team."""
    return TeamRoleAtLeast(role=role)


async def enforce_gate(handler: Any, cmd: Any) -> None:
    """Evaluate the handler's ``__auth__`` gate for ``cmd``. Raises on denial."""
    from teamgate.domain.auth.model.principal import Principal

    handler_name = type(handler).__name__
    gate = getattr(type(handler), "__auth__", None)
    if not isinstance(gate, Gate):
        raise ConfigurationError(f"Handler {handler_name} has no __auth__ declaration")

    if isinstance(gate, Public):
        return

    principal = getattr(handler, "principal", None)
    if not isinstance(principal, Principal):
        raise AuthorizationError("Authentication required", code="missing_user")

    if isinstance(gate, Authenticated):
        return

    if isinstance(gate, SystemRole):
        logger.debug(
            "Auth check: handler=%s, system_role=%s, user_id=%s",
            handler_name,
            gate.role,
            principal.user_id,
        )
        if not handler.user_authorization.has_role(principal.user, gate.role):
            logger.warning(
                "Access denied: handler=%s, system_role=%s, user_id=%s",
                handler_name,
                gate.role,
                principal.user_id,
            )
            raise AuthorizationError(
                f"Access denied: missing role {gate.role} for {handler_name}",
                code="missing-roles",
            )
        return

    if isinstance(gate, TeamRoleAtLeast):
        logger.debug(
            "Auth check: handler=%s, team_role=%s, team_id=%s, user_id=%s",
            handler_name,
            gate.role.label,
            cmd.team_id,
            principal.user_id,
        )
        await handler.team_service.require_team_role(principal.user, cmd.team_id, gate.role)
        return

    raise ConfigurationError(  # pragma: no cover
        f"Handler {handler_name} has unhandled __auth__ type: {type(gate).__name__}"
    )
