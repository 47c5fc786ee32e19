"""Team domain models."""

from .role import (
    IMPLICIT_ROLE,
    MINIMUM_ROLE_WITH_ACCESS,
    TeamRole,
    meets_or_exceeds,
    roles_at_least,
)
from .team import Team
from .value import MemberType, TeamId, TeamMembership

__all__ = [
    "IMPLICIT_ROLE",
    "MINIMUM_ROLE_WITH_ACCESS",
    "MemberType",
    "Team",
    "TeamId",
    "TeamMembership",
    "TeamRole",
    "meets_or_exceeds",
    "roles_at_least",
]
