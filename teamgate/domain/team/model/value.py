"""Value objects for the team domain."""

from enum import StrEnum
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer

from teamgate.domain.shared.model.value import Identifier, ValueObject
from teamgate.domain.team.model.role import TeamRole


class TeamId(Identifier):
    """Unique identifier for a Team."""


def _parse_role(value: Any) -> TeamRole:
    role = TeamRole.parse(value)
    if role is None:
        raise ValueError(f"Invalid team role: {value!r}")
    return role


RoleName = Annotated[
    TeamRole,
    BeforeValidator(_parse_role),
    PlainSerializer(lambda role: role.label, return_type=str),
]
"""A TeamRole that reads and writes its lower-case name ("admin")."""


class TeamMembership(ValueObject):
    """An explicit (team, role) pair held by a user."""

    team_id: TeamId
    role: RoleName


class MemberType(StrEnum):
    """How a user belongs to a team, used to narrow member searches."""

    EXPLICIT = "explicit"
    IMPLICIT = "implicit"
