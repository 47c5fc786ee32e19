"""Team role hierarchy."""

from enum import IntEnum


class TeamRole(IntEnum):
    """Roles a user can hold within a team, ordered by priority.

    Higher values inherit every permission of lower values. The ordering is
    total: any two roles compare.
    """

    BLOCKED = -1
    REQUESTER = 0
    VIEWER = 1
    MEMBER = 3
    EDITOR = 5
    ADMIN = 7

    @property
    def label(self) -> str:
        """Lower-case name, as stored and as exposed over the API."""
        return self.name.lower()

    @classmethod
    def parse(cls, value: "TeamRole | str | int | None") -> "TeamRole | None":
        """Resolve a role from a member, name or priority. Unknown values give None."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                return None
        return None


IMPLICIT_ROLE = TeamRole.MEMBER
"""The only role implicit membership ever grants."""

MINIMUM_ROLE_WITH_ACCESS = TeamRole.MEMBER


def meets_or_exceeds(have: "TeamRole | str | None", want: "TeamRole | str | None") -> bool:
    """True iff both roles are known and ``have`` ranks at or above ``want``."""
    have_role = TeamRole.parse(have)
    want_role = TeamRole.parse(want)
    if have_role is None or want_role is None:
        return False
    return have_role >= want_role


def roles_at_least(min_role: TeamRole) -> list[TeamRole]:
    """All roles ranking at or above ``min_role``, highest first."""
    return sorted((r for r in TeamRole if r >= min_role), reverse=True)
