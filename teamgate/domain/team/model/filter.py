"""Immutable predicate trees over users and teams.

Predicates describe *which* users or teams match without saying how the match
is executed. The persistence layer compiles them to SQL
(``teamgate.infrastructure.persistence.compiler``); ``matches()`` evaluates the
same tree in memory against a loaded object.

Every node is a frozen dataclass, so builders always return new trees and a
predicate can be shared between calls without aliasing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from teamgate.domain.auth.model.user import User
    from teamgate.domain.team.model.role import TeamRole
    from teamgate.domain.team.model.team import Team
    from teamgate.domain.team.model.value import TeamId


# =============================================================================
# User predicates
# =============================================================================


class MemberPredicate(ABC):
    """Base class for predicates over users."""

    @abstractmethod
    def matches(self, user: "User") -> bool:
        """Return True if the user satisfies this predicate."""
        ...

    def __and__(self, other: MemberPredicate) -> MemberAllOf:
        return MemberAllOf(predicates=(self, other))

    def __or__(self, other: MemberPredicate) -> MemberAnyOf:
        return MemberAnyOf(predicates=(self, other))


@dataclass(frozen=True)
class ExplicitMember(MemberPredicate):
    """User holds an explicit membership in the team, optionally with one of ``roles``."""

    team_id: "TeamId"
    roles: tuple["TeamRole", ...] | None = None

    def matches(self, user: "User") -> bool:
        role = user.team_role(self.team_id)
        if role is None:
            return False
        return self.roles is None or role in self.roles


@dataclass(frozen=True)
class NotExplicitMember(MemberPredicate):
    """User holds no explicit membership in the team, whatever its role."""

    team_id: "TeamId"

    def matches(self, user: "User") -> bool:
        return user.team_role(self.team_id) is None


@dataclass(frozen=True)
class HasAllExternalRoles(MemberPredicate):
    """Every listed external role is present on the user."""

    roles: tuple[str, ...]

    def matches(self, user: "User") -> bool:
        return bool(self.roles) and set(self.roles) <= set(user.external_roles)


@dataclass(frozen=True)
class HasAnyExternalGroup(MemberPredicate):
    """At least one listed external group is present on the user."""

    groups: tuple[str, ...]

    def matches(self, user: "User") -> bool:
        return bool(set(self.groups) & set(user.external_groups))


@dataclass(frozen=True)
class NameContains(MemberPredicate):
    """Case-insensitive substring match on name, username or email."""

    text: str

    def matches(self, user: "User") -> bool:
        needle = self.text.lower()
        fields = (user.name, user.username, user.email)
        return any(needle in (f or "").lower() for f in fields)


@dataclass(frozen=True)
class MemberAllOf(MemberPredicate):
    predicates: tuple[MemberPredicate, ...]

    def matches(self, user: "User") -> bool:
        return all(p.matches(user) for p in self.predicates)


@dataclass(frozen=True)
class MemberAnyOf(MemberPredicate):
    predicates: tuple[MemberPredicate, ...]

    def matches(self, user: "User") -> bool:
        return any(p.matches(user) for p in self.predicates)


@dataclass(frozen=True)
class MatchNothing(MemberPredicate):
    """Unsatisfiable predicate. Used instead of an empty disjunction."""

    def matches(self, user: "User") -> bool:
        return False


# =============================================================================
# Team predicates
# =============================================================================


class TeamPredicate(ABC):
    """Base class for predicates over teams."""

    @abstractmethod
    def matches(self, team: "Team") -> bool:
        """Return True if the team satisfies this predicate."""
        ...

    def __and__(self, other: TeamPredicate) -> TeamAllOf:
        return TeamAllOf(predicates=(self, other))


@dataclass(frozen=True)
class ImplicitMembersEnabled(TeamPredicate):
    def matches(self, team: "Team") -> bool:
        return team.implicit_members


@dataclass(frozen=True)
class RequiredExternalRolesWithin(TeamPredicate):
    """Team has a non-empty role requirement fully covered by ``values``."""

    values: tuple[str, ...]

    def matches(self, team: "Team") -> bool:
        required = set(team.requires_external_roles)
        return bool(required) and required <= set(self.values)


@dataclass(frozen=True)
class RequiredExternalTeamsIntersect(TeamPredicate):
    """Team lists at least one required external group found in ``values``."""

    values: tuple[str, ...]

    def matches(self, team: "Team") -> bool:
        return bool(set(team.requires_external_teams) & set(self.values))


@dataclass(frozen=True)
class TeamIdIn(TeamPredicate):
    ids: tuple["TeamId", ...]

    def matches(self, team: "Team") -> bool:
        return team.id in self.ids


@dataclass(frozen=True)
class TeamIdNotIn(TeamPredicate):
    ids: tuple["TeamId", ...]

    def matches(self, team: "Team") -> bool:
        return team.id not in self.ids


@dataclass(frozen=True)
class HasAncestorIn(TeamPredicate):
    """Any of the team's stored ancestors is in ``ids``."""

    ids: tuple["TeamId", ...]

    def matches(self, team: "Team") -> bool:
        return any(a in self.ids for a in team.ancestors)


@dataclass(frozen=True)
class TeamTextContains(TeamPredicate):
    """Case-insensitive substring match on name or description."""

    text: str

    def matches(self, team: "Team") -> bool:
        needle = self.text.lower()
        return needle in team.name.lower() or needle in (team.description or "").lower()


@dataclass(frozen=True)
class TeamAllOf(TeamPredicate):
    predicates: tuple[TeamPredicate, ...]

    def matches(self, team: "Team") -> bool:
        return all(p.matches(team) for p in self.predicates)
