"""Team id set algebra used to scope queries to what a user may see."""

from collections.abc import Iterable

from teamgate.config import ImplicitMemberStrategy, TeamsConfig
from teamgate.domain.auth.model.user import User
from teamgate.domain.shared.error import InvalidUserError
from teamgate.domain.shared.service import Service
from teamgate.domain.team.model.filter import (
    HasAncestorIn,
    ImplicitMembersEnabled,
    RequiredExternalRolesWithin,
    RequiredExternalTeamsIntersect,
    TeamIdNotIn,
    TeamPredicate,
)
from teamgate.domain.team.model.role import (
    IMPLICIT_ROLE,
    MINIMUM_ROLE_WITH_ACCESS,
    TeamRole,
    roles_at_least,
)
from teamgate.domain.team.model.value import TeamId
from teamgate.domain.team.port.repository import TeamRepository


def _dedupe(ids: Iterable[TeamId]) -> list[TeamId]:
    return list(dict.fromkeys(ids))


class TeamIdResolver(Service):
    """Resolves the set of team ids a user belongs to.

    Results are lists without duplicates, in discovery order: explicit
    memberships first, then implicit ones, then nested descendants.
    """

    config: TeamsConfig
    team_repo: TeamRepository

    def get_explicit_team_ids(
        self, user: User | None, roles: Iterable[TeamRole] | None = None
    ) -> list[TeamId]:
        if user is None:
            raise InvalidUserError("User is required", code="invalid-user")
        wanted = set(roles or [])
        return _dedupe(m.team_id for m in user.teams if not wanted or m.role in wanted)

    async def get_implicit_team_ids(
        self, user: User | None, roles: Iterable[TeamRole] | None = None
    ) -> list[TeamId]:
        if user is None:
            raise InvalidUserError("User is required", code="invalid-user")

        strategy = self.config.implicit_strategy
        if strategy == ImplicitMemberStrategy.NONE:
            return []
        wanted = set(roles or [])
        if wanted and IMPLICIT_ROLE not in wanted:
            return []

        predicate: TeamPredicate = ImplicitMembersEnabled()
        if strategy == ImplicitMemberStrategy.ROLES:
            if not user.external_roles:
                return []
            predicate = predicate & RequiredExternalRolesWithin(values=tuple(user.external_roles))
        else:
            # bypass_access_check does not widen the stored-team query
            if not user.external_groups:
                return []
            predicate = predicate & RequiredExternalTeamsIntersect(
                values=tuple(user.external_groups)
            )

        # An explicit role below member always overrides an implicit grant
        overridden = tuple(m.team_id for m in user.teams if m.role < MINIMUM_ROLE_WITH_ACCESS)
        if overridden:
            predicate = predicate & TeamIdNotIn(ids=overridden)

        return _dedupe(await self.team_repo.distinct_ids(predicate))

    async def get_nested_team_ids(self, team_ids: Iterable[TeamId]) -> list[TeamId]:
        """Strict descendants of ``team_ids``. Empty when nested teams are disabled."""
        ids = tuple(_dedupe(team_ids))
        if not self.config.nested_teams or not ids:
            return []
        predicate = HasAncestorIn(ids=ids) & TeamIdNotIn(ids=ids)
        return _dedupe(await self.team_repo.distinct_ids(predicate))

    async def get_team_ids(
        self, user: User | None, roles: Iterable[TeamRole] | None = None
    ) -> list[TeamId]:
        """Explicit, implicit and nested-descendant team ids, without duplicates."""
        roles = list(roles or [])
        explicit_ids = self.get_explicit_team_ids(user, roles)
        implicit_ids = await self.get_implicit_team_ids(user, roles)
        direct_ids = _dedupe([*explicit_ids, *implicit_ids])
        nested_ids = await self.get_nested_team_ids(direct_ids)
        return _dedupe([*direct_ids, *nested_ids])

    async def filter_team_ids(
        self, user: User | None, candidate_ids: Iterable[TeamId] | None = None
    ) -> list[TeamId]:
        """Team ids where the user is at least a member, limited to ``candidate_ids`` if given.

        The intersection keeps the order of ``candidate_ids``.
        """
        member_ids = await self.get_team_ids(user, roles_at_least(MINIMUM_ROLE_WITH_ACCESS))
        candidates = _dedupe(candidate_ids or [])
        if not candidates:
            return member_ids
        allowed = set(member_ids)
        return [team_id for team_id in candidates if team_id in allowed]
