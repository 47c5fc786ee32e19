"""Team service: team lifecycle, membership mutations and the guards around them."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from teamgate.config import TeamsConfig
from teamgate.domain.auth.model.user import User
from teamgate.domain.auth.model.value import UserId
from teamgate.domain.auth.port.repository import UserRepository
from teamgate.domain.auth.service.authorization import UserAuthorizationService
from teamgate.domain.shared.error import BadRequestError, NotFoundError
from teamgate.domain.shared.service import Service
from teamgate.domain.team.model.filter import (
    NameContains,
    TeamAllOf,
    TeamIdIn,
    TeamPredicate,
    TeamTextContains,
)
from teamgate.domain.team.model.role import MINIMUM_ROLE_WITH_ACCESS, TeamRole, roles_at_least
from teamgate.domain.team.model.team import Team
from teamgate.domain.team.model.value import MemberType, TeamId, TeamMembership
from teamgate.domain.team.port.notifier import TeamNotifier
from teamgate.domain.team.port.repository import TeamRepository
from teamgate.domain.team.port.resource_counter import ResourceCounter
from teamgate.domain.team.service.member_filter import build_member_filter
from teamgate.domain.team.service.membership import MembershipResolver
from teamgate.domain.team.service.team_ids import TeamIdResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeamMatch:
    """A team search hit, flagged with whether the searching user belongs to it."""

    team: Team
    is_member: bool


@dataclass(frozen=True)
class MemberMatch:
    """A member search hit with the user's active role in the searched team."""

    user: User
    role: TeamRole | None


class TeamService(Service):
    """Team lifecycle and membership management.

    Every membership write that could remove or demote an admin goes through
    ``verify_not_last_admin`` with row locking, in the same unit of work as the
    write itself.
    """

    config: TeamsConfig
    team_repo: TeamRepository
    user_repo: UserRepository
    resolver: MembershipResolver
    team_ids: TeamIdResolver
    user_authorization: UserAuthorizationService
    resource_counter: ResourceCounter
    notifier: TeamNotifier

    # -------------------------------------------------------------------------
    # Team lifecycle
    # -------------------------------------------------------------------------

    async def get(self, team_id: "TeamId | str") -> Team:
        """Load a team. Raises InvalidInputError for a malformed id, NotFoundError if missing."""
        team_id = TeamId.parse(team_id)
        team = await self.team_repo.get(team_id)
        if team is None:
            raise NotFoundError(f"Team not found: {team_id}", code="team_not_found")
        return team

    async def create(
        self,
        creator: User,
        name: str,
        *,
        description: str = "",
        implicit_members: bool = False,
        requires_external_roles: list[str] | None = None,
        requires_external_teams: list[str] | None = None,
        parent_id: "TeamId | str | None" = None,
        first_admin_id: "UserId | str | None" = None,
    ) -> Team:
        """Create a team and make ``first_admin_id`` (or the creator) its admin."""
        parent = await self.get(parent_id) if parent_id is not None else None

        first_admin = None
        if first_admin_id is not None:
            first_admin = await self.user_repo.get(UserId.parse(first_admin_id))

        team = Team.create(
            name,
            description=description,
            creator_id=creator.id,
            creator_name=creator.name,
            implicit_members=implicit_members,
            requires_external_roles=requires_external_roles,
            requires_external_teams=requires_external_teams,
            parent=parent,
        )
        await self.team_repo.save(team)
        await self._add_membership(first_admin or creator, team, TeamRole.ADMIN)

        logger.info(
            "Created team %s (%s) by user %s, parent=%s",
            team.id,
            team.name,
            creator.id,
            team.parent_id,
        )
        return team

    async def update(
        self,
        team: Team,
        *,
        name: str | None = None,
        description: str | None = None,
        implicit_members: bool | None = None,
        requires_external_roles: list[str] | None = None,
        requires_external_teams: list[str] | None = None,
    ) -> Team:
        team.update(
            name=name,
            description=description,
            implicit_members=implicit_members,
            requires_external_roles=requires_external_roles,
            requires_external_teams=requires_external_teams,
        )
        await self.team_repo.save(team)
        logger.info("Updated team %s", team.id)
        return team

    async def delete(self, team: Team) -> Team:
        """Delete a team and every membership in it. Refused while it still owns resources."""
        await self.verify_no_resources_in_team(team)
        await self.team_repo.delete(team.id)
        removed = await self.user_repo.remove_team_memberships(team.id)
        logger.info("Deleted team %s, removed %d memberships", team.id, removed)
        return team

    async def search(
        self,
        user: User,
        text: str | None = None,
        team_ids: Iterable[TeamId] | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[TeamMatch], int]:
        """Search teams visible to ``user``.

        System admins see every team; anyone else only teams where they are
        at least a member, intersected with ``team_ids`` when given.
        """
        member_ids = await self.team_ids.get_team_ids(
            user, roles_at_least(MINIMUM_ROLE_WITH_ACCESS)
        )
        requested = list(team_ids or [])

        predicates: list[TeamPredicate] = []
        if self.user_authorization.is_admin(user):
            if requested:
                predicates.append(TeamIdIn(ids=tuple(requested)))
        else:
            visible = member_ids
            if requested:
                allowed = set(requested)
                visible = [i for i in member_ids if i in allowed]
            if not visible:
                return [], 0
            predicates.append(TeamIdIn(ids=tuple(visible)))

        if text:
            predicates.append(TeamTextContains(text=text))

        predicate: TeamPredicate | None = None
        if len(predicates) == 1:
            predicate = predicates[0]
        elif predicates:
            predicate = TeamAllOf(predicates=tuple(predicates))

        teams, total = await self.team_repo.search(predicate, offset=offset, limit=limit)
        member_set = set(member_ids)
        return [TeamMatch(team=t, is_member=t.id in member_set) for t in teams], total

    async def search_members(
        self,
        team: Team,
        types: Iterable[MemberType] = (),
        roles: Iterable[TeamRole] = (),
        text: str | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[MemberMatch], int]:
        predicate = build_member_filter(
            team,
            self.config.implicit_strategy,
            types=types,
            roles=roles,
            base=NameContains(text=text) if text else None,
        )
        users, total = await self.user_repo.search(predicate, offset=offset, limit=limit)
        matches = [
            MemberMatch(user=u, role=self.resolver.get_active_team_role(u, team)) for u in users
        ]
        return matches, total

    # -------------------------------------------------------------------------
    # Membership mutations
    # -------------------------------------------------------------------------

    async def get_user(self, user_id: "UserId | str") -> User:
        """Load a prospective or current member. Raises NotFoundError if missing."""
        user_id = UserId.parse(user_id)
        user = await self.user_repo.get(user_id)
        if user is None:
            raise NotFoundError(f"User not found: {user_id}", code="user_not_found")
        return user

    async def add_member(self, user: User, team: Team, role: TeamRole = TeamRole.MEMBER) -> User:
        """Give ``user`` an explicit role in ``team``.

        A user who already holds a role has it changed through
        ``update_member_role``, so the last-admin guard still applies.
        """
        if user.team_role(team.id) is not None:
            return await self.update_member_role(user, team, role)
        return await self._add_membership(user, team, role)

    async def update_member_role(self, user: User, team: Team, role: TeamRole) -> User:
        current = user.team_role(team.id)
        if current is None:
            raise NotFoundError(
                f"User {user.id} is not a member of team {team.id}", code="member_not_found"
            )
        if current == TeamRole.ADMIN and role != TeamRole.ADMIN:
            await self.verify_not_last_admin(user, team, lock=True)

        user.set_membership_role(team.id, role)
        if not await self.user_repo.set_membership_role(user.id, team.id, role):
            raise NotFoundError(
                f"User {user.id} is not a member of team {team.id}", code="member_not_found"
            )
        logger.info(
            "Changed role of user %s in team %s: %s -> %s",
            user.id,
            team.id,
            current.label,
            role.label,
        )
        return user

    async def remove_member(self, user: User, team: Team) -> User:
        current = user.team_role(team.id)
        if current is None:
            raise NotFoundError(
                f"User {user.id} is not a member of team {team.id}", code="member_not_found"
            )
        if current == TeamRole.ADMIN:
            await self.verify_not_last_admin(user, team, lock=True)

        user.remove_membership(team.id)
        await self.user_repo.remove_membership(user.id, team.id)
        logger.info("Removed user %s (%s) from team %s", user.id, current.label, team.id)
        return user

    async def _add_membership(self, user: User, team: Team, role: TeamRole) -> User:
        user.add_membership(team.id, role)
        await self.user_repo.add_membership(user.id, TeamMembership(team_id=team.id, role=role))
        logger.info("Added user %s to team %s as %s", user.id, team.id, role.label)
        return user

    # -------------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------------

    async def verify_not_last_admin(self, user: User, team: Team, *, lock: bool = False) -> None:
        """Raise BadRequestError unless another user is an active admin of ``team``.

        With ``lock`` the team's admin memberships stay row-locked until the
        unit of work commits, so a concurrent demotion waits for this one.
        """
        others = await self.user_repo.find_by_team_role(
            team.id, TeamRole.ADMIN, exclude_user_id=user.id, for_update=lock
        )
        if any(self.resolver.get_active_team_role(u, team) == TeamRole.ADMIN for u in others):
            return

        logger.warning("Refused to remove the last admin %s of team %s", user.id, team.id)
        raise BadRequestError("Team must have at least one admin", code="last-admin")

    async def verify_no_resources_in_team(self, team: Team) -> None:
        count = await self.resource_counter.count_resources(team.id)
        if count > 0:
            raise BadRequestError(
                "There are still resources in this team.", code="team-has-resources"
            )

    # -------------------------------------------------------------------------
    # Access checks and requests
    # -------------------------------------------------------------------------

    async def require_team_role(
        self, user: User, team_id: "TeamId | str", role: TeamRole
    ) -> Team:
        """Load the team and check that ``user`` may act on it with ``role``.

        System admins pass without a team role.
        """
        team = await self.get(team_id)
        if self.user_authorization.is_admin(user):
            logger.debug(
                "Team role check bypassed for system admin %s on team %s", user.id, team.id
            )
            return team
        self.resolver.meets_role_requirement(user, team, role)
        return team

    async def request_access(self, requester: User, team: Team) -> None:
        """Record a pending access request and tell the team admins about it."""
        if requester.team_role(team.id) is not None:
            raise BadRequestError(
                "User already holds a role in this team", code="already-member"
            )

        admins = await self.user_repo.find_by_team_role(team.id, TeamRole.ADMIN)
        if not admins:
            raise BadRequestError("Error retrieving team admins", code="no-team-admins")

        await self._add_membership(requester, team, TeamRole.REQUESTER)
        await self.notifier.notify_access_requested(requester, team, admins)

    async def request_new_team(
        self, requester: User | None, org: str | None, aoi: str | None, description: str | None
    ) -> None:
        if not org:
            raise BadRequestError("Organization cannot be empty", code="missing-org")
        if not aoi:
            raise BadRequestError("AOI cannot be empty", code="missing-aoi")
        if not description:
            raise BadRequestError("Description cannot be empty", code="missing-description")
        if requester is None:
            raise BadRequestError("Invalid requester", code="invalid-requester")

        await self.notifier.notify_team_requested(requester, org, aoi, description)
