"""Login-time rebuild of a user's cached team roles."""

import logging

from teamgate.config import ImplicitMemberStrategy, TeamsConfig
from teamgate.domain.auth.model.user import User
from teamgate.domain.shared.service import Service
from teamgate.domain.team.model.role import TeamRole
from teamgate.domain.team.model.value import TeamMembership
from teamgate.domain.team.service.team_ids import TeamIdResolver

logger = logging.getLogger(__name__)


class TeamRoleCacheRebuilder(Service):
    """Collapses explicit, implicit and nested team roles into one list per user.

    Each team appears once, tagged with the highest role the user earns in it
    (admin absorbs editor, editor absorbs member).
    """

    config: TeamsConfig
    team_ids: TeamIdResolver

    async def update_teams(self, user: User) -> list[TeamMembership]:
        implicit_enabled = self.config.implicit_strategy != ImplicitMemberStrategy.NONE
        if not implicit_enabled and not self.config.nested_teams:
            return list(user.teams)

        admin_ids = await self.team_ids.get_team_ids(user, [TeamRole.ADMIN])
        seen = set(admin_ids)
        editor_ids = [
            i for i in await self.team_ids.get_team_ids(user, [TeamRole.EDITOR]) if i not in seen
        ]
        seen.update(editor_ids)
        member_ids = [
            i for i in await self.team_ids.get_team_ids(user, [TeamRole.MEMBER]) if i not in seen
        ]

        cache = [
            *(TeamMembership(team_id=i, role=TeamRole.ADMIN) for i in admin_ids),
            *(TeamMembership(team_id=i, role=TeamRole.EDITOR) for i in editor_ids),
            *(TeamMembership(team_id=i, role=TeamRole.MEMBER) for i in member_ids),
        ]
        user.team_cache = cache
        logger.debug(
            "Rebuilt team cache for user %s: %d admin, %d editor, %d member",
            user.id,
            len(admin_ids),
            len(editor_ids),
            len(member_ids),
        )
        return cache
