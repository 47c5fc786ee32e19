"""Login: refresh a user's derived roles once their identity is established."""

import logging

from teamgate.domain.auth.model.principal import Principal
from teamgate.domain.auth.service.authorization import UserAuthorizationService
from teamgate.domain.shared.authorization.gate import authenticated
from teamgate.domain.shared.command import Command, CommandHandler, Result
from teamgate.domain.team.model.value import TeamMembership
from teamgate.domain.team.service.role_cache import TeamRoleCacheRebuilder

logger = logging.getLogger(__name__)


class Login(Command):
    """Rebuild the caller's system roles and team role cache."""


class LoginResult(Result):
    user_id: str
    roles: dict[str, bool]
    teams: list[TeamMembership]


class LoginHandler(CommandHandler[Login, LoginResult]):
    __auth__ = authenticated()
    principal: Principal
    user_authorization: UserAuthorizationService
    role_cache: TeamRoleCacheRebuilder

    async def run(self, cmd: Login) -> LoginResult:
        user = self.principal.user
        self.user_authorization.update_roles(user)
        teams = await self.role_cache.update_teams(user)
        logger.info("User %s logged in with %d cached team roles", user.id, len(teams))
        return LoginResult(user_id=str(user.id), roles=dict(user.roles), teams=teams)
