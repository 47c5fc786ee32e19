"""Access and new-team requests."""

from teamgate.domain.auth.model.principal import Principal
from teamgate.domain.shared.authorization.gate import authenticated
from teamgate.domain.shared.command import Command, CommandHandler, Result
from teamgate.domain.team.service.team import TeamService


class RequestTeamAccess(Command):
    team_id: str


class RequestNewTeam(Command):
    org: str | None = None
    aoi: str | None = None
    description: str | None = None


class RequestSubmitted(Result): ...


class RequestTeamAccessHandler(CommandHandler[RequestTeamAccess, RequestSubmitted]):
    __auth__ = authenticated()
    principal: Principal
    team_service: TeamService

    async def run(self, cmd: RequestTeamAccess) -> RequestSubmitted:
        team = await self.team_service.get(cmd.team_id)
        await self.team_service.request_access(self.principal.user, team)
        return RequestSubmitted()


class RequestNewTeamHandler(CommandHandler[RequestNewTeam, RequestSubmitted]):
    __auth__ = authenticated()
    principal: Principal
    team_service: TeamService

    async def run(self, cmd: RequestNewTeam) -> RequestSubmitted:
        await self.team_service.request_new_team(
            self.principal.user, cmd.org, cmd.aoi, cmd.description
        )
        return RequestSubmitted()
