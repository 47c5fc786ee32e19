from teamgate.domain.auth.model.principal import Principal
from teamgate.domain.shared.authorization.gate import team_role
from teamgate.domain.shared.command import Command, CommandHandler, Result
from teamgate.domain.team.model.role import TeamRole
from teamgate.domain.team.service.team import TeamService


class DeleteTeam(Command):
    team_id: str


class TeamDeleted(Result):
    id: str


class DeleteTeamHandler(CommandHandler[DeleteTeam, TeamDeleted]):
    __auth__ = team_role(TeamRole.ADMIN)
    principal: Principal
    team_service: TeamService

    async def run(self, cmd: DeleteTeam) -> TeamDeleted:
        team = await self.team_service.get(cmd.team_id)
        await self.team_service.delete(team)
        return TeamDeleted(id=str(team.id))
