from teamgate.domain.auth.model.principal import Principal
from teamgate.domain.shared.authorization.gate import team_role
from teamgate.domain.shared.command import Command, CommandHandler
from teamgate.domain.team.model.role import TeamRole
from teamgate.domain.team.query.get_team import TeamDetail
from teamgate.domain.team.service.team import TeamService


class UpdateTeam(Command):
    team_id: str
    name: str | None = None
    description: str | None = None
    implicit_members: bool | None = None
    requires_external_roles: list[str] | None = None
    requires_external_teams: list[str] | None = None


class UpdateTeamHandler(CommandHandler[UpdateTeam, TeamDetail]):
    __auth__ = team_role(TeamRole.ADMIN)
    principal: Principal
    team_service: TeamService

    async def run(self, cmd: UpdateTeam) -> TeamDetail:
        team = await self.team_service.get(cmd.team_id)
        team = await self.team_service.update(
            team,
            name=cmd.name,
            description=cmd.description,
            implicit_members=cmd.implicit_members,
            requires_external_roles=cmd.requires_external_roles,
            requires_external_teams=cmd.requires_external_teams,
        )
        return TeamDetail.from_team(team)
