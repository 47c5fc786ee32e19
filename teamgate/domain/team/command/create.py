from teamgate.domain.auth.model.principal import Principal
from teamgate.domain.auth.service.authorization import UserAuthorizationService
from teamgate.domain.shared.authorization.gate import system_role
from teamgate.domain.shared.command import Command, CommandHandler, Result
from teamgate.domain.team.service.team import TeamService


class CreateTeam(Command):
    name: str
    description: str = ""
    implicit_members: bool = False
    requires_external_roles: list[str] = []
    requires_external_teams: list[str] = []
    parent_id: str | None = None
    first_admin_id: str | None = None  # Defaults to the creator


class TeamCreated(Result):
    id: str
    ancestors: list[str]


class CreateTeamHandler(CommandHandler[CreateTeam, TeamCreated]):
    __auth__ = system_role("editor")
    principal: Principal
    user_authorization: UserAuthorizationService
    team_service: TeamService

    async def run(self, cmd: CreateTeam) -> TeamCreated:
        team = await self.team_service.create(
            self.principal.user,
            cmd.name,
            description=cmd.description,
            implicit_members=cmd.implicit_members,
            requires_external_roles=cmd.requires_external_roles,
            requires_external_teams=cmd.requires_external_teams,
            parent_id=cmd.parent_id,
            first_admin_id=cmd.first_admin_id,
        )
        return TeamCreated(id=str(team.id), ancestors=[str(a) for a in team.ancestors])
