from datetime import datetime

from teamgate.domain.auth.model.principal import Principal
from teamgate.domain.shared.authorization.gate import team_role
from teamgate.domain.shared.query import Query, QueryHandler, Result
from teamgate.domain.team.model.role import TeamRole
from teamgate.domain.team.model.team import Team
from teamgate.domain.team.service.team import TeamService


class GetTeam(Query):
    team_id: str


class TeamDetail(Result):
    id: str
    name: str
    description: str
    creator_id: str | None
    creator_name: str | None
    implicit_members: bool
    requires_external_roles: list[str]
    requires_external_teams: list[str]
    parent_id: str | None
    ancestors: list[str]
    created_at: datetime
    updated_at: datetime | None

    @classmethod
    def from_team(cls, team: Team) -> "TeamDetail":
        return cls(
            id=str(team.id),
            name=team.name,
            description=team.description,
            creator_id=str(team.creator_id) if team.creator_id else None,
            creator_name=team.creator_name,
            implicit_members=team.implicit_members,
            requires_external_roles=list(team.requires_external_roles),
            requires_external_teams=list(team.requires_external_teams),
            parent_id=str(team.parent_id) if team.parent_id else None,
            ancestors=[str(a) for a in team.ancestors],
            created_at=team.created_at,
            updated_at=team.updated_at,
        )


class GetTeamHandler(QueryHandler[GetTeam, TeamDetail]):
    __auth__ = team_role(TeamRole.MEMBER)
    principal: Principal
    team_service: TeamService

    async def run(self, query: GetTeam) -> TeamDetail:
        team = await self.team_service.get(query.team_id)
        return TeamDetail.from_team(team)
