from pydantic import Field

from teamgate.domain.auth.model.principal import Principal
from teamgate.domain.shared.authorization.gate import authenticated
from teamgate.domain.shared.query import Query, QueryHandler, Result
from teamgate.domain.team.model.value import TeamId
from teamgate.domain.team.query.get_team import TeamDetail
from teamgate.domain.team.service.team import TeamService


class SearchTeams(Query):
    text: str | None = None
    team_ids: list[str] = []
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=20, ge=1, le=1000)


class TeamSearchHit(TeamDetail):
    is_member: bool


class TeamSearchResult(Result):
    elements: list[TeamSearchHit]
    total: int
    offset: int
    limit: int


class SearchTeamsHandler(QueryHandler[SearchTeams, TeamSearchResult]):
    __auth__ = authenticated()
    principal: Principal
    team_service: TeamService

    async def run(self, query: SearchTeams) -> TeamSearchResult:
        matches, total = await self.team_service.search(
            self.principal.user,
            text=query.text,
            team_ids=[TeamId.parse(i) for i in query.team_ids],
            offset=query.offset,
            limit=query.limit,
        )
        return TeamSearchResult(
            elements=[
                TeamSearchHit(
                    **TeamDetail.from_team(m.team).model_dump(), is_member=m.is_member
                )
                for m in matches
            ],
            total=total,
            offset=query.offset,
            limit=query.limit,
        )
