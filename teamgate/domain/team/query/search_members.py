from pydantic import Field

from teamgate.domain.auth.model.principal import Principal
from teamgate.domain.shared.authorization.gate import team_role
from teamgate.domain.shared.error import ValidationError
from teamgate.domain.shared.query import Query, QueryHandler, Result
from teamgate.domain.team.model.role import TeamRole
from teamgate.domain.team.model.value import MemberType
from teamgate.domain.team.service.team import TeamService


class SearchTeamMembers(Query):
    team_id: str
    text: str | None = None
    types: list[MemberType] = []
    roles: list[str] = []
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=20, ge=1, le=1000)


class TeamMember(Result):
    user_id: str
    name: str
    username: str
    email: str | None
    role: str | None
    explicit: bool


class TeamMemberSearchResult(Result):
    elements: list[TeamMember]
    total: int
    offset: int
    limit: int


class SearchTeamMembersHandler(QueryHandler[SearchTeamMembers, TeamMemberSearchResult]):
    __auth__ = team_role(TeamRole.MEMBER)
    principal: Principal
    team_service: TeamService

    async def run(self, query: SearchTeamMembers) -> TeamMemberSearchResult:
        roles = []
        for name in query.roles:
            role = TeamRole.parse(name)
            if role is None:
                raise ValidationError(
                    f"Invalid team role: {name}", field="roles", code="invalid-role"
                )
            roles.append(role)

        team = await self.team_service.get(query.team_id)
        matches, total = await self.team_service.search_members(
            team,
            types=query.types,
            roles=roles,
            text=query.text,
            offset=query.offset,
            limit=query.limit,
        )
        return TeamMemberSearchResult(
            elements=[
                TeamMember(
                    user_id=str(m.user.id),
                    name=m.user.name,
                    username=m.user.username,
                    email=m.user.email,
                    role=m.role.label if m.role is not None else None,
                    explicit=m.user.team_role(team.id) is not None,
                )
                for m in matches
            ],
            total=total,
            offset=query.offset,
            limit=query.limit,
        )
