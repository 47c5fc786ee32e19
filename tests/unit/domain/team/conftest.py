"""Fixtures shared by the team domain unit tests."""

import pytest

from teamgate.domain.team.model.filter import TeamPredicate
from teamgate.domain.team.model.team import Team
from teamgate.domain.team.model.value import TeamId


class InMemoryTeamRepository:
    """TeamRepository double that evaluates predicates with ``matches()``."""

    def __init__(self, teams: list[Team] | None = None) -> None:
        self.teams: dict[TeamId, Team] = {t.id: t for t in teams or []}
        self.queries: list[TeamPredicate] = []

    def add(self, *teams: Team) -> None:
        for team in teams:
            self.teams[team.id] = team

    async def get(self, team_id: TeamId) -> Team | None:
        return self.teams.get(team_id)

    async def save(self, team: Team) -> None:
        self.teams[team.id] = team

    async def delete(self, team_id: TeamId) -> bool:
        return self.teams.pop(team_id, None) is not None

    async def distinct_ids(self, predicate: TeamPredicate) -> list[TeamId]:
        self.queries.append(predicate)
        return [t.id for t in self.teams.values() if predicate.matches(t)]

    async def search(self, predicate=None, offset: int = 0, limit: int = 20):
        found = [t for t in self.teams.values() if predicate is None or predicate.matches(t)]
        found.sort(key=lambda t: t.name)
        return found[offset : offset + limit], len(found)


@pytest.fixture
def team_repo() -> InMemoryTeamRepository:
    return InMemoryTeamRepository()
