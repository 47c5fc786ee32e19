"""Repository ports for the team domain."""

from abc import abstractmethod
from typing import Protocol

from teamgate.domain.shared.port import Port
from teamgate.domain.team.model.filter import TeamPredicate
from teamgate.domain.team.model.team import Team
from teamgate.domain.team.model.value import TeamId


class TeamRepository(Port, Protocol):
    """Repository for Team aggregate persistence."""

    @abstractmethod
    async def get(self, team_id: TeamId) -> Team | None:
        """Get a team by ID."""
        ...

    @abstractmethod
    async def save(self, team: Team) -> None:
        """Save a team (create or update)."""
        ...

    @abstractmethod
    async def delete(self, team_id: TeamId) -> bool:
        """Delete a team. Returns False if it did not exist."""
        ...

    @abstractmethod
    async def distinct_ids(self, predicate: TeamPredicate) -> list[TeamId]:
        """Ids of every team matching the predicate, without duplicates."""
        ...

    @abstractmethod
    async def search(
        self,
        predicate: TeamPredicate | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Team], int]:
        """Page through matching teams ordered by name. Returns (page, total)."""
        ...
