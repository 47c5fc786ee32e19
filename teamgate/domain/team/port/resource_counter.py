from abc import abstractmethod
from typing import Protocol

from teamgate.domain.shared.port import Port
from teamgate.domain.team.model.value import TeamId


class ResourceCounter(Port, Protocol):
    """Counts resources owned by a team. Deployments plug in their own."""

    @abstractmethod
    async def count_resources(self, team_id: TeamId) -> int: ...
