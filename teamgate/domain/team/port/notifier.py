from abc import abstractmethod
from typing import Protocol

from teamgate.domain.auth.model.user import User
from teamgate.domain.shared.port import Port
from teamgate.domain.team.model.team import Team


class TeamNotifier(Port, Protocol):
    """Fire-and-forget notifications about team access requests."""

    @abstractmethod
    async def notify_access_requested(
        self, requester: User, team: Team, admins: list[User]
    ) -> None:
        """Tell the team admins that ``requester`` asked to join ``team``."""
        ...

    @abstractmethod
    async def notify_team_requested(
        self, requester: User, org: str, aoi: str, description: str
    ) -> None:
        """Tell the operators that ``requester`` asked for a new team."""
        ...
