"""Repository ports for the auth domain."""

from abc import abstractmethod
from typing import Protocol

from teamgate.domain.auth.model.user import User
from teamgate.domain.auth.model.value import UserId
from teamgate.domain.shared.port import Port
from teamgate.domain.team.model.filter import MemberPredicate
from teamgate.domain.team.model.role import TeamRole
from teamgate.domain.team.model.value import TeamId, TeamMembership


class UserRepository(Port, Protocol):
    """Repository for User aggregate persistence."""

    @abstractmethod
    async def get(self, user_id: UserId) -> User | None:
        """Get a user by ID."""
        ...

    @abstractmethod
    async def save(self, user: User) -> None:
        """Save a user (create or update), including memberships and external attributes."""
        ...

    @abstractmethod
    async def find_by_team_role(
        self,
        team_id: TeamId,
        role: TeamRole,
        *,
        exclude_user_id: UserId | None = None,
        for_update: bool = False,
    ) -> list[User]:
        """Users holding an explicit ``role`` in ``team_id``.

        With ``for_update`` every membership row of that role in the team is
        locked until the unit of work ends, so two concurrent callers
        serialize. SQLite has no row locks; there the unit of work already
        holds the database write lock from its first statement.
        """
        ...

    @abstractmethod
    async def add_membership(self, user_id: UserId, membership: TeamMembership) -> None:
        """Insert one explicit membership, or overwrite the role of an existing one."""
        ...

    @abstractmethod
    async def set_membership_role(self, user_id: UserId, team_id: TeamId, role: TeamRole) -> bool:
        """Change the role of one membership row. Returns False if the row is gone."""
        ...

    @abstractmethod
    async def remove_membership(self, user_id: UserId, team_id: TeamId) -> bool:
        """Delete one membership row. Returns False if it did not exist."""
        ...

    @abstractmethod
    async def remove_team_memberships(self, team_id: TeamId) -> int:
        """Drop every membership in ``team_id``. Returns how many were removed."""
        ...

    @abstractmethod
    async def search(
        self,
        predicate: MemberPredicate,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[User], int]:
        """Page through users matching the predicate ordered by name. Returns (page, total)."""
        ...
