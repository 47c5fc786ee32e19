"""Team aggregate."""

from datetime import UTC, datetime

from pydantic import Field

from teamgate.domain.auth.model.value import UserId
from teamgate.domain.shared.model.entity import Aggregate
from teamgate.domain.team.model.value import TeamId


class Team(Aggregate):
    """A group of users sharing access to resources.

    Invariants:
    - `id`, `parent_id` and `ancestors` are immutable after creation
    - `ancestors` is the parent chain at creation time, root first; it is not
      recomputed when an ancestor is later re-parented
    - implicit membership is evaluated only when `implicit_members` is set
    """

    id: TeamId
    name: str
    description: str = ""
    creator_id: UserId | None = None
    creator_name: str | None = None
    implicit_members: bool = False
    requires_external_roles: list[str] = Field(default_factory=list)
    requires_external_teams: list[str] = Field(default_factory=list)
    parent_id: TeamId | None = None
    ancestors: list[TeamId] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        name: str,
        *,
        description: str = "",
        creator_id: UserId | None = None,
        creator_name: str | None = None,
        implicit_members: bool = False,
        requires_external_roles: list[str] | None = None,
        requires_external_teams: list[str] | None = None,
        parent: "Team | None" = None,
    ) -> "Team":
        """Create a new team, nesting it under ``parent`` when given."""
        now = datetime.now(UTC)
        return cls(
            id=TeamId.generate(),
            name=name,
            description=description,
            creator_id=creator_id,
            creator_name=creator_name,
            implicit_members=implicit_members,
            requires_external_roles=list(requires_external_roles or []),
            requires_external_teams=list(requires_external_teams or []),
            parent_id=parent.id if parent else None,
            ancestors=[*parent.ancestors, parent.id] if parent else [],
            created_at=now,
            updated_at=now,
        )

    def update(
        self,
        *,
        name: str | None = None,
        description: str | None = None,
        implicit_members: bool | None = None,
        requires_external_roles: list[str] | None = None,
        requires_external_teams: list[str] | None = None,
    ) -> None:
        """Apply a partial update. Fields left as None are unchanged."""
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if implicit_members is not None:
            self.implicit_members = implicit_members
        if requires_external_roles is not None:
            self.requires_external_roles = list(requires_external_roles)
        if requires_external_teams is not None:
            self.requires_external_teams = list(requires_external_teams)
        self.updated_at = datetime.now(UTC)
