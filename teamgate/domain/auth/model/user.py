"""User aggregate, as seen by authorization."""

from pydantic import Field

from teamgate.domain.auth.model.value import UserId
from teamgate.domain.shared.model.entity import Aggregate
from teamgate.domain.team.model.role import TeamRole
from teamgate.domain.team.model.value import TeamId, TeamMembership


class User(Aggregate):
    """The authorization-relevant projection of a user account.

    Invariants:
    - `teams` holds at most one explicit membership per team id
    - `team_cache` is derived at login and never persisted
    """

    id: UserId
    name: str = ""
    username: str = ""
    email: str | None = None
    teams: list[TeamMembership] = Field(default_factory=list)
    external_roles: list[str] = Field(default_factory=list)
    external_groups: list[str] = Field(default_factory=list)
    bypass_access_check: bool = False
    roles: dict[str, bool] = Field(default_factory=dict)
    local_roles: dict[str, bool] = Field(default_factory=dict)
    team_cache: list[TeamMembership] | None = Field(default=None, exclude=True)

    def team_role(self, team_id: TeamId) -> TeamRole | None:
        """Explicit role held in ``team_id``, if any."""
        for membership in self.teams:
            if membership.team_id == team_id:
                return membership.role
        return None

    def add_membership(self, team_id: TeamId, role: TeamRole) -> None:
        """Add an explicit membership. A membership in the same team is replaced."""
        self.teams = [m for m in self.teams if m.team_id != team_id] + [
            TeamMembership(team_id=team_id, role=role)
        ]

    def set_membership_role(self, team_id: TeamId, role: TeamRole) -> bool:
        """Change the role of an existing membership. Returns False if there is none."""
        if self.team_role(team_id) is None:
            return False
        self.teams = [
            TeamMembership(team_id=team_id, role=role) if m.team_id == team_id else m
            for m in self.teams
        ]
        return True

    def remove_membership(self, team_id: TeamId) -> bool:
        """Drop the membership in ``team_id``. Returns False if there was none."""
        remaining = [m for m in self.teams if m.team_id != team_id]
        if len(remaining) == len(self.teams):
            return False
        self.teams = remaining
        return True
