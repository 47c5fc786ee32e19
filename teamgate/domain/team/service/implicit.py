"""Implicit team membership, derived from a user's external identity attributes."""

from teamgate.config import ImplicitMemberStrategy, TeamsConfig
from teamgate.domain.auth.model.user import User
from teamgate.domain.shared.service import Service
from teamgate.domain.team.model.team import Team


class ImplicitMembershipEvaluator(Service):
    """Decides whether a user qualifies as an implicit member of a team.

    External groups match ANY-of, external roles match ALL-of. An empty
    requirement never matches in either case.
    """

    config: TeamsConfig

    @property
    def strategy(self) -> ImplicitMemberStrategy:
        return self.config.implicit_strategy

    def meets_required_external_teams(self, user: User, team: Team) -> bool:
        if user.bypass_access_check:
            return True
        return bool(set(team.requires_external_teams) & set(user.external_groups))

    def meets_required_external_roles(self, user: User, team: Team) -> bool:
        required = set(team.requires_external_roles)
        return bool(required) and required <= set(user.external_roles)

    def is_implicit_member(self, user: User, team: Team) -> bool:
        if self.strategy == ImplicitMemberStrategy.ROLES:
            return self.meets_required_external_roles(user, team)
        if self.strategy == ImplicitMemberStrategy.TEAMS:
            return self.meets_required_external_teams(user, team)
        return False
