"""Effective team role resolution."""

import logging

from teamgate.config import ImplicitMemberStrategy, TeamsConfig
from teamgate.domain.auth.model.user import User
from teamgate.domain.shared.error import AuthorizationError
from teamgate.domain.shared.service import Service
from teamgate.domain.team.model.role import IMPLICIT_ROLE, TeamRole, meets_or_exceeds
from teamgate.domain.team.model.team import Team
from teamgate.domain.team.model.value import TeamId
from teamgate.domain.team.service.implicit import ImplicitMembershipEvaluator

logger = logging.getLogger(__name__)


class MembershipResolver(Service):
    """Computes the role a user holds in a team.

    Resolution order:
    1. explicit membership in the team itself
    2. with nested teams enabled, the first explicit membership found on an
       ancestor, walking ``team.ancestors`` in stored order
    3. with an implicit strategy configured and ``team.implicit_members`` set,
       ``member`` if the user qualifies implicitly

    "Not a member" is a ``None`` result, never an error.
    """

    config: TeamsConfig
    evaluator: ImplicitMembershipEvaluator

    def explicit_role(self, user: User, team_id: TeamId) -> TeamRole | None:
        return user.team_role(team_id)

    def get_team_role(self, user: User, team: Team) -> TeamRole | None:
        role = self.explicit_role(user, team.id)
        if role is not None:
            return role

        if self.config.nested_teams:
            for ancestor_id in team.ancestors:
                role = self.explicit_role(user, ancestor_id)
                if role is not None:
                    return role

        return None

    def get_active_team_role(self, user: User, team: Team) -> TeamRole | None:
        role = self.get_team_role(user, team)
        if role is not None:
            return role

        if (
            self.config.implicit_strategy != ImplicitMemberStrategy.NONE
            and team.implicit_members
            and self.evaluator.is_implicit_member(user, team)
        ):
            return IMPLICIT_ROLE

        return None

    def meets_role_requirement(self, user: User, team: Team, required_role: TeamRole) -> None:
        """Raise AuthorizationError unless the user's active role meets ``required_role``."""
        active_role = self.get_active_team_role(user, team)
        if active_role is not None and meets_or_exceeds(active_role, required_role):
            logger.debug(
                "Team role check passed: user=%s, team=%s, active=%s, required=%s",
                user.id,
                team.id,
                active_role.label,
                required_role.label,
            )
            return

        logger.warning(
            "Team role check denied: user=%s, team=%s, active=%s, required=%s",
            user.id,
            team.id,
            active_role.label if active_role is not None else None,
            required_role.label,
        )
        raise AuthorizationError(
            f"The user does not have the required roles for the resource: {required_role.label}",
            code="missing-roles",
        )
