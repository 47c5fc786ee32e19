"""Notifier that records team requests in the application log."""

import logging

from teamgate.domain.auth.model.user import User
from teamgate.domain.team.model.team import Team
from teamgate.domain.team.port.notifier import TeamNotifier

logger = logging.getLogger(__name__)


class LoggingTeamNotifier(TeamNotifier):
    """Logs each request instead of delivering it."""

    async def notify_access_requested(
        self, requester: User, team: Team, admins: list[User]
    ) -> None:
        recipients = [a.email for a in admins if a.email]
        logger.info(
            "Team access requested: requester=%s (%s), team=%s (%s), admins=%s",
            requester.id,
            requester.username,
            team.id,
            team.name,
            recipients,
        )

    async def notify_team_requested(
        self, requester: User, org: str, aoi: str, description: str
    ) -> None:
        logger.info(
            "New team requested: requester=%s (%s), org=%s, aoi=%s, description=%s",
            requester.id,
            requester.username,
            org,
            aoi,
            description,
        )
