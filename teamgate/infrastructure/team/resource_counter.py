from teamgate.domain.team.model.value import TeamId
from teamgate.domain.team.port.resource_counter import ResourceCounter


class NullResourceCounter(ResourceCounter):
    """Reports no resources for any team. Deployments that own resources replace it."""

    async def count_resources(self, team_id: TeamId) -> int:
        return 0
