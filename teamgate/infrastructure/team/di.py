from dishka import Provider, provide

from teamgate.domain.team.port.notifier import TeamNotifier
from teamgate.domain.team.port.resource_counter import ResourceCounter
from teamgate.infrastructure.team.notifier import LoggingTeamNotifier
from teamgate.infrastructure.team.resource_counter import NullResourceCounter
from teamgate.util.di.scope import Scope


class TeamInfraProvider(Provider):
    """Default adapters for the team domain's pluggable collaborators."""

    resource_counter = provide(NullResourceCounter, scope=Scope.APP, provides=ResourceCounter)
    notifier = provide(LoggingTeamNotifier, scope=Scope.APP, provides=TeamNotifier)
