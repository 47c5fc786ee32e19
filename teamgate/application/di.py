from dishka import AsyncContainer, make_async_container

from teamgate.config import Config
from teamgate.domain.team.util.di import TeamProvider
from teamgate.infrastructure.auth import AuthInfraProvider
from teamgate.infrastructure.persistence import PersistenceProvider
from teamgate.infrastructure.team import TeamInfraProvider
from teamgate.util.di.scope import Scope


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    return make_async_container(
        PersistenceProvider(),
        TeamProvider(),
        TeamInfraProvider(),
        AuthInfraProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
