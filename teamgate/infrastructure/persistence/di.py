from typing import AsyncIterable

from dishka import Provider, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from teamgate.config import Config
from teamgate.domain.auth.port.repository import UserRepository
from teamgate.domain.team.port.repository import TeamRepository
from teamgate.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
)
from teamgate.infrastructure.persistence.repository.team import SQLAlchemyTeamRepository
from teamgate.infrastructure.persistence.repository.user import SQLAlchemyUserRepository
from teamgate.util.di.scope import Scope


class PersistenceProvider(Provider):
    # APP-scoped factories
    @provide(scope=Scope.APP)
    def get_engine(self, config: Config) -> AsyncEngine:
        return create_db_engine(config.database)

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    # UOW-scoped session (one per unit of work); row locks taken by the
    # repositories are held until this commit
    @provide(scope=Scope.UOW)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterable[AsyncSession]:
        async with session_factory() as session:
            yield session
            await session.commit()

    # UOW-scoped repositories
    team_repo = provide(SQLAlchemyTeamRepository, scope=Scope.UOW, provides=TeamRepository)
    user_repo = provide(SQLAlchemyUserRepository, scope=Scope.UOW, provides=UserRepository)
