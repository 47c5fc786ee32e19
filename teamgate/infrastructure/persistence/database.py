"""Engine, session factory and schema creation."""

import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from teamgate.config import DatabaseConfig
from teamgate.infrastructure.persistence.tables import metadata

logger = logging.getLogger(__name__)


def create_db_engine(config: DatabaseConfig) -> AsyncEngine:
    logger.debug("Creating database engine for %s", config.url.split("@")[-1])
    engine = create_async_engine(config.url, echo=config.echo)
    if engine.dialect.name == "sqlite":
        _configure_sqlite(engine, config)
    return engine


def _configure_sqlite(engine: AsyncEngine, config: DatabaseConfig) -> None:
    """Apply the busy timeout and the transaction begin mode to every SQLite connection.

    SQLite ignores ``FOR UPDATE``. With ``BEGIN IMMEDIATE`` a unit of work
    holds the database write lock from its first statement, so the
    last-admin check and the write that follows it cannot interleave with
    another unit of work.
    """
    begin_mode = config.sqlite_begin_mode
    busy_ms = int(config.sqlite_busy_timeout_ms)

    @event.listens_for(engine.sync_engine, "connect")
    def _sqlite_on_connect(dbapi_conn, _):
        if begin_mode:
            # The driver would otherwise delay BEGIN until the first write
            dbapi_conn.isolation_level = None

        cur = dbapi_conn.cursor()
        try:
            cur.execute(f"PRAGMA busy_timeout={busy_ms}")
        finally:
            cur.close()

    if begin_mode:

        @event.listens_for(engine.sync_engine, "begin")
        def _sqlite_begin(conn):
            conn.exec_driver_sql(f"BEGIN {begin_mode}")

    logger.debug("SQLite transactions begin %s", begin_mode or "(driver default)")


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Create every table that does not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    logger.info("Database schema ready")
