"""
Database engine and session factory.

Builds the async engine and session maker used by units of work.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from commission_engine.config.settings import Settings


def _enable_sqlite_transactions(engine: AsyncEngine) -> None:
    """
    Let SQLAlchemy own BEGIN on SQLite so SAVEPOINT works.

    The sqlite3 driver defers BEGIN on its own, which breaks nested
    transactions; disable that and emit BEGIN explicitly. Foreign keys
    are off by default on SQLite and are switched on per connection.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):  # noqa: ARG001
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_engine(
    database_url: str, echo: bool = False
) -> AsyncEngine:
    """
    Create async engine.

    Args:
        database_url: SQLAlchemy async database URL
        echo: Log emitted SQL

    Returns:
        Configured AsyncEngine
    """
    engine = create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=not database_url.startswith("sqlite"),
    )
    if engine.dialect.name == "sqlite":
        _enable_sqlite_transactions(engine)
    return engine


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create async engine from application settings."""
    return create_engine(settings.database_url, echo=settings.database_echo)


def create_session_maker(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """
    Create session maker.

    Args:
        engine: Async engine

    Returns:
        Session maker producing sessions that keep objects usable after commit
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
