"""SQLAlchemy database configuration and connection management.

This module is responsible for:
- Engine creation with SQLite pragmas applied on every connection
- The process-wide engine and session factory singletons
"""

from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool, StaticPool

from curator.config import get_logger, settings

logger = get_logger(__name__)


def _is_memory_database(database: str | None) -> bool:
    return not database or database == ":memory:"


def create_db_engine(connection_string: str | None = None) -> AsyncEngine:
    """Create an async engine, tuned for SQLite when the URL is a SQLite one.

    File databases get their parent directory created. In-memory databases share a
    single connection so every session sees the same tables.
    """
    db_url = connection_string or settings.database.url
    url = make_url(db_url)
    is_sqlite = url.get_backend_name() == "sqlite"

    engine_kwargs = {"echo": settings.database.echo}
    if is_sqlite:
        engine_kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": settings.database.busy_timeout_ms / 1000,
        }
        if _is_memory_database(url.database):
            engine_kwargs["poolclass"] = StaticPool
        else:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
            engine_kwargs.update(
                poolclass=AsyncAdaptedQueuePool,
                pool_size=1,
                max_overflow=4,
                pool_pre_ping=True,
            )

    engine = create_async_engine(db_url, **engine_kwargs)

    if is_sqlite:

        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, _):  # pragma: no cover
            cursor = dbapi_connection.cursor()
            cursor.execute(f"PRAGMA busy_timeout = {settings.database.busy_timeout_ms}")
            cursor.execute("PRAGMA journal_mode = WAL")
            cursor.execute("PRAGMA synchronous = NORMAL")
            cursor.execute("PRAGMA foreign_keys = ON")
            cursor.close()

    logger.info("Created database engine", backend=url.get_backend_name())
    return engine


def create_session_factory(
    engine: AsyncEngine | None = None,
) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine or get_engine(),
        expire_on_commit=False,
        autoflush=True,
    )


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Get or create the global database engine singleton."""
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the global session factory singleton."""
    global _session_factory
    if _session_factory is None:
        _session_factory = create_session_factory()
    return _session_factory


async def reset_engine() -> None:
    """Dispose the global engine so the next access rebuilds it from settings."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None

