"""Database Unit of Work implementation for transaction boundary management.

Each unit of work owns one session; every repository it hands out shares that
session and therefore that transaction.
"""

from collections.abc import Callable
from typing import Self

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from curator.domain.repositories.interfaces import (
    EventRepositoryProtocol,
    ManagementRepositoryProtocol,
    PlaylistCacheRepositoryProtocol,
)
from curator.infrastructure.persistence.database.db_connection import (
    create_session_factory,
    get_session_factory,
)
from curator.infrastructure.persistence.repositories import (
    EventRepository,
    ManagementRepository,
    PlaylistCacheRepository,
)


class DatabaseUnitOfWork:
    """Database implementation of the Unit of Work pattern.

    Commits on a clean exit unless already committed, rolls back when the block
    raises, and always closes the session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._committed = False

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        try:
            if exc_type is not None:
                await self.rollback()
            elif not self._committed:
                await self.commit()
        finally:
            await self._session.close()

    async def commit(self) -> None:
        await self._session.commit()
        self._committed = True

    async def rollback(self) -> None:
        await self._session.rollback()

    def get_management_repository(self) -> ManagementRepositoryProtocol:
        return ManagementRepository(self._session)

    def get_playlist_cache_repository(self) -> PlaylistCacheRepositoryProtocol:
        return PlaylistCacheRepository(self._session)

    def get_event_repository(self) -> EventRepositoryProtocol:
        return EventRepository(self._session)


def get_unit_of_work() -> DatabaseUnitOfWork:
    """Unit of work on a fresh session from the global session factory."""
    return DatabaseUnitOfWork(get_session_factory()())


def make_unit_of_work_factory(
    engine: AsyncEngine | None = None,
) -> Callable[[], DatabaseUnitOfWork]:
    """Factory producing units of work bound to ``engine`` (global engine if None)."""
    if engine is None:
        return get_unit_of_work

    session_factory = create_session_factory(engine)
    return lambda: DatabaseUnitOfWork(session_factory())
