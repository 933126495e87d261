"""Bookkeeping event log repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from curator.infrastructure.persistence.database.db_models import DBEvent
from curator.infrastructure.persistence.repositories.repo_decorator import db_operation


class EventRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @db_operation("add_event")
    async def add_event(self, event: str) -> None:
        self.session.add(DBEvent(event=event))
        await self.session.flush()
