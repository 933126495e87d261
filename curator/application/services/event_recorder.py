"""Best-effort bookkeeping event log."""

from collections.abc import Callable

from attrs import define

from curator.config import get_logger
from curator.domain.repositories import UnitOfWorkProtocol

logger = get_logger(__name__)


@define(slots=True)
class EventRecorder:
    """Appends events to the store. A failed write only logs a warning."""

    uow_factory: Callable[[], UnitOfWorkProtocol]

    async def record(self, event: str) -> bool:
        """Record an event, returning whether it was stored."""
        try:
            async with self.uow_factory() as uow:
                await uow.get_event_repository().add_event(event)
        except Exception as e:
            logger.warning(f"Failed to record event: {event}", error=str(e))
            return False
        return True
