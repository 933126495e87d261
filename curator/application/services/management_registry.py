"""Management registry: which remote playlist realizes a logical playlist."""

from collections.abc import Callable

from attrs import define

from curator.config import get_logger
from curator.domain.entities import ManagementDefinition, ManagementRecord
from curator.domain.repositories import UnitOfWorkProtocol

logger = get_logger(__name__)


@define(slots=True)
class ManagementRegistry:
    """Resolves and registers management records in the persistence store.

    Each call runs in its own short unit of work so no database transaction is
    held open across remote calls. No remote API calls happen here.
    """

    uow_factory: Callable[[], UnitOfWorkProtocol]

    async def resolve(
        self, owner: str, definition: ManagementDefinition
    ) -> ManagementRecord | None:
        """Return the existing record, or None if this playlist is not managed yet."""
        async with self.uow_factory() as uow:
            record = await uow.get_management_repository().get_management(
                owner, definition
            )

        if record is None:
            logger.debug("No management record", owner=owner, key=definition.key)
        else:
            logger.debug(
                "Resolved management record",
                owner=owner,
                playlist_id=record.remote_playlist_id,
            )
        return record

    async def register(
        self,
        remote_playlist_id: str,
        owner: str,
        definition: ManagementDefinition,
    ) -> ManagementRecord:
        """Upsert the record keyed by (owner, definition).

        Re-registering the same logical playlist repoints it instead of adding a
        second record.
        """
        record = ManagementRecord(
            remote_playlist_id=remote_playlist_id,
            owner=owner,
            definition=definition,
        )
        async with self.uow_factory() as uow:
            saved = await uow.get_management_repository().put_management(record)

        logger.info(
            "Registered managed playlist",
            owner=owner,
            playlist_id=remote_playlist_id,
            management_type=definition.management_type.value,
        )
        return saved
