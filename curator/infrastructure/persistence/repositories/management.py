"""Management record repository.

Records are keyed by (owner, canonical definition key). Registration is a single
``INSERT .. ON CONFLICT DO UPDATE`` so concurrent registrations of the same
logical playlist converge on one row; the last writer's remote playlist wins.
"""

from datetime import UTC, datetime

from attrs import define
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from curator.config import get_logger
from curator.domain.entities import (
    ManagementDefinition,
    ManagementRecord,
    management_from_dict,
)
from curator.domain.errors import ManagementConflictError
from curator.infrastructure.persistence.database.db_models import DBManagement
from curator.infrastructure.persistence.repositories.base_repo import (
    BaseModelMapper,
    BaseRepository,
)
from curator.infrastructure.persistence.repositories.repo_decorator import db_operation

logger = get_logger(__name__)


@define(frozen=True, slots=True)
class ManagementMapper(BaseModelMapper[DBManagement, ManagementRecord]):
    """Maps between DBManagement and ManagementRecord."""

    @staticmethod
    async def to_domain(db_model: DBManagement) -> ManagementRecord:
        return ManagementRecord(
            remote_playlist_id=db_model.remote_playlist_id,
            owner=db_model.owner,
            definition=management_from_dict(db_model.definition),
            id=db_model.id,
        )

    @staticmethod
    def to_db(domain_model: ManagementRecord) -> DBManagement:
        definition = domain_model.definition
        return DBManagement(
            owner=domain_model.owner,
            management_type=definition.management_type.value,
            definition_key=definition.key,
            definition=definition.to_dict(),
            remote_playlist_id=domain_model.remote_playlist_id,
        )


class ManagementRepository(BaseRepository[DBManagement, ManagementRecord]):
    """Repository for management records."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(
            session=session,
            model_class=DBManagement,
            mapper=ManagementMapper(),
        )

    async def get_management(
        self, owner: str, definition: ManagementDefinition
    ) -> ManagementRecord | None:
        return await self.find_one_by(
            {"owner": owner, "definition_key": definition.key}
        )

    @db_operation("put_management")
    async def put_management(self, record: ManagementRecord) -> ManagementRecord:
        """Atomically insert or repoint the record for (owner, definition).

        Raises:
            ManagementConflictError: If the remote playlist already backs a
                different (owner, definition)
        """
        definition = record.definition
        now = datetime.now(UTC)

        stmt = sqlite_insert(DBManagement).values(
            owner=record.owner,
            management_type=definition.management_type.value,
            definition_key=definition.key,
            definition=definition.to_dict(),
            remote_playlist_id=record.remote_playlist_id,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["owner", "definition_key"],
            set_={
                "remote_playlist_id": stmt.excluded.remote_playlist_id,
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(DBManagement.id)

        try:
            result = await self.session.execute(stmt)
        except IntegrityError as e:
            raise ManagementConflictError(record.remote_playlist_id) from e

        record_id = result.scalar_one()
        db_model = await self.session.get(
            DBManagement, record_id, populate_existing=True
        )
        logger.debug(
            "Upserted management record",
            record_id=record_id,
            playlist_id=record.remote_playlist_id,
        )
        return await self.mapper.to_domain(db_model)
