"""Repository base classes with SQLAlchemy 2.0 select helpers and model mapping."""

from typing import Any, Protocol

from attrs import define
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from curator.config import get_logger
from curator.infrastructure.persistence.database.db_models import CuratorDBBase
from curator.infrastructure.persistence.repositories.repo_decorator import db_operation

logger = get_logger(__name__)


class ModelMapper[TDBModel: CuratorDBBase, TDomainModel](Protocol):
    """Protocol for bidirectional mapping between models."""

    @staticmethod
    async def to_domain(db_model: TDBModel) -> TDomainModel: ...

    @staticmethod
    def to_db(domain_model: TDomainModel) -> TDBModel: ...

    @staticmethod
    def get_default_relationships() -> list[str]: ...

    @classmethod
    async def map_collection(cls, db_models: list[TDBModel]) -> list[TDomainModel]: ...


@define(frozen=True, slots=True)
class BaseModelMapper[TDBModel: CuratorDBBase, TDomainModel]:
    """Base implementation of ModelMapper.

    Subclasses provide ``to_domain``/``to_db``; collections map through ``cls``.
    """

    @staticmethod
    async def to_domain(db_model: TDBModel) -> TDomainModel:
        raise NotImplementedError("Subclasses must implement to_domain")

    @staticmethod
    def to_db(domain_model: TDomainModel) -> TDBModel:
        raise NotImplementedError("Subclasses must implement to_db")

    @staticmethod
    def get_default_relationships() -> list[str]:
        return []

    @classmethod
    async def map_collection(cls, db_models: list[TDBModel]) -> list[TDomainModel]:
        return [await cls.to_domain(db_model) for db_model in db_models]


class BaseRepository[TDBModel: CuratorDBBase, TDomainModel]:
    """Base repository holding the session, model class and mapper."""

    def __init__(
        self,
        session: AsyncSession,
        model_class: type[TDBModel],
        mapper: ModelMapper[TDBModel, TDomainModel],
    ) -> None:
        self.session = session
        self.model_class = model_class
        self.mapper = mapper

    def select(self, *columns: Any) -> Select:
        return select(*columns) if columns else select(self.model_class)

    def with_relationships(
        self, stmt: Select, relationships: list[str] | None = None
    ) -> Select:
        """Eager-load the mapper's default relationships (or the given ones)."""
        names = (
            relationships
            if relationships is not None
            else self.mapper.get_default_relationships()
        )
        for name in names:
            stmt = stmt.options(selectinload(getattr(self.model_class, name)))
        return stmt

    async def find_db_model_by(self, conditions: dict[str, Any]) -> TDBModel | None:
        stmt = self.with_relationships(self.select().filter_by(**conditions))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    @db_operation("find_one_by")
    async def find_one_by(self, conditions: dict[str, Any]) -> TDomainModel | None:
        """Find a single entity matching column equality conditions."""
        db_model = await self.find_db_model_by(conditions)
        return None if db_model is None else await self.mapper.to_domain(db_model)

    @db_operation("find_by")
    async def find_by(
        self,
        conditions: dict[str, Any] | None = None,
        order_by: Any = None,
    ) -> list[TDomainModel]:
        stmt = self.with_relationships(self.select().filter_by(**(conditions or {})))
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        result = await self.session.execute(stmt)
        return await self.mapper.map_collection(list(result.scalars().all()))
