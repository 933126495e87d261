"""SQLAlchemy database models for the Curator cache store.

Management records, cached playlist snapshots and the bookkeeping event log,
declared with SQLAlchemy 2.0 typed mappings.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.ext.asyncio import AsyncAttrs, AsyncEngine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from curator.config import get_logger
from curator.infrastructure.persistence.database.db_connection import get_engine

logger = get_logger(__name__)

convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CuratorDBBase(AsyncAttrs, DeclarativeBase):
    """Base class for all database models with timestamps."""

    metadata = metadata

    id: Mapped[int] = mapped_column(primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )


class DBManagement(CuratorDBBase):
    """Which remote playlist realizes an (owner, management definition) pair."""

    __tablename__ = "managements"

    owner: Mapped[str] = mapped_column(String(128), nullable=False)
    management_type: Mapped[str] = mapped_column(String(32), nullable=False)
    # Canonical JSON of the definition; equality here is definition equality
    definition_key: Mapped[str] = mapped_column(Text, nullable=False)
    definition: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    remote_playlist_id: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (
        UniqueConstraint("owner", "definition_key"),
        UniqueConstraint("remote_playlist_id"),
        Index(None, "owner"),
    )


class DBCachedPlaylist(CuratorDBBase):
    """Snapshot of a remote playlist's metadata."""

    __tablename__ = "cached_playlists"

    playlist_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    uri: Mapped[str] = mapped_column(String(128), default="")
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_name: Mapped[str | None] = mapped_column(String(255))

    tracks: Mapped[list["DBCachedPlaylistTrack"]] = relationship(
        back_populates="playlist",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DBCachedPlaylistTrack.position",
    )


class DBCachedPlaylistTrack(CuratorDBBase):
    """One ordered entry of a cached playlist."""

    __tablename__ = "cached_playlist_tracks"

    cached_playlist_id: Mapped[int] = mapped_column(
        ForeignKey("cached_playlists.id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    uri: Mapped[str] = mapped_column(String(128), nullable=False)
    name: Mapped[str] = mapped_column(String(255), default="")
    artists: Mapped[list[str]] = mapped_column(JSON, default=list)
    added_at: Mapped[str | None] = mapped_column(String(64))
    added_by: Mapped[str | None] = mapped_column(String(128))
    is_local: Mapped[bool] = mapped_column(Boolean, default=False)

    playlist: Mapped[DBCachedPlaylist] = relationship(back_populates="tracks")

    __table_args__ = (Index(None, "cached_playlist_id", "position"),)


class DBEvent(CuratorDBBase):
    """Free-text bookkeeping event."""

    __tablename__ = "events"

    event: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
        index=True,
    )


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create any missing tables."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    logger.info("Database schema initialized")


__all__ = [
    "CuratorDBBase",
    "DBCachedPlaylist",
    "DBCachedPlaylistTrack",
    "DBEvent",
    "DBManagement",
    "init_db",
]
