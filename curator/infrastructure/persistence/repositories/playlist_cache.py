"""Cached playlist snapshot repository."""

from attrs import define
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from curator.config import get_logger
from curator.domain.entities import CachedPlaylist, CachedTrack, PlaylistSummary
from curator.infrastructure.persistence.database.db_models import (
    DBCachedPlaylist,
    DBCachedPlaylistTrack,
)
from curator.infrastructure.persistence.repositories.base_repo import (
    BaseModelMapper,
    BaseRepository,
)
from curator.infrastructure.persistence.repositories.repo_decorator import db_operation

logger = get_logger(__name__)


def _track_rows(tracks: list[CachedTrack]) -> list[DBCachedPlaylistTrack]:
    return [
        DBCachedPlaylistTrack(
            position=position,
            uri=track.uri,
            name=track.name,
            artists=list(track.artists),
            added_at=track.added_at,
            added_by=track.added_by,
            is_local=track.is_local,
        )
        for position, track in enumerate(tracks)
    ]


@define(frozen=True, slots=True)
class CachedPlaylistMapper(BaseModelMapper[DBCachedPlaylist, CachedPlaylist]):
    """Maps between DBCachedPlaylist (with ordered track rows) and CachedPlaylist."""

    @staticmethod
    async def to_domain(db_model: DBCachedPlaylist) -> CachedPlaylist:
        rows = await db_model.awaitable_attrs.tracks
        return CachedPlaylist(
            playlist_id=db_model.playlist_id,
            name=db_model.name,
            uri=db_model.uri or "",
            owner_name=db_model.owner_name,
            tracks=[
                CachedTrack(
                    uri=row.uri,
                    name=row.name or "",
                    artists=row.artists or (),
                    added_at=row.added_at,
                    added_by=row.added_by,
                    is_local=bool(row.is_local),
                )
                for row in sorted(rows, key=lambda r: r.position)
            ],
            id=db_model.id,
        )

    @staticmethod
    def to_db(domain_model: CachedPlaylist) -> DBCachedPlaylist:
        return DBCachedPlaylist(
            playlist_id=domain_model.playlist_id,
            uri=domain_model.uri,
            name=domain_model.name,
            owner_name=domain_model.owner_name,
            tracks=_track_rows(domain_model.tracks),
        )

    @staticmethod
    def get_default_relationships() -> list[str]:
        return ["tracks"]


class PlaylistCacheRepository(BaseRepository[DBCachedPlaylist, CachedPlaylist]):
    """Repository for cached playlist snapshots."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(
            session=session,
            model_class=DBCachedPlaylist,
            mapper=CachedPlaylistMapper(),
        )

    @db_operation("get_cached_playlist_tracks")
    async def get_cached_playlist_tracks(self, playlist_id: str) -> list[str] | None:
        """Ordered track URIs of a cached playlist, or None when it was never cached."""
        cached_id = await self.session.scalar(
            select(DBCachedPlaylist.id).where(DBCachedPlaylist.playlist_id == playlist_id)
        )
        if cached_id is None:
            return None

        result = await self.session.execute(
            select(DBCachedPlaylistTrack.uri)
            .where(DBCachedPlaylistTrack.cached_playlist_id == cached_id)
            .order_by(DBCachedPlaylistTrack.position)
        )
        return list(result.scalars().all())

    async def get_cached_playlist(self, playlist_id: str) -> CachedPlaylist | None:
        return await self.find_one_by({"playlist_id": playlist_id})

    @db_operation("save_playlist")
    async def save_playlist(self, playlist: CachedPlaylist) -> CachedPlaylist:
        """Store a snapshot, replacing every track row of an earlier one."""
        db_model = await self.find_db_model_by({"playlist_id": playlist.playlist_id})

        if db_model is None:
            db_model = self.mapper.to_db(playlist)
            self.session.add(db_model)
        else:
            db_model.uri = playlist.uri
            db_model.name = playlist.name
            db_model.owner_name = playlist.owner_name
            db_model.tracks = _track_rows(playlist.tracks)

        await self.session.flush()
        logger.debug(
            f"Saved playlist snapshot with {len(playlist.tracks)} tracks",
            playlist_id=playlist.playlist_id,
        )
        return await self.mapper.to_domain(db_model)

    async def list_cached_playlists(self) -> list[PlaylistSummary]:
        playlists = await self.find_by(order_by=DBCachedPlaylist.name)
        return [playlist.summary for playlist in playlists]
