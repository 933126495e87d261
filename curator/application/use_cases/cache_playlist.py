"""CachePlaylist use case: snapshot a remote playlist into the local cache.

Joint playlists are built from these snapshots, so a source playlist has to be
cached before it can contribute tracks.
"""

from collections.abc import Callable

from attrs import define

from curator.application.services import (
    EventRecorder,
    PaginatedCollectionFetcher,
    PlaylistTransport,
    RemoteLibrary,
)
from curator.config import get_logger, resilient_operation
from curator.domain.entities import CachedPlaylist, PlaylistSummary
from curator.domain.repositories import UnitOfWorkProtocol

logger = get_logger(__name__)


@define(slots=True)
class CachePlaylistUseCase:
    library: RemoteLibrary
    uow_factory: Callable[[], UnitOfWorkProtocol]
    events: EventRecorder

    @classmethod
    def create(
        cls,
        transport: PlaylistTransport,
        uow_factory: Callable[[], UnitOfWorkProtocol],
    ) -> "CachePlaylistUseCase":
        return cls(
            library=RemoteLibrary(transport, PaginatedCollectionFetcher(transport)),
            uow_factory=uow_factory,
            events=EventRecorder(uow_factory),
        )

    @resilient_operation("cache_playlist")
    async def execute(self, credentials: str, playlist_id: str) -> CachedPlaylist:
        """Fetch the playlist in full and replace any earlier snapshot of it."""
        snapshot = await self.library.playlist_snapshot(credentials, playlist_id)

        async with self.uow_factory() as uow:
            saved = await uow.get_playlist_cache_repository().save_playlist(snapshot)

        logger.info(
            f"Cached playlist with {len(saved.tracks)} tracks",
            playlist_id=playlist_id,
        )
        await self.events.record(f"Cached playlist {saved.name} ({playlist_id})")
        return saved

    async def list_cached(self) -> list[PlaylistSummary]:
        async with self.uow_factory() as uow:
            return await uow.get_playlist_cache_repository().list_cached_playlists()

    async def cached_playlist(self, playlist_id: str) -> CachedPlaylist | None:
        async with self.uow_factory() as uow:
            return await uow.get_playlist_cache_repository().get_cached_playlist(
                playlist_id
            )
