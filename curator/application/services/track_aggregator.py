"""Track set aggregation for joint playlists."""

from collections.abc import Callable, Sequence

from attrs import define, field

from curator.config import get_logger
from curator.domain.repositories import UnitOfWorkProtocol
from curator.domain.sync import merge_track_lists

logger = get_logger(__name__)


@define(frozen=True, slots=True)
class AggregatedTracks:
    """Merged desired track list plus the sources that could not be read."""

    track_uris: list[str] = field(factory=list)
    missing_sources: tuple[str, ...] = field(factory=tuple, converter=tuple)

    @property
    def is_complete(self) -> bool:
        return not self.missing_sources


@define(slots=True)
class TrackSetAggregator:
    """Builds a joint playlist's desired tracks from cached source playlists.

    Sources missing from the cache are logged and skipped; they degrade the result
    without failing the aggregation.
    """

    uow_factory: Callable[[], UnitOfWorkProtocol]

    async def aggregate(self, source_playlist_ids: Sequence[str]) -> AggregatedTracks:
        track_lists: list[list[str]] = []
        missing: list[str] = []

        async with self.uow_factory() as uow:
            cache = uow.get_playlist_cache_repository()
            for playlist_id in source_playlist_ids:
                tracks = await cache.get_cached_playlist_tracks(playlist_id)
                if tracks is None:
                    logger.warning(
                        "Source playlist not cached, skipping",
                        playlist_id=playlist_id,
                    )
                    missing.append(playlist_id)
                    continue
                track_lists.append(tracks)

        merged = merge_track_lists(track_lists)
        logger.info(
            f"Aggregated {len(merged)} tracks from "
            f"{len(track_lists)}/{len(source_playlist_ids)} source playlists",
        )
        return AggregatedTracks(track_uris=merged, missing_sources=missing)
