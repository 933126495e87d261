"""Execution of the overwrite and modify update strategies.

Overwrite makes the desired list authoritative: one replace request carrying the
first chunk, then the remainder appended in order. Modify re-fetches current
membership and applies only the set difference, adds before removes.

Modify re-reads the full remote playlist on every run. That is linear in the
playlist size per synchronization and is the known scalability ceiling here.
"""

from collections.abc import Sequence

from attrs import define

from curator.application.services.batch_mutation import BatchMutationExecutor
from curator.application.services.pagination import PageQuery, PaginatedCollectionFetcher
from curator.application.services.transport import PlaylistTransport
from curator.config import get_logger
from curator.domain.entities import PlaylistDelta, SyncStrategy
from curator.domain.errors import UnmappedManagementTypeError
from curator.domain.sync import compute_delta

logger = get_logger(__name__)


@define(slots=True)
class PlaylistStrategyRunner:
    """Runs a selected strategy against an existing remote playlist."""

    transport: PlaylistTransport
    fetcher: PaginatedCollectionFetcher
    executor: BatchMutationExecutor

    async def run(
        self,
        strategy: SyncStrategy,
        remote_playlist_id: str,
        credentials: str,
        desired: Sequence[str],
    ) -> None:
        match strategy:
            case SyncStrategy.OVERWRITE:
                await self.overwrite(remote_playlist_id, credentials, desired)
            case SyncStrategy.MODIFY:
                await self.modify(remote_playlist_id, credentials, desired)
            case _:
                raise UnmappedManagementTypeError(strategy)

    async def overwrite(
        self, remote_playlist_id: str, credentials: str, desired: Sequence[str]
    ) -> None:
        """Replace remote membership with exactly ``desired``."""
        cap = self.executor.max_tracks_per_request
        head, remainder = list(desired[:cap]), list(desired[cap:])

        logger.info(
            f"Replacing playlist tracks with {len(desired)} tracks",
            playlist_id=remote_playlist_id,
        )
        await self.transport.replace_tracks(credentials, remote_playlist_id, head)

        if remainder:
            await self.executor.add(remote_playlist_id, credentials, remainder)

    async def modify(
        self, remote_playlist_id: str, credentials: str, desired: Sequence[str]
    ) -> PlaylistDelta:
        """Apply only the additions and removals needed to reach ``desired``."""
        current = await self.current_track_uris(remote_playlist_id, credentials)
        delta = compute_delta(current, desired)

        logger.info(
            f"Playlist delta: {len(delta.to_add)} to add, "
            f"{len(delta.to_remove)} to remove",
            playlist_id=remote_playlist_id,
        )

        # Additions first, so a track never transiently disappears
        if delta.to_add:
            await self.executor.add(remote_playlist_id, credentials, delta.to_add)
        if delta.to_remove:
            await self.executor.remove(remote_playlist_id, credentials, delta.to_remove)

        return delta

    async def current_track_uris(
        self, remote_playlist_id: str, credentials: str
    ) -> list[str]:
        """Read the playlist's current track URIs in order."""
        uris = []
        collection = self.fetcher.collection(
            credentials, PageQuery.playlist_tracks(remote_playlist_id)
        )
        async for item in collection:
            track = item.get("track")
            if track and track.get("uri"):
                uris.append(track["uri"])
        return uris
