"""Read-only views of the user's remote library.

Provides the desired list for most-played playlists and the playlist snapshots
that feed the cache used by joint playlists.
"""

from typing import Any

from attrs import define

from curator.application.services.pagination import PageQuery, PaginatedCollectionFetcher
from curator.application.services.transport import PlaylistTransport
from curator.config import get_logger, settings
from curator.domain.entities import CachedPlaylist, CachedTrack, PlaylistSummary

logger = get_logger(__name__)


def track_from_item(item: dict[str, Any]) -> CachedTrack | None:
    """Convert a playlist/saved-track item (``{added_at, added_by, track}``)."""
    track = item.get("track")
    if not track or not track.get("uri"):
        return None

    return CachedTrack(
        uri=track["uri"],
        name=track.get("name") or "",
        artists=[a.get("name", "") for a in track.get("artists") or []],
        added_at=item.get("added_at"),
        added_by=(item.get("added_by") or {}).get("id"),
        is_local=bool(item.get("is_local", False)),
    )


def summary_from_playlist(raw: dict[str, Any]) -> PlaylistSummary:
    owner = raw.get("owner") or {}
    return PlaylistSummary(
        playlist_id=raw["id"],
        name=raw.get("name") or "",
        uri=raw.get("uri") or "",
        owner_name=owner.get("display_name") or owner.get("id"),
    )


@define(slots=True)
class RemoteLibrary:
    """Paginated reads of top tracks, saved tracks and playlists."""

    transport: PlaylistTransport
    fetcher: PaginatedCollectionFetcher

    async def top_track_uris(
        self,
        credentials: str,
        time_range: str,
        limit: int | None = None,
    ) -> list[str]:
        """Most played track URIs for a time range, most played first."""
        items = await self.fetcher.fetch_all(
            credentials,
            PageQuery.top_tracks(time_range),
            max_items=limit or settings.api.spotify_top_tracks_limit,
        )
        uris = [item["uri"] for item in items if item.get("uri")]
        logger.info(f"Fetched {len(uris)} top tracks", time_range=time_range)
        return uris

    async def saved_track_uris(self, credentials: str) -> list[str]:
        uris = []
        async for item in self.fetcher.collection(credentials, PageQuery.saved_tracks()):
            track = track_from_item(item)
            if track is not None:
                uris.append(track.uri)
        return uris

    async def user_playlists(self, credentials: str) -> list[PlaylistSummary]:
        items = await self.fetcher.fetch_all(credentials, PageQuery.user_playlists())
        return [summary_from_playlist(raw) for raw in items if raw.get("id")]

    async def playlist_snapshot(
        self, credentials: str, playlist_id: str
    ) -> CachedPlaylist:
        """Playlist metadata together with its full, ordered track list."""
        tracks = []
        skipped = 0
        collection = self.fetcher.collection(
            credentials, PageQuery.playlist_tracks(playlist_id)
        )
        async for item in collection:
            track = track_from_item(item)
            if track is None:
                skipped += 1
                continue
            tracks.append(track)

        if skipped:
            logger.debug(
                f"Skipped {skipped} unavailable playlist items",
                playlist_id=playlist_id,
            )

        details = await self.transport.get_playlist_details(credentials, playlist_id)
        summary = summary_from_playlist({"id": playlist_id, **details})
        return CachedPlaylist(
            playlist_id=summary.playlist_id,
            name=summary.name,
            uri=summary.uri,
            owner_name=summary.owner_name,
            tracks=tracks,
        )
