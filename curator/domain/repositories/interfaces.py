"""Domain repository interfaces.

These define the persistence contracts the synchronization engine depends on,
without depending on the SQLAlchemy implementations behind them.
"""

from collections.abc import Awaitable
from typing import TYPE_CHECKING, Protocol, Self

if TYPE_CHECKING:
    from curator.domain.entities import (
        CachedPlaylist,
        ManagementDefinition,
        ManagementRecord,
        PlaylistSummary,
    )


class ManagementRepositoryProtocol(Protocol):
    """Repository interface for management record persistence."""

    def get_management(
        self, owner: str, definition: "ManagementDefinition"
    ) -> Awaitable["ManagementRecord | None"]:
        """Get the record for an (owner, definition) pair, or None."""
        ...

    def put_management(self, record: "ManagementRecord") -> Awaitable["ManagementRecord"]:
        """Insert or update the record keyed by (owner, definition).

        Implementations must make this an atomic upsert per key.
        """
        ...


class PlaylistCacheRepositoryProtocol(Protocol):
    """Repository interface for cached playlist snapshots."""

    def get_cached_playlist_tracks(
        self, playlist_id: str
    ) -> Awaitable[list[str] | None]:
        """Get ordered track URIs of a cached playlist, or None if not cached."""
        ...

    def get_cached_playlist(self, playlist_id: str) -> Awaitable["CachedPlaylist | None"]:
        """Get a cached playlist with its tracks."""
        ...

    def save_playlist(self, playlist: "CachedPlaylist") -> Awaitable["CachedPlaylist"]:
        """Store a snapshot, replacing any earlier snapshot of the same playlist."""
        ...

    def list_cached_playlists(self) -> Awaitable[list["PlaylistSummary"]]:
        """List cached playlists without their tracks."""
        ...


class EventRepositoryProtocol(Protocol):
    """Repository interface for the bookkeeping event log."""

    def add_event(self, event: str) -> Awaitable[None]:
        """Append an event."""
        ...


class UnitOfWorkProtocol(Protocol):
    """Transaction boundary exposing repositories that share one session."""

    async def __aenter__(self) -> Self: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    def get_management_repository(self) -> ManagementRepositoryProtocol: ...

    def get_playlist_cache_repository(self) -> PlaylistCacheRepositoryProtocol: ...

    def get_event_repository(self) -> EventRepositoryProtocol: ...
