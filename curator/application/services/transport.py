"""Remote music service transport contract.

The synchronization engine never talks HTTP itself. Every remote call goes through
an injected transport so tests can substitute an in-memory fake and production can
use the spotipy-backed connector.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PlaylistTransport(Protocol):
    """Calls the engine needs from the remote music service.

    Every method takes the caller's bearer credential and raises
    ``RemoteCallFailure`` on a non-2xx response or transport error.
    """

    async def get_page(
        self,
        credentials: str,
        endpoint: str,
        *,
        limit: int,
        offset: int,
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Fetch one page of a collection as ``{"items": [...], "next": str | None}``."""
        ...

    async def get_current_user_id(self, credentials: str) -> str:
        """Resolve the id of the user the credential belongs to."""
        ...

    async def get_playlist_details(
        self, credentials: str, playlist_id: str
    ) -> dict[str, Any]:
        """Fetch playlist metadata (id, uri, name, owner)."""
        ...

    async def create_playlist(
        self, credentials: str, user_id: str, name: str, description: str
    ) -> str:
        """Create a private, non-collaborative playlist and return its id."""
        ...

    async def replace_tracks(
        self, credentials: str, playlist_id: str, uris: Sequence[str]
    ) -> None:
        """Replace the playlist's tracks with at most one request's worth of URIs."""
        ...

    async def add_tracks(
        self, credentials: str, playlist_id: str, uris: Sequence[str]
    ) -> None:
        """Append URIs to the end of the playlist in one request."""
        ...

    async def remove_tracks(
        self, credentials: str, playlist_id: str, uris: Sequence[str]
    ) -> None:
        """Remove every occurrence of the URIs in one request."""
        ...
