"""Spotify transport backed by spotipy.

Implements ``PlaylistTransport`` on top of the spotipy client
(https://spotipy.readthedocs.io/). Bearer credentials are supplied per call, so a
client is built for each credential; token acquisition and refresh are the
caller's concern.

spotipy is synchronous, so every request runs in a worker thread. Rate-limited
responses (HTTP 429) are retried with exponential backoff; every other failure is
translated into ``RemoteCallFailure`` on the first attempt.
"""

import asyncio
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from attrs import define, field
import backoff
import requests
import spotipy

from curator.config import get_logger, settings
from curator.domain.errors import RemoteCallFailure

logger = get_logger(__name__).bind(service="spotify")

PLAYLIST_DETAIL_FIELDS = "id,uri,name,description,owner(id,display_name)"


def log_remote_failure(error: RemoteCallFailure, operation: str) -> None:
    """Log a failed remote call with its status and payload when available."""
    if error.status is not None:
        logger.error(
            f"Spotify {operation} failed with HTTP {error.status}",
            status=error.status,
            payload=error.payload,
        )
    else:
        logger.error(f"Spotify {operation} failed: {error}")


def translate_error(error: Exception, operation: str) -> RemoteCallFailure:
    """Convert a spotipy or requests exception into a RemoteCallFailure."""
    match error:
        case spotipy.SpotifyException():
            return RemoteCallFailure(
                f"Spotify {operation} failed: {error.msg}",
                status=error.http_status,
                payload={"code": error.code, "msg": error.msg, "reason": error.reason},
            )
        case requests.exceptions.RequestException():
            response = getattr(error, "response", None)
            return RemoteCallFailure(
                f"Spotify {operation} request error: {error}",
                status=getattr(response, "status_code", None),
            )
        case _:
            return RemoteCallFailure(f"Spotify {operation} failed: {error}")


def _is_not_rate_limited(error: RemoteCallFailure) -> bool:
    return error.status != 429


def default_client_factory(credentials: str) -> spotipy.Spotify:
    # Retries are handled by backoff, so spotipy's own retry adapter is disabled
    client = spotipy.Spotify(
        auth=credentials,
        requests_timeout=settings.api.spotify_request_timeout,
        retries=0,
        status_retries=0,
    )
    client.prefix = settings.api.spotify_base_url
    return client


@define(slots=True)
class SpotifyTransport:
    """spotipy-backed implementation of the playlist transport."""

    client_factory: Callable[[str], spotipy.Spotify] = field(
        default=default_client_factory
    )

    @backoff.on_exception(
        backoff.expo,
        RemoteCallFailure,
        max_tries=lambda: settings.api.spotify_retry_count,
        giveup=_is_not_rate_limited,
        max_value=settings.api.spotify_retry_max_delay,
    )
    async def _call(
        self,
        credentials: str,
        operation: str,
        method: Callable[[spotipy.Spotify], Any],
    ) -> Any:
        client = self.client_factory(credentials)
        try:
            return await asyncio.to_thread(method, client)
        except (spotipy.SpotifyException, requests.exceptions.RequestException) as e:
            failure = translate_error(e, operation)
            log_remote_failure(failure, operation)
            raise failure from e

    async def get_page(
        self,
        credentials: str,
        endpoint: str,
        *,
        limit: int,
        offset: int,
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        # spotipy has no public method for arbitrary collection endpoints
        page = await self._call(
            credentials,
            f"GET {endpoint}",
            lambda client: client._get(
                endpoint, limit=limit, offset=offset, **dict(params or {})
            ),
        )
        return {"items": page.get("items") or [], "next": page.get("next")}

    async def get_current_user_id(self, credentials: str) -> str:
        user = await self._call(credentials, "GET me", lambda client: client.me())
        return user["id"]

    async def get_playlist_details(
        self, credentials: str, playlist_id: str
    ) -> dict[str, Any]:
        return await self._call(
            credentials,
            "GET playlist",
            lambda client: client.playlist(playlist_id, fields=PLAYLIST_DETAIL_FIELDS),
        )

    async def create_playlist(
        self, credentials: str, user_id: str, name: str, description: str
    ) -> str:
        playlist = await self._call(
            credentials,
            "create playlist",
            lambda client: client.user_playlist_create(
                user_id,
                name,
                public=False,
                collaborative=False,
                description=description,
            ),
        )
        logger.info(f"Created Spotify playlist: {name}", playlist_id=playlist["id"])
        return playlist["id"]

    async def replace_tracks(
        self, credentials: str, playlist_id: str, uris: Sequence[str]
    ) -> None:
        await self._call(
            credentials,
            "replace tracks",
            lambda client: client.playlist_replace_items(playlist_id, list(uris)),
        )

    async def add_tracks(
        self, credentials: str, playlist_id: str, uris: Sequence[str]
    ) -> None:
        await self._call(
            credentials,
            "add tracks",
            lambda client: client.playlist_add_items(playlist_id, list(uris)),
        )

    async def remove_tracks(
        self, credentials: str, playlist_id: str, uris: Sequence[str]
    ) -> None:
        await self._call(
            credentials,
            "remove tracks",
            lambda client: client.playlist_remove_all_occurrences_of_items(
                playlist_id, list(uris)
            ),
        )
