"""Shared fixtures: in-memory Spotify fake and file-backed SQLite stores."""

import asyncio
from collections import Counter

import pytest

from curator.application.services import (
    BatchMutationExecutor,
    PaginatedCollectionFetcher,
    PlaylistStrategyRunner,
)
from curator.domain.errors import RemoteCallFailure
from curator.infrastructure.persistence import make_unit_of_work_factory
from curator.infrastructure.persistence.database import create_db_engine, init_db

MUTATION_CAP = 100


class FakeSpotify:
    """In-memory stand-in for the remote playlist service.

    Playlists are plain URI lists. Every call is logged in ``calls`` as
    ``(method, *args)``; ``fail`` makes a method raise after N successful calls.
    With ``interleave`` set, every mutation yields to the event loop first, like a
    real network round trip.
    """

    def __init__(self, user_id: str = "user-1") -> None:
        self.user_id = user_id
        self.playlists: dict[str, list[str]] = {}
        self.details: dict[str, dict] = {}
        self.collections: dict[str, list[dict]] = {}
        self.calls: list[tuple] = []
        self._failures: dict[str, tuple[int, RemoteCallFailure]] = {}
        self._succeeded: Counter = Counter()
        self._next_id = 0
        self.interleave = False

    # -- test helpers -------------------------------------------------------

    def fail(self, method: str, error: RemoteCallFailure | None = None, after: int = 0):
        self._failures[method] = (
            after,
            error or RemoteCallFailure("boom", status=500, payload={"msg": "boom"}),
        )

    def calls_to(self, method: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == method]

    def add_playlist(self, playlist_id: str, uris: list[str], name: str = "") -> None:
        self.playlists[playlist_id] = list(uris)
        self.details[playlist_id] = {
            "id": playlist_id,
            "name": name or f"Playlist {playlist_id}",
            "uri": f"spotify:playlist:{playlist_id}",
            "owner": {"id": self.user_id, "display_name": "Test User"},
        }

    def _record(self, method: str, *args) -> None:
        self.calls.append((method, *args))
        if method in self._failures:
            after, error = self._failures[method]
            if self._succeeded[method] >= after:
                raise error
        self._succeeded[method] += 1

    async def _round_trip(self) -> None:
        if self.interleave:
            await asyncio.sleep(0)

    @staticmethod
    def _check_cap(uris) -> None:
        assert len(uris) <= MUTATION_CAP, f"request carried {len(uris)} URIs"

    # -- transport ----------------------------------------------------------

    async def get_page(self, credentials, endpoint, *, limit, offset, params=None):
        self._record("get_page", endpoint, limit, offset)
        if endpoint.startswith("playlists/") and endpoint.endswith("/tracks"):
            playlist_id = endpoint.split("/")[1]
            items = [
                {"added_at": None, "track": {"uri": uri, "name": uri}}
                for uri in self.playlists.get(playlist_id, [])
            ]
        else:
            items = self.collections.get(endpoint, [])

        page = items[offset : offset + limit]
        has_next = offset + limit < len(items)
        return {"items": page, "next": f"{endpoint}?offset={offset + limit}" if has_next else None}

    async def get_current_user_id(self, credentials):
        self._record("get_current_user_id")
        return self.user_id

    async def get_playlist_details(self, credentials, playlist_id):
        self._record("get_playlist_details", playlist_id)
        return self.details[playlist_id]

    async def create_playlist(self, credentials, user_id, name, description):
        self._record("create_playlist", user_id, name, description)
        self._next_id += 1
        playlist_id = f"created-{self._next_id}"
        self.add_playlist(playlist_id, [], name=name)
        return playlist_id

    async def replace_tracks(self, credentials, playlist_id, uris):
        self._check_cap(uris)
        await self._round_trip()
        self._record("replace_tracks", playlist_id, list(uris))
        self.playlists[playlist_id] = list(uris)

    async def add_tracks(self, credentials, playlist_id, uris):
        self._check_cap(uris)
        await self._round_trip()
        self._record("add_tracks", playlist_id, list(uris))
        self.playlists[playlist_id].extend(uris)

    async def remove_tracks(self, credentials, playlist_id, uris):
        self._check_cap(uris)
        await self._round_trip()
        self._record("remove_tracks", playlist_id, list(uris))
        removed = set(uris)
        self.playlists[playlist_id] = [
            uri for uri in self.playlists[playlist_id] if uri not in removed
        ]


def track_uris(count: int, prefix: str = "t") -> list[str]:
    return [f"spotify:track:{prefix}{i}" for i in range(count)]


@pytest.fixture
def make_uris():
    """Builder for distinct track URIs: ``make_uris(3, "a")``."""
    return track_uris


@pytest.fixture
def fake_spotify():
    return FakeSpotify()


@pytest.fixture
def fetcher(fake_spotify):
    return PaginatedCollectionFetcher(fake_spotify, page_size=50)


@pytest.fixture
def executor(fake_spotify):
    return BatchMutationExecutor(fake_spotify, max_tracks_per_request=MUTATION_CAP)


@pytest.fixture
def strategy_runner(fake_spotify, fetcher, executor):
    return PlaylistStrategyRunner(fake_spotify, fetcher, executor)


@pytest.fixture
async def db_engine(tmp_path):
    """File-backed SQLite engine with the schema created."""
    engine = create_db_engine(f"sqlite+aiosqlite:///{tmp_path / 'curator.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def uow_factory(db_engine):
    return make_unit_of_work_factory(db_engine)
