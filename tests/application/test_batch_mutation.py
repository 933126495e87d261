"""Tests for chunked playlist mutations."""

import math

import pytest

from curator.application.services import BatchMutationExecutor
from curator.domain.entities import MutationOperation
from curator.domain.errors import PartialBatchFailure


@pytest.mark.asyncio
class TestBatchMutationExecutor:
    @pytest.mark.parametrize("size", [1, 100, 101, 250, 1000])
    async def test_add_sends_ceil_n_over_cap_ordered_chunks(
        self, fake_spotify, executor, make_uris, size
    ):
        fake_spotify.add_playlist("pl", [])
        uris = make_uris(size)

        result = await executor.add("pl", "tok", uris)

        calls = fake_spotify.calls_to("add_tracks")
        assert len(calls) == math.ceil(size / 100)
        assert all(len(call[2]) <= 100 for call in calls)
        assert [uri for call in calls for uri in call[2]] == uris
        assert fake_spotify.playlists["pl"] == uris
        assert result.chunks_applied == result.total_chunks == len(calls)
        assert result.tracks_applied == size

    async def test_empty_list_makes_no_request(self, fake_spotify, executor):
        result = await executor.remove("pl", "tok", [])

        assert fake_spotify.calls == []
        assert result.operation == MutationOperation.REMOVE
        assert result.total_chunks == 0

    async def test_remove_uses_remove_endpoint(self, fake_spotify, executor, make_uris):
        uris = make_uris(150)
        fake_spotify.add_playlist("pl", uris)

        await executor.remove("pl", "tok", uris[:120])

        assert len(fake_spotify.calls_to("remove_tracks")) == 2
        assert fake_spotify.playlists["pl"] == uris[120:]

    async def test_failure_reports_chunks_applied_and_stops(
        self, fake_spotify, executor, make_uris
    ):
        fake_spotify.add_playlist("pl", [])
        fake_spotify.fail("add_tracks", after=2)
        uris = make_uris(450)

        with pytest.raises(PartialBatchFailure) as exc_info:
            await executor.add("pl", "tok", uris)

        error = exc_info.value
        assert error.chunks_applied == 2
        assert error.total_chunks == 5
        assert error.operation == "add"
        # Third chunk attempted, nothing after it; earlier chunks stay applied
        assert len(fake_spotify.calls_to("add_tracks")) == 3
        assert fake_spotify.playlists["pl"] == uris[:200]

    async def test_first_chunk_failure_reports_zero_applied(
        self, fake_spotify, executor, make_uris
    ):
        fake_spotify.add_playlist("pl", [])
        fake_spotify.fail("add_tracks")

        with pytest.raises(PartialBatchFailure) as exc_info:
            await executor.add("pl", "tok", make_uris(10))

        assert exc_info.value.chunks_applied == 0
        assert exc_info.value.total_chunks == 1


def test_chunk_preserves_order(fake_spotify):
    executor = BatchMutationExecutor(fake_spotify, max_tracks_per_request=2)
    assert executor.chunk(["a", "b", "c", "d", "e"]) == [["a", "b"], ["c", "d"], ["e"]]


@pytest.mark.parametrize("cap", [0, 101])
def test_cap_must_be_within_remote_limit(fake_spotify, cap):
    with pytest.raises(ValueError):
        BatchMutationExecutor(fake_spotify, max_tracks_per_request=cap)
