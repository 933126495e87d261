"""Tests for the overwrite and modify strategies against the fake remote."""

import pytest

from curator.application.services import PageQuery
from curator.domain.entities import SyncStrategy
from curator.domain.errors import PartialBatchFailure


@pytest.mark.asyncio
class TestOverwrite:
    @pytest.mark.parametrize("size", [1, 99, 100, 101, 345])
    async def test_remote_ends_up_exactly_desired(
        self, fake_spotify, fetcher, strategy_runner, make_uris, size
    ):
        fake_spotify.add_playlist("pl", make_uris(30, prefix="old"))
        desired = make_uris(size)

        await strategy_runner.overwrite("pl", "tok", desired)

        remote = [
            item["track"]["uri"]
            async for item in fetcher.collection("tok", PageQuery.playlist_tracks("pl"))
        ]
        assert remote == desired

    async def test_one_replace_then_appends_remainder(
        self, fake_spotify, strategy_runner, make_uris
    ):
        fake_spotify.add_playlist("pl", [])
        desired = make_uris(250)

        await strategy_runner.overwrite("pl", "tok", desired)

        replace_calls = fake_spotify.calls_to("replace_tracks")
        add_calls = fake_spotify.calls_to("add_tracks")
        assert len(replace_calls) == 1
        assert replace_calls[0][2] == desired[:100]
        assert [len(call[2]) for call in add_calls] == [100, 50]

    async def test_small_list_needs_no_append(self, fake_spotify, strategy_runner):
        fake_spotify.add_playlist("pl", ["x"])

        await strategy_runner.overwrite("pl", "tok", ["a", "b"])

        assert fake_spotify.calls_to("add_tracks") == []
        assert fake_spotify.playlists["pl"] == ["a", "b"]


@pytest.mark.asyncio
class TestModify:
    async def test_scenario_add_a_remove_d(self, fake_spotify, strategy_runner):
        fake_spotify.add_playlist("pl", ["b", "c", "d"])

        delta = await strategy_runner.modify("pl", "tok", ["a", "b", "c"])

        assert delta.to_add == ("a",)
        assert delta.to_remove == ("d",)
        assert fake_spotify.playlists["pl"] == ["b", "c", "a"]
        assert set(fake_spotify.playlists["pl"]) == {"a", "b", "c"}

    async def test_adds_happen_before_removes(self, fake_spotify, strategy_runner):
        fake_spotify.add_playlist("pl", ["old"])

        await strategy_runner.modify("pl", "tok", ["new"])

        mutations = [
            call[0]
            for call in fake_spotify.calls
            if call[0] in {"add_tracks", "remove_tracks"}
        ]
        assert mutations == ["add_tracks", "remove_tracks"]

    async def test_no_mutation_when_membership_matches(self, fake_spotify, strategy_runner):
        fake_spotify.add_playlist("pl", ["c", "a", "b"])

        delta = await strategy_runner.modify("pl", "tok", ["a", "b", "c"])

        assert not delta.has_changes
        assert fake_spotify.calls_to("add_tracks") == []
        assert fake_spotify.calls_to("remove_tracks") == []

    async def test_only_add_when_nothing_to_remove(self, fake_spotify, strategy_runner):
        fake_spotify.add_playlist("pl", ["a"])

        await strategy_runner.modify("pl", "tok", ["a", "b"])

        assert len(fake_spotify.calls_to("add_tracks")) == 1
        assert fake_spotify.calls_to("remove_tracks") == []

    async def test_only_remove_when_nothing_to_add(self, fake_spotify, strategy_runner):
        fake_spotify.add_playlist("pl", ["a", "b"])

        await strategy_runner.modify("pl", "tok", ["a"])

        assert fake_spotify.calls_to("add_tracks") == []
        assert len(fake_spotify.calls_to("remove_tracks")) == 1
        assert fake_spotify.playlists["pl"] == ["a"]

    async def test_large_playlists_are_paged_and_chunked(
        self, fake_spotify, strategy_runner, make_uris
    ):
        current = make_uris(180, prefix="c")
        desired = current[30:] + make_uris(120, prefix="d")
        fake_spotify.add_playlist("pl", current)

        await strategy_runner.modify("pl", "tok", desired)

        assert len(fake_spotify.calls_to("get_page")) == 4
        assert [len(c[2]) for c in fake_spotify.calls_to("add_tracks")] == [100, 20]
        assert set(fake_spotify.playlists["pl"]) == set(desired)

    async def test_unavailable_tracks_are_ignored_when_reading(self, fake_spotify, strategy_runner):
        async def get_page(credentials, endpoint, *, limit, offset, params=None):
            return {
                "items": [{"track": None}, {"track": {"uri": "a"}}],
                "next": None,
            }

        fake_spotify.add_playlist("pl", ["a"])
        fake_spotify.get_page = get_page

        current = await strategy_runner.current_track_uris("pl", "tok")

        assert current == ["a"]

    async def test_failed_add_skips_removes(self, fake_spotify, strategy_runner):
        fake_spotify.add_playlist("pl", ["old"])
        fake_spotify.fail("add_tracks")

        with pytest.raises(PartialBatchFailure):
            await strategy_runner.modify("pl", "tok", ["new"])

        assert fake_spotify.calls_to("remove_tracks") == []
        assert fake_spotify.playlists["pl"] == ["old"]


@pytest.mark.asyncio
async def test_run_dispatches_on_strategy(fake_spotify, strategy_runner):
    fake_spotify.add_playlist("pl", ["b", "c", "d"])

    await strategy_runner.run(SyncStrategy.MODIFY, "pl", "tok", ["a", "b", "c"])
    assert fake_spotify.calls_to("replace_tracks") == []

    await strategy_runner.run(SyncStrategy.OVERWRITE, "pl", "tok", ["z"])
    assert fake_spotify.playlists["pl"] == ["z"]
