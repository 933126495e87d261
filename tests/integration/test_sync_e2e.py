"""End-to-end synchronization: fake remote service, real SQLite store."""

import asyncio

import pytest
from sqlalchemy import func, select

from curator.application.services import PageQuery
from curator.application.use_cases import CachePlaylistUseCase, SynchronizePlaylistUseCase
from curator.domain.entities import MostPlayedManagement
from curator.infrastructure.persistence.database import DBEvent, DBManagement

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]

MOST_PLAYED = MostPlayedManagement("medium_term")


@pytest.fixture
def sync(fake_spotify, uow_factory):
    return SynchronizePlaylistUseCase.create(fake_spotify, uow_factory)


async def test_first_sync_creates_second_updates(sync, fake_spotify, make_uris):
    first = await sync.synchronize("Top", "desc", "tok", make_uris(150), MOST_PLAYED)
    second = await sync.synchronize(
        "Top", "desc", "tok", make_uris(20, prefix="n"), MOST_PLAYED
    )

    assert first.created
    assert not second.created
    assert second.remote_playlist_id == first.remote_playlist_id
    assert len(fake_spotify.calls_to("create_playlist")) == 1

    remote = await sync.runner.current_track_uris(first.remote_playlist_id, "tok")
    assert remote == make_uris(20, prefix="n")


async def test_joint_sync_from_cached_sources(fake_spotify, uow_factory, make_uris):
    fake_spotify.add_playlist("s1", make_uris(60, prefix="a"))
    fake_spotify.add_playlist("s2", make_uris(30, prefix="a")[10:] + make_uris(5, prefix="b"))
    cache = CachePlaylistUseCase.create(fake_spotify, uow_factory)
    await cache.execute("tok", "s1")
    await cache.execute("tok", "s2")
    sync = SynchronizePlaylistUseCase.create(fake_spotify, uow_factory)

    created = await sync.synchronize_joint("Both", "desc", "tok", ["s1", "s2"])

    assert created.successful and created.created
    expected = make_uris(60, prefix="a") + make_uris(5, prefix="b")
    assert fake_spotify.playlists[created.remote_playlist_id] == expected

    # Manual additions are removed, shared tracks untouched, new source tracks added
    joint_id = created.remote_playlist_id
    fake_spotify.playlists[joint_id].append("spotify:track:manual")
    fake_spotify.playlists["s2"].append("spotify:track:late")
    await cache.execute("tok", "s2")
    fake_spotify.calls.clear()

    updated = await sync.synchronize_joint("Both", "desc", "tok", ["s1", "s2"])

    assert updated.successful and not updated.created
    assert fake_spotify.calls_to("replace_tracks") == []
    assert fake_spotify.calls_to("add_tracks") == [
        ("add_tracks", joint_id, ["spotify:track:late"])
    ]
    assert fake_spotify.calls_to("remove_tracks") == [
        ("remove_tracks", joint_id, ["spotify:track:manual"])
    ]


async def test_creation_and_caching_are_logged(sync, fake_spotify, uow_factory, db_engine):
    fake_spotify.add_playlist("s1", ["x"])
    await CachePlaylistUseCase.create(fake_spotify, uow_factory).execute("tok", "s1")
    await sync.synchronize("Top", "desc", "tok", ["a"], MOST_PLAYED)

    async with db_engine.connect() as conn:
        events = (await conn.execute(select(DBEvent.event))).scalars().all()

    assert len(events) == 2
    assert any(event.startswith("Created playlist Top") for event in events)


async def test_concurrent_first_syncs_leave_single_registration(
    sync, fake_spotify, db_engine
):
    outcomes = await asyncio.gather(
        *(sync.synchronize("Top", "desc", "tok", ["a", "b"], MOST_PLAYED) for _ in range(3))
    )

    assert all(outcome.successful for outcome in outcomes)
    async with db_engine.connect() as conn:
        rows = await conn.scalar(select(func.count()).select_from(DBManagement))
    assert rows == 1

    # The race is not locked: every racer created a playlist, only one stays managed
    registered = await sync.registry.resolve("user-1", MOST_PLAYED)
    created_ids = {outcome.remote_playlist_id for outcome in outcomes}
    assert registered.remote_playlist_id in created_ids

    remote = [
        item
        async for item in sync.runner.fetcher.collection(
            "tok", PageQuery.playlist_tracks(registered.remote_playlist_id)
        )
    ]
    assert len(remote) == 2


async def test_overlapping_syncs_of_one_playlist_do_not_interleave(
    sync, fake_spotify, make_uris
):
    created = await sync.synchronize("Top", "desc", "tok", make_uris(10), MOST_PLAYED)
    first, second = make_uris(150, prefix="a"), make_uris(150, prefix="b")
    fake_spotify.calls.clear()
    fake_spotify.interleave = True

    outcomes = await asyncio.gather(
        sync.synchronize("Top", "desc", "tok", first, MOST_PLAYED),
        sync.synchronize("Top", "desc", "tok", second, MOST_PLAYED),
    )

    assert all(outcome.successful and not outcome.created for outcome in outcomes)
    mutations = [
        call[2]
        for call in fake_spotify.calls
        if call[0] in ("replace_tracks", "add_tracks")
    ]
    assert mutations in (
        [first[:100], first[100:], second[:100], second[100:]],
        [second[:100], second[100:], first[:100], first[100:]],
    )
    assert fake_spotify.playlists[created.remote_playlist_id] in (first, second)
