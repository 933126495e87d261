"""Management registry against a real SQLite store."""

import asyncio

import pytest
from sqlalchemy import func, select

from curator.application.services import ManagementRegistry
from curator.domain.entities import JointManagement, MostPlayedManagement
from curator.domain.errors import ManagementConflictError
from curator.infrastructure.persistence.database import DBManagement

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]

MOST_PLAYED = MostPlayedManagement("short_term")


@pytest.fixture
def registry(uow_factory):
    return ManagementRegistry(uow_factory)


async def _row_count(db_engine) -> int:
    async with db_engine.connect() as conn:
        return await conn.scalar(select(func.count()).select_from(DBManagement))


async def test_resolve_unknown_returns_none(registry):
    assert await registry.resolve("user-1", MOST_PLAYED) is None


async def test_resolve_register_resolve_returns_new_id(registry):
    await registry.register("first", "user-1", MOST_PLAYED)
    assert (await registry.resolve("user-1", MOST_PLAYED)).remote_playlist_id == "first"

    await registry.register("second", "user-1", MOST_PLAYED)
    record = await registry.resolve("user-1", MOST_PLAYED)

    assert record.remote_playlist_id == "second"
    assert record.definition == MOST_PLAYED


async def test_reregistering_updates_instead_of_duplicating(registry, db_engine):
    first = await registry.register("first", "user-1", MOST_PLAYED)
    second = await registry.register("second", "user-1", MOST_PLAYED)

    assert first.id == second.id
    assert await _row_count(db_engine) == 1


async def test_records_are_scoped_by_owner_and_definition(registry):
    await registry.register("a", "user-1", MOST_PLAYED)
    await registry.register("b", "user-2", MOST_PLAYED)
    await registry.register("c", "user-1", MostPlayedManagement("long_term"))
    await registry.register("d", "user-1", JointManagement(["x", "y"]))

    assert (await registry.resolve("user-1", MOST_PLAYED)).remote_playlist_id == "a"
    assert (await registry.resolve("user-2", MOST_PLAYED)).remote_playlist_id == "b"
    joint = await registry.resolve("user-1", JointManagement(["x", "y"]))
    assert joint.remote_playlist_id == "d"
    assert await registry.resolve("user-1", JointManagement(["y", "x"])) is None


async def test_remote_playlist_cannot_back_two_definitions(registry):
    await registry.register("shared", "user-1", MOST_PLAYED)

    with pytest.raises(ManagementConflictError):
        await registry.register("shared", "user-1", JointManagement(["x"]))

    # The failed registration rolled back and left the original intact
    assert (await registry.resolve("user-1", MOST_PLAYED)).remote_playlist_id == "shared"
    assert await registry.resolve("user-1", JointManagement(["x"])) is None


async def test_concurrent_registrations_converge_on_one_record(registry, db_engine):
    candidates = [f"racer-{i}" for i in range(5)]

    await asyncio.gather(
        *(registry.register(playlist_id, "user-1", MOST_PLAYED) for playlist_id in candidates)
    )

    assert await _row_count(db_engine) == 1
    record = await registry.resolve("user-1", MOST_PLAYED)
    assert record.remote_playlist_id in candidates
