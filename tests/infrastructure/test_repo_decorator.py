"""Tests for the repository operation decorator."""

import pytest
from sqlalchemy.exc import OperationalError

from curator.infrastructure.persistence.repositories.repo_decorator import db_operation


class _Repo:
    @db_operation()
    async def ok(self, playlist_id: str) -> str:
        return playlist_id

    @db_operation("locked")
    async def fails(self) -> None:
        raise OperationalError("UPDATE ...", {}, Exception("database is locked"))


@pytest.mark.asyncio
async def test_result_is_passed_through():
    assert await _Repo().ok(playlist_id="p1") == "p1"


@pytest.mark.asyncio
async def test_errors_are_reraised():
    with pytest.raises(OperationalError):
        await _Repo().fails()


def test_sync_functions_are_rejected():
    with pytest.raises(TypeError):

        @db_operation()
        def not_async(self):
            return None
