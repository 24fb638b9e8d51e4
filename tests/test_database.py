"""
Tests for the FusionPBX connection pool helpers (asyncpg mocked).

Run with: pytest tests/test_database.py -v
"""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest

from softphone import database


def fake_pool(fetchval_result=1):
    conn = MagicMock()
    conn.fetchval = AsyncMock(return_value=fetchval_result)

    @asynccontextmanager
    async def acquire():
        yield conn

    pool = MagicMock()
    pool.acquire = acquire
    pool.close = AsyncMock()
    return pool


class TestPool:

    @pytest.mark.asyncio
    async def test_pool_created_once(self, monkeypatch):
        pool = fake_pool()
        create = AsyncMock(return_value=pool)
        monkeypatch.setattr(database.asyncpg, "create_pool", create)
        monkeypatch.setattr(database, "_pool", None)

        assert await database.get_pool() is pool
        assert await database.get_pool() is pool
        create.assert_awaited_once()

        await database.close_pool()
        pool.close.assert_awaited_once()
        assert database._pool is None

    @pytest.mark.asyncio
    async def test_check_connection(self, monkeypatch):
        monkeypatch.setattr(database, "_pool", fake_pool(1))
        assert await database.check_connection() is True

    @pytest.mark.asyncio
    async def test_check_connection_db_down(self, monkeypatch):
        monkeypatch.setattr(database, "get_pool", AsyncMock(side_effect=OSError("refused")))
        assert await database.check_connection() is False
