"""
softphone/database.py — Пул соединений к базе FusionPBX.

Сервис только читает ``v_extensions`` / ``v_voicemails``; схемой базы
владеет FusionPBX.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import asyncpg

from softphone.config import get_settings

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None


async def get_pool() -> asyncpg.Pool:
    """Пул создаётся при первом обращении."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = await asyncpg.create_pool(
            dsn=settings.database_url,
            min_size=settings.database_pool_min,
            max_size=settings.database_pool_max,
        )
        logger.info("FusionPBX DB pool ready (max=%d)", settings.database_pool_max)
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[asyncpg.Connection]:
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


async def check_connection() -> bool:
    """Health check: ``SELECT 1`` через пул."""
    try:
        async with get_connection() as conn:
            return await conn.fetchval("SELECT 1") == 1
    except Exception as e:
        logger.error("FusionPBX DB health check failed: %s", e)
        return False
