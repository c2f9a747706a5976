"""Process-wide asyncpg pool.

Nothing connects at import time. The application lifespan calls
``init_pool``; repositories call ``current_pool`` and fall back to the
in-memory store while it returns ``None``.
"""

from __future__ import annotations

from typing import Optional

import asyncpg

from portal.settings import settings

_pool: Optional[asyncpg.Pool] = None


async def init_pool() -> asyncpg.Pool:
	global _pool
	if _pool is None:
		_pool = await asyncpg.create_pool(
			dsn=settings.postgres_url,
			min_size=settings.postgres_min_pool_size,
			max_size=settings.postgres_max_pool_size,
			ssl="require" if settings.postgres_ssl else None,
			server_settings={"application_name": settings.service_name},
		)
	return _pool


def set_pool(pool: Optional[asyncpg.Pool]) -> None:
	global _pool
	_pool = pool


def current_pool() -> Optional[asyncpg.Pool]:
	return _pool


async def close_pool() -> None:
	global _pool
	pool, _pool = _pool, None
	if pool is not None:
		await pool.close()
