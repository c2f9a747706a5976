"""Liveness and readiness probes."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, Tuple

from portal.infra import postgres
from portal.obs import metrics

logger = logging.getLogger(__name__)

READY_QUERY_TIMEOUT = 0.3


async def liveness() -> Dict[str, Any]:
	return {"status": "ok"}


async def check_database() -> Dict[str, Any]:
	"""Round-trip ``SELECT 1``; without a pool the in-memory store is always ready."""
	pool = postgres.current_pool()
	if pool is None:
		return {"ok": True, "backend": "memory"}
	started = time.perf_counter()
	try:
		async with pool.acquire() as conn:
			await asyncio.wait_for(conn.fetchval("SELECT 1"), timeout=READY_QUERY_TIMEOUT)
	except Exception as exc:
		metrics.mark_postgres(False)
		logger.warning("readiness_database_failed", exc_info=True)
		return {"ok": False, "backend": "postgres", "error": type(exc).__name__}
	metrics.mark_postgres(True)
	return {"ok": True, "backend": "postgres", "latency_ms": round((time.perf_counter() - started) * 1000, 2)}


async def readiness() -> Tuple[int, Dict[str, Any]]:
	database = await check_database()
	if database["ok"]:
		return 200, {"status": "ok", "checks": {"postgres": database}}
	return 503, {"status": "degraded", "checks": {"postgres": database}}
