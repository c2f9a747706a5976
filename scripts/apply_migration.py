"""Apply pending SQL migrations from ./migrations in filename order.

Usage: python scripts/apply_migration.py [migration_filename]
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import asyncpg

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from portal.infra import postgres  # noqa: E402

MIGRATIONS_DIR = ROOT / "migrations"


async def _wait_for_pool(retries: int = 30, delay: float = 2.0) -> asyncpg.Pool:
	for attempt in range(retries):
		try:
			return await postgres.init_pool()
		except (OSError, asyncpg.CannotConnectNowError) as exc:
			print(f"Database starting up ({exc}); waiting {delay}s ({attempt + 1}/{retries})")
			await asyncio.sleep(delay)
	raise SystemExit("Could not connect to database after multiple retries")


async def apply_migrations(only: str | None = None) -> None:
	paths = sorted(MIGRATIONS_DIR.glob("*.sql"))
	if only:
		paths = [path for path in paths if path.name == only]
	if not paths:
		raise SystemExit("no migration files found")

	pool = await _wait_for_pool()
	try:
		async with pool.acquire() as conn:
			await conn.execute(
				"""
				CREATE TABLE IF NOT EXISTS schema_migrations (
					version TEXT PRIMARY KEY,
					applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
				)
				"""
			)
			applied = {row["version"] for row in await conn.fetch("SELECT version FROM schema_migrations")}
			for path in paths:
				version = path.name.split("_", 1)[0]
				if version in applied:
					continue
				async with conn.transaction():
					await conn.execute(path.read_text())
					await conn.execute(
						"INSERT INTO schema_migrations (version) VALUES ($1) ON CONFLICT (version) DO NOTHING",
						version,
					)
				print(f"Applied {path.name}")
	finally:
		await postgres.close_pool()


if __name__ == "__main__":
	if sys.platform == "win32":
		asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
	asyncio.run(apply_migrations(sys.argv[1] if len(sys.argv) > 1 else None))
