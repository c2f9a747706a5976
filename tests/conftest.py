import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

# Settings are read at import time; SECRET_KEY is required.
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("OBS_TRACING_ENABLED", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Ensure the package is importable when tests run from the repo root
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from portal.domain.common import models
from portal.domain.common.repo import memory_store
from portal.infra import postgres
from portal.main import app
from portal.settings import settings


@pytest.fixture(autouse=True)
def patch_postgres(monkeypatch):
	async def _noop():
		return None

	monkeypatch.setattr(postgres, "init_pool", _noop)
	monkeypatch.setattr(postgres, "close_pool", _noop)
	postgres.set_pool(None)


@pytest.fixture(autouse=True)
def force_test_settings():
	"""API tests authenticate via X-User-Id/X-User-Role headers, only accepted in dev mode."""
	original_env = settings.environment
	settings.environment = "dev"
	try:
		yield
	finally:
		settings.environment = original_env


@pytest.fixture(autouse=True)
def reset_store():
	store = memory_store()
	store.reset()
	yield store
	store.reset()


@pytest.fixture
def store():
	return memory_store()


@pytest_asyncio.fixture
async def api_client():
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client


class Seeder:
	"""Creates users and clubs directly in the in-memory store."""

	def __init__(self, store) -> None:
		self.store = store

	async def user(
		self,
		role: str | None = "student",
		*,
		name: str | None = None,
		email: str | None = None,
		follows=(),
	) -> models.User:
		user = models.User(
			id=str(uuid4()),
			name=name or f"{role or 'guest'} user",
			email=email,
			role=role,
			followed_clubs=[club.id for club in follows],
		)
		return await self.store.upsert_user(user)

	async def club(
		self,
		representative: models.User,
		*,
		name: str = "Robotics Society",
		coordinator: models.User | None = None,
	) -> models.Club:
		club = models.Club(
			id=str(uuid4()),
			name=name,
			description=f"{name} on campus",
			category="Technical",
			faculty_coordinator_id=coordinator.id if coordinator else None,
			representative_id=representative.id,
			created_at=datetime.now(timezone.utc),
		)
		return await self.store.upsert_club(club)


@pytest.fixture
def seed(store):
	return Seeder(store)


@pytest.fixture
def headers():
	def _headers(user: models.User) -> dict:
		return {"X-User-Id": user.id, "X-User-Role": user.role or ""}

	return _headers
