from unittest.mock import AsyncMock

import pytest

from portal.api import feed as feed_api
from portal.domain.feed import FeedService
from portal.main import app


@pytest.mark.asyncio
async def test_feed_requires_identity(api_client):
	resp = await api_client.get("/feed")

	assert resp.status_code == 401
	assert resp.json()["detail"] == "invalid_token"


@pytest.mark.asyncio
async def test_announcement_round_trip_appears_in_feed(api_client, seed, headers):
	rep = await seed.user("club", name="Chess Rep")
	club = await seed.club(rep, name="Chess Club")
	student = await seed.user("student", follows=[club])

	created = await api_client.post(
		f"/clubs/{club.id}/announcements",
		json={"title": "Simul night", "content": "Bring boards"},
		headers=headers(rep),
	)
	assert created.status_code == 201
	announcement = created.json()

	resp = await api_client.get("/feed", headers=headers(student))

	assert resp.status_code == 200
	body = resp.json()
	matches = [item for item in body["feed"] if item["id"] == announcement["id"]]
	assert len(matches) == 1
	item = matches[0]
	assert item["type"] == "announcement"
	assert item["club"] == {"id": club.id, "name": "Chess Club"}
	assert item["author"]["name"] == "Chess Rep"
	assert item["sortDate"] == announcement["createdAt"]
	assert body["relevantClubIds"] == [club.id]
	assert body["userClubList"] == [club.id]


@pytest.mark.asyncio
async def test_feed_is_sorted_newest_first(api_client, seed, headers):
	faculty = await seed.user("faculty")
	rep = await seed.user("club")
	club = await seed.club(rep, coordinator=faculty)

	await api_client.post("/notices", json={"title": "Library hours", "content": "Open late"}, headers=headers(faculty))
	await api_client.post(
		f"/clubs/{club.id}/events",
		json={"title": "Build night", "description": "Bring laptops", "date": "2099-01-05T18:00:00Z"},
		headers=headers(rep),
	)
	await api_client.post(f"/clubs/{club.id}/announcements", json={"title": "Kits", "content": "Arrived"}, headers=headers(rep))

	resp = await api_client.get("/feed", headers=headers(faculty))

	assert resp.status_code == 200
	feed = resp.json()["feed"]
	assert [item["type"] for item in feed][0] == "event"
	dates = [item["sortDate"] for item in feed]
	assert dates == sorted(dates, reverse=True)
	assert resp.json()["relevantClubIds"] == [club.id]


@pytest.mark.asyncio
async def test_feed_source_failure_returns_500(api_client, monkeypatch, seed, headers):
	student = await seed.user("student")
	repo = AsyncMock()
	repo.list_notices.side_effect = RuntimeError("database unavailable")
	repo.list_announcements.return_value = []
	repo.list_events.return_value = []
	repo.list_followed_club_ids.return_value = []
	monkeypatch.setattr(feed_api, "_service", FeedService(repository=repo))

	resp = await api_client.get("/feed", headers={**headers(student), "X-Request-Id": "req-feed-1"})

	assert resp.status_code == 500
	assert resp.json() == {"detail": "feed_unavailable", "request_id": "req-feed-1"}


@pytest.mark.asyncio
async def test_feed_accepts_bearer_token(api_client, seed):
	from portal.infra import jwt as jwt_helper

	student = await seed.user("student")
	token = jwt_helper.encode_access(student.id, role="student", name=student.name)

	resp = await api_client.get("/feed", headers={"Authorization": f"Bearer {token}"})

	assert resp.status_code == 200
	assert resp.json()["feed"] == []


def test_app_exposes_notifier():
	assert app.state.notifier is not None
