from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from portal.api.deps import get_notifier
from portal.domain.notifications import Notifier
from portal.main import app


@pytest.fixture
def broadcaster():
	fake = AsyncMock()
	app.dependency_overrides[get_notifier] = lambda: Notifier(fake, urgent_category="Urgent")
	try:
		yield fake
	finally:
		app.dependency_overrides.pop(get_notifier, None)


@pytest.mark.asyncio
async def test_faculty_creates_notice_with_defaults(api_client, seed, headers, broadcaster):
	faculty = await seed.user("faculty", name="Dr. Rao")

	resp = await api_client.post(
		"/notices",
		json={"title": "  Midterm dates  ", "content": "Posted on the board"},
		headers=headers(faculty),
	)

	assert resp.status_code == 201
	body = resp.json()
	assert body["title"] == "Midterm dates"
	assert body["category"] == "General"
	assert body["audience"] == "All"
	assert body["isPinned"] is False
	assert body["author"] == {"id": faculty.id, "name": "Dr. Rao", "role": "faculty"}
	# Anything faculty posts is announced to every client.
	broadcaster.emit_to_all.assert_awaited_once_with(
		{"title": "New Notice: Midterm dates", "message": "Dr. Rao posted a new notice.", "type": "notice"}
	)


@pytest.mark.asyncio
async def test_general_notice_from_club_sends_nothing(api_client, seed, headers, broadcaster):
	rep = await seed.user("club")

	resp = await api_client.post(
		"/notices",
		json={"title": "Bake sale", "content": "Hall B", "category": "General"},
		headers=headers(rep),
	)

	assert resp.status_code == 201
	broadcaster.emit_to_all.assert_not_awaited()
	broadcaster.emit_to_room.assert_not_awaited()


@pytest.mark.asyncio
async def test_urgent_notice_from_club_goes_to_everyone(api_client, seed, headers, broadcaster):
	rep = await seed.user("club", name="Safety Club")

	resp = await api_client.post(
		"/notices",
		json={"title": "Gas leak", "content": "Evacuate block C", "category": "Urgent"},
		headers=headers(rep),
	)

	assert resp.status_code == 201
	broadcaster.emit_to_all.assert_awaited_once()


@pytest.mark.asyncio
async def test_students_cannot_post_notices(api_client, seed, headers, broadcaster):
	student = await seed.user("student")

	resp = await api_client.post("/notices", json={"title": "Hi", "content": "There"}, headers=headers(student))

	assert resp.status_code == 403
	broadcaster.emit_to_all.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"title": "Only title"}, {"content": "Only content"}, {"title": "   ", "content": "x"}])
async def test_notice_requires_title_and_content(api_client, seed, headers, payload):
	faculty = await seed.user("faculty")

	resp = await api_client.post("/notices", json=payload, headers=headers(faculty))

	assert resp.status_code == 400
	assert resp.json()["detail"] == "title_and_content_required"


@pytest.mark.asyncio
async def test_unknown_category_is_rejected(api_client, seed, headers):
	faculty = await seed.user("faculty")

	resp = await api_client.post(
		"/notices",
		json={"title": "Party", "content": "Tonight", "category": "Gossip"},
		headers=headers(faculty),
	)

	assert resp.status_code == 422
	assert resp.json()["detail"] == "validation_error"


@pytest.mark.asyncio
async def test_list_notices_pinned_first_and_hides_expired(api_client, seed, headers, store):
	faculty = await seed.user("faculty")
	now = datetime.now(timezone.utc)
	rows = [
		("old-pinned", now - timedelta(days=3), True, None),
		("recent", now - timedelta(hours=1), False, None),
		("older", now - timedelta(days=1), False, now + timedelta(days=2)),
		("expired", now - timedelta(minutes=5), False, now - timedelta(minutes=1)),
	]
	for notice_id, created_at, pinned, expires_at in rows:
		await store.insert_notice(
			{
				"id": notice_id,
				"title": notice_id,
				"content": "body",
				"author_id": faculty.id,
				"category": "General",
				"audience": "All",
				"expires_at": expires_at,
				"is_pinned": pinned,
				"attachments": [],
				"created_at": created_at,
			}
		)

	resp = await api_client.get("/notices", headers=headers(faculty))

	assert resp.status_code == 200
	assert [item["id"] for item in resp.json()] == ["old-pinned", "recent", "older"]


@pytest.mark.asyncio
async def test_notice_attachments_and_expiry_round_trip(api_client, seed, headers):
	faculty = await seed.user("faculty")

	resp = await api_client.post(
		"/notices",
		json={
			"title": "Syllabus",
			"content": "Updated",
			"category": "Academic",
			"expiresAt": "2099-06-01T00:00:00",
			"isPinned": True,
			"attachments": [{"filename": "syllabus.pdf", "url": "https://files.example/syllabus.pdf"}],
		},
		headers=headers(faculty),
	)

	assert resp.status_code == 201
	body = resp.json()
	assert body["isPinned"] is True
	assert body["expiresAt"].startswith("2099-06-01T00:00:00")
	assert body["attachments"] == [{"filename": "syllabus.pdf", "url": "https://files.example/syllabus.pdf"}]


@pytest.mark.asyncio
async def test_author_deletes_own_notice(api_client, seed, headers):
	rep = await seed.user("club")
	created = await api_client.post("/notices", json={"title": "Lost keys", "content": "Blue lanyard"}, headers=headers(rep))
	notice_id = created.json()["id"]

	resp = await api_client.delete(f"/notices/{notice_id}", headers=headers(rep))

	assert resp.status_code == 200
	assert resp.json() == {"msg": "Post removed"}
	listing = await api_client.get("/notices", headers=headers(rep))
	assert listing.json() == []


@pytest.mark.asyncio
async def test_other_users_cannot_delete_but_faculty_can(api_client, seed, headers):
	rep = await seed.user("club")
	other_rep = await seed.user("club")
	faculty = await seed.user("faculty")
	club = await seed.club(rep)
	created = await api_client.post(
		f"/clubs/{club.id}/announcements",
		json={"title": "Trip", "content": "Sign up"},
		headers=headers(rep),
	)
	post_id = created.json()["id"]

	forbidden = await api_client.delete(f"/notices/{post_id}", headers=headers(other_rep))
	allowed = await api_client.delete(f"/notices/{post_id}", headers=headers(faculty))

	assert forbidden.status_code == 403
	assert allowed.status_code == 200
	listing = await api_client.get(f"/clubs/{club.id}/announcements", headers=headers(rep))
	assert listing.json() == []


@pytest.mark.asyncio
async def test_delete_missing_post(api_client, seed, headers):
	faculty = await seed.user("faculty")

	missing = await api_client.delete("/notices/7d3c1f0e-3f1b-4c1e-9d7a-1a2b3c4d5e6f", headers=headers(faculty))
	malformed = await api_client.delete("/notices/not-an-id", headers=headers(faculty))

	assert missing.status_code == 404
	assert malformed.status_code == 400
	assert malformed.json()["detail"] == "invalid_id"
