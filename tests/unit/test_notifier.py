from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from portal.domain.common import models
from portal.domain.notifications import EVERYONE, Notifier
from portal.domain.notifications.service import notice_audience

CREATED = datetime(2025, 3, 10, tzinfo=timezone.utc)


def _broadcaster() -> AsyncMock:
	broadcaster = AsyncMock()
	broadcaster.emit_to_room = AsyncMock()
	broadcaster.emit_to_all = AsyncMock()
	return broadcaster


def _notice(category: str, role: str | None) -> models.Notice:
	return models.Notice(
		id="n1",
		title="Campus closed",
		content="Snow day",
		author=models.AuthorSummary(id="u1", name="Dean Office", role=role),
		category=category,
		created_at=CREATED,
	)


def _announcement() -> models.Announcement:
	return models.Announcement(
		id="a1",
		title="Tryouts",
		content="Friday 5pm",
		author=models.AuthorSummary(id="u2", name="Rep"),
		club=models.ClubSummary(id="club-c", name="Football Club"),
		created_at=CREATED,
	)


@pytest.mark.asyncio
async def test_announcement_goes_to_club_room():
	broadcaster = _broadcaster()
	notifier = Notifier(broadcaster, urgent_category="Urgent")

	assert await notifier.announcement_created(_announcement()) is True

	broadcaster.emit_to_room.assert_awaited_once_with(
		"club-c",
		{
			"title": "New Announcement: Tryouts",
			"message": "Football Club posted a new Announcement!",
			"type": "announcement",
		},
	)
	broadcaster.emit_to_all.assert_not_awaited()


@pytest.mark.asyncio
async def test_event_goes_to_club_room():
	broadcaster = _broadcaster()
	event = models.Event(
		id="e1",
		title="Derby",
		description="Home game",
		date=CREATED,
		author=models.AuthorSummary(id="u2", name="Rep"),
		club=models.ClubSummary(id="club-c", name="Football Club"),
		created_at=CREATED,
	)

	await Notifier(broadcaster, urgent_category="Urgent").event_created(event)

	room, payload = broadcaster.emit_to_room.await_args.args
	assert room == "club-c"
	assert payload == {"title": "New Event: Derby", "message": "Football Club posted a new event!", "type": "event"}


@pytest.mark.asyncio
async def test_urgent_notice_goes_to_everyone():
	broadcaster = _broadcaster()

	assert await Notifier(broadcaster, urgent_category="Urgent").notice_created(_notice("Urgent", "club")) is True

	broadcaster.emit_to_all.assert_awaited_once_with(
		{"title": "New Notice: Campus closed", "message": "Dean Office posted a new notice.", "type": "notice"}
	)
	broadcaster.emit_to_room.assert_not_awaited()


@pytest.mark.asyncio
async def test_faculty_notice_goes_to_everyone():
	broadcaster = _broadcaster()

	await Notifier(broadcaster, urgent_category="Urgent").notice_created(_notice("Academic", "faculty"))

	broadcaster.emit_to_all.assert_awaited_once()


@pytest.mark.asyncio
async def test_general_notice_from_club_rep_is_silent():
	broadcaster = _broadcaster()

	sent = await Notifier(broadcaster, urgent_category="Urgent").notice_created(_notice("General", "club"))

	assert sent is False
	broadcaster.emit_to_all.assert_not_awaited()
	broadcaster.emit_to_room.assert_not_awaited()


@pytest.mark.asyncio
async def test_explicit_author_role_overrides_record():
	broadcaster = _broadcaster()

	await Notifier(broadcaster, urgent_category="Urgent").notice_created(_notice("General", None), author_role="faculty")

	broadcaster.emit_to_all.assert_awaited_once()


@pytest.mark.asyncio
async def test_delivery_failure_is_swallowed():
	broadcaster = _broadcaster()
	broadcaster.emit_to_room.side_effect = ConnectionError("socket server gone")

	assert await Notifier(broadcaster, urgent_category="Urgent").announcement_created(_announcement()) is False


def test_notice_audience_rules():
	assert notice_audience("Urgent", "student", urgent_category="Urgent") == EVERYONE
	assert notice_audience("General", "Faculty", urgent_category="Urgent") == EVERYONE
	assert notice_audience("Sports", "admin", urgent_category="Urgent") is None
	assert notice_audience("Urgent", "club", urgent_category="Emergency") is None
