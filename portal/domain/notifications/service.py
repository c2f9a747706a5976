"""Notification trigger rules for newly created posts."""

from __future__ import annotations

import logging
from typing import Optional

from portal.domain.common import models
from portal.domain.notifications.broadcaster import EVERYONE, Broadcaster, NotificationPayload
from portal.obs import metrics as obs_metrics
from portal.settings import settings

logger = logging.getLogger(__name__)


def announcement_notification(title: str, club_name: str) -> NotificationPayload:
	return NotificationPayload(
		title=f"New Announcement: {title}",
		message=f"{club_name} posted a new Announcement!",
		type="announcement",
	)


def event_notification(title: str, club_name: str) -> NotificationPayload:
	return NotificationPayload(
		title=f"New Event: {title}",
		message=f"{club_name} posted a new event!",
		type="event",
	)


def notice_notification(title: str, author_name: str) -> NotificationPayload:
	return NotificationPayload(
		title=f"New Notice: {title}",
		message=f"{author_name} posted a new notice.",
		type="notice",
	)


def notice_audience(category: Optional[str], author_role: Optional[str], *, urgent_category: str) -> Optional[str]:
	"""Urgent notices and anything faculty posts go to everyone; the rest stay silent."""
	if category == urgent_category:
		return EVERYONE
	if (author_role or "").strip().lower() == "faculty":
		return EVERYONE
	return None


class Notifier:
	"""Routes notifications to a club room or to every connected client.

	Delivery is best effort: a failed emit is logged and counted, and never
	reaches the caller whose write triggered it.
	"""

	def __init__(self, broadcaster: Broadcaster, *, urgent_category: Optional[str] = None) -> None:
		self.broadcaster = broadcaster
		self.urgent_category = urgent_category or settings.urgent_notice_category

	async def notify(self, audience: str, payload: NotificationPayload) -> bool:
		scope = "everyone" if audience == EVERYONE else "room"
		try:
			if audience == EVERYONE:
				await self.broadcaster.emit_to_all(payload.to_dict())
			else:
				await self.broadcaster.emit_to_room(str(audience), payload.to_dict())
		except Exception:
			obs_metrics.notification_failed(payload.type)
			logger.warning(
				"notification_emit_failed",
				exc_info=True,
				extra={"audience": str(audience), "type": payload.type},
			)
			return False
		obs_metrics.notification_emitted(payload.type, scope)
		return True

	async def announcement_created(self, announcement: models.Announcement) -> bool:
		payload = announcement_notification(announcement.title, announcement.club.name)
		return await self.notify(announcement.club.id, payload)

	async def event_created(self, event: models.Event) -> bool:
		payload = event_notification(event.title, event.club.name)
		return await self.notify(event.club.id, payload)

	async def notice_created(self, notice: models.Notice, *, author_role: Optional[str] = None) -> bool:
		"""Returns False when the notice does not warrant a notification."""
		role = author_role if author_role is not None else notice.author.role
		audience = notice_audience(notice.category, role, urgent_category=self.urgent_category)
		if audience is None:
			return False
		return await self.notify(audience, notice_notification(notice.title, notice.author.name))
