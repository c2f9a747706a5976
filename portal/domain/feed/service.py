"""Combined feed aggregation."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from portal.domain.common import models
from portal.domain.common import repo as repo_module
from portal.domain.exceptions import FeedUnavailableError
from portal.domain.feed.membership import MembershipResolver
from portal.domain.feed.models import (
	AnnouncementFeedItem,
	EventFeedItem,
	FeedItem,
	FeedResult,
	NoticeFeedItem,
)
from portal.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


def merge_feed(
	notices: Sequence[models.Notice],
	announcements: Sequence[models.Announcement],
	events: Sequence[models.Event],
) -> List[FeedItem]:
	"""Tag each record and return them newest ``sort_date`` first.

	The sort is stable, so items sharing a ``sort_date`` keep fetch order
	(notices, then announcements, then events).
	"""
	feed: List[FeedItem] = [
		*(NoticeFeedItem.tag(notice) for notice in notices),
		*(AnnouncementFeedItem.tag(announcement) for announcement in announcements),
		*(EventFeedItem.tag(event) for event in events),
	]
	feed.sort(key=lambda item: item.sort_date, reverse=True)
	return feed


class FeedService:
	"""Builds the feed shown on a user's dashboard."""

	def __init__(
		self,
		*,
		repository: repo_module.PortalRepository | None = None,
		resolver: MembershipResolver | None = None,
	) -> None:
		self.repo = repository or repo_module.PortalRepository()
		self.resolver = resolver or MembershipResolver(repository=self.repo)

	async def get_feed(self, user_id: str, role: Optional[str], *, now: Optional[datetime] = None) -> FeedResult:
		now = now or datetime.now(timezone.utc)
		start = time.perf_counter()
		try:
			notices, announcements, events, relevant_clubs = await asyncio.gather(
				self.repo.list_notices(active_at=now),
				self.repo.list_announcements(),
				self.repo.list_events(starting_from=now),
				self.resolver.resolve(user_id, role),
			)
		except Exception as exc:
			obs_metrics.feed_request("error")
			logger.exception("feed_fetch_failed", extra={"target_user": user_id, "role": role})
			raise FeedUnavailableError() from exc

		feed = merge_feed(notices, announcements, events)
		obs_metrics.feed_request("ok")
		obs_metrics.observe_feed(time.perf_counter() - start, len(feed))
		return FeedResult(feed=feed, relevant_clubs=relevant_clubs)
