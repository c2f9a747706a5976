"""Tagged feed items merged from notices, announcements and events."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, List, Literal, Set, Union

from pydantic import Field

from portal.domain.common import models


class NoticeFeedItem(models.Notice):
	type: Literal["notice"] = "notice"
	sort_date: datetime

	@classmethod
	def tag(cls, notice: models.Notice) -> "NoticeFeedItem":
		return cls(**notice.model_dump(), sort_date=notice.created_at)


class AnnouncementFeedItem(models.Announcement):
	type: Literal["announcement"] = "announcement"
	sort_date: datetime

	@classmethod
	def tag(cls, announcement: models.Announcement) -> "AnnouncementFeedItem":
		return cls(**announcement.model_dump(), sort_date=announcement.created_at)


class EventFeedItem(models.Event):
	type: Literal["event"] = "event"
	sort_date: datetime

	@classmethod
	def tag(cls, event: models.Event) -> "EventFeedItem":
		return cls(**event.model_dump(), sort_date=event.date)


FeedItem = Annotated[
	Union[NoticeFeedItem, AnnouncementFeedItem, EventFeedItem],
	Field(discriminator="type"),
]


@dataclass(slots=True)
class FeedResult:
	feed: List[FeedItem] = field(default_factory=list)
	relevant_clubs: Set[str] = field(default_factory=set)
