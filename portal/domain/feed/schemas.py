"""Pydantic schemas for the feed API."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from portal.domain.feed.models import FeedItem, FeedResult


class FeedResponse(BaseModel):
	feed: List[FeedItem]
	relevant_club_ids: List[str] = Field(alias="relevantClubIds")
	# Older dashboard builds read the club list under this key.
	user_club_list: List[str] = Field(alias="userClubList")

	model_config = ConfigDict(populate_by_name=True)

	@classmethod
	def from_result(cls, result: FeedResult) -> "FeedResponse":
		club_ids = sorted(result.relevant_clubs)
		return cls(feed=result.feed, relevant_club_ids=club_ids, user_club_list=club_ids)
