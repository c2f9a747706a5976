"""Pydantic schemas for club content routes."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portal.domain.common import models
from portal.domain.common.schemas import as_utc


class AnnouncementCreateRequest(BaseModel):
	title: str = Field(..., min_length=1, max_length=200)
	content: str = Field(..., min_length=1)

	@field_validator("title", "content", mode="before")
	@classmethod
	def _strip(cls, value):
		return value.strip() if isinstance(value, str) else value


class EventCreateRequest(BaseModel):
	title: str = Field(..., min_length=1, max_length=200)
	description: str = Field(..., min_length=1)
	date: datetime
	location: Optional[str] = None

	@field_validator("title", "description", mode="before")
	@classmethod
	def _strip(cls, value):
		return value.strip() if isinstance(value, str) else value

	@field_validator("date", mode="after")
	@classmethod
	def _utc(cls, value: datetime) -> datetime:
		return as_utc(value)


class FollowResponse(BaseModel):
	followed_clubs: List[str] = Field(alias="followedClubs")

	model_config = ConfigDict(populate_by_name=True)


class FollowerCountResponse(BaseModel):
	count: int


class RemoveFollowerRequest(BaseModel):
	user_id_to_remove: Optional[str] = Field(default=None, alias="userIdToRemove")

	model_config = ConfigDict(populate_by_name=True)


class ClubDashboard(BaseModel):
	"""What a representative sees for the club they manage."""

	club_details: models.ClubProfile = Field(alias="clubDetails")
	recent_announcements: List[models.Announcement] = Field(alias="recentAnnouncements")
	upcoming_events: List[models.Event] = Field(alias="upcomingEvents")
	followers: List[models.MemberSummary]

	model_config = ConfigDict(populate_by_name=True)
