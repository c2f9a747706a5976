"""Domain models for portal records.

Records are returned by the repository already denormalised: author and club
references carry the display fields needed to render them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

NOTICE_CATEGORIES = (
	"Academic",
	"Event",
	"General",
	"Club Activity",
	"Lost & Found",
	"Sports",
	"Urgent",
	"Other",
)

CLUB_CATEGORIES = ("Technical", "Cultural", "Sports", "Social", "Academic", "Arts", "Other")

UNKNOWN_NAME = "Unknown"

# Records go over the wire in camelCase (createdAt, isPinned); code uses field names.
RECORD_CONFIG = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)


class AuthorSummary(BaseModel):
	id: str
	name: str = UNKNOWN_NAME
	role: Optional[str] = None


class ClubSummary(BaseModel):
	id: str
	name: str = UNKNOWN_NAME


class MemberSummary(BaseModel):
	id: str
	name: str = UNKNOWN_NAME
	email: Optional[str] = None


class Attachment(BaseModel):
	filename: str
	url: str


class Notice(BaseModel):
	"""Official notice posted by faculty, admins or club representatives."""

	id: str
	title: str
	content: str
	author: AuthorSummary
	category: str = "General"
	audience: str = "All"
	expires_at: Optional[datetime] = None
	is_pinned: bool = False
	attachments: list[Attachment] = Field(default_factory=list)
	created_at: datetime

	model_config = RECORD_CONFIG

	def is_active(self, now: datetime) -> bool:
		return self.expires_at is None or self.expires_at > now


class Announcement(BaseModel):
	"""Club announcement, always scoped to exactly one club."""

	id: str
	title: str
	content: str
	author: AuthorSummary
	club: ClubSummary
	created_at: datetime

	model_config = RECORD_CONFIG


class Event(BaseModel):
	"""Club event scheduled for ``date``."""

	id: str
	title: str
	description: str
	date: datetime
	location: Optional[str] = "Campus"
	author: AuthorSummary
	club: ClubSummary
	created_at: datetime

	model_config = RECORD_CONFIG


class Club(BaseModel):
	id: str
	name: str
	description: str = ""
	category: str = "Other"
	faculty_coordinator_id: Optional[str] = None
	representative_id: str
	created_at: datetime

	model_config = RECORD_CONFIG


class ClubProfile(Club):
	"""Club with its coordinator and representative looked up for display."""

	faculty_coordinator: Optional[MemberSummary] = None
	representative: Optional[MemberSummary] = None


class User(BaseModel):
	id: str
	name: str
	email: Optional[str] = None
	role: Optional[str] = None
	followed_clubs: list[str] = Field(default_factory=list)

	model_config = RECORD_CONFIG
