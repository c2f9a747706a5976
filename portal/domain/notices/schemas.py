"""Pydantic schemas for the notices API."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portal.domain.common.models import NOTICE_CATEGORIES, Attachment
from portal.domain.common.schemas import as_utc


class NoticeCreateRequest(BaseModel):
	title: str = Field(default="", max_length=200)
	content: str = ""
	category: Optional[str] = None
	audience: Optional[str] = None
	expires_at: Optional[datetime] = Field(default=None, alias="expiresAt")
	is_pinned: bool = Field(default=False, alias="isPinned")
	attachments: List[Attachment] = Field(default_factory=list)

	model_config = ConfigDict(populate_by_name=True)

	@field_validator("title", "content", mode="before")
	@classmethod
	def _strip(cls, value):
		return value.strip() if isinstance(value, str) else value

	@field_validator("category", mode="after")
	@classmethod
	def _known_category(cls, value: Optional[str]) -> Optional[str]:
		if value is None or value == "":
			return None
		cleaned = value.strip()
		if cleaned not in NOTICE_CATEGORIES:
			raise ValueError(f"category must be one of: {', '.join(NOTICE_CATEGORIES)}")
		return cleaned

	@field_validator("expires_at", mode="after")
	@classmethod
	def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
		return as_utc(value)


class DeleteResponse(BaseModel):
	msg: str
