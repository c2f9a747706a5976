"""Service for official notices."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Tuple, Union

from portal.domain.common import models
from portal.domain.common import repo as repo_module
from portal.domain.exceptions import ForbiddenError, NotFoundError, ValidationError
from portal.domain.notices.schemas import NoticeCreateRequest
from portal.infra.auth import AuthenticatedUser
from portal.obs import metrics as obs_metrics

NOTICE_AUTHOR_ROLES = ("faculty", "admin", "club")
MODERATOR_ROLES = ("faculty", "admin")

Post = Union[models.Notice, models.Announcement]


class NoticeService:
	def __init__(self, *, repository: repo_module.PortalRepository | None = None) -> None:
		self.repo = repository or repo_module.PortalRepository()

	async def list_notices(self, *, now: Optional[datetime] = None) -> List[models.Notice]:
		"""Non-expired notices, pinned first, then newest."""
		now = now or datetime.now(timezone.utc)
		return await self.repo.list_notices(active_at=now, pinned_first=True)

	async def create_notice(self, user: AuthenticatedUser, payload: NoticeCreateRequest) -> models.Notice:
		if not user.has_role(*NOTICE_AUTHOR_ROLES):
			raise ForbiddenError("insufficient_role")
		if not payload.title or not payload.content:
			raise ValidationError("title_and_content_required")
		notice = await self.repo.create_notice(
			author_id=user.id,
			title=payload.title,
			content=payload.content,
			category=payload.category or "General",
			audience=(payload.audience or "All").strip() or "All",
			expires_at=payload.expires_at,
			is_pinned=payload.is_pinned,
			attachments=payload.attachments,
		)
		obs_metrics.inc_post_created("notice")
		return notice

	async def delete_post(self, user: AuthenticatedUser, item_id: str) -> Tuple[str, Post]:
		"""Delete an announcement or a notice sharing the notices board.

		Only the author, faculty or admins may delete. Returns the kind of post
		removed along with the record.
		"""
		item: Optional[Post] = await self.repo.get_announcement(item_id)
		kind = "announcement"
		if item is None:
			item = await self.repo.get_notice(item_id)
			kind = "notice"
		if item is None:
			raise NotFoundError("post_not_found")
		if item.author.id != user.id and not user.has_role(*MODERATOR_ROLES):
			raise ForbiddenError()
		if kind == "announcement":
			await self.repo.delete_announcement(item_id)
		else:
			await self.repo.delete_notice(item_id)
		return kind, item
