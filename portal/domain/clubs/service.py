"""Service for club announcements, events and followers."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import List, Optional

from portal.domain.clubs.schemas import AnnouncementCreateRequest, ClubDashboard, EventCreateRequest
from portal.domain.common import models
from portal.domain.common import repo as repo_module
from portal.domain.exceptions import ForbiddenError, NotFoundError, ValidationError
from portal.infra.auth import AuthenticatedUser
from portal.obs import metrics as obs_metrics

EVENT_MODERATOR_ROLES = ("faculty", "admin")
DASHBOARD_EVENT_LIMIT = 5


class ClubContentService:
	def __init__(self, *, repository: repo_module.PortalRepository | None = None) -> None:
		self.repo = repository or repo_module.PortalRepository()

	async def _require_club(self, club_id: str) -> models.Club:
		club = await self.repo.get_club(club_id)
		if club is None:
			raise NotFoundError("club_not_found")
		return club

	async def _require_representative(self, user: AuthenticatedUser, club_id: str) -> models.Club:
		club = await self._require_club(club_id)
		if club.representative_id != user.id:
			raise ForbiddenError("not_club_representative")
		return club

	async def _managed_club(self, user: AuthenticatedUser) -> Optional[models.ClubProfile]:
		clubs = await self.repo.list_clubs(representative_id=user.id)
		return clubs[0] if clubs else None

	# --- Directory & representative dashboard -----------------------------

	async def directory(self) -> List[models.ClubProfile]:
		"""Every club by name; representative contact details are left out."""
		clubs = await self.repo.list_clubs()
		return [club.model_copy(update={"representative": None}) for club in clubs]

	async def dashboard(self, user: AuthenticatedUser, *, now: Optional[datetime] = None) -> Optional[ClubDashboard]:
		if not user.has_role("club"):
			raise ForbiddenError("not_club_representative")
		club = await self._managed_club(user)
		if club is None:
			return None
		now = now or datetime.now(timezone.utc)
		announcements, events, followers = await asyncio.gather(
			self.repo.list_announcements(club_ids=[club.id]),
			self.repo.list_events(club_ids=[club.id], starting_from=now),
			self.repo.list_followers(club.id),
		)
		return ClubDashboard(
			club_details=club,
			recent_announcements=announcements,
			upcoming_events=events[:DASHBOARD_EVENT_LIMIT],
			followers=followers,
		)

	async def managed_followers(self, user: AuthenticatedUser) -> List[models.MemberSummary]:
		club = await self._managed_club(user)
		if club is None:
			raise NotFoundError("club_not_found")
		return await self.repo.list_followers(club.id)

	async def remove_follower(self, user: AuthenticatedUser, follower_id: Optional[str]) -> models.User:
		"""Drop ``follower_id`` from the caller's club and return the removed user."""
		if not follower_id:
			raise ValidationError("user_id_required")
		club = await self._managed_club(user)
		if club is None:
			raise ForbiddenError("not_club_representative")
		follower = await self.repo.get_user(follower_id)
		if follower is None:
			raise NotFoundError("follower_not_found")
		await self.repo.unfollow_club(follower_id, club.id)
		return follower

	# --- Followers --------------------------------------------------------

	async def follow(self, user: AuthenticatedUser, club_id: str) -> List[str]:
		await self._require_club(club_id)
		followed = await self.repo.follow_club(user.id, club_id)
		if followed is None:
			raise NotFoundError("user_not_found")
		return followed

	async def unfollow(self, user: AuthenticatedUser, club_id: str) -> List[str]:
		await self._require_club(club_id)
		followed = await self.repo.unfollow_club(user.id, club_id)
		if followed is None:
			raise NotFoundError("user_not_found")
		return followed

	async def follower_count(self, club_id: str) -> int:
		return await self.repo.count_followers(club_id)

	# --- Announcements ----------------------------------------------------

	async def list_announcements(self, club_id: str) -> List[models.Announcement]:
		return await self.repo.list_announcements(club_ids=[club_id])

	async def create_announcement(
		self,
		user: AuthenticatedUser,
		club_id: str,
		payload: AnnouncementCreateRequest,
	) -> models.Announcement:
		await self._require_representative(user, club_id)
		announcement = await self.repo.create_announcement(
			club_id=club_id,
			author_id=user.id,
			title=payload.title,
			content=payload.content,
		)
		obs_metrics.inc_post_created("announcement")
		return announcement

	# --- Events -----------------------------------------------------------

	async def list_events(self, club_id: str) -> List[models.Event]:
		"""Every event of the club, past ones included, soonest first."""
		return await self.repo.list_events(club_ids=[club_id])

	async def create_event(
		self,
		user: AuthenticatedUser,
		club_id: str,
		payload: EventCreateRequest,
	) -> models.Event:
		await self._require_representative(user, club_id)
		event = await self.repo.create_event(
			club_id=club_id,
			author_id=user.id,
			title=payload.title,
			description=payload.description,
			date=payload.date,
			location=payload.location,
		)
		obs_metrics.inc_post_created("event")
		return event

	async def delete_event(self, user: AuthenticatedUser, club_id: str, event_id: str) -> models.Event:
		club = await self._require_club(club_id)
		event = await self.repo.get_event(event_id)
		if event is None or event.club.id != club.id:
			raise NotFoundError("event_not_found")
		if club.representative_id != user.id and not user.has_role(*EVENT_MODERATOR_ROLES):
			raise ForbiddenError()
		await self.repo.delete_event(event_id)
		return event

	# --- Faculty coordinators ---------------------------------------------

	async def _coordinated_club_ids(self, user: AuthenticatedUser) -> List[str]:
		if not user.has_role("faculty"):
			raise ForbiddenError("insufficient_role")
		return await self.repo.list_coordinated_club_ids(user.id)

	async def coordinated_clubs(self, user: AuthenticatedUser) -> List[models.ClubProfile]:
		if not user.has_role("faculty"):
			raise ForbiddenError("insufficient_role")
		return await self.repo.list_clubs(coordinator_id=user.id)

	async def coordinated_announcements(self, user: AuthenticatedUser) -> List[models.Announcement]:
		club_ids = await self._coordinated_club_ids(user)
		if not club_ids:
			return []
		return await self.repo.list_announcements(club_ids=club_ids)

	async def coordinated_events(self, user: AuthenticatedUser) -> List[models.Event]:
		club_ids = await self._coordinated_club_ids(user)
		if not club_ids:
			return []
		return await self.repo.list_events(club_ids=club_ids)
