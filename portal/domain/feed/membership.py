"""Relevant-club resolution per user role."""

from __future__ import annotations

import logging
from typing import Optional, Set

from portal.domain.common import repo as repo_module

logger = logging.getLogger(__name__)


class MembershipResolver:
	"""Maps a user identity to the club ids that user cares about.

	Students get the clubs they follow, faculty the clubs they coordinate and
	club representatives the one club they manage. Any other role resolves to
	an empty set.
	"""

	def __init__(self, *, repository: repo_module.PortalRepository | None = None) -> None:
		self.repo = repository or repo_module.PortalRepository()

	async def resolve(self, user_id: str, role: Optional[str]) -> Set[str]:
		normalised = (role or "").strip().lower()
		if normalised == "student":
			return set(await self.repo.list_followed_club_ids(user_id))
		if normalised == "faculty":
			return set(await self.repo.list_coordinated_club_ids(user_id))
		if normalised == "club":
			club = await self.repo.get_club_by_representative(user_id)
			return {club.id} if club else set()
		return set()

	async def resolve_or_empty(self, user_id: str, role: Optional[str]) -> Set[str]:
		"""Standalone variant: lookup failures degrade to an empty set."""
		try:
			return await self.resolve(user_id, role)
		except Exception:
			logger.warning(
				"membership_resolution_failed",
				exc_info=True,
				extra={"target_user": user_id, "role": role},
			)
			return set()
