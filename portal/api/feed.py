"""Combined feed route."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from portal.domain.exceptions import to_http_error
from portal.domain.feed import FeedService
from portal.domain.feed.schemas import FeedResponse
from portal.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(tags=["feed"])
_service = FeedService()


@router.get("/feed", response_model=FeedResponse)
async def get_feed_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> FeedResponse:
	try:
		result = await _service.get_feed(auth_user.id, auth_user.role)
	except Exception as exc:
		raise to_http_error(exc) from exc
	return FeedResponse.from_result(result)
