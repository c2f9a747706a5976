"""FastAPI routes for club announcements, events and followers."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status

from portal.api.deps import get_notifier, parse_id
from portal.domain.clubs import ClubContentService
from portal.domain.clubs.schemas import (
	AnnouncementCreateRequest,
	ClubDashboard,
	EventCreateRequest,
	FollowerCountResponse,
	FollowResponse,
	RemoveFollowerRequest,
)
from portal.domain.common import models
from portal.domain.exceptions import to_http_error
from portal.domain.notices.schemas import DeleteResponse
from portal.domain.notifications import Notifier
from portal.infra.auth import AuthenticatedUser, get_current_user, require_roles
from portal.obs import audit as obs_audit

router = APIRouter(prefix="/clubs", tags=["clubs"])
_service = ClubContentService()


# Static paths are registered before the /{club_id} routes so they are not
# captured as club ids.


@router.get("", response_model=List[models.ClubProfile])
async def list_clubs_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> List[models.ClubProfile]:
	try:
		return await _service.directory()
	except Exception as exc:
		raise to_http_error(exc) from exc


@router.get("/myclub", response_model=Optional[ClubDashboard])
async def my_club_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> Optional[ClubDashboard]:
	try:
		return await _service.dashboard(auth_user)
	except Exception as exc:
		raise to_http_error(exc) from exc


@router.get("/myclub/followers", response_model=List[models.MemberSummary])
async def my_club_followers_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> List[models.MemberSummary]:
	try:
		return await _service.managed_followers(auth_user)
	except Exception as exc:
		raise to_http_error(exc) from exc


@router.put("/myclub/remove-follower", response_model=DeleteResponse)
async def remove_follower_endpoint(
	request: Request,
	payload: RemoveFollowerRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> DeleteResponse:
	follower_id = parse_id(payload.user_id_to_remove) if payload.user_id_to_remove else None
	try:
		follower = await _service.remove_follower(auth_user, follower_id)
	except Exception as exc:
		raise to_http_error(exc) from exc
	obs_audit.log_write_event(request, auth_user, "followers.remove", follower_id=follower.id)
	return DeleteResponse(msg=f"Removed {follower.name} from followers.")


@router.get("/my-coordinated-clubs", response_model=List[models.ClubProfile])
async def coordinated_clubs_endpoint(
	auth_user: AuthenticatedUser = Depends(require_roles("faculty")),
) -> List[models.ClubProfile]:
	try:
		return await _service.coordinated_clubs(auth_user)
	except Exception as exc:
		raise to_http_error(exc) from exc


@router.get("/my-coordinated-announcements", response_model=List[models.Announcement])
async def coordinated_announcements_endpoint(
	auth_user: AuthenticatedUser = Depends(require_roles("faculty")),
) -> List[models.Announcement]:
	try:
		return await _service.coordinated_announcements(auth_user)
	except Exception as exc:
		raise to_http_error(exc) from exc


@router.get("/my-coordinated-events", response_model=List[models.Event])
async def coordinated_events_endpoint(
	auth_user: AuthenticatedUser = Depends(require_roles("faculty")),
) -> List[models.Event]:
	try:
		return await _service.coordinated_events(auth_user)
	except Exception as exc:
		raise to_http_error(exc) from exc


@router.put("/follow/{club_id}", response_model=FollowResponse)
async def follow_club_endpoint(
	club_id: str,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> FollowResponse:
	cid = parse_id(club_id)
	try:
		followed = await _service.follow(auth_user, cid)
	except Exception as exc:
		raise to_http_error(exc) from exc
	return FollowResponse(followed_clubs=followed)


@router.put("/unfollow/{club_id}", response_model=FollowResponse)
async def unfollow_club_endpoint(
	club_id: str,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> FollowResponse:
	cid = parse_id(club_id)
	try:
		followed = await _service.unfollow(auth_user, cid)
	except Exception as exc:
		raise to_http_error(exc) from exc
	return FollowResponse(followed_clubs=followed)


@router.get("/{club_id}/followercount", response_model=FollowerCountResponse)
async def follower_count_endpoint(
	club_id: str,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> FollowerCountResponse:
	cid = parse_id(club_id)
	try:
		count = await _service.follower_count(cid)
	except Exception as exc:
		raise to_http_error(exc) from exc
	return FollowerCountResponse(count=count)


@router.get("/{club_id}/announcements", response_model=List[models.Announcement])
async def list_announcements_endpoint(
	club_id: str,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> List[models.Announcement]:
	cid = parse_id(club_id)
	try:
		return await _service.list_announcements(cid)
	except Exception as exc:
		raise to_http_error(exc) from exc


@router.post(
	"/{club_id}/announcements",
	response_model=models.Announcement,
	status_code=status.HTTP_201_CREATED,
)
async def create_announcement_endpoint(
	request: Request,
	club_id: str,
	payload: AnnouncementCreateRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	notifier: Notifier = Depends(get_notifier),
) -> models.Announcement:
	cid = parse_id(club_id)
	try:
		announcement = await _service.create_announcement(auth_user, cid, payload)
	except Exception as exc:
		raise to_http_error(exc) from exc
	obs_audit.log_write_event(
		request,
		auth_user,
		"announcements.create",
		club_id=cid,
		announcement_id=announcement.id,
	)
	await notifier.announcement_created(announcement)
	return announcement


@router.get("/{club_id}/events", response_model=List[models.Event])
async def list_events_endpoint(
	club_id: str,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> List[models.Event]:
	cid = parse_id(club_id)
	try:
		return await _service.list_events(cid)
	except Exception as exc:
		raise to_http_error(exc) from exc


@router.post("/{club_id}/events", response_model=models.Event, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
	request: Request,
	club_id: str,
	payload: EventCreateRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	notifier: Notifier = Depends(get_notifier),
) -> models.Event:
	cid = parse_id(club_id)
	try:
		event = await _service.create_event(auth_user, cid, payload)
	except Exception as exc:
		raise to_http_error(exc) from exc
	obs_audit.log_write_event(
		request,
		auth_user,
		"events.create",
		club_id=cid,
		event_id=event.id,
	)
	await notifier.event_created(event)
	return event


@router.delete("/{club_id}/events/{event_id}", response_model=DeleteResponse)
async def delete_event_endpoint(
	request: Request,
	club_id: str,
	event_id: str,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> DeleteResponse:
	cid = parse_id(club_id)
	eid = parse_id(event_id)
	try:
		await _service.delete_event(auth_user, cid, eid)
	except Exception as exc:
		raise to_http_error(exc) from exc
	obs_audit.log_write_event(request, auth_user, "events.delete", club_id=cid, event_id=eid)
	return DeleteResponse(msg="Event removed")
