"""FastAPI routes for the notices board."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request, status

from portal.api.deps import get_notifier, parse_id
from portal.domain.common import models
from portal.domain.exceptions import to_http_error
from portal.domain.notices import NoticeService
from portal.domain.notices.schemas import DeleteResponse, NoticeCreateRequest
from portal.domain.notifications import Notifier
from portal.infra.auth import AuthenticatedUser, get_current_user
from portal.obs import audit as obs_audit

router = APIRouter(prefix="/notices", tags=["notices"])
_service = NoticeService()


@router.get("", response_model=List[models.Notice])
async def list_notices_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> List[models.Notice]:
	try:
		return await _service.list_notices()
	except Exception as exc:
		raise to_http_error(exc) from exc


@router.post("", response_model=models.Notice, status_code=status.HTTP_201_CREATED)
async def create_notice_endpoint(
	request: Request,
	payload: NoticeCreateRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	notifier: Notifier = Depends(get_notifier),
) -> models.Notice:
	try:
		notice = await _service.create_notice(auth_user, payload)
	except Exception as exc:
		raise to_http_error(exc) from exc
	obs_audit.log_write_event(
		request,
		auth_user,
		"notices.create",
		notice_id=notice.id,
		category=notice.category,
	)
	await notifier.notice_created(notice, author_role=auth_user.role)
	return notice


@router.delete("/{item_id}", response_model=DeleteResponse)
async def delete_notice_endpoint(
	request: Request,
	item_id: str,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> DeleteResponse:
	post_id = parse_id(item_id)
	try:
		kind, _ = await _service.delete_post(auth_user, post_id)
	except Exception as exc:
		raise to_http_error(exc) from exc
	obs_audit.log_write_event(request, auth_user, f"{kind}s.delete", post_id=post_id)
	return DeleteResponse(msg="Post removed")
