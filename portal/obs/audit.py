"""Audit trail for content writes (notices, announcements, events)."""

from __future__ import annotations

from typing import Any

from fastapi import Request

from portal.api.request_id import get_request_id
from portal.infra.auth import AuthenticatedUser
from portal.obs.logging import get_logger

audit_logger = get_logger("portal.audit")


def log_write_event(request: Request, user: AuthenticatedUser, event: str, **fields: Any) -> None:
	"""Record who wrote what; ``fields`` carries ids of the affected records."""
	record = {
		"event": event,
		"actor_id": user.id,
		"actor_role": user.role,
		"method": request.method,
		"path": request.url.path,
		"request_id": get_request_id(request),
		**fields,
	}
	audit_logger.info("audit_event", extra={"audit": {key: value for key, value in record.items() if value is not None}})
