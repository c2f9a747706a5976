"""Shared FastAPI dependencies."""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, Request, status

from portal.domain.notifications import Notifier, NullBroadcaster


def get_notifier(request: Request) -> Notifier:
	"""Notifier bound to the Socket.IO server, or a silent one when none is mounted."""
	notifier = getattr(request.app.state, "notifier", None)
	if notifier is None:
		return Notifier(NullBroadcaster())
	return notifier


def parse_id(value: str) -> str:
	try:
		return str(UUID(value))
	except (TypeError, ValueError):
		raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="invalid_id") from None
