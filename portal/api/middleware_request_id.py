"""Assigns every request an id, echoing a client-supplied ``X-Request-Id``."""

from __future__ import annotations

from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from portal.api.request_id import REQUEST_ID_ATTR, REQUEST_ID_HEADER

_MAX_CLIENT_ID_LENGTH = 128


class RequestIdMiddleware(BaseHTTPMiddleware):
	async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
		supplied = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
		rid = supplied if 0 < len(supplied) <= _MAX_CLIENT_ID_LENGTH else uuid4().hex
		setattr(request.state, REQUEST_ID_ATTR, rid)
		response = await call_next(request)
		response.headers.setdefault(REQUEST_ID_HEADER, rid)
		return response
