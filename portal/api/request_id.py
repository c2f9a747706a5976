"""Request id lookup shared by error handlers and audit logging."""

from __future__ import annotations

from typing import Optional

from fastapi import Request

REQUEST_ID_ATTR = "request_id"
REQUEST_ID_HEADER = "X-Request-Id"

# Imported after the constants: portal.obs.middleware imports them back from here.
from portal.obs import logging as obs_logging  # noqa: E402


def get_request_id(request: Optional[Request] = None, default: str = "unknown") -> str:
	"""The id stored on ``request.state``, else the one bound to the log context."""
	stored = getattr(request.state, REQUEST_ID_ATTR, None) if request is not None else None
	return str(stored or obs_logging.current_request_id() or default)
