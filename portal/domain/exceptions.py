"""Custom exceptions for portal services."""

from __future__ import annotations

from fastapi import HTTPException, status


class PortalError(Exception):
	"""Base class for portal domain errors."""

	status_code: int = status.HTTP_400_BAD_REQUEST
	detail: str = "portal_error"

	def __init__(self, detail: str | None = None) -> None:
		super().__init__(detail or self.detail)
		if detail:
			self.detail = detail


class NotFoundError(PortalError):
	"""Thrown when a resource is missing."""

	status_code = status.HTTP_404_NOT_FOUND
	detail = "not_found"


class ForbiddenError(PortalError):
	"""Raised when authorization fails."""

	status_code = status.HTTP_403_FORBIDDEN
	detail = "forbidden"


class ValidationError(PortalError):
	"""Raised for validation errors not covered by FastAPI schema validation."""

	status_code = status.HTTP_400_BAD_REQUEST
	detail = "validation_error"


class FeedUnavailableError(PortalError):
	"""One of the feed sources could not be read; no partial feed is served."""

	status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
	detail = "feed_unavailable"


def to_http_error(exc: Exception) -> HTTPException:
	"""Translate domain exceptions to FastAPI HTTP errors."""
	if isinstance(exc, PortalError):
		return HTTPException(status_code=exc.status_code, detail=exc.detail)
	return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="server_error")
