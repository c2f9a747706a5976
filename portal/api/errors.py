"""JSON error bodies for the API; each carries the request id."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.api.request_id import get_request_id
from portal.domain.exceptions import PortalError


def _error(request: Request, status_code: int, detail: Any, **extra: Any) -> JSONResponse:
	body = {"detail": detail, **extra, "request_id": get_request_id(request)}
	return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def install_error_handlers(app: FastAPI) -> None:
	@app.exception_handler(StarletteHTTPException)
	async def http_exc_handler(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
		response = _error(request, exc.status_code, exc.detail)
		if exc.headers:
			response.headers.update(exc.headers)
		return response

	@app.exception_handler(PortalError)
	async def portal_exc_handler(request: Request, exc: PortalError):  # type: ignore[override]
		return _error(request, exc.status_code, exc.detail)

	@app.exception_handler(RequestValidationError)
	async def validation_exc_handler(request: Request, exc: RequestValidationError):  # type: ignore[override]
		return _error(request, 422, "validation_error", errors=exc.errors())
