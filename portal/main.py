"""FastAPI application entrypoint.

Serve ``portal.main:socket_app`` so the Socket.IO transport and the REST API
share one ASGI process.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal.api import clubs, feed, notices, ops
from portal.api.errors import install_error_handlers
from portal.api.middleware_request_id import RequestIdMiddleware
from portal.domain.notifications import server as notifications_server
from portal.infra import postgres
from portal.obs import init as obs_init
from portal.obs import tracing
from portal.settings import settings

logger = logging.getLogger(__name__)

DEV_ORIGINS = [
	"http://localhost:3000",
	"http://127.0.0.1:3000",
	"http://localhost:5173",
	"http://127.0.0.1:5173",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
	try:
		await postgres.init_pool()
	except Exception:
		if not settings.is_dev():
			raise
		logger.warning("Postgres unavailable; serving from the in-memory store", exc_info=True)
	try:
		yield
	finally:
		await postgres.close_pool()
		tracing.shutdown_tracing()


app = FastAPI(title="Campus Portal API", lifespan=lifespan)
install_error_handlers(app)

allow_origins = list(settings.cors_allow_origins)
if not allow_origins and settings.is_dev():
	allow_origins = list(DEV_ORIGINS)
# Starlette disallows wildcard '*' with allow_credentials=True.
if "*" in allow_origins:
	allow_origins = list(DEV_ORIGINS) if settings.is_dev() else [o for o in allow_origins if o != "*"]

app.add_middleware(
	CORSMiddleware,
	allow_origins=allow_origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

# Use the same allowed origins for Socket.IO as for the REST API
sio = notifications_server.build_server(allow_origins)
app.state.notifier = notifications_server.register(sio)
socket_app = socketio.ASGIApp(sio, other_asgi_app=app)

obs_init(app)
# Ensure every request carries an X-Request-Id and make it available on request.state
app.add_middleware(RequestIdMiddleware)

app.include_router(feed.router)
app.include_router(notices.router)
app.include_router(clubs.router)
app.include_router(ops.router)
