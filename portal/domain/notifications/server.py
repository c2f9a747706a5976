"""Factory helpers for the Socket.IO server and the club rooms namespace."""

from __future__ import annotations

import logging
from typing import Sequence

import socketio

from portal.domain.notifications.broadcaster import SocketIOBroadcaster
from portal.domain.notifications.service import Notifier
from portal.domain.notifications.sockets import ClubRoomsNamespace
from portal.settings import settings

logger = logging.getLogger(__name__)


def build_server(allow_origins: Sequence[str]) -> socketio.AsyncServer:
	client_manager = None
	if settings.socketio_redis_url:
		client_manager = socketio.AsyncRedisManager(settings.socketio_redis_url)
		logger.info("Socket.IO rooms shared through Redis")
	return socketio.AsyncServer(
		async_mode="asgi",
		cors_allowed_origins=list(allow_origins),
		client_manager=client_manager,
	)


def register(server: socketio.AsyncServer) -> Notifier:
	"""Register the club rooms namespace and return a notifier bound to it."""
	namespace = ClubRoomsNamespace(settings.socketio_namespace)
	server.register_namespace(namespace)
	return Notifier(SocketIOBroadcaster(namespace))
