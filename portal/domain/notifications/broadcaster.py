"""Delivery backends for real-time notifications."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Protocol

from portal.obs import metrics as obs_metrics

if TYPE_CHECKING:  # pragma: no cover - type hints only
	from portal.domain.notifications.sockets import ClubRoomsNamespace

logger = logging.getLogger(__name__)

EVERYONE = "everyone"
NOTIFICATION_EVENT = "receive_notification"


@dataclass(slots=True, frozen=True)
class NotificationPayload:
	title: str
	message: str
	type: str

	def to_dict(self) -> dict:
		return asdict(self)


class Broadcaster(Protocol):
	async def emit_to_room(self, room_id: str, payload: dict) -> None: ...

	async def emit_to_all(self, payload: dict) -> None: ...


class NullBroadcaster:
	"""Used when no Socket.IO server is attached; drops every notification."""

	async def emit_to_room(self, room_id: str, payload: dict) -> None:
		logger.debug("notification_dropped", extra={"room": room_id})

	async def emit_to_all(self, payload: dict) -> None:
		logger.debug("notification_dropped", extra={"room": EVERYONE})


class SocketIOBroadcaster:
	"""Emits through the club rooms namespace.

	Room membership lives in the Socket.IO client manager, which is in-process
	by default and Redis-backed when ``SOCKETIO_REDIS_URL`` is configured.
	"""

	def __init__(self, namespace: "ClubRoomsNamespace") -> None:
		self._namespace = namespace

	async def emit_to_room(self, room_id: str, payload: dict) -> None:
		obs_metrics.socket_event(self._namespace.namespace, NOTIFICATION_EVENT)
		await self._namespace.emit(NOTIFICATION_EVENT, payload, room=self._namespace.room_key(room_id))

	async def emit_to_all(self, payload: dict) -> None:
		obs_metrics.socket_event(self._namespace.namespace, NOTIFICATION_EVENT)
		await self._namespace.emit(NOTIFICATION_EVENT, payload)
