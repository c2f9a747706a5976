"""Real-time notification exports."""

from .broadcaster import EVERYONE, Broadcaster, NotificationPayload, NullBroadcaster, SocketIOBroadcaster
from .service import Notifier
from .sockets import ClubRoomsNamespace

__all__ = [
	"EVERYONE",
	"Broadcaster",
	"ClubRoomsNamespace",
	"NotificationPayload",
	"Notifier",
	"NullBroadcaster",
	"SocketIOBroadcaster",
]
