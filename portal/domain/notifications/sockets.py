"""Socket.IO namespace that places connections into club rooms."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Set
from uuid import UUID

import socketio
from fastapi import HTTPException
from socketio.exceptions import ConnectionRefusedError

from portal.infra.auth import AuthenticatedUser, user_from_dev_identity, verify_access_jwt
from portal.obs import metrics as obs_metrics

JOIN_EVENT = "join_club_rooms"
JOINED_EVENT = "rooms:joined"


def _header(scope: dict, name: str) -> Optional[str]:
	target = name.encode().lower()
	for key, value in scope.get("headers", []):
		if key.lower() == target:
			return value.decode()
	return None


class ClubRoomsNamespace(socketio.AsyncNamespace):
	"""Keeps one room per club id for each connection that asks for it.

	Clients send the club ids they care about (``join_club_rooms``) after
	fetching their own profile; rooms are forgotten on disconnect and must be
	resent after a reconnect.
	"""

	def __init__(self, namespace: str = "/") -> None:
		super().__init__(namespace)
		self._sessions: Dict[str, Optional[AuthenticatedUser]] = {}
		self._rooms: Dict[str, Set[str]] = {}

	async def on_connect(self, sid: str, environ: dict, auth: Any = None) -> None:
		obs_metrics.socket_connected(self.namespace)
		scope = environ.get("asgi.scope", environ)
		# python-socketio >=5 passes client-provided auth as a separate argument
		auth_payload = auth or environ.get("auth") or scope.get("auth")
		if not isinstance(auth_payload, dict):
			auth_payload = {}
		try:
			user = self._resolve_user(auth_payload, scope)
		except HTTPException:
			obs_metrics.socket_disconnected(self.namespace)
			raise ConnectionRefusedError("invalid_token") from None
		self._sessions[sid] = user
		self._rooms[sid] = set()
		initial = auth_payload.get("clubIds")
		if initial is not None:
			await self.join_club_rooms(sid, initial)

	async def on_disconnect(self, sid: str, reason: Any = None) -> None:
		obs_metrics.socket_disconnected(self.namespace)
		for room in self._rooms.pop(sid, set()):
			await self.leave_room(sid, room)
		self._sessions.pop(sid, None)

	async def on_join_club_rooms(self, sid: str, payload: Any = None) -> None:
		obs_metrics.socket_event(self.namespace, JOIN_EVENT)
		await self.join_club_rooms(sid, payload)
		await self.emit(JOINED_EVENT, {"rooms": sorted(self.rooms_for(sid))}, room=sid)

	async def join_club_rooms(self, sid: str, club_ids: Any) -> Set[str]:
		"""Enter one room per club id and return the rooms newly joined.

		Anything other than a list is ignored, as are entries that cannot name
		a club and sids that are no longer connected. Rooms already joined are
		skipped.
		"""
		if not isinstance(club_ids, (list, tuple)):
			return set()
		rooms = self._rooms.get(sid)
		if rooms is None:
			return set()
		added: Set[str] = set()
		for key in self._room_keys(club_ids):
			if key in rooms:
				continue
			await self.enter_room(sid, key)
			rooms.add(key)
			added.add(key)
		obs_metrics.inc_room_joins(len(added))
		return added

	def rooms_for(self, sid: str) -> Set[str]:
		return set(self._rooms.get(sid, ()))

	def get_user(self, sid: str) -> Optional[AuthenticatedUser]:
		return self._sessions.get(sid)

	def is_connected(self, sid: str) -> bool:
		return sid in self._rooms

	@staticmethod
	def room_key(club_id: Any) -> str:
		return str(club_id).strip()

	def _room_keys(self, club_ids: Iterable[Any]) -> Iterable[str]:
		for club_id in club_ids:
			if isinstance(club_id, bool) or not isinstance(club_id, (str, int, UUID)):
				continue
			key = self.room_key(club_id)
			if key:
				yield key

	def _resolve_user(self, auth_payload: dict, scope: dict) -> Optional[AuthenticatedUser]:
		token = auth_payload.get("token")
		if not token:
			header = _header(scope, "authorization")
			if header and header.lower().startswith("bearer "):
				token = header.split(" ", 1)[1]
		if token:
			return verify_access_jwt(str(token))
		user_id = auth_payload.get("userId") or _header(scope, "x-user-id")
		role = auth_payload.get("role") or _header(scope, "x-user-role")
		return user_from_dev_identity(user_id, role)
