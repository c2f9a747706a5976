"""Caller identity for REST handlers and socket connects.

Login and session issuance live in another service. Requests arrive with a
signed access JWT; development and test deployments also accept plain
``X-User-Id``/``X-User-Role`` headers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portal.infra import jwt as jwt_helper
from portal.settings import settings

KNOWN_ROLES = ("student", "faculty", "club", "admin")


@dataclass(slots=True)
class AuthenticatedUser:
	id: str
	role: Optional[str] = None
	name: Optional[str] = None

	def has_role(self, *roles: str) -> bool:
		return self.role is not None and self.role in roles


def normalise_role(value: object) -> Optional[str]:
	"""Lower-cased known role, or ``None`` for anything else."""
	if value is None:
		return None
	role = str(value).strip().lower()
	return role if role in KNOWN_ROLES else None


def _unauthorised() -> HTTPException:
	return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid_token")


_bearer = HTTPBearer(auto_error=False)


def verify_access_jwt(token: str) -> AuthenticatedUser:
	try:
		claims = jwt_helper.decode_access(token)
	except Exception:
		raise _unauthorised() from None
	user_id = str(claims.get("sub") or "").strip()
	if not user_id:
		raise _unauthorised()
	name = claims.get("name")
	return AuthenticatedUser(id=user_id, role=normalise_role(claims.get("role")), name=str(name) if name else None)


def user_from_dev_identity(user_id: Optional[str], role: Optional[str]) -> Optional[AuthenticatedUser]:
	"""Header identity; only honoured when ``settings.is_dev()``."""
	if not settings.is_dev():
		return None
	user_id = (user_id or "").strip()
	if not user_id:
		return None
	return AuthenticatedUser(id=user_id, role=normalise_role(role))


async def get_current_user(
	credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
	x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
	x_user_role: Optional[str] = Header(default=None, alias="X-User-Role"),
) -> AuthenticatedUser:
	if credentials is not None and credentials.scheme.lower() == "bearer":
		return verify_access_jwt(credentials.credentials)
	user = user_from_dev_identity(x_user_id, x_user_role)
	if user is None:
		raise _unauthorised()
	return user


def require_roles(*roles: str):
	"""Dependency resolving the caller and rejecting roles outside ``roles`` with 403."""
	allowed = tuple(role.strip().lower() for role in roles if role.strip())

	async def _dep(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
		if allowed and not user.has_role(*allowed):
			raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="insufficient_role")
		return user

	return _dep
