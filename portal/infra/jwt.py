"""HS256 access tokens shared with the web client.

The token carries the caller's identity claims (``sub``, ``role``, ``name``)
so that neither REST handlers nor socket connects need a user lookup.
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

import jwt

from portal.settings import settings

ISSUER = "campus-portal-api"
AUDIENCE = "campus-portal-web"
ALGORITHM = "HS256"
DEFAULT_TTL_SECONDS = 3600


def encode_access(
	user_id: str,
	*,
	role: Optional[str] = None,
	name: Optional[str] = None,
	ttl_seconds: int = DEFAULT_TTL_SECONDS,
) -> str:
	issued = int(time.time())
	claims: Dict[str, Any] = {
		"sub": str(user_id),
		"iss": ISSUER,
		"aud": AUDIENCE,
		"iat": issued,
		"exp": issued + ttl_seconds,
	}
	if role is not None:
		claims["role"] = role
	if name is not None:
		claims["name"] = name
	return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_access(token: str) -> Dict[str, Any]:
	"""Validate signature, expiry, issuer and audience; raises ``jwt.InvalidTokenError``."""
	return jwt.decode(
		token,
		settings.secret_key,
		algorithms=[ALGORITHM],
		audience=AUDIENCE,
		issuer=ISSUER,
		leeway=5,
		options={"require": ["exp", "iat", "iss", "aud", "sub"]},
	)
