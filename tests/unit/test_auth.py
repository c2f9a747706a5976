import pytest
from fastapi import HTTPException

from portal.domain.exceptions import FeedUnavailableError, ForbiddenError, NotFoundError, to_http_error
from portal.infra import auth
from portal.infra import jwt as jwt_helper
from portal.settings import settings


def test_verify_access_jwt_reads_claims():
	token = jwt_helper.encode_access("user-9", role="Faculty", name="Dr. Rao")

	user = auth.verify_access_jwt(token)

	assert user.id == "user-9"
	assert user.role == "faculty"
	assert user.name == "Dr. Rao"


def test_verify_access_jwt_rejects_expired_token():
	token = jwt_helper.encode_access("user-9", ttl_seconds=-60)

	with pytest.raises(HTTPException) as excinfo:
		auth.verify_access_jwt(token)
	assert excinfo.value.status_code == 401
	assert excinfo.value.detail == "invalid_token"


def test_unknown_roles_are_dropped():
	token = jwt_helper.encode_access("user-9", role="superuser")

	assert auth.verify_access_jwt(token).role is None


def test_dev_identity_only_outside_production(monkeypatch):
	assert auth.user_from_dev_identity("u1", "student").id == "u1"

	monkeypatch.setattr(settings, "environment", "production")

	assert auth.user_from_dev_identity("u1", "student") is None


@pytest.mark.asyncio
async def test_require_roles_dependency():
	dep = auth.require_roles("faculty")

	faculty = auth.AuthenticatedUser(id="f1", role="faculty")
	assert await dep(user=faculty) is faculty
	with pytest.raises(HTTPException) as excinfo:
		await dep(user=auth.AuthenticatedUser(id="s1", role="student"))
	assert excinfo.value.status_code == 403


@pytest.mark.parametrize(
	"exc, status_code, detail",
	[
		(NotFoundError("club_not_found"), 404, "club_not_found"),
		(ForbiddenError(), 403, "forbidden"),
		(FeedUnavailableError(), 500, "feed_unavailable"),
		(RuntimeError("boom"), 500, "server_error"),
	],
)
def test_to_http_error(exc, status_code, detail):
	http_exc = to_http_error(exc)

	assert http_exc.status_code == status_code
	assert http_exc.detail == detail
