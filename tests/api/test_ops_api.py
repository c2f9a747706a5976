import pytest

from portal.settings import settings


@pytest.mark.asyncio
async def test_health_live(api_client):
	resp = await api_client.get("/health/live")

	assert resp.status_code == 200
	assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_health_ready_reports_memory_backend(api_client):
	resp = await api_client.get("/health/ready")

	assert resp.status_code == 200
	assert resp.json()["checks"]["postgres"] == {"ok": True, "backend": "memory"}


@pytest.mark.asyncio
async def test_metrics_requires_admin_token(api_client, monkeypatch):
	monkeypatch.setattr(settings, "obs_metrics_public", False)
	monkeypatch.setattr(settings, "obs_admin_token", "ops-secret")

	denied = await api_client.get("/metrics")
	allowed = await api_client.get("/metrics", headers={"X-Admin-Token": "ops-secret"})

	assert denied.status_code == 403
	assert allowed.status_code == 200
	assert "portal_http_requests_total" in allowed.text


@pytest.mark.asyncio
async def test_metrics_public_when_configured(api_client, monkeypatch):
	monkeypatch.setattr(settings, "obs_metrics_public", True)

	resp = await api_client.get("/metrics")

	assert resp.status_code == 200
	assert "portal_feed_requests_total" in resp.text


@pytest.mark.asyncio
async def test_responses_carry_request_id(api_client):
	resp = await api_client.get("/health/live", headers={"X-Request-Id": "req-123"})

	assert resp.headers["X-Request-Id"] == "req-123"
