import pytest
from httpx import ASGITransport, AsyncClient

from waste_tracker.core.config import settings
from waste_tracker.main import create_app
from waste_tracker.middleware.rate_limit import reset_limits


@pytest.mark.asyncio
async def test_cors_allowed_origin(monkeypatch):
    monkeypatch.setenv("ALLOW_ORIGINS", "http://localhost:3000,https://example.com")
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        r = await ac.get("/health", headers={"Origin": "https://example.com"})
        assert r.status_code == 200
        assert r.headers.get("access-control-allow-origin") == "https://example.com"


@pytest.mark.asyncio
async def test_cors_default_allows_local(monkeypatch):
    monkeypatch.delenv("ALLOW_ORIGINS", raising=False)
    monkeypatch.delenv("APP_ENV", raising=False)
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        r = await ac.get("/health", headers={"Origin": "http://localhost:3000"})
        assert r.headers.get("access-control-allow-origin") == "http://localhost:3000"

        r_local_ip = await ac.get("/health", headers={"Origin": "http://127.0.0.1:3000"})
        assert r_local_ip.headers.get("access-control-allow-origin") == "http://127.0.0.1:3000"


@pytest.mark.asyncio
async def test_cors_default_prod_only_localhost(monkeypatch):
    monkeypatch.delenv("ALLOW_ORIGINS", raising=False)
    monkeypatch.setenv("APP_ENV", "prod")
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        r = await ac.get("/health", headers={"Origin": "http://localhost:3000"})
        assert r.headers.get("access-control-allow-origin") == "http://localhost:3000"

        r_local_ip = await ac.get("/health", headers={"Origin": "http://127.0.0.1:3000"})
        assert r_local_ip.headers.get("access-control-allow-origin") is None


@pytest.mark.asyncio
async def test_cors_disallowed_origin(monkeypatch):
    monkeypatch.setenv("ALLOW_ORIGINS", "https://example.com")
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        r = await ac.get("/health", headers={"Origin": "http://evil.com"})
        assert r.status_code == 200
        assert r.headers.get("access-control-allow-origin") is None


@pytest.mark.asyncio
async def test_rate_limit_write_exceeded(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "1")
    reset_limits()
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        # 30/minute for writes; validation failures still count
        for _ in range(30):
            r = await ac.post("/reports", json={})
            assert r.status_code == 400
            assert r.headers["X-RateLimit-Limit"] == "30/minute"
        r = await ac.post("/reports", json={})
        assert r.status_code == 429
        assert r.json() == {
            "error": {
                "code": "rate_limited",
                "message": "Too Many Requests",
                "detail": {"method": "POST", "ip": "127.0.0.1", "limit": "30/minute"},
            }
        }
    reset_limits()


@pytest.mark.asyncio
async def test_rate_limit_uses_configured_limits(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "1")
    monkeypatch.setattr(settings, "rate_limit_read", "2/minute")
    reset_limits()
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        for _ in range(2):
            assert (await ac.get("/healthz")).status_code == 200
        limited = await ac.get("/healthz")
        assert limited.status_code == 429
        assert limited.json()["error"]["detail"]["limit"] == "2/minute"
        # OPTIONS preflight is never limited
        preflight = await ac.options("/healthz")
        assert preflight.status_code != 429
    reset_limits()
