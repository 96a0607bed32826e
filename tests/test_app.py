"""
Tests for application wiring: settings, middleware and error handlers.
"""

import asyncio

import httpx
import pytest
from pydantic import ValidationError

from config.settings import Settings
from main import create_app


class TestSettings:
    def test_missing_secret_is_fatal(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET", raising=False)
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///x.db")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_missing_database_url_is_fatal(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("JWT_SECRET", "s")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_values_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "s")
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///x.db")
        monkeypatch.setenv("JWT_EXPIRY_SECONDS", "604800")
        settings = Settings(_env_file=None)
        assert settings.jwt_expiry_seconds == 604800
        assert settings.require_username is False


class TestRequestTimeout:
    @pytest.mark.asyncio
    async def test_overrun_is_generic_500(self, settings):
        app = create_app(settings.model_copy(update={"request_timeout_seconds": 0.05}))

        @app.get("/slow")
        async def slow():
            await asyncio.sleep(1)
            return {"ok": True}

        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get("/slow")
        await app.state.engine.dispose()

        assert resp.status_code == 500
        assert resp.json() == {"message": "Server error"}


class TestServerErrors:
    @pytest.mark.asyncio
    async def test_corrupt_credential_does_not_leak(self, client, store):
        await store.create(email="broken@b.com", password_hash="plaintext")
        resp = await client.post("/auth/login", json={"email": "broken@b.com", "password": "x"})
        assert resp.status_code == 500
        assert resp.json() == {"message": "Server error"}
