"""
Tests for rate limiting (in-memory fallback and the global middleware).
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from app.core.error_handlers import register_error_handlers
from app.core.rate_limit import (
    RateLimitMiddleware,
    _check_rate_limit_memory,
    check_rate_limit,
    client_ip,
    rate_limit,
    reset_memory_store,
)


@pytest.fixture(autouse=True)
def clean_store():
    reset_memory_store()
    yield
    reset_memory_store()


class TestMemoryLimiter:
    def test_allows_until_limit(self):
        assert _check_rate_limit_memory("k", 2, 60) is True
        assert _check_rate_limit_memory("k", 2, 60) is True
        assert _check_rate_limit_memory("k", 2, 60) is False

    def test_keys_are_independent(self):
        assert _check_rate_limit_memory("a", 1, 60) is True
        assert _check_rate_limit_memory("b", 1, 60) is True
        assert _check_rate_limit_memory("a", 1, 60) is False

    def test_window_expiry(self):
        with patch("app.core.rate_limit.time.time", return_value=1000.0):
            assert _check_rate_limit_memory("k", 1, 60) is True
            assert _check_rate_limit_memory("k", 1, 60) is False
        with patch("app.core.rate_limit.time.time", return_value=1061.0):
            assert _check_rate_limit_memory("k", 1, 60) is True


class TestCheckRateLimit:
    @pytest.mark.asyncio
    async def test_uses_memory_without_redis(self):
        with patch("app.core.rate_limit.get_redis", AsyncMock(return_value=None)):
            assert await check_rate_limit("k", 1, 60) is True
            assert await check_rate_limit("k", 1, 60) is False

    @pytest.mark.asyncio
    async def test_falls_back_when_redis_fails(self):
        client = MagicMock()
        pipe = MagicMock()
        pipe.execute = AsyncMock(side_effect=ConnectionError("redis down"))
        client.pipeline.return_value = pipe

        with patch("app.core.rate_limit.get_redis", AsyncMock(return_value=client)):
            assert await check_rate_limit("k", 1, 60) is True

    @pytest.mark.asyncio
    async def test_redis_count_decides(self):
        client = MagicMock()
        pipe = MagicMock()
        pipe.execute = AsyncMock(return_value=[0, 5, 1, True])
        client.pipeline.return_value = pipe

        with patch("app.core.rate_limit.get_redis", AsyncMock(return_value=client)):
            assert await check_rate_limit("k", 5, 60) is False
            assert await check_rate_limit("k", 6, 60) is True


class TestClientIp:
    def test_forwarded_header_wins(self):
        request = MagicMock()
        request.headers = {"x-forwarded-for": "203.0.113.7, 10.0.0.1"}
        assert client_ip(request) == "203.0.113.7"

    def test_direct_client(self):
        request = MagicMock()
        request.headers = {}
        request.client.host = "198.51.100.2"
        assert client_ip(request) == "198.51.100.2"


def _build_app(limit: int) -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)
    app.add_middleware(RateLimitMiddleware, limit=limit, window_seconds=60)

    @app.get("/api/v1/ping")
    async def ping():
        return {"ok": True}

    @app.get("/api/health")
    async def health():
        return {"status": "healthy"}

    @app.post("/api/v1/login", dependencies=[Depends(rate_limit(limit=1, window_seconds=60, scope="login"))])
    async def login():
        return {"ok": True}

    return app


class TestRateLimitMiddleware:
    def test_blocks_after_limit(self):
        client = TestClient(_build_app(limit=2))

        assert client.get("/api/v1/ping").status_code == 200
        assert client.get("/api/v1/ping").status_code == 200
        response = client.get("/api/v1/ping")

        assert response.status_code == 429
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "RATE_LIMITED"
        assert response.headers["Retry-After"] == "60"

    def test_health_is_exempt(self):
        client = TestClient(_build_app(limit=1))
        for _ in range(3):
            assert client.get("/api/health").status_code == 200

    def test_route_dependency_limit(self):
        client = TestClient(_build_app(limit=100))

        assert client.post("/api/v1/login").status_code == 200
        response = client.post("/api/v1/login")

        assert response.status_code == 429
        assert response.json()["error"]["code"] == "RATE_LIMITED"
