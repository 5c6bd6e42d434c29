"""
Startup checks in the application lifespan.
"""

from unittest.mock import AsyncMock, patch

import pytest

from app.core.config import DEFAULT_JWT_SECRET, settings
from app.main import app, lifespan

MAIN = "app.main"


@pytest.fixture
def production():
    with (
        patch.object(settings, "python_env", "production"),
        patch.object(settings, "jwt_secret", "a-real-production-secret"),
        patch.object(settings, "payment_webhook_secret", "verify-secret"),
        patch.object(settings, "stripe_webhook_secret", "whsec_live"),
        patch.object(settings, "scheduler_enabled", False),
    ):
        yield settings


@pytest.fixture
def mock_connections():
    with (
        patch(f"{MAIN}.init_redis", new_callable=AsyncMock) as init_redis,
        patch(f"{MAIN}.init_db", new_callable=AsyncMock) as init_db,
        patch(f"{MAIN}.close_redis", new_callable=AsyncMock),
        patch(f"{MAIN}.close_db", new_callable=AsyncMock),
        patch(f"{MAIN}.stop_scheduler", new_callable=AsyncMock),
    ):
        yield init_redis, init_db


class TestProductionStartup:
    @pytest.mark.asyncio
    async def test_starts_with_all_secrets(self, production, mock_connections):
        init_redis, init_db = mock_connections
        async with lifespan(app):
            pass
        init_redis.assert_awaited_once()
        init_db.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_default_jwt_secret_refused(self, production, mock_connections):
        with patch.object(settings, "jwt_secret", DEFAULT_JWT_SECRET):
            with pytest.raises(RuntimeError, match="JWT_SECRET"):
                async with lifespan(app):
                    pass

    @pytest.mark.asyncio
    async def test_missing_payment_webhook_secret_refused(self, production, mock_connections):
        init_redis, _ = mock_connections
        with patch.object(settings, "payment_webhook_secret", None):
            with pytest.raises(RuntimeError, match="PAYMENT_WEBHOOK_SECRET"):
                async with lifespan(app):
                    pass
        init_redis.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_stripe_secret_still_starts(self, production, mock_connections):
        init_redis, _ = mock_connections
        with patch.object(settings, "stripe_webhook_secret", None):
            async with lifespan(app):
                pass
        init_redis.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_development_allows_missing_secrets(self, mock_connections):
        with (
            patch.object(settings, "python_env", "development"),
            patch.object(settings, "payment_webhook_secret", None),
            patch.object(settings, "scheduler_enabled", False),
        ):
            async with lifespan(app):
                pass
