"""
HTTP contract tests against the assembled application.

Database access is replaced through dependency overrides, so these tests
exercise routing, envelopes, authentication and error mapping only.
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.core.auth import CurrentUser, get_current_user
from app.core.config import settings
from app.core.database import get_db
from app.core.rate_limit import reset_memory_store
from app.main import app
from app.modules.subscriptions.plans import SubscriptionPlan
from app.modules.users.models import User, UserRole

STUDENT = CurrentUser(id=uuid4(), email="student@example.com", role="student")


async def _fake_db():
    yield AsyncMock()


@pytest.fixture
def client():
    reset_memory_store()
    app.dependency_overrides[get_db] = _fake_db
    # No context manager: the lifespan (database, redis, scheduler) is not started
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
    reset_memory_store()


@pytest.fixture
def as_student():
    app.dependency_overrides[get_current_user] = lambda: STUDENT
    yield STUDENT
    app.dependency_overrides.pop(get_current_user, None)


class TestServiceEndpoints:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "running"
        assert body["api"] == "/api/v1"

    def test_ready(self, client):
        assert client.get("/ready").json() == {"status": "ready"}

    def test_request_id_echoed(self, client):
        response = client.get("/ready", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"


class TestEnvelopes:
    def test_public_plans(self, client):
        response = client.get("/api/v1/subscriptions/plans")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        plans = {plan["id"]: plan for plan in body["data"]["plans"]}
        assert set(plans) == {"asia", "europe", "global"}
        assert plans["global"]["price"] == 100
        assert plans["global"]["popular"] is True

    def test_unknown_route(self, client):
        response = client.get("/api/v1/does-not-exist")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "NOT_FOUND"

    def test_method_not_allowed(self, client):
        response = client.delete("/api/v1/subscriptions/plans")

        assert response.status_code == 405
        assert response.json()["error"]["code"] == "METHOD_NOT_ALLOWED"

    def test_validation_error_shape(self, client):
        response = client.post("/api/v1/auth/register", json={"email": "not-an-email"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert isinstance(error["details"], list)
        assert all({"field", "message"} <= set(item) for item in error["details"])

    def test_malformed_path_id(self, client, as_student):
        response = client.get("/api/v1/applications/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestAuthentication:
    @pytest.mark.parametrize(
        "path",
        ["/api/v1/users/profile", "/api/v1/applications", "/api/v1/subscriptions/current"],
    )
    def test_token_required(self, client, path):
        response = client.get(path)

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_garbage_token(self, client):
        response = client.get("/api/v1/users/profile", headers={"Authorization": "Bearer nonsense"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_TOKEN"

    def test_admin_route_forbidden_for_students(self, client, as_student):
        response = client.get("/api/v1/admin/jobs")

        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_profile(self, client, as_student):
        account = User(
            id=STUDENT.id,
            full_name="Demo Student",
            email=STUDENT.email,
            password_hash="x",
            role=UserRole.STUDENT,
            is_active=True,
            subscription_type=SubscriptionPlan.FREE,
            free_applications_used=1,
            profile_complete=43,
        )
        with patch("app.modules.users.service.UserRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=account)
            response = client.get("/api/v1/users/profile")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["fullName"] == "Demo Student"
        assert data["subscriptionType"] == "free"
        assert data["freeApplicationsUsed"] == 1
        assert "passwordHash" not in data


class TestPublicCatalog:
    def test_countries(self, client):
        with patch(
            "app.modules.universities.service.repository.list_countries",
            new=AsyncMock(return_value=["Canada", "Germany"]),
        ):
            response = client.get("/api/v1/universities/filters/countries")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == {"countries": ["Canada", "Germany"]}


class TestPaymentWebhooks:
    def test_stripe_webhook_without_secret(self, client):
        with (
            patch.object(settings, "stripe_webhook_secret", None),
            patch("app.modules.payments.service.verify_payment", new_callable=AsyncMock) as mock_verify,
        ):
            response = client.post(
                "/api/v1/payments/webhook/stripe",
                content=b'{"type": "payment_intent.succeeded", "data": {"object": {}}}',
            )

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "WEBHOOK_NOT_CONFIGURED"
        mock_verify.assert_not_awaited()

    def test_stripe_webhook_bad_signature(self, client):
        with patch.object(settings, "stripe_webhook_secret", "whsec_test"):
            response = client.post(
                "/api/v1/payments/webhook/stripe",
                content=b'{"type": "payment_intent.succeeded"}',
                headers={"Stripe-Signature": "t=1,v1=deadbeef"},
            )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_SIGNATURE"

    def test_verify_in_production_without_secret(self, client):
        with (
            patch.object(settings, "payment_webhook_secret", None),
            patch.object(settings, "python_env", "production"),
        ):
            response = client.post("/api/v1/payments/verify", json={"paymentId": str(uuid4())})

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "WEBHOOK_NOT_CONFIGURED"
