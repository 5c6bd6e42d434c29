"""
Fixtures for subscription tests.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.modules.subscriptions.models import PaymentMethod, Subscription, SubscriptionStatus
from app.modules.subscriptions.plans import SubscriptionPlan
from app.modules.users.models import User, UserRole


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def pending_subscription():
    subscription = MagicMock(spec=Subscription)
    subscription.id = uuid4()
    subscription.user_id = uuid4()
    subscription.plan_type = SubscriptionPlan.ASIA
    subscription.amount = Decimal("25")
    subscription.currency = "USD"
    subscription.payment_method = PaymentMethod.CREDIT_CARD
    subscription.status = SubscriptionStatus.PENDING
    subscription.starts_at = None
    subscription.expires_at = None
    return subscription


@pytest.fixture
def make_user():
    def _make(
        plan: SubscriptionPlan = SubscriptionPlan.FREE,
        expires_at: datetime | None = None,
        role: UserRole = UserRole.STUDENT,
    ) -> User:
        return User(
            id=uuid4(),
            full_name="Test Student",
            email="student@example.com",
            password_hash="x",
            role=role,
            is_active=True,
            subscription_type=plan,
            subscription_expires_at=expires_at,
            free_applications_used=0,
        )

    return _make


@pytest.fixture
def past() -> datetime:
    return datetime.now(UTC) - timedelta(days=1)


@pytest.fixture
def future() -> datetime:
    return datetime.now(UTC) + timedelta(days=30)
