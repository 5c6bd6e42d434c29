"""
Fixtures for payment tests.
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.modules.payments.models import Payment, PaymentStatus
from app.modules.subscriptions.models import PaymentMethod, Subscription, SubscriptionStatus
from app.modules.subscriptions.plans import SubscriptionPlan


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
def subscription():
    sub = MagicMock(spec=Subscription)
    sub.id = uuid4()
    sub.user_id = uuid4()
    sub.plan_type = SubscriptionPlan.GLOBAL
    sub.amount = Decimal("100")
    sub.currency = "USD"
    sub.payment_method = PaymentMethod.CREDIT_CARD
    sub.status = SubscriptionStatus.PENDING
    return sub


@pytest.fixture
def payment(subscription):
    pay = MagicMock(spec=Payment)
    pay.id = uuid4()
    pay.user_id = subscription.user_id
    pay.subscription_id = subscription.id
    pay.subscription = subscription
    pay.amount = Decimal("100")
    pay.currency = "USD"
    pay.payment_method = PaymentMethod.CREDIT_CARD
    pay.status = PaymentStatus.PENDING
    return pay
