"""
Fixtures for authentication tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.core.security import hash_password
from app.modules.subscriptions.plans import SubscriptionPlan
from app.modules.users.models import User, UserRole

PASSWORD = "Passw0rdOK"


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
def user():
    return User(
        id=uuid4(),
        full_name="Amina Rahman",
        email="amina@example.com",
        password_hash=hash_password(PASSWORD),
        role=UserRole.STUDENT,
        is_active=True,
        subscription_type=SubscriptionPlan.FREE,
        subscription_expires_at=None,
        free_applications_used=0,
        profile_complete=40,
        created_at=datetime.now(UTC),
    )
