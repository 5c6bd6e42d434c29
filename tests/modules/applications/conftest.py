"""
Fixtures for application tests.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.modules.applications.models import Application, ApplicationStatus
from app.modules.programs.models import Program
from app.modules.subscriptions.plans import SubscriptionPlan
from app.modules.universities.models import University
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
def make_user():
    def _make(plan: SubscriptionPlan = SubscriptionPlan.FREE) -> User:
        expires_at = None if plan is SubscriptionPlan.FREE else datetime.now(UTC) + timedelta(days=365)
        return User(
            id=uuid4(),
            full_name="Test Student",
            email="student@example.com",
            password_hash="x",
            role=UserRole.STUDENT,
            is_active=True,
            subscription_type=plan,
            subscription_expires_at=expires_at,
            free_applications_used=0,
        )

    return _make


@pytest.fixture
def university():
    uni = MagicMock(spec=University)
    uni.id = uuid4()
    uni.name = "University of Toronto"
    uni.country = "Canada"
    return uni


@pytest.fixture
def program(university):
    prog = MagicMock(spec=Program)
    prog.id = uuid4()
    prog.university_id = university.id
    prog.name = "Data Science"
    prog.level = "Master"
    return prog


@pytest.fixture
def make_application():
    def _make(status: ApplicationStatus = ApplicationStatus.SUBMITTED, user_id=None) -> Application:
        return Application(
            id=uuid4(),
            user_id=user_id or uuid4(),
            university_id=uuid4(),
            program_id=uuid4(),
            status=status,
        )

    return _make
