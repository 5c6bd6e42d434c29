"""
Unit tests for the subscription service layer.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from app.core.auth import CurrentUser
from app.modules.subscriptions.models import PaymentMethod, SubscriptionStatus
from app.modules.subscriptions.plans import SubscriptionPlan
from app.modules.subscriptions.schemas import CreateSubscriptionRequest
from app.modules.subscriptions.service import (
    AlreadyActiveError,
    InvalidPlanError,
    PaymentRequiredError,
    SubscriptionNotFoundError,
    SubscriptionStateError,
    activate_subscription,
    activate_user_subscription,
    create_subscription,
    current_subscription,
    list_plans,
)

SERVICE = "app.modules.subscriptions.service"


class TestListPlans:
    def test_three_paid_plans(self):
        assert [offer.id for offer in list_plans()] == [
            SubscriptionPlan.ASIA,
            SubscriptionPlan.EUROPE,
            SubscriptionPlan.GLOBAL,
        ]


class TestCreateSubscription:
    @pytest.mark.asyncio
    async def test_creates_pending_subscription_at_catalog_price(self, mock_db, pending_subscription):
        user_id = uuid4()
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.create_subscription = AsyncMock(return_value=pending_subscription)

            result = await create_subscription(
                mock_db,
                user_id,
                CreateSubscriptionRequest(plan_id="europe", payment_method=PaymentMethod.MYXN_TOKEN),
            )

        assert result is pending_subscription
        kwargs = mock_repo.create_subscription.call_args.kwargs
        assert kwargs["user_id"] == user_id
        assert kwargs["plan_type"] is SubscriptionPlan.EUROPE
        assert str(kwargs["amount"]) == "50"
        assert kwargs["payment_method"] is PaymentMethod.MYXN_TOKEN

    @pytest.mark.asyncio
    @pytest.mark.parametrize("plan_id", ["free", "platinum"])
    async def test_rejects_unknown_or_free_plan(self, mock_db, plan_id):
        with pytest.raises(InvalidPlanError) as exc_info:
            await create_subscription(
                mock_db,
                uuid4(),
                CreateSubscriptionRequest(plan_id=plan_id, payment_method=PaymentMethod.CREDIT_CARD),
            )
        assert exc_info.value.error_code == "INVALID_PLAN"


class TestActivateSubscription:
    @pytest.mark.asyncio
    async def test_activation_sets_two_year_term(self, mock_db, pending_subscription):
        now = datetime(2026, 1, 10, tzinfo=UTC)
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.UserRepository") as mock_users,
            patch(f"{SERVICE}.send_subscription_activated_email", new_callable=AsyncMock) as mock_email,
        ):
            mock_repo.mark_active = AsyncMock()
            mock_users.set_subscription = AsyncMock()
            mock_users.get_by_id = AsyncMock(return_value=None)

            await activate_subscription(mock_db, pending_subscription, now=now)

        expected_expiry = datetime(2028, 1, 10, tzinfo=UTC)
        mock_repo.mark_active.assert_awaited_once_with(mock_db, pending_subscription, now, expected_expiry)
        mock_users.set_subscription.assert_awaited_once_with(
            mock_db, pending_subscription.user_id, SubscriptionPlan.ASIA, expected_expiry
        )
        mock_db.commit.assert_awaited_once()
        mock_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_already_active(self, mock_db, pending_subscription):
        pending_subscription.status = SubscriptionStatus.ACTIVE
        with pytest.raises(AlreadyActiveError) as exc_info:
            await activate_subscription(mock_db, pending_subscription)
        assert exc_info.value.error_code == "ALREADY_ACTIVE"
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cancelled_cannot_activate(self, mock_db, pending_subscription):
        pending_subscription.status = SubscriptionStatus.CANCELLED
        with pytest.raises(SubscriptionStateError):
            await activate_subscription(mock_db, pending_subscription)


class TestActivateUserSubscription:
    @pytest.mark.asyncio
    async def test_owner_needs_completed_payment(self, mock_db, pending_subscription):
        student = CurrentUser(id=pending_subscription.user_id, email="s@example.com", role="student")
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.has_completed_payment", AsyncMock(return_value=False)),
        ):
            mock_repo.get_user_subscription = AsyncMock(return_value=pending_subscription)

            with pytest.raises(PaymentRequiredError) as exc_info:
                await activate_user_subscription(mock_db, student, pending_subscription.id)

        assert exc_info.value.error_code == "PAYMENT_REQUIRED"

    @pytest.mark.asyncio
    async def test_owner_with_payment_activates(self, mock_db, pending_subscription):
        student = CurrentUser(id=pending_subscription.user_id, email="s@example.com", role="student")
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.has_completed_payment", AsyncMock(return_value=True)),
            patch(f"{SERVICE}.activate_subscription", AsyncMock(return_value=pending_subscription)) as mock_activate,
        ):
            mock_repo.get_user_subscription = AsyncMock(return_value=pending_subscription)

            result = await activate_user_subscription(mock_db, student, pending_subscription.id)

        assert result is pending_subscription
        mock_activate.assert_awaited_once_with(mock_db, pending_subscription)

    @pytest.mark.asyncio
    async def test_other_users_subscription_not_found(self, mock_db):
        student = CurrentUser(id=uuid4(), email="s@example.com", role="student")
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_user_subscription = AsyncMock(return_value=None)

            with pytest.raises(SubscriptionNotFoundError):
                await activate_user_subscription(mock_db, student, uuid4())

    @pytest.mark.asyncio
    async def test_admin_skips_payment_check(self, mock_db, pending_subscription):
        admin = CurrentUser(id=uuid4(), email="admin@example.com", role="admin")
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.has_completed_payment", AsyncMock(return_value=False)) as mock_paid,
            patch(f"{SERVICE}.activate_subscription", AsyncMock(return_value=pending_subscription)),
        ):
            mock_repo.get_subscription = AsyncMock(return_value=pending_subscription)

            await activate_user_subscription(mock_db, admin, pending_subscription.id)

        mock_paid.assert_not_awaited()


class TestCurrentSubscription:
    def test_expired_plan_reports_free(self, make_user, past):
        response = current_subscription(make_user(SubscriptionPlan.ASIA, past))

        assert response.plan is SubscriptionPlan.FREE
        assert response.is_expired is True
        assert response.features.applications == 3

    def test_active_global_plan(self, make_user, future):
        response = current_subscription(make_user(SubscriptionPlan.GLOBAL, future))

        assert response.plan is SubscriptionPlan.GLOBAL
        assert response.is_expired is False
        assert response.features.applications == "unlimited"
