"""
Subscription Service Layer

Plan catalog, subscription creation and activation. Activation is shared with
the payments module, which activates a subscription once its payment clears.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser
from app.core.email import send_subscription_activated_email
from app.core.errors import AppError, NotFoundError, ValidationFailedError
from app.modules.payments.repository import has_completed_payment
from app.modules.subscriptions import repository
from app.modules.subscriptions.models import Subscription, SubscriptionStatus
from app.modules.subscriptions.plans import (
    PLAN_CATALOG,
    PlanOffer,
    get_plan_offer,
    get_subscription_features,
    is_expired,
    subscription_expiry,
)
from app.modules.subscriptions.schemas import (
    CreateSubscriptionRequest,
    CurrentSubscriptionResponse,
    FeaturesResponse,
)
from app.modules.users.models import User
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


class InvalidPlanError(ValidationFailedError):
    def __init__(self, plan_id: str):
        super().__init__(f"Unknown subscription plan: {plan_id}", "INVALID_PLAN")


class SubscriptionNotFoundError(NotFoundError):
    def __init__(self, subscription_id: UUID | None = None):
        super().__init__("Subscription", subscription_id)


class AlreadyActiveError(AppError):
    def __init__(self):
        super().__init__(
            message="Subscription is already active",
            error_code="ALREADY_ACTIVE",
            status_code=400,
        )


class PaymentRequiredError(AppError):
    def __init__(self):
        super().__init__(
            message="Complete payment before activating this subscription",
            error_code="PAYMENT_REQUIRED",
            status_code=400,
        )


class SubscriptionStateError(AppError):
    def __init__(self, status: SubscriptionStatus):
        super().__init__(
            message=f"A {status.value} subscription cannot be activated",
            error_code="INVALID_SUBSCRIPTION_STATE",
            status_code=400,
        )


def list_plans() -> list[PlanOffer]:
    return list(PLAN_CATALOG.values())


async def create_subscription(
    db: AsyncSession,
    user_id: UUID,
    data: CreateSubscriptionRequest,
) -> Subscription:
    """
    Create a PENDING subscription for a purchasable plan.

    Raises:
        InvalidPlanError: plan_id is not in the catalog (free is not purchasable)
    """
    offer = get_plan_offer(data.plan_id)
    if offer is None:
        raise InvalidPlanError(data.plan_id)

    return await repository.create_subscription(
        db,
        user_id=user_id,
        plan_type=offer.id,
        amount=offer.price,
        currency=offer.currency,
        payment_method=data.payment_method,
    )


async def list_user_subscriptions(db: AsyncSession, user_id: UUID) -> list[Subscription]:
    return await repository.list_user_subscriptions(db, user_id)


async def get_user_subscription(db: AsyncSession, user_id: UUID, subscription_id: UUID) -> Subscription:
    subscription = await repository.get_user_subscription(db, subscription_id, user_id)
    if subscription is None:
        raise SubscriptionNotFoundError(subscription_id)
    return subscription


def current_subscription(user: User) -> CurrentSubscriptionResponse:
    plan = user.current_plan
    return CurrentSubscriptionResponse(
        plan=plan,
        expires_at=user.subscription_expires_at,
        is_expired=plan != user.subscription_type or is_expired(user.subscription_expires_at),
        applications_used=user.free_applications_used,
        features=FeaturesResponse.from_features(get_subscription_features(plan)),
    )


async def activate_subscription(
    db: AsyncSession,
    subscription: Subscription,
    now: datetime | None = None,
) -> Subscription:
    """
    Start a subscription now, for the plan's fixed duration, and move the user onto it.

    Commits the transaction.

    Raises:
        AlreadyActiveError: Subscription already active
        SubscriptionStateError: Subscription expired or cancelled
    """
    if subscription.status == SubscriptionStatus.ACTIVE:
        raise AlreadyActiveError()
    if subscription.status != SubscriptionStatus.PENDING:
        raise SubscriptionStateError(subscription.status)

    starts_at = now or datetime.now(UTC)
    expires_at = subscription_expiry(starts_at)

    await repository.mark_active(db, subscription, starts_at, expires_at)
    await UserRepository.set_subscription(db, subscription.user_id, subscription.plan_type, expires_at)
    await db.commit()
    await db.refresh(subscription)

    logger.info(
        f"Subscription {subscription.id} activated: {subscription.plan_type.value} "
        f"for user {subscription.user_id} until {expires_at.date()}"
    )

    user = await UserRepository.get_by_id(db, subscription.user_id)
    if user is not None:
        offer = PLAN_CATALOG.get(subscription.plan_type)
        await send_subscription_activated_email(
            user.email,
            user.full_name,
            offer.name if offer else subscription.plan_type.value.title(),
            expires_at,
        )
    return subscription


async def activate_user_subscription(
    db: AsyncSession,
    user: CurrentUser,
    subscription_id: UUID,
) -> Subscription:
    """
    Activate on request. Owners need a completed payment; admins may
    activate any subscription (manual payments).

    Raises:
        SubscriptionNotFoundError: Unknown, or not the caller's
        PaymentRequiredError: No completed payment for the subscription
    """
    if user.is_admin:
        subscription = await repository.get_subscription(db, subscription_id)
        if subscription is None:
            raise SubscriptionNotFoundError(subscription_id)
    else:
        subscription = await get_user_subscription(db, user.id, subscription_id)
        if subscription.status == SubscriptionStatus.PENDING and not await has_completed_payment(
            db, subscription.id
        ):
            raise PaymentRequiredError()
    return await activate_subscription(db, subscription)
