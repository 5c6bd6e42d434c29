"""
Subscription Repository
"""

import logging
from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.subscriptions.models import PaymentMethod, Subscription, SubscriptionStatus
from app.modules.subscriptions.plans import SubscriptionPlan

logger = logging.getLogger(__name__)


async def create_subscription(
    db: AsyncSession,
    *,
    user_id: UUID,
    plan_type: SubscriptionPlan,
    amount: Decimal,
    currency: str,
    payment_method: PaymentMethod,
) -> Subscription:
    subscription = Subscription(
        user_id=user_id,
        plan_type=plan_type,
        amount=amount,
        currency=currency,
        payment_method=payment_method,
        status=SubscriptionStatus.PENDING,
    )
    db.add(subscription)
    await db.commit()
    await db.refresh(subscription)
    logger.info(f"Created pending subscription {subscription.id} ({plan_type.value}) for user {user_id}")
    return subscription


async def get_subscription(db: AsyncSession, subscription_id: UUID) -> Subscription | None:
    result = await db.execute(select(Subscription).where(Subscription.id == subscription_id))
    return result.scalar_one_or_none()


async def get_user_subscription(
    db: AsyncSession,
    subscription_id: UUID,
    user_id: UUID,
) -> Subscription | None:
    """Owner-scoped lookup."""
    result = await db.execute(
        select(Subscription).where(
            Subscription.id == subscription_id,
            Subscription.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def list_user_subscriptions(db: AsyncSession, user_id: UUID) -> list[Subscription]:
    result = await db.execute(
        select(Subscription)
        .where(Subscription.user_id == user_id)
        .order_by(Subscription.created_at.desc())
    )
    return list(result.scalars().all())


async def mark_active(
    db: AsyncSession,
    subscription: Subscription,
    starts_at: datetime,
    expires_at: datetime,
) -> Subscription:
    """
    Activate a subscription and supersede the user's previously active ones.

    Caller commits.
    """
    await db.execute(
        update(Subscription)
        .where(
            Subscription.user_id == subscription.user_id,
            Subscription.status == SubscriptionStatus.ACTIVE,
            Subscription.id != subscription.id,
        )
        .values(status=SubscriptionStatus.CANCELLED)
    )
    subscription.status = SubscriptionStatus.ACTIVE
    subscription.starts_at = starts_at
    subscription.expires_at = expires_at
    return subscription


async def expire_lapsed(db: AsyncSession, now: datetime | None = None) -> int:
    """Mark ACTIVE subscriptions past expires_at as EXPIRED. Caller commits."""
    now = now or datetime.now(UTC)
    result = await db.execute(
        update(Subscription)
        .where(
            Subscription.status == SubscriptionStatus.ACTIVE,
            Subscription.expires_at <= now,
        )
        .values(status=SubscriptionStatus.EXPIRED)
    )
    return result.rowcount or 0
