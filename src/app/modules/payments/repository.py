"""
Payment Repository
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.models import Payment, PaymentStatus
from app.modules.subscriptions.models import Subscription

logger = logging.getLogger(__name__)


async def create_payment(db: AsyncSession, subscription: Subscription) -> Payment:
    """Pending payment for the subscription's full amount."""
    payment = Payment(
        user_id=subscription.user_id,
        subscription_id=subscription.id,
        amount=subscription.amount,
        currency=subscription.currency,
        payment_method=subscription.payment_method,
        status=PaymentStatus.PENDING,
        payment_data={},
    )
    db.add(payment)
    await db.commit()
    await db.refresh(payment)
    logger.info(f"Created payment {payment.id} for subscription {subscription.id}")
    return payment


async def get_payment(db: AsyncSession, payment_id: UUID) -> Payment | None:
    result = await db.execute(select(Payment).where(Payment.id == payment_id))
    return result.scalar_one_or_none()


async def get_pending_for_subscription(db: AsyncSession, subscription_id: UUID) -> Payment | None:
    result = await db.execute(
        select(Payment)
        .where(
            Payment.subscription_id == subscription_id,
            Payment.status == PaymentStatus.PENDING,
        )
        .order_by(Payment.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def has_completed_payment(db: AsyncSession, subscription_id: UUID) -> bool:
    result = await db.execute(
        select(func.count())
        .select_from(Payment)
        .where(
            Payment.subscription_id == subscription_id,
            Payment.status == PaymentStatus.COMPLETED,
        )
    )
    return result.scalar_one() > 0


async def list_user_payments(
    db: AsyncSession,
    user_id: UUID,
    limit: int,
    offset: int,
) -> tuple[list[Payment], int]:
    total = (
        await db.execute(select(func.count()).select_from(Payment).where(Payment.user_id == user_id))
    ).scalar_one()
    result = await db.execute(
        select(Payment)
        .where(Payment.user_id == user_id)
        .order_by(Payment.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all()), total


def mark_completed(
    payment: Payment,
    transaction_hash: str | None = None,
    transaction_id: str | None = None,
) -> Payment:
    """Caller commits."""
    payment.status = PaymentStatus.COMPLETED
    payment.completed_at = datetime.now(UTC)
    if transaction_hash:
        payment.transaction_hash = transaction_hash
    if transaction_id:
        payment.transaction_id = transaction_id
    return payment


async def mark_failed(db: AsyncSession, payment: Payment, reason: str | None = None) -> Payment:
    payment.status = PaymentStatus.FAILED
    payment.payment_data = {**(payment.payment_data or {}), "failureReason": reason}
    await db.commit()
    await db.refresh(payment)
    return payment
