"""
Payment Service Layer

Payment creation, verification and gateway webhooks.

A verified payment activates its subscription. Verification is idempotent:
verifying an already completed payment reports success without touching the
subscription again.
"""

import hmac
import logging
from typing import Any
from uuid import UUID

import stripe
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import AppError, AuthenticationError, NotFoundError, ValidationFailedError
from app.core.pagination import Pagination
from app.modules.payments import repository
from app.modules.payments.models import Payment, PaymentStatus
from app.modules.payments.schemas import (
    CreatePaymentResponse,
    PaymentHistoryResponse,
    PaymentResponse,
    VerifyPaymentResponse,
)
from app.modules.shared import PaginationMeta
from app.modules.subscriptions import service as subscription_service
from app.modules.subscriptions.models import PaymentMethod, SubscriptionStatus

logger = logging.getLogger(__name__)


class AlreadyPaidError(AppError):
    def __init__(self):
        super().__init__(
            message="Subscription is already active",
            error_code="ALREADY_PAID",
            status_code=400,
        )


class PaymentNotFoundError(NotFoundError):
    def __init__(self, payment_id: UUID | None = None):
        super().__init__("Payment", payment_id)


class InvalidSignatureError(AuthenticationError):
    def __init__(self):
        super().__init__("Invalid webhook signature.", "INVALID_SIGNATURE")


class WebhookNotConfiguredError(AppError):
    def __init__(self, gateway: str):
        super().__init__(
            message=f"{gateway} webhook secret is not configured.",
            error_code="WEBHOOK_NOT_CONFIGURED",
            status_code=503,
        )


def _crypto_payment_uri(payment: Payment) -> str:
    """Payload the client renders as a QR code for wallet apps."""
    return (
        f"myxn:{settings.crypto_wallet_address}"
        f"?amount={payment.amount}&currency={payment.currency}&reference={payment.id}"
    )


async def create_payment(
    db: AsyncSession,
    user_id: UUID,
    subscription_id: UUID,
) -> CreatePaymentResponse:
    """
    Start (or resume) payment for one of the caller's pending subscriptions.

    The amount always comes from the subscription, never from the client.

    Raises:
        SubscriptionNotFoundError: Not the caller's subscription
        AlreadyPaidError: Subscription already active
    """
    subscription = await subscription_service.get_user_subscription(db, user_id, subscription_id)
    if subscription.status == SubscriptionStatus.ACTIVE:
        raise AlreadyPaidError()

    payment = await repository.get_pending_for_subscription(db, subscription.id)
    if payment is None:
        payment = await repository.create_payment(db, subscription)

    response = CreatePaymentResponse(
        payment_id=payment.id,
        payment_url=f"{settings.frontend_url}/payment/card/{payment.id}",
        payment_method=payment.payment_method,
        amount=float(payment.amount),
        currency=payment.currency,
    )
    if payment.payment_method == PaymentMethod.MYXN_TOKEN:
        response.payment_url = f"{settings.frontend_url}/payment/crypto/{payment.id}"
        response.wallet_address = settings.crypto_wallet_address
        response.qr_code = _crypto_payment_uri(payment)
    return response


def check_webhook_secret(provided: str | None) -> None:
    """
    Require the shared secret when one is configured.

    Production never runs unguarded: a missing secret rejects every call.
    """
    secret = settings.payment_webhook_secret
    if not secret:
        if settings.is_production:
            logger.error("Payment verification rejected: PAYMENT_WEBHOOK_SECRET is not set")
            raise WebhookNotConfiguredError("Payment")
        return
    if not provided or not hmac.compare_digest(provided, secret):
        logger.warning("Payment verification rejected: bad webhook secret")
        raise InvalidSignatureError()


async def verify_payment(
    db: AsyncSession,
    payment_id: UUID,
    transaction_hash: str | None = None,
    transaction_id: str | None = None,
) -> VerifyPaymentResponse:
    """
    Mark a payment completed and activate its subscription.

    Raises:
        PaymentNotFoundError: Unknown payment
    """
    payment = await repository.get_payment(db, payment_id)
    if payment is None:
        raise PaymentNotFoundError(payment_id)

    if payment.status == PaymentStatus.COMPLETED:
        return VerifyPaymentResponse(
            verified=True,
            message="Payment already verified",
            subscription_activated=True,
        )

    repository.mark_completed(payment, transaction_hash=transaction_hash, transaction_id=transaction_id)
    await db.commit()
    logger.info(f"Payment {payment.id} completed for subscription {payment.subscription_id}")

    subscription = payment.subscription
    activated = subscription.status == SubscriptionStatus.ACTIVE
    if subscription.status == SubscriptionStatus.PENDING:
        await subscription_service.activate_subscription(db, subscription)
        activated = True
    elif not activated:
        logger.warning(
            f"Payment {payment.id} completed but subscription {subscription.id} is {subscription.status.value}"
        )

    return VerifyPaymentResponse(
        verified=True,
        message="Payment verified successfully",
        subscription_activated=activated,
    )


async def payment_history(db: AsyncSession, user_id: UUID, pagination: Pagination) -> PaymentHistoryResponse:
    payments, total = await repository.list_user_payments(
        db, user_id, pagination.limit, pagination.offset
    )
    return PaymentHistoryResponse(
        payments=[
            PaymentResponse(
                id=p.id,
                amount=float(p.amount),
                currency=p.currency,
                payment_method=p.payment_method,
                status=p.status,
                transaction_id=p.transaction_id,
                transaction_hash=p.transaction_hash,
                plan_id=p.subscription.plan_type if p.subscription else None,
                created_at=p.created_at,
                completed_at=p.completed_at,
            )
            for p in payments
        ],
        pagination=PaginationMeta.build(pagination.page, pagination.limit, total),
    )


# ============================================
# Stripe webhook
# ============================================


def construct_stripe_event(payload: bytes, sig_header: str | None) -> dict[str, Any]:
    """
    Build a Stripe event from the raw request body and its `Stripe-Signature` header.

    Raises:
        WebhookNotConfiguredError: STRIPE_WEBHOOK_SECRET is not set
        InvalidSignatureError: Missing, stale or mismatched signature
        ValidationFailedError: Signed body is not a JSON event
    """
    secret = settings.stripe_webhook_secret
    if not secret:
        logger.error("Stripe webhook rejected: STRIPE_WEBHOOK_SECRET is not set")
        raise WebhookNotConfiguredError("Stripe")
    if not sig_header:
        raise InvalidSignatureError()

    try:
        event = stripe.Webhook.construct_event(payload=payload, sig_header=sig_header, secret=secret)
    except stripe.SignatureVerificationError as e:
        logger.warning(f"Stripe webhook rejected: {e}")
        raise InvalidSignatureError() from e
    except ValueError as e:
        raise ValidationFailedError("Webhook payload is not valid JSON.", "INVALID_PAYLOAD") from e
    return event.to_dict()


async def handle_stripe_event(db: AsyncSession, event: dict[str, Any]) -> None:
    """Apply the payment events we care about; everything else is acknowledged and ignored."""
    event_type = event.get("type")
    intent = (event.get("data") or {}).get("object") or {}
    raw_payment_id = (intent.get("metadata") or {}).get("paymentId")

    if event_type not in ("payment_intent.succeeded", "payment_intent.payment_failed"):
        logger.debug(f"Ignoring Stripe event {event_type}")
        return
    if not raw_payment_id:
        logger.warning(f"Stripe event {event_type} without paymentId metadata")
        return

    try:
        payment_id = UUID(str(raw_payment_id))
    except ValueError:
        logger.warning(f"Stripe event {event_type} with malformed paymentId")
        return

    if event_type == "payment_intent.succeeded":
        await verify_payment(db, payment_id, transaction_id=intent.get("id"))
        return

    payment = await repository.get_payment(db, payment_id)
    if payment is not None and payment.status == PaymentStatus.PENDING:
        error = intent.get("last_payment_error") or {}
        await repository.mark_failed(db, payment, error.get("message"))
        logger.info(f"Payment {payment.id} failed at gateway")
