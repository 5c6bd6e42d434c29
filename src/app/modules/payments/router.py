"""
Payment Router
"""

import logging

from fastapi import APIRouter, Depends, Header, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.core.pagination import Pagination, get_pagination
from app.modules.payments import service
from app.modules.payments.schemas import (
    CreatePaymentRequest,
    CreatePaymentResponse,
    PaymentHistoryResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
    WebhookAck,
)
from app.modules.shared import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/create",
    response_model=ApiResponse[CreatePaymentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_payment(
    data: CreatePaymentRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[CreatePaymentResponse]:
    """
    Raises:
        404 SUBSCRIPTION_NOT_FOUND: Not the caller's subscription
        400 ALREADY_PAID: Subscription already active
    """
    return ApiResponse(data=await service.create_payment(db, user.id, data.subscription_id))


@router.post("/verify", response_model=ApiResponse[VerifyPaymentResponse])
async def verify_payment(
    data: VerifyPaymentRequest,
    db: AsyncSession = Depends(get_db),
    x_webhook_secret: str | None = Header(default=None),
) -> ApiResponse[VerifyPaymentResponse]:
    """
    Confirm a payment. Called by the payment gateway (or an operator).

    Guarded by the X-Webhook-Secret header when PAYMENT_WEBHOOK_SECRET is set.
    In production the secret is mandatory.
    """
    service.check_webhook_secret(x_webhook_secret)
    result = await service.verify_payment(db, data.payment_id, transaction_hash=data.transaction_hash)
    return ApiResponse(data=result)


@router.get("/history", response_model=ApiResponse[PaymentHistoryResponse])
async def payment_history(
    pagination: Pagination = Depends(get_pagination),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PaymentHistoryResponse]:
    return ApiResponse(data=await service.payment_history(db, user.id, pagination))


@router.post("/webhook/stripe", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    db: AsyncSession = Depends(get_db),
    stripe_signature: str | None = Header(default=None),
) -> WebhookAck:
    """Stripe expects a bare `{"received": true}` acknowledgement."""
    event = service.construct_stripe_event(await request.body(), stripe_signature)
    await service.handle_stripe_event(db, event)
    return WebhookAck()
