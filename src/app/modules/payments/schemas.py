"""
Payment Schemas
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.modules.shared import CamelModel, PaginationMeta
from app.modules.subscriptions.models import PaymentMethod
from app.modules.subscriptions.plans import SubscriptionPlan
from app.modules.payments.models import PaymentStatus


class CreatePaymentRequest(CamelModel):
    subscription_id: UUID


class CreatePaymentResponse(CamelModel):
    payment_id: UUID
    payment_url: str
    payment_method: PaymentMethod
    amount: float
    currency: str
    wallet_address: str | None = None
    qr_code: str | None = None


class VerifyPaymentRequest(CamelModel):
    payment_id: UUID
    transaction_hash: str | None = Field(default=None, max_length=255)


class VerifyPaymentResponse(CamelModel):
    verified: bool
    message: str
    subscription_activated: bool


class PaymentResponse(CamelModel):
    id: UUID
    amount: float
    currency: str
    payment_method: PaymentMethod
    status: PaymentStatus
    transaction_id: str | None = None
    transaction_hash: str | None = None
    plan_id: SubscriptionPlan | None = None
    created_at: datetime
    completed_at: datetime | None = None


class PaymentHistoryResponse(CamelModel):
    payments: list[PaymentResponse]
    pagination: PaginationMeta


class WebhookAck(CamelModel):
    received: bool = True
