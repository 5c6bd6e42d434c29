"""
Subscription Schemas
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.modules.shared import CamelModel
from app.modules.subscriptions.models import PaymentMethod, SubscriptionStatus
from app.modules.subscriptions.plans import PlanFeatures, PlanOffer, SubscriptionPlan


class PlanResponse(CamelModel):
    id: SubscriptionPlan
    name: str
    price: float
    currency: str
    duration: str
    description: str
    features: list[str]
    popular: bool = False

    @classmethod
    def from_offer(cls, offer: PlanOffer) -> "PlanResponse":
        return cls(
            id=offer.id,
            name=offer.name,
            price=float(offer.price),
            currency=offer.currency,
            duration=offer.duration,
            description=offer.description,
            features=offer.features,
            popular=offer.popular,
        )


class PlanListResponse(CamelModel):
    plans: list[PlanResponse]


class FeaturesResponse(CamelModel):
    applications: int | str
    universities: str
    regions: list[str]
    ai_support: str
    auto_scholarship_match: bool
    premium_support: bool
    uk_bonus: bool

    @classmethod
    def from_features(cls, features: PlanFeatures) -> "FeaturesResponse":
        return cls(
            applications="unlimited" if features.unlimited_applications else features.applications,
            universities=features.universities,
            regions=list(features.regions),
            ai_support=features.ai_support,
            auto_scholarship_match=features.auto_scholarship_match,
            premium_support=features.premium_support,
            uk_bonus=features.uk_bonus,
        )


class CreateSubscriptionRequest(CamelModel):
    plan_id: str = Field(..., min_length=1, max_length=20)
    payment_method: PaymentMethod


class SubscriptionResponse(CamelModel):
    id: UUID
    plan_type: SubscriptionPlan
    amount: float
    currency: str
    status: SubscriptionStatus
    payment_method: PaymentMethod
    starts_at: datetime | None = None
    expires_at: datetime | None = None
    created_at: datetime


class SubscriptionListResponse(CamelModel):
    subscriptions: list[SubscriptionResponse]


class CurrentSubscriptionResponse(CamelModel):
    plan: SubscriptionPlan
    expires_at: datetime | None = None
    is_expired: bool
    applications_used: int
    features: FeaturesResponse
