"""
Subscription Plans

The tier-to-feature table and the rules built on it: plan ordering,
date-based expiry, and the application allowance.

Plans rank free < asia < europe < global. A paid plan whose expiry date has
passed is treated as free everywhere a plan is evaluated.
"""

import enum
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

SUBSCRIPTION_DURATION_YEARS = 2
FREE_TIER_SEARCH_LIMIT = 5


class SubscriptionPlan(str, enum.Enum):
    """Subscription tiers, lowest first."""

    FREE = "free"
    ASIA = "asia"
    EUROPE = "europe"
    GLOBAL = "global"

    @property
    def level(self) -> int:
        return PLAN_LEVELS[self]

    @classmethod
    def parse(cls, value: "str | SubscriptionPlan | None") -> "SubscriptionPlan":
        """Resolve a plan name; unknown or empty values fall back to FREE."""
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.FREE


PLAN_LEVELS: dict[SubscriptionPlan, int] = {
    SubscriptionPlan.FREE: 0,
    SubscriptionPlan.ASIA: 1,
    SubscriptionPlan.EUROPE: 2,
    SubscriptionPlan.GLOBAL: 3,
}


@dataclass(frozen=True)
class PlanFeatures:
    """What a tier unlocks. `applications=None` means unlimited."""

    applications: int | None
    universities: str
    regions: tuple[str, ...]
    ai_support: str
    auto_scholarship_match: bool = False
    premium_support: bool = False
    uk_bonus: bool = False

    @property
    def unlimited_applications(self) -> bool:
        return self.applications is None


PLAN_FEATURES: dict[SubscriptionPlan, PlanFeatures] = {
    SubscriptionPlan.FREE: PlanFeatures(
        applications=3,
        universities="limited",
        regions=(),
        ai_support="basic",
    ),
    SubscriptionPlan.ASIA: PlanFeatures(
        applications=5,
        universities="full",
        regions=("Asia",),
        ai_support="full",
    ),
    SubscriptionPlan.EUROPE: PlanFeatures(
        applications=5,
        universities="full",
        regions=("Europe",),
        ai_support="full",
        uk_bonus=True,
    ),
    SubscriptionPlan.GLOBAL: PlanFeatures(
        applications=None,
        universities="full",
        regions=("Asia", "Europe", "North America", "UK", "Australia"),
        ai_support="premium",
        auto_scholarship_match=True,
        premium_support=True,
        uk_bonus=True,
    ),
}


@dataclass(frozen=True)
class PlanOffer:
    """A purchasable plan as shown on the pricing page."""

    id: SubscriptionPlan
    name: str
    price: Decimal
    description: str
    features: list[str] = field(default_factory=list)
    currency: str = "USD"
    duration: str = f"{SUBSCRIPTION_DURATION_YEARS} years"
    popular: bool = False


PLAN_CATALOG: dict[SubscriptionPlan, PlanOffer] = {
    SubscriptionPlan.ASIA: PlanOffer(
        id=SubscriptionPlan.ASIA,
        name="Asia Plan",
        price=Decimal("25"),
        description="Full access to universities across Asia",
        features=[
            "Apply to 5 universities",
            "Full university database for Asia",
            "AI study assistant",
            "Scholarship listings",
            "Email support",
        ],
    ),
    SubscriptionPlan.EUROPE: PlanOffer(
        id=SubscriptionPlan.EUROPE,
        name="Europe Plan",
        price=Decimal("50"),
        description="Full access to universities across Europe and the UK",
        features=[
            "Apply to 5 universities",
            "Full university database for Europe",
            "UK application bonus",
            "AI study assistant",
            "Scholarship listings",
            "Email support",
        ],
    ),
    SubscriptionPlan.GLOBAL: PlanOffer(
        id=SubscriptionPlan.GLOBAL,
        name="Global Plan",
        price=Decimal("100"),
        description="Unlimited worldwide access with premium support",
        popular=True,
        features=[
            "Unlimited applications",
            "Universities in every region",
            "Automatic scholarship matching",
            "Premium AI assistant",
            "Priority support",
            "UK application bonus",
        ],
    ),
}


def get_subscription_features(plan: str | SubscriptionPlan | None) -> PlanFeatures:
    """Features for a plan; unknown plans get the free tier."""
    return PLAN_FEATURES[SubscriptionPlan.parse(plan)]


def get_plan_offer(plan_id: str) -> PlanOffer | None:
    """Catalog entry for a purchasable plan, or None (free is not purchasable)."""
    return PLAN_CATALOG.get(SubscriptionPlan.parse(plan_id)) if plan_id else None


def has_plan_level(current: str | SubscriptionPlan, required: str | SubscriptionPlan) -> bool:
    return SubscriptionPlan.parse(current).level >= SubscriptionPlan.parse(required).level


def is_expired(expires_at: datetime | None, now: datetime | None = None) -> bool:
    if expires_at is None:
        return False
    now = now or datetime.now(UTC)
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    return expires_at <= now


def effective_plan(
    plan: str | SubscriptionPlan | None,
    expires_at: datetime | None,
    now: datetime | None = None,
) -> SubscriptionPlan:
    """
    The plan actually in force.

    Paid plans without an expiry date stay valid (granted manually); paid
    plans past their expiry date collapse to FREE.
    """
    parsed = SubscriptionPlan.parse(plan)
    if parsed is SubscriptionPlan.FREE:
        return parsed
    if is_expired(expires_at, now):
        return SubscriptionPlan.FREE
    return parsed


def can_submit_application(plan: str | SubscriptionPlan, submitted_count: int) -> bool:
    limit = get_subscription_features(plan).applications
    return limit is None or submitted_count < limit


def add_years(moment: datetime, years: int) -> datetime:
    """Add calendar years; 29 February maps to 28 February in non-leap years."""
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, day=28)


def subscription_expiry(starts_at: datetime) -> datetime:
    return add_years(starts_at, SUBSCRIPTION_DURATION_YEARS)
