"""
Tests for the plan table and plan rules.
"""

from datetime import UTC, datetime, timedelta

from app.modules.subscriptions.plans import (
    PLAN_CATALOG,
    SubscriptionPlan,
    add_years,
    can_submit_application,
    effective_plan,
    get_plan_offer,
    get_subscription_features,
    has_plan_level,
    is_expired,
    subscription_expiry,
)


class TestSubscriptionPlan:
    def test_ordering(self):
        levels = [plan.level for plan in SubscriptionPlan]
        assert levels == sorted(levels)
        assert SubscriptionPlan.GLOBAL.level > SubscriptionPlan.EUROPE.level > SubscriptionPlan.ASIA.level

    def test_parse_is_case_insensitive(self):
        assert SubscriptionPlan.parse("Europe") is SubscriptionPlan.EUROPE

    def test_parse_unknown_falls_back_to_free(self):
        assert SubscriptionPlan.parse("platinum") is SubscriptionPlan.FREE
        assert SubscriptionPlan.parse(None) is SubscriptionPlan.FREE
        assert SubscriptionPlan.parse("") is SubscriptionPlan.FREE


class TestFeatures:
    def test_free_tier(self):
        features = get_subscription_features("free")
        assert features.applications == 3
        assert features.ai_support == "basic"
        assert features.auto_scholarship_match is False

    def test_regional_tiers_allow_five_applications(self):
        assert get_subscription_features("asia").applications == 5
        assert get_subscription_features("europe").applications == 5
        assert get_subscription_features("europe").uk_bonus is True

    def test_global_tier_is_unlimited(self):
        features = get_subscription_features(SubscriptionPlan.GLOBAL)
        assert features.unlimited_applications is True
        assert features.auto_scholarship_match is True
        assert features.premium_support is True

    def test_unknown_plan_gets_free_features(self):
        assert get_subscription_features("gold") == get_subscription_features("free")


class TestCatalog:
    def test_prices(self):
        assert [str(offer.price) for offer in PLAN_CATALOG.values()] == ["25", "50", "100"]

    def test_free_is_not_purchasable(self):
        assert get_plan_offer("free") is None
        assert get_plan_offer("") is None

    def test_lookup(self):
        assert get_plan_offer("global").popular is True


class TestPlanLevel:
    def test_higher_plan_satisfies_lower(self):
        assert has_plan_level("global", "asia") is True
        assert has_plan_level("europe", "europe") is True

    def test_lower_plan_fails(self):
        assert has_plan_level("asia", "global") is False
        assert has_plan_level("free", "asia") is False


class TestExpiry:
    def test_no_expiry_never_expires(self):
        assert is_expired(None) is False

    def test_past_date_is_expired(self):
        now = datetime(2026, 6, 1, tzinfo=UTC)
        assert is_expired(now - timedelta(seconds=1), now) is True
        assert is_expired(now, now) is True
        assert is_expired(now + timedelta(days=1), now) is False

    def test_naive_datetimes_are_treated_as_utc(self):
        now = datetime(2026, 6, 1, tzinfo=UTC)
        assert is_expired(datetime(2026, 5, 31), now) is True

    def test_effective_plan_collapses_expired_paid_plan(self):
        now = datetime(2026, 6, 1, tzinfo=UTC)
        assert effective_plan("global", now - timedelta(days=1), now) is SubscriptionPlan.FREE
        assert effective_plan("global", now + timedelta(days=1), now) is SubscriptionPlan.GLOBAL
        assert effective_plan("asia", None, now) is SubscriptionPlan.ASIA


class TestApplicationAllowance:
    def test_free_limit(self):
        assert can_submit_application("free", 2) is True
        assert can_submit_application("free", 3) is False

    def test_regional_limit(self):
        assert can_submit_application("asia", 4) is True
        assert can_submit_application("asia", 5) is False

    def test_global_unlimited(self):
        assert can_submit_application("global", 1000) is True


class TestDuration:
    def test_two_year_term(self):
        start = datetime(2026, 3, 15, 12, 0, tzinfo=UTC)
        assert subscription_expiry(start) == datetime(2028, 3, 15, 12, 0, tzinfo=UTC)

    def test_leap_day(self):
        assert add_years(datetime(2028, 2, 29, tzinfo=UTC), 1) == datetime(2029, 2, 28, tzinfo=UTC)
