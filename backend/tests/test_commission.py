from decimal import Decimal

import pytest

from order_finance.core.exceptions import InvalidAmount, NoRuleFound
from order_finance.schemas.finance import CommissionTier
from order_finance.services.commission import CommissionResolver, resolve_with_default


def test_min_is_inclusive_and_max_is_exclusive(tiers):
    resolver = CommissionResolver(tiers)

    below = resolver.resolve("UK", Decimal("99.99"))
    assert below.rule_id == 1
    assert below.commission_amount == Decimal("20.00")

    # 恰好等于上限时落入下一个档位
    at_boundary = resolver.resolve("UK", Decimal("100"))
    assert at_boundary.rule_id == 2
    assert at_boundary.commission_amount == Decimal("15.00")


def test_open_ended_tier_with_fixed_fee(tiers):
    result = CommissionResolver(tiers).resolve("UK", Decimal("2000"))
    assert result.rule_id == 3
    assert result.commission_amount == Decimal("205.00")
    assert not result.is_default


def test_zero_value_matches_first_tier(tiers):
    result = CommissionResolver(tiers).resolve("UK", 0)
    assert result.commission_amount == Decimal("0.00")
    assert result.rule_id == 1


def test_overlapping_tiers_pick_largest_min():
    resolver = CommissionResolver([
        CommissionTier(id=10, country="LY", min_value=Decimal("0"), max_value=None,
                       percentage=Decimal("0.10")),
        CommissionTier(id=11, country="LY", min_value=Decimal("50"), max_value=Decimal("500"),
                       percentage=Decimal("0.05")),
    ])
    assert resolver.resolve("LY", 100).rule_id == 11
    assert resolver.resolve("LY", 10).rule_id == 10


def test_country_match_is_exact(tiers):
    resolver = CommissionResolver(tiers)
    with pytest.raises(NoRuleFound) as exc:
        resolver.resolve("uk", 50)
    assert exc.value.country == "uk"


def test_gap_between_tiers_raises():
    resolver = CommissionResolver([
        CommissionTier(country="DE", min_value=Decimal("0"), max_value=Decimal("100"),
                       percentage=Decimal("0.1")),
        CommissionTier(country="DE", min_value=Decimal("200"), max_value=None,
                       percentage=Decimal("0.1")),
    ])
    with pytest.raises(NoRuleFound):
        resolver.resolve("DE", 150)


def test_negative_value_is_rejected(tiers):
    with pytest.raises(InvalidAmount):
        CommissionResolver(tiers).resolve("UK", -1)


def test_commission_rounds_only_at_the_end():
    resolver = CommissionResolver([
        CommissionTier(country="UK", min_value=Decimal("0"), percentage=Decimal("0.15")),
    ])
    # 0.15 × 33.335 = 5.00025 → 5.00
    assert resolver.resolve("UK", Decimal("33.335")).commission_amount == Decimal("5.00")


def test_default_rate_fallback(tiers):
    result = resolve_with_default(CommissionResolver(tiers), "FR", Decimal("200"))
    assert result.is_default
    assert result.percentage == Decimal("0.15")
    assert result.commission_amount == Decimal("30.00")
    assert result.rule_id is None


def test_resolver_keeps_its_snapshot(tiers):
    rules = list(tiers)
    resolver = CommissionResolver(rules)
    rules.clear()
    assert len(resolver.rules) == 4
