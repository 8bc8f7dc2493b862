from decimal import Decimal

import pytest

from order_finance.core.exceptions import InvalidAmount
from order_finance.services.currency import CurrencyConverter, to_display
from order_finance.services.money import parse_rate, round2, to_decimal, to_money


def test_round2_rounds_half_away_from_zero():
    assert round2(Decimal("2.345")) == Decimal("2.35")
    assert round2(Decimal("2.344")) == Decimal("2.34")
    assert round2(Decimal("-2.345")) == Decimal("-2.35")
    assert round2(0.1 + 0.2) == Decimal("0.30")


@pytest.mark.parametrize("value", [None, "abc", "NaN", "Infinity", True])
def test_to_decimal_rejects_garbage(value):
    with pytest.raises(InvalidAmount):
        to_decimal(value)


def test_to_money_rejects_negative():
    with pytest.raises(InvalidAmount) as exc:
        to_money("-0.01", "shipping_cost")
    assert exc.value.field == "shipping_cost"
    # 同时也是 ValueError
    assert isinstance(exc.value, ValueError)


def test_parse_rate_treats_blank_and_garbage_as_unset():
    assert parse_rate(None) == 0
    assert parse_rate("  ") == 0
    assert parse_rate("not-a-number") == 0
    assert parse_rate("5.25") == Decimal("5.25")


def test_to_display_identity_when_rate_not_positive():
    for rate in (0, "0", None, "-3"):
        shown = to_display(Decimal("123.456"), rate)
        # 未配置汇率时原样返回，不做舍入
        assert shown.amount == Decimal("123.456")
        assert shown.currency == "USD"


def test_to_display_converts_with_rate():
    shown = to_display(100, Decimal("5.0"))
    assert shown.amount == Decimal("500.00")
    assert shown.currency == "LYD"
    assert str(shown) == "LYD 500.00"


def test_to_display_rounds_once_after_multiplying():
    # 10.005 × 3 = 30.015 → 30.02（先舍入再乘会得到 30.03）
    assert to_display(Decimal("10.005"), 3).amount == Decimal("30.02")


def test_converter_snapshot():
    converter = CurrencyConverter.from_setting("4.8")
    assert not converter.is_identity
    assert converter.currency == "LYD"
    assert converter.convert(Decimal("10")) == Decimal("48.00")

    identity = CurrencyConverter.from_setting(None)
    assert identity.is_identity
    assert identity.currency == "USD"
    assert identity.convert(Decimal("10")) == Decimal("10.00")
