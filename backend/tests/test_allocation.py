from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from order_finance.core.exceptions import InvalidAmount, NothingToAllocate
from order_finance.schemas.finance import AllocatableOrder
from order_finance.services.allocation import PaymentAllocator


def make_orders(*totals):
    """按给定总额构造订单，创建时间依次递增"""
    return [
        AllocatableOrder(id=i + 1, total_amount=Decimal(str(t)), created_at=datetime(2024, 1, i + 1))
        for i, t in enumerate(totals)
    ]


def shares(result):
    return {line.order_id: line.down_payment for line in result.lines}


def test_proportional_split():
    result = PaymentAllocator().reallocate(1, make_orders(300, 700), Decimal("250"))
    assert shares(result) == {1: Decimal("75.00"), 2: Decimal("175.00")}
    assert [l.remaining_balance for l in result.lines] == [Decimal("225.00"), Decimal("525.00")]
    assert result.allocated_total == Decimal("250.00")


def test_remainder_goes_to_largest_order():
    # 100 / 3 → 33.33 × 3 = 99.99，差 0.01
    result = PaymentAllocator().reallocate(1, make_orders(10, 10, 10), Decimal("100"))
    total = sum(shares(result).values())
    assert total == Decimal("10.00") * 3  # 截断到订单总额

    result = PaymentAllocator().reallocate(1, make_orders(100, 100, 100), Decimal("100"))
    # 并列时取创建最早的订单
    assert shares(result) == {1: Decimal("33.34"), 2: Decimal("33.33"), 3: Decimal("33.33")}


def test_remainder_on_largest_not_first():
    result = PaymentAllocator().reallocate(1, make_orders(100, 200, 100), Decimal("10"))
    # 2.5 / 5 / 2.5 → 2.50 / 5.00 / 2.50，无分差
    assert sum(shares(result).values()) == Decimal("10.00")

    result = PaymentAllocator().reallocate(1, make_orders(1, 1, 1), Decimal("1"))
    assert shares(result) == {1: Decimal("0.34"), 2: Decimal("0.33"), 3: Decimal("0.33")}

    result = PaymentAllocator().reallocate(1, make_orders(1, 2, 1), Decimal("0.03"))
    # 0.0075 → 0.01，0.015 → 0.02，0.0075 → 0.01，合计 0.04，多出的 0.01 从最大订单扣回
    assert shares(result) == {1: Decimal("0.01"), 2: Decimal("0.01"), 3: Decimal("0.01")}


def test_request_above_total_is_clamped():
    result = PaymentAllocator().reallocate(1, make_orders(300, 700), Decimal("5000"))
    assert result.requested_total == Decimal("5000.00")
    assert result.allocated_total == Decimal("1000.00")
    assert shares(result) == {1: Decimal("300.00"), 2: Decimal("700.00")}
    assert all(l.remaining_balance == 0 for l in result.lines)


def test_zero_clears_down_payments():
    orders = [
        AllocatableOrder(id=1, total_amount=Decimal("50"), down_payment=Decimal("20")),
    ]
    result = PaymentAllocator().reallocate(1, orders, 0)
    assert result.lines[0].previous_down_payment == Decimal("20")
    assert result.lines[0].down_payment == Decimal("0.00")
    assert result.lines[0].remaining_balance == Decimal("50")


def test_sum_is_exact_for_awkward_totals():
    orders = make_orders("33.33", "66.67", "12.34", "0.01", "999.99")
    for amount in ("1", "17.77", "555.55", "1000"):
        result = PaymentAllocator().reallocate(1, orders, Decimal(amount))
        assert sum(shares(result).values()) == result.allocated_total
        for line in result.lines:
            assert 0 <= line.down_payment <= line.total_amount


def test_zero_total_orders_are_not_eligible():
    result = PaymentAllocator().reallocate(1, make_orders(0, 100), Decimal("40"))
    assert shares(result) == {1: Decimal("0.00"), 2: Decimal("40.00")}


def test_nothing_to_allocate():
    with pytest.raises(NothingToAllocate):
        PaymentAllocator().reallocate(7, [], Decimal("10"))
    with pytest.raises(NothingToAllocate) as exc:
        PaymentAllocator().reallocate(7, make_orders(0, 0), Decimal("10"))
    assert exc.value.customer_id == 7


def test_negative_request_is_rejected():
    with pytest.raises(InvalidAmount):
        PaymentAllocator().reallocate(1, make_orders(100), Decimal("-1"))


def test_mixed_timezone_created_at_ties():
    orders = [
        AllocatableOrder(id=1, total_amount=Decimal("100"), created_at=datetime(2024, 1, 1, 9, 0)),
        # 10:00+02:00 即 UTC 08:00，是最早的订单
        AllocatableOrder(id=2, total_amount=Decimal("100"),
                         created_at=datetime(2024, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))),
        AllocatableOrder(id=3, total_amount=Decimal("100"), created_at=None),
    ]
    result = PaymentAllocator().reallocate(1, orders, Decimal("100"))
    assert shares(result) == {1: Decimal("33.33"), 2: Decimal("33.34"), 3: Decimal("33.33")}
