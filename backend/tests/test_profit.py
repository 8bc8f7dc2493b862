from decimal import Decimal

import pytest

from order_finance.core.exceptions import IncompleteItemData
from order_finance.schemas.finance import ItemSnapshot, OrderSnapshot
from order_finance.services.commission import CommissionResolver
from order_finance.services.profit import (
    ProfitCalculator, compute_item_markup, compute_item_total, compute_order_totals
)


def test_item_helpers():
    assert compute_item_total(3, Decimal("19.99")) == Decimal("59.97")
    assert compute_item_markup(2, Decimal("25.00"), Decimal("20.00")) == Decimal("10.00")
    # 低于成本出售时利润为负
    assert compute_item_markup(1, Decimal("8.00"), Decimal("10.00")) == Decimal("-2.00")


def test_uk_order_scenario(tiers, two_items):
    """两件商品（加价利润 10 和 15），收取运费 20，实际运费 18，英国 15% 档位"""
    pre_commission = compute_order_totals(two_items, Decimal("20"), 0)
    assert pre_commission.total_amount == Decimal("200.00")

    commission = CommissionResolver(tiers).resolve("UK", pre_commission.total_amount)
    assert commission.commission_amount == Decimal("30.00")

    totals = compute_order_totals(two_items, Decimal("20"), commission.commission_amount)
    assert totals.items_subtotal == Decimal("180.00")
    assert totals.total_amount == Decimal("230.00")

    order = OrderSnapshot(shipping_cost=Decimal("20.00"))
    profit = ProfitCalculator().compute(order, two_items, Decimal("18.00"), commission.commission_amount)
    assert profit.items_profit == Decimal("25.00")
    assert profit.shipping_profit == Decimal("2.00")
    assert profit.total_profit == Decimal("27.00")
    assert profit.commission == Decimal("30.00")
    assert profit.shipping_profit_known


def test_unknown_actual_shipping_gives_zero_shipping_profit(two_items):
    profit = ProfitCalculator().compute(
        {"shipping_cost": Decimal("20.00")}, two_items, None, Decimal("30.00")
    )
    assert profit.shipping_profit == Decimal("0.00")
    assert profit.total_profit == Decimal("25.00")
    assert not profit.shipping_profit_known


def test_missing_markup_is_rejected():
    items = [
        ItemSnapshot(product_name="Bag", quantity=1, unit_price=Decimal("50")),
    ]
    with pytest.raises(IncompleteItemData) as exc:
        ProfitCalculator().compute({"shipping_cost": 0}, items, None, 0)
    assert exc.value.item_ref == "Bag"
    assert exc.value.field == "markup_profit"


def test_commission_is_not_profit(two_items):
    low = ProfitCalculator().compute({"shipping_cost": 10}, two_items, 10, Decimal("0"))
    high = ProfitCalculator().compute({"shipping_cost": 10}, two_items, 10, Decimal("99"))
    assert low.total_profit == high.total_profit == Decimal("25.00")


def test_empty_order_totals():
    totals = compute_order_totals([], Decimal("0"), Decimal("0"))
    assert totals.total_amount == Decimal("0.00")
