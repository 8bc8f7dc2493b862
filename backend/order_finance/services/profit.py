"""
订单利润计算

- 商品利润 = 各明细 markup_profit 之和（明细录入时确定，这里不重新计算）
- 运费利润 = 向客户收取的运费 - 承运商实际运费；实际运费未知时记为 0
- 总利润 = 商品利润 + 运费利润
- 佣金是转嫁给客户的成本，计入订单总额，但不计入利润
"""

from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence

from order_finance.core.exceptions import IncompleteItemData
from order_finance.schemas.finance import ItemSnapshot, OrderSnapshot, OrderTotals, ProfitBreakdown
from order_finance.services.money import ZERO, non_negative, round2, to_decimal, to_money


def _item_snapshot(item: Any) -> ItemSnapshot:
    if isinstance(item, ItemSnapshot):
        return item
    return ItemSnapshot.model_validate(item)


def _order_snapshot(order: Any) -> OrderSnapshot:
    if isinstance(order, OrderSnapshot):
        return order
    return OrderSnapshot.model_validate(order)


def compute_item_total(quantity: int, unit_price: Any) -> Decimal:
    """明细金额 = 数量 × 单价"""
    return round2(Decimal(quantity) * non_negative(unit_price, "unit_price"))


def compute_item_markup(quantity: int, selling_unit_price: Any, cost_unit_price: Any) -> Decimal:
    """
    明细加价利润 = (售价 - 成本价) × 数量

    在录入明细时调用一次，结果保存到 markup_profit
    """
    selling = non_negative(selling_unit_price, "selling_unit_price")
    cost = non_negative(cost_unit_price, "cost_unit_price")
    return round2((selling - cost) * Decimal(quantity))


def compute_order_totals(items: Iterable[Any], shipping_cost: Any, commission: Any) -> OrderTotals:
    """订单总额 = 商品小计 + 运费 + 佣金"""
    subtotal = ZERO
    for raw in items:
        item = _item_snapshot(raw)
        line_total = item.total_price
        if line_total is None:
            line_total = compute_item_total(item.quantity, item.unit_price)
        subtotal += round2(line_total)

    shipping = to_money(shipping_cost, "shipping_cost")
    commission_amount = to_money(commission, "commission")
    return OrderTotals(
        items_subtotal=round2(subtotal),
        shipping_cost=shipping,
        commission=commission_amount,
        total_amount=round2(subtotal + shipping + commission_amount),
    )


class ProfitCalculator:
    """订单利润计算器（纯计算，无副作用）"""

    def compute(
        self,
        order: Any,
        items: Sequence[Any],
        shipping_cost_actual: Optional[Any],
        commission: Any
    ) -> ProfitBreakdown:
        """
        计算商品利润、运费利润和总利润

        Args:
            order: 订单（需要 shipping_cost）
            items: 订单明细，每条必须有 markup_profit
            shipping_cost_actual: 承运商实际运费，None 表示未知
            commission: 订单佣金（只透传，不参与利润）

        Raises:
            IncompleteItemData: 有明细缺少 markup_profit
            InvalidAmount: 金额为负数或不是数字
        """
        snapshot = _order_snapshot(order)

        items_profit = ZERO
        for index, raw in enumerate(items):
            item = _item_snapshot(raw)
            if item.markup_profit is None:
                ref = item.id if item.id is not None else (item.product_name or f"#{index + 1}")
                raise IncompleteItemData(ref, "markup_profit")
            # 加价利润可以为负（低于成本出售）
            items_profit += round2(to_decimal(item.markup_profit, "markup_profit"))
        items_profit = round2(items_profit)

        shipping_known = shipping_cost_actual is not None
        if shipping_known:
            charged = to_money(snapshot.shipping_cost, "shipping_cost")
            actual = to_money(shipping_cost_actual, "shipping_cost_actual")
            shipping_profit = round2(charged - actual)
        else:
            shipping_profit = ZERO

        return ProfitBreakdown(
            items_profit=items_profit,
            shipping_profit=shipping_profit,
            total_profit=round2(items_profit + shipping_profit),
            commission=to_money(commission, "commission"),
            shipping_profit_known=shipping_known,
        )
