"""
利润 / 佣金报表

汇总全部在美元上进行，输出时用同一个汇率快照统一换算为显示货币
"""

from collections import OrderedDict
from decimal import Decimal
from typing import Any, Iterable, List, Optional

from order_finance.core.config import settings
from order_finance.schemas.finance import CommissionTier
from order_finance.schemas.report import (
    ReportOrderRow, ProfitReport, ProfitReportLine,
    CommissionReport, CountryCommissionLine, CommissionRuleLine
)
from order_finance.services.currency import CurrencyConverter
from order_finance.services.money import ZERO, round2, to_decimal

UNKNOWN_COUNTRY = "unknown"


def _rows(rows: Iterable[Any]) -> List[ReportOrderRow]:
    return [r if isinstance(r, ReportOrderRow) else ReportOrderRow.model_validate(r) for r in rows]


def profit_margin(profit: Decimal, revenue: Decimal) -> Decimal:
    """利润率（百分比），营收为 0 时返回 0"""
    if revenue <= 0:
        return ZERO
    return round2(profit / revenue * 100)


def build_profit_report(
    rows: Iterable[Any],
    converter: Optional[CurrencyConverter] = None,
    include_orders: bool = True
) -> ProfitReport:
    """生成利润报表"""
    converter = converter or CurrencyConverter()
    orders = _rows(rows)

    revenue = sum((o.total_amount for o in orders), ZERO)
    total_profit = sum((o.total_profit for o in orders), ZERO)
    items_profit = sum((o.items_profit for o in orders), ZERO)
    shipping_profit = sum((o.shipping_profit for o in orders), ZERO)
    commission = sum((o.commission for o in orders), ZERO)

    dates = [o.created_at for o in orders if o.created_at]

    lines = []
    if include_orders:
        lines = [
            ProfitReportLine(
                id=o.id,
                order_number=o.order_number,
                customer_name=o.customer_name,
                shipping_code=o.shipping_code or o.order_number,
                country=o.country or UNKNOWN_COUNTRY,
                total_amount=converter.convert(o.total_amount),
                items_profit=converter.convert(o.items_profit),
                shipping_profit=converter.convert(o.shipping_profit),
                total_profit=converter.convert(o.total_profit),
                created_at=o.created_at,
            )
            for o in orders
        ]

    return ProfitReport(
        currency=converter.currency,
        exchange_rate=converter.rate,
        total_revenue=converter.convert(revenue),
        total_profit=converter.convert(total_profit),
        total_items_profit=converter.convert(items_profit),
        total_shipping_profit=converter.convert(shipping_profit),
        total_commission=converter.convert(commission),
        # 利润率与币种无关，用美元计算
        profit_margin=profit_margin(total_profit, revenue),
        order_count=len(orders),
        period_start=min(dates) if dates else None,
        period_end=max(dates) if dates else None,
        orders=lines,
    )


def build_commission_report(
    rows: Iterable[Any],
    rules: Iterable[Any] = (),
    converter: Optional[CurrencyConverter] = None,
    default_rate: Any = None
) -> CommissionReport:
    """生成佣金报表（按国家汇总）"""
    converter = converter or CurrencyConverter()
    default_rate = to_decimal(
        default_rate if default_rate is not None else settings.DEFAULT_COMMISSION_RATE,
        "default_rate"
    )
    orders = _rows(rows)

    buckets = OrderedDict()
    for o in orders:
        country = o.country or UNKNOWN_COUNTRY
        bucket = buckets.setdefault(country, {"revenue": ZERO, "commission": ZERO, "count": 0})
        bucket["revenue"] += o.total_amount
        bucket["commission"] += o.commission
        bucket["count"] += 1

    countries = []
    for country, b in buckets.items():
        if b["revenue"] > 0:
            rate = (b["commission"] / b["revenue"]).quantize(Decimal("0.0001"))
        else:
            rate = default_rate
        countries.append(CountryCommissionLine(
            country=country,
            revenue=converter.convert(b["revenue"]),
            commission=converter.convert(b["commission"]),
            commission_rate=rate,
            order_count=b["count"],
        ))
    countries.sort(key=lambda c: c.revenue, reverse=True)

    rule_lines = []
    for raw in rules:
        tier = raw if isinstance(raw, CommissionTier) else CommissionTier.model_validate(raw)
        rule_lines.append(CommissionRuleLine(
            id=tier.id,
            country=tier.country,
            min_value=tier.min_value,
            max_value=tier.max_value,
            percentage=tier.percentage,
            fixed_fee=tier.fixed_fee,
        ))
    rule_lines.sort(key=lambda r: (r.country, r.min_value))

    return CommissionReport(
        currency=converter.currency,
        exchange_rate=converter.rate,
        total_revenue=converter.convert(sum((o.total_amount for o in orders), ZERO)),
        total_commission=converter.convert(sum((o.commission for o in orders), ZERO)),
        order_count=len(orders),
        countries=countries,
        rules=rule_lines,
    )
