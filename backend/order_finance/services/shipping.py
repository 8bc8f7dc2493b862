"""
运费报价

运费 = 每公斤单价 × 重量；同时按订单金额计算佣金（找不到档位时用默认比例）
"""

from decimal import Decimal
from typing import Any, Iterable, Optional

from order_finance.core.exceptions import InvalidAmount, NoShippingRate
from order_finance.schemas.finance import ShippingQuote, ShippingRateSnapshot
from order_finance.services.commission import CommissionResolver, resolve_with_default
from order_finance.services.money import non_negative, round2


class ShippingCalculator:
    """运费计算器（持有运费费率表和佣金档位表的快照）"""

    def __init__(
        self,
        rates: Iterable[Any],
        resolver: CommissionResolver,
        default_commission_rate: Optional[Any] = None
    ):
        self._rates = tuple(
            r if isinstance(r, ShippingRateSnapshot) else ShippingRateSnapshot.model_validate(r)
            for r in rates
        )
        self.resolver = resolver
        self.default_commission_rate = default_commission_rate

    def find_rate(self, country: str, category: str) -> ShippingRateSnapshot:
        for rate in self._rates:
            if rate.country == country and rate.category == category:
                return rate
        raise NoShippingRate(country, category)

    def quote(self, country: str, category: str, weight: Any, order_value: Any) -> ShippingQuote:
        """
        计算运费报价

        Raises:
            InvalidAmount: 重量 <= 0 或订单金额为负
            NoShippingRate: 没有对应的费率
        """
        weight = non_negative(weight, "weight")
        if weight == 0:
            raise InvalidAmount("weight", weight)
        value = non_negative(order_value, "order_value")

        rate = self.find_rate(country, category)
        base_shipping = round2(rate.price_per_kg * weight)
        commission = resolve_with_default(
            self.resolver, country, value, self.default_commission_rate
        )

        return ShippingQuote(
            country=country,
            category=category,
            weight=weight,
            price_per_kg=rate.price_per_kg,
            currency=rate.currency,
            base_shipping=base_shipping,
            commission=commission.commission_amount,
            commission_rate=commission.percentage,
            commission_is_default=commission.is_default,
            total=round2(base_shipping + commission.commission_amount),
        )
