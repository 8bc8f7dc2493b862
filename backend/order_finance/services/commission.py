"""
佣金档位解析

每个国家有一组按 min_value 升序排列的档位：
- 命中条件：min_value <= 金额 且 (max_value 为空 或 金额 < max_value)
- 多个档位同时命中（数据重叠）时，取 min_value 最大的档位
- 没有命中时抛出 NoRuleFound，由调用方决定是否使用默认比例

佣金 = round2(金额 × 比例 + 固定费用)
"""

import logging
from decimal import Decimal
from typing import Any, Iterable, Optional

from order_finance.core.config import settings
from order_finance.core.exceptions import NoRuleFound
from order_finance.schemas.finance import CommissionTier, CommissionResult
from order_finance.services.money import non_negative, round2, to_decimal

logger = logging.getLogger(__name__)


class CommissionResolver:
    """佣金档位解析器（持有档位表的不可变快照）"""

    def __init__(self, rules: Iterable[Any]):
        self._rules = tuple(
            rule if isinstance(rule, CommissionTier) else CommissionTier.model_validate(rule)
            for rule in rules
        )

    @property
    def rules(self):
        return self._rules

    def find_tier(self, country: str, value: Decimal) -> Optional[CommissionTier]:
        best = None
        for rule in self._rules:
            if rule.country != country:
                continue
            if rule.min_value > value:
                continue
            if rule.max_value is not None and value >= rule.max_value:
                continue
            # 下限相同的档位保留先出现的那个
            if best is None or rule.min_value > best.min_value:
                best = rule
        return best

    def resolve(self, country: str, value: Any) -> CommissionResult:
        """
        计算佣金

        Args:
            country: 国家（区分大小写的精确匹配）
            value: 订单计佣金额（不含佣金），必须 >= 0

        Returns:
            CommissionResult

        Raises:
            InvalidAmount: 金额为负数或不是数字
            NoRuleFound: 没有匹配的档位
        """
        amount = non_negative(value, "commission_value")
        tier = self.find_tier(country, amount)
        if tier is None:
            raise NoRuleFound(country, amount)

        commission_amount = round2(amount * tier.percentage + tier.fixed_fee)
        return CommissionResult(
            country=country,
            value=amount,
            percentage=tier.percentage,
            fixed_fee=tier.fixed_fee,
            commission_amount=commission_amount,
            rule_id=tier.id,
        )


def resolve_with_default(
    resolver: CommissionResolver,
    country: Optional[str],
    value: Any,
    default_rate: Any = None
) -> CommissionResult:
    """
    解析佣金，找不到档位时按默认比例计算

    默认比例属于业务策略，由调用方（订单保存、运费报价）负责
    """
    rate = to_decimal(default_rate if default_rate is not None else settings.DEFAULT_COMMISSION_RATE, "default_rate")
    try:
        return resolver.resolve(country or "", value)
    except NoRuleFound as e:
        logger.warning(f"⚠️ {e.message}，使用默认佣金比例 {rate}")
        amount = non_negative(value, "commission_value")
        return CommissionResult(
            country=country or "",
            value=amount,
            percentage=rate,
            fixed_fee=Decimal("0.00"),
            commission_amount=round2(amount * rate),
            is_default=True,
        )
