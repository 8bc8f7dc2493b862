"""
货币换算（仅用于显示）

- 汇率 <= 0 或未配置：原样显示美元
- 汇率 > 0：金额 × 汇率，保留两位小数，货币为目标货币（LYD）

注意：换算结果只能用于发票、报表等展示，绝不能写回订单字段。
汇率随时可能调整，不能因此改动历史财务记录。
"""

from decimal import Decimal
from typing import Any, Optional

from order_finance.core.config import settings
from order_finance.schemas.finance import DisplayAmount
from order_finance.services.money import parse_rate, round2, to_decimal


def to_display(usd_amount: Any, rate: Any, target_currency: Optional[str] = None) -> DisplayAmount:
    """将美元金额换算为显示金额"""
    amount = to_decimal(usd_amount, "usd_amount")
    rate = parse_rate(rate)
    if rate <= 0:
        return DisplayAmount(amount=amount, currency=settings.BASE_CURRENCY)
    return DisplayAmount(
        amount=round2(amount * rate),
        currency=target_currency or settings.DISPLAY_CURRENCY
    )


class CurrencyConverter:
    """
    一次渲染使用的汇率快照

    每次生成发票/报表时读取一次汇率设置，整个渲染过程共用这一份，
    渲染中途修改设置不会影响已开始的渲染
    """

    def __init__(self, rate: Any = None, target_currency: Optional[str] = None):
        self.rate = parse_rate(rate)
        self.target_currency = target_currency or settings.DISPLAY_CURRENCY

    @classmethod
    def from_setting(cls, raw_value: Optional[str], target_currency: Optional[str] = None) -> "CurrencyConverter":
        """从 settings 表中的字符串值构建"""
        return cls(parse_rate(raw_value), target_currency)

    @property
    def is_identity(self) -> bool:
        return self.rate <= 0

    @property
    def currency(self) -> str:
        """显示货币代码"""
        return settings.BASE_CURRENCY if self.is_identity else self.target_currency

    def to_display(self, usd_amount: Any) -> DisplayAmount:
        return to_display(usd_amount, self.rate, self.target_currency)

    def convert(self, usd_amount: Any) -> Decimal:
        """只返回换算后的金额"""
        return self.to_display(usd_amount).amount

    def __repr__(self):
        return f"<CurrencyConverter rate={self.rate} currency={self.currency}>"
