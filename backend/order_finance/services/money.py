"""
金额工具

- 所有金额使用 Decimal，保留两位小数
- 舍入方式：四舍五入（远离零），只在最终结果上做一次
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

from order_finance.core.exceptions import InvalidAmount

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def round2(value: Any) -> Decimal:
    """保留两位小数（ROUND_HALF_UP 即远离零舍入）"""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: Any, field: str = "amount") -> Decimal:
    """
    转换为 Decimal，不限制正负

    float 先转字符串，避免二进制浮点误差带入计算
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmount(field, value)
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise InvalidAmount(field, value)
    if not result.is_finite():
        raise InvalidAmount(field, value)
    return result


def non_negative(value: Any, field: str = "amount") -> Decimal:
    """边界校验：非负数，不做舍入"""
    result = to_decimal(value, field)
    if result < 0:
        raise InvalidAmount(field, value)
    return result


def to_money(value: Any, field: str = "amount") -> Decimal:
    """边界校验：非负金额，返回两位小数的 Decimal"""
    return round2(non_negative(value, field))


def parse_rate(raw: Optional[Any]) -> Decimal:
    """
    解析汇率设置（字符串形式的小数）

    为空或无法解析时返回 0，表示"未配置汇率"
    """
    if raw is None:
        return Decimal("0")
    if isinstance(raw, str) and not raw.strip():
        return Decimal("0")
    try:
        rate = to_decimal(raw, "exchange_rate")
    except InvalidAmount:
        logger.warning(f"汇率设置无法解析，按未配置处理: {raw!r}")
        return Decimal("0")
    return rate
