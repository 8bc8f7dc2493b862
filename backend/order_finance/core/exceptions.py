"""
财务计算异常

所有异常只作用于单次计算，引擎内部不做重试：
- NoRuleFound: 佣金档位查找失败，调用方使用默认比例并记录日志
- IncompleteItemData: 明细缺少利润数据，拒绝保存订单
- NothingToAllocate: 没有可分配的订单，不做任何写入
- InvalidAmount: 金额为负数或不是数字，在进入计算前拒绝
- NoShippingRate: 找不到国家/类别对应的运费费率
"""

from typing import Any, Optional


class FinanceError(Exception):
    """财务计算异常基类"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoRuleFound(FinanceError):
    def __init__(self, country: str, value: Any):
        super().__init__(f"国家 {country!r} 没有匹配金额 {value} 的佣金档位")
        self.country = country
        self.value = value


class IncompleteItemData(FinanceError):
    def __init__(self, item_ref: Any, field: str = "markup_profit"):
        super().__init__(f"明细 {item_ref} 缺少 {field}，无法计算利润")
        self.item_ref = item_ref
        self.field = field


class NothingToAllocate(FinanceError):
    def __init__(self, customer_id: Optional[Any] = None):
        super().__init__(f"客户 {customer_id} 没有可分配预付款的订单")
        self.customer_id = customer_id


class InvalidAmount(FinanceError, ValueError):
    def __init__(self, field: str, value: Any):
        super().__init__(f"{field} 金额无效: {value!r}")
        self.field = field
        self.value = value


class NoShippingRate(FinanceError):
    def __init__(self, country: str, category: str):
        super().__init__(f"没有 {country}/{category} 的运费费率")
        self.country = country
        self.category = category
