# 数据模型
# 订单财务相关：客户 → 订单 → 明细，佣金档位、运费费率、系统设置

from order_finance.models.customer import Customer
from order_finance.models.order import Order, ORDER_STATUSES
from order_finance.models.order_item import OrderItem
from order_finance.models.commission_rule import CommissionRule
from order_finance.models.shipping_rate import ShippingRate
from order_finance.models.setting import Setting

__all__ = [
    "Customer",
    "Order",
    "ORDER_STATUSES",
    "OrderItem",
    "CommissionRule",
    "ShippingRate",
    "Setting",
]
