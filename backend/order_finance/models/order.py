"""
订单模型

所有金额字段都以美元（基础货币）保存，两位小数；显示时再按汇率换算。

不变式：
- remaining_balance = total_amount - down_payment（不为负）
- total_profit = items_profit + shipping_profit（佣金是成本，不计入利润）
- total_amount = 商品小计 + shipping_cost + commission
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, DECIMAL
from sqlalchemy.orm import relationship
from order_finance.db.base import Base

# 订单状态
ORDER_STATUSES = (
    "pending",
    "processing",
    "shipped",
    "delivered",
    "cancelled",
    "partially_arrived",
    "ready_to_collect",
    "with_shipping_company",
)


class Order(Base):
    """订单"""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)

    # 单号（自动生成）
    # 格式：ORD{年月日}{序号}，如 ORD20241202001
    order_number = Column(String(50), unique=True, nullable=False, index=True, comment="订单号")

    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True, comment="客户ID")

    # 状态：见 ORDER_STATUSES
    status = Column(String(30), nullable=False, default="pending", index=True, comment="状态")

    # 金额（美元）
    total_amount = Column(DECIMAL(10, 2), nullable=False, default=Decimal("0.00"), comment="订单总额")
    down_payment = Column(DECIMAL(10, 2), nullable=False, default=Decimal("0.00"), comment="预付款")
    remaining_balance = Column(DECIMAL(10, 2), nullable=False, default=Decimal("0.00"), comment="剩余未付")

    # 运费
    shipping_cost = Column(DECIMAL(10, 2), nullable=False, default=Decimal("0.00"), comment="向客户收取的运费")
    # 承运商实际运费，为空表示尚未知道（此时运费利润记为 0）
    shipping_cost_actual = Column(DECIMAL(10, 2), comment="实际运费")
    shipping_weight = Column(DECIMAL(10, 2), nullable=False, default=Decimal("1.00"), comment="运输重量(kg)")
    shipping_country = Column(String(50), comment="运输国家（佣金档位按此匹配）")
    shipping_city = Column(String(50), comment="运输城市")
    shipping_category = Column(String(50), comment="运输类别")

    # 佣金与利润
    commission = Column(DECIMAL(10, 2), nullable=False, default=Decimal("0.00"), comment="佣金")
    items_profit = Column(DECIMAL(10, 2), nullable=False, default=Decimal("0.00"), comment="商品利润")
    shipping_profit = Column(DECIMAL(10, 2), nullable=False, default=Decimal("0.00"), comment="运费利润")
    total_profit = Column(DECIMAL(10, 2), nullable=False, default=Decimal("0.00"), comment="总利润")

    tracking_number = Column(String(100), comment="运单号")
    notes = Column(Text, comment="备注")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 关系
    customer = relationship("Customer", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Order {self.order_number} ({self.status})>"

    @property
    def status_display(self) -> str:
        """状态显示名称"""
        status_map = {
            "pending": "待处理",
            "processing": "处理中",
            "shipped": "已发货",
            "delivered": "已送达",
            "cancelled": "已取消",
            "partially_arrived": "部分到货",
            "ready_to_collect": "待取件",
            "with_shipping_company": "承运中",
        }
        return status_map.get(self.status, self.status)
