"""
订单明细模型

markup_profit 在录入明细时确定：(售价 - 成本价) × 数量；
为空表示数据不完整，利润计算会拒绝这样的订单
"""

from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, ForeignKey, DECIMAL
from sqlalchemy.orm import relationship
from order_finance.db.base import Base


class OrderItem(Base):
    """订单明细 - 随订单级联删除"""
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)

    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)

    product_name = Column(String(200), nullable=False, comment="商品名称")
    product_code = Column(String(50), comment="商品编码")
    product_url = Column(Text, comment="商品链接")

    quantity = Column(Integer, nullable=False, default=1, comment="数量")
    number_of_pieces = Column(Integer, nullable=False, default=1, comment="件数")

    # 单价 = 向客户收取的单价
    unit_price = Column(DECIMAL(10, 2), nullable=False, default=Decimal("0.00"), comment="单价")
    original_price = Column(DECIMAL(10, 2), comment="原价（售价）")
    discounted_price = Column(DECIMAL(10, 2), comment="折扣价（采购成本）")
    markup_profit = Column(DECIMAL(10, 2), comment="加价利润")

    # 金额 = 数量 × 单价
    total_price = Column(DECIMAL(10, 2), nullable=False, default=Decimal("0.00"), comment="金额")

    order = relationship("Order", back_populates="items")

    def __repr__(self):
        return f"<OrderItem {self.product_name} x{self.quantity}>"
