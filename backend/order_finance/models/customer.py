"""
客户模型

客户不保存任何汇总金额，总额/预付款/余额都从订单实时计算
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship
from order_finance.db.base import Base


class Customer(Base):
    """客户"""
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(50), nullable=False, comment="名")
    last_name = Column(String(50), nullable=False, comment="姓")
    email = Column(String(100), comment="邮箱")
    phone = Column(String(30), nullable=False, unique=True, comment="电话")
    address = Column(Text, comment="地址")
    city = Column(String(50), comment="城市")
    country = Column(String(50), index=True, comment="国家（用于佣金档位匹配）")
    shipping_code = Column(String(50), comment="客户运单编码")
    created_at = Column(DateTime, default=datetime.utcnow)

    orders = relationship("Order", back_populates="customer", order_by="Order.created_at")

    def __repr__(self):
        return f"<Customer {self.full_name}>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def total_amount(self) -> Decimal:
        """订单总额合计（实时计算）"""
        return sum((o.total_amount or Decimal("0") for o in self.orders), Decimal("0.00"))

    @property
    def total_down_payment(self) -> Decimal:
        return sum((o.down_payment or Decimal("0") for o in self.orders), Decimal("0.00"))

    @property
    def remaining_balance(self) -> Decimal:
        return sum((o.remaining_balance or Decimal("0") for o in self.orders), Decimal("0.00"))
