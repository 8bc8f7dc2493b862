"""运费费率模型 - 按国家和类别（普通、香水、家居等）配置每公斤单价"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, DECIMAL, UniqueConstraint
from order_finance.db.base import Base


class ShippingRate(Base):
    """运费费率"""
    __tablename__ = "shipping_rates"
    __table_args__ = (
        UniqueConstraint("country", "category", name="uq_shipping_rate_country_category"),
    )

    id = Column(Integer, primary_key=True, index=True)
    country = Column(String(50), nullable=False, comment="国家")
    category = Column(String(50), nullable=False, comment="类别")
    price_per_kg = Column(DECIMAL(10, 2), nullable=False, comment="每公斤单价")
    currency = Column(String(10), nullable=False, default="USD", comment="币种")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<ShippingRate {self.country}/{self.category}: {self.price_per_kg} {self.currency}/kg>"
