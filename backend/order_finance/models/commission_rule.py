"""
佣金档位模型

同一国家的档位按 min_value 升序，区间 [min_value, max_value)，
max_value 为空表示无上限
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, DateTime, DECIMAL
from order_finance.db.base import Base


class CommissionRule(Base):
    """佣金档位"""
    __tablename__ = "commission_rules"

    id = Column(Integer, primary_key=True, index=True)
    country = Column(String(50), nullable=False, index=True, comment="国家")
    min_value = Column(DECIMAL(10, 2), nullable=False, comment="档位下限（含）")
    max_value = Column(DECIMAL(10, 2), comment="档位上限（不含），为空表示无上限")
    # 0.1500 表示 15%
    percentage = Column(DECIMAL(5, 4), nullable=False, comment="佣金比例")
    # 固定费用，如每单 $1 的购买税
    fixed_fee = Column(DECIMAL(10, 2), nullable=False, default=Decimal("0.00"), comment="固定费用")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        upper = self.max_value if self.max_value is not None else "∞"
        return f"<CommissionRule {self.country} [{self.min_value}, {upper}) {self.percentage}+{self.fixed_fee}>"
