"""系统设置 - 扁平的键值存储（如 lyd_exchange_rate）"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime
from order_finance.db.base import Base


class Setting(Base):
    """系统设置"""
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), nullable=False, unique=True, index=True, comment="键")
    value = Column(Text, nullable=False, comment="值（字符串）")
    # string / boolean / number / json
    type = Column(String(20), nullable=False, default="string", comment="值类型")
    description = Column(String(200), comment="说明")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Setting {self.key}={self.value}>"
