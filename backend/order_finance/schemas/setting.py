"""系统设置Schema"""
from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal


class SettingResponse(BaseModel):
    """设置项响应"""
    id: int
    key: str
    value: str
    type: str = "string"
    description: Optional[str] = None
    updated_at: datetime

    class Config:
        from_attributes = True


class ExchangeRateUpdate(BaseModel):
    """更新汇率（0 表示取消换算，按美元显示）"""
    rate: Decimal = Field(..., ge=0, description="1 美元兑换的第纳尔数")


class ExchangeRateResponse(BaseModel):
    """当前汇率"""
    rate: Decimal
    base_currency: str
    display_currency: str
    configured: bool
