"""运费费率Schema"""
from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal


class ShippingRateBase(BaseModel):
    """运费费率基础字段"""
    country: str = Field(..., min_length=1, max_length=50, description="国家")
    category: str = Field(..., min_length=1, max_length=50, description="类别，如 normal、perfumes")
    price_per_kg: Decimal = Field(..., ge=0, description="每公斤单价")
    currency: str = Field(default="USD", max_length=10, description="币种")


class ShippingRateCreate(ShippingRateBase):
    """创建运费费率"""
    pass


class ShippingRateResponse(ShippingRateBase):
    """运费费率响应"""
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ShippingCalculateRequest(BaseModel):
    """运费试算请求"""
    country: str = Field(..., min_length=1, description="国家")
    category: str = Field(..., min_length=1, description="类别")
    weight: Decimal = Field(..., gt=0, description="重量(kg)")
    order_value: Decimal = Field(..., ge=0, description="订单商品金额")
