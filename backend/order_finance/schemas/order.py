"""订单Schema"""
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from decimal import Decimal

from order_finance.models.order import ORDER_STATUSES


# ===== 明细 =====
class OrderItemBase(BaseModel):
    """明细基础字段"""
    product_name: str = Field(..., min_length=1, max_length=200, description="商品名称")
    product_code: Optional[str] = Field(None, max_length=50, description="商品编码")
    product_url: Optional[str] = Field(None, description="商品链接")
    quantity: int = Field(..., gt=0, description="数量")
    number_of_pieces: int = Field(default=1, ge=1, description="件数")
    unit_price: Decimal = Field(..., ge=0, description="单价")
    original_price: Optional[Decimal] = Field(None, ge=0, description="原价（售价）")
    discounted_price: Optional[Decimal] = Field(None, ge=0, description="折扣价（成本）")
    markup_profit: Optional[Decimal] = Field(None, description="加价利润，不填则按 (原价-折扣价)×数量 计算")


class OrderItemCreate(OrderItemBase):
    """创建明细"""
    pass


class OrderItemResponse(OrderItemBase):
    """明细响应"""
    id: int
    order_id: int
    total_price: Decimal

    class Config:
        from_attributes = True


# ===== 订单 =====
class OrderBase(BaseModel):
    """订单基础字段"""
    customer_id: int = Field(..., description="客户ID")
    status: str = Field(default="pending", description="状态")
    shipping_cost: Decimal = Field(default=Decimal("0.00"), ge=0, description="向客户收取的运费")
    shipping_cost_actual: Optional[Decimal] = Field(None, ge=0, description="承运商实际运费（未知可不填）")
    shipping_weight: Decimal = Field(default=Decimal("1.00"), gt=0, description="运输重量(kg)")
    shipping_country: Optional[str] = Field(None, max_length=50, description="运输国家，不填取客户国家")
    shipping_city: Optional[str] = Field(None, max_length=50, description="运输城市")
    shipping_category: Optional[str] = Field(None, max_length=50, description="运输类别")
    down_payment: Decimal = Field(default=Decimal("0.00"), ge=0, description="预付款")
    tracking_number: Optional[str] = Field(None, max_length=100, description="运单号")
    notes: Optional[str] = Field(None, description="备注")

    @field_validator("status")
    @classmethod
    def check_status(cls, v: str) -> str:
        if v not in ORDER_STATUSES:
            raise ValueError(f"无效的订单状态: {v}")
        return v


class OrderCreate(OrderBase):
    """创建订单"""
    items: List[OrderItemCreate] = Field(..., min_length=1, description="明细列表")


class OrderRecalculate(BaseModel):
    """重新计算订单（可更新实际运费）"""
    shipping_cost_actual: Optional[Decimal] = Field(None, ge=0, description="承运商实际运费")


class OrderResponse(OrderBase):
    """订单响应"""
    id: int
    order_number: str
    status_display: str = ""
    customer_name: str = ""
    total_amount: Decimal
    remaining_balance: Decimal
    commission: Decimal
    items_profit: Decimal
    shipping_profit: Decimal
    total_profit: Decimal
    items: List[OrderItemResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OrderListResponse(BaseModel):
    """订单列表响应"""
    data: List[OrderResponse]
    total: int
    page: int
    limit: int


class OrderUpdate(BaseModel):
    """编辑订单（只更新传入的字段，保存后重新计算佣金和利润）"""
    status: Optional[str] = Field(None, description="状态")
    shipping_cost: Optional[Decimal] = Field(None, ge=0, description="向客户收取的运费")
    shipping_cost_actual: Optional[Decimal] = Field(None, ge=0, description="承运商实际运费")
    shipping_weight: Optional[Decimal] = Field(None, gt=0, description="运输重量(kg)")
    shipping_country: Optional[str] = Field(None, max_length=50, description="运输国家")
    shipping_city: Optional[str] = Field(None, max_length=50, description="运输城市")
    shipping_category: Optional[str] = Field(None, max_length=50, description="运输类别")
    down_payment: Optional[Decimal] = Field(None, ge=0, description="预付款")
    tracking_number: Optional[str] = Field(None, max_length=100, description="运单号")
    notes: Optional[str] = Field(None, description="备注")

    @field_validator("status")
    @classmethod
    def check_status(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in ORDER_STATUSES:
            raise ValueError(f"无效的订单状态: {v}")
        return v


class OrderItemUpdate(BaseModel):
    """编辑明细"""
    product_name: Optional[str] = Field(None, min_length=1, max_length=200)
    product_code: Optional[str] = Field(None, max_length=50)
    product_url: Optional[str] = None
    quantity: Optional[int] = Field(None, gt=0)
    number_of_pieces: Optional[int] = Field(None, ge=1)
    unit_price: Optional[Decimal] = Field(None, ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    discounted_price: Optional[Decimal] = Field(None, ge=0)
    markup_profit: Optional[Decimal] = Field(None, description="加价利润，不填且修改了数量/价格时按原价与折扣价重算")
