"""客户Schema"""
from typing import Optional, List
from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal


class CustomerBase(BaseModel):
    """客户基础字段"""
    first_name: str = Field(..., min_length=1, max_length=50, description="名")
    last_name: str = Field(..., min_length=1, max_length=50, description="姓")
    email: Optional[str] = Field(None, max_length=100, description="邮箱")
    phone: str = Field(..., min_length=1, max_length=30, description="电话")
    address: Optional[str] = Field(None, description="地址")
    city: Optional[str] = Field(None, max_length=50, description="城市")
    country: Optional[str] = Field(None, max_length=50, description="国家")
    shipping_code: Optional[str] = Field(None, max_length=50, description="客户运单编码")


class CustomerCreate(CustomerBase):
    """创建客户"""
    pass


class CustomerResponse(CustomerBase):
    """客户响应（汇总金额由订单实时计算）"""
    id: int
    full_name: str = ""
    order_count: int = 0
    total_amount: Decimal = Decimal("0.00")
    total_down_payment: Decimal = Decimal("0.00")
    remaining_balance: Decimal = Decimal("0.00")
    created_at: datetime

    class Config:
        from_attributes = True


class CustomerListResponse(BaseModel):
    """客户列表响应"""
    data: List[CustomerResponse]
    total: int


class DownPaymentUpdate(BaseModel):
    """客户级总预付款"""
    total_down_payment: Decimal = Field(..., ge=0, description="新的总预付款（美元）")


class AllocationLineResponse(BaseModel):
    order_id: int
    order_number: str = ""
    total_amount: Decimal
    previous_down_payment: Decimal
    down_payment: Decimal
    remaining_balance: Decimal


class DownPaymentResponse(BaseModel):
    """预付款分配响应"""
    customer_id: int
    allocated: bool
    message: str = ""
    requested_total: Decimal = Decimal("0.00")
    allocated_total: Decimal = Decimal("0.00")
    orders_total: Decimal = Decimal("0.00")
    lines: List[AllocationLineResponse] = []
