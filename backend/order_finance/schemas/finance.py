"""
财务计算引擎数据结构

引擎只接收这些固定字段的快照，不直接读取数据库对象；
from_attributes 允许直接从 ORM 行构建快照
"""
from typing import Optional, List
from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal


# ===== 佣金 =====
class CommissionTier(BaseModel):
    """佣金档位快照"""
    id: Optional[int] = None
    country: str
    min_value: Decimal = Field(..., ge=0, description="档位下限（含）")
    max_value: Optional[Decimal] = Field(None, description="档位上限（不含），为空表示无上限")
    percentage: Decimal = Field(..., ge=0, le=1, description="佣金比例 0-1")
    fixed_fee: Decimal = Field(default=Decimal("0.00"), ge=0, description="固定费用")

    class Config:
        from_attributes = True
        frozen = True


class CommissionResult(BaseModel):
    """佣金计算结果"""
    country: str
    value: Decimal
    percentage: Decimal
    fixed_fee: Decimal
    commission_amount: Decimal
    rule_id: Optional[int] = None
    is_default: bool = False  # 是否使用了默认比例

    class Config:
        frozen = True


# ===== 利润 =====
class ItemSnapshot(BaseModel):
    """订单明细快照"""
    id: Optional[int] = None
    product_name: str = ""
    quantity: int = Field(..., ge=0)
    unit_price: Decimal = Field(..., ge=0)
    total_price: Optional[Decimal] = None
    markup_profit: Optional[Decimal] = None  # 为空表示数据不完整

    class Config:
        from_attributes = True
        frozen = True


class OrderSnapshot(BaseModel):
    """订单快照（利润计算所需字段）"""
    id: Optional[int] = None
    customer_id: Optional[int] = None
    total_amount: Decimal = Decimal("0.00")
    down_payment: Decimal = Decimal("0.00")
    shipping_cost: Decimal = Decimal("0.00")
    commission: Decimal = Decimal("0.00")
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True


class ProfitBreakdown(BaseModel):
    """利润拆分"""
    items_profit: Decimal
    shipping_profit: Decimal
    total_profit: Decimal
    commission: Decimal
    shipping_profit_known: bool = True  # 实际运费未知时为 False

    class Config:
        frozen = True


class OrderTotals(BaseModel):
    """订单金额汇总"""
    items_subtotal: Decimal
    shipping_cost: Decimal
    commission: Decimal
    total_amount: Decimal

    class Config:
        frozen = True


# ===== 预付款分配 =====
class AllocatableOrder(BaseModel):
    """参与预付款分配的订单"""
    id: int
    total_amount: Decimal = Field(..., ge=0)
    down_payment: Decimal = Decimal("0.00")
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True


class AllocationLine(BaseModel):
    """单个订单的分配结果"""
    order_id: int
    total_amount: Decimal
    previous_down_payment: Decimal
    down_payment: Decimal
    remaining_balance: Decimal

    class Config:
        frozen = True


class AllocationResult(BaseModel):
    """客户级预付款分配结果"""
    customer_id: Optional[int] = None
    requested_total: Decimal
    allocated_total: Decimal  # 截断到订单总额后的实际分配额
    orders_total: Decimal
    lines: List[AllocationLine]

    class Config:
        frozen = True


# ===== 显示货币 =====
class DisplayAmount(BaseModel):
    """显示金额"""
    amount: Decimal
    currency: str

    class Config:
        frozen = True

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:.2f}"


# ===== 运费 =====
class ShippingRateSnapshot(BaseModel):
    """运费费率快照"""
    id: Optional[int] = None
    country: str
    category: str
    price_per_kg: Decimal = Field(..., ge=0)
    currency: str = "USD"

    class Config:
        from_attributes = True
        frozen = True


class ShippingQuote(BaseModel):
    """运费报价"""
    country: str
    category: str
    weight: Decimal
    price_per_kg: Decimal
    currency: str
    base_shipping: Decimal
    commission: Decimal
    commission_rate: Decimal
    commission_is_default: bool = False
    total: Decimal

    class Config:
        frozen = True
