"""报表与发票 Schema"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel


# ==================== 报表输入 ====================

class ReportOrderRow(BaseModel):
    """报表用的订单数据（美元）"""
    id: int
    order_number: str = ""
    customer_name: str = ""
    shipping_code: Optional[str] = None
    country: Optional[str] = None
    total_amount: Decimal = Decimal("0.00")
    commission: Decimal = Decimal("0.00")
    items_profit: Decimal = Decimal("0.00")
    shipping_profit: Decimal = Decimal("0.00")
    total_profit: Decimal = Decimal("0.00")
    created_at: Optional[datetime] = None


# ==================== 利润报表 ====================

class ProfitReportLine(BaseModel):
    """逐单利润（已换算为显示货币）"""
    id: int
    order_number: str = ""
    customer_name: str = ""
    shipping_code: Optional[str] = None
    country: str = ""
    total_amount: Decimal
    items_profit: Decimal
    shipping_profit: Decimal
    total_profit: Decimal
    created_at: Optional[datetime] = None


class ProfitReport(BaseModel):
    """利润报表"""
    currency: str
    exchange_rate: Decimal
    total_revenue: Decimal
    total_profit: Decimal
    total_items_profit: Decimal
    total_shipping_profit: Decimal
    total_commission: Decimal
    profit_margin: Decimal  # 百分比
    order_count: int
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    orders: List[ProfitReportLine] = []


# ==================== 佣金报表 ====================

class CountryCommissionLine(BaseModel):
    """按国家汇总的佣金"""
    country: str
    revenue: Decimal
    commission: Decimal
    commission_rate: Decimal  # 实际佣金率 = 佣金 / 营收
    order_count: int


class CommissionRuleLine(BaseModel):
    """佣金档位（报表展示用）"""
    id: Optional[int] = None
    country: str
    min_value: Decimal
    max_value: Optional[Decimal] = None
    percentage: Decimal
    fixed_fee: Decimal


class CommissionReport(BaseModel):
    """佣金报表"""
    currency: str
    exchange_rate: Decimal
    total_revenue: Decimal
    total_commission: Decimal
    order_count: int
    countries: List[CountryCommissionLine] = []
    rules: List[CommissionRuleLine] = []


# ==================== 发票 ====================

class InvoiceLine(BaseModel):
    """发票明细"""
    product_name: str
    product_code: Optional[str] = None
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class InvoiceView(BaseModel):
    """发票显示数据（不含利润）"""
    order_id: Optional[int] = None
    order_number: str = ""
    customer_name: str = ""
    language: str
    currency: str
    exchange_rate: Decimal
    items: List[InvoiceLine] = []
    subtotal: Decimal
    shipping_cost: Decimal
    commission: Decimal
    total_amount: Decimal
    down_payment: Decimal
    remaining_balance: Decimal
    amount_in_words: str
    remaining_in_words: str
