"""报表API（利润 / 佣金）"""

from datetime import datetime, timedelta
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from order_finance.core.config import settings
from order_finance.core.deps import get_db
from order_finance.models.commission_rule import CommissionRule
from order_finance.models.customer import Customer
from order_finance.models.order import Order
from order_finance.schemas.report import ReportOrderRow, ProfitReport, CommissionReport
from order_finance.services.order_service import load_converter
from order_finance.services.reports import build_profit_report, build_commission_report

router = APIRouter()

def parse_date(value: Optional[str], field: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{field} 日期格式应为 YYYY-MM-DD")

async def load_report_rows(
    db: AsyncSession,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    country: Optional[str] = None
) -> List[ReportOrderRow]:
    """读取报表用订单（国家以客户国家优先，其次订单收货国家）"""
    conditions = []
    start = parse_date(start_date, "start_date")
    end = parse_date(end_date, "end_date")
    if start:
        conditions.append(Order.created_at >= start)
    if end:
        # 包含结束当天
        conditions.append(Order.created_at < end + timedelta(days=1))

    query = select(Order, Customer).join(Customer, Order.customer_id == Customer.id)
    if conditions:
        query = query.where(and_(*conditions))
    query = query.order_by(Order.created_at.desc())
    result = await db.execute(query)

    rows = []
    for order, customer in result.all():
        order_country = customer.country or order.shipping_country
        if country and order_country != country:
            continue
        rows.append(ReportOrderRow(
            id=order.id,
            order_number=order.order_number,
            customer_name=customer.full_name,
            shipping_code=customer.shipping_code,
            country=order_country,
            total_amount=order.total_amount,
            commission=order.commission,
            items_profit=order.items_profit,
            shipping_profit=order.shipping_profit,
            total_profit=order.total_profit,
            created_at=order.created_at))
    return rows

@router.get("/profit", response_model=ProfitReport)
async def get_profit_report(
    *,
    db: AsyncSession = Depends(get_db),
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    country: Optional[str] = Query(None),
    include_orders: bool = Query(True)) -> Any:
    """利润报表（按当前汇率换算显示）"""
    rows = await load_report_rows(db, start_date, end_date, country)
    converter = await load_converter(db)
    return build_profit_report(rows, converter, include_orders)

@router.get("/commission", response_model=CommissionReport)
async def get_commission_report(
    *,
    db: AsyncSession = Depends(get_db),
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None)) -> Any:
    """佣金报表（按国家汇总，附当前佣金档位）"""
    rows = await load_report_rows(db, start_date, end_date)
    rules_result = await db.execute(select(CommissionRule))
    converter = await load_converter(db)
    return build_commission_report(
        rows,
        rules_result.scalars().all(),
        converter,
        settings.DEFAULT_COMMISSION_RATE)
