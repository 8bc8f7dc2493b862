"""客户管理API（含客户级预付款分配）"""

import logging
from typing import Any
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from order_finance.core.deps import get_db
from order_finance.core.exceptions import InvalidAmount, NothingToAllocate
from order_finance.models.customer import Customer
from order_finance.models.order import Order
from order_finance.schemas.customer import (
    CustomerCreate, CustomerResponse, CustomerListResponse,
    DownPaymentUpdate, DownPaymentResponse, AllocationLineResponse
)
from order_finance.services.order_service import reallocate_customer_payment

logger = logging.getLogger(__name__)

router = APIRouter()

def build_customer_response(customer: Customer) -> CustomerResponse:
    """构建客户响应（汇总金额从订单实时计算）"""
    return CustomerResponse(
        id=customer.id,
        first_name=customer.first_name,
        last_name=customer.last_name,
        email=customer.email,
        phone=customer.phone,
        address=customer.address,
        city=customer.city,
        country=customer.country,
        shipping_code=customer.shipping_code,
        full_name=customer.full_name,
        order_count=len(customer.orders),
        total_amount=customer.total_amount,
        total_down_payment=customer.total_down_payment,
        remaining_balance=customer.remaining_balance,
        created_at=customer.created_at)

async def load_customer(db: AsyncSession, customer_id: int) -> Customer:
    result = await db.execute(
        select(Customer).options(selectinload(Customer.orders)).where(Customer.id == customer_id)
    )
    customer = result.scalar_one_or_none()
    if not customer:
        raise HTTPException(status_code=404, detail="客户不存在")
    return customer

@router.get("/", response_model=CustomerListResponse)
async def list_customers(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    """获取客户列表"""
    result = await db.execute(
        select(Customer).options(selectinload(Customer.orders)).order_by(Customer.created_at.desc())
    )
    customers = result.scalars().all()
    return CustomerListResponse(
        data=[build_customer_response(c) for c in customers],
        total=len(customers))

@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    *,
    db: AsyncSession = Depends(get_db),
    customer_id: int) -> Any:
    """获取客户详情"""
    return build_customer_response(await load_customer(db, customer_id))

@router.post("/", response_model=CustomerResponse)
async def create_customer(
    *,
    db: AsyncSession = Depends(get_db),
    customer_in: CustomerCreate) -> Any:
    """创建客户"""
    existing = await db.execute(select(Customer).where(Customer.phone == customer_in.phone))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="电话号码已存在")

    customer = Customer(**customer_in.model_dump(), orders=[])
    db.add(customer)
    await db.commit()
    return build_customer_response(customer)

@router.put("/{customer_id}/down-payment", response_model=DownPaymentResponse)
async def update_down_payment(
    *,
    db: AsyncSession = Depends(get_db),
    customer_id: int,
    payment_in: DownPaymentUpdate) -> Any:
    """
    修改客户总预付款

    按订单总额比例分配到该客户的所有订单，分配结果整体生效
    """
    await load_customer(db, customer_id)

    try:
        allocation = await reallocate_customer_payment(db, customer_id, payment_in.total_down_payment)
    except NothingToAllocate as e:
        logger.info(f"客户 {customer_id} 预付款未分配: {e.message}")
        return DownPaymentResponse(
            customer_id=customer_id,
            allocated=False,
            message=e.message,
            requested_total=payment_in.total_down_payment)
    except InvalidAmount as e:
        raise HTTPException(status_code=400, detail=e.message)

    result = await db.execute(select(Order.id, Order.order_number).where(Order.customer_id == customer_id))
    numbers = dict(result.all())

    return DownPaymentResponse(
        customer_id=customer_id,
        allocated=True,
        message="预付款已按比例分配",
        requested_total=allocation.requested_total,
        allocated_total=allocation.allocated_total,
        orders_total=allocation.orders_total,
        lines=[
            AllocationLineResponse(
                order_id=line.order_id,
                order_number=numbers.get(line.order_id, ""),
                total_amount=line.total_amount,
                previous_down_payment=line.previous_down_payment,
                down_payment=line.down_payment,
                remaining_balance=line.remaining_balance)
            for line in allocation.lines
        ])
