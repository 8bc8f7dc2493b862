"""
订单管理API
- 创建（录入明细并计算佣金、利润）
- 列表 / 详情
- 编辑订单、增删改明细（均重新计算）
- 重新计算
- 发票
"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from order_finance.core.deps import get_db
from order_finance.core.exceptions import IncompleteItemData, InvalidAmount
from order_finance.models.customer import Customer
from order_finance.models.order import Order
from order_finance.models.order_item import OrderItem
from order_finance.schemas.order import (
    OrderCreate, OrderUpdate, OrderRecalculate, OrderResponse, OrderListResponse,
    OrderItemCreate, OrderItemUpdate, OrderItemResponse
)
from order_finance.schemas.report import InvoiceView
from order_finance.services.invoice import build_invoice
from order_finance.services.order_service import (
    apply_order_financials, generate_order_number, load_commission_resolver, load_converter
)

router = APIRouter()

def base_order_query():
    return select(Order).options(
        selectinload(Order.items),
        selectinload(Order.customer)
    )

async def load_order(db: AsyncSession, order_id: int) -> Order:
    result = await db.execute(base_order_query().where(Order.id == order_id))
    order = result.scalar_one_or_none()
    if not order:
        raise HTTPException(status_code=404, detail="订单不存在")
    return order

def build_order_response(order: Order) -> OrderResponse:
    """构建订单响应"""
    return OrderResponse(
        id=order.id,
        order_number=order.order_number,
        customer_id=order.customer_id,
        customer_name=order.customer.full_name if order.customer else "",
        status=order.status,
        status_display=order.status_display,
        shipping_cost=order.shipping_cost,
        shipping_cost_actual=order.shipping_cost_actual,
        shipping_weight=order.shipping_weight,
        shipping_country=order.shipping_country,
        shipping_city=order.shipping_city,
        shipping_category=order.shipping_category,
        down_payment=order.down_payment,
        tracking_number=order.tracking_number,
        notes=order.notes,
        total_amount=order.total_amount,
        remaining_balance=order.remaining_balance,
        commission=order.commission,
        items_profit=order.items_profit,
        shipping_profit=order.shipping_profit,
        total_profit=order.total_profit,
        items=[OrderItemResponse.model_validate(i) for i in order.items],
        created_at=order.created_at,
        updated_at=order.updated_at)

@router.get("/", response_model=OrderListResponse)
async def list_orders(
    *,
    db: AsyncSession = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    customer_id: Optional[int] = Query(None),
    status: Optional[str] = Query(None)) -> Any:
    """获取订单列表"""
    conditions = []
    if customer_id:
        conditions.append(Order.customer_id == customer_id)
    if status:
        conditions.append(Order.status == status)

    query = base_order_query()
    count_query = select(func.count(Order.id))
    if conditions:
        query = query.where(and_(*conditions))
        count_query = count_query.where(and_(*conditions))

    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(Order.created_at.desc()).offset((page - 1) * limit).limit(limit)
    result = await db.execute(query)
    orders = result.scalars().unique().all()

    return OrderListResponse(
        data=[build_order_response(o) for o in orders],
        total=total,
        page=page,
        limit=limit
    )

@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: int) -> Any:
    """获取订单详情"""
    return build_order_response(await load_order(db, order_id))

# 编辑时允许清空的字段
CLEARABLE_FIELDS = {"shipping_cost_actual", "shipping_city", "shipping_category", "tracking_number", "notes"}

# 修改后需要按原价/折扣价重算加价利润的明细字段
MARKUP_SOURCE_FIELDS = {"quantity", "original_price", "discounted_price"}

async def recompute_order(db: AsyncSession, order: Order, resolver) -> OrderResponse:
    """重新计算订单财务字段并提交，失败时整体回滚"""
    try:
        apply_order_financials(order, order.items, resolver)
    except (IncompleteItemData, InvalidAmount) as e:
        await db.rollback()
        raise HTTPException(status_code=400, detail=e.message)

    await db.commit()
    return build_order_response(order)

def find_item(order: Order, item_id: int) -> OrderItem:
    for item in order.items:
        if item.id == item_id:
            return item
    raise HTTPException(status_code=404, detail="明细不存在")

@router.post("/", response_model=OrderResponse)
async def create_order(
    *,
    db: AsyncSession = Depends(get_db),
    order_in: OrderCreate) -> Any:
    """创建订单（计算佣金、总额、利润）"""
    customer = await db.get(Customer, order_in.customer_id)
    if not customer:
        raise HTTPException(status_code=400, detail="客户不存在")

    country = order_in.shipping_country or customer.country
    # 先快照佣金档位、生成单号，再构建订单
    resolver = await load_commission_resolver(db, country)
    order_number = await generate_order_number(db)

    order = Order(
        order_number=order_number,
        **order_in.model_dump(exclude={"items", "shipping_country"}),
        shipping_country=country,
        customer=customer,
    )
    items = [OrderItem(**item.model_dump()) for item in order_in.items]

    try:
        apply_order_financials(order, items, resolver, country)
    except (IncompleteItemData, InvalidAmount) as e:
        raise HTTPException(status_code=400, detail=e.message)

    order.items = items
    db.add(order)
    await db.commit()
    return build_order_response(order)

@router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: int,
    order_in: OrderUpdate) -> Any:
    """编辑订单（运费、国家、状态、预付款等），保存后重新计算佣金和利润"""
    order = await load_order(db, order_id)
    update_data = {
        field: value
        for field, value in order_in.model_dump(exclude_unset=True).items()
        if value is not None or field in CLEARABLE_FIELDS
    }

    country = update_data.get("shipping_country", order.shipping_country)
    resolver = await load_commission_resolver(db, country)

    for field, value in update_data.items():
        setattr(order, field, value)

    return await recompute_order(db, order, resolver)

@router.post("/{order_id}/items", response_model=OrderResponse)
async def add_order_item(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: int,
    item_in: OrderItemCreate) -> Any:
    """添加明细并重新计算订单"""
    order = await load_order(db, order_id)
    resolver = await load_commission_resolver(db, order.shipping_country)

    order.items.append(OrderItem(**item_in.model_dump()))
    return await recompute_order(db, order, resolver)

@router.put("/{order_id}/items/{item_id}", response_model=OrderResponse)
async def update_order_item(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: int,
    item_id: int,
    item_in: OrderItemUpdate) -> Any:
    """编辑明细并重新计算订单"""
    order = await load_order(db, order_id)
    item = find_item(order, item_id)
    resolver = await load_commission_resolver(db, order.shipping_country)

    update_data = {k: v for k, v in item_in.model_dump(exclude_unset=True).items() if v is not None}
    for field, value in update_data.items():
        setattr(item, field, value)

    # 数量或价格变了但没有给出新的加价利润时，按原价/折扣价重算
    if "markup_profit" not in update_data and MARKUP_SOURCE_FIELDS & update_data.keys():
        if item.original_price is not None and item.discounted_price is not None:
            item.markup_profit = None

    return await recompute_order(db, order, resolver)

@router.delete("/{order_id}/items/{item_id}", response_model=OrderResponse)
async def delete_order_item(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: int,
    item_id: int) -> Any:
    """删除明细并重新计算订单（订单至少保留一条明细）"""
    order = await load_order(db, order_id)
    item = find_item(order, item_id)
    if len(order.items) == 1:
        raise HTTPException(status_code=400, detail="订单至少需要一条明细")
    resolver = await load_commission_resolver(db, order.shipping_country)

    order.items.remove(item)
    return await recompute_order(db, order, resolver)

@router.post("/{order_id}/recalculate", response_model=OrderResponse)
async def recalculate_order(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: int,
    recalc_in: Optional[OrderRecalculate] = None) -> Any:
    """重新计算订单财务字段（如录入了实际运费、修改了佣金档位）"""
    order = await load_order(db, order_id)
    resolver = await load_commission_resolver(db, order.shipping_country)

    if recalc_in and recalc_in.shipping_cost_actual is not None:
        order.shipping_cost_actual = recalc_in.shipping_cost_actual

    return await recompute_order(db, order, resolver)

@router.get("/{order_id}/invoice", response_model=InvoiceView)
async def get_invoice(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: int,
    language: str = Query("en", pattern="^(en|ar)$")) -> Any:
    """获取发票显示数据（金额按当前汇率换算，含大写金额）"""
    order = await load_order(db, order_id)
    converter = await load_converter(db)
    return build_invoice(
        order,
        order.items,
        converter,
        language,
        customer_name=order.customer.full_name if order.customer else "")
