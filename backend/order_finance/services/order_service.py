"""
订单财务服务（数据库侧）

负责读取快照、调用计算引擎、把结果写回订单：
- 佣金档位、汇率设置、运费费率在每次请求开始时读取一次（先快照再计算）
- 订单录入/编辑：明细金额 → 加价利润 → 订单总额 → 佣金 → 利润
- 客户预付款分配：同一事务内更新该客户的所有订单，失败整体回滚
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from order_finance.core.config import settings
from order_finance.core.exceptions import InvalidAmount
from order_finance.models.commission_rule import CommissionRule
from order_finance.models.order import Order
from order_finance.models.order_item import OrderItem
from order_finance.models.setting import Setting
from order_finance.models.shipping_rate import ShippingRate
from order_finance.schemas.finance import AllocationResult, CommissionResult, ProfitBreakdown
from order_finance.services.allocation import PaymentAllocator
from order_finance.services.commission import CommissionResolver, resolve_with_default
from order_finance.services.currency import CurrencyConverter
from order_finance.services.money import ZERO, round2, to_money
from order_finance.services.profit import (
    ProfitCalculator, compute_item_markup, compute_item_total, compute_order_totals
)
from order_finance.services.shipping import ShippingCalculator

logger = logging.getLogger(__name__)


# ==================== 快照读取 ====================

async def load_commission_resolver(db: AsyncSession, country: Optional[str] = None) -> CommissionResolver:
    """读取佣金档位快照（可只取某个国家）"""
    query = select(CommissionRule)
    if country is not None:
        query = query.where(CommissionRule.country == country)
    query = query.order_by(CommissionRule.country, CommissionRule.min_value, CommissionRule.id)
    result = await db.execute(query)
    return CommissionResolver(result.scalars().all())


async def get_setting_value(db: AsyncSession, key: str) -> Optional[str]:
    result = await db.execute(select(Setting.value).where(Setting.key == key))
    return result.scalar_one_or_none()


async def load_converter(db: AsyncSession) -> CurrencyConverter:
    """读取汇率设置，生成本次渲染使用的换算器"""
    raw = await get_setting_value(db, settings.EXCHANGE_RATE_KEY)
    return CurrencyConverter.from_setting(raw)


async def load_shipping_calculator(db: AsyncSession, country: str) -> ShippingCalculator:
    result = await db.execute(select(ShippingRate).where(ShippingRate.country == country))
    rates = result.scalars().all()
    resolver = await load_commission_resolver(db, country)
    return ShippingCalculator(rates, resolver, settings.DEFAULT_COMMISSION_RATE)


async def generate_order_number(db: AsyncSession) -> str:
    """生成订单号"""
    prefix = "ORD"
    date_str = datetime.now().strftime("%Y%m%d")

    pattern = f"{prefix}{date_str}%"
    result = await db.execute(
        select(func.max(Order.order_number)).where(Order.order_number.like(pattern))
    )
    max_no = result.scalar()

    if max_no:
        try:
            seq = int(max_no[-3:]) + 1
        except ValueError:
            seq = 1
    else:
        seq = 1

    return f"{prefix}{date_str}{seq:03d}"


# ==================== 订单计算 ====================

def prepare_item(item: OrderItem) -> OrderItem:
    """
    录入明细时确定金额和加价利润

    markup_profit 已填写则保留；否则有原价和折扣价时按 (原价-折扣价)×数量 计算；
    都没有则保持为空，后续利润计算会报 IncompleteItemData
    """
    item.total_price = compute_item_total(item.quantity, item.unit_price)
    if item.markup_profit is None and item.original_price is not None and item.discounted_price is not None:
        item.markup_profit = compute_item_markup(item.quantity, item.original_price, item.discounted_price)
    elif item.markup_profit is not None:
        item.markup_profit = round2(item.markup_profit)
    return item


def apply_order_financials(
    order: Order,
    items: Sequence[OrderItem],
    resolver: CommissionResolver,
    country: Optional[str] = None
) -> ProfitBreakdown:
    """
    计算并写回订单的总额、佣金、利润和余额

    计算全部成功后才修改订单字段，失败时订单保持原样

    Raises:
        IncompleteItemData: 明细缺少加价利润
        InvalidAmount: 金额无效或预付款超过订单总额
    """
    for item in items:
        prepare_item(item)

    country = country if country is not None else order.shipping_country
    shipping_cost = to_money(order.shipping_cost or ZERO, "shipping_cost")
    pre_commission = compute_order_totals(items, shipping_cost, ZERO)
    commission: CommissionResult = resolve_with_default(
        resolver, country, pre_commission.total_amount, settings.DEFAULT_COMMISSION_RATE
    )
    totals = compute_order_totals(items, shipping_cost, commission.commission_amount)

    profit = ProfitCalculator().compute(
        {"id": order.id, "shipping_cost": shipping_cost},
        items,
        order.shipping_cost_actual,
        commission.commission_amount,
    )

    down_payment = to_money(order.down_payment or ZERO, "down_payment")
    if down_payment > totals.total_amount:
        raise InvalidAmount("down_payment", down_payment)

    order.shipping_cost = shipping_cost
    order.commission = totals.commission
    order.total_amount = totals.total_amount
    order.items_profit = profit.items_profit
    order.shipping_profit = profit.shipping_profit
    order.total_profit = profit.total_profit
    order.down_payment = down_payment
    order.remaining_balance = round2(totals.total_amount - down_payment)

    logger.info(
        f"🧮 订单 {order.order_number} 财务计算: 总额 {order.total_amount}, 佣金 {order.commission}"
        f"{'(默认比例)' if commission.is_default else ''}, 利润 {order.total_profit}"
    )
    return profit


# ==================== 预付款分配 ====================

async def load_customer_orders(db: AsyncSession, customer_id: int) -> List[Order]:
    result = await db.execute(
        select(Order)
        .where(Order.customer_id == customer_id)
        .order_by(Order.created_at, Order.id)
    )
    return list(result.scalars().all())


async def reallocate_customer_payment(
    db: AsyncSession,
    customer_id: int,
    new_total_down_payment: Decimal
) -> AllocationResult:
    """
    按订单总额比例重新分配客户的总预付款

    所有订单在同一次提交中更新；任何一步失败都回滚，不会出现部分订单已更新的状态

    Raises:
        InvalidAmount: 金额无效
        NothingToAllocate: 没有订单或订单总额为 0（不写入）
    """
    orders = await load_customer_orders(db, customer_id)
    allocation = PaymentAllocator().reallocate(customer_id, orders, new_total_down_payment)

    by_id = {o.id: o for o in orders}
    try:
        for line in allocation.lines:
            order = by_id[line.order_id]
            order.down_payment = line.down_payment
            order.remaining_balance = line.remaining_balance
        await db.commit()
    except Exception:
        await db.rollback()
        logger.error(f"❌ 客户 {customer_id} 预付款分配写入失败，已回滚")
        raise

    return allocation
