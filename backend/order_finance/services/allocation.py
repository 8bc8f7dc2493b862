"""
客户预付款按比例分配

客户级别编辑"总预付款"时，把金额按各订单总额占比拆分到该客户的所有订单：
- 目标金额截断到 [0, 订单总额之和]
- 每个订单 = round2(目标金额 × 订单总额 / 订单总额之和)
- 逐单舍入产生的分差全部计入总额最大的订单（并列时取创建最早的），
  保证分配之和与目标金额逐分相等
- 剩余未付 = 订单总额 - 预付款，不会为负

分配结果要么全部写入，要么全部不写（由调用方在同一事务中落库）
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from order_finance.core.exceptions import NothingToAllocate
from order_finance.schemas.finance import AllocatableOrder, AllocationLine, AllocationResult
from order_finance.services.money import ZERO, round2, to_money

logger = logging.getLogger(__name__)


def _priority_key(order: AllocatableOrder):
    # 总额大的优先；并列时创建早的优先；再按 id 保证稳定
    created = order.created_at or datetime.max
    if created.tzinfo is not None:
        # 统一为不带时区的 UTC
        created = created.astimezone(timezone.utc).replace(tzinfo=None)
    return (-order.total_amount, created, order.id)


class PaymentAllocator:
    """预付款分配器"""

    def reallocate(
        self,
        customer_id: Optional[Any],
        orders: Sequence[Any],
        new_total_down_payment: Any
    ) -> AllocationResult:
        """
        重新分配客户的总预付款

        Args:
            customer_id: 客户ID（仅用于结果和日志）
            orders: 该客户的全部订单
            new_total_down_payment: 新的总预付款

        Raises:
            InvalidAmount: 金额为负数或不是数字
            NothingToAllocate: 没有订单或订单总额为 0
        """
        requested = to_money(new_total_down_payment, "total_down_payment")
        snapshots = [
            o if isinstance(o, AllocatableOrder) else AllocatableOrder.model_validate(o)
            for o in orders
        ]
        if not snapshots:
            raise NothingToAllocate(customer_id)

        orders_total = round2(sum((o.total_amount for o in snapshots), ZERO))
        if orders_total <= 0:
            raise NothingToAllocate(customer_id)

        target = min(requested, orders_total)

        shares: Dict[int, Decimal] = {}
        for order in snapshots:
            shares[order.id] = round2(target * order.total_amount / orders_total)

        remainder = target - sum(shares.values(), ZERO)
        if remainder:
            self._settle_remainder(snapshots, shares, remainder)

        lines: List[AllocationLine] = []
        for order in snapshots:
            down_payment = shares[order.id]
            lines.append(AllocationLine(
                order_id=order.id,
                total_amount=order.total_amount,
                previous_down_payment=order.down_payment,
                down_payment=down_payment,
                remaining_balance=max(order.total_amount - down_payment, ZERO),
            ))

        logger.info(
            f"💰 客户 {customer_id} 预付款分配: 请求 {requested}, 实际 {target}, "
            f"订单数 {len(lines)}, 舍入分差 {remainder}"
        )
        return AllocationResult(
            customer_id=customer_id,
            requested_total=requested,
            allocated_total=target,
            orders_total=orders_total,
            lines=lines,
        )

    @staticmethod
    def _settle_remainder(
        orders: List[AllocatableOrder],
        shares: Dict[int, Decimal],
        remainder: Decimal
    ) -> None:
        """
        把舍入分差计入优先级最高的订单

        该订单放不下（超过订单总额或低于 0）时，多出的部分依次顺延给下一个订单
        """
        for order in sorted(orders, key=_priority_key):
            if not remainder:
                break
            current = shares[order.id]
            adjusted = min(max(current + remainder, ZERO), order.total_amount)
            remainder -= adjusted - current
            shares[order.id] = adjusted
