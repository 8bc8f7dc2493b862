"""
发票显示数据

所有金额用同一个汇率快照换算；大写金额按显示货币的名称生成。
发票不展示利润字段。
"""

from typing import Any, Optional, Sequence

from order_finance.schemas.report import InvoiceLine, InvoiceView
from order_finance.services.amount_words import currency_noun, get_formatter
from order_finance.services.currency import CurrencyConverter
from order_finance.services.money import ZERO, round2


def build_invoice(
    order: Any,
    items: Sequence[Any],
    converter: Optional[CurrencyConverter] = None,
    language: str = "en",
    customer_name: str = ""
) -> InvoiceView:
    """
    构建发票

    Args:
        order: 订单（ORM 对象或同名属性的对象）
        items: 订单明细
        converter: 本次渲染的汇率快照，为空时按美元显示
        language: en / ar
    """
    converter = converter or CurrencyConverter()
    formatter = get_formatter(language)
    noun = currency_noun(converter.currency, language)

    lines = []
    subtotal = ZERO
    for item in items:
        total_price = round2(item.total_price if item.total_price is not None else item.quantity * item.unit_price)
        subtotal += total_price
        lines.append(InvoiceLine(
            product_name=item.product_name,
            product_code=getattr(item, "product_code", None),
            quantity=item.quantity,
            unit_price=converter.convert(item.unit_price),
            total_price=converter.convert(total_price),
        ))

    total_amount = converter.convert(order.total_amount or ZERO)
    remaining = converter.convert(order.remaining_balance or ZERO)

    return InvoiceView(
        order_id=getattr(order, "id", None),
        order_number=getattr(order, "order_number", "") or "",
        customer_name=customer_name,
        language=formatter.language,
        currency=converter.currency,
        exchange_rate=converter.rate,
        items=lines,
        subtotal=converter.convert(subtotal),
        shipping_cost=converter.convert(order.shipping_cost or ZERO),
        commission=converter.convert(order.commission or ZERO),
        total_amount=total_amount,
        down_payment=converter.convert(order.down_payment or ZERO),
        remaining_balance=remaining,
        amount_in_words=formatter.format(total_amount, noun),
        remaining_in_words=formatter.format(remaining, noun),
    )
