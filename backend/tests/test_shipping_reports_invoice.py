from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from order_finance.core.exceptions import InvalidAmount, NoShippingRate
from order_finance.schemas.finance import ShippingRateSnapshot
from order_finance.schemas.report import ReportOrderRow
from order_finance.services.commission import CommissionResolver
from order_finance.services.currency import CurrencyConverter
from order_finance.services.invoice import build_invoice
from order_finance.services.reports import build_commission_report, build_profit_report, profit_margin
from order_finance.services.shipping import ShippingCalculator


@pytest.fixture
def calculator(tiers):
    rates = [
        ShippingRateSnapshot(country="UK", category="normal", price_per_kg=Decimal("8.50")),
        ShippingRateSnapshot(country="FR", category="perfumes", price_per_kg=Decimal("12.00")),
    ]
    return ShippingCalculator(rates, CommissionResolver(tiers))


# ==================== 运费 ====================

def test_shipping_quote(calculator):
    quote = calculator.quote("UK", "normal", Decimal("2.5"), Decimal("200"))
    assert quote.base_shipping == Decimal("21.25")
    assert quote.commission == Decimal("30.00")
    assert quote.commission_rate == Decimal("0.15")
    assert quote.total == Decimal("51.25")
    assert not quote.commission_is_default


def test_shipping_quote_uses_default_commission(calculator):
    quote = calculator.quote("FR", "perfumes", 1, 100)
    assert quote.commission_is_default
    assert quote.commission == Decimal("15.00")
    assert quote.total == Decimal("27.00")


def test_shipping_quote_errors(calculator):
    with pytest.raises(NoShippingRate):
        calculator.quote("UK", "perfumes", 1, 100)
    with pytest.raises(InvalidAmount):
        calculator.quote("UK", "normal", 0, 100)


# ==================== 报表 ====================

def report_rows():
    return [
        ReportOrderRow(id=1, order_number="ORD20240101001", customer_name="A", country="UK",
                       total_amount=Decimal("230.00"), commission=Decimal("30.00"),
                       items_profit=Decimal("25.00"), shipping_profit=Decimal("2.00"),
                       total_profit=Decimal("27.00"), created_at=datetime(2024, 1, 1)),
        ReportOrderRow(id=2, order_number="ORD20240105001", customer_name="B", country="TR",
                       total_amount=Decimal("112.00"), commission=Decimal("12.00"),
                       items_profit=Decimal("10.00"), total_profit=Decimal("10.00"),
                       created_at=datetime(2024, 1, 5)),
        ReportOrderRow(id=3, order_number="ORD20240106001", customer_name="C", country=None,
                       total_amount=Decimal("0.00"), created_at=datetime(2024, 1, 6)),
    ]


def test_profit_report_in_usd():
    report = build_profit_report(report_rows())
    assert report.currency == "USD"
    assert report.total_revenue == Decimal("342.00")
    assert report.total_profit == Decimal("37.00")
    assert report.total_commission == Decimal("42.00")
    assert report.profit_margin == Decimal("10.82")
    assert report.order_count == 3
    assert report.period_start == datetime(2024, 1, 1)
    assert report.period_end == datetime(2024, 1, 6)
    assert report.orders[2].country == "unknown"


def test_profit_report_converts_with_one_rate():
    report = build_profit_report(report_rows(), CurrencyConverter(Decimal("5")), include_orders=False)
    assert report.currency == "LYD"
    assert report.total_revenue == Decimal("1710.00")
    assert report.total_profit == Decimal("185.00")
    # 利润率与换算无关
    assert report.profit_margin == Decimal("10.82")
    assert report.orders == []


def test_profit_margin_without_revenue():
    assert profit_margin(Decimal("10"), Decimal("0")) == 0


def test_commission_report_by_country(tiers):
    report = build_commission_report(report_rows(), tiers)
    assert [c.country for c in report.countries] == ["UK", "TR", "unknown"]
    uk = report.countries[0]
    assert uk.commission == Decimal("30.00")
    assert uk.commission_rate == Decimal("0.1304")
    # 营收为 0 的分组使用默认比例
    assert report.countries[2].commission_rate == Decimal("0.15")
    assert report.total_commission == Decimal("42.00")
    assert [r.id for r in report.rules] == [4, 1, 2, 3]


# ==================== 发票 ====================

def invoice_order():
    order = SimpleNamespace(
        id=1, order_number="ORD20240101001",
        shipping_cost=Decimal("20.00"), commission=Decimal("30.00"),
        total_amount=Decimal("230.00"), down_payment=Decimal("100.00"),
        remaining_balance=Decimal("130.00"), total_profit=Decimal("27.00"),
    )
    items = [
        SimpleNamespace(product_name="Jacket", product_code="J-1", quantity=1,
                        unit_price=Decimal("120.00"), total_price=Decimal("120.00")),
        SimpleNamespace(product_name="Shoes", product_code=None, quantity=2,
                        unit_price=Decimal("30.00"), total_price=None),
    ]
    return order, items


def test_invoice_in_usd():
    order, items = invoice_order()
    invoice = build_invoice(order, items, customer_name="Ali Omar")
    assert invoice.currency == "USD"
    assert invoice.subtotal == Decimal("180.00")
    assert invoice.total_amount == Decimal("230.00")
    assert invoice.amount_in_words == "Two Hundred Thirty Dollars"
    assert invoice.remaining_in_words == "One Hundred Thirty Dollars"
    assert "total_profit" not in invoice.model_dump()


def test_invoice_in_lyd_arabic():
    order, items = invoice_order()
    invoice = build_invoice(order, items, CurrencyConverter(Decimal("5")), "ar")
    assert invoice.currency == "LYD"
    assert invoice.language == "ar"
    assert invoice.total_amount == Decimal("1150.00")
    assert invoice.items[1].total_price == Decimal("300.00")
    assert invoice.amount_in_words == "ألف ومئة وخمسون دينار"
