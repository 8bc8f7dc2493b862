from decimal import Decimal

import pytest

from order_finance.core.exceptions import InvalidAmount
from order_finance.services.amount_words import (
    ArabicAmountFormatter, EnglishAmountFormatter, currency_noun, format_amount, get_formatter
)


@pytest.mark.parametrize("amount,expected", [
    (0, "Zero Dollars"),
    (1, "One Dollar"),
    (Decimal("25.50"), "Twenty Five Dollars and Fifty Cents"),
    (Decimal("0.50"), "Zero Dollars and Fifty Cents"),
    (Decimal("1.01"), "One Dollar and One Cent"),
    (100, "One Hundred Dollars"),
    (Decimal("1234567.89"),
     "One Million Two Hundred Thirty Four Thousand Five Hundred Sixty Seven Dollars and Eighty Nine Cents"),
])
def test_english_usd(amount, expected):
    assert format_amount(amount, "en", "USD") == expected


def test_english_lyd_nouns():
    assert format_amount(Decimal("2.25"), "en", "LYD") == "Two Dinars and Twenty Five Dirhams"


def test_english_beyond_billions():
    formatter = EnglishAmountFormatter()
    assert formatter.spell(2_000_000_000_000) == "Two Thousand Billion"


@pytest.mark.parametrize("number,expected", [
    (25, "خمسة وعشرون"),
    (11, "أحد عشر"),
    (200, "مئتان"),
    (1250, "ألف ومئتان وخمسون"),
    (2000, "ألفان"),
    (3000, "ثلاثة آلاف"),
    (200000, "مئتا ألف"),
    (1000000, "مليون"),
    (2000000, "مليونان"),
])
def test_arabic_spell(number, expected):
    assert ArabicAmountFormatter().spell(number) == expected


def test_arabic_currency_forms():
    assert format_amount(1, "ar", "LYD") == "دينار واحد"
    assert format_amount(5, "ar", "LYD") == "خمسة دنانير"
    assert format_amount(Decimal("25.50"), "ar", "LYD") == "خمسة وعشرون دينار وخمسون درهم"
    assert format_amount(0, "ar", "USD") == "صفر دولار"


def test_negative_amount_is_rejected():
    with pytest.raises(InvalidAmount):
        format_amount(Decimal("-1"), "en")


def test_unknown_language_and_currency():
    with pytest.raises(ValueError):
        get_formatter("fr")
    with pytest.raises(ValueError):
        currency_noun("EUR", "en")


@pytest.mark.parametrize("amount,expected", [
    (2, "دولاران"),
    (Decimal("2.02"), "دولاران وسنتان"),
    (Decimal("1.01"), "دولار واحد وسنت واحد"),
    (Decimal("3.02"), "ثلاثة دولارات وسنتان"),
    (2000, "ألفان دولار"),
])
def test_arabic_one_and_two_use_noun_forms(amount, expected):
    assert format_amount(amount, "ar", "USD") == expected
