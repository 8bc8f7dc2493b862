"""
金额大写（英文 / 阿拉伯文）

两种语言共用"按数量级拆分"的递归结构（个/十/百/千/百万/十亿），
但组合规则不同，分别实现为两个格式化策略：
- 英文：十位在前个位在后（Twenty Five），整数部分不等于 1 时货币名用复数，
  整数与辅币之间用 "and" 连接
- 阿拉伯文：个位在前十位在后（خمسة وعشرون），数量恰好为 2 时使用双数形式
  （مئتان / ألفان / مليونان），3-10 使用复数量级词，连接词为 "و"；
  货币数量为 1 时写作 "دولار واحد"，为 2 时只写双数名词 "دولاران"

货币名称作为参数传入，同一个格式化器可用于不同基础货币的发票
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel

from order_finance.services.money import non_negative, round2

# 数量级：千、百万、十亿
SCALE_BASE = 1000
MAX_SCALE_INDEX = 3


class EnglishCurrencyNoun(BaseModel):
    """英文货币名称"""
    singular: str
    plural: str
    subunit_singular: str
    subunit_plural: str

    class Config:
        frozen = True


class ArabicCurrencyNoun(BaseModel):
    """阿拉伯文货币名称（单数 / 双数 / 复数）"""
    singular: str
    dual: str
    plural: str
    subunit_singular: str
    subunit_dual: str
    subunit_plural: str

    class Config:
        frozen = True


CurrencyNoun = Union[EnglishCurrencyNoun, ArabicCurrencyNoun]


class AmountInWordsFormatter(ABC):
    """金额大写格式化器接口"""

    language: str = ""
    zero_word: str = ""

    def format(self, amount: Any, currency: CurrencyNoun) -> str:
        """
        把金额转换为文字

        Args:
            amount: 非负金额，按两位小数舍入
            currency: 对应语言的货币名称
        """
        value = round2(non_negative(amount, "amount"))
        units = int(value)
        subunits = int((value - units) * 100)

        if units == 0 and subunits == 0:
            return f"{self.zero_word} {self.unit_noun(0, currency)}"

        text = self.count_phrase(units, self.unit_noun(units, currency))
        if subunits:
            sub_text = self.count_phrase(subunits, self.subunit_noun(subunits, currency))
            text = self.join_subunits(text, sub_text)
        return text

    def spell(self, number: int) -> str:
        """整数转文字（按数量级递归拆分）"""
        if number == 0:
            return self.zero_word
        parts = [
            self.scale_phrase(group, index)
            for index, group in self.magnitudes(number)
            if group
        ]
        return self.join_groups(parts)

    def count_phrase(self, count: int, noun: str) -> str:
        """数字 + 货币名称"""
        return f"{self.spell(count)} {noun}"

    @staticmethod
    def magnitudes(number: int) -> List[Tuple[int, int]]:
        """
        拆分为 (数量级序号, 三位分组)，从高到低

        超过十亿的部分整体作为十亿的倍数，倍数本身再递归拆分
        """
        groups: List[Tuple[int, int]] = []
        index = 0
        while number and index < MAX_SCALE_INDEX:
            number, group = divmod(number, SCALE_BASE)
            groups.append((index, group))
            index += 1
        if number:
            groups.append((MAX_SCALE_INDEX, number))
        return list(reversed(groups))

    @abstractmethod
    def scale_phrase(self, group: int, scale_index: int) -> str:
        """一个三位分组加上数量级词"""

    @abstractmethod
    def join_groups(self, parts: List[str]) -> str:
        """连接各数量级"""

    @abstractmethod
    def unit_noun(self, count: int, currency: CurrencyNoun) -> str:
        """主币名称（按数量选择单复数）"""

    @abstractmethod
    def subunit_noun(self, count: int, currency: CurrencyNoun) -> str:
        """辅币名称"""

    @abstractmethod
    def join_subunits(self, units_text: str, subunits_text: str) -> str:
        """连接主币与辅币部分"""


class EnglishAmountFormatter(AmountInWordsFormatter):
    language = "en"
    zero_word = "Zero"

    ONES = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
            "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
            "Seventeen", "Eighteen", "Nineteen"]
    TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]
    SCALES = ["", "Thousand", "Million", "Billion"]

    def below_thousand(self, number: int) -> str:
        words = []
        hundreds, rest = divmod(number, 100)
        if hundreds:
            words.extend([self.ONES[hundreds], "Hundred"])
        if rest >= 20:
            tens, ones = divmod(rest, 10)
            words.append(self.TENS[tens])
            if ones:
                words.append(self.ONES[ones])
        elif rest:
            words.append(self.ONES[rest])
        return " ".join(words)

    def scale_phrase(self, group: int, scale_index: int) -> str:
        if group >= SCALE_BASE:
            words = self.spell(group)
        else:
            words = self.below_thousand(group)
        scale = self.SCALES[scale_index]
        return f"{words} {scale}" if scale else words

    def join_groups(self, parts: List[str]) -> str:
        return " ".join(parts)

    def unit_noun(self, count: int, currency: EnglishCurrencyNoun) -> str:
        return currency.singular if count == 1 else currency.plural

    def subunit_noun(self, count: int, currency: EnglishCurrencyNoun) -> str:
        return currency.subunit_singular if count == 1 else currency.subunit_plural

    def join_subunits(self, units_text: str, subunits_text: str) -> str:
        return f"{units_text} and {subunits_text}"


class ArabicAmountFormatter(AmountInWordsFormatter):
    language = "ar"
    zero_word = "صفر"
    AND = "و"

    ONES = ["", "واحد", "اثنان", "ثلاثة", "أربعة", "خمسة", "ستة", "سبعة", "ثمانية", "تسعة",
            "عشرة", "أحد عشر", "اثنا عشر", "ثلاثة عشر", "أربعة عشر", "خمسة عشر",
            "ستة عشر", "سبعة عشر", "ثمانية عشر", "تسعة عشر"]
    TENS = ["", "عشرة", "عشرون", "ثلاثون", "أربعون", "خمسون", "ستون", "سبعون", "ثمانون", "تسعون"]
    HUNDREDS = ["", "مئة", "مئتان", "ثلاثمئة", "أربعمئة", "خمسمئة", "ستمئة", "سبعمئة", "ثمانمئة", "تسعمئة"]

    # 数量级：(单数, 双数, 复数)
    SCALES = [
        None,
        ("ألف", "ألفان", "آلاف"),
        ("مليون", "مليونان", "ملايين"),
        ("مليار", "ملياران", "مليارات"),
    ]

    def conj(self, parts: List[str]) -> str:
        """用 "و" 连接，连接词紧贴后一个词"""
        return f" {self.AND}".join(parts)

    def below_hundred(self, number: int) -> str:
        if number < 20:
            return self.ONES[number]
        tens, ones = divmod(number, 10)
        if not ones:
            return self.TENS[tens]
        # 个位在前
        return self.conj([self.ONES[ones], self.TENS[tens]])

    def below_thousand(self, number: int, before_scale: bool = False) -> str:
        hundreds, rest = divmod(number, 100)
        parts = []
        if hundreds:
            word = self.HUNDREDS[hundreds]
            # 后面紧跟数量级词时 مئتان 变为 مئتا（如 مئتا ألف）
            if hundreds == 2 and not rest and before_scale:
                word = "مئتا"
            parts.append(word)
        if rest:
            parts.append(self.below_hundred(rest))
        return self.conj(parts)

    def scale_phrase(self, group: int, scale_index: int) -> str:
        if scale_index == 0:
            return self.below_thousand(group)
        singular, dual, plural = self.SCALES[scale_index]
        if group == 1:
            return singular
        if group == 2:
            return dual
        if group >= SCALE_BASE:
            return f"{self.spell(group)} {singular}"
        words = self.below_thousand(group, before_scale=True)
        if 3 <= group <= 10:
            return f"{words} {plural}"
        return f"{words} {singular}"

    def join_groups(self, parts: List[str]) -> str:
        return self.conj(parts)

    @staticmethod
    def counted_form(count: int, singular: str, dual: str, plural: str) -> str:
        """计数名词：1 单数，2 双数，末两位 3-10 复数，其余单数"""
        if count == 1:
            return singular
        if count == 2:
            return dual
        if 3 <= count % 100 <= 10:
            return plural
        return singular

    def count_phrase(self, count: int, noun: str) -> str:
        # 1：名词在前、数词在后（دولار واحد）；2：双数名词本身即表示"两个"（دولاران）
        if count == 1:
            return f"{noun} {self.ONES[1]}"
        if count == 2:
            return noun
        return super().count_phrase(count, noun)

    def unit_noun(self, count: int, currency: ArabicCurrencyNoun) -> str:
        return self.counted_form(count, currency.singular, currency.dual, currency.plural)

    def subunit_noun(self, count: int, currency: ArabicCurrencyNoun) -> str:
        return self.counted_form(
            count, currency.subunit_singular, currency.subunit_dual, currency.subunit_plural
        )

    def join_subunits(self, units_text: str, subunits_text: str) -> str:
        return self.conj([units_text, subunits_text])


# ===== 货币名称表 =====
CURRENCY_NOUNS: Dict[str, Dict[str, CurrencyNoun]] = {
    "USD": {
        "en": EnglishCurrencyNoun(
            singular="Dollar", plural="Dollars",
            subunit_singular="Cent", subunit_plural="Cents"
        ),
        "ar": ArabicCurrencyNoun(
            singular="دولار", dual="دولاران", plural="دولارات",
            subunit_singular="سنت", subunit_dual="سنتان", subunit_plural="سنتات"
        ),
    },
    "LYD": {
        "en": EnglishCurrencyNoun(
            singular="Dinar", plural="Dinars",
            subunit_singular="Dirham", subunit_plural="Dirhams"
        ),
        "ar": ArabicCurrencyNoun(
            singular="دينار", dual="ديناران", plural="دنانير",
            subunit_singular="درهم", subunit_dual="درهمان", subunit_plural="دراهم"
        ),
    },
}

FORMATTERS: Dict[str, AmountInWordsFormatter] = {
    "en": EnglishAmountFormatter(),
    "ar": ArabicAmountFormatter(),
}


def get_formatter(language: str) -> AmountInWordsFormatter:
    formatter = FORMATTERS.get((language or "").lower())
    if formatter is None:
        raise ValueError(f"不支持的语言: {language}")
    return formatter


def currency_noun(currency_code: str, language: str) -> CurrencyNoun:
    """按货币代码和语言取货币名称"""
    nouns = CURRENCY_NOUNS.get((currency_code or "").upper())
    if nouns is None:
        raise ValueError(f"没有货币 {currency_code} 的名称")
    return nouns[(language or "").lower()]


def format_amount(
    amount: Any,
    language: str = "en",
    currency: str = "USD",
    noun: Optional[CurrencyNoun] = None
) -> str:
    """
    金额转文字

    Usage:
        format_amount(Decimal("25.50"), "en")  # Twenty Five Dollars and Fifty Cents
        format_amount(2000, "ar", "LYD")       # ألفان دينار
        format_amount(2, "ar", "USD")          # دولاران
    """
    formatter = get_formatter(language)
    return formatter.format(amount, noun or currency_noun(currency, language))
