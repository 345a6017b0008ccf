"""CLDR Plural Rules.

Cardinal plural categories for the handful of formats whose text depends
on a count: week-of-year and week-of-month available formats
("'week' w 'of' Y") and relative time ("in 3 days").

Usage:
    from chronofmt.plural import get_plural_category

    get_plural_category(1, "en")  # PluralCategory.ONE
    get_plural_category(5, "ru")  # PluralCategory.MANY
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping, TypeVar

from chronofmt.protocols import LocaleInfo, PluralCategory


PluralRuleFunc = Callable[[float | int], PluralCategory]

T = TypeVar("T")


@dataclass(frozen=True)
class PluralOperands:
    """CLDR plural operands for a number.

    See: https://unicode.org/reports/tr35/tr35-numbers.html#Operands

    Attributes:
        n: Absolute value of the source number
        i: Integer digits of n
        v: Number of visible fraction digits with trailing zeros
        f: Visible fraction digits with trailing zeros
    """
    n: float
    i: int
    v: int
    f: int

    @classmethod
    def from_number(cls, n: float | int) -> "PluralOperands":
        abs_n = abs(n)
        if isinstance(abs_n, int):
            return cls(n=float(abs_n), i=abs_n, v=0, f=0)

        text = repr(abs_n)
        if "." in text and "e" not in text:
            fraction = text.split(".")[1].rstrip("0")
            return cls(n=abs_n, i=int(abs_n), v=len(fraction), f=int(fraction or 0))
        return cls(n=abs_n, i=int(abs_n), v=0, f=0)


# ==========================================
# Cardinal rules
# ==========================================

def _one_other(n: float | int) -> PluralCategory:
    # one: i = 1 and v = 0
    op = PluralOperands.from_number(n)
    if op.i == 1 and op.v == 0:
        return PluralCategory.ONE
    return PluralCategory.OTHER


def _french(n: float | int) -> PluralCategory:
    # one: i = 0,1
    op = PluralOperands.from_number(n)
    if op.i in (0, 1):
        return PluralCategory.ONE
    if op.v == 0 and op.i != 0 and op.i % 1_000_000 == 0:
        return PluralCategory.MANY
    return PluralCategory.OTHER


def _east_slavic(n: float | int) -> PluralCategory:
    op = PluralOperands.from_number(n)
    i10 = op.i % 10
    i100 = op.i % 100
    if op.v == 0 and i10 == 1 and i100 != 11:
        return PluralCategory.ONE
    if op.v == 0 and 2 <= i10 <= 4 and not 12 <= i100 <= 14:
        return PluralCategory.FEW
    if op.v == 0 and (i10 == 0 or 5 <= i10 <= 9 or 11 <= i100 <= 14):
        return PluralCategory.MANY
    return PluralCategory.OTHER


def _polish(n: float | int) -> PluralCategory:
    op = PluralOperands.from_number(n)
    i10 = op.i % 10
    i100 = op.i % 100
    if op.i == 1 and op.v == 0:
        return PluralCategory.ONE
    if op.v == 0 and 2 <= i10 <= 4 and not 12 <= i100 <= 14:
        return PluralCategory.FEW
    if op.v == 0 and (i10 in (0, 1) or 5 <= i10 <= 9 or 12 <= i100 <= 14):
        return PluralCategory.MANY
    return PluralCategory.OTHER


def _czech(n: float | int) -> PluralCategory:
    op = PluralOperands.from_number(n)
    if op.i == 1 and op.v == 0:
        return PluralCategory.ONE
    if 2 <= op.i <= 4 and op.v == 0:
        return PluralCategory.FEW
    if op.v != 0:
        return PluralCategory.MANY
    return PluralCategory.OTHER


def _arabic(n: float | int) -> PluralCategory:
    op = PluralOperands.from_number(n)
    if op.n == 0:
        return PluralCategory.ZERO
    if op.n == 1:
        return PluralCategory.ONE
    if op.n == 2:
        return PluralCategory.TWO
    n100 = op.i % 100 if op.v == 0 else -1
    if 3 <= n100 <= 10:
        return PluralCategory.FEW
    if 11 <= n100 <= 99:
        return PluralCategory.MANY
    return PluralCategory.OTHER


def _no_plural(n: float | int) -> PluralCategory:
    return PluralCategory.OTHER


_DEFAULT_RULES: dict[str, PluralRuleFunc] = {
    **{lang: _one_other for lang in (
        "en", "de", "nl", "it", "es", "ca", "da", "nb", "nn", "no", "sv",
        "fi", "et", "el", "hu", "tr", "bg",
    )},
    "fr": _french,
    "pt": _french,
    **{lang: _east_slavic for lang in ("ru", "uk", "be")},
    "pl": _polish,
    "cs": _czech,
    "sk": _czech,
    "ar": _arabic,
    **{lang: _no_plural for lang in ("ja", "zh", "ko", "th", "vi", "id", "ms")},
}


class CLDRPluralRules:
    """Cardinal plural rule provider keyed by language.

    Languages without a registered rule use the English one/other rule.

    Example:
        rules = CLDRPluralRules()
        rules.get_category(1, LocaleInfo.parse("en"))  # ONE
        rules.get_category(2, LocaleInfo.parse("ru"))  # FEW
    """

    def __init__(self) -> None:
        self._rules: dict[str, PluralRuleFunc] = dict(_DEFAULT_RULES)

    def register_rule(self, language: str, rule: PluralRuleFunc) -> None:
        """Register or override the cardinal rule of a language."""
        self._rules[language] = rule

    def get_category(self, count: float | int, locale: LocaleInfo) -> PluralCategory:
        rule = self._rules.get(locale.tag) or self._rules.get(locale.language, _one_other)
        return rule(count)

    def select(
        self,
        count: float | int,
        forms: Mapping[PluralCategory, T],
        locale: LocaleInfo,
    ) -> T:
        """Pick the form for a count, falling back to OTHER.

        Raises:
            KeyError: If neither the category nor OTHER is present.
        """
        category = self.get_category(count, locale)
        if category in forms:
            return forms[category]
        return forms[PluralCategory.OTHER]


_plural_rules = CLDRPluralRules()


def get_plural_rules() -> CLDRPluralRules:
    """Get the shared plural rules instance."""
    return _plural_rules


def get_plural_category(count: float | int, locale: str | LocaleInfo) -> PluralCategory:
    """Get the plural category for a number.

    Example:
        get_plural_category(1, "fr")  # ONE
        get_plural_category(0, "fr")  # ONE
        get_plural_category(0, "en")  # OTHER
    """
    return _plural_rules.get_category(count, LocaleInfo.parse(locale))
