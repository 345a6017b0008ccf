"""Number systems and digit transliteration.

Formatting always produces ASCII digits first; when a number system other
than ``latn`` is requested the interpreter hands the finished string to a
Transliterator, which swaps each digit for the system's own digit.
"""

from __future__ import annotations

from chronofmt.exceptions import UnknownNumberSystemError


# Decimal digits 0-9 per CLDR numeric number system
NUMBER_SYSTEM_DIGITS: dict[str, str] = {
    "latn": "0123456789",
    "arab": "٠١٢٣٤٥٦٧٨٩",
    "arabext": "۰۱۲۳۴۵۶۷۸۹",
    "beng": "০১২৩৪৫৬৭৮৯",
    "deva": "०१२३४५६७८९",
    "fullwide": "０１２３４５６７８９",
    "hanidec": "〇一二三四五六七八九",
    "khmr": "០១២៣៤៥៦៧៨៩",
    "mymr": "၀၁၂၃၄၅၆၇၈၉",
    "thai": "๐๑๒๓๔๕๖๗๘๙",
    "tibt": "༠༡༢༣༤༥༦༧༨༩",
}


class DigitTransliterator:
    """Transliterator backed by a digit table.

    Example:
        DigitTransliterator().transliterate("2020-01-12", "thai")
        # -> "๒๐๒๐-๐๑-๑๒"
    """

    def __init__(self, systems: dict[str, str] | None = None) -> None:
        self._systems = dict(systems or NUMBER_SYSTEM_DIGITS)
        self._tables = {
            name: str.maketrans("0123456789", digits)
            for name, digits in self._systems.items()
        }

    def register(self, name: str, digits: str) -> None:
        """Add a number system given its ten digits in order."""
        if len(digits) != 10:
            raise ValueError(f"A number system needs exactly 10 digits, got {len(digits)}")
        self._systems[name] = digits
        self._tables[name] = str.maketrans("0123456789", digits)

    def known_systems(self) -> list[str]:
        return sorted(self._systems)

    def validate(self, number_system: str) -> str:
        if number_system not in self._tables:
            raise UnknownNumberSystemError(number_system, self._systems)
        return number_system

    def transliterate(self, text: str, number_system: str) -> str:
        if number_system == "latn":
            return text
        return text.translate(self._tables[self.validate(number_system)])


def group_digits(number: int, group: str = ",", min_grouping: int = 1) -> str:
    """Render an integer with a grouping separator every three digits.

    Grouping only applies when the number has at least ``3 + min_grouping``
    digits, so ``min_grouping=2`` keeps "1000" ungrouped as in Spanish or
    Polish.
    """
    digits = str(abs(number))
    if len(digits) < 3 + min_grouping:
        grouped = digits
    else:
        head = len(digits) % 3 or 3
        parts = [digits[:head]]
        parts.extend(digits[i:i + 3] for i in range(head, len(digits), 3))
        grouped = group.join(parts)
    return f"-{grouped}" if number < 0 else grouped


_default_transliterator = DigitTransliterator()


def get_transliterator() -> DigitTransliterator:
    """Return the shared transliterator instance."""
    return _default_transliterator
