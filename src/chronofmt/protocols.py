"""Protocol Definitions and Shared Types.

This module defines the enumerations shared across the formatting engine and
the protocols (interfaces) of its collaborators, so that locale data, plural
rules, digit transliteration and calendar field extraction can be swapped
for fuller implementations.

Protocols:
- LocaleDataProvider: Per-locale, per-calendar format tables
- PluralRuleProvider: CLDR cardinal plural categories
- Transliterator: Digit substitution for number systems
- CalendarProvider: Calendar-specific derived fields
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from chronofmt.calendar import CalendarFields
    from chronofmt.locale_data import LocaleFormatTable
    from chronofmt.value import TemporalValue


# ==============================================================================
# Enums and Type Definitions
# ==============================================================================

class PluralCategory(str, Enum):
    """CLDR plural categories.

    Based on Unicode CLDR plural rules:
    https://cldr.unicode.org/index/cldr-spec/plural-rules
    """
    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"


class FormatStyle(str, Enum):
    """The four standard CLDR format lengths."""
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    FULL = "full"


class ValueKind(str, Enum):
    """Which axes a temporal value carries."""
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"


class IntervalStyle(str, Enum):
    """Interval styles for dates and times."""
    # Date styles
    DATE = "date"
    MONTH_AND_DAY = "month_and_day"
    MONTH = "month"
    YEAR_AND_MONTH = "year_and_month"
    # Time styles
    TIME = "time"
    ZONE = "zone"
    FLEX = "flex"


class HourCycle(str, Enum):
    """Unicode hour cycle preferences (the ``-u-hc`` extension)."""
    H11 = "h11"
    H12 = "h12"
    H23 = "h23"
    H24 = "h24"

    @property
    def symbol(self) -> str:
        return _HOUR_CYCLE_SYMBOLS[self]

    @property
    def is_24_hour(self) -> bool:
        return self.symbol in TWENTY_FOUR_HOUR_SYMBOLS


_HOUR_CYCLE_SYMBOLS = {
    HourCycle.H11: "K",
    HourCycle.H12: "h",
    HourCycle.H23: "H",
    HourCycle.H24: "k",
}

TWENTY_FOUR_HOUR_SYMBOLS = frozenset("Hk")


class NameWidth(str, Enum):
    """Widths of localized names (months, weekdays, eras, periods)."""
    ABBREVIATED = "abbreviated"
    WIDE = "wide"
    NARROW = "narrow"
    SHORT = "short"


class NameContext(str, Enum):
    """Formatting context of localized names."""
    FORMAT = "format"
    STAND_ALONE = "stand_alone"


# ==============================================================================
# Locale Information
# ==============================================================================

@dataclass(frozen=True)
class LocaleInfo:
    """Parsed locale identifier.

    Attributes:
        language: ISO 639-1 language code (e.g., "en", "fr")
        region: ISO 3166-1 region code (e.g., "US", "CA")
        script: ISO 15924 script code (e.g., "Latn", "Hans")
        variant: Locale variant
    """
    language: str
    region: str | None = None
    script: str | None = None
    variant: str | None = None

    @property
    def tag(self) -> str:
        """Get BCP 47 language tag."""
        parts = [self.language]
        if self.script:
            parts.append(self.script)
        if self.region:
            parts.append(self.region)
        if self.variant:
            parts.append(self.variant)
        return "-".join(parts)

    @property
    def fallback_chain(self) -> list[str]:
        """Tags to try when loading data, most specific first."""
        chain = [self.tag]
        if self.script and self.region:
            chain.append(f"{self.language}-{self.script}")
        if self.region or self.script or self.variant:
            chain.append(self.language)
        return list(dict.fromkeys(chain))

    @classmethod
    def parse(cls, tag: "str | LocaleInfo") -> "LocaleInfo":
        """Parse a locale tag.

        Supports "en", "en-US", "en_US", "zh-Hans" and "sr-Latn-RS".

        Args:
            tag: Locale tag string (or an already parsed LocaleInfo)

        Returns:
            Parsed LocaleInfo
        """
        if isinstance(tag, LocaleInfo):
            return tag

        parts = tag.replace("_", "-").split("-")

        language = parts[0].lower()
        region = None
        script = None
        variant = None

        for part in parts[1:]:
            if len(part) == 4 and part.isalpha():
                script = part.capitalize()
            elif len(part) == 2 and part.isalpha():
                region = part.upper()
            elif len(part) == 3 and part.isdigit():
                region = part
            elif part:
                variant = part.lower()

        return cls(language=language, region=region, script=script, variant=variant)

    def __str__(self) -> str:
        return self.tag


# ==============================================================================
# Collaborator Protocols
# ==============================================================================

@runtime_checkable
class LocaleDataProvider(Protocol):
    """Protocol for supplying per-locale format tables."""

    def lookup(self, locale: LocaleInfo, calendar: str) -> "LocaleFormatTable":
        """Return the table for a locale and calendar kind.

        Raises:
            UnknownLocaleError: If no data exists for the locale.
        """
        ...


@runtime_checkable
class PluralRuleProvider(Protocol):
    """Protocol for CLDR cardinal plural rules."""

    def get_category(self, count: float | int, locale: LocaleInfo) -> PluralCategory:
        """Return the plural category of a number in a locale."""
        ...


@runtime_checkable
class Transliterator(Protocol):
    """Protocol for replacing Latin digits with another number system."""

    def transliterate(self, text: str, number_system: str) -> str:
        """Return text with ASCII digits replaced by the system's digits."""
        ...


@runtime_checkable
class CalendarProvider(Protocol):
    """Protocol for extracting calendar-specific derived fields."""

    def extract(
        self,
        value: "TemporalValue",
        first_day: int,
        min_days: int,
    ) -> "CalendarFields":
        """Derive weekday, day-of-year, week numbers, quarter and era."""
        ...
