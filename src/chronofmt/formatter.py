"""Public formatting API.

DateTimeFormatter binds a locale, calendar and options to the collaborators
that supply data (locale tables, plural rules, digit transliteration and
calendar fields), then formats single values, intervals and relative times.

The module-level functions build a formatter from the global configuration
for each call:

    >>> from datetime import date
    >>> import chronofmt
    >>> chronofmt.format(date(2017, 7, 10), "full")
    'Monday, July 10, 2017'
    >>> chronofmt.format_interval(date(2020, 1, 1), date(2020, 1, 12))
    'Jan 1 – 12, 2020'
    >>> chronofmt.format({"year": 2024, "month": 3})
    '3/2024'
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any

from chronofmt import compiler
from chronofmt.calendar import get_calendar
from chronofmt.compiler import CompiledPattern
from chronofmt.config import get_config
from chronofmt.fields import RenderContext
from chronofmt.interpreter import format_pattern
from chronofmt.interval import format_interval as _format_interval
from chronofmt.locale_data import LocaleFormatTable, get_registry
from chronofmt.numbers import get_transliterator
from chronofmt.plural import get_plural_rules
from chronofmt.protocols import (
    CalendarProvider,
    HourCycle,
    LocaleDataProvider,
    LocaleInfo,
    PluralRuleProvider,
    Transliterator,
)
from chronofmt.relative import format_relative as _format_relative
from chronofmt.resolver import ResolvedFormat, coerce_request, resolve
from chronofmt.value import TemporalValue, coerce_value


class DateTimeFormatter:
    """Formats dates, times and intervals for one locale.

    Example:
        formatter = DateTimeFormatter("fr")
        formatter.format(date(2020, 1, 1))  # "1 janv. 2020"
        formatter.format_interval(date(2020, 1, 1), date(2020, 1, 12))  # "1–12 janv. 2020"
    """

    def __init__(
        self,
        locale: str | LocaleInfo = "en",
        calendar: str = "gregorian",
        number_system: str | None = None,
        hour_cycle: HourCycle | str | None = None,
        *,
        locale_provider: LocaleDataProvider | None = None,
        plural_rules: PluralRuleProvider | None = None,
        transliterator: Transliterator | None = None,
        calendar_provider: CalendarProvider | None = None,
    ) -> None:
        """Initialize the formatter.

        Args:
            locale: Locale tag or LocaleInfo
            calendar: Calendar kind
            number_system: Number system for digits, None for the locale's
            hour_cycle: Hour cycle override ("h11", "h12", "h23", "h24")
            locale_provider: Source of locale tables
            plural_rules: Source of plural categories
            transliterator: Digit transliterator
            calendar_provider: Calendar field extractor

        Raises:
            UnknownLocaleError: If no data exists for the locale.
            UnknownCalendarError: If the calendar kind is not registered.
        """
        self.locale = LocaleInfo.parse(locale)
        self.calendar_kind = calendar
        self.number_system = number_system
        self.hour_cycle = HourCycle(hour_cycle) if hour_cycle is not None else None
        self.plural_rules = plural_rules or get_plural_rules()
        self.transliterator = transliterator or get_transliterator()
        self.calendar = calendar_provider or get_calendar(calendar)
        self.table: LocaleFormatTable = (locale_provider or get_registry()).lookup(
            self.locale, calendar
        )

    def resolve(self, value: Any, request: Any = None) -> ResolvedFormat:
        """Resolve a request to the pattern that would format a value."""
        return resolve(
            coerce_request(request),
            coerce_value(value),
            self.table,
            self.plural_rules,
            self.calendar,
            self.hour_cycle,
        )

    def render(
        self,
        pattern: str,
        value: TemporalValue,
        number_system: str | None = None,
    ) -> str:
        """Render a pattern string for a value."""
        return format_pattern(
            pattern,
            value,
            RenderContext(self.table, self.calendar),
            number_system or self.number_system,
            self.transliterator,
        )

    def format(self, value: Any, request: Any = None) -> str:
        """Format a single value.

        Args:
            value: TemporalValue, date, time, datetime or a field mapping
            request: None, a standard style name, a FormatRequest or a pattern

        Returns:
            The formatted string.
        """
        value = coerce_value(value)
        resolved = self.resolve(value, request)
        return self.render(resolved.pattern, value, resolved.number_system)

    def format_interval(
        self,
        start: Any,
        end: Any,
        request: Any = None,
        style: Any = None,
    ) -> str:
        """Format the interval between two values (either may be None)."""
        return _format_interval(self, start, end, request, style)

    def format_relative(
        self,
        value: int | float | timedelta | date | datetime,
        unit: str | None = None,
        relative_to: date | datetime | None = None,
        style: str = "default",
    ) -> str:
        """Format a relative time such as "in 3 days" or "yesterday"."""
        text = _format_relative(value, self.table, self.plural_rules, unit, relative_to, style)
        system = self.number_system or self.table.number_system
        if system != "latn":
            text = self.transliterator.transliterate(text, system)
        return text

    def __repr__(self) -> str:
        return f"DateTimeFormatter(locale={self.locale.tag!r}, calendar={self.calendar_kind!r})"


# =============================================================================
# Convenience Functions
# =============================================================================


def get_formatter(
    locale: str | LocaleInfo | None = None,
    calendar: str | None = None,
    number_system: str | None = None,
    hour_cycle: HourCycle | str | None = None,
) -> DateTimeFormatter:
    """Build a formatter, filling unset arguments from the global configuration."""
    config = get_config()
    return DateTimeFormatter(
        locale or config.default_locale,
        calendar or config.default_calendar,
        number_system or config.default_number_system,
        hour_cycle or config.hour_cycle,
    )


def format(
    value: Any,
    request: Any = None,
    locale: str | LocaleInfo | None = None,
    calendar: str | None = None,
    number_system: str | None = None,
    hour_cycle: HourCycle | str | None = None,
) -> str:
    """Format a date, time or date-time value.

    Example:
        format(date(2017, 7, 10), "full")          # "Monday, July 10, 2017"
        format(time(7, 35, 13), "short")           # "7:35 AM"
        format({"hour": 23})                       # "11 PM"
        format(date(2020, 1, 1), Skeleton("yMMM"))  # "Jan 2020"
    """
    formatter = get_formatter(locale, calendar, number_system, hour_cycle)
    return formatter.format(value, request)


def format_interval(
    start: Any,
    end: Any,
    request: Any = None,
    locale: str | LocaleInfo | None = None,
    calendar: str | None = None,
    style: Any = None,
    number_system: str | None = None,
    hour_cycle: HourCycle | str | None = None,
) -> str:
    """Format an interval between two values.

    Example:
        format_interval(date(2020, 1, 1), date(2020, 1, 12))  # "Jan 1 – 12, 2020"
        format_interval(date(2020, 1, 1), None)               # "Jan 1, 2020 –"
    """
    formatter = get_formatter(locale, calendar, number_system, hour_cycle)
    return formatter.format_interval(start, end, request, style)


def format_relative(
    value: int | float | timedelta | date | datetime,
    unit: str | None = None,
    relative_to: date | datetime | None = None,
    style: str = "default",
    locale: str | LocaleInfo | None = None,
) -> str:
    """Format a relative time.

    Example:
        format_relative(-1, unit="day")  # "yesterday"
        format_relative(3, unit="day")   # "in 3 days"
        format_relative(-7200)           # "2 hours ago"
    """
    return get_formatter(locale).format_relative(value, unit, relative_to, style)


def compile(pattern: str) -> CompiledPattern:
    """Compile a pattern through the shared cache."""
    return compiler.compile(pattern)
