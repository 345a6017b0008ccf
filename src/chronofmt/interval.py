"""Interval formatting.

Formats a pair of values as one compact range, such as "Jan 1 – 12, 2020"
or "8:00 – 10:00 PM". The greatest differing field of the two values
selects a two-part pattern from the locale's interval formats; the first
part renders the start, the second the end.

Flow:
1. Reject incompatible ends (different fields, kinds or zones) and
   reversed ranges.
2. Collapse to a single value when nothing down to the minute differs.
3. Date-times render each end with a date-time format joined by the
   locale's interval fallback.
4. Dates and times select an interval skeleton from the style and format,
   then a two-part pattern by greatest difference.

An open interval (one end ``None``) renders the present end inside the
fallback pattern: "Jan 1, 2020 –".
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from chronofmt.compiler import TIME_SYMBOLS, split_interval
from chronofmt.exceptions import (
    DateTimeOrderError,
    IncompatibleTimeZoneError,
    IntervalFormatError,
    InvalidStyle,
    UnresolvedFormat,
)
from chronofmt.locale_data import LocaleFormatTable
from chronofmt.match import apply_hour_cycle, put_preferred_time_symbols
from chronofmt.protocols import FormatStyle, HourCycle, IntervalStyle, ValueKind
from chronofmt.resolver import (
    FormatRequest,
    LiteralPattern,
    Skeleton,
    StandardStyle,
    WithNumberSystem,
    coerce_request,
    default_request,
    derive_skeleton,
    is_complete,
)
from chronofmt.value import DATE_FIELDS, TIME_FIELDS, TemporalValue, coerce_value

if TYPE_CHECKING:
    from chronofmt.formatter import DateTimeFormatter

logger = logging.getLogger(__name__)


# ==============================================================================
# Styles
# ==============================================================================

# ``j`` stands for the locale's preferred hour symbol
DATE_STYLES: dict[IntervalStyle, dict[FormatStyle, str]] = {
    IntervalStyle.DATE: {
        FormatStyle.SHORT: "yMd",
        FormatStyle.MEDIUM: "yMMMd",
        FormatStyle.LONG: "yMMMEd",
    },
    IntervalStyle.MONTH_AND_DAY: {
        FormatStyle.SHORT: "Md",
        FormatStyle.MEDIUM: "MMMd",
        FormatStyle.LONG: "MMMEd",
    },
    IntervalStyle.MONTH: {
        FormatStyle.SHORT: "M",
        FormatStyle.MEDIUM: "MMM",
        FormatStyle.LONG: "MMM",
    },
    IntervalStyle.YEAR_AND_MONTH: {
        FormatStyle.SHORT: "yM",
        FormatStyle.MEDIUM: "yMMM",
        FormatStyle.LONG: "yMMMM",
    },
}

TIME_STYLES: dict[IntervalStyle, dict[FormatStyle, str]] = {
    IntervalStyle.TIME: {
        FormatStyle.SHORT: "j",
        FormatStyle.MEDIUM: "jm",
        FormatStyle.LONG: "jm",
    },
    IntervalStyle.ZONE: {
        FormatStyle.SHORT: "jv",
        FormatStyle.MEDIUM: "jmv",
        FormatStyle.LONG: "jmv",
    },
    IntervalStyle.FLEX: {
        FormatStyle.SHORT: "Bh",
        FormatStyle.MEDIUM: "Bhm",
        FormatStyle.LONG: "Bhm",
    },
}

_STYLES_BY_KIND = {
    ValueKind.DATE: (DATE_STYLES, IntervalStyle.DATE),
    ValueKind.TIME: (TIME_STYLES, IntervalStyle.TIME),
}

# Interval data only distinguishes 12- and 24-hour skeletons
_INTERVAL_HOUR = str.maketrans({"K": "h", "k": "H"})

_DIFFERENCE_FIELDS = (
    ("year", "y"),
    ("month", "M"),
    ("day", "d"),
    ("hour", "H"),
    ("minute", "m"),
)

_DATE_FALLBACKS = {
    "y": ("y",),
    "M": ("M", "y"),
    "d": ("d", "M", "y"),
}


def greatest_difference(start: TemporalValue, end: TemporalValue) -> str | None:
    """Symbol of the most significant field on which two values differ.

    Only year, month, day, hour and minute are compared; None means the
    values are the same to the minute.
    """
    for name, symbol in _DIFFERENCE_FIELDS:
        a, b = getattr(start, name), getattr(end, name)
        if a is not None and b is not None and a != b:
            return symbol
    return None


def coerce_style(style: Any, kind: ValueKind | None) -> IntervalStyle:
    """Validate an interval style for a value kind.

    Raises:
        InvalidStyle: If the style is unknown or belongs to the other kind.
    """
    styles, default = _STYLES_BY_KIND.get(kind, ({}, None))
    valid = [s.value for s in styles]
    if style is None:
        if default is None:
            raise InvalidStyle(str(style), valid)
        return default
    try:
        style = IntervalStyle(style)
    except ValueError:
        raise InvalidStyle(str(style), valid) from None
    if style not in styles:
        raise InvalidStyle(style.value, valid)
    return style


# ==============================================================================
# Pattern selection
# ==============================================================================

def _period(hour: int) -> str:
    return "am" if hour < 12 else "pm"


def _hour_key(
    formats: dict[str, tuple[str, str]],
    start: TemporalValue,
    end: TemporalValue,
    table: LocaleFormatTable,
) -> str | None:
    if "a" in formats and _period(start.hour) != _period(end.hour):
        return "a"
    if "B" in formats and table.day_period(start.hour, start.minute or 0) != table.day_period(
        end.hour, end.minute or 0
    ):
        return "B"
    for key in ("h", "H"):
        if key in formats:
            return key
    return None


def difference_key(
    formats: dict[str, tuple[str, str]],
    difference: str,
    start: TemporalValue,
    end: TemporalValue,
    table: LocaleFormatTable,
) -> str | None:
    """The interval format key to use for a greatest difference.

    Dates fall back from day to month to year. Times prefer the am/pm key
    when the period changes, then the flexible period key, then the hour
    key; a minute difference falls back to the hour keys.
    """
    if difference in _DATE_FALLBACKS:
        for key in _DATE_FALLBACKS[difference]:
            if key in formats:
                return key
        return None
    if difference == "m" and "m" in formats:
        return "m"
    return _hour_key(formats, start, end, table)


def interval_skeleton(
    request: FormatRequest | None,
    style: Any,
    value: TemporalValue,
    table: LocaleFormatTable,
    hour_cycle: HourCycle | None = None,
) -> str:
    """The interval skeleton id for a request, style and value kind."""
    kind = value.kind
    if isinstance(request, Skeleton):
        skeleton = request.id
    else:
        if request is None and style is None and not is_complete(value):
            return put_preferred_time_symbols(derive_skeleton(value), table, hour_cycle).translate(
                _INTERVAL_HOUR
            )
        interval_style = coerce_style(style, kind)
        length = request.style if isinstance(request, StandardStyle) else FormatStyle.MEDIUM
        if length is FormatStyle.FULL:
            length = FormatStyle.LONG
        styles, _ = _STYLES_BY_KIND[kind]
        skeleton = styles[interval_style][length]
    return put_preferred_time_symbols(skeleton, table, hour_cycle).translate(_INTERVAL_HOUR)


def select_pattern(
    skeleton: str,
    difference: str,
    start: TemporalValue,
    end: TemporalValue,
    table: LocaleFormatTable,
) -> tuple[str, str]:
    """Return the ``(from, to)`` patterns of an interval skeleton.

    Raises:
        UnresolvedFormat: If the locale has no interval format for the
            skeleton or none for the difference.
    """
    formats = table.interval_formats.get(skeleton)
    if formats is None:
        raise UnresolvedFormat(skeleton)
    key = difference_key(formats, difference, start, end, table)
    if key is None:
        raise UnresolvedFormat(
            skeleton,
            f'No interval format resolved for "{skeleton}" with greatest difference "{difference}"',
        )
    return formats[key]


# ==============================================================================
# Formatting
# ==============================================================================

def _check_compatible(start: TemporalValue, end: TemporalValue) -> None:
    fields = DATE_FIELDS + TIME_FIELDS
    start_fields = {name for name in fields if getattr(start, name) is not None}
    end_fields = {name for name in fields if getattr(end, name) is not None}
    if start_fields != end_fields:
        raise IntervalFormatError(
            f"Interval ends must carry the same fields. Found {start!r}, {end!r}."
        )
    if start.has_zone != end.has_zone:
        raise IncompatibleTimeZoneError(start, end)
    if start.time_zone is not None and end.time_zone is not None and start.time_zone != end.time_zone:
        raise IncompatibleTimeZoneError(start, end)


def _unwrap(request: FormatRequest | None) -> tuple[FormatRequest | None, str | None]:
    if isinstance(request, WithNumberSystem):
        return request.request, request.system
    return request, None


def _time_request(request: FormatRequest | None, value: TemporalValue) -> FormatRequest | None:
    if request is None:
        request = default_request(value)
    if isinstance(request, Skeleton):
        time_skeleton = "".join(ch for ch in request.id if ch in TIME_SYMBOLS or ch in "jJC")
        return Skeleton(time_skeleton) if time_skeleton else request
    return request


def _format_open(
    formatter: "DateTimeFormatter",
    start: TemporalValue | None,
    end: TemporalValue | None,
    request: FormatRequest | None,
) -> str:
    fallback = formatter.table.interval_fallback
    start_text = formatter.format(start, request) if start is not None else ""
    end_text = formatter.format(end, request) if end is not None else ""
    return fallback.replace("{0}", start_text).replace("{1}", end_text).strip()


def _format_date_time(
    formatter: "DateTimeFormatter",
    start: TemporalValue,
    end: TemporalValue,
    request: FormatRequest | None,
    difference: str,
    number_system: str | None,
) -> str:
    start_text = formatter.format(start, _wrap(request, number_system))
    if difference in ("H", "m"):
        end_text = formatter.format(end.time_part(), _wrap(_time_request(request, end), number_system))
    else:
        end_text = formatter.format(end, _wrap(request, number_system))
    fallback = formatter.table.interval_fallback
    return fallback.replace("{0}", start_text).replace("{1}", end_text)


def _wrap(request: FormatRequest | None, number_system: str | None) -> FormatRequest | None:
    if number_system is None:
        return request
    return WithNumberSystem(request, number_system)


def format_interval(
    formatter: "DateTimeFormatter",
    start: Any,
    end: Any,
    request: Any = None,
    style: Any = None,
) -> str:
    """Format the interval from ``start`` to ``end``.

    Args:
        formatter: Single-value formatter bound to a locale
        start: Start value, or None for an interval open at the start
        end: End value, or None for an interval open at the end
        request: Format request (standard style, skeleton, pattern)
        style: Interval style, e.g. "date", "year_and_month", "time", "flex"

    Raises:
        IntervalFormatError: If both ends are None or the ends differ in
            their fields.
        IncompatibleTimeZoneError: If the ends are in different zones.
        DateTimeOrderError: If the start is after the end.
        InvalidStyle: If the style does not fit the value kind.
        UnresolvedFormat: If no interval format fits.
    """
    request = coerce_request(request)
    start = coerce_value(start) if start is not None else None
    end = coerce_value(end) if end is not None else None

    if start is None and end is None:
        raise IntervalFormatError("An interval needs at least one end")
    if start is None or end is None:
        if style is not None:
            present = start if start is not None else end
            coerce_style(style, present.kind)
        return _format_open(formatter, start, end, request)

    _check_compatible(start, end)
    if start.sort_key() > end.sort_key():
        raise DateTimeOrderError(start, end)

    difference = greatest_difference(start, end)
    if difference is None:
        return formatter.format(start, request)

    inner, number_system = _unwrap(request)
    kind = start.kind

    if kind is ValueKind.DATETIME:
        if style is not None:
            raise InvalidStyle(str(style), [])
        if not isinstance(inner, LiteralPattern):
            return _format_date_time(formatter, start, end, inner, difference, number_system)

    table = formatter.table
    if isinstance(inner, LiteralPattern):
        from_pattern, to_pattern = split_interval(inner.pattern)
    else:
        skeleton = interval_skeleton(inner, style, start, table, formatter.hour_cycle)
        if (
            inner is None
            and style is None
            and not is_complete(start)
            and skeleton not in table.interval_formats
        ):
            logger.debug("No interval format for %r, joining single values", skeleton)
            text = table.interval_fallback
            return text.replace("{0}", formatter.format(start, request)).replace(
                "{1}", formatter.format(end, request)
            )
        from_pattern, to_pattern = select_pattern(skeleton, difference, start, end, table)

    if formatter.hour_cycle is not None and kind is ValueKind.TIME:
        from_pattern = apply_hour_cycle(from_pattern, formatter.hour_cycle)
        to_pattern = apply_hour_cycle(to_pattern, formatter.hour_cycle)

    return formatter.render(from_pattern, start, number_system) + formatter.render(
        to_pattern, end, number_system
    )
