"""Format resolution.

Turns a format request and the value being formatted into the pattern to
render. A request is one of:

- ``StandardStyle``: short, medium, long or full for the value's kind
- ``Skeleton``: an available format id, best-matched when absent
- ``LiteralPattern``: a pattern used as is
- ``WithNumberSystem``: any of the above rendered in another number system

Without a request, complete values use the medium style and partial values
derive a skeleton from the fields they carry.

Usage:
    from chronofmt.resolver import Skeleton, resolve

    resolved = resolve(Skeleton("yMMMd"), value, table)
    resolved.pattern  # "MMM d, y"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from chronofmt.calendar import get_calendar
from chronofmt.compiler import compile, tokenize_skeleton
from chronofmt.exceptions import PartialValueRejectsStandardFormat, RenderError
from chronofmt.locale_data import LocaleFormatTable, PluralPattern
from chronofmt.match import (
    adjust_field_lengths,
    apply_hour_cycle,
    best_match,
    put_preferred_time_symbols,
)
from chronofmt.plural import get_plural_rules
from chronofmt.protocols import (
    CalendarProvider,
    FormatStyle,
    HourCycle,
    PluralCategory,
    PluralRuleProvider,
    ValueKind,
)
from chronofmt.value import TemporalValue


# ==============================================================================
# Requests
# ==============================================================================

@dataclass(frozen=True)
class StandardStyle:
    style: FormatStyle


@dataclass(frozen=True)
class Skeleton:
    id: str


@dataclass(frozen=True)
class LiteralPattern:
    pattern: str


@dataclass(frozen=True)
class WithNumberSystem:
    request: "FormatRequest | None"
    system: str


FormatRequest = Union[StandardStyle, Skeleton, LiteralPattern, WithNumberSystem]

_STYLE_NAMES = {style.value: style for style in FormatStyle}


def coerce_request(request: Any) -> FormatRequest | None:
    """Map plain Python inputs to a FormatRequest.

    - ``None`` stays ``None`` (resolved from the value)
    - a FormatStyle or "short"/"medium"/"long"/"full" is a standard style
    - ``(request, "thai")`` is a request in another number system
    - any other string is a literal pattern
    """
    if request is None or isinstance(
        request, (StandardStyle, Skeleton, LiteralPattern, WithNumberSystem)
    ):
        return request
    if isinstance(request, FormatStyle):
        return StandardStyle(request)
    if isinstance(request, tuple) and len(request) == 2:
        return WithNumberSystem(coerce_request(request[0]), request[1])
    if isinstance(request, str):
        if request in _STYLE_NAMES:
            return StandardStyle(_STYLE_NAMES[request])
        return LiteralPattern(request)
    raise TypeError(f"Unsupported format request: {request!r}")


@dataclass(frozen=True)
class ResolvedFormat:
    """A pattern ready to compile, with an optional number system."""
    pattern: str
    number_system: str | None = None


# ==============================================================================
# Skeleton derivation
# ==============================================================================

_SKELETON_FIELDS = (
    ("year", "y"),
    ("month", "M"),
    ("day", "d"),
    ("hour", "j"),
    ("minute", "m"),
    ("second", "s"),
)


def derive_skeleton(value: TemporalValue) -> str:
    """Skeleton naming the fields a value carries, e.g. ``{year, month}`` -> "yM"."""
    skeleton = "".join(
        symbol for name, symbol in _SKELETON_FIELDS if getattr(value, name) is not None
    )
    if value.has_zone:
        skeleton += "v"
    return skeleton


def is_complete(value: TemporalValue) -> bool:
    """True for a full date, a full time with seconds, or both."""
    kind = value.kind
    if kind is ValueKind.DATE:
        return value.is_full_date
    if kind is ValueKind.TIME:
        return value.has("hour", "minute", "second")
    if kind is ValueKind.DATETIME:
        return value.is_full_date and value.has("hour", "minute", "second")
    return False


def default_request(value: TemporalValue) -> FormatRequest:
    if is_complete(value):
        return StandardStyle(FormatStyle.MEDIUM)
    return Skeleton(derive_skeleton(value))


# ==============================================================================
# Resolution
# ==============================================================================

def combine_date_time(template: str, date_pattern: str, time_pattern: str) -> str:
    """Fill a date-time template: ``{1}`` is the date, ``{0}`` the time."""
    return template.replace("{1}", date_pattern).replace("{0}", time_pattern)


def standard_pattern(style: FormatStyle, value: TemporalValue, table: LocaleFormatTable) -> str:
    """The standard pattern of a style for the value's kind.

    Long and full date-times prefer the locale's "at" joining pattern.

    Raises:
        PartialValueRejectsStandardFormat: If the value lacks a field the
            style's kind requires.
    """
    kind = value.kind
    required: tuple[str, ...] = ()
    if kind in (ValueKind.DATE, ValueKind.DATETIME, None):
        required += ("year", "month", "day")
    if kind in (ValueKind.TIME, ValueKind.DATETIME, None):
        required += ("hour", "minute")
    missing = [name for name in required if getattr(value, name) is None]
    if missing:
        raise PartialValueRejectsStandardFormat(style.value, missing)

    if kind is ValueKind.DATE:
        return table.date_formats[style]
    if kind is ValueKind.TIME:
        return table.time_formats[style]

    template = table.datetime_at_formats.get(style) or table.datetime_formats[style]
    return combine_date_time(template, table.date_formats[style], table.time_formats[style])


def joining_style(date_pattern: str) -> FormatStyle:
    """Date-time joining style implied by the month and weekday widths of a date pattern."""
    compiled = compile(date_pattern)
    wide_month = compiled.has_symbol("M", 4) or compiled.has_symbol("L", 4)
    if wide_month and (compiled.has_symbol("E") or compiled.has_symbol("c", 3)):
        return FormatStyle.FULL
    if wide_month:
        return FormatStyle.LONG
    if compiled.has_symbol("M", 3) or compiled.has_symbol("L", 3):
        return FormatStyle.MEDIUM
    return FormatStyle.SHORT


def available_pattern(
    format_id: str,
    value: TemporalValue,
    table: LocaleFormatTable,
    plural_rules: PluralRuleProvider,
    calendar: CalendarProvider,
) -> str:
    """The pattern of an available format, choosing plural forms by count."""
    entry = table.available_formats[format_id]
    if not isinstance(entry, PluralPattern):
        return entry

    derived = calendar.extract(value, table.first_day, table.min_days)
    count = getattr(derived, entry.pluralize)
    if count is None:
        raise RenderError(format_id, ("year", "month", "day"), value)
    category = plural_rules.get_category(count, table.locale)
    return entry.forms.get(category) or entry.forms[PluralCategory.OTHER]


def skeleton_pattern(
    skeleton: str,
    value: TemporalValue,
    table: LocaleFormatTable,
    plural_rules: PluralRuleProvider,
    calendar: CalendarProvider,
    hour_cycle: HourCycle | None = None,
) -> str:
    """Resolve a skeleton to a pattern through best-match.

    Raises:
        UnresolvedFormat: If no available format matches.
    """
    resolved = put_preferred_time_symbols(skeleton, table, hour_cycle)
    match = best_match(skeleton, table, hour_cycle)

    if isinstance(match, tuple):
        requested = tokenize_skeleton(resolved)
        date_id, time_id = match
        date_pattern = adjust_field_lengths(
            available_pattern(date_id, value, table, plural_rules, calendar), requested
        )
        time_pattern = adjust_field_lengths(
            available_pattern(time_id, value, table, plural_rules, calendar), requested
        )
        template = table.datetime_formats[joining_style(date_pattern)]
        return combine_date_time(template, date_pattern, time_pattern)

    pattern = available_pattern(match, value, table, plural_rules, calendar)
    if match == resolved:
        return pattern
    return adjust_field_lengths(pattern, tokenize_skeleton(resolved))


def resolve(
    request: FormatRequest | None,
    value: TemporalValue,
    table: LocaleFormatTable,
    plural_rules: PluralRuleProvider | None = None,
    calendar: CalendarProvider | None = None,
    hour_cycle: HourCycle | None = None,
) -> ResolvedFormat:
    """Resolve a request against a value and a locale table.

    Raises:
        PartialValueRejectsStandardFormat: Standard style on a partial value.
        UnresolvedFormat: No available format matches a skeleton.
        CompileError: Malformed skeleton.
    """
    if isinstance(request, WithNumberSystem):
        inner = resolve(request.request, value, table, plural_rules, calendar, hour_cycle)
        return ResolvedFormat(inner.pattern, request.system)

    if request is None:
        request = default_request(value)

    if isinstance(request, LiteralPattern):
        return ResolvedFormat(request.pattern)

    if isinstance(request, StandardStyle):
        pattern = standard_pattern(request.style, value, table)
        if hour_cycle is not None:
            pattern = apply_hour_cycle(pattern, hour_cycle)
        return ResolvedFormat(pattern)

    if isinstance(request, Skeleton):
        pattern = skeleton_pattern(
            request.id,
            value,
            table,
            plural_rules or get_plural_rules(),
            calendar or get_calendar(value.calendar),
            hour_cycle,
        )
        if hour_cycle is not None:
            pattern = apply_hour_cycle(pattern, hour_cycle)
        return ResolvedFormat(pattern)

    raise TypeError(f"Unsupported format request: {request!r}")
