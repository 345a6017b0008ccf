"""Relative time formatting.

Formats a distance in time as "in 3 days", "2 hours ago", "yesterday" or
"next month". The distance is given as a number of seconds, a number of
explicit units, a ``timedelta``, or a ``date``/``datetime`` compared with a
reference point (today or now by default).

Without an explicit unit, the unit is chosen from the magnitude of the
distance in seconds::

    < 60         second
    < 3600       minute
    < 86400      hour
    < 604800     day
    < 2629743.83 week
    < 31556926   month
    otherwise    year
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP

from chronofmt.exceptions import InvalidStyle, LocaleDataError, UnknownTimeUnitError
from chronofmt.locale_data import LocaleFormatTable, RelativeUnit
from chronofmt.numbers import group_digits
from chronofmt.protocols import PluralCategory, PluralRuleProvider


UNIT_SECONDS: dict[str, float] = {
    "second": 1,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
    "week": 604_800,
    "month": 2_629_743.83,
    "year": 31_556_926,
}

KNOWN_UNITS = ("second", "minute", "hour", "day", "week", "month", "quarter", "year")

KNOWN_STYLES = ("default", "short", "narrow")

_STYLE_FALLBACKS = {
    "narrow": ("narrow", "short", "default"),
    "short": ("short", "default"),
    "default": ("default",),
}


def unit_from_seconds(seconds: float) -> str:
    """Pick the unit that best describes a distance in seconds.

    Example:
        unit_from_seconds(1234)    # "minute"
        unit_from_seconds(123456)  # "day"
    """
    magnitude = abs(seconds)
    for unit, limit in (
        ("second", UNIT_SECONDS["minute"]),
        ("minute", UNIT_SECONDS["hour"]),
        ("hour", UNIT_SECONDS["day"]),
        ("day", UNIT_SECONDS["week"]),
        ("week", UNIT_SECONDS["month"]),
        ("month", UNIT_SECONDS["year"]),
    ):
        if magnitude < limit:
            return unit
    return "year"


def scale_seconds(seconds: float, unit: str) -> int:
    """Number of whole units in a distance, rounding half away from zero."""
    if unit == "quarter":
        size = Decimal(str(UNIT_SECONDS["month"])) * 3
    else:
        size = Decimal(str(UNIT_SECONDS[unit]))
    return int((Decimal(str(seconds)) / size).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _seconds_between(value: date | datetime, relative_to: date | datetime | None) -> float:
    if isinstance(value, datetime):
        reference = relative_to if relative_to is not None else datetime.now(value.tzinfo)
        return (value - reference).total_seconds()
    reference = relative_to if relative_to is not None else date.today()
    if isinstance(reference, datetime):
        reference = reference.date()
    return float((value - reference).days * UNIT_SECONDS["day"])


def _validate(unit: str | None, style: str) -> None:
    if unit is not None and unit not in KNOWN_UNITS:
        raise UnknownTimeUnitError(unit, KNOWN_UNITS)
    if style not in KNOWN_STYLES:
        raise InvalidStyle(style, KNOWN_STYLES)


def relative_amount(
    value: int | float | timedelta | date | datetime,
    unit: str | None = None,
    relative_to: date | datetime | None = None,
) -> tuple[int | float, str]:
    """Return ``(amount, unit)`` for a relative value.

    A bare number with an explicit unit is taken as a count of that unit;
    every other input is measured in seconds first and then scaled.
    """
    if isinstance(value, (date, datetime)):
        seconds = _seconds_between(value, relative_to)
    elif isinstance(value, timedelta):
        seconds = value.total_seconds()
    elif unit is not None:
        return value, unit
    else:
        seconds = value

    unit = unit or unit_from_seconds(seconds)
    return scale_seconds(seconds, unit), unit


def _unit_data(table: LocaleFormatTable, unit: str, style: str) -> RelativeUnit:
    styles = table.relative.get(unit)
    if not styles:
        raise LocaleDataError(f"No relative time data for unit {unit!r} in {table.locale.tag}")
    for candidate in _STYLE_FALLBACKS[style]:
        if candidate in styles:
            return styles[candidate]
    raise LocaleDataError(
        f"No {style!r} relative time data for unit {unit!r} in {table.locale.tag}"
    )


def _number_text(amount: int | float, table: LocaleFormatTable) -> str:
    magnitude = abs(amount)
    if isinstance(magnitude, int) or float(magnitude).is_integer():
        return group_digits(int(magnitude), table.group)
    whole, _, fraction = repr(float(magnitude)).partition(".")
    return group_digits(int(whole), table.group) + table.decimal + fraction


def format_relative(
    value: int | float | timedelta | date | datetime,
    table: LocaleFormatTable,
    plural_rules: PluralRuleProvider,
    unit: str | None = None,
    relative_to: date | datetime | None = None,
    style: str = "default",
) -> str:
    """Format a relative time in a locale.

    Args:
        value: Seconds (or units, when ``unit`` is given), a timedelta, or a
            date/datetime compared with ``relative_to``
        table: Locale table holding the relative time data
        plural_rules: Provider for the plural category of the amount
        unit: One of second, minute, hour, day, week, month, quarter, year
        relative_to: Reference date/datetime; today or now by default
        style: "default", "short" or "narrow"

    Raises:
        UnknownTimeUnitError: If the unit is not known.
        InvalidStyle: If the style is not known.
    """
    _validate(unit, style)
    amount, unit = relative_amount(value, unit, relative_to)
    data = _unit_data(table, unit, style)

    if amount in (-1, 0, 1) and int(amount) in data.relative:
        return data.relative[int(amount)]

    forms = data.future if amount > 0 else data.past
    category = plural_rules.get_category(math.trunc(amount), table.locale)
    template = forms.get(category) or forms[PluralCategory.OTHER]
    return template.replace("{0}", _number_text(amount, table))
