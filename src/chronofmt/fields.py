"""Field renderers.

One rendering function per FieldKind, dispatched through the ``RENDERERS``
table. Each renderer receives the value, the field width (the symbol's
repeat count) and a RenderContext giving access to the locale table and the
calendar-derived fields.

Width conventions:
- Numeric fields zero-pad to the width
- Year-like fields at width 2 render the last two digits
- Name fields: 1-3 abbreviated, 4 wide, 5 narrow, 6 short (weekdays)

Hour variants all derive from the canonical 0..23 hour::

    hour   h   K   H   k
    0      12  0   0   24
    12     12  0   12  12
    13     1   1   13  13
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable

from chronofmt.calendar import CalendarFields
from chronofmt.compiler import FieldKind
from chronofmt.exceptions import RenderError
from chronofmt.locale_data import LocaleFormatTable
from chronofmt.protocols import CalendarProvider, NameContext, NameWidth
from chronofmt.timezone import exemplar_city, gmt_offset, iso_offset
from chronofmt.value import TemporalValue


@dataclass
class RenderContext:
    """Per-call rendering context."""
    table: LocaleFormatTable
    calendar: CalendarProvider
    _derived: dict[TemporalValue, CalendarFields] = field(default_factory=dict, repr=False)

    def calendar_fields(self, value: TemporalValue) -> CalendarFields:
        derived = self._derived.get(value)
        if derived is None:
            derived = self.calendar.extract(value, self.table.first_day, self.table.min_days)
            self._derived[value] = derived
        return derived


Renderer = Callable[[TemporalValue, int, RenderContext], str]

RENDERERS: dict[FieldKind, Renderer] = {}


def renderer(*kinds: FieldKind) -> Callable[[Renderer], Renderer]:
    """Register a function as the renderer of one or more field kinds."""
    def decorator(func: Renderer) -> Renderer:
        for kind in kinds:
            RENDERERS[kind] = func
        return func
    return decorator


def render(kind: FieldKind, width: int, value: TemporalValue, context: RenderContext) -> str:
    """Render one field of a value.

    Raises:
        RenderError: If the value lacks a required field or the locale has
            no name for it.
    """
    return RENDERERS[kind](value, width, context)


# ==============================================================================
# Helpers
# ==============================================================================

def _require(value: TemporalValue, symbol: str, *names: str) -> None:
    if not value.has(*names):
        raise RenderError(symbol, names, value)


def _derived(value: TemporalValue, context: RenderContext, symbol: str, attr: str) -> int:
    result = getattr(context.calendar_fields(value), attr)
    if result is None:
        raise RenderError(symbol, ("year", "month", "day"), value)
    return result


def _pad(number: int, width: int) -> str:
    if number < 0:
        return "-" + str(-number).zfill(width)
    return str(number).zfill(width)


def _year_text(year: int, width: int) -> str:
    if width == 2:
        return f"{year % 100:02d}"
    return _pad(year, width)


def _name_width(width: int) -> NameWidth:
    if width <= 3:
        return NameWidth.ABBREVIATED
    if width == 4:
        return NameWidth.WIDE
    if width == 5:
        return NameWidth.NARROW
    return NameWidth.SHORT


def _name(
    context: RenderContext,
    symbol: str,
    category: str,
    name_context: NameContext,
    width: int,
    key: int | str,
) -> str:
    name_width = _name_width(width)
    name = context.table.name(category, name_context, name_width, key)
    if name is None:
        raise RenderError(
            symbol,
            message=(
                f"No {name_context.value} {name_width.value} name for {category} "
                f"key {key!r} in locale {context.table.locale.tag!r}"
            ),
        )
    return name


# ==============================================================================
# Era and Year
# ==============================================================================

@renderer(FieldKind.ERA)
def render_era(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "G", "year")
    era = context.calendar_fields(value).era
    return _name(context, "G", "eras", NameContext.FORMAT, width, era)


@renderer(FieldKind.YEAR)
def render_year(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "y", "year")
    return _year_text(context.calendar_fields(value).year_of_era, width)


@renderer(FieldKind.WEEK_YEAR)
def render_week_year(value: TemporalValue, width: int, context: RenderContext) -> str:
    return _year_text(_derived(value, context, "Y", "week_year"), width)


@renderer(FieldKind.EXTENDED_YEAR)
def render_extended_year(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "u", "year")
    return _pad(value.year, width)


# ==============================================================================
# Quarter and Month
# ==============================================================================

def _numeric_or_name(
    number: int,
    width: int,
    context: RenderContext,
    symbol: str,
    category: str,
    name_context: NameContext,
) -> str:
    if width <= 2:
        return _pad(number, width)
    return _name(context, symbol, category, name_context, width, number)


@renderer(FieldKind.QUARTER)
def render_quarter(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "Q", "month")
    quarter = context.calendar_fields(value).quarter
    return _numeric_or_name(quarter, width, context, "Q", "quarters", NameContext.FORMAT)


@renderer(FieldKind.QUARTER_STANDALONE)
def render_quarter_standalone(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "q", "month")
    quarter = context.calendar_fields(value).quarter
    return _numeric_or_name(quarter, width, context, "q", "quarters", NameContext.STAND_ALONE)


@renderer(FieldKind.MONTH)
def render_month(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "M", "month")
    return _numeric_or_name(value.month, width, context, "M", "months", NameContext.FORMAT)


@renderer(FieldKind.MONTH_STANDALONE)
def render_month_standalone(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "L", "month")
    return _numeric_or_name(value.month, width, context, "L", "months", NameContext.STAND_ALONE)


# ==============================================================================
# Week and Day
# ==============================================================================

@renderer(FieldKind.WEEK_OF_YEAR)
def render_week_of_year(value: TemporalValue, width: int, context: RenderContext) -> str:
    return _pad(_derived(value, context, "w", "week_of_year"), width)


@renderer(FieldKind.WEEK_OF_MONTH)
def render_week_of_month(value: TemporalValue, width: int, context: RenderContext) -> str:
    return _pad(_derived(value, context, "W", "week_of_month"), width)


@renderer(FieldKind.DAY_OF_MONTH)
def render_day(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "d", "day")
    return _pad(value.day, width)


@renderer(FieldKind.DAY_OF_YEAR)
def render_day_of_year(value: TemporalValue, width: int, context: RenderContext) -> str:
    return _pad(_derived(value, context, "D", "day_of_year"), width)


@renderer(FieldKind.DAY_OF_WEEK_IN_MONTH)
def render_day_of_week_in_month(value: TemporalValue, width: int, context: RenderContext) -> str:
    return _pad(_derived(value, context, "F", "day_of_week_in_month"), width)


# ==============================================================================
# Weekday
# ==============================================================================

@renderer(FieldKind.WEEKDAY)
def render_weekday(value: TemporalValue, width: int, context: RenderContext) -> str:
    weekday = _derived(value, context, "E", "weekday")
    return _name(context, "E", "days", NameContext.FORMAT, width, weekday)


def local_weekday_number(weekday: int, first_day: int) -> int:
    """Weekday numbered from the locale's first day of the week (1..7)."""
    return (weekday - first_day) % 7 + 1


def _local_weekday(
    value: TemporalValue,
    width: int,
    context: RenderContext,
    symbol: str,
    name_context: NameContext,
) -> str:
    weekday = _derived(value, context, symbol, "weekday")
    if width <= 2:
        return _pad(local_weekday_number(weekday, context.table.first_day), width)
    return _name(context, symbol, "days", name_context, width, weekday)


@renderer(FieldKind.LOCAL_WEEKDAY)
def render_local_weekday(value: TemporalValue, width: int, context: RenderContext) -> str:
    return _local_weekday(value, width, context, "e", NameContext.FORMAT)


@renderer(FieldKind.LOCAL_WEEKDAY_STANDALONE)
def render_local_weekday_standalone(value: TemporalValue, width: int, context: RenderContext) -> str:
    return _local_weekday(value, width, context, "c", NameContext.STAND_ALONE)


# ==============================================================================
# Day Periods
# ==============================================================================

def _am_pm(hour: int) -> str:
    return "am" if hour < 12 else "pm"


@renderer(FieldKind.PERIOD_AM_PM)
def render_period_am_pm(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "a", "hour")
    return _name(context, "a", "day_periods", NameContext.FORMAT, width, _am_pm(value.hour))


@renderer(FieldKind.PERIOD_NOON_MIDNIGHT)
def render_period_noon_midnight(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "b", "hour")
    on_the_hour = not value.minute and not value.second
    key = _am_pm(value.hour)
    if on_the_hour and value.hour == 0:
        key = "midnight"
    elif on_the_hour and value.hour == 12:
        key = "noon"
    name = context.table.name("day_periods", NameContext.FORMAT, _name_width(width), key)
    if name is None:
        key = _am_pm(value.hour)
        return _name(context, "b", "day_periods", NameContext.FORMAT, width, key)
    return name


@renderer(FieldKind.PERIOD_FLEX)
def render_period_flex(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "B", "hour")
    key = context.table.day_period(value.hour, value.minute or 0)
    if key is not None:
        name = context.table.name("day_periods", NameContext.FORMAT, _name_width(width), key)
        if name is not None:
            return name
    return _name(context, "B", "day_periods", NameContext.FORMAT, width, _am_pm(value.hour))


# ==============================================================================
# Hours, Minutes and Seconds
# ==============================================================================

def hour_1_12(hour: int) -> int:
    return hour % 12 or 12


def hour_0_11(hour: int) -> int:
    return hour % 12


def hour_1_24(hour: int) -> int:
    return hour or 24


@renderer(FieldKind.HOUR_1_12)
def render_hour_1_12(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "h", "hour")
    return _pad(hour_1_12(value.hour), width)


@renderer(FieldKind.HOUR_0_11)
def render_hour_0_11(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "K", "hour")
    return _pad(hour_0_11(value.hour), width)


@renderer(FieldKind.HOUR_0_23)
def render_hour_0_23(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "H", "hour")
    return _pad(value.hour, width)


@renderer(FieldKind.HOUR_1_24)
def render_hour_1_24(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "k", "hour")
    return _pad(hour_1_24(value.hour), width)


@renderer(FieldKind.MINUTE)
def render_minute(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "m", "minute")
    return _pad(value.minute, width)


@renderer(FieldKind.SECOND)
def render_second(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "s", "second")
    return _pad(value.second, width)


def fraction_digits(microsecond: int, precision: int, width: int) -> str:
    """Sub-second digits rounded to ``min(width, precision)`` and padded to width."""
    digits = min(width, precision)
    if digits == 0:
        return "0" * width
    scaled = (Decimal(microsecond) / Decimal(10 ** (6 - digits))).quantize(
        Decimal(1), rounding=ROUND_HALF_UP
    )
    number = min(int(scaled), 10 ** digits - 1)
    return str(number).zfill(digits).ljust(width, "0")


@renderer(FieldKind.FRACTIONAL_SECOND)
def render_fractional_second(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "S", "second")
    if value.microsecond is None:
        return "0" * width
    return fraction_digits(value.microsecond, value.precision, width)


@renderer(FieldKind.MILLISECONDS_IN_DAY)
def render_milliseconds_in_day(value: TemporalValue, width: int, context: RenderContext) -> str:
    _require(value, "A", "hour", "minute", "second")
    millis = ((value.hour * 60 + value.minute) * 60 + value.second) * 1000
    millis += (value.microsecond or 0) // 1000
    return _pad(millis, width)


# ==============================================================================
# Time Zones
# ==============================================================================

_OFFSET_FIELDS = ("utc_offset",)


def _offset(value: TemporalValue, symbol: str) -> int:
    if value.utc_offset is None:
        raise RenderError(symbol, _OFFSET_FIELDS + ("std_offset",), value)
    return value.total_offset


@renderer(FieldKind.TIME_ZONE_GENERIC)
def render_zone_generic(value: TemporalValue, width: int, context: RenderContext) -> str:
    if width == 1:
        _require(value, "v", "time_zone")
        return value.time_zone
    return gmt_offset(_offset(value, "v"), context.table)


@renderer(FieldKind.TIME_ZONE_SPECIFIC)
def render_zone_specific(value: TemporalValue, width: int, context: RenderContext) -> str:
    if width <= 3:
        _require(value, "z", "zone_abbr")
        return value.zone_abbr
    return gmt_offset(_offset(value, "z"), context.table)


@renderer(FieldKind.TIME_ZONE_ID)
def render_zone_id(value: TemporalValue, width: int, context: RenderContext) -> str:
    if width == 4 and value.time_zone is None:
        return gmt_offset(_offset(value, "V"), context.table)
    _require(value, "V", "time_zone")
    if width == 1:
        return "unk"
    if width == 2:
        return value.time_zone
    city = exemplar_city(value.time_zone)
    if width == 3:
        return city
    return context.table.region_format.replace("{0}", city)


@renderer(FieldKind.TIME_ZONE_GMT)
def render_zone_gmt(value: TemporalValue, width: int, context: RenderContext) -> str:
    return gmt_offset(_offset(value, "O"), context.table, long=width == 4)


@renderer(FieldKind.TIME_ZONE_ISO_BASIC)
def render_zone_iso_basic(value: TemporalValue, width: int, context: RenderContext) -> str:
    offset = _offset(value, "Z")
    if width <= 3:
        return iso_offset(offset, extended=False)
    if width == 4:
        return gmt_offset(offset, context.table)
    return iso_offset(offset, extended=True, seconds=True, z_for_zero=True)


def _iso(offset: int, width: int, z_for_zero: bool) -> str:
    if width == 1:
        return iso_offset(offset, extended=False, minutes="optional", z_for_zero=z_for_zero)
    if width == 2:
        return iso_offset(offset, extended=False, z_for_zero=z_for_zero)
    if width == 3:
        return iso_offset(offset, extended=True, z_for_zero=z_for_zero)
    if width == 4:
        return iso_offset(offset, extended=False, seconds=True, z_for_zero=z_for_zero)
    return iso_offset(offset, extended=True, seconds=True, z_for_zero=z_for_zero)


@renderer(FieldKind.TIME_ZONE_ISO)
def render_zone_iso(value: TemporalValue, width: int, context: RenderContext) -> str:
    return _iso(_offset(value, "X"), width, z_for_zero=True)


@renderer(FieldKind.TIME_ZONE_ISO_NO_Z)
def render_zone_iso_no_z(value: TemporalValue, width: int, context: RenderContext) -> str:
    return _iso(_offset(value, "x"), width, z_for_zero=False)
