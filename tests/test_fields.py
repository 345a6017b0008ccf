"""Tests for field rendering through the pattern interpreter.

Tests cover:
- Era, year, quarter and month fields
- Week and weekday fields
- Day periods and hour variants
- Fractional seconds
- Time zone fields
- Missing-field errors
"""

from __future__ import annotations

import dataclasses

import pytest

from chronofmt.calendar import GregorianCalendar
from chronofmt.compiler import FieldKind
from chronofmt.exceptions import RenderError, UnknownNumberSystemError
from chronofmt.fields import (
    RENDERERS,
    RenderContext,
    fraction_digits,
    hour_0_11,
    hour_1_12,
    hour_1_24,
    local_weekday_number,
)
from chronofmt.interpreter import format_pattern
from chronofmt.numbers import get_transliterator
from chronofmt.value import TemporalValue


MONDAY = TemporalValue(year=2017, month=7, day=10)

PARIS = TemporalValue(
    hour=10,
    minute=0,
    time_zone="Europe/Paris",
    zone_abbr="CET",
    utc_offset=3600,
    std_offset=0,
)


def render(pattern: str, value: TemporalValue, context: RenderContext) -> str:
    return format_pattern(pattern, value, context)


def test_every_kind_has_a_renderer():
    """Test that the renderer table covers every field kind."""
    assert set(RENDERERS) == set(FieldKind)


# =============================================================================
# Date fields
# =============================================================================


class TestDateFields:
    """Test era, year, quarter, month and day fields."""

    @pytest.mark.parametrize(
        "pattern,expected",
        [
            ("G", "AD"),
            ("GGGG", "Anno Domini"),
            ("GGGGG", "A"),
            ("y", "2017"),
            ("yy", "17"),
            ("yyyy", "2017"),
            ("u", "2017"),
            ("Q", "3"),
            ("QQ", "03"),
            ("QQQ", "Q3"),
            ("QQQQ", "3rd quarter"),
            ("qqq", "Q3"),
            ("M", "7"),
            ("MM", "07"),
            ("MMM", "Jul"),
            ("MMMM", "July"),
            ("MMMMM", "J"),
            ("LLLL", "July"),
            ("d", "10"),
            ("D", "191"),
            ("DDD", "191"),
            ("F", "2"),
        ],
    )
    def test_render(self, en_context, pattern, expected):
        """Test each date field on a full date."""
        assert render(pattern, MONDAY, en_context) == expected

    def test_padded_year(self, en_context):
        """Test zero padding of short years."""
        assert render("yyyy", TemporalValue(year=5, month=1, day=1), en_context) == "0005"

    def test_year_before_era(self, en_context):
        """Test that year 0 is 1 BC."""
        value = TemporalValue(year=0, month=1, day=1)

        assert render("y G", value, en_context) == "1 BC"
        assert render("u", value, en_context) == "0"

    def test_padded_day(self, en_context):
        """Test two-digit day of month."""
        assert render("dd", TemporalValue(year=2017, month=7, day=5), en_context) == "05"

    def test_quarter_without_day(self, en_context):
        """Test that a quarter only needs the month."""
        assert render("QQQ y", TemporalValue(year=2024, month=11), en_context) == "Q4 2024"


class TestWeekFields:
    """Test weekday and week numbering fields."""

    @pytest.mark.parametrize(
        "pattern,expected",
        [
            ("E", "Mon"),
            ("EEEE", "Monday"),
            ("EEEEE", "M"),
            ("EEEEEE", "Mo"),
            ("e", "2"),
            ("ee", "02"),
            ("eee", "Mon"),
            ("c", "2"),
            ("cccc", "Monday"),
            ("w", "28"),
            ("W", "3"),
            ("Y", "2017"),
        ],
    )
    def test_render(self, en_context, pattern, expected):
        """Test weekday and week fields with Sunday-first week data."""
        assert render(pattern, MONDAY, en_context) == expected

    def test_local_weekday_number(self):
        """Test weekday numbering from the locale's first day."""
        assert local_weekday_number(1, 7) == 2
        assert local_weekday_number(7, 7) == 1
        assert local_weekday_number(1, 1) == 1
        assert local_weekday_number(7, 1) == 7

    def test_monday_first_locale(self, fr_table):
        """Test local weekday with Monday-first week data."""
        context = RenderContext(fr_table, GregorianCalendar())

        assert render("e", MONDAY, context) == "1"

    def test_weekday_needs_full_date(self, en_context):
        """Test that a weekday cannot be derived from a partial date."""
        with pytest.raises(RenderError) as exc_info:
            render("E", TemporalValue(year=2020, month=1), en_context)

        assert exc_info.value.required == ("year", "month", "day")


# =============================================================================
# Time fields
# =============================================================================


class TestHourFields:
    """Test the four hour variants."""

    @pytest.mark.parametrize(
        "hour,h,K,H,k",
        [
            (0, "12", "0", "0", "24"),
            (1, "1", "1", "1", "1"),
            (12, "12", "0", "12", "12"),
            (13, "1", "1", "13", "13"),
            (23, "11", "11", "23", "23"),
        ],
    )
    def test_hour_variants(self, en_context, hour, h, K, H, k):
        """Test h, K, H and k for boundary hours."""
        value = TemporalValue(hour=hour)

        assert render("h", value, en_context) == h
        assert render("K", value, en_context) == K
        assert render("H", value, en_context) == H
        assert render("k", value, en_context) == k

    @pytest.mark.parametrize("hour", range(24))
    def test_every_hour_of_the_day(self, en_context, hour):
        """Test that all four variants agree with the clock for every hour."""
        value = TemporalValue(hour=hour)
        clock_12 = [12, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11]

        assert hour_1_12(hour) == clock_12[hour % 12]
        assert hour_0_11(hour) == clock_12[hour % 12] % 12
        assert hour_1_24(hour) == (24 if hour == 0 else hour)
        assert render("h", value, en_context) == str(hour_1_12(hour))
        assert render("K", value, en_context) == str(hour_0_11(hour))
        assert render("H", value, en_context) == str(hour)
        assert render("k", value, en_context) == str(hour_1_24(hour))
        assert render("HH", value, en_context) == f"{hour:02d}"

    def test_hour_functions(self):
        """Test the hour conversions directly."""
        assert [hour_1_12(h) for h in (0, 11, 12, 13)] == [12, 11, 12, 1]
        assert [hour_0_11(h) for h in (0, 11, 12, 13)] == [0, 11, 0, 1]
        assert [hour_1_24(h) for h in (0, 1, 23)] == [24, 1, 23]

    def test_padded(self, en_context):
        """Test two-digit hours and minutes."""
        value = TemporalValue(hour=7, minute=5, second=3)

        assert render("HH:mm:ss", value, en_context) == "07:05:03"


class TestDayPeriods:
    """Test a, b and B day period fields."""

    @pytest.mark.parametrize(
        "pattern,hour,expected",
        [
            ("a", 7, "AM"),
            ("a", 13, "PM"),
            ("aaaa", 13, "PM"),
            ("aaaaa", 7, "a"),
            ("b", 12, "noon"),
            ("b", 0, "midnight"),
            ("b", 9, "AM"),
            ("B", 8, "in the morning"),
            ("B", 14, "in the afternoon"),
            ("B", 19, "in the evening"),
            ("B", 22, "at night"),
            ("B", 3, "at night"),
            ("B", 12, "noon"),
        ],
    )
    def test_on_the_hour(self, en_context, pattern, hour, expected):
        """Test day periods for values on the hour."""
        assert render(pattern, TemporalValue(hour=hour, minute=0), en_context) == expected

    def test_noon_needs_exact_hour(self, en_context):
        """Test that 12:30 is PM rather than noon."""
        assert render("b", TemporalValue(hour=12, minute=30), en_context) == "PM"

    def test_flexible_period_with_hour(self, en_context):
        """Test a complete flexible-period time."""
        assert render("h:mm B", TemporalValue(hour=15, minute=45), en_context) == "3:45 in the afternoon"


class TestFractionalSeconds:
    """Test fractional second rendering."""

    @pytest.mark.parametrize(
        "microsecond,precision,width,expected",
        [
            (123456, 6, 3, "123"),
            (123456, 6, 6, "123456"),
            (123456, 6, 8, "12345600"),
            (123500, 6, 3, "124"),
            (999999, 6, 3, "999"),
            (500000, 1, 3, "500"),
            (123456, 0, 2, "00"),
        ],
    )
    def test_fraction_digits(self, microsecond, precision, width, expected):
        """Test rounding, clamping and padding of fractions."""
        assert fraction_digits(microsecond, precision, width) == expected

    def test_decimal_separator_follows_locale(self, en_context, fr_table):
        """Test that the separator between s and S is the locale's decimal."""
        value = TemporalValue(hour=1, minute=2, second=7, microsecond=123456)
        fr_context = RenderContext(fr_table, GregorianCalendar())

        assert render("sSSS", value, en_context) == "7.123"
        assert render("sSSS", value, fr_context) == "7,123"

    def test_missing_microsecond(self, en_context):
        """Test that a value without sub-seconds renders zeros."""
        assert render("ss.SS", TemporalValue(hour=1, minute=0, second=4), en_context) == "04.00"

    def test_milliseconds_in_day(self, en_context):
        """Test the A field."""
        value = TemporalValue(hour=1, minute=0, second=0, microsecond=500000)

        assert render("A", value, en_context) == "3600500"


# =============================================================================
# Time zone fields
# =============================================================================


class TestZoneFields:
    """Test time zone fields."""

    @pytest.mark.parametrize(
        "pattern,expected",
        [
            ("v", "Europe/Paris"),
            ("vvvv", "GMT+01:00"),
            ("z", "CET"),
            ("zzzz", "GMT+01:00"),
            ("V", "unk"),
            ("VV", "Europe/Paris"),
            ("VVV", "Paris"),
            ("VVVV", "Paris Time"),
            ("O", "GMT+1"),
            ("OOOO", "GMT+01:00"),
            ("Z", "+0100"),
            ("ZZZZ", "GMT+01:00"),
            ("ZZZZZ", "+01:00"),
            ("X", "+01"),
            ("XX", "+0100"),
            ("XXX", "+01:00"),
            ("x", "+01"),
            ("xxx", "+01:00"),
        ],
    )
    def test_render(self, en_context, pattern, expected):
        """Test every zone field for a whole-hour offset."""
        assert render(pattern, PARIS, en_context) == expected

    @pytest.mark.parametrize(
        "offset,pattern,expected",
        [
            (0, "X", "Z"),
            (0, "XXX", "Z"),
            (0, "x", "+00"),
            (0, "xxx", "+00:00"),
            (0, "O", "GMT"),
            (19800, "X", "+0530"),
            (19800, "XXX", "+05:30"),
            (19800, "O", "GMT+5:30"),
            (-18000, "XXX", "-05:00"),
            (-18000, "O", "GMT-5"),
        ],
    )
    def test_offsets(self, en_context, offset, pattern, expected):
        """Test zero, half-hour and negative offsets."""
        value = TemporalValue(hour=10, utc_offset=offset, std_offset=0)

        assert render(pattern, value, en_context) == expected

    def test_daylight_saving_is_added(self, en_context):
        """Test that the DST adjustment is part of the rendered offset."""
        value = PARIS.replace(zone_abbr="CEST", std_offset=3600)

        assert render("XXX z", value, en_context) == "+02:00 CEST"

    def test_offset_only_location_format(self, en_context):
        """Test VVVV for a value without a zone id."""
        value = TemporalValue(hour=10, utc_offset=-18000, std_offset=0)

        assert render("VVVV", value, en_context) == "GMT-05:00"

    def test_naive_value_rejects_offset_fields(self, en_context):
        """Test that zone fields need an offset."""
        with pytest.raises(RenderError):
            render("Z", TemporalValue(hour=10), en_context)


# =============================================================================
# Errors and number systems
# =============================================================================


class TestRenderErrors:
    """Test errors raised while rendering."""

    def test_missing_field(self, en_context):
        """Test the error for a field the value lacks."""
        with pytest.raises(RenderError) as exc_info:
            render("d", TemporalValue(hour=10), en_context)

        assert exc_info.value.symbol == "d"
        assert exc_info.value.required == ("day",)
        assert "requires a value with at least :day" in str(exc_info.value)

    def test_missing_name(self, en_table):
        """Test the error when the locale has no name for a field."""
        table = dataclasses.replace(en_table, months={})
        context = RenderContext(table, GregorianCalendar())

        with pytest.raises(RenderError, match="No format abbreviated name for months"):
            render("MMM", MONDAY, context)


class TestNumberSystems:
    """Test digit transliteration of rendered text."""

    def test_transliterate(self, en_context):
        """Test rendering in Arabic-Indic digits."""
        text = format_pattern("d/M/y", MONDAY, en_context, "arab", get_transliterator())

        assert text == "١٠/٧/٢٠١٧"

    def test_unknown_system(self, en_context):
        """Test that an unknown system fails at render time."""
        with pytest.raises(UnknownNumberSystemError):
            format_pattern("d", MONDAY, en_context, "klingon", get_transliterator())
