"""Tests for relative time formatting.

Tests cover:
- Unit selection from a distance in seconds
- Scaling and rounding
- Relative day names ("yesterday", "tomorrow")
- Future and past plural forms
- Style fallback
- Errors for unknown units and styles
"""

from __future__ import annotations

import dataclasses
from datetime import date, datetime, timedelta

import pytest

from chronofmt.exceptions import InvalidStyle, LocaleDataError, UnknownTimeUnitError
from chronofmt.formatter import DateTimeFormatter
from chronofmt.plural import get_plural_rules
from chronofmt.relative import format_relative, relative_amount, scale_seconds, unit_from_seconds


# =============================================================================
# Units and amounts
# =============================================================================


class TestUnits:
    """Test unit selection and scaling."""

    @pytest.mark.parametrize(
        "seconds,unit",
        [
            (0, "second"),
            (59, "second"),
            (60, "minute"),
            (1234, "minute"),
            (-7200, "hour"),
            (123456, "day"),
            (604800, "week"),
            (2629744, "month"),
            (31556926, "year"),
        ],
    )
    def test_unit_from_seconds(self, seconds, unit):
        """Test the unit thresholds, in both directions."""
        assert unit_from_seconds(seconds) == unit

    @pytest.mark.parametrize(
        "seconds,unit,amount",
        [
            (1234, "minute", 21),
            (90, "minute", 2),
            (-90, "minute", -2),
            (123456, "day", 1),
            (-7200, "hour", -2),
            (7889231.49, "quarter", 1),
        ],
    )
    def test_scale_seconds(self, seconds, unit, amount):
        """Test rounding half away from zero."""
        assert scale_seconds(seconds, unit) == amount

    def test_explicit_unit_is_a_count(self):
        """Test that a number with a unit is not scaled."""
        assert relative_amount(3, "day") == (3, "day")

    def test_timedelta(self):
        """Test a timedelta is measured in seconds first."""
        assert relative_amount(timedelta(days=-2)) == (-2, "day")

    def test_dates_relative_to(self):
        """Test two dates are compared by days."""
        assert relative_amount(date(2020, 1, 11), relative_to=date(2020, 1, 1)) == (10, "day")

    def test_datetimes_relative_to(self):
        """Test two datetimes are compared by seconds."""
        amount = relative_amount(
            datetime(2020, 1, 1, 10), relative_to=datetime(2020, 1, 1, 12, 30)
        )

        assert amount == (-3, "hour")


# =============================================================================
# Formatting
# =============================================================================


class TestFormatRelative:
    """Test relative time strings."""

    @pytest.fixture
    def rules(self):
        return get_plural_rules()

    @pytest.mark.parametrize(
        "value,unit,expected",
        [
            (-1, "day", "yesterday"),
            (0, "day", "today"),
            (1, "day", "tomorrow"),
            (3, "day", "in 3 days"),
            (-1, "year", "last year"),
            (1, "month", "next month"),
            (2, "quarter", "in 2 quarters"),
            (-1, "hour", "1 hour ago"),
            (0, "second", "now"),
            (1234, "day", "in 1,234 days"),
        ],
    )
    def test_explicit_units(self, en_table, rules, value, unit, expected):
        """Test relative names and plural forms with an explicit unit."""
        assert format_relative(value, en_table, rules, unit) == expected

    def test_seconds(self, en_table, rules):
        """Test a bare number of seconds."""
        assert format_relative(-7200, en_table, rules) == "2 hours ago"
        assert format_relative(45, en_table, rules) == "in 45 seconds"

    def test_timedelta(self, en_table, rules):
        """Test a timedelta value."""
        assert format_relative(timedelta(weeks=-3), en_table, rules) == "3 weeks ago"

    def test_date(self, en_table, rules):
        """Test a date compared with a reference date."""
        text = format_relative(date(2020, 1, 2), en_table, rules, relative_to=date(2020, 1, 1))

        assert text == "tomorrow"

    def test_fraction(self, en_table, rules):
        """Test that a fractional count keeps its digits."""
        assert format_relative(2.5, en_table, rules, "day") == "in 2.5 days"

    def test_short_style(self, en_table, rules):
        """Test the short forms."""
        assert format_relative(3, en_table, rules, "hour", style="short") == "in 3 hr."

    def test_narrow_falls_back_to_short(self, en_table, rules):
        """Test that a missing narrow style uses the short data."""
        assert format_relative(-2, en_table, rules, "month", style="narrow") == "2 mo. ago"

    def test_french(self, fr_table, rules):
        """Test French relative names and plurals."""
        assert format_relative(-1, fr_table, rules, "day") == "hier"
        assert format_relative(2, fr_table, rules, "year") == "dans 2 ans"

    def test_french_grouping(self, fr_table, rules):
        """Test that the locale's group separator is used."""
        assert format_relative(1234, fr_table, rules, "day") == "dans 1 234 jours"


class TestErrors:
    """Test rejected arguments."""

    def test_unknown_unit(self, en_table):
        """Test that an unknown unit is rejected."""
        with pytest.raises(UnknownTimeUnitError):
            format_relative(1, en_table, get_plural_rules(), "fortnight")

    def test_unknown_style(self, en_table):
        """Test that an unknown style is rejected."""
        with pytest.raises(InvalidStyle):
            format_relative(1, en_table, get_plural_rules(), "day", style="tiny")

    def test_missing_unit_data(self, en_table):
        """Test a locale without data for the unit."""
        table = dataclasses.replace(en_table, relative={})

        with pytest.raises(LocaleDataError):
            format_relative(1, table, get_plural_rules(), "day")


def test_formatter_transliterates():
    """Test that a formatter-wide number system applies to relative times."""
    formatter = DateTimeFormatter("en", number_system="arab")

    assert formatter.format_relative(3, unit="day") == "in ٣ days"
