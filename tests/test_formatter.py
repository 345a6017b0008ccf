"""Tests for the public formatting API.

Tests cover:
- Standard styles for dates, times and date-times
- Partial values and skeleton requests
- Locale fallback and unknown locales
- Number systems and hour cycle overrides
- Pluggable collaborators
- Module-level convenience functions and configuration defaults
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone

import pytest

import chronofmt
from chronofmt import (
    CompiledPattern,
    DateTimeFormatter,
    FormatConfig,
    LiteralPattern,
    Skeleton,
    TemporalValue,
    set_config,
)
from chronofmt.exceptions import (
    PartialValueRejectsStandardFormat,
    UnknownCalendarError,
    UnknownLocaleError,
    UnknownNumberSystemError,
    UnresolvedFormat,
)


MONDAY = date(2017, 7, 10)
MORNING = time(7, 35, 13)
MONDAY_MORNING = datetime(2017, 7, 10, 7, 35, 13)


# =============================================================================
# Complete values
# =============================================================================


class TestStandardStyles:
    """Test standard styles on complete values."""

    @pytest.mark.parametrize(
        "style,expected",
        [
            ("full", "Monday, July 10, 2017"),
            ("long", "July 10, 2017"),
            ("medium", "Jul 10, 2017"),
            ("short", "7/10/17"),
        ],
    )
    def test_date(self, en, style, expected):
        """Test every date style."""
        assert en.format(MONDAY, style) == expected

    def test_time(self, en):
        """Test short and medium times."""
        assert en.format(MORNING, "short") == "7:35 AM"
        assert en.format(MORNING, "medium") == "7:35:13 AM"

    def test_default_is_medium(self, en):
        """Test that no request means medium for a complete value."""
        assert en.format(MONDAY_MORNING) == "Jul 10, 2017, 7:35:13 AM"

    def test_aware_date_time_full(self, en):
        """Test the full style joining with 'at' and a GMT zone name."""
        value = datetime(2020, 1, 1, 9, 30, tzinfo=timezone.utc)

        assert en.format(value, "full") == "Wednesday, January 1, 2020 at 9:30:00 AM GMT"

    def test_french(self, fr):
        """Test French names and ordering."""
        assert fr.format(date(2020, 1, 1)) == "1 janv. 2020"
        assert fr.format(date(2020, 1, 1), "full") == "mercredi 1 janvier 2020"

    def test_literal_pattern(self, en):
        """Test a plain pattern string."""
        assert en.format(MONDAY_MORNING, "yyyy-MM-dd'T'HH:mm") == "2017-07-10T07:35"

    def test_temporal_value_input(self, en):
        """Test passing a TemporalValue directly."""
        assert en.format(TemporalValue(year=2017, month=7, day=10), LiteralPattern("d/M")) == "10/7"


# =============================================================================
# Partial values and skeletons
# =============================================================================


class TestPartialValues:
    """Test values with only some fields present."""

    @pytest.mark.parametrize(
        "fields,expected",
        [
            ({"year": 2024, "month": 3}, "3/2024"),
            ({"month": 3, "day": 5}, "3/5"),
            ({"hour": 23}, "11 PM"),
            ({"minute": 23, "second": 45}, "23:45"),
            ({"year": 2024, "month": 11, "hour": 10}, "11/2024, 10 AM"),
        ],
    )
    def test_derived_skeleton(self, en, fields, expected):
        """Test formatting with the skeleton derived from present fields."""
        assert en.format(fields) == expected

    def test_standard_style_rejected(self, en):
        """Test that a standard style needs a complete value."""
        with pytest.raises(PartialValueRejectsStandardFormat):
            en.format({"year": 2024}, "short")

    def test_unknown_field(self, en):
        """Test that a mapping with unknown keys is rejected."""
        with pytest.raises(ValueError):
            en.format({"year": 2024, "fortnight": 2})

    def test_unsupported_type(self, en):
        """Test that other value types are rejected."""
        with pytest.raises(TypeError):
            en.format(1577836800)


class TestSkeletons:
    """Test skeleton requests."""

    @pytest.mark.parametrize(
        "value,skeleton,expected",
        [
            (date(2020, 1, 1), "yMMM", "Jan 2020"),
            (MONDAY, "MMMEd", "Mon, Jul 10"),
            (MONDAY, "yMMMMEEEEd", "Monday, July 10, 2017"),
            (date(2017, 1, 1), "yw", "week 1 of 2017"),
        ],
    )
    def test_resolved(self, en, value, skeleton, expected):
        """Test skeletons resolved through best-match."""
        assert en.format(value, Skeleton(skeleton)) == expected

    def test_zone_skeleton(self, en):
        """Test a skeleton with a generic zone."""
        value = datetime(2020, 1, 1, 9, 30, tzinfo=timezone.utc)

        assert en.format(value, Skeleton("hmv")) == "9:30 AM Etc/UTC"

    def test_unresolved(self, en):
        """Test a skeleton with no available format."""
        with pytest.raises(UnresolvedFormat):
            en.format(MONDAY, Skeleton("yd"))

    def test_resolve_returns_pattern(self, en):
        """Test that resolve() exposes the pattern without rendering."""
        assert en.resolve(MONDAY, Skeleton("yMMMd")).pattern == "MMM d, y"


# =============================================================================
# Options
# =============================================================================


class TestOptions:
    """Test locale, calendar, number system and hour cycle options."""

    def test_region_falls_back_to_language(self):
        """Test that fr-CA uses the French data."""
        formatter = DateTimeFormatter("fr-CA")

        assert formatter.format(date(2020, 1, 1)) == "1 janv. 2020"

    def test_unknown_locale(self):
        """Test that a locale without data is rejected."""
        with pytest.raises(UnknownLocaleError):
            DateTimeFormatter("xx")

    def test_unknown_calendar(self):
        """Test that an unregistered calendar is rejected."""
        with pytest.raises(UnknownCalendarError):
            DateTimeFormatter("en", calendar="klingon")

    def test_number_system_in_request(self, en):
        """Test a (style, number system) request."""
        assert en.format(date(2020, 1, 12), ("short", "thai")) == "๑/๑๒/๒๐"

    def test_number_system_option(self):
        """Test a formatter-wide number system."""
        formatter = DateTimeFormatter("en", number_system="arab")

        assert formatter.format(date(2020, 1, 1), "short") == "١/١/٢٠"

    def test_unknown_number_system(self, en):
        """Test that an unknown number system fails when rendering."""
        with pytest.raises(UnknownNumberSystemError):
            en.format(date(2020, 1, 1), ("short", "klingon"))

    def test_hour_cycle(self):
        """Test a 24-hour override in a 12-hour locale."""
        formatter = DateTimeFormatter("en", hour_cycle="h23")

        assert formatter.format(time(13, 5), "short") == "13:05"

    def test_invalid_hour_cycle(self):
        """Test that an unknown hour cycle is rejected."""
        with pytest.raises(ValueError):
            DateTimeFormatter("en", hour_cycle="h25")

    def test_custom_transliterator(self):
        """Test a caller-supplied transliterator."""

        class Masking:
            def transliterate(self, text: str, number_system: str) -> str:
                return "".join("#" if c.isdigit() else c for c in text)

        formatter = DateTimeFormatter("en", number_system="mask", transliterator=Masking())

        assert formatter.format(date(2020, 1, 2), "short") == "#/#/##"

    def test_repr(self):
        """Test the formatter representation."""
        assert repr(DateTimeFormatter("fr")) == "DateTimeFormatter(locale='fr', calendar='gregorian')"


# =============================================================================
# Convenience functions
# =============================================================================


class TestConvenienceFunctions:
    """Test the module-level API."""

    def test_format(self):
        """Test chronofmt.format with the default locale."""
        assert chronofmt.format(MONDAY, "full") == "Monday, July 10, 2017"

    def test_format_with_locale(self):
        """Test passing a locale per call."""
        assert chronofmt.format(date(2020, 1, 1), locale="de") == "01.01.2020"

    def test_format_interval(self):
        """Test chronofmt.format_interval."""
        assert chronofmt.format_interval(date(2020, 1, 1), date(2020, 1, 12)) == "Jan 1 – 12, 2020"

    def test_format_relative(self):
        """Test chronofmt.format_relative."""
        assert chronofmt.format_relative(-1, unit="day") == "yesterday"
        assert chronofmt.format_relative(3, unit="day") == "in 3 days"

    def test_configured_locale(self):
        """Test that the configured default locale is used."""
        set_config(FormatConfig(default_locale="fr"))

        assert chronofmt.format(date(2020, 1, 1)) == "1 janv. 2020"

    def test_locale_from_environment(self, monkeypatch):
        """Test that the environment supplies the default locale."""
        monkeypatch.setenv("CHRONOFMT_DEFAULT_LOCALE", "de")

        assert chronofmt.format(date(2020, 1, 1)) == "01.01.2020"

    def test_configured_hour_cycle(self):
        """Test that the configured hour cycle is used."""
        set_config(FormatConfig(hour_cycle="h23"))

        assert chronofmt.format(time(13, 5), "short") == "13:05"

    def test_compile(self):
        """Test the shared compile function."""
        pattern = chronofmt.compile("MMM d")

        assert isinstance(pattern, CompiledPattern)
        assert chronofmt.compile("MMM d") is pattern
