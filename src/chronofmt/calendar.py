"""Calendar field extraction.

The field renderer never does calendar arithmetic itself. Derived fields
(weekday, day of year, week numbering, quarter, era) come from a
CalendarProvider registered for the value's calendar kind. The Gregorian
provider ships by default; other calendars can be registered.

Week numbering follows the locale's week data: weeks start on ``first_day``
(ISO numbering, 1 = Monday) and week 1 of a year is the first week holding
at least ``min_days`` days of that year.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import date, timedelta

from chronofmt.exceptions import UnknownCalendarError
from chronofmt.protocols import CalendarProvider
from chronofmt.value import TemporalValue


@dataclass(frozen=True)
class CalendarFields:
    """Derived fields for one value. Fields the value cannot support are None."""
    weekday: int | None = None
    day_of_year: int | None = None
    week_of_year: int | None = None
    week_year: int | None = None
    week_of_month: int | None = None
    day_of_week_in_month: int | None = None
    quarter: int | None = None
    era: int | None = None
    year_of_era: int | None = None


class GregorianCalendar:
    """Proleptic Gregorian calendar provider."""

    kind = "gregorian"

    def extract(self, value: TemporalValue, first_day: int, min_days: int) -> CalendarFields:
        quarter = (value.month - 1) // 3 + 1 if value.month is not None else None
        era = year_of_era = None
        if value.year is not None:
            era = 1 if value.year > 0 else 0
            year_of_era = value.year if value.year > 0 else 1 - value.year

        if not value.is_full_date or value.year < 1:
            return CalendarFields(quarter=quarter, era=era, year_of_era=year_of_era)

        day = date(value.year, value.month, value.day)
        week_year, week_of_year = week_of_year_for(day, first_day, min_days)
        return CalendarFields(
            weekday=day.isoweekday(),
            day_of_year=day.timetuple().tm_yday,
            week_of_year=week_of_year,
            week_year=week_year,
            week_of_month=week_of_month_for(day, first_day, min_days),
            day_of_week_in_month=(day.day - 1) // 7 + 1,
            quarter=quarter,
            era=era,
            year_of_era=year_of_era,
        )


def _first_week_start(year: int, first_day: int, min_days: int) -> date:
    jan1 = date(year, 1, 1)
    lead = (jan1.isoweekday() - first_day) % 7
    start = jan1 - timedelta(days=lead)
    if 7 - lead < min_days:
        start += timedelta(days=7)
    return start


def week_of_year_for(day: date, first_day: int, min_days: int) -> tuple[int, int]:
    """Return ``(week_year, week_of_year)`` for a date."""
    year = day.year
    if year < 9999:
        next_start = _first_week_start(year + 1, first_day, min_days)
        if day >= next_start:
            return year + 1, 1
    start = _first_week_start(year, first_day, min_days)
    if day < start:
        year -= 1
        start = _first_week_start(year, first_day, min_days)
    return year, (day - start).days // 7 + 1


def week_of_month_for(day: date, first_day: int, min_days: int) -> int:
    """Week of month; days before the first qualifying week are week 0."""
    first = day.replace(day=1)
    lead = (first.isoweekday() - first_day) % 7
    week = (day.day - 1 + lead) // 7
    if 7 - lead >= min_days:
        week += 1
    return week


# =============================================================================
# Registry
# =============================================================================

_providers: dict[str, CalendarProvider] = {"gregorian": GregorianCalendar()}
_lock = threading.RLock()


def register_calendar(kind: str, provider: CalendarProvider) -> None:
    """Register a provider for a calendar kind."""
    with _lock:
        _providers[kind] = provider


def get_calendar(kind: str) -> CalendarProvider:
    """Return the provider for a calendar kind.

    Raises:
        UnknownCalendarError: If nothing is registered for the kind.
    """
    with _lock:
        provider = _providers.get(kind)
    if provider is None:
        raise UnknownCalendarError(kind)
    return provider
