"""Temporal values.

A TemporalValue is an immutable record exposing any subset of calendar and
clock fields. Partial values such as ``{year: 2024, month: 6}`` are first
class: the resolver derives a format skeleton from the fields present.

Usage:
    from datetime import date
    from chronofmt.value import TemporalValue

    TemporalValue.from_python(date(2017, 7, 10))
    TemporalValue.from_mapping({"year": 2024, "month": 6})
    TemporalValue(hour=23)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Mapping

from chronofmt.protocols import ValueKind


DATE_FIELDS = ("year", "month", "day")
TIME_FIELDS = ("hour", "minute", "second")
ZONE_FIELDS = ("time_zone", "zone_abbr", "utc_offset", "std_offset")

_MAPPING_KEYS = frozenset(
    DATE_FIELDS + TIME_FIELDS + ZONE_FIELDS + ("microsecond", "precision", "calendar")
)


@dataclass(frozen=True)
class TemporalValue:
    """An immutable, possibly partial, date/time value.

    Attributes:
        year, month, day: Calendar date fields
        hour, minute, second: Clock fields (hour is 0..23)
        microsecond: Sub-second numerator over 1_000_000
        precision: Number of meaningful sub-second digits (0..6)
        time_zone: Zone identifier such as "Europe/Paris"
        zone_abbr: Zone abbreviation such as "CET"
        utc_offset: Standard offset from UTC in seconds
        std_offset: Daylight saving adjustment in seconds
        calendar: Calendar kind
    """
    year: int | None = None
    month: int | None = None
    day: int | None = None
    hour: int | None = None
    minute: int | None = None
    second: int | None = None
    microsecond: int | None = None
    precision: int = 6
    time_zone: str | None = None
    zone_abbr: str | None = None
    utc_offset: int | None = None
    std_offset: int | None = None
    calendar: str = "gregorian"

    def __post_init__(self) -> None:
        if self.month is not None and not 1 <= self.month <= 13:
            raise ValueError(f"month out of range: {self.month}")
        if self.day is not None and not 1 <= self.day <= 31:
            raise ValueError(f"day out of range: {self.day}")
        if self.hour is not None and not 0 <= self.hour <= 23:
            raise ValueError(f"hour out of range: {self.hour}")
        if self.minute is not None and not 0 <= self.minute <= 59:
            raise ValueError(f"minute out of range: {self.minute}")
        if self.second is not None and not 0 <= self.second <= 60:
            raise ValueError(f"second out of range: {self.second}")
        if self.microsecond is not None and not 0 <= self.microsecond < 1_000_000:
            raise ValueError(f"microsecond out of range: {self.microsecond}")
        if not 0 <= self.precision <= 6:
            raise ValueError(f"precision out of range: {self.precision}")

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_python(cls, obj: date | time | datetime) -> "TemporalValue":
        """Build a value from a ``date``, ``time`` or ``datetime``.

        Aware values carry their zone identifier (the ``zoneinfo`` key when
        available), abbreviation, standard offset and DST adjustment.
        """
        if isinstance(obj, datetime):
            fields: dict[str, Any] = dict(
                year=obj.year, month=obj.month, day=obj.day,
                hour=obj.hour, minute=obj.minute, second=obj.second,
                microsecond=obj.microsecond,
            )
            fields.update(_zone_fields(obj.tzinfo, obj))
            return cls(**fields)
        if isinstance(obj, date):
            return cls(year=obj.year, month=obj.month, day=obj.day)
        if isinstance(obj, time):
            fields = dict(
                hour=obj.hour, minute=obj.minute, second=obj.second,
                microsecond=obj.microsecond,
            )
            if obj.tzinfo is not None:
                fields.update(_zone_fields(obj.tzinfo, None))
            return cls(**fields)
        raise TypeError(f"Cannot build a TemporalValue from {type(obj).__name__}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TemporalValue":
        """Build a value from a mapping of field names.

        Raises:
            ValueError: If the mapping has keys that are not value fields.
        """
        unknown = set(data) - _MAPPING_KEYS
        if unknown:
            raise ValueError(f"Unknown temporal fields: {sorted(unknown)}")
        return cls(**dict(data))

    def replace(self, **changes: Any) -> "TemporalValue":
        return dataclasses.replace(self, **changes)

    # -------------------------------------------------------------------------
    # Field-set queries
    # -------------------------------------------------------------------------

    def has(self, *names: str) -> bool:
        """True if every named field is present."""
        return all(getattr(self, name) is not None for name in names)

    @property
    def present_fields(self) -> frozenset[str]:
        return frozenset(
            name for name in DATE_FIELDS + TIME_FIELDS + ZONE_FIELDS + ("microsecond",)
            if getattr(self, name) is not None
        )

    @property
    def has_date(self) -> bool:
        return any(getattr(self, name) is not None for name in DATE_FIELDS)

    @property
    def has_time(self) -> bool:
        return any(getattr(self, name) is not None for name in TIME_FIELDS)

    @property
    def has_zone(self) -> bool:
        return self.time_zone is not None or self.utc_offset is not None

    @property
    def is_full_date(self) -> bool:
        return self.has("year", "month", "day")

    @property
    def is_full_time(self) -> bool:
        return self.has("hour", "minute")

    @property
    def kind(self) -> ValueKind | None:
        """DATE, TIME or DATETIME depending on which axes are present."""
        if self.has_date and self.has_time:
            return ValueKind.DATETIME
        if self.has_date:
            return ValueKind.DATE
        if self.has_time:
            return ValueKind.TIME
        return None

    @property
    def total_offset(self) -> int | None:
        """Total offset from UTC in seconds, including DST."""
        if self.utc_offset is None:
            return None
        return self.utc_offset + (self.std_offset or 0)

    def date_part(self) -> "TemporalValue":
        return TemporalValue(
            year=self.year, month=self.month, day=self.day, calendar=self.calendar
        )

    def time_part(self) -> "TemporalValue":
        return dataclasses.replace(self, year=None, month=None, day=None)

    # -------------------------------------------------------------------------
    # Ordering
    # -------------------------------------------------------------------------

    def sort_key(self) -> tuple[int, ...]:
        """Chronological key over the present date and time fields.

        Complete date-times with an offset are normalized to UTC so aware
        values in the same zone compare by instant.
        """
        if self.is_full_date and self.is_full_time and self.total_offset is not None:
            local = datetime(
                self.year, self.month, self.day,
                self.hour, self.minute, self.second or 0, self.microsecond or 0,
            )
            instant = local - timedelta(seconds=self.total_offset)
            return (
                instant.year, instant.month, instant.day, instant.hour,
                instant.minute, instant.second, instant.microsecond,
            )
        return tuple(
            getattr(self, name)
            for name in DATE_FIELDS + TIME_FIELDS + ("microsecond",)
            if getattr(self, name) is not None
        )

    def __repr__(self) -> str:
        present = ", ".join(
            f"{f.name}={getattr(self, f.name)!r}"
            for f in dataclasses.fields(self)
            if getattr(self, f.name) is not None
            and not (f.name == "precision" and self.microsecond is None)
            and not (f.name == "calendar" and self.calendar == "gregorian")
        )
        return f"TemporalValue({present})"


def coerce_value(obj: Any) -> TemporalValue:
    """Accept a TemporalValue, ``date``/``time``/``datetime`` or mapping."""
    if isinstance(obj, TemporalValue):
        return obj
    if isinstance(obj, (date, time)):
        return TemporalValue.from_python(obj)
    if isinstance(obj, Mapping):
        return TemporalValue.from_mapping(obj)
    raise TypeError(f"Cannot format a value of type {type(obj).__name__}")


def _zone_fields(tzinfo: Any, moment: datetime | None) -> dict[str, Any]:
    if tzinfo is None:
        return {}
    offset = tzinfo.utcoffset(moment)
    if offset is None:
        return {}
    dst = tzinfo.dst(moment) or timedelta(0)
    name = getattr(tzinfo, "key", None)
    abbr = tzinfo.tzname(moment)
    if name is None:
        name = "Etc/UTC" if tzinfo is timezone.utc else abbr
    return {
        "time_zone": name,
        "zone_abbr": abbr,
        "utc_offset": int((offset - dst).total_seconds()),
        "std_offset": int(dst.total_seconds()),
    }
