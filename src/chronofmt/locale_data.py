"""Locale format tables and their loader.

A LocaleFormatTable holds everything the engine reads for one locale and
calendar: standard and available formats, interval formats, localized
names, time zone templates, week data and hour preferences. Tables are
built once from YAML files and never mutated afterwards.

Lookup falls back from the most specific tag to the bare language
("fr-CA" -> "fr"). Loaded tables are kept in a thread-safe LRU cache.

Data file layout (``data/<tag>.yaml``)::

    locale: en
    calendars:
      gregorian:
        date_formats: {full: "EEEE, MMMM d, y", ...}
        available_formats: {yMMMd: "MMM d, y", ...}
        interval_formats:
          fallback: "{0} – {1}"
          yMMMd: {d: "MMM d – d, y", ...}
        ...

Usage:
    from chronofmt.locale_data import get_locale_table

    table = get_locale_table("en")
    table.date_formats[FormatStyle.FULL]  # "EEEE, MMMM d, y"
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from chronofmt.compiler import split_interval
from chronofmt.exceptions import IntervalFormatError, LocaleDataError, UnknownLocaleError
from chronofmt.protocols import (
    TWENTY_FOUR_HOUR_SYMBOLS,
    FormatStyle,
    LocaleInfo,
    NameContext,
    NameWidth,
    PluralCategory,
)

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"

WEEKDAY_KEYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

# Name width fallbacks, tried in order after the requested width
_WIDTH_FALLBACKS: dict[NameWidth, tuple[NameWidth, ...]] = {
    NameWidth.SHORT: (NameWidth.ABBREVIATED,),
    NameWidth.NARROW: (NameWidth.ABBREVIATED,),
    NameWidth.WIDE: (NameWidth.ABBREVIATED,),
    NameWidth.ABBREVIATED: (),
}


# ==============================================================================
# Table Types
# ==============================================================================

@dataclass(frozen=True)
class PluralPattern:
    """An available format whose pattern depends on a count.

    Attributes:
        forms: Pattern per plural category
        pluralize: Calendar field driving the choice
            ("week_of_year" or "week_of_month")
    """
    forms: Mapping[PluralCategory, str]
    pluralize: str


@dataclass(frozen=True)
class DayPeriodRule:
    """A flexible day period, either at an exact minute or over a range."""
    name: str
    at: int | None = None
    start: int | None = None
    end: int | None = None

    def matches(self, minute_of_day: int) -> bool:
        if self.at is not None:
            return minute_of_day == self.at
        if self.start <= self.end:
            return self.start <= minute_of_day < self.end
        return minute_of_day >= self.start or minute_of_day < self.end


@dataclass(frozen=True)
class RelativeUnit:
    """Relative-time strings for one unit and style."""
    relative: Mapping[int, str]
    future: Mapping[PluralCategory, str]
    past: Mapping[PluralCategory, str]


@dataclass(frozen=True)
class LocaleFormatTable:
    """Read-only formatting data for one locale and calendar."""
    locale: LocaleInfo
    calendar: str = "gregorian"
    date_formats: Mapping[FormatStyle, str] = field(default_factory=dict)
    time_formats: Mapping[FormatStyle, str] = field(default_factory=dict)
    datetime_formats: Mapping[FormatStyle, str] = field(default_factory=dict)
    datetime_at_formats: Mapping[FormatStyle, str] = field(default_factory=dict)
    available_formats: Mapping[str, "str | PluralPattern"] = field(default_factory=dict)
    interval_formats: Mapping[str, Mapping[str, tuple[str, str]]] = field(default_factory=dict)
    interval_fallback: str = "{0} – {1}"
    eras: Mapping[str, Mapping[str, Mapping[int, str]]] = field(default_factory=dict)
    quarters: Mapping[str, Mapping[str, Mapping[int, str]]] = field(default_factory=dict)
    months: Mapping[str, Mapping[str, Mapping[int, str]]] = field(default_factory=dict)
    days: Mapping[str, Mapping[str, Mapping[int, str]]] = field(default_factory=dict)
    day_periods: Mapping[str, Mapping[str, Mapping[str, str]]] = field(default_factory=dict)
    day_period_rules: tuple[DayPeriodRule, ...] = ()
    gmt_format: str = "GMT{0}"
    gmt_zero_format: str = "GMT"
    hour_format: str = "+HH:mm;-HH:mm"
    region_format: str = "{0} Time"
    first_day: int = 1
    min_days: int = 1
    hour_preferred: str = "H"
    hour_allowed: tuple[str, ...] = ("H",)
    number_system: str = "latn"
    decimal: str = "."
    group: str = ","
    relative: Mapping[str, Mapping[str, RelativeUnit]] = field(default_factory=dict)

    def name(
        self,
        category: str,
        context: NameContext,
        width: NameWidth,
        key: int | str,
    ) -> str | None:
        """Look up a localized name with context and width fallback.

        Tries the requested context, then the format context; within each,
        the requested width and then its fallbacks.

        Args:
            category: One of "eras", "quarters", "months", "days", "day_periods"
            context: Format or stand-alone context
            width: Requested name width
            key: Index (1-based month, ISO weekday, ...) or period name

        Returns:
            The name, or None when no fallback holds it
        """
        table: Mapping[str, Mapping[str, Mapping[Any, str]]] = getattr(self, category)
        contexts = [context.value]
        if context is not NameContext.FORMAT:
            contexts.append(NameContext.FORMAT.value)
        widths = (width,) + _WIDTH_FALLBACKS[width]

        for ctx in contexts:
            by_width = table.get(ctx, {})
            for w in widths:
                names = by_width.get(w.value)
                if names and key in names:
                    return names[key]
        return None

    def day_period(self, hour: int, minute: int) -> str | None:
        """Name of the flexible day period covering a time of day."""
        minute_of_day = hour * 60 + minute
        for rule in self.day_period_rules:
            if rule.at is not None and rule.matches(minute_of_day):
                return rule.name
        for rule in self.day_period_rules:
            if rule.at is None and rule.matches(minute_of_day):
                return rule.name
        return None

    @property
    def uses_24_hour(self) -> bool:
        return self.hour_preferred in TWENTY_FOUR_HOUR_SYMBOLS


# ==============================================================================
# YAML Parsing
# ==============================================================================

def _styles(raw: Mapping[str, str] | None) -> dict[FormatStyle, str]:
    return {FormatStyle(style): pattern for style, pattern in (raw or {}).items()}


def _indexed(raw: Mapping[str, Mapping[str, Any]] | None, start: int) -> dict[str, dict[str, dict[int, str]]]:
    result: dict[str, dict[str, dict[int, str]]] = {}
    for context, widths in (raw or {}).items():
        result[context] = {}
        for width, names in widths.items():
            if isinstance(names, Mapping):
                result[context][width] = {
                    (WEEKDAY_KEYS.index(k) + 1 if k in WEEKDAY_KEYS else int(k)): v
                    for k, v in names.items()
                }
            else:
                result[context][width] = {i + start: name for i, name in enumerate(names)}
    return result


def _clock_minutes(text: str) -> int:
    hours, minutes = text.split(":")
    return int(hours) * 60 + int(minutes)


def _day_period_rules(raw: Mapping[str, Mapping[str, str]] | None) -> tuple[DayPeriodRule, ...]:
    rules = []
    for name, spec in (raw or {}).items():
        if "at" in spec:
            rules.append(DayPeriodRule(name, at=_clock_minutes(spec["at"])))
        else:
            end = _clock_minutes(spec["before"]) % (24 * 60)
            rules.append(DayPeriodRule(name, start=_clock_minutes(spec["from"]), end=end))
    return tuple(rules)


def _available_formats(raw: Mapping[str, Any] | None) -> dict[str, "str | PluralPattern"]:
    formats: dict[str, str | PluralPattern] = {}
    for skeleton, pattern in (raw or {}).items():
        if isinstance(pattern, Mapping):
            forms = {PluralCategory(k): v for k, v in pattern.items() if k != "pluralize"}
            formats[skeleton] = PluralPattern(forms=forms, pluralize=pattern["pluralize"])
        else:
            formats[skeleton] = pattern
    return formats


def _interval_formats(raw: Mapping[str, Any] | None) -> tuple[dict[str, dict[str, tuple[str, str]]], str | None]:
    formats: dict[str, dict[str, tuple[str, str]]] = {}
    fallback = None
    for skeleton, by_field in (raw or {}).items():
        if skeleton == "fallback":
            fallback = by_field
            continue
        formats[skeleton] = {}
        for difference, pattern in by_field.items():
            if isinstance(pattern, list):
                formats[skeleton][difference] = (pattern[0], pattern[1])
            else:
                formats[skeleton][difference] = split_interval(pattern)
    return formats, fallback


def _relative(raw: Mapping[str, Any] | None) -> dict[str, dict[str, RelativeUnit]]:
    units: dict[str, dict[str, RelativeUnit]] = {}
    for unit, styles in (raw or {}).items():
        units[unit] = {}
        for style, spec in styles.items():
            units[unit][style] = RelativeUnit(
                relative={int(k): v for k, v in (spec.get("relative") or {}).items()},
                future={PluralCategory(k): v for k, v in spec["future"].items()},
                past={PluralCategory(k): v for k, v in spec["past"].items()},
            )
    return units


def build_table(locale: LocaleInfo, calendar: str, data: Mapping[str, Any]) -> LocaleFormatTable:
    """Build a table from the parsed data of one calendar.

    Raises:
        LocaleDataError: If required keys are missing or malformed.
    """
    try:
        intervals, fallback = _interval_formats(data.get("interval_formats"))
        week = data.get("week_data", {})
        hours = data.get("hour_preferences", {})
        numbers = data.get("numbers", {})
        zones = data.get("time_zone_names", {})
        return LocaleFormatTable(
            locale=locale,
            calendar=calendar,
            date_formats=_styles(data["date_formats"]),
            time_formats=_styles(data["time_formats"]),
            datetime_formats=_styles(data["datetime_formats"]),
            datetime_at_formats=_styles(data.get("datetime_at_formats")),
            available_formats=_available_formats(data.get("available_formats")),
            interval_formats=intervals,
            interval_fallback=fallback or "{0} – {1}",
            eras=_indexed(data.get("eras"), 0),
            quarters=_indexed(data.get("quarters"), 1),
            months=_indexed(data.get("months"), 1),
            days=_indexed(data.get("days"), 1),
            day_periods={ctx: dict(widths) for ctx, widths in data.get("day_periods", {}).items()},
            day_period_rules=_day_period_rules(data.get("day_period_rules")),
            gmt_format=zones.get("gmt_format", "GMT{0}"),
            gmt_zero_format=zones.get("gmt_zero_format", "GMT"),
            hour_format=zones.get("hour_format", "+HH:mm;-HH:mm"),
            region_format=zones.get("region_format", "{0} Time"),
            first_day=int(week.get("first_day", 1)),
            min_days=int(week.get("min_days", 1)),
            hour_preferred=hours.get("preferred", "H"),
            hour_allowed=tuple(hours.get("allowed", [hours.get("preferred", "H")])),
            number_system=numbers.get("default_system", "latn"),
            decimal=numbers.get("decimal", "."),
            group=numbers.get("group", ","),
            relative=_relative(data.get("relative")),
        )
    except (KeyError, TypeError, ValueError, IntervalFormatError) as e:
        raise LocaleDataError(f"Malformed data for {locale.tag}/{calendar}: {e}") from e


# ==============================================================================
# Registry
# ==============================================================================

class LocaleRegistry:
    """Loads, caches and registers locale tables.

    Implements the LocaleDataProvider protocol. Explicitly registered
    tables take precedence over files.

    Example:
        registry = LocaleRegistry()
        registry.lookup(LocaleInfo.parse("fr-CA"), "gregorian")  # fr table
    """

    def __init__(
        self,
        data_paths: list[Path | str] | None = None,
        max_size: int = 32,
    ) -> None:
        self.data_paths = [Path(p) for p in (data_paths or [])] + [DATA_DIR]
        self.max_size = max_size
        self._registered: dict[tuple[str, str], LocaleFormatTable] = {}
        self._cache: OrderedDict[tuple[str, str], LocaleFormatTable] = OrderedDict()
        self._lock = threading.RLock()

    def add_data_path(self, path: Path | str) -> None:
        """Search an extra directory before the bundled data."""
        with self._lock:
            self.data_paths.insert(0, Path(path))
            self._cache.clear()

    def set_data_paths(self, paths: list[Path | str]) -> None:
        """Replace the extra data directories searched before the bundled data."""
        with self._lock:
            self.data_paths = [Path(p) for p in paths] + [DATA_DIR]
            self._cache.clear()

    def resize(self, max_size: int) -> None:
        with self._lock:
            self.max_size = max_size
            while len(self._cache) > self.max_size:
                self._cache.popitem(last=False)

    def register(self, table: LocaleFormatTable) -> None:
        """Register a table built in code."""
        with self._lock:
            self._registered[(table.locale.tag, table.calendar)] = table

    def unregister(self, locale: str | LocaleInfo, calendar: str = "gregorian") -> None:
        with self._lock:
            self._registered.pop((LocaleInfo.parse(locale).tag, calendar), None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def available_locales(self) -> list[str]:
        tags = {tag for tag, _ in self._registered}
        for directory in self.data_paths:
            if directory.is_dir():
                tags.update(p.stem.replace("_", "-") for p in directory.glob("*.yaml"))
        return sorted(tags)

    def lookup(self, locale: LocaleInfo, calendar: str = "gregorian") -> LocaleFormatTable:
        """Return the table for a locale, falling back to its language.

        Raises:
            UnknownLocaleError: If no tag in the fallback chain has data.
        """
        for tag in locale.fallback_chain:
            table = self._get(tag, calendar)
            if table is not None:
                if tag != locale.tag:
                    logger.debug("Locale %s resolved to %s data", locale.tag, tag)
                return table
        raise UnknownLocaleError(locale.tag, calendar)

    def _get(self, tag: str, calendar: str) -> LocaleFormatTable | None:
        key = (tag, calendar)
        with self._lock:
            if key in self._registered:
                return self._registered[key]
            if key in self._cache:
                self._cache.move_to_end(key)
                return self._cache[key]

        table = self._load(tag, calendar)
        if table is None:
            return None

        with self._lock:
            self._cache[key] = table
            while len(self._cache) > self.max_size:
                self._cache.popitem(last=False)
        return table

    def _find_file(self, tag: str) -> Path | None:
        for directory in self.data_paths:
            for name in (tag, tag.replace("-", "_")):
                path = directory / f"{name}.yaml"
                if path.exists():
                    return path
        return None

    def _load(self, tag: str, calendar: str) -> LocaleFormatTable | None:
        path = self._find_file(tag)
        if path is None:
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.warning("Failed to parse locale data %s: %s", path, e)
            raise LocaleDataError(f"Failed to parse locale data {path}: {e}") from e

        calendars = raw.get("calendars", {})
        if calendar not in calendars:
            logger.debug("Locale data %s has no %s calendar", path, calendar)
            return None

        logger.debug("Loaded locale data for %s/%s from %s", tag, calendar, path)
        return build_table(LocaleInfo.parse(raw.get("locale", tag)), calendar, calendars[calendar])


_registry = LocaleRegistry()


def get_registry() -> LocaleRegistry:
    """Get the shared locale registry."""
    return _registry


def get_locale_table(locale: str | LocaleInfo, calendar: str = "gregorian") -> LocaleFormatTable:
    """Look up the table for a locale tag and calendar kind."""
    return _registry.lookup(LocaleInfo.parse(locale), calendar)
