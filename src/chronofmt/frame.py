"""Polars integration: format whole columns of dates, times and date-times.

Each call builds one formatter and reuses it for every row, so locale data
and compiled patterns are looked up once per column. Nulls stay null.

Usage:
    >>> import polars as pl
    >>> from chronofmt.frame import format_column
    >>>
    >>> df = pl.DataFrame({"day": [date(2020, 1, 1), None]})
    >>> format_column(df, "day", "long", alias="day_text")["day_text"].to_list()
    ['January 1, 2020', None]
"""

from __future__ import annotations

import logging
from typing import Any

import polars as pl

from chronofmt.formatter import DateTimeFormatter, get_formatter
from chronofmt.protocols import HourCycle, LocaleInfo

logger = logging.getLogger(__name__)


_TEMPORAL_DTYPES = (pl.Date, pl.Datetime, pl.Time)


def _check_temporal(series: pl.Series) -> None:
    if series.dtype not in _TEMPORAL_DTYPES:
        raise TypeError(
            f"Column {series.name!r} has dtype {series.dtype}; expected Date, Datetime or Time"
        )


def _formatter(
    formatter: DateTimeFormatter | None,
    locale: str | LocaleInfo | None,
    calendar: str | None,
    number_system: str | None,
    hour_cycle: HourCycle | str | None,
) -> DateTimeFormatter:
    if formatter is not None:
        return formatter
    return get_formatter(locale, calendar, number_system, hour_cycle)


def format_series(
    series: pl.Series,
    request: Any = None,
    *,
    locale: str | LocaleInfo | None = None,
    calendar: str | None = None,
    number_system: str | None = None,
    hour_cycle: HourCycle | str | None = None,
    formatter: DateTimeFormatter | None = None,
) -> pl.Series:
    """Format every value of a temporal Series.

    Args:
        series: Series of dtype Date, Datetime or Time
        request: Format request applied to every row
        locale: Locale tag, defaults to the configured locale
        calendar: Calendar kind
        number_system: Number system override
        hour_cycle: Hour cycle override
        formatter: Prebuilt formatter; overrides the options above

    Returns:
        A String Series with the same name and nulls in the same places.

    Raises:
        TypeError: If the series is not temporal.
    """
    _check_temporal(series)
    fmt = _formatter(formatter, locale, calendar, number_system, hour_cycle)

    values = [None if v is None else fmt.format(v, request) for v in series.to_list()]
    logger.debug("Formatted %d values of %r with %r", len(values), series.name, fmt)
    return pl.Series(series.name, values, dtype=pl.String)


def format_column(
    df: pl.DataFrame,
    column: str,
    request: Any = None,
    *,
    alias: str | None = None,
    locale: str | LocaleInfo | None = None,
    calendar: str | None = None,
    number_system: str | None = None,
    hour_cycle: HourCycle | str | None = None,
    formatter: DateTimeFormatter | None = None,
) -> pl.DataFrame:
    """Replace (or add, with ``alias``) a column holding formatted text.

    Raises:
        KeyError: If the column does not exist.
        TypeError: If the column is not temporal.
    """
    if column not in df.columns:
        raise KeyError(f"Column not found: {column}")

    text = format_series(
        df[column],
        request,
        locale=locale,
        calendar=calendar,
        number_system=number_system,
        hour_cycle=hour_cycle,
        formatter=formatter,
    )
    return df.with_columns(text.alias(alias or column))


def format_interval_columns(
    df: pl.DataFrame,
    start: str,
    end: str,
    alias: str,
    request: Any = None,
    *,
    style: Any = None,
    locale: str | LocaleInfo | None = None,
    calendar: str | None = None,
    number_system: str | None = None,
    hour_cycle: HourCycle | str | None = None,
    formatter: DateTimeFormatter | None = None,
) -> pl.DataFrame:
    """Add a column formatting the interval between two temporal columns.

    A row with one null end is formatted as an open interval; a row with
    both ends null stays null.
    """
    for column in (start, end):
        if column not in df.columns:
            raise KeyError(f"Column not found: {column}")
        _check_temporal(df[column])
    fmt = _formatter(formatter, locale, calendar, number_system, hour_cycle)

    values = []
    for lo, hi in zip(df[start].to_list(), df[end].to_list()):
        if lo is None and hi is None:
            values.append(None)
        else:
            values.append(fmt.format_interval(lo, hi, request, style))

    return df.with_columns(pl.Series(alias, values, dtype=pl.String))
