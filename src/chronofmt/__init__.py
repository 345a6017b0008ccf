"""chronofmt: locale-aware formatting of dates, times and intervals.

Formats dates, times, date-times and partial values (for example only a
year and month) with CLDR-style patterns, standard styles and skeletons,
and formats intervals between two values.

Core Features:
- Pattern compiler and interpreter for the CLDR field symbols
- Standard styles (short, medium, long, full) per locale
- Skeleton best-match against a locale's available formats
- Interval formatting with greatest-difference pattern selection
- Open intervals with one missing end
- Relative times ("yesterday", "in 3 days")

Integration:
- Locale data in YAML files, extendable with extra data directories
- Polars columns formatted in one call
- Defaults from a YAML file or CHRONOFMT_* environment variables

Example:
    from datetime import date, time
    import chronofmt

    chronofmt.format(date(2017, 7, 10), "full")
    # -> "Monday, July 10, 2017"

    chronofmt.format(time(7, 35, 13), "short")
    # -> "7:35 AM"

    chronofmt.format({"year": 2024, "month": 3})
    # -> "3/2024"

    chronofmt.format_interval(date(2020, 1, 1), date(2020, 1, 12))
    # -> "Jan 1 – 12, 2020"

    chronofmt.format_interval(date(2020, 1, 1), date(2020, 1, 12), style="long", locale="en")
    # -> "Wed, Jan 1 – Sun, Jan 12, 2020"

    chronofmt.format_relative(-1, unit="day")
    # -> "yesterday"
"""

# Formatting API
from chronofmt.formatter import (
    DateTimeFormatter,
    compile,
    format,
    format_interval,
    format_relative,
    get_formatter,
)

# Requests
from chronofmt.resolver import (
    FormatRequest,
    LiteralPattern,
    ResolvedFormat,
    Skeleton,
    StandardStyle,
    WithNumberSystem,
)

# Values and enums
from chronofmt.value import TemporalValue
from chronofmt.protocols import (
    FormatStyle,
    HourCycle,
    IntervalStyle,
    LocaleInfo,
    PluralCategory,
    ValueKind,
)

# Compiled patterns
from chronofmt.compiler import CompiledPattern, DecimalSeparator, Field, FieldKind, Literal

# Locale data
from chronofmt.locale_data import (
    LocaleFormatTable,
    LocaleRegistry,
    get_locale_table,
    get_registry,
)

# Exceptions
from chronofmt.exceptions import (
    CompileError,
    DateTimeOrderError,
    FormatError,
    IncompatibleTimeZoneError,
    IntervalFormatError,
    InvalidStyle,
    LocaleDataError,
    PartialValueRejectsStandardFormat,
    RenderError,
    UnknownCalendarError,
    UnknownLocaleError,
    UnknownNumberSystemError,
    UnknownTimeUnitError,
    UnresolvedFormat,
)

# Configuration
from chronofmt.config import (
    ConfigError,
    FormatConfig,
    get_config,
    load_config,
    reset_config,
    set_config,
)

# Polars integration
from chronofmt.frame import format_column, format_interval_columns, format_series

__version__ = "0.3.0"

__all__ = [
    # Formatting API
    "DateTimeFormatter",
    "compile",
    "format",
    "format_interval",
    "format_relative",
    "get_formatter",
    # Requests
    "FormatRequest",
    "LiteralPattern",
    "ResolvedFormat",
    "Skeleton",
    "StandardStyle",
    "WithNumberSystem",
    # Values and enums
    "TemporalValue",
    "FormatStyle",
    "HourCycle",
    "IntervalStyle",
    "LocaleInfo",
    "PluralCategory",
    "ValueKind",
    # Compiled patterns
    "CompiledPattern",
    "DecimalSeparator",
    "Field",
    "FieldKind",
    "Literal",
    # Locale data
    "LocaleFormatTable",
    "LocaleRegistry",
    "get_locale_table",
    "get_registry",
    # Exceptions
    "CompileError",
    "DateTimeOrderError",
    "FormatError",
    "IncompatibleTimeZoneError",
    "IntervalFormatError",
    "InvalidStyle",
    "LocaleDataError",
    "PartialValueRejectsStandardFormat",
    "RenderError",
    "UnknownCalendarError",
    "UnknownLocaleError",
    "UnknownNumberSystemError",
    "UnknownTimeUnitError",
    "UnresolvedFormat",
    # Configuration
    "ConfigError",
    "FormatConfig",
    "get_config",
    "load_config",
    "reset_config",
    "set_config",
    # Polars integration
    "format_column",
    "format_interval_columns",
    "format_series",
]
