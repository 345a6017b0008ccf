"""Exception hierarchy for date, time and interval formatting.

Every failure raised by chronofmt derives from FormatError so callers can
recover from any single formatting call with one ``except`` clause. Each
failure is local to the call that produced it.
"""

from __future__ import annotations

from typing import Any, Iterable


# =============================================================================
# Base
# =============================================================================


class FormatError(Exception):
    """Base exception for all formatting errors."""

    pass


# =============================================================================
# Pattern compilation and rendering
# =============================================================================


class CompileError(FormatError):
    """Raised when a pattern string cannot be compiled."""

    def __init__(self, pattern: str, message: str, symbol: str | None = None) -> None:
        self.pattern = pattern
        self.symbol = symbol
        super().__init__(message)


class RenderError(FormatError):
    """Raised when a field cannot be rendered for a value.

    Usually the value lacks a field the instruction requires; the
    ``required`` attribute then lists the fields needed.
    """

    def __init__(
        self,
        symbol: str,
        required: Iterable[str] = (),
        value: Any = None,
        message: str | None = None,
    ) -> None:
        self.symbol = symbol
        self.required = tuple(required)
        self.value = value
        if message is None:
            fields = ", ".join(f":{name}" for name in self.required)
            message = (
                f"The format symbol '{symbol}' requires a value with at least "
                f"{fields}. Found: {value!r}"
            )
        super().__init__(message)


# =============================================================================
# Format resolution
# =============================================================================


class UnresolvedFormat(FormatError):
    """Raised when no available format matches a skeleton or format id."""

    def __init__(self, skeleton: str, message: str | None = None) -> None:
        self.skeleton = skeleton
        super().__init__(message or f'No available format resolved for "{skeleton}"')


class PartialValueRejectsStandardFormat(FormatError):
    """Raised when a standard style is requested for an incomplete value."""

    def __init__(self, style: str, missing: Iterable[str]) -> None:
        self.style = style
        self.missing = tuple(missing)
        super().__init__(
            f"Standard format {style!r} is not accepted for partial values. "
            f"Missing fields: {', '.join(self.missing)}"
        )


class InvalidStyle(FormatError):
    """Raised when a style is not valid for the request."""

    def __init__(self, style: str, valid: Iterable[str]) -> None:
        self.style = style
        self.valid = tuple(valid)
        super().__init__(
            f"The style {style!r} is invalid. "
            f"Valid styles are {list(self.valid)!r}."
        )


# =============================================================================
# Intervals
# =============================================================================


class IntervalFormatError(FormatError):
    """Raised when an interval cannot be formatted."""

    pass


class DateTimeOrderError(IntervalFormatError):
    """Raised when the start of an interval sorts after its end."""

    def __init__(self, start: Any, end: Any) -> None:
        self.start = start
        self.end = end
        super().__init__(
            f"Start date/time must be earlier or equal to end date/time. "
            f"Found {start!r}, {end!r}."
        )


class IncompatibleTimeZoneError(IntervalFormatError):
    """Raised when both ends of an interval carry different time zones."""

    def __init__(self, start: Any, end: Any) -> None:
        self.start = start
        self.end = end
        super().__init__(
            f"Start and end date/times must be in the same time zone. "
            f"Found {start!r}, {end!r}."
        )


# =============================================================================
# Collaborator lookups
# =============================================================================


class UnknownLocaleError(FormatError):
    """Raised when no locale data is available for a locale."""

    def __init__(self, locale: str, calendar: str | None = None) -> None:
        self.locale = locale
        self.calendar = calendar
        suffix = f" and calendar {calendar!r}" if calendar else ""
        super().__init__(f"No locale data found for {locale!r}{suffix}")


class UnknownCalendarError(FormatError):
    """Raised when a calendar kind has no registered provider."""

    def __init__(self, calendar: str) -> None:
        self.calendar = calendar
        super().__init__(f"Unknown calendar {calendar!r}")


class UnknownNumberSystemError(FormatError):
    """Raised when a number system is not known."""

    def __init__(self, system: str, valid: Iterable[str] = ()) -> None:
        self.system = system
        valid = sorted(valid)
        hint = f" Known number systems are {valid!r}." if valid else ""
        super().__init__(f"Unknown number system {system!r}.{hint}")


class UnknownTimeUnitError(FormatError):
    """Raised when a relative time unit is not known."""

    def __init__(self, unit: str, valid: Iterable[str]) -> None:
        self.unit = unit
        super().__init__(
            f"Unknown time unit {unit!r}. Valid time units are {sorted(valid)!r}"
        )


class LocaleDataError(FormatError):
    """Raised when locale data is malformed."""

    pass
