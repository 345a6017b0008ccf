"""Pattern compiler.

Turns CLDR date/time patterns such as ``"yyyy-MM-dd'T'HH:mm:ssXXX"`` into an
immutable sequence of instructions, and tokenizes format skeletons and
interval patterns.

Pattern syntax:
- A run of one ASCII letter is a field; the run length is its width
- Text between single quotes is literal; ``''`` is a literal quote
- Every other character is literal

Compiled patterns are cached by their source string. The cache is a
thread-safe LRU: a miss compiles once and inserts, and since compilation is
pure a racing duplicate insert is harmless.

Usage:
    from chronofmt.compiler import compile

    pattern = compile("EEEE, MMMM d, y")
    pattern.symbols()  # [("E", 4), ("M", 4), ("d", 1), ("y", 1)]
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Union

from chronofmt.exceptions import CompileError, IntervalFormatError

logger = logging.getLogger(__name__)


# ==============================================================================
# Field kinds
# ==============================================================================

class FieldKind(str, Enum):
    """Every field a pattern can contain."""
    ERA = "era"
    YEAR = "year"
    WEEK_YEAR = "week_year"
    EXTENDED_YEAR = "extended_year"
    QUARTER = "quarter"
    QUARTER_STANDALONE = "quarter_standalone"
    MONTH = "month"
    MONTH_STANDALONE = "month_standalone"
    WEEK_OF_YEAR = "week_of_year"
    WEEK_OF_MONTH = "week_of_month"
    DAY_OF_MONTH = "day_of_month"
    DAY_OF_YEAR = "day_of_year"
    DAY_OF_WEEK_IN_MONTH = "day_of_week_in_month"
    WEEKDAY = "weekday"
    LOCAL_WEEKDAY = "local_weekday"
    LOCAL_WEEKDAY_STANDALONE = "local_weekday_standalone"
    PERIOD_AM_PM = "period_am_pm"
    PERIOD_NOON_MIDNIGHT = "period_noon_midnight"
    PERIOD_FLEX = "period_flex"
    HOUR_1_12 = "hour_1_12"
    HOUR_0_23 = "hour_0_23"
    HOUR_0_11 = "hour_0_11"
    HOUR_1_24 = "hour_1_24"
    MINUTE = "minute"
    SECOND = "second"
    FRACTIONAL_SECOND = "fractional_second"
    MILLISECONDS_IN_DAY = "milliseconds_in_day"
    TIME_ZONE_GENERIC = "time_zone_generic"
    TIME_ZONE_SPECIFIC = "time_zone_specific"
    TIME_ZONE_ID = "time_zone_id"
    TIME_ZONE_GMT = "time_zone_gmt"
    TIME_ZONE_ISO_BASIC = "time_zone_iso_basic"
    TIME_ZONE_ISO = "time_zone_iso"
    TIME_ZONE_ISO_NO_Z = "time_zone_iso_no_z"

    @property
    def symbol(self) -> str:
        return _KIND_SYMBOLS[self]


_ANY = frozenset(range(1, 10))

# symbol -> (kind, legal widths)
SYMBOLS: dict[str, tuple[FieldKind, frozenset[int]]] = {
    "G": (FieldKind.ERA, frozenset(range(1, 6))),
    "y": (FieldKind.YEAR, _ANY),
    "Y": (FieldKind.WEEK_YEAR, _ANY),
    "u": (FieldKind.EXTENDED_YEAR, _ANY),
    "Q": (FieldKind.QUARTER, frozenset(range(1, 6))),
    "q": (FieldKind.QUARTER_STANDALONE, frozenset(range(1, 6))),
    "M": (FieldKind.MONTH, frozenset(range(1, 6))),
    "L": (FieldKind.MONTH_STANDALONE, frozenset(range(1, 6))),
    "w": (FieldKind.WEEK_OF_YEAR, frozenset({1, 2})),
    "W": (FieldKind.WEEK_OF_MONTH, frozenset({1})),
    "d": (FieldKind.DAY_OF_MONTH, frozenset({1, 2})),
    "D": (FieldKind.DAY_OF_YEAR, frozenset({1, 2, 3})),
    "F": (FieldKind.DAY_OF_WEEK_IN_MONTH, frozenset({1})),
    "E": (FieldKind.WEEKDAY, frozenset(range(1, 7))),
    "e": (FieldKind.LOCAL_WEEKDAY, frozenset(range(1, 7))),
    "c": (FieldKind.LOCAL_WEEKDAY_STANDALONE, frozenset(range(1, 7))),
    "a": (FieldKind.PERIOD_AM_PM, frozenset(range(1, 6))),
    "b": (FieldKind.PERIOD_NOON_MIDNIGHT, frozenset(range(1, 6))),
    "B": (FieldKind.PERIOD_FLEX, frozenset(range(1, 6))),
    "h": (FieldKind.HOUR_1_12, frozenset({1, 2})),
    "H": (FieldKind.HOUR_0_23, frozenset({1, 2})),
    "K": (FieldKind.HOUR_0_11, frozenset({1, 2})),
    "k": (FieldKind.HOUR_1_24, frozenset({1, 2})),
    "m": (FieldKind.MINUTE, frozenset({1, 2})),
    "s": (FieldKind.SECOND, frozenset({1, 2})),
    "S": (FieldKind.FRACTIONAL_SECOND, _ANY),
    "A": (FieldKind.MILLISECONDS_IN_DAY, _ANY),
    "v": (FieldKind.TIME_ZONE_GENERIC, frozenset({1, 4})),
    "z": (FieldKind.TIME_ZONE_SPECIFIC, frozenset(range(1, 5))),
    "V": (FieldKind.TIME_ZONE_ID, frozenset(range(1, 5))),
    "O": (FieldKind.TIME_ZONE_GMT, frozenset({1, 4})),
    "Z": (FieldKind.TIME_ZONE_ISO_BASIC, frozenset(range(1, 6))),
    "X": (FieldKind.TIME_ZONE_ISO, frozenset(range(1, 6))),
    "x": (FieldKind.TIME_ZONE_ISO_NO_Z, frozenset(range(1, 6))),
}

_KIND_SYMBOLS = {kind: symbol for symbol, (kind, _) in SYMBOLS.items()}

# Symbols only meaningful in skeletons: locale-preferred hour and period
SKELETON_ONLY_SYMBOLS = frozenset("jJC")

DATE_SYMBOLS = frozenset("GyYuUrQqMLlwWdDFgEec")
TIME_SYMBOLS = frozenset("abBhHKkjJCmsSAzZOvVXx")


# ==============================================================================
# Instructions
# ==============================================================================

@dataclass(frozen=True)
class Literal:
    """Text copied verbatim into the output."""
    text: str


@dataclass(frozen=True)
class Field:
    """One field rendered at a given width."""
    kind: FieldKind
    width: int

    @property
    def symbol(self) -> str:
        return self.kind.symbol

    @property
    def text(self) -> str:
        return self.symbol * self.width


@dataclass(frozen=True)
class DecimalSeparator:
    """The locale decimal symbol, inserted between seconds and fractions."""


Instruction = Union[Literal, Field, DecimalSeparator]


@dataclass(frozen=True)
class CompiledPattern:
    """An immutable, shareable compiled pattern."""
    source: str
    instructions: tuple[Instruction, ...]

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def __len__(self) -> int:
        return len(self.instructions)

    @property
    def fields(self) -> list[Field]:
        return [i for i in self.instructions if isinstance(i, Field)]

    def symbols(self) -> list[tuple[str, int]]:
        """``(symbol, width)`` for every field, in order."""
        return [(f.symbol, f.width) for f in self.fields]

    def has_symbol(self, symbol: str, min_width: int = 1) -> bool:
        return any(f.symbol == symbol and f.width >= min_width for f in self.fields)

    def to_pattern(self) -> str:
        """Serialize back to pattern syntax, quoting literals as needed."""
        return instructions_to_pattern(self.instructions)


def quote_literal(text: str) -> str:
    """Quote literal text so it survives recompilation."""
    if not text:
        return ""
    if not any(ch.isascii() and ch.isalpha() for ch in text):
        return text.replace("'", "''")
    return "'" + text.replace("'", "''") + "'"


def instructions_to_pattern(instructions: "tuple[Instruction, ...] | list[Instruction]") -> str:
    parts = []
    for instruction in instructions:
        if isinstance(instruction, Field):
            parts.append(instruction.text)
        elif isinstance(instruction, Literal):
            parts.append(quote_literal(instruction.text))
    return "".join(parts)


# ==============================================================================
# Scanning
# ==============================================================================

def _is_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _scan(pattern: str) -> Iterator[tuple[str | None, str | int]]:
    """Yield ``(symbol, count)`` for fields and ``(None, text)`` for literals."""
    buffer: list[str] = []
    i = 0
    n = len(pattern)

    while i < n:
        ch = pattern[i]
        if ch == "'":
            if i + 1 < n and pattern[i + 1] == "'":
                buffer.append("'")
                i += 2
                continue
            j = i + 1
            while True:
                if j >= n:
                    raise CompileError(
                        pattern, f"Unterminated quoted literal in pattern {pattern!r}"
                    )
                if pattern[j] == "'":
                    if j + 1 < n and pattern[j + 1] == "'":
                        buffer.append("'")
                        j += 2
                        continue
                    break
                buffer.append(pattern[j])
                j += 1
            i = j + 1
        elif _is_letter(ch):
            if buffer:
                yield None, "".join(buffer)
                buffer = []
            j = i
            while j < n and pattern[j] == ch:
                j += 1
            yield ch, j - i
            i = j
        else:
            buffer.append(ch)
            i += 1

    if buffer:
        yield None, "".join(buffer)


def parse(pattern: str) -> CompiledPattern:
    """Compile a pattern without consulting the cache.

    Raises:
        CompileError: On an empty pattern, unknown symbol, illegal width or
            unterminated quote.
    """
    if not pattern:
        raise CompileError(pattern, "Format pattern must not be empty")

    instructions: list[Instruction] = []
    for symbol, value in _scan(pattern):
        if symbol is None:
            instructions.append(Literal(value))
            continue
        entry = SYMBOLS.get(symbol)
        if entry is None:
            raise CompileError(
                pattern, f"Unknown format symbol {symbol!r} in pattern {pattern!r}", symbol
            )
        kind, widths = entry
        if value not in widths:
            raise CompileError(
                pattern,
                f"Format symbol {symbol!r} does not support width {value} "
                f"(valid widths: {sorted(widths)})",
                symbol,
            )
        if (
            kind is FieldKind.FRACTIONAL_SECOND
            and instructions
            and isinstance(instructions[-1], Field)
            and instructions[-1].kind is FieldKind.SECOND
        ):
            instructions.append(DecimalSeparator())
        instructions.append(Field(kind, value))

    return CompiledPattern(source=pattern, instructions=tuple(instructions))


def tokenize_skeleton(skeleton: str) -> list[tuple[str, int]]:
    """Split a skeleton such as ``"yMMMd"`` into ``(symbol, count)`` pairs.

    Skeletons contain letters only; ``j``, ``J`` and ``C`` are accepted in
    addition to pattern symbols.

    Raises:
        CompileError: On an empty skeleton or an unknown symbol.
    """
    if not skeleton:
        raise CompileError(skeleton, "Format skeleton must not be empty")
    tokens: list[tuple[str, int]] = []
    for symbol, count in _scan(skeleton):
        if symbol is None or (symbol not in SYMBOLS and symbol not in SKELETON_ONLY_SYMBOLS):
            bad = symbol or str(count)
            raise CompileError(
                skeleton, f"Unknown symbol {bad!r} in skeleton {skeleton!r}", bad
            )
        tokens.append((symbol, count))
    return tokens


def split_interval(pattern: str) -> tuple[str, str]:
    """Split an interval pattern into its ``from`` and ``to`` halves.

    The split falls immediately before the first field whose letter already
    occurred earlier in the pattern. Quoted text is never split.

    Example:
        split_interval("MMM d – d, y")  # ("MMM d – ", "d, y")

    Raises:
        IntervalFormatError: If no field letter repeats.
    """
    seen: set[str] = set()
    in_quote = False
    i = 0
    n = len(pattern)

    while i < n:
        ch = pattern[i]
        if ch == "'":
            in_quote = not in_quote
            i += 1
        elif in_quote or not _is_letter(ch):
            i += 1
        else:
            if ch in seen:
                return pattern[:i], pattern[i:]
            seen.add(ch)
            while i < n and pattern[i] == ch:
                i += 1

    raise IntervalFormatError(
        f"Interval format {pattern!r} has no repeated field to split on"
    )


# ==============================================================================
# Cache
# ==============================================================================

class PatternCache:
    """Thread-safe LRU cache of compiled patterns."""

    def __init__(self, max_size: int = 512) -> None:
        self.max_size = max_size
        self._cache: OrderedDict[str, CompiledPattern] = OrderedDict()
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0

    def get_or_compile(self, pattern: str) -> CompiledPattern:
        with self._lock:
            compiled = self._cache.get(pattern)
            if compiled is not None:
                self.hits += 1
                self._cache.move_to_end(pattern)
                return compiled
            self.misses += 1

        compiled = parse(pattern)
        logger.debug("Compiled pattern %r into %d instructions", pattern, len(compiled))

        with self._lock:
            # Another thread may have compiled the same pattern meanwhile
            compiled = self._cache.setdefault(pattern, compiled)
            self._cache.move_to_end(pattern)
            while len(self._cache) > self.max_size:
                self._cache.popitem(last=False)
        return compiled

    def resize(self, max_size: int) -> None:
        with self._lock:
            self.max_size = max_size
            while len(self._cache) > self.max_size:
                self._cache.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
            self.hits = 0
            self.misses = 0

    def __contains__(self, pattern: str) -> bool:
        with self._lock:
            return pattern in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


_pattern_cache = PatternCache()


def get_pattern_cache() -> PatternCache:
    return _pattern_cache


def compile(pattern: str) -> CompiledPattern:
    """Compile a pattern, reusing a cached result when available."""
    return _pattern_cache.get_or_compile(pattern)
