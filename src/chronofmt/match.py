"""Best-match resolution of format skeletons.

When a skeleton such as ``"yMMMMd"`` is not an available format id, the
closest available id is chosen by comparing field tokens:

1. ``j``, ``J`` and ``C`` are replaced by the locale's hour preference.
2. Candidates must cover the same canonical field types with the same
   number of tokens. Related symbols share a canonical type::

       L, M                  -> M
       c, E                  -> E
       a, b, B               -> a
       h, H, K, k            -> H
       v, V, z, Z, O, x, X   -> v

3. Each candidate is scored token by token and the lowest total wins, ties
   going to the id declared first.

A skeleton with no candidate is split into its date and time fields, each
half matched on its own; the two ids are returned as a pair for the caller
to join with a date-time pattern.

Once matched, ``adjust_field_lengths`` stretches the chosen pattern back to
the widths the caller asked for.
"""

from __future__ import annotations

import logging
import threading
import weakref

from chronofmt.compiler import (
    DATE_SYMBOLS,
    SYMBOLS,
    TIME_SYMBOLS,
    Field,
    Literal,
    compile,
    instructions_to_pattern,
    tokenize_skeleton,
)
from chronofmt.exceptions import UnresolvedFormat
from chronofmt.locale_data import LocaleFormatTable
from chronofmt.protocols import TWENTY_FOUR_HOUR_SYMBOLS, HourCycle

logger = logging.getLogger(__name__)

Token = tuple[str, int]

MONTH_SYMBOLS = frozenset("LM")
WEEKDAY_SYMBOLS = frozenset("cE")
PERIOD_SYMBOLS = frozenset("abB")
HOUR_SYMBOLS = frozenset("hHKk")
ZONE_SYMBOLS = frozenset("xXvVzZO")

_COMPATIBLE = (MONTH_SYMBOLS, WEEKDAY_SYMBOLS, PERIOD_SYMBOLS, HOUR_SYMBOLS, ZONE_SYMBOLS)

_CANONICAL = {
    symbol: key
    for group, key in zip(_COMPATIBLE, "MEaHv")
    for symbol in group
}

# Fields that may switch width only within their numeric or text form
_NUMERIC_OR_TEXT = frozenset("MLeqQc")
_SUBSTITUTABLE_ZONES = frozenset("vVOzZ")
_FIXED_WIDTH = frozenset("HhKkmsS")


def canonical_key(symbol: str) -> str:
    return _CANONICAL.get(symbol, symbol)


def sort_tokens(tokens: list[Token]) -> list[Token]:
    """Order tokens by canonical key, keeping the original order of equals."""
    return sorted(tokens, key=lambda token: canonical_key(token[0]))


def _canonical_keys(tokens: list[Token]) -> list[str]:
    return sorted(canonical_key(symbol) for symbol, _ in tokens)


def _is_numeric(count: int) -> bool:
    return count <= 2


def _compatible(a: str, b: str) -> bool:
    return any(a in group and b in group for group in _COMPATIBLE)


def token_distance(candidate: Token, requested: Token) -> int:
    """Distance between one available-format token and one requested token."""
    symbol_a, count_a = candidate
    symbol_b, count_b = requested
    same_class = _is_numeric(count_a) == _is_numeric(count_b)

    if symbol_a == symbol_b:
        return abs(count_a - count_b) if same_class else 10
    if _compatible(symbol_a, symbol_b):
        return abs(count_a - count_b) + (5 if same_class else 10)
    return 15


def distance(candidate: list[Token], requested: list[Token]) -> int:
    return sum(token_distance(a, b) for a, b in zip(candidate, requested))


# ==============================================================================
# Hour preferences
# ==============================================================================

def preferred_hour_symbol(table: LocaleFormatTable, hour_cycle: HourCycle | None = None) -> str:
    if hour_cycle is not None:
        return hour_cycle.symbol
    return table.hour_preferred


def put_preferred_time_symbols(
    skeleton: str,
    table: LocaleFormatTable,
    hour_cycle: HourCycle | None = None,
) -> str:
    """Replace ``j``/``J``/``C`` and align hour symbols with the preference.

    ``j`` and ``J`` become the preferred hour symbol, ``C`` the first allowed
    symbol. A 24-hour preference drops day-period fields and rewrites 12-hour
    symbols; a 12-hour preference rewrites 24-hour symbols. An explicit hour
    cycle rewrites every hour symbol.
    """
    if hour_cycle is None and not any(ch in skeleton for ch in "jJC"):
        return skeleton

    preferred = preferred_hour_symbol(table, hour_cycle)
    if hour_cycle is None and table.hour_allowed:
        allowed = table.hour_allowed[0]
    else:
        allowed = preferred
    twenty_four = hour_cycle.is_24_hour if hour_cycle is not None else table.uses_24_hour

    result = []
    for ch in skeleton:
        if ch in "jJ":
            result.append(preferred)
        elif ch == "C":
            result.append(allowed)
        elif ch in PERIOD_SYMBOLS and twenty_four:
            continue
        elif ch in HOUR_SYMBOLS and (
            hour_cycle is not None or twenty_four != (ch in TWENTY_FOUR_HOUR_SYMBOLS)
        ):
            result.append(preferred)
        else:
            result.append(ch)
    return "".join(result)


def apply_hour_cycle(pattern: str, hour_cycle: HourCycle) -> str:
    """Rewrite the hour fields of a pattern to an explicit hour cycle.

    A 24-hour cycle also removes day-period fields together with the
    whitespace that separated them from the rest of the pattern.
    """
    hour_kind = SYMBOLS[hour_cycle.symbol][0]
    twenty_four = hour_cycle.is_24_hour
    instructions = list(compile(pattern))

    for index, instruction in enumerate(instructions):
        if not isinstance(instruction, Field):
            continue
        if instruction.symbol in HOUR_SYMBOLS:
            instructions[index] = Field(hour_kind, instruction.width)
        elif twenty_four and instruction.symbol in PERIOD_SYMBOLS:
            instructions[index] = Literal("")
            before = instructions[index - 1] if index > 0 else None
            after = instructions[index + 1] if index + 1 < len(instructions) else None
            if isinstance(before, Literal) and before.text:
                instructions[index - 1] = Literal(before.text.rstrip())
            elif isinstance(after, Literal):
                instructions[index + 1] = Literal(after.text.lstrip())

    return instructions_to_pattern(
        [i for i in instructions if not (isinstance(i, Literal) and not i.text)]
    )


# ==============================================================================
# Matching
# ==============================================================================

class CandidateCache:
    """Per-table cache of tokenized available format ids.

    Entries hold the table weakly and are dropped once the table is
    garbage collected, so tables evicted from the locale registry do not
    accumulate here.
    """

    def __init__(self) -> None:
        self._entries: dict[int, tuple[weakref.ref, list[tuple[str, list[Token]]]]] = {}
        self._lock = threading.RLock()

    def get(self, table: LocaleFormatTable) -> list[tuple[str, list[Token]]]:
        key = id(table)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[0]() is table:
                return entry[1]

        candidates = [
            (format_id, sort_tokens(tokenize_skeleton(format_id)))
            for format_id in table.available_formats
        ]
        logger.debug(
            "Tokenized %d available formats for %s", len(candidates), table.locale.tag
        )

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[0]() is table:
                return entry[1]
            ref = weakref.ref(table, lambda ref, key=key: self._discard(key, ref))
            self._entries[key] = (ref, candidates)
        return candidates

    def _discard(self, key: int, ref: weakref.ref) -> None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[0] is ref:
                del self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


_candidate_cache = CandidateCache()


def get_candidate_cache() -> CandidateCache:
    return _candidate_cache


def best_match(
    skeleton: str,
    table: LocaleFormatTable,
    hour_cycle: HourCycle | None = None,
) -> str | tuple[str, str]:
    """Find the available format id closest to a skeleton.

    Returns:
        A format id, or a ``(date_id, time_id)`` pair when only the date and
        time halves of the skeleton could be matched separately.

    Raises:
        UnresolvedFormat: If nothing matches.
        CompileError: If the skeleton holds an unknown symbol.
    """
    resolved = put_preferred_time_symbols(skeleton, table, hour_cycle)
    if resolved in table.available_formats:
        return resolved

    match = _closest(resolved, table)
    if match is not None:
        return match

    date_skeleton = "".join(ch for ch in resolved if ch in DATE_SYMBOLS)
    time_skeleton = "".join(ch for ch in resolved if ch in TIME_SYMBOLS)
    if date_skeleton and time_skeleton:
        date_id = _direct_or_closest(date_skeleton, table)
        time_id = _direct_or_closest(time_skeleton, table)
        if date_id is not None and time_id is not None:
            return date_id, time_id

    raise UnresolvedFormat(skeleton)


def _direct_or_closest(skeleton: str, table: LocaleFormatTable) -> str | None:
    if skeleton in table.available_formats:
        return skeleton
    return _closest(skeleton, table)


def _closest(skeleton: str, table: LocaleFormatTable) -> str | None:
    requested = sort_tokens(tokenize_skeleton(skeleton))
    keys = _canonical_keys(requested)

    best_id = None
    best_distance = None
    for format_id, tokens in _candidate_cache.get(table):
        if len(tokens) != len(requested) or _canonical_keys(tokens) != keys:
            continue
        score = distance(tokens, requested)
        if best_distance is None or score < best_distance:
            best_id, best_distance = format_id, score

    if best_id is not None:
        logger.debug("Skeleton %r matched %r (distance %d)", skeleton, best_id, best_distance)
    return best_id


# ==============================================================================
# Width adjustment
# ==============================================================================

def _requested_width(symbol: str, requested: list[Token]) -> int | None:
    for token_symbol, count in requested:
        if token_symbol == symbol:
            return count
    if symbol in MONTH_SYMBOLS or symbol in WEEKDAY_SYMBOLS:
        for token_symbol, count in requested:
            if canonical_key(token_symbol) == canonical_key(symbol):
                return count
    return None


def _adjust(field: Field, requested: list[Token]) -> Field:
    symbol = field.symbol

    if symbol in _FIXED_WIDTH:
        return field

    if symbol in _SUBSTITUTABLE_ZONES:
        for token_symbol, count in requested:
            if token_symbol in _SUBSTITUTABLE_ZONES and count in SYMBOLS[token_symbol][1]:
                return Field(SYMBOLS[token_symbol][0], count)
        return field

    width = _requested_width(symbol, requested)
    if width is None or width == field.width or width not in SYMBOLS[symbol][1]:
        return field

    if symbol in _NUMERIC_OR_TEXT and _is_numeric(width) != _is_numeric(field.width):
        return field
    return Field(field.kind, width)


def adjust_field_lengths(pattern: str, requested: list[Token]) -> str:
    """Resize the fields of a matched pattern to the requested widths.

    Month, quarter and local weekday fields only resize within their
    numeric or text form. Hour, minute and second fields keep their width.
    Zone fields take the requested zone symbol and width.
    """
    instructions = [
        _adjust(i, requested) if isinstance(i, Field) else i
        for i in compile(pattern)
    ]
    return instructions_to_pattern(instructions)
