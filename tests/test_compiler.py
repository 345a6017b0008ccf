"""Tests for the pattern compiler.

Tests cover:
- Field and literal scanning
- Quoting rules
- Compile errors
- Decimal separator insertion
- Skeleton tokenizing
- Interval pattern splitting
- Pattern cache
"""

from __future__ import annotations

import threading

import pytest

from chronofmt.compiler import (
    CompiledPattern,
    DecimalSeparator,
    Field,
    FieldKind,
    Literal,
    PatternCache,
    compile,
    get_pattern_cache,
    parse,
    quote_literal,
    split_interval,
    tokenize_skeleton,
)
from chronofmt.exceptions import CompileError, IntervalFormatError


# =============================================================================
# Scanning
# =============================================================================


class TestParse:
    """Test pattern compilation."""

    def test_fields_and_literals(self):
        """Test a pattern of fields separated by punctuation."""
        pattern = parse("EEEE, MMMM d, y")

        assert pattern.instructions == (
            Field(FieldKind.WEEKDAY, 4),
            Literal(", "),
            Field(FieldKind.MONTH, 4),
            Literal(" "),
            Field(FieldKind.DAY_OF_MONTH, 1),
            Literal(", "),
            Field(FieldKind.YEAR, 1),
        )

    def test_symbols(self):
        """Test symbol and width listing."""
        assert parse("EEEE, MMMM d, y").symbols() == [("E", 4), ("M", 4), ("d", 1), ("y", 1)]

    def test_quoted_literal(self):
        """Test quoted text containing an escaped quote."""
        pattern = parse("h 'o''clock' a")

        assert pattern.instructions == (
            Field(FieldKind.HOUR_1_12, 1),
            Literal(" o'clock "),
            Field(FieldKind.PERIOD_AM_PM, 1),
        )

    def test_doubled_quote_outside_quotes(self):
        """Test that two quotes in a row are one literal quote."""
        assert parse("''").instructions == (Literal("'"),)

    def test_quoted_letters_are_not_fields(self):
        """Test that letters inside quotes stay literal."""
        pattern = parse("yyyy-MM-dd'T'HH:mm")

        assert Literal("T") in pattern.instructions
        assert [f.symbol for f in pattern.fields] == ["y", "M", "d", "H", "m"]

    def test_non_ascii_letters_are_literal(self):
        """Test that only ASCII letters form fields."""
        pattern = parse("d. MMMM y 'à' H")

        assert Literal(" à ") in pattern.instructions

    def test_has_symbol(self):
        """Test symbol lookup with a minimum width."""
        pattern = parse("MMM d")

        assert pattern.has_symbol("M")
        assert pattern.has_symbol("M", 3)
        assert not pattern.has_symbol("M", 4)
        assert not pattern.has_symbol("y")

    def test_iteration_and_length(self):
        """Test that a compiled pattern iterates over its instructions."""
        pattern = parse("HH:mm")

        assert len(pattern) == 3
        assert list(pattern) == list(pattern.instructions)


class TestCompileErrors:
    """Test rejected patterns."""

    def test_empty_pattern(self):
        """Test that an empty pattern is rejected."""
        with pytest.raises(CompileError):
            parse("")

    def test_unterminated_quote(self):
        """Test that an unclosed quote is rejected."""
        with pytest.raises(CompileError, match="Unterminated"):
            parse("h 'o clock")

    def test_unknown_symbol(self):
        """Test that an unknown letter is rejected with the symbol attached."""
        with pytest.raises(CompileError) as exc_info:
            parse("yyyy-RR")

        assert exc_info.value.symbol == "R"
        assert exc_info.value.pattern == "yyyy-RR"

    @pytest.mark.parametrize("pattern", ["ddd", "hhh", "mmm", "vv", "OO", "EEEEEEE"])
    def test_illegal_width(self, pattern):
        """Test that widths outside a symbol's range are rejected."""
        with pytest.raises(CompileError, match="does not support width"):
            parse(pattern)

    def test_compile_error_is_format_error(self):
        """Test the exception hierarchy."""
        from chronofmt.exceptions import FormatError

        with pytest.raises(FormatError):
            parse("")


class TestDecimalSeparator:
    """Test decimal separator insertion between seconds and fractions."""

    def test_inserted_between_adjacent_fields(self):
        """Test that s directly followed by S gets a separator."""
        pattern = parse("ssSSS")

        assert pattern.instructions == (
            Field(FieldKind.SECOND, 2),
            DecimalSeparator(),
            Field(FieldKind.FRACTIONAL_SECOND, 3),
        )

    def test_not_inserted_after_literal(self):
        """Test that an explicit literal separator is kept as is."""
        pattern = parse("ss.SSS")

        assert DecimalSeparator() not in pattern.instructions
        assert Literal(".") in pattern.instructions


class TestToPattern:
    """Test serializing instructions back to pattern text."""

    def test_round_trip_keeps_instructions(self):
        """Test that a serialized pattern compiles to the same instructions."""
        original = parse("h 'o''clock' a, EEEE")

        assert parse(original.to_pattern()).instructions == original.instructions

    def test_quote_literal(self):
        """Test quoting rules for literal text."""
        assert quote_literal(", ") == ", "
        assert quote_literal("'") == "''"
        assert quote_literal(" at ") == "' at '"
        assert quote_literal("") == ""


# =============================================================================
# Skeletons and interval patterns
# =============================================================================


class TestTokenizeSkeleton:
    """Test skeleton tokenizing."""

    def test_tokens(self):
        """Test splitting a skeleton into symbol runs."""
        assert tokenize_skeleton("yMMMd") == [("y", 1), ("M", 3), ("d", 1)]

    def test_skeleton_only_symbols(self):
        """Test that j, J and C are accepted."""
        assert tokenize_skeleton("jmm") == [("j", 1), ("m", 2)]
        assert tokenize_skeleton("Cm") == [("C", 1), ("m", 1)]

    @pytest.mark.parametrize("skeleton", ["", "y-M", "yR"])
    def test_invalid(self, skeleton):
        """Test that empty skeletons, literals and unknown symbols fail."""
        with pytest.raises(CompileError):
            tokenize_skeleton(skeleton)


class TestSplitInterval:
    """Test splitting interval patterns at the first repeated field."""

    @pytest.mark.parametrize(
        "pattern,expected",
        [
            ("MMM d – d, y", ("MMM d – ", "d, y")),
            ("h:mm a – h:mm a", ("h:mm a – ", "h:mm a")),
            ("d–d MMM y", ("d–", "d MMM y")),
            ("E, MMM d – E, MMM d, y", ("E, MMM d – ", "E, MMM d, y")),
            ("'d' MMM – MMM", ("'d' MMM – ", "MMM")),
        ],
    )
    def test_split(self, pattern, expected):
        """Test split points."""
        assert split_interval(pattern) == expected

    def test_no_repeated_field(self):
        """Test that a pattern without a repeated field is rejected."""
        with pytest.raises(IntervalFormatError):
            split_interval("MMM d, y")


# =============================================================================
# Cache
# =============================================================================


class TestPatternCache:
    """Test the compiled pattern cache."""

    def test_hit_returns_same_object(self):
        """Test that a second lookup reuses the compiled pattern."""
        cache = PatternCache()
        first = cache.get_or_compile("MMM d")
        second = cache.get_or_compile("MMM d")

        assert first is second
        assert cache.hits == 1
        assert cache.misses == 1

    def test_eviction(self):
        """Test that the least recently used pattern is evicted."""
        cache = PatternCache(max_size=2)
        cache.get_or_compile("y")
        cache.get_or_compile("M")
        cache.get_or_compile("y")
        cache.get_or_compile("d")

        assert "y" in cache
        assert "M" not in cache
        assert len(cache) == 2

    def test_resize(self):
        """Test shrinking the cache."""
        cache = PatternCache()
        for pattern in ("y", "M", "d"):
            cache.get_or_compile(pattern)

        cache.resize(1)

        assert len(cache) == 1
        assert "d" in cache

    def test_errors_are_not_cached(self):
        """Test that a failed compile leaves nothing behind."""
        cache = PatternCache()
        with pytest.raises(CompileError):
            cache.get_or_compile("ddd")

        assert "ddd" not in cache

    def test_shared_compile(self):
        """Test the module-level compile function uses the shared cache."""
        pattern = compile("HH:mm")

        assert isinstance(pattern, CompiledPattern)
        assert "HH:mm" in get_pattern_cache()
        assert compile("HH:mm") is pattern

    @pytest.mark.parametrize("max_size", [3, 512])
    def test_thread_safety(self, max_size):
        """Test concurrent lookups of overlapping patterns."""
        patterns = ["y", "MMM d", "HH:mm", "h:mm a", "EEEE, MMMM d, y", "d/M/yy", "'at' H"]
        expected = {pattern: parse(pattern).instructions for pattern in patterns}
        cache = PatternCache(max_size=max_size)
        results = []
        errors = []

        def worker(offset: int):
            try:
                for i in range(200):
                    pattern = patterns[(offset + i) % len(patterns)]
                    results.append((pattern, cache.get_or_compile(pattern).instructions))
                    results.append((pattern, compile(pattern).instructions))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(offset,)) for offset in range(8)]

        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(errors) == 0
        assert len(results) == 8 * 200 * 2
        for pattern, instructions in results:
            assert instructions == expected[pattern]
        assert len(cache) <= max_size
        assert cache.hits + cache.misses == 8 * 200
