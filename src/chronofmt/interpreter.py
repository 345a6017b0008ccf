"""Pattern interpreter.

Walks a compiled pattern over a value: literals are copied, fields go to
their renderer, the decimal separator takes the locale's symbol. The
finished string is transliterated when a number system other than ``latn``
is requested.
"""

from __future__ import annotations

from chronofmt.compiler import CompiledPattern, DecimalSeparator, Field, Literal, compile
from chronofmt.fields import RenderContext, render
from chronofmt.protocols import Transliterator
from chronofmt.value import TemporalValue


def interpret(
    pattern: CompiledPattern,
    value: TemporalValue,
    context: RenderContext,
    number_system: str | None = None,
    transliterator: Transliterator | None = None,
) -> str:
    """Render a compiled pattern.

    Raises:
        RenderError: If a field cannot be rendered for the value.
        UnknownNumberSystemError: If the number system is not known.
    """
    parts = []
    for instruction in pattern:
        if isinstance(instruction, Field):
            parts.append(render(instruction.kind, instruction.width, value, context))
        elif isinstance(instruction, Literal):
            parts.append(instruction.text)
        elif isinstance(instruction, DecimalSeparator):
            parts.append(context.table.decimal)
    text = "".join(parts)

    system = number_system or context.table.number_system
    if system != "latn" and transliterator is not None:
        text = transliterator.transliterate(text, system)
    return text


def format_pattern(
    pattern: str,
    value: TemporalValue,
    context: RenderContext,
    number_system: str | None = None,
    transliterator: Transliterator | None = None,
) -> str:
    """Compile (through the cache) and render a pattern string."""
    return interpret(compile(pattern), value, context, number_system, transliterator)
