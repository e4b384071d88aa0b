"""Block serializer: one block version -> one symbolized string.

Spans contribute their text wrapped in the marker pairs of their marks,
embedded objects contribute a single marker. The result can be diffed as a
plain string while every mark, annotation and inline object boundary stays
visible as a reserved character.

Example (``strong`` -> ``("\\uF000", "\\uF001")``)::

    [Span("Hello "), Span("world", marks=["strong"])]
    -> "Hello \\uF000world\\uF001"
"""

from __future__ import annotations

from .models import Block, EmbeddedObject, Span
from .symbols import SymbolTable


def span_to_symbolized_text(span: Span, table: SymbolTable) -> str:
    """Wrap a span's text in the markers of its marks.

    Marks are applied in list order, each one wrapping the result of the
    previous, so the first listed mark ends up innermost. Decorators take
    precedence over annotations with the same name; marks the table does not
    know are left out.
    """
    text = span.text
    for mark in span.marks:
        pair = table.decorators.get(mark) or table.annotations.get(mark)
        if pair:
            text = f"{pair[0]}{text}{pair[1]}"
    return text


def block_to_symbolized_text(block: Block | None, table: SymbolTable) -> str:
    """Serialize a block; ``None`` serializes to the empty string."""
    if block is None:
        return ""

    parts: list[str] = []
    for child in block.children:
        if isinstance(child, Span):
            parts.append(span_to_symbolized_text(child, table))
        elif isinstance(child, EmbeddedObject):
            parts.append(table.embedded_marker(child.key))
    return "".join(parts)
