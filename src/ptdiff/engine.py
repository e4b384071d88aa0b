"""Diff assembler: structural block diff -> Portable Text diff tree.

Takes the structural diff of one block pair, serializes both sides with a
shared symbol table, diffs the two strings and packages the segments as a
pseudo block diff with a single span child, so renderers walk it exactly
like any other structural diff.

Usage:
    engine = PortableTextDiffEngine()
    pt_diff = engine.diff(block_diff, ["em", "strong"])
    for segment in pt_diff.segments:
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .exceptions import NoDisplayableValueError
from .helpers import get_decorator_names
from .models import Block, Span, as_block
from .schema import SchemaType
from .segments import build_segments
from .serializer import block_to_symbolized_text
from .settings import get_settings
from .symbols import SymbolTable
from .text_diff import TextDiffer
from .types import (
    ArrayDiff,
    DiffAction,
    ItemDiff,
    ObjectDiff,
    OverflowPolicy,
    PortableTextDiff,
    StringDiff,
    StringSegment,
)

logger = logging.getLogger(__name__)

PSEUDO_SPAN_KEY = "pseudoSpanKey"


def get_display_value(diff: ObjectDiff) -> Block | None:
    """The block a diff is displayed against.

    ``from_value`` for removed blocks, ``to_value`` otherwise; falls back to
    whichever side is present.
    """
    from_block = as_block(diff.from_value)
    to_block = as_block(diff.to_value)
    if diff.action == DiffAction.REMOVED:
        return from_block or to_block
    return to_block or from_block


def _pseudo_value(display_value: Block, text: str) -> Block:
    span = Span(key=PSEUDO_SPAN_KEY, text=text, marks=[])
    return display_value.model_copy(update={"children": [span]})


class PortableTextDiffEngine:
    """Builds Portable Text diffs for single blocks.

    The engine holds a ``TextDiffer`` and an overflow policy, nothing per
    call, so one instance can serve any number of blocks.
    """

    def __init__(
        self,
        differ: TextDiffer | None = None,
        overflow: OverflowPolicy | None = None,
    ) -> None:
        self.differ = differ or TextDiffer()
        self.overflow = overflow or get_settings().overflow_policy

    def diff(
        self,
        diff: ObjectDiff,
        decorators: SchemaType | Iterable[str],
    ) -> PortableTextDiff:
        """Build the Portable Text diff of one block pair.

        Args:
            diff: structural diff of the block; ``from_value``/``to_value``
                are ``Block`` models (or raw block dicts) or ``None``
            decorators: decorator names, or the block schema type to read
                them from

        Raises:
            NoDisplayableValueError: both sides of ``diff`` are absent
            SymbolOverflowError: under ``OverflowPolicy.ERROR`` only
        """
        display_value = get_display_value(diff)
        if display_value is None:
            raise NoDisplayableValueError()

        if isinstance(decorators, SchemaType):
            decorator_names = get_decorator_names(decorators)
        else:
            decorator_names = list(decorators)

        table = SymbolTable.for_block(display_value, decorator_names, self.overflow)
        from_text = block_to_symbolized_text(as_block(diff.from_value), table)
        to_text = block_to_symbolized_text(as_block(diff.to_value), table)
        logger.debug(
            "Symbolized block %s: %d -> %d characters",
            display_value.key,
            len(from_text),
            len(to_text),
        )

        segments = build_segments(from_text, to_text, table.markers, self.differ)
        # Fallback provenance when no span-level origin can be attributed
        if diff.action != DiffAction.UNCHANGED and diff.annotation:
            for segment in segments:
                segment.annotation = diff.annotation

        return self._assemble(diff, display_value, table, from_text, to_text, segments)

    def _assemble(
        self,
        origin: ObjectDiff,
        display_value: Block,
        table: SymbolTable,
        from_text: str,
        to_text: str,
        segments: list[StringSegment],
    ) -> PortableTextDiff:
        from_pseudo = _pseudo_value(display_value, from_text)
        to_pseudo = _pseudo_value(display_value, to_text)
        is_changed = from_text != to_text
        action = DiffAction.CHANGED if is_changed else DiffAction.UNCHANGED

        text_diff = StringDiff(
            action=action,
            from_value=from_text,
            to_value=to_text,
            is_changed=is_changed,
            segments=segments,
        )
        span_diff = ObjectDiff(
            action=action,
            from_value=from_pseudo.children[0],
            to_value=to_pseudo.children[0],
            is_changed=is_changed,
            fields={"text": text_diff},
        )
        children_diff = ArrayDiff(
            action=action,
            from_value=from_pseudo.children,
            to_value=to_pseudo.children,
            is_changed=is_changed,
            items=[
                ItemDiff(
                    diff=span_diff,
                    annotation=None,
                    from_index=0,
                    to_index=0,
                    has_moved=False,
                )
            ],
        )
        return PortableTextDiff(
            action=action,
            from_value=from_pseudo,
            to_value=to_pseudo,
            is_changed=is_changed,
            fields={"children": children_diff},
            display_value=display_value,
            origin=origin,
            symbols=table,
        )


def create_portable_text_diff(
    diff: ObjectDiff,
    decorators: SchemaType | Iterable[str],
    engine: PortableTextDiffEngine | None = None,
) -> PortableTextDiff:
    """Build the Portable Text diff of one block pair with a default engine."""
    return (engine or PortableTextDiffEngine()).diff(diff, decorators)
