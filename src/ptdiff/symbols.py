"""Symbol table: reserved marker characters for one diff call.

Decorations and annotations get a (start, end) marker pair, embedded
objects a single marker. The three categories draw from disjoint ranges of
the Private Use Area, 16 entries each.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .exceptions import SymbolOverflowError
from .types import OverflowPolicy

if TYPE_CHECKING:
    from .models import Block

logger = logging.getLogger(__name__)

SLOT_LIMIT = 16

MarkerPair = tuple[str, str]

DECORATOR_SYMBOLS: tuple[MarkerPair, ...] = (
    ("\uF000", "\uF001"),
    ("\uF002", "\uF003"),
    ("\uF004", "\uF005"),
    ("\uF006", "\uF007"),
    ("\uF008", "\uF009"),
    ("\uF00A", "\uF00B"),
    ("\uF00C", "\uF00D"),
    ("\uF00F", "\uF010"),
    ("\uF011", "\uF012"),
    ("\uF013", "\uF014"),
    ("\uF015", "\uF016"),
    ("\uF017", "\uF018"),
    ("\uF019", "\uF01A"),
    ("\uF01B", "\uF01C"),
    ("\uF01E", "\uF01F"),
    ("\uF020", "\uF021"),
)

ANNOTATION_SYMBOLS: tuple[MarkerPair, ...] = (
    ("\uF050", "\uF051"),
    ("\uF052", "\uF053"),
    ("\uF054", "\uF055"),
    ("\uF056", "\uF057"),
    ("\uF058", "\uF059"),
    ("\uF05A", "\uF05B"),
    ("\uF05C", "\uF05D"),
    ("\uF05F", "\uF060"),
    ("\uF061", "\uF062"),
    ("\uF063", "\uF064"),
    ("\uF065", "\uF066"),
    ("\uF067", "\uF068"),
    ("\uF069", "\uF06A"),
    ("\uF06B", "\uF06C"),
    ("\uF06E", "\uF06F"),
    ("\uF070", "\uF071"),
)

EMBEDDED_SYMBOLS: tuple[str, ...] = tuple(chr(cp) for cp in range(0xF090, 0xF0A0))

# Embedded objects with no marker of their own (past SLOT_LIMIT, or absent
# from the displayed block) still occupy one position in the string.
# Private use, right after the embedded range.
UNMAPPED_OBJECT_MARKER = "\uF0A0"

ALL_RESERVED = frozenset(
    [c for pair in DECORATOR_SYMBOLS for c in pair]
    + [c for pair in ANNOTATION_SYMBOLS for c in pair]
    + list(EMBEDDED_SYMBOLS)
    + [UNMAPPED_OBJECT_MARKER]
)


@dataclass(frozen=True)
class SymbolTable:
    """Marker assignments for one diff call.

    Attributes:
        decorators: decorator name -> (start, end)
        annotations: markDef key -> (start, end)
        embedded: embedded object key -> marker
    """

    decorators: dict[str, MarkerPair] = field(default_factory=dict)
    annotations: dict[str, MarkerPair] = field(default_factory=dict)
    embedded: dict[str, str] = field(default_factory=dict)

    @property
    def markers(self) -> frozenset[str]:
        """Every character this table may place in a symbolized string."""
        chars: set[str] = {UNMAPPED_OBJECT_MARKER}
        for start, end in self.decorators.values():
            chars.update((start, end))
        for start, end in self.annotations.values():
            chars.update((start, end))
        chars.update(self.embedded.values())
        return frozenset(chars)

    def embedded_marker(self, key: str) -> str:
        """Marker for an embedded object, or UNMAPPED_OBJECT_MARKER."""
        return self.embedded.get(key, UNMAPPED_OBJECT_MARKER)

    @classmethod
    def for_block(
        cls,
        block: Block,
        decorators: Iterable[str],
        overflow: OverflowPolicy = OverflowPolicy.TRUNCATE,
    ) -> SymbolTable:
        """Build the table from a displayed block's inventory."""
        return allocate(
            decorators,
            [mark_def.key for mark_def in block.mark_defs],
            [obj.key for obj in block.embedded_objects()],
            overflow=overflow,
        )


def _check_overflow(
    category: str, names: list[str], overflow: OverflowPolicy
) -> list[str]:
    if len(names) <= SLOT_LIMIT:
        return names
    if overflow == OverflowPolicy.ERROR:
        raise SymbolOverflowError(category, len(names), SLOT_LIMIT)
    logger.warning(
        "%d %s entries exceed %d markers; leaving %s unmarked",
        len(names),
        category,
        SLOT_LIMIT,
        ", ".join(names[SLOT_LIMIT:]),
    )
    return names[:SLOT_LIMIT]


def _unique(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def allocate(
    decoration_names: Iterable[str],
    annotation_keys: Iterable[str],
    embedded_keys: Iterable[str],
    *,
    overflow: OverflowPolicy = OverflowPolicy.TRUNCATE,
) -> SymbolTable:
    """Assign markers to decorations, annotations and embedded objects.

    Decoration names and embedded keys are sorted so that the same
    vocabulary maps to the same markers on every call. Annotation keys keep
    their given (document) order.

    Raises:
        SymbolOverflowError: a category has more than SLOT_LIMIT entries and
            ``overflow`` is ``OverflowPolicy.ERROR``.
    """
    decorators = _check_overflow(
        "decoration", sorted(_unique(decoration_names)), overflow
    )
    annotations = _check_overflow("annotation", _unique(annotation_keys), overflow)

    embedded = _check_overflow(
        "embedded object", sorted(_unique(embedded_keys)), overflow
    )

    return SymbolTable(
        decorators=dict(zip(decorators, DECORATOR_SYMBOLS)),
        annotations=dict(zip(annotations, ANNOTATION_SYMBOLS)),
        embedded=dict(zip(embedded, EMBEDDED_SYMBOLS)),
    )


def strip_markers(text: str) -> str:
    """Remove every reserved marker character from a symbolized string."""
    return "".join(c for c in text if c not in ALL_RESERVED)
