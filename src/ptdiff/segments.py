"""Segment reconciler: edit script -> typed string segments.

Converts a diff-match-patch edit script into ``StringSegment`` objects,
then isolates every marker character (and every newline) in a segment of
its own, so a renderer can paint a mark or inline object boundary
independently of the surrounding text.
"""

from __future__ import annotations

import logging
from collections.abc import Collection

from .text_diff import DiffOp, EditScript, TextDiffer
from .types import SegmentAction, StringSegment

logger = logging.getLogger(__name__)

# Newlines are structural boundaries too
NEWLINE = "\n"


def script_to_segments(
    script: EditScript, from_text: str, to_text: str
) -> list[StringSegment]:
    """Map each edit script entry to one provisional segment.

    Removed text is sliced from ``from_text`` at the from-cursor, added text
    from ``to_text`` at the to-cursor.
    """
    segments: list[StringSegment] = []
    from_idx = 0
    to_idx = 0

    for op, text in script:
        length = len(text)
        if op == DiffOp.EQUAL:
            segments.append(StringSegment(action=SegmentAction.UNCHANGED, text=text))
            from_idx += length
            to_idx += length
        elif op == DiffOp.DELETE:
            segments.append(
                StringSegment(
                    action=SegmentAction.REMOVED,
                    text=from_text[from_idx : from_idx + length],
                )
            )
            from_idx += length
        elif op == DiffOp.INSERT:
            segments.append(
                StringSegment(
                    action=SegmentAction.ADDED,
                    text=to_text[to_idx : to_idx + length],
                )
            )
            to_idx += length

    return segments


def isolate_markers(
    segment: StringSegment, markers: Collection[str]
) -> list[StringSegment]:
    """Split a segment so every marker or newline is its own segment.

    Pieces keep the action and annotation of the segment they came from;
    empty pieces are dropped.
    """
    pieces: list[StringSegment] = []
    buffer: list[str] = []

    def flush() -> None:
        if buffer:
            pieces.append(_piece(segment, "".join(buffer)))
            buffer.clear()

    for char in segment.text:
        if char == NEWLINE or char in markers:
            flush()
            pieces.append(_piece(segment, char))
        else:
            buffer.append(char)
    flush()
    return pieces


def _piece(segment: StringSegment, text: str) -> StringSegment:
    return StringSegment(
        action=segment.action, text=text, annotation=segment.annotation
    )


def reconcile(
    script: EditScript,
    from_text: str,
    to_text: str,
    markers: Collection[str],
) -> list[StringSegment]:
    """Turn an edit script into segments with every marker isolated."""
    segments: list[StringSegment] = []
    for segment in script_to_segments(script, from_text, to_text):
        segments.extend(isolate_markers(segment, markers))
    return segments


def build_segments(
    from_text: str,
    to_text: str,
    markers: Collection[str],
    differ: TextDiffer | None = None,
) -> list[StringSegment]:
    """Diff two symbolized strings and reconcile the result."""
    differ = differ or TextDiffer()
    script = differ.diff(from_text, to_text)
    segments = reconcile(script, from_text, to_text, markers)
    logger.debug(
        "Built %d segments from %d edit script entries", len(segments), len(script)
    )
    return segments
