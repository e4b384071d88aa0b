"""Data types for the ptdiff pipeline.

Defines the enums, the structural diff nodes (input from the document
differ, and the shape of the output tree) and string segments. No diffing
logic lives here; ``to_dict`` methods only render the JSON shape consumed by
the renderer.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if sys.version_info >= (3, 11):
    from enum import StrEnum
else:
    from enum import Enum

    class StrEnum(str, Enum):
        """Backport of StrEnum for Python 3.10."""

        pass


if TYPE_CHECKING:
    from .models import Block
    from .symbols import SymbolTable

# --- Enums ---


class DiffAction(StrEnum):
    """Action of a structural diff node."""

    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


class SegmentAction(StrEnum):
    """Action of one string segment."""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


class OverflowPolicy(StrEnum):
    """What to do when a block needs more markers than a category has."""

    TRUNCATE = "truncate"
    ERROR = "error"


class CleanupMode(StrEnum):
    """Post-processing applied to the raw diff-match-patch edit script."""

    EFFICIENCY = "efficiency"
    SEMANTIC = "semantic"
    NONE = "none"


# --- Segments ---


@dataclass
class StringSegment:
    """A typed run of text inside a string diff.

    ``annotation`` is provenance metadata (author, timestamp, ...) copied
    from the structural diff the segment was derived from.
    """

    action: SegmentAction
    text: str
    annotation: dict[str, Any] | None = None
    type: str = "stringSegment"

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.type,
            "action": self.action.value,
            "text": self.text,
        }
        if self.annotation is not None:
            result["annotation"] = self.annotation
        return result


# --- Structural diff nodes ---


@dataclass
class StringDiff:
    """Diff of a string value."""

    action: DiffAction
    from_value: str | None = None
    to_value: str | None = None
    is_changed: bool = False
    segments: list[StringSegment] = field(default_factory=list)
    annotation: dict[str, Any] | None = None
    type: str = "string"

    def to_dict(self) -> dict[str, Any]:
        result = _base_dict(self)
        result["segments"] = [segment.to_dict() for segment in self.segments]
        return result


@dataclass
class ObjectDiff:
    """Diff of an object value; ``fields`` holds one diff per changed field."""

    action: DiffAction
    from_value: Any = None
    to_value: Any = None
    is_changed: bool = False
    fields: dict[str, Diff] = field(default_factory=dict)
    annotation: dict[str, Any] | None = None
    type: str = "object"

    def to_dict(self) -> dict[str, Any]:
        result = _base_dict(self)
        result["fields"] = {name: diff.to_dict() for name, diff in self.fields.items()}
        return result


@dataclass
class ItemDiff:
    """One entry of an array diff, with its position on each side."""

    diff: Diff
    annotation: dict[str, Any] | None = None
    from_index: int | None = None
    to_index: int | None = None
    has_moved: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "diff": self.diff.to_dict(),
            "annotation": self.annotation,
            "fromIndex": self.from_index,
            "toIndex": self.to_index,
            "hasMoved": self.has_moved,
        }


@dataclass
class ArrayDiff:
    """Diff of an array value."""

    action: DiffAction
    from_value: list[Any] | None = None
    to_value: list[Any] | None = None
    is_changed: bool = False
    items: list[ItemDiff] = field(default_factory=list)
    annotation: dict[str, Any] | None = None
    type: str = "array"

    def to_dict(self) -> dict[str, Any]:
        result = _base_dict(self)
        result["items"] = [item.to_dict() for item in self.items]
        return result


Diff = StringDiff | ObjectDiff | ArrayDiff


@dataclass
class PortableTextDiff(ObjectDiff):
    """Pseudo block diff whose only child is a span holding the text diff.

    Attributes:
        display_value: the block the diff is displayed against (``to``, or
            ``from`` when the block was removed)
        origin: the structural diff this one was built from
        symbols: the marker assignments used to serialize both sides
    """

    display_value: Block | None = None
    origin: ObjectDiff | None = None
    symbols: SymbolTable | None = None

    @property
    def text_diff(self) -> StringDiff:
        """The string diff of the pseudo span."""
        children = self.fields["children"]
        assert isinstance(children, ArrayDiff)
        span_diff = children.items[0].diff
        assert isinstance(span_diff, ObjectDiff)
        text = span_diff.fields["text"]
        assert isinstance(text, StringDiff)
        return text

    @property
    def segments(self) -> list[StringSegment]:
        """Segments of the pseudo span's text diff."""
        return self.text_diff.segments

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["displayValue"] = _dump(self.display_value)
        return result


def _base_dict(diff: StringDiff | ObjectDiff | ArrayDiff) -> dict[str, Any]:
    result: dict[str, Any] = {
        "type": diff.type,
        "action": diff.action.value,
        "isChanged": diff.is_changed,
        "fromValue": _dump(diff.from_value),
        "toValue": _dump(diff.to_value),
    }
    if diff.annotation is not None:
        result["annotation"] = diff.annotation
    return result


def _dump(value: Any) -> Any:
    """Convert models and nested containers to plain JSON values."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True)
    if isinstance(value, list):
        return [_dump(v) for v in value]
    if isinstance(value, dict):
        return {k: _dump(v) for k, v in value.items()}
    return value
