"""Lookup helpers used alongside a Portable Text diff.

Schema queries (which types are blocks, which marks are decorators) and
structural diff queries (which child diff belongs to a span, whether a span
diff added or removed a decorator) that renderers need when they paint a
``PortableTextDiff``.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import (
    UNKNOWN_TYPE_NAME,
    Block,
    Child,
    EmbeddedObject,
    Span,
    as_block,
)
from .schema import Decorator, SchemaType
from .types import ArrayDiff, DiffAction, ObjectDiff, StringDiff

HEADER_STYLES = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})


@dataclass
class ChildMapEntry:
    """A block child together with its diff and schema type."""

    child: Child
    diff: ObjectDiff | None
    schema_type: SchemaType | None


# --- Schema helpers ---


def is_pt_schema_type(schema_type: SchemaType) -> bool:
    """Check if a schema type is the Portable Text block type."""
    return schema_type.json_type == "object" and schema_type.name == "block"


def has_pt_member_type(schema_type: SchemaType) -> bool:
    """Check if an array type allows Portable Text blocks."""
    return any(is_pt_schema_type(member) for member in schema_type.of)


def get_child_schema_type(
    block_type: SchemaType, child_type: str
) -> SchemaType | None:
    """Find the member type of the block's ``children`` array by name."""
    children_field = block_type.field("children")
    if children_field is None or children_field.type.json_type != "array":
        return None
    return next(
        (member for member in children_field.type.of if member.name == child_type),
        None,
    )


def get_decorators(span_type: SchemaType) -> list[Decorator]:
    """Return the span type's decorators sorted by value."""
    return sorted(span_type.decorators or [], key=lambda dec: dec.value)


def get_decorator_names(block_type: SchemaType) -> list[str]:
    """Return the decorator names the block's span type allows."""
    span_type = get_child_schema_type(block_type, "span")
    if span_type is None:
        return []
    return [dec.value for dec in get_decorators(span_type)]


def is_decorator(name: str, span_type: SchemaType) -> bool:
    """Check if a mark name is one of the span type's decorators."""
    return any(dec.value == name for dec in get_decorators(span_type))


# --- Block helpers ---


def is_header(block: Block) -> bool:
    """Check if a block is styled as a heading."""
    return bool(block.style) and block.style in HEADER_STYLES


def get_inline_objects(block: Block) -> list[EmbeddedObject]:
    """Return the block's non-span children sorted by key."""
    return sorted(block.embedded_objects(), key=lambda obj: obj.key)


# --- Structural diff helpers ---


def _children_diff(diff: ObjectDiff) -> ArrayDiff | None:
    children = diff.fields.get("children")
    return children if isinstance(children, ArrayDiff) else None


def _child_key(value: object) -> str | None:
    if isinstance(value, (Span, EmbeddedObject)):
        return value.key
    if isinstance(value, dict):
        key = value.get("_key")
        return key if isinstance(key, str) else None
    return None


def find_child_diff(diff: ObjectDiff, child: Child) -> ObjectDiff | None:
    """Find the changed item diff of a block child.

    Items are matched by key against either side of the item diff.
    """
    children = _children_diff(diff)
    if children is None or child.key is None:
        return None
    for item in children.items:
        item_diff = item.diff
        if not isinstance(item_diff, ObjectDiff) or not item_diff.is_changed:
            continue
        if child.key in (_child_key(item_diff.to_value), _child_key(item_diff.from_value)):
            return item_diff
    return None


def create_child_map(
    origin: ObjectDiff, schema_type: SchemaType
) -> dict[str, ChildMapEntry]:
    """Map each child key of the displayed block to its diff and schema type.

    Children whose type the schema does not declare get a ``None`` schema
    type; the renderer shows them with the ``UNKNOWN_TYPE_NAME`` fallback.
    """
    block = as_block(origin.to_value) or as_block(origin.from_value)
    if block is None:
        return {}

    child_map: dict[str, ChildMapEntry] = {}
    for index, child in enumerate(block.children):
        child_type = child.type if child.type != UNKNOWN_TYPE_NAME else None
        child_map[child.key or f"{index}"] = ChildMapEntry(
            child=child,
            diff=find_child_diff(origin, child),
            schema_type=(
                get_child_schema_type(schema_type, child_type) if child_type else None
            ),
        )
    return child_map


def _marks_diff(child_diff: ObjectDiff) -> ArrayDiff | None:
    marks = child_diff.fields.get("marks")
    return marks if isinstance(marks, ArrayDiff) else None


def is_add_mark(child_diff: ObjectDiff, child_type: SchemaType | None) -> bool:
    """Check if a span diff added at least one decorator."""
    if child_type is None or child_type.json_type != "object":
        return False
    marks = _marks_diff(child_diff)
    if marks is None or not marks.is_changed or marks.action != DiffAction.ADDED:
        return False
    return any(
        isinstance(mark, str) and is_decorator(mark, child_type)
        for mark in marks.to_value or []
    )


def is_remove_mark(child_diff: ObjectDiff, child_type: SchemaType | None) -> bool:
    """Check if a span diff removed at least one decorator."""
    if child_type is None:
        return False
    marks = _marks_diff(child_diff)
    if marks is None or not marks.is_changed or marks.action != DiffAction.REMOVED:
        return False
    return any(
        isinstance(mark, str) and is_decorator(mark, child_type)
        for mark in marks.from_value or []
    )


def _span_diff_matches(item_diff: ObjectDiff, mark: str, text: str) -> bool:
    marks = _marks_diff(item_diff)
    text_diff = item_diff.fields.get("text")
    if marks is None or not isinstance(text_diff, StringDiff):
        return False
    # Spans may have been split or merged, so match on containment
    has_text = any(
        value is not None and text in value
        for value in (text_diff.to_value, text_diff.from_value)
    )
    has_mark = any(
        isinstance(value, list) and mark in value
        for value in (marks.to_value, marks.from_value)
    )
    return has_text and has_mark


def find_marks_diff(diff: ObjectDiff, mark: str, text: str) -> StringDiff | None:
    """Find the string diff of one mark on the span containing ``text``."""
    children = _children_diff(diff)
    if children is None or children.action != DiffAction.CHANGED:
        return None

    span_diff = next(
        (
            item.diff
            for item in children.items
            if isinstance(item.diff, ObjectDiff)
            and _span_diff_matches(item.diff, mark, text)
        ),
        None,
    )
    if span_diff is None:
        return None

    marks = _marks_diff(span_diff)
    if marks is None or marks.action == DiffAction.UNCHANGED:
        return None
    for item in marks.items:
        if mark in (item.diff.to_value, item.diff.from_value):
            return item.diff if isinstance(item.diff, StringDiff) else None
    return None
