"""ptdiff - character-level diffs of Portable Text blocks.

Serializes two versions of a block into strings where every decoration,
annotation and inline object boundary is a reserved marker character,
diffs the strings with diff-match-patch, and returns segments that never
mix a marker with surrounding text.
"""

__version__ = "0.1.0"

from ptdiff.engine import (
    PSEUDO_SPAN_KEY,
    PortableTextDiffEngine,
    create_portable_text_diff,
    get_display_value,
)
from ptdiff.exceptions import (
    NoDisplayableValueError,
    PortableTextDiffError,
    SymbolOverflowError,
)
from ptdiff.models import UNKNOWN_TYPE_NAME, Block, EmbeddedObject, MarkDef, Span
from ptdiff.schema import Decorator, ObjectField, SchemaType
from ptdiff.segments import build_segments, reconcile
from ptdiff.serializer import block_to_symbolized_text
from ptdiff.settings import Settings, get_settings
from ptdiff.symbols import SLOT_LIMIT, SymbolTable, allocate, strip_markers
from ptdiff.text_diff import DiffOp, TextDiffer
from ptdiff.types import (
    ArrayDiff,
    CleanupMode,
    DiffAction,
    ItemDiff,
    ObjectDiff,
    OverflowPolicy,
    PortableTextDiff,
    SegmentAction,
    StringDiff,
    StringSegment,
)

__all__ = [
    "PSEUDO_SPAN_KEY",
    "SLOT_LIMIT",
    "UNKNOWN_TYPE_NAME",
    "ArrayDiff",
    "Block",
    "CleanupMode",
    "Decorator",
    "DiffAction",
    "DiffOp",
    "EmbeddedObject",
    "ItemDiff",
    "MarkDef",
    "NoDisplayableValueError",
    "ObjectDiff",
    "ObjectField",
    "OverflowPolicy",
    "PortableTextDiff",
    "PortableTextDiffEngine",
    "PortableTextDiffError",
    "SchemaType",
    "SegmentAction",
    "Settings",
    "Span",
    "StringDiff",
    "StringSegment",
    "SymbolOverflowError",
    "SymbolTable",
    "TextDiffer",
    "__version__",
    "allocate",
    "block_to_symbolized_text",
    "build_segments",
    "create_portable_text_diff",
    "get_display_value",
    "get_settings",
    "reconcile",
    "strip_markers",
]
