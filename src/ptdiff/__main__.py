"""CLI entry point for ptdiff.

Usage:
    python -m ptdiff diff <from.json|-> <to.json|-> [--decorators a,b] [--json]
    python -m ptdiff serialize <block.json> [--decorators a,b]

Each JSON file holds one Portable Text block; ``-`` stands for an absent
side (an added or removed block).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ptdiff.engine import PortableTextDiffEngine
from ptdiff.exceptions import PortableTextDiffError
from ptdiff.helpers import get_decorator_names
from ptdiff.models import Block
from ptdiff.schema import SchemaType
from ptdiff.serializer import block_to_symbolized_text
from ptdiff.symbols import UNMAPPED_OBJECT_MARKER, SymbolTable
from ptdiff.types import DiffAction, ObjectDiff, SegmentAction

ABSENT = "-"

# Decorators a default block schema allows
DEFAULT_DECORATORS = ("code", "em", "strike-through", "strong", "underline")

SEGMENT_PREFIX = {
    SegmentAction.UNCHANGED: " ",
    SegmentAction.ADDED: "+",
    SegmentAction.REMOVED: "-",
}


def _load_block(path: str) -> Block | None:
    if path == ABSENT:
        return None
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return Block.model_validate(data)


def _decorators(args: argparse.Namespace) -> list[str]:
    if args.schema:
        schema = SchemaType.model_validate(
            json.loads(Path(args.schema).read_text(encoding="utf-8"))
        )
        return get_decorator_names(schema)
    if args.decorators is not None:
        return [name.strip() for name in args.decorators.split(",") if name.strip()]
    return list(DEFAULT_DECORATORS)


def _marker_labels(table: SymbolTable) -> dict[str, str]:
    """Readable stand-ins for marker characters."""
    labels = {UNMAPPED_OBJECT_MARKER: "[object]"}
    for name, (start, end) in table.decorators.items():
        labels[start] = f"<{name}>"
        labels[end] = f"</{name}>"
    for key, (start, end) in table.annotations.items():
        labels[start] = f"<@{key}>"
        labels[end] = f"</@{key}>"
    for key, marker in table.embedded.items():
        labels[marker] = f"[{key}]"
    return labels


def _block_pair_diff(
    from_block: Block | None,
    to_block: Block | None,
    annotation: dict[str, Any] | None,
) -> ObjectDiff:
    if from_block is None and to_block is not None:
        action = DiffAction.ADDED
    elif to_block is None and from_block is not None:
        action = DiffAction.REMOVED
    elif from_block == to_block:
        action = DiffAction.UNCHANGED
    else:
        action = DiffAction.CHANGED
    return ObjectDiff(
        action=action,
        from_value=from_block,
        to_value=to_block,
        is_changed=action != DiffAction.UNCHANGED,
        annotation=annotation,
    )


def cmd_diff(args: argparse.Namespace) -> int:
    """Print the segments of a block diff."""
    try:
        from_block = _load_block(args.from_block)
        to_block = _load_block(args.to_block)
        annotation = json.loads(args.annotation) if args.annotation else None
        decorators = _decorators(args)
    except (OSError, ValueError, ValidationError) as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return 1

    engine = PortableTextDiffEngine()
    try:
        result = engine.diff(_block_pair_diff(from_block, to_block, annotation), decorators)
    except PortableTextDiffError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return 0

    assert result.symbols is not None
    labels = _marker_labels(result.symbols)
    for segment in result.segments:
        text = labels.get(segment.text, segment.text)
        print(f"{SEGMENT_PREFIX[segment.action]} {text!r}")
    return 0


def cmd_serialize(args: argparse.Namespace) -> int:
    """Print the symbolized string of one block with readable markers."""
    try:
        block = _load_block(args.block)
        decorators = _decorators(args)
    except (OSError, ValueError, ValidationError) as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return 1
    if block is None:
        print("Error: serialize needs a block, not '-'", file=sys.stderr)
        return 1

    try:
        table = SymbolTable.for_block(
            block, decorators, PortableTextDiffEngine().overflow
        )
    except PortableTextDiffError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    labels = _marker_labels(table)
    text = block_to_symbolized_text(block, table)
    print("".join(labels.get(c, c) for c in text))
    return 0


def _add_decorator_args(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--decorators",
        default=None,
        help="Comma-separated decorator names (default: %s)"
        % ",".join(DEFAULT_DECORATORS),
    )
    group.add_argument(
        "--schema",
        default=None,
        help="JSON file with the block schema type to read decorators from",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="ptdiff",
        description="Character-level diffs of Portable Text blocks",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # diff subcommand
    diff_parser = subparsers.add_parser(
        "diff",
        help="Diff two versions of a block",
    )
    diff_parser.add_argument("from_block", help="JSON file of the old block, or -")
    diff_parser.add_argument("to_block", help="JSON file of the new block, or -")
    _add_decorator_args(diff_parser)
    diff_parser.add_argument(
        "--annotation",
        default=None,
        help="Provenance JSON object attached to changed segments",
    )
    diff_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full diff tree as JSON",
    )
    diff_parser.set_defaults(func=cmd_diff)

    # serialize subcommand
    serialize_parser = subparsers.add_parser(
        "serialize",
        help="Show the symbolized string of a block",
    )
    serialize_parser.add_argument("block", help="JSON file of the block")
    _add_decorator_args(serialize_parser)
    serialize_parser.set_defaults(func=cmd_serialize)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
