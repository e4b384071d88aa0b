"""Tests for models module."""

import pytest

from ptdiff.models import (
    UNKEYED_PREFIX,
    UNKNOWN_TYPE_NAME,
    Block,
    EmbeddedObject,
    Span,
    as_block,
    parse_child,
)


class TestParseChild:
    """Tests for parse_child function."""

    def test_span(self) -> None:
        child = parse_child({"_type": "span", "_key": "s1", "text": "hi"})
        assert isinstance(child, Span)
        assert child.key == "s1"
        assert child.text == "hi"
        assert child.marks == []

    def test_embedded_object_keeps_payload(self) -> None:
        child = parse_child({"_type": "image", "_key": "i1", "asset": {"_ref": "a"}})
        assert isinstance(child, EmbeddedObject)
        assert child.type == "image"
        assert child.model_dump(by_alias=True)["asset"] == {"_ref": "a"}

    def test_missing_type_is_unknown(self, caplog: pytest.LogCaptureFixture) -> None:
        """A child without _type degrades instead of failing."""
        with caplog.at_level("WARNING", logger="ptdiff.models"):
            child = parse_child({"_key": "x"}, 3)
        assert isinstance(child, EmbeddedObject)
        assert child.type == UNKNOWN_TYPE_NAME
        assert child.key == "x"
        assert "no type" in caplog.text

    def test_missing_key_gets_placeholder(self) -> None:
        child = parse_child({"_type": "image"}, 2)
        assert isinstance(child, EmbeddedObject)
        assert child.key == f"{UNKEYED_PREFIX}2"

    def test_span_with_non_string_text(self, caplog: pytest.LogCaptureFixture) -> None:
        """A span that fails validation degrades and keeps its key."""
        with caplog.at_level("WARNING", logger="ptdiff.models"):
            child = parse_child({"_type": "span", "_key": "s2", "text": 42}, 1)
        assert isinstance(child, EmbeddedObject)
        assert child.type == UNKNOWN_TYPE_NAME
        assert child.key == "s2"
        assert "malformed" in caplog.text

    def test_span_with_non_string_key(self) -> None:
        child = parse_child({"_type": "span", "_key": 7, "text": "x"}, 4)
        assert isinstance(child, EmbeddedObject)
        assert child.key == f"{UNKEYED_PREFIX}4"

    def test_span_with_bare_string_marks(self) -> None:
        child = parse_child({"_type": "span", "_key": "s3", "marks": "strong"}, 0)
        assert isinstance(child, EmbeddedObject)
        assert child.type == UNKNOWN_TYPE_NAME

    def test_non_object(self) -> None:
        child = parse_child("oops", 5)
        assert isinstance(child, EmbeddedObject)
        assert child.type == UNKNOWN_TYPE_NAME
        assert child.key == f"{UNKEYED_PREFIX}5"


class TestSpan:
    """Tests for Span normalization."""

    def test_null_text_is_empty(self) -> None:
        assert Span.model_validate({"_type": "span", "text": None}).text == ""

    def test_non_string_marks_dropped(self) -> None:
        span = Span.model_validate({"_type": "span", "marks": ["em", 3, None]})
        assert span.marks == ["em"]

    def test_null_marks(self) -> None:
        assert Span.model_validate({"_type": "span", "marks": None}).marks == []


class TestBlock:
    """Tests for Block."""

    RAW = {
        "_type": "block",
        "_key": "b1",
        "style": "normal",
        "markDefs": [{"_key": "l1", "_type": "link", "href": "https://x.test"}],
        "children": [
            {"_type": "span", "_key": "s1", "text": "Hello ", "marks": []},
            {"_type": "image", "_key": "img1"},
            {"_type": "span", "_key": "s2", "text": "world", "marks": ["l1"]},
        ],
    }

    def test_parses_editor_json(self) -> None:
        block = Block.model_validate(self.RAW)
        assert block.key == "b1"
        assert [type(c).__name__ for c in block.children] == [
            "Span",
            "EmbeddedObject",
            "Span",
        ]
        assert block.mark_defs[0].key == "l1"

    def test_round_trips_by_alias(self) -> None:
        block = Block.model_validate(self.RAW)
        assert block.model_dump(by_alias=True, exclude_none=True) == self.RAW

    def test_accessors(self) -> None:
        block = Block.model_validate(self.RAW)
        assert [s.key for s in block.spans()] == ["s1", "s2"]
        assert [o.key for o in block.embedded_objects()] == ["img1"]
        assert block.text_content() == "Hello world"

    def test_null_collections(self) -> None:
        block = Block.model_validate({"_type": "block", "children": None, "markDefs": None})
        assert block.children == []
        assert block.mark_defs == []

    def test_malformed_child_does_not_fail_block(self) -> None:
        block = Block.model_validate(
            {"_type": "block", "children": [{"_type": "span", "text": "a"}, 42]}
        )
        assert len(block.children) == 2
        assert block.children[1].type == UNKNOWN_TYPE_NAME

    def test_malformed_span_does_not_fail_block(self) -> None:
        block = Block.model_validate(
            {
                "_type": "block",
                "children": [
                    {"_type": "span", "text": "ok"},
                    {"_type": "span", "_key": "s2", "text": 42},
                ],
            }
        )
        assert block.text_content() == "ok"
        assert block.children[1].type == UNKNOWN_TYPE_NAME

    def test_mark_def_without_key_dropped(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level("WARNING", logger="ptdiff.models"):
            block = Block.model_validate(
                {
                    "_type": "block",
                    "markDefs": [{"_type": "link"}, {"_key": "l1", "_type": "link"}],
                }
            )
        assert [m.key for m in block.mark_defs] == ["l1"]
        assert "no key" in caplog.text

    def test_mark_def_without_type_is_unknown(self) -> None:
        block = Block.model_validate({"_type": "block", "markDefs": [{"_key": "l1"}]})
        assert block.mark_defs[0].type == UNKNOWN_TYPE_NAME


class TestAsBlock:
    """Tests for as_block."""

    def test_passthrough(self) -> None:
        block = Block.model_validate(TestBlock.RAW)
        assert as_block(block) is block
        assert as_block(None) is None

    def test_raw_dict(self) -> None:
        block = as_block(TestBlock.RAW)
        assert isinstance(block, Block)
        assert block.text_content() == "Hello world"
