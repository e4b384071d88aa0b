"""Portable Text models.

Pydantic models for the block JSON stored by the editor. Field names are
snake_case; the stored names (``_type``, ``_key``, ``markDefs``) are aliases,
so ``Block.model_validate(raw)`` accepts editor JSON directly and
``model_dump(by_alias=True)`` writes it back.

A block's children form a closed union: ``Span`` for ``_type == "span"``,
``EmbeddedObject`` for everything else. Children that are malformed degrade
to an ``EmbeddedObject`` of type ``UNKNOWN_TYPE_NAME`` instead of failing the
whole block; markDefs without a key are dropped.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

SPAN_TYPE = "span"
BLOCK_TYPE = "block"

# Fallback type for children the renderer can not resolve
UNKNOWN_TYPE_NAME = "_UNKOWN_TYPE_"

# Prefix for placeholder keys given to embedded objects that lack one
UNKEYED_PREFIX = "_unkeyed_"


class MarkDef(BaseModel):
    """An annotation definition (e.g. a link) referenced by key from spans."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    key: str = Field(alias="_key")
    type: str = Field(alias="_type")


class Span(BaseModel):
    """A text-bearing child carrying zero or more marks."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    key: str | None = Field(None, alias="_key")
    type: str = Field(SPAN_TYPE, alias="_type")
    text: str = ""
    marks: list[str] = Field(default_factory=list)

    @field_validator("text", mode="before")
    @classmethod
    def _text_or_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("marks", mode="before")
    @classmethod
    def _marks_or_empty(cls, v: Any) -> Any:
        if v is None:
            return []
        # Mark entries are names; anything else can not reference a symbol
        return [m for m in v if isinstance(m, str)] if isinstance(v, list) else v


class EmbeddedObject(BaseModel):
    """A non-text child (e.g. an inline image); the payload stays opaque."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    key: str = Field(alias="_key")
    type: str = Field(alias="_type")


Child = Span | EmbeddedObject


class Block(BaseModel):
    """One unit of rich text (e.g. a paragraph) with ordered children."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    key: str | None = Field(None, alias="_key")
    type: str = Field(BLOCK_TYPE, alias="_type")
    style: str | None = None
    children: list[Child] = Field(default_factory=list)
    mark_defs: list[MarkDef] = Field(default_factory=list, alias="markDefs")

    @field_validator("children", mode="before")
    @classmethod
    def _parse_children(cls, v: Any) -> Any:
        if v is None:
            return []
        if not isinstance(v, list):
            return v
        return [parse_child(raw, index) for index, raw in enumerate(v)]

    @field_validator("mark_defs", mode="before")
    @classmethod
    def _mark_defs_or_empty(cls, v: Any) -> Any:
        if v is None:
            return []
        if not isinstance(v, list):
            return v
        mark_defs = []
        for index, raw in enumerate(v):
            mark_def = parse_mark_def(raw, index)
            if mark_def is not None:
                mark_defs.append(mark_def)
        return mark_defs

    def spans(self) -> list[Span]:
        """Return the span children in document order."""
        return [child for child in self.children if isinstance(child, Span)]

    def embedded_objects(self) -> list[EmbeddedObject]:
        """Return the non-span children in document order."""
        return [child for child in self.children if isinstance(child, EmbeddedObject)]

    def text_content(self) -> str:
        """Plain text of all spans, without any markers."""
        return "".join(span.text for span in self.spans())


def parse_child(raw: Any, index: int = 0) -> Child:
    """Turn one raw child into a ``Span`` or ``EmbeddedObject``.

    Never raises for malformed children: a value that is not an object, one
    with no string ``_type``, or a span that fails validation (e.g. non-string
    ``text``) becomes an ``EmbeddedObject`` of type ``UNKNOWN_TYPE_NAME``. A
    missing ``_key`` on a non-span child is replaced by ``_unkeyed_<index>``.
    """
    if isinstance(raw, (Span, EmbeddedObject)):
        return raw

    if not isinstance(raw, dict):
        logger.warning(
            "Child %d is not an object (%s); treating it as unknown",
            index,
            type(raw).__name__,
        )
        return EmbeddedObject(key=f"{UNKEYED_PREFIX}{index}", type=UNKNOWN_TYPE_NAME)

    child_type = raw.get("_type")
    if child_type == SPAN_TYPE:
        try:
            return Span.model_validate(raw)
        except ValidationError as e:
            key = raw.get("_key")
            logger.warning(
                "Span %d is malformed (%d errors); treating it as unknown",
                index,
                e.error_count(),
            )
            return EmbeddedObject(
                key=key if isinstance(key, str) else f"{UNKEYED_PREFIX}{index}",
                type=UNKNOWN_TYPE_NAME,
            )

    data = dict(raw)
    if not isinstance(child_type, str):
        logger.warning("Child %d has no type; treating it as unknown", index)
        data["_type"] = UNKNOWN_TYPE_NAME
    if not isinstance(data.get("_key"), str):
        logger.warning(
            "Embedded object %d (%s) has no key; using a placeholder",
            index,
            data["_type"],
        )
        data["_key"] = f"{UNKEYED_PREFIX}{index}"
    return EmbeddedObject.model_validate(data)


def parse_mark_def(raw: Any, index: int = 0) -> MarkDef | None:
    """Validate one markDef; ``None`` for entries without a string ``_key``.

    A markDef that can not be referenced by key can not annotate anything,
    so it is dropped with a warning instead of failing the block.
    """
    if isinstance(raw, MarkDef):
        return raw
    if not isinstance(raw, dict) or not isinstance(raw.get("_key"), str):
        logger.warning("Mark definition %d has no key; dropping it", index)
        return None
    data = dict(raw)
    if not isinstance(data.get("_type"), str):
        logger.warning(
            "Mark definition %s has no type; treating it as unknown", data["_key"]
        )
        data["_type"] = UNKNOWN_TYPE_NAME
    return MarkDef.model_validate(data)


def as_block(value: Any) -> Block | None:
    """Return ``value`` as a ``Block``; raw block dicts are validated."""
    if value is None or isinstance(value, Block):
        return value
    return Block.model_validate(value)
