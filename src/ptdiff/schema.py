"""Schema models for Portable Text block types.

Only the parts of a schema the diff needs: a type's name and JSON type, its
fields, array member types (``of``) and, for span types, the decorator
vocabulary.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Decorator(BaseModel):
    """A decorator (e.g. ``strong``) a span type allows."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    title: str = ""
    value: str


class ObjectField(BaseModel):
    """A named field of an object type."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str
    type: SchemaType


class SchemaType(BaseModel):
    """A schema type declaration."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str
    json_type: str = Field("object", alias="jsonType")
    fields: list[ObjectField] = Field(default_factory=list)
    of: list[SchemaType] = Field(default_factory=list)
    decorators: list[Decorator] | None = None

    def field(self, name: str) -> ObjectField | None:
        """Look up a field by name."""
        return next((f for f in self.fields if f.name == name), None)


ObjectField.model_rebuild()
SchemaType.model_rebuild()
