"""
Semantic field types and value type inference.

Field catalogs arrive from the embedding application with free-form type tags
("integer", "price", "timestamp", ...). These are normalized onto a small
closed set so formatter filtering and previews work over a finite domain.
"""

from collections.abc import Mapping, Sequence
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field as PydanticField, field_validator


class FieldType(str, Enum):
    """Semantic type tag of a field or value."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    OBJECT = "object"
    UNKNOWN = "unknown"

    @property
    def is_numeric(self) -> bool:
        return self is FieldType.NUMBER

    @property
    def is_date(self) -> bool:
        return self is FieldType.DATE


# Declared type tags seen in catalogs, by semantic type
_TYPE_ALIASES: dict[FieldType, frozenset[str]] = {
    FieldType.NUMBER: frozenset(
        {"number", "integer", "int", "float", "decimal", "double", "currency", "price"}
    ),
    FieldType.DATE: frozenset({"date", "datetime", "timestamp", "time"}),
    FieldType.BOOLEAN: frozenset({"boolean", "bool", "checkbox"}),
    FieldType.OBJECT: frozenset({"object", "json", "array", "list", "dict", "map"}),
    FieldType.TEXT: frozenset(
        {"text", "string", "str", "email", "url", "phone", "textarea", "select", "long_text"}
    ),
}


def normalize_field_type(declared: Any) -> FieldType:
    """
    Map a declared type tag onto a FieldType.

    Args:
        declared: FieldType, free-form tag string, or None

    Returns:
        Matching FieldType, FieldType.UNKNOWN when unrecognised

    Examples:
        >>> normalize_field_type("Integer")
        <FieldType.NUMBER: 'number'>
        >>> normalize_field_type("timestamp")
        <FieldType.DATE: 'date'>
        >>> normalize_field_type(None)
        <FieldType.UNKNOWN: 'unknown'>
    """
    if isinstance(declared, FieldType):
        return declared
    if not isinstance(declared, str):
        return FieldType.UNKNOWN

    tag = declared.strip().lower()
    for field_type, aliases in _TYPE_ALIASES.items():
        if tag in aliases:
            return field_type
    return FieldType.UNKNOWN


def infer_type_from_value(value: Any) -> FieldType:
    """
    Guess the semantic type of a raw value.

    bool is checked before numbers since bool is an int subclass; strings
    and bytes are text even though they are sequences.
    """
    if value is None:
        return FieldType.UNKNOWN
    if isinstance(value, bool):
        return FieldType.BOOLEAN
    if isinstance(value, (int, float, Decimal)):
        return FieldType.NUMBER
    if isinstance(value, (datetime, date)):
        return FieldType.DATE
    if isinstance(value, (str, bytes)):
        return FieldType.TEXT
    if isinstance(value, (Mapping, Sequence, set, frozenset)):
        return FieldType.OBJECT
    return FieldType.UNKNOWN


class Field(BaseModel):
    """Field catalog entry supplied by the embedding application."""

    model_config = {"frozen": True}

    name: str = PydanticField(min_length=1, description="Field name, unique within a catalog")
    type: FieldType = PydanticField(
        default=FieldType.UNKNOWN,
        description="Semantic type (declared tags are normalized)",
    )
    description: str | None = PydanticField(default=None, description="Optional description")

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> FieldType:
        return normalize_field_type(v)


def find_field(fields: Sequence[Field] | None, name: str) -> Field | None:
    """Look up a catalog entry by exact name."""
    for entry in fields or ():
        if entry.name == name:
            return entry
    return None


__all__ = [
    "FieldType",
    "Field",
    "normalize_field_type",
    "infer_type_from_value",
    "find_field",
]
