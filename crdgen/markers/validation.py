"""Markers that add validation to a generated schema."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from crdgen.apiext import JSON, JSONSchemaProps

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _marshal(value: Any) -> bytes:
    """Serialize ``value`` to compact JSON, escaping HTML-sensitive characters."""
    text = json.dumps(value, separators=(",", ":"), ensure_ascii=False, sort_keys=True)
    for char, escaped in _HTML_ESCAPES.items():
        text = text.replace(char, escaped)
    return text.encode("utf-8")


def _require_type(schema: JSONSchemaProps, expected: str, message: str) -> None:
    if schema.type != expected:
        raise ValueError(message)


@dataclass(frozen=True)
class Maximum:
    """Specifies the maximum numeric value that this field can have."""

    value: int

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        _require_type(schema, "integer", "must apply maximum to an integer")
        schema.maximum = float(self.value)


@dataclass(frozen=True)
class Minimum:
    """Specifies the minimum numeric value that this field can have."""

    value: int

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        _require_type(schema, "integer", "must apply minimum to an integer")
        schema.minimum = float(self.value)


@dataclass(frozen=True)
class ExclusiveMaximum:
    """Indicates that the maximum is "up to" but not including that value."""

    value: bool

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        _require_type(schema, "integer", "must apply exclusivemaximum to an integer")
        schema.exclusive_maximum = bool(self.value)


@dataclass(frozen=True)
class ExclusiveMinimum:
    """Indicates that the minimum is "up to" but not including that value."""

    value: bool

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        _require_type(schema, "integer", "must apply exclusiveminimum to an integer")
        schema.exclusive_minimum = bool(self.value)


@dataclass(frozen=True)
class MultipleOf:
    """Specifies that this field's value must be a multiple of this one."""

    value: int

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        _require_type(schema, "integer", "must apply multipleof to an integer")
        schema.multiple_of = float(self.value)


@dataclass(frozen=True)
class MaxLength:
    """Specifies the maximum length for this string."""

    value: int

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        _require_type(schema, "string", "must apply maxlength to a string")
        schema.max_length = int(self.value)


@dataclass(frozen=True)
class MinLength:
    """Specifies the minimum length for this string."""

    value: int

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        _require_type(schema, "string", "must apply minlength to a string")
        schema.min_length = int(self.value)


@dataclass(frozen=True)
class Pattern:
    """Specifies that this string must match the given regular expression."""

    value: str

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        _require_type(schema, "string", "must apply pattern to a string")
        schema.pattern = self.value


@dataclass(frozen=True)
class MaxItems:
    """Specifies the maximum length for this list."""

    value: int

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        _require_type(schema, "array", "must apply maxitem to an array")
        schema.max_items = int(self.value)


@dataclass(frozen=True)
class MinItems:
    """Specifies the minimum length for this list."""

    value: int

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        _require_type(schema, "array", "must apply minitems to an array")
        schema.min_items = int(self.value)


@dataclass(frozen=True)
class UniqueItems:
    """Specifies that all items in this list must be unique."""

    value: bool

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        _require_type(schema, "array", "must apply uniqueitems to an array")
        schema.unique_items = bool(self.value)


@dataclass(frozen=True)
class Enum:
    """Restricts this (scalar) field to exactly the values listed."""

    values: tuple = ()

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        schema.enum = [JSON(raw=_marshal(value)) for value in self.values]


@dataclass(frozen=True)
class Format:
    """Specifies additional "complex" formatting for this field."""

    value: str

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        schema.format = self.value


@dataclass(frozen=True)
class Type:
    """Overrides the type for this field; applied before all other markers."""

    value: str

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        schema.type = self.value

    def apply_first(self) -> None:
        """Mark this marker as one to apply before all others."""


@dataclass(frozen=True)
class Nullable:
    """Marks this field as allowing the "null" value."""

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        schema.nullable = True


@dataclass(frozen=True)
class Default:
    """Sets the default value for this field (only valid in v1 CRDs)."""

    value: Any = None

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        schema.default = JSON(raw=_marshal(self.value))


@dataclass(frozen=True)
class XPreserveUnknownFields:
    """Stops the API server from pruning fields that are not specified."""

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        schema.x_preserve_unknown_fields = True


@dataclass(frozen=True)
class XEmbeddedResource:
    """Marks a field as an embedded resource with apiVersion, kind and metadata."""

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        schema.x_embedded_resource = True