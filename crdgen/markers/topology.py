"""Markers describing list, map and struct topology for server-side apply."""

from __future__ import annotations

from dataclasses import dataclass

from crdgen.apiext import JSONSchemaProps

_LIST_TYPES = frozenset({"map", "atomic", "set"})
_ATOMICITY = frozenset({"atomic", "granular"})


@dataclass(frozen=True)
class ListType:
    """Specifies the kind of data structure a list represents: map, set or atomic.

    - "map": the list is an associative list keyed by one or more fields.
    - "set": items are scalar and occur at most once.
    - "atomic": the whole list is treated as a single value.
    """

    value: str

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        if schema.type != "array":
            raise ValueError("must apply listType to an array")
        if self.value not in _LIST_TYPES:
            raise ValueError('ListType must be either "map", "set" or "atomic"')
        schema.x_list_type = self.value

    def apply_first(self) -> None:
        """Mark this marker as one to apply before all others."""


@dataclass(frozen=True)
class ListMapKey:
    """Specifies a key of an associative list; may be repeated for several keys."""

    value: str

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        if schema.type != "array":
            raise ValueError("must apply listMapKey to an array")
        if schema.x_list_type != "map":
            raise ValueError("must apply listMapKey to an associative-list")
        schema.x_list_map_keys = (schema.x_list_map_keys or []) + [self.value]


@dataclass(frozen=True)
class MapType:
    """Specifies whether map items are independent ("granular") or one unit ("atomic")."""

    value: str

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        if schema.type != "object":
            raise ValueError("must apply mapType to an object")
        if self.value not in _ATOMICITY:
            raise ValueError('MapType must be either "granular" or "atomic"')
        schema.x_map_type = self.value


@dataclass(frozen=True)
class StructType:
    """Specifies whether struct fields are independent ("granular") or one unit ("atomic")."""

    value: str

    def apply_to_schema(self, schema: JSONSchemaProps) -> None:
        if schema.type not in ("object", ""):
            raise ValueError(
                "must apply structType to an object; either explicitly set or "
                "defaulted through an empty schema type"
            )
        if self.value not in _ATOMICITY:
            raise ValueError('StructType must be either "granular" or "atomic"')
        schema.x_map_type = self.value