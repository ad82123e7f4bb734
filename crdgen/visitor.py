"""Walking and editing schema trees."""

from __future__ import annotations

from typing import Iterable, Optional

from crdgen.apiext import JSONSchemaProps


class SchemaVisitor:
    """Walks the nodes of a schema.

    ``visit`` is called for each node.  If it returns a visitor, that visitor
    is called on each direct child, and then once more with ``None`` to mark
    that all children have been visited.  Returning ``None`` skips the
    children.  The default implementation visits everything.
    """

    def visit(self, schema: Optional[JSONSchemaProps]) -> Optional[SchemaVisitor]:
        return self


def edit_schema(schema: JSONSchemaProps, visitor: SchemaVisitor) -> None:
    """Walk ``schema`` with ``visitor``; nodes are edited in place."""
    _walk(schema, visitor)


def _walk(schema: JSONSchemaProps, visitor: SchemaVisitor) -> None:
    sub_visitor = visitor.visit(schema)
    if sub_visitor is None:
        return
    try:
        for child in _children(schema):
            _walk(child, sub_visitor)
    finally:
        sub_visitor.visit(None)


def _children(schema: JSONSchemaProps) -> Iterable[JSONSchemaProps]:
    if schema.items is not None:
        if schema.items.schema is not None:
            yield schema.items.schema
        yield from list(schema.items.json_schemas or ())
    yield from list(schema.all_of or ())
    yield from list(schema.one_of or ())
    yield from list(schema.any_of or ())
    if schema.not_ is not None:
        yield schema.not_
    yield from list((schema.properties or {}).values())
    if schema.additional_properties is not None and schema.additional_properties.schema is not None:
        yield schema.additional_properties.schema
    yield from list((schema.pattern_properties or {}).values())
    for dep in list((schema.dependencies or {}).values()):
        if isinstance(dep, JSONSchemaProps):
            yield dep
    if schema.additional_items is not None and schema.additional_items.schema is not None:
        yield schema.additional_items.schema
    yield from list((schema.definitions or {}).values())