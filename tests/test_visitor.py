from crdgen.apiext import JSONSchemaProps, JSONSchemaPropsOrArray, JSONSchemaPropsOrBool
from crdgen.visitor import SchemaVisitor, edit_schema


class _Recorder(SchemaVisitor):
    def __init__(self, skip=()):
        self.seen = []
        self.skip = set(skip)

    def visit(self, schema):
        self.seen.append(None if schema is None else schema.description)
        if schema is not None and schema.description in self.skip:
            return None
        return self


class _Upper(SchemaVisitor):
    def visit(self, schema):
        if schema is not None:
            schema.description = schema.description.upper()
        return self


def test_visit_order_and_end_markers():
    schema = JSONSchemaProps(
        description="root",
        items=JSONSchemaPropsOrArray(schema=JSONSchemaProps(description="item")),
        all_of=[JSONSchemaProps(description="a1")],
        properties={"p": JSONSchemaProps(description="prop")},
    )
    rec = _Recorder()
    edit_schema(schema, rec)
    assert rec.seen == ["root", "item", None, "a1", None, "prop", None, None]


def test_returning_none_skips_children_and_end_marker():
    schema = JSONSchemaProps(
        description="root",
        properties={"p": JSONSchemaProps(description="skip", properties={"q": JSONSchemaProps(description="deep")})},
    )
    rec = _Recorder(skip={"skip"})
    edit_schema(schema, rec)
    assert rec.seen == ["root", "skip", None]
    assert "deep" not in rec.seen


def test_edits_persist_in_maps_and_pointers():
    schema = JSONSchemaProps(
        description="root",
        properties={"p": JSONSchemaProps(description="prop")},
        additional_properties=JSONSchemaPropsOrBool(schema=JSONSchemaProps(description="extra")),
        definitions={"d": JSONSchemaProps(description="def")},
    )
    edit_schema(schema, _Upper())
    assert schema.description == "ROOT"
    assert schema.properties["p"].description == "PROP"
    assert schema.additional_properties.schema.description == "EXTRA"
    assert schema.definitions["d"].description == "DEF"


def test_dependencies_walk_only_schemas():
    schema = JSONSchemaProps(
        description="root",
        dependencies={"a": JSONSchemaProps(description="dep"), "b": ["x", "y"]},
    )
    rec = _Recorder()
    edit_schema(schema, rec)
    assert rec.seen == ["root", "dep", None, None]
    assert schema.dependencies["b"] == ["x", "y"]


def test_base_visitor_visits_all_nodes():
    schema = JSONSchemaProps(
        one_of=[JSONSchemaProps(), JSONSchemaProps()],
        not_=JSONSchemaProps(),
    )
    assert SchemaVisitor().visit(schema) is not None
    edit_schema(schema, SchemaVisitor())
    assert len(schema.one_of) == 2