from crdgen.apiext import (
    JSON,
    NAMESPACE_SCOPED,
    CustomResourceDefinition,
    CustomResourceDefinitionVersion,
    CustomResourceSubresources,
    CustomResourceSubresourceStatus,
    CustomResourceValidation,
    JSONSchemaProps,
    JSONSchemaPropsOrArray,
    JSONSchemaPropsOrBool,
)


def _sample_schema():
    return JSONSchemaProps(
        type="object",
        required=["foo"],
        properties={"foo": JSONSchemaProps(type="string")},
        items=JSONSchemaPropsOrArray(schema=JSONSchemaProps(type="string")),
        additional_properties=JSONSchemaPropsOrBool(schema=JSONSchemaProps(type="integer")),
    )


def test_deep_copy_is_equal():
    original = _sample_schema()
    assert original.deep_copy() == original


def test_deep_copy_is_independent():
    original = _sample_schema()
    copied = original.deep_copy()
    copied.properties["foo"].type = "integer"
    copied.required.append("bar")
    copied.additional_properties.schema.type = "string"
    assert original.properties["foo"].type == "string"
    assert original.required == ["foo"]
    assert original.additional_properties.schema.type == "integer"


def test_unset_list_differs_from_empty_list():
    assert JSONSchemaProps(required=[]) != JSONSchemaProps()
    assert JSONSchemaProps().required is None


def test_json_equality_by_raw_bytes():
    assert JSON(b"ab") == JSON(raw=b"ab")
    assert JSON(b"ab") != JSON(b"ac")


def test_crd_defaults():
    crd = CustomResourceDefinition()
    assert crd.kind == "CustomResourceDefinition"
    assert crd.spec.versions is None
    assert NAMESPACE_SCOPED == "Namespaced"


def test_crd_deep_copy_is_independent():
    crd = CustomResourceDefinition(name="foos.example.com")
    crd.spec.versions = [
        CustomResourceDefinitionVersion(
            name="v1",
            served=True,
            schema=CustomResourceValidation(open_api_v3_schema=_sample_schema()),
            subresources=CustomResourceSubresources(status=CustomResourceSubresourceStatus()),
        )
    ]
    copied = crd.deep_copy()
    assert copied == crd
    copied.spec.versions[0].storage = True
    copied.spec.versions[0].schema.open_api_v3_schema.type = "string"
    assert crd.spec.versions[0].storage is False
    assert crd.spec.versions[0].schema.open_api_v3_schema.type == "object"