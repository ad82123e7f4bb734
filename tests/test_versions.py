from crdgen.apiext import (
    CustomResourceColumnDefinition,
    CustomResourceDefinition,
    CustomResourceDefinitionVersion,
    CustomResourceSubresources,
    CustomResourceSubresourceStatus,
    CustomResourceValidation,
    JSONSchemaProps,
)
from crdgen.versions import (
    ATTRIBUTION_ANNOTATION,
    LegacyCustomResourceDefinition,
    LegacyCustomResourceDefinitionSpec,
    add_attribution,
    merge_identical_version_info,
    to_trivial_versions,
)


def _validation(required=True):
    return CustomResourceValidation(
        open_api_v3_schema=JSONSchemaProps(
            required=["foo"] if required else None,
            type="object",
            properties={"foo": JSONSchemaProps(type="string")},
        )
    )


def _status():
    return CustomResourceSubresources(status=CustomResourceSubresourceStatus())


def _columns():
    return [
        CustomResourceColumnDefinition(name="Cheddar", json_path=".spec.cheddar"),
        CustomResourceColumnDefinition(name="Parmesan", json_path=".status.parmesan"),
    ]


def _crd(*versions):
    return LegacyCustomResourceDefinition(
        spec=LegacyCustomResourceDefinitionSpec(versions=list(versions))
    )


V = CustomResourceDefinitionVersion


def test_single_version_schema_moves_to_top_level():
    crd = _crd(V(name="v1", storage=True, schema=_validation()))
    merge_identical_version_info(crd)
    assert crd.spec.validation == _validation()
    assert crd.spec.versions == [V(name="v1", storage=True)]


def test_identical_schemata_move_to_top_level():
    crd = _crd(V(name="v1", schema=_validation()), V(name="v2", storage=True, schema=_validation()))
    merge_identical_version_info(crd)
    assert crd.spec.validation == _validation()
    assert crd.spec.versions == [V(name="v1"), V(name="v2", storage=True)]


def test_different_schemata_are_not_merged():
    crd = _crd(
        V(name="v1", schema=_validation(required=False)),
        V(name="v2", storage=True, schema=_validation()),
    )
    orig = crd.deep_copy()
    merge_identical_version_info(crd)
    assert crd == orig


def test_single_version_subresources_move_to_top_level():
    crd = _crd(V(name="v1", storage=True, subresources=_status()))
    merge_identical_version_info(crd)
    assert crd.spec.subresources == _status()
    assert crd.spec.versions == [V(name="v1", storage=True)]


def test_identical_subresources_move_to_top_level():
    crd = _crd(V(name="v1", subresources=_status()), V(name="v2", storage=True, subresources=_status()))
    merge_identical_version_info(crd)
    assert crd.spec.subresources == _status()
    assert crd.spec.versions == [V(name="v1"), V(name="v2", storage=True)]


def test_different_subresources_are_not_merged():
    crd = _crd(V(name="v1", subresources=_status()), V(name="v2", storage=True))
    orig = crd.deep_copy()
    merge_identical_version_info(crd)
    assert crd == orig


def test_single_version_printer_columns_move_to_top_level():
    crd = _crd(V(name="v1", storage=True, additional_printer_columns=_columns()))
    merge_identical_version_info(crd)
    assert crd.spec.additional_printer_columns == _columns()
    assert crd.spec.versions == [V(name="v1", storage=True)]


def test_identical_printer_columns_move_to_top_level():
    crd = _crd(
        V(name="v1", additional_printer_columns=_columns()),
        V(name="v2", storage=True, additional_printer_columns=_columns()),
    )
    merge_identical_version_info(crd)
    assert crd.spec.additional_printer_columns == _columns()
    assert crd.spec.versions == [V(name="v1"), V(name="v2", storage=True)]


def test_different_printer_columns_are_not_merged():
    crd = _crd(V(name="v1", additional_printer_columns=_columns()), V(name="v2", storage=True))
    orig = crd.deep_copy()
    merge_identical_version_info(crd)
    assert crd == orig


def test_merge_without_versions_leaves_crd_alone():
    crd = LegacyCustomResourceDefinition()
    merge_identical_version_info(crd)
    assert crd == LegacyCustomResourceDefinition()


def test_deep_copy_is_independent():
    crd = _crd(V(name="v1", schema=_validation()))
    copied = crd.deep_copy()
    copied.spec.versions[0].schema.open_api_v3_schema.type = "string"
    assert crd.spec.versions[0].schema.open_api_v3_schema.type == "object"


def test_to_trivial_versions_uses_storage_version():
    storage_schema = _validation()
    crd = _crd(
        V(name="v1", schema=_validation(required=False), additional_printer_columns=_columns()),
        V(name="v2", storage=True, schema=storage_schema, subresources=_status()),
    )
    to_trivial_versions(crd)
    assert crd.spec.validation == _validation()
    assert crd.spec.subresources == _status()
    assert crd.spec.additional_printer_columns is None
    assert crd.spec.versions == [V(name="v1"), V(name="v2", storage=True)]


def test_to_trivial_versions_without_storage_clears_versions_only():
    crd = _crd(V(name="v1", schema=_validation(), subresources=_status()))
    to_trivial_versions(crd)
    assert crd.spec.validation is None
    assert crd.spec.subresources is None
    assert crd.spec.versions == [V(name="v1")]


def test_add_attribution_creates_annotations():
    crd = CustomResourceDefinition()
    add_attribution(crd, "v0.3.0")
    assert crd.annotations == {"controller-gen.kubebuilder.io/version": "v0.3.0"}


def test_add_attribution_keeps_existing_annotations():
    crd = CustomResourceDefinition(annotations={"other": "value"})
    add_attribution(crd, "(devel)")
    assert crd.annotations == {"other": "value", ATTRIBUTION_ANNOTATION: "(devel)"}


def test_legacy_crd_defaults_to_v1beta1():
    assert LegacyCustomResourceDefinition().api_version == "apiextensions.k8s.io/v1beta1"