from crdgen.apiext import JSONSchemaProps, JSONSchemaPropsOrBool
from crdgen.ident import Package, TypeIdent, TypeInfo
from crdgen.known_types import KNOWN_PACKAGES, QUANTITY_PATTERN, add_known_types
from crdgen.parser import Parser

METAV1 = "k8s.io/apimachinery/pkg/apis/meta/v1"


def make_parser():
    parser = Parser()
    add_known_types(parser)
    return parser


def test_all_known_packages_registered():
    parser = make_parser()
    assert set(KNOWN_PACKAGES) <= set(parser.package_overrides)
    assert parser.package_overrides[METAV1] is KNOWN_PACKAGES[METAV1]


def test_metav1_overrides_and_indexes_rest():
    pkg = Package(
        pkg_path=METAV1,
        name="v1",
        types=[TypeInfo(name="ListMeta", type_expr="struct")],
    )
    parser = make_parser()
    parser.need_package(pkg)
    assert parser.schemata[TypeIdent(pkg, "ObjectMeta")] == JSONSchemaProps(type="object")
    assert parser.schemata[TypeIdent(pkg, "Time")] == JSONSchemaProps(type="string", format="date-time")
    assert parser.schemata[TypeIdent(pkg, "MicroTime")] == JSONSchemaProps(
        type="string", format="date-time"
    )
    assert parser.schemata[TypeIdent(pkg, "Duration")] == JSONSchemaProps(type="string")
    assert parser.schemata[TypeIdent(pkg, "Fields")] == JSONSchemaProps(
        type="object", additional_properties=JSONSchemaPropsOrBool(allows=True)
    )
    assert parser.lookup_type(pkg, "ListMeta") is pkg.types[0]


def test_known_schema_not_regenerated():
    pkg = Package(pkg_path=METAV1, name="v1")
    parser = make_parser()
    parser.need_schema_for(TypeIdent(pkg, "Time"))
    assert parser.schemata[TypeIdent(pkg, "Time")].format == "date-time"
    assert pkg.errors == []


def test_quantity_is_int_or_string_with_pattern():
    pkg = Package(pkg_path="k8s.io/apimachinery/pkg/api/resource", name="resource",
                  types=[TypeInfo(name="Other", type_expr="string")])
    parser = make_parser()
    parser.need_package(pkg)
    quantity = parser.schemata[TypeIdent(pkg, "Quantity")]
    assert quantity.x_int_or_string is True
    assert [s.type for s in quantity.any_of] == ["integer", "string"]
    assert quantity.pattern == QUANTITY_PATTERN
    # the override does not index the rest of the package
    assert parser.lookup_type(pkg, "Other") is None


def test_vendored_intstr_uses_override():
    pkg = Package(pkg_path="example/vendor/k8s.io/apimachinery/pkg/util/intstr", name="intstr")
    parser = make_parser()
    parser.need_package(pkg)
    intstr = parser.schemata[TypeIdent(pkg, "IntOrString")]
    assert intstr.x_int_or_string is True
    assert intstr.pattern == ""


def test_apiextensions_json_preserves_unknown_fields():
    for path in (
        "k8s.io/apiextensions-apiserver/pkg/apis/apiextensions/v1beta1",
        "k8s.io/apiextensions-apiserver/pkg/apis/apiextensions/v1",
    ):
        pkg = Package(pkg_path=path, name="v1")
        parser = make_parser()
        parser.need_package(pkg)
        assert parser.schemata[TypeIdent(pkg, "JSON")] == JSONSchemaProps(x_preserve_unknown_fields=True)


def test_raw_extension_and_unstructured_are_objects():
    runtime = Package(pkg_path="k8s.io/apimachinery/pkg/runtime", name="runtime")
    unstructured = Package(pkg_path="k8s.io/apimachinery/pkg/apis/meta/v1/unstructured", name="unstructured")
    parser = make_parser()
    parser.need_package(runtime)
    parser.need_package(unstructured)
    assert parser.schemata[TypeIdent(runtime, "RawExtension")].type == "object"
    assert parser.schemata[TypeIdent(unstructured, "Unstructured")].type == "object"


def test_flattening_resolves_known_type_reference():
    metav1 = Package(pkg_path=METAV1, name="v1")
    root = Package(
        pkg_path="root",
        name="root",
        imports={METAV1: metav1},
        types=[
            TypeInfo(
                name="Thing",
                type_expr="struct",
                fields=[TypeInfo(name="When", json_tag="when", type_expr=TypeIdent(metav1, "Time"))],
            )
        ],
    )
    parser = make_parser()
    parser.need_package(root)
    parser.need_flattened_schema_for(TypeIdent(root, "Thing"))
    flat = parser.flattened_schemata[TypeIdent(root, "Thing")]
    when = flat.properties["when"]
    assert when.type == "string"
    assert when.format == "date-time"
    assert when.ref is None
    assert flat.required == ["when"]
    assert root.errors == []