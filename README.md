# crdgen

Build Kubernetes `CustomResourceDefinition` objects and their OpenAPI v3
validation schemata from a description of API types and the markers attached
to them. The package has no dependencies outside the standard library.

## Modules

- `crdgen.apiext`: dataclasses for the CRD model: `JSONSchemaProps`,
  `JSONSchemaPropsOrBool`, `JSONSchemaPropsOrArray`, `JSON`,
  `ExternalDocumentation`, `CustomResourceDefinition` and its spec, names,
  versions, subresources and printer columns. `JSONSchemaProps.deep_copy` and
  `CustomResourceDefinition.deep_copy` return independent copies.
- `crdgen.ident`: `Package` (collects errors via `add_error`), `TypeInfo`,
  `TypeIdent`, `GroupVersion` and `GroupKind`.
- `crdgen.visitor`: `SchemaVisitor` and `edit_schema`, which walk a schema
  tree and let a visitor edit each node in place.
- `crdgen.description`: `truncate_description` shortens descriptions to a
  maximum length, cutting at the last sentence boundary when one exists.
  A length of 0 drops all descriptions; a negative length leaves them alone.
  `truncate_string` does the same for one string.
- `crdgen.schema`: `info_to_schema` turns a `TypeInfo` into a
  `JSONSchemaProps`. References to other types become `#/definitions/...`
  links (`type_ref_link`, `qualified_name`). `apply_markers` applies schema
  markers, running "apply first" markers before the rest; failures are
  recorded on the package as `MarkerError`.
- `crdgen.flatten`: `Flattener.flatten_type` and `Flattener.flatten_schema`
  resolve every reference into one self-contained schema, keeping field-level
  docs and validation in `all_of` branches. `flatten_embedded` merges `all_of`
  branches into their parent where it can, pushing conflicting values as far
  down the tree as possible. `ref_parts` and `ident_from_ref` decode links.
- `crdgen.parser`: `Parser` indexes packages (`need_package`, `add_package`),
  caches schemata (`need_schema_for`, `need_flattened_schema_for`) and builds
  one CRD per group-kind with `need_crd_for`. `pluralize` gives the default
  plural resource name.
- `crdgen.known_types`: `add_known_types` registers schema overrides for
  common Kubernetes packages (`ObjectMeta`, `Time`, `MicroTime`, `Duration`,
  `Quantity`, `IntOrString`, `RawExtension`, `Unstructured`, `JSON`).
- `crdgen.markers.crd`: CRD-level markers with `apply_to_crd`:
  `SubresourceStatus`, `SubresourceScale`, `PrintColumn`, `Resource`,
  `StorageVersion`, `SkipVersion`, `UnservedVersion`.
- `crdgen.markers.topology`: `ListType`, `ListMapKey`, `MapType`,
  `StructType`.
- `crdgen.markers.validation`: `Maximum`, `Minimum`, `ExclusiveMaximum`,
  `ExclusiveMinimum`, `MultipleOf`, `MaxLength`, `MinLength`, `Pattern`,
  `MaxItems`, `MinItems`, `UniqueItems`, `Enum`, `Format`, `Type`,
  `Nullable`, `Default`, `XPreserveUnknownFields`, `XEmbeddedResource`.
  A marker raises `ValueError` when applied to a schema of the wrong type.
- `crdgen.versions`: the v1beta1 form (`LegacyCustomResourceDefinition`),
  `merge_identical_version_info` (lifts subresources, schemata and printer
  columns that are the same in every version to the top level),
  `to_trivial_versions` (keeps only the storage version's schema info) and
  `add_attribution` (records the generator version as an annotation).

## Describing types

Types are given as `TypeInfo` objects inside a `Package`. A type's
`type_expr` is a builtin name (`"string"`, `"int32"`, `"bool"`, ...), a
`TypeIdent`, `("array", elem)`, `("map", key, value)`, `("pointer", elem)`
or `"struct"` (whose fields are the `TypeInfo.fields`, each with a
`json_tag`). Package-level markers such as `groupName` and `versionName` live
in `Package.markers`; field and type markers in `TypeInfo.markers`, as lists
of marker objects keyed by marker name.

## Example

```python
from crdgen.ident import GroupKind, Package, TypeInfo
from crdgen.markers.validation import Maximum
from crdgen.parser import Parser

pkg = Package(
    pkg_path="example.com/api/v1",
    name="v1",
    markers={"groupName": ["example.com"]},
    types=[
        TypeInfo(
            name="Widget",
            type_expr="struct",
            fields=[
                TypeInfo(
                    name="Size",
                    json_tag="size",
                    type_expr="int32",
                    markers={"kubebuilder:validation:Maximum": [Maximum(10)]},
                ),
            ],
        ),
    ],
)

parser = Parser()
parser.need_package(pkg)
kind = GroupKind(group="example.com", kind="Widget")
parser.need_crd_for(kind, None)
crd = parser.custom_resource_definitions[kind]
# crd.name == "widgets.example.com"
# crd.spec.versions[0].name == "v1" and crd.spec.versions[0].storage is True
```

Flattening and truncation on their own:

```python
from crdgen.apiext import JSONSchemaProps
from crdgen.description import truncate_description
from crdgen.flatten import flatten_embedded

schema = JSONSchemaProps(
    all_of=[JSONSchemaProps(type="string"), JSONSchemaProps(pattern="^[abc]$")],
)
errors = Package()  # any object with add_error(err) will do
flat = flatten_embedded(schema, errors)
# flat.type == "string", flat.pattern == "^[abc]$", flat.all_of is None

doc = JSONSchemaProps(description="First sentence. Second sentence here")
truncate_description(doc, len(doc.description) - 5)
# doc.description == "First sentence."
```

## What it does not do

- There is no command-line tool; everything is used as a library.
- It does not read source files or marker comments: types, fields and marker
  objects must be built as `Package` and `TypeInfo` values by the caller.
- It does not write YAML or any other output files.
- It does not convert a v1 `CustomResourceDefinition` into the v1beta1
  `LegacyCustomResourceDefinition`; the helpers in `crdgen.versions` work on
  a legacy object the caller has already built.

## Running the tests

```
pip install -e .[test]
pytest
```