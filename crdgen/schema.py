"""Generating OpenAPI v3 schemata from type descriptions.

A type expression (``TypeInfo.type_expr``) takes one of these forms:

* a builtin type name such as ``"string"``, ``"int32"``, ``"bool"`` or ``"byte"``;
* a :class:`~crdgen.ident.TypeIdent` naming a declared type;
* ``("array", elem)`` for a slice, ``("array", elem, length)`` for a fixed array;
* ``("map", key, value)``;
* ``("pointer", elem)``;
* ``"struct"`` for a struct whose fields are the ``fields`` of the enclosing
  :class:`~crdgen.ident.TypeInfo` (only allowed as a top-level type).
"""

from __future__ import annotations

from typing import Any, Optional

from crdgen.apiext import (
    JSONSchemaProps,
    JSONSchemaPropsOrArray,
    JSONSchemaPropsOrBool,
)
from crdgen.ident import Package, TypeIdent, TypeInfo

DEF_PREFIX = "#/definitions/"

_INTEGER_FORMATS = {
    "int": "",
    "int8": "",
    "int16": "",
    "int32": "int32",
    "rune": "int32",
    "int64": "int64",
    "uint": "",
    "uint8": "",
    "byte": "",
    "uint16": "",
    "uint32": "int32",
    "uint64": "int64",
    "uintptr": "",
}
_UNSUPPORTED_BASICS = frozenset({"float32", "float64", "complex64", "complex128"})


class MarkerError(Exception):
    """A marker could not be applied to a schema."""


def qualified_name(pkg_name: str, type_name: str) -> str:
    """Build a JSON-pointer-safe qualified name for a type."""
    if pkg_name:
        return pkg_name.replace("/", "~1") + "~0" + type_name
    return type_name


def type_ref_link(pkg_name: str, type_name: str) -> str:
    """Build a definition link for the given type and package."""
    return DEF_PREFIX + qualified_name(pkg_name, type_name)


def apply_markers(marker_values: dict[str, list[Any]], props: JSONSchemaProps, pkg: Package) -> None:
    """Apply schema markers to ``props``, running "apply first" markers first.

    Failures are recorded on ``pkg`` as :class:`MarkerError`.
    """
    values = [value for vals in marker_values.values() for value in vals]
    first = [v for v in values if hasattr(v, "apply_first")]
    rest = [v for v in values if not hasattr(v, "apply_first")]
    for value in first + rest:
        apply = getattr(value, "apply_to_schema", None)
        if apply is None:
            continue
        try:
            apply(props)
        except (ValueError, TypeError) as err:
            pkg.add_error(MarkerError(str(err)))


def info_to_schema(info: TypeInfo, pkg: Package) -> JSONSchemaProps:
    """Create a schema for the declared type described by ``info``."""
    return _type_to_schema(info, pkg, info.type_expr, top=True)


def _non_vendor_path(path: str) -> str:
    idx = path.rfind("/vendor/")
    if idx >= 0:
        return path[idx + len("/vendor/"):]
    if path.startswith("vendor/"):
        return path[len("vendor/"):]
    return path


def _type_to_schema(info: TypeInfo, pkg: Package, expr: Any, top: bool = False) -> JSONSchemaProps:
    if expr == "struct":
        props = _struct_to_schema(info, pkg, top)
    elif isinstance(expr, (str, TypeIdent)):
        props = _named_to_schema(pkg, expr)
    elif isinstance(expr, tuple) and expr and expr[0] == "array":
        props = _array_to_schema(pkg, expr)
    elif isinstance(expr, tuple) and expr and expr[0] == "map":
        props = _map_to_schema(pkg, expr)
    elif isinstance(expr, tuple) and expr and expr[0] == "pointer":
        props = _type_to_schema(info, pkg, expr[1])
    else:
        pkg.add_error(ValueError(f"unsupported type expression {expr!r}"))
        return JSONSchemaProps()
    props.description = info.doc
    apply_markers(info.markers, props, pkg)
    return props


def _named_to_schema(pkg: Package, expr: Any) -> JSONSchemaProps:
    if isinstance(expr, TypeIdent):
        pkg_path = "" if expr.package is pkg else _non_vendor_path(expr.package.pkg_path)
        return JSONSchemaProps(ref=type_ref_link(pkg_path, expr.name))
    if expr == "bool":
        return JSONSchemaProps(type="boolean")
    if expr == "string":
        return JSONSchemaProps(type="string")
    if expr in _INTEGER_FORMATS:
        return JSONSchemaProps(type="integer", format=_INTEGER_FORMATS[expr])
    if expr in _UNSUPPORTED_BASICS:
        pkg.add_error(ValueError(f'unsupported type "{expr}"'))
        return JSONSchemaProps()
    pkg.add_error(ValueError(f"unknown type {expr}"))
    return JSONSchemaProps()


def _array_to_schema(pkg: Package, expr: tuple) -> JSONSchemaProps:
    elem = expr[1]
    fixed = len(expr) > 2
    if elem in ("byte", "uint8") and not fixed:
        return JSONSchemaProps(type="string", format="byte")
    items = _type_to_schema(TypeInfo(), pkg, elem)
    return JSONSchemaProps(type="array", items=JSONSchemaPropsOrArray(schema=items))


def _resolves_to_string(key: Any) -> bool:
    seen: set[int] = set()
    while True:
        if isinstance(key, str):
            return key == "string"
        if isinstance(key, TypeIdent):
            if id(key) in seen:
                return False
            seen.add(id(key))
            underlying = next((t for t in key.package.types if t.name == key.name), None)
            if underlying is None:
                return False
            key = underlying.type_expr
            continue
        return False


def _map_to_schema(pkg: Package, expr: tuple) -> JSONSchemaProps:
    key, value = expr[1], expr[2]
    if not _resolves_to_string(key):
        pkg.add_error(ValueError(f"map keys must be strings, not {key}"))
        return JSONSchemaProps()

    if isinstance(value, (str, TypeIdent)) and value != "struct":
        val_schema = _named_to_schema(pkg, value)
    elif isinstance(value, tuple) and value and value[0] == "array":
        val_schema = _array_to_schema(pkg, value)
        inner: Optional[JSONSchemaProps] = val_schema
        while inner is not None and inner.type == "array":
            inner = inner.items.schema if inner.items is not None else None
        if inner is None or inner.type != "string":
            pkg.add_error(ValueError(f"map values must be a named type, not {value!r}"))
            return JSONSchemaProps()
    elif isinstance(value, tuple) and value and value[0] == "pointer":
        val_schema = _type_to_schema(TypeInfo(), pkg, value)
    else:
        pkg.add_error(ValueError(f"map values must be a named type, not {value!r}"))
        return JSONSchemaProps()

    return JSONSchemaProps(
        type="object",
        additional_properties=JSONSchemaPropsOrBool(schema=val_schema, allows=True),
    )


def _struct_to_schema(info: TypeInfo, pkg: Package, top: bool) -> JSONSchemaProps:
    props = JSONSchemaProps(type="object", properties={})
    if not top:
        pkg.add_error(
            ValueError("encountered non-top-level struct (possibly embedded), those aren't allowed")
        )
        return props

    default_optional = "kubebuilder:validation:Optional" in pkg.markers

    for fld in info.fields:
        if fld.json_tag is None:
            pkg.add_error(
                ValueError(
                    f'encountered struct field "{fld.name}" without JSON tag in type "{info.name}"'
                )
            )
            continue
        opts = fld.json_tag.split(",")
        if opts == ["-"]:
            continue
        inline = "inline" in opts[1:]
        omit_empty = "omitempty" in opts[1:]
        field_name = opts[0]
        inline = inline or field_name == ""

        if default_optional:
            if "kubebuilder:validation:Required" in fld.markers:
                props.required = (props.required or []) + [field_name]
        elif (
            not inline
            and not omit_empty
            and "kubebuilder:validation:Optional" not in fld.markers
            and "optional" not in fld.markers
        ):
            props.required = (props.required or []) + [field_name]

        prop_schema = _type_to_schema(TypeInfo(), pkg, fld.type_expr)
        prop_schema.description = fld.doc
        apply_markers(fld.markers, prop_schema, pkg)

        if inline:
            props.all_of = (props.all_of or []) + [prop_schema]
            continue
        props.properties[field_name] = prop_schema

    return props