"""Schema overrides for well-known Kubernetes types that carry no markers."""

from __future__ import annotations

from typing import Any

from crdgen.apiext import JSONSchemaProps, JSONSchemaPropsOrBool
from crdgen.ident import Package, TypeIdent

QUANTITY_PATTERN = (
    "^(\\+|-)?(([0-9]+(\\.[0-9]*)?)|(\\.[0-9]+))(([KMGTPE]i)|[numkMGTPE]|"
    "([eE](\\+|-)?(([0-9]+(\\.[0-9]*)?)|(\\.[0-9]+))))?$"
)


def _int_or_string(**extra: Any) -> JSONSchemaProps:
    return JSONSchemaProps(
        x_int_or_string=True,
        any_of=[JSONSchemaProps(type="integer"), JSONSchemaProps(type="string")],
        **extra,
    )


def _metav1(parser: Any, pkg: Package) -> None:
    parser.schemata[TypeIdent(package=pkg, name="ObjectMeta")] = JSONSchemaProps(type="object")
    parser.schemata[TypeIdent(package=pkg, name="Time")] = JSONSchemaProps(
        type="string", format="date-time"
    )
    parser.schemata[TypeIdent(package=pkg, name="MicroTime")] = JSONSchemaProps(
        type="string", format="date-time"
    )
    parser.schemata[TypeIdent(package=pkg, name="Duration")] = JSONSchemaProps(type="string")
    # recursive structure: treat it as an arbitrary map
    parser.schemata[TypeIdent(package=pkg, name="Fields")] = JSONSchemaProps(
        type="object", additional_properties=JSONSchemaPropsOrBool(allows=True)
    )
    parser.add_package(pkg)


def _resource(parser: Any, pkg: Package) -> None:
    parser.schemata[TypeIdent(package=pkg, name="Quantity")] = _int_or_string(
        pattern=QUANTITY_PATTERN
    )


def _runtime(parser: Any, pkg: Package) -> None:
    parser.schemata[TypeIdent(package=pkg, name="RawExtension")] = JSONSchemaProps(type="object")
    parser.add_package(pkg)


def _unstructured(parser: Any, pkg: Package) -> None:
    parser.schemata[TypeIdent(package=pkg, name="Unstructured")] = JSONSchemaProps(type="object")
    parser.add_package(pkg)


def _intstr(parser: Any, pkg: Package) -> None:
    parser.schemata[TypeIdent(package=pkg, name="IntOrString")] = _int_or_string()


def _apiext_json(parser: Any, pkg: Package) -> None:
    parser.schemata[TypeIdent(package=pkg, name="JSON")] = JSONSchemaProps(
        x_preserve_unknown_fields=True
    )
    parser.add_package(pkg)


KNOWN_PACKAGES = {
    "k8s.io/apimachinery/pkg/apis/meta/v1": _metav1,
    "k8s.io/apimachinery/pkg/api/resource": _resource,
    "k8s.io/apimachinery/pkg/runtime": _runtime,
    "k8s.io/apimachinery/pkg/apis/meta/v1/unstructured": _unstructured,
    "k8s.io/apimachinery/pkg/util/intstr": _intstr,
    "k8s.io/apiextensions-apiserver/pkg/apis/apiextensions/v1beta1": _apiext_json,
    "k8s.io/apiextensions-apiserver/pkg/apis/apiextensions/v1": _apiext_json,
}


def add_known_types(parser: Any) -> None:
    """Register the overrides in ``KNOWN_PACKAGES`` with ``parser``."""
    parser.package_overrides.update(KNOWN_PACKAGES)