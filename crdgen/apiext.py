"""Data model for CustomResourceDefinition objects and their OpenAPI v3 schemata."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Optional, Union

GROUP = "apiextensions.k8s.io"
VERSION = "v1"
API_VERSION = f"{GROUP}/{VERSION}"

NAMESPACE_SCOPED = "Namespaced"
CLUSTER_SCOPED = "Cluster"


@dataclass
class JSON:
    """A raw, already-serialized JSON value."""

    raw: bytes = b""


@dataclass
class ExternalDocumentation:
    """A pointer to documentation living outside the schema."""

    description: str = ""
    url: str = ""


@dataclass
class JSONSchemaProps:
    """A JSON schema node, as used in CRD validation.

    Unset lists and maps are ``None``; an empty list is a distinct value.
    Field order matters: flattening walks the fields in this order.
    """

    id: str = ""
    schema: str = ""
    ref: Optional[str] = None
    description: str = ""
    type: str = ""
    format: str = ""
    title: str = ""
    default: Optional[JSON] = None
    maximum: Optional[float] = None
    exclusive_maximum: bool = False
    minimum: Optional[float] = None
    exclusive_minimum: bool = False
    max_length: Optional[int] = None
    min_length: Optional[int] = None
    pattern: str = ""
    max_items: Optional[int] = None
    min_items: Optional[int] = None
    unique_items: bool = False
    multiple_of: Optional[float] = None
    enum: Optional[list[JSON]] = None
    max_properties: Optional[int] = None
    min_properties: Optional[int] = None
    required: Optional[list[str]] = None
    items: Optional[JSONSchemaPropsOrArray] = None
    all_of: Optional[list[JSONSchemaProps]] = None
    one_of: Optional[list[JSONSchemaProps]] = None
    any_of: Optional[list[JSONSchemaProps]] = None
    not_: Optional[JSONSchemaProps] = None
    properties: Optional[dict[str, JSONSchemaProps]] = None
    additional_properties: Optional[JSONSchemaPropsOrBool] = None
    pattern_properties: Optional[dict[str, JSONSchemaProps]] = None
    # each value is either a schema or a list of property names
    dependencies: Optional[dict[str, Union[JSONSchemaProps, list[str]]]] = None
    additional_items: Optional[JSONSchemaPropsOrBool] = None
    definitions: Optional[dict[str, JSONSchemaProps]] = None
    external_docs: Optional[ExternalDocumentation] = None
    example: Optional[JSON] = None
    nullable: bool = False
    x_preserve_unknown_fields: Optional[bool] = None
    x_embedded_resource: bool = False
    x_int_or_string: bool = False
    x_list_map_keys: Optional[list[str]] = None
    x_list_type: Optional[str] = None
    x_map_type: Optional[str] = None

    def deep_copy(self) -> JSONSchemaProps:
        """Return a fully independent copy of this schema."""
        return copy.deepcopy(self)


@dataclass
class JSONSchemaPropsOrBool:
    """Either a schema or a plain allow/deny flag."""

    allows: bool = False
    schema: Optional[JSONSchemaProps] = None


@dataclass
class JSONSchemaPropsOrArray:
    """Either a single schema or a list of schemata (for tuple validation)."""

    schema: Optional[JSONSchemaProps] = None
    json_schemas: Optional[list[JSONSchemaProps]] = None


@dataclass
class CustomResourceValidation:
    """The validation block of a CRD version."""

    open_api_v3_schema: Optional[JSONSchemaProps] = None


@dataclass
class CustomResourceSubresourceStatus:
    """Enables the status subresource."""


@dataclass
class CustomResourceSubresourceScale:
    """Configures the scale subresource."""

    spec_replicas_path: str = ""
    status_replicas_path: str = ""
    label_selector_path: Optional[str] = None


@dataclass
class CustomResourceSubresources:
    """The subresources served for a CRD version."""

    status: Optional[CustomResourceSubresourceStatus] = None
    scale: Optional[CustomResourceSubresourceScale] = None


@dataclass
class CustomResourceColumnDefinition:
    """An additional column shown by ``kubectl get``."""

    name: str = ""
    type: str = ""
    format: str = ""
    description: str = ""
    priority: int = 0
    json_path: str = ""


@dataclass
class CustomResourceDefinitionVersion:
    """One served version of a CRD."""

    name: str = ""
    served: bool = False
    storage: bool = False
    schema: Optional[CustomResourceValidation] = None
    subresources: Optional[CustomResourceSubresources] = None
    additional_printer_columns: Optional[list[CustomResourceColumnDefinition]] = None


@dataclass
class CustomResourceDefinitionNames:
    """The names under which a CRD is addressed."""

    plural: str = ""
    singular: str = ""
    short_names: Optional[list[str]] = None
    kind: str = ""
    list_kind: str = ""
    categories: Optional[list[str]] = None


@dataclass
class CustomResourceDefinitionSpec:
    """The specification of a CRD."""

    group: str = ""
    names: CustomResourceDefinitionNames = field(default_factory=CustomResourceDefinitionNames)
    scope: str = ""
    versions: Optional[list[CustomResourceDefinitionVersion]] = None
    preserve_unknown_fields: bool = False


@dataclass
class CustomResourceDefinition:
    """A complete CustomResourceDefinition object."""

    api_version: str = API_VERSION
    kind: str = "CustomResourceDefinition"
    name: str = ""
    annotations: Optional[dict[str, str]] = None
    spec: CustomResourceDefinitionSpec = field(default_factory=CustomResourceDefinitionSpec)
    conditions: Optional[list[Any]] = None
    stored_versions: Optional[list[str]] = None

    def deep_copy(self) -> CustomResourceDefinition:
        """Return a fully independent copy of this CRD."""
        return copy.deepcopy(self)