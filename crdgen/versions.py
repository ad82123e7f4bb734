"""The legacy (v1beta1) CRD form and the utilities that shape CRDs for output."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Optional

from crdgen.apiext import (
    GROUP,
    CustomResourceColumnDefinition,
    CustomResourceDefinition,
    CustomResourceDefinitionNames,
    CustomResourceDefinitionVersion,
    CustomResourceSubresources,
    CustomResourceValidation,
)

LEGACY_API_VERSION = f"{GROUP}/v1beta1"
ATTRIBUTION_ANNOTATION = "controller-gen.kubebuilder.io/version"


@dataclass
class LegacyCustomResourceDefinitionSpec:
    """The specification of a v1beta1 CRD.

    Unlike v1, it carries top-level validation, subresources and printer
    columns that apply to every version.
    """

    group: str = ""
    names: CustomResourceDefinitionNames = field(default_factory=CustomResourceDefinitionNames)
    scope: str = ""
    validation: Optional[CustomResourceValidation] = None
    subresources: Optional[CustomResourceSubresources] = None
    versions: Optional[list[CustomResourceDefinitionVersion]] = None
    additional_printer_columns: Optional[list[CustomResourceColumnDefinition]] = None
    preserve_unknown_fields: Optional[bool] = None


@dataclass
class LegacyCustomResourceDefinition:
    """A complete v1beta1 CustomResourceDefinition object."""

    api_version: str = LEGACY_API_VERSION
    kind: str = "CustomResourceDefinition"
    name: str = ""
    annotations: Optional[dict[str, str]] = None
    spec: LegacyCustomResourceDefinitionSpec = field(
        default_factory=LegacyCustomResourceDefinitionSpec
    )
    conditions: Optional[list[Any]] = None
    stored_versions: Optional[list[str]] = None

    def deep_copy(self) -> LegacyCustomResourceDefinition:
        """Return a fully independent copy of this CRD."""
        return copy.deepcopy(self)


def _merge_identical_subresources(crd: LegacyCustomResourceDefinition) -> None:
    versions = crd.spec.versions
    subres = versions[0].subresources
    if any(ver.subresources is None or ver.subresources != subres for ver in versions):
        return
    crd.spec.subresources = subres
    for ver in versions:
        ver.subresources = None


def _merge_identical_schemata(crd: LegacyCustomResourceDefinition) -> None:
    versions = crd.spec.versions
    schema = versions[0].schema
    if any(ver.schema is None or ver.schema != schema for ver in versions):
        return
    crd.spec.validation = schema
    for ver in versions:
        ver.schema = None


def _merge_identical_printer_columns(crd: LegacyCustomResourceDefinition) -> None:
    versions = crd.spec.versions
    cols = versions[0].additional_printer_columns
    if any(
        not ver.additional_printer_columns or ver.additional_printer_columns != cols
        for ver in versions
    ):
        return
    crd.spec.additional_printer_columns = cols
    for ver in versions:
        ver.additional_printer_columns = None


def merge_identical_version_info(crd: LegacyCustomResourceDefinition) -> None:
    """Move per-version info that is identical across all versions to the top level.

    Subresources, schemata and printer columns are each merged independently.
    """
    if crd.spec.versions:
        _merge_identical_subresources(crd)
        _merge_identical_schemata(crd)
        _merge_identical_printer_columns(crd)


def to_trivial_versions(crd: LegacyCustomResourceDefinition) -> None:
    """Keep only the storage version's schema info, moved to the top level.

    Per-version schemata, subresources and printer columns are always cleared;
    the top-level fields are set only when a storage version has a schema.
    """
    canonical_schema = None
    canonical_subresources = None
    canonical_columns = None
    for ver in crd.spec.versions or ():
        if ver.storage:
            canonical_schema = ver.schema
            canonical_subresources = ver.subresources
            canonical_columns = ver.additional_printer_columns
        ver.schema = None
        ver.subresources = None
        ver.additional_printer_columns = None
    if canonical_schema is None:
        return
    crd.spec.validation = canonical_schema
    crd.spec.subresources = canonical_subresources
    crd.spec.additional_printer_columns = canonical_columns


def add_attribution(crd: CustomResourceDefinition, version: str) -> None:
    """Annotate ``crd`` with the version of the generator that produced it."""
    if crd.annotations is None:
        crd.annotations = {}
    crd.annotations[ATTRIBUTION_ANNOTATION] = version