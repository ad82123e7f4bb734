"""Markers that modify a CustomResourceDefinition outside of its validation schema."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Optional

from crdgen.apiext import (
    NAMESPACE_SCOPED,
    CustomResourceColumnDefinition,
    CustomResourceDefinitionSpec,
    CustomResourceDefinitionVersion,
    CustomResourceSubresourceScale,
    CustomResourceSubresources,
    CustomResourceSubresourceStatus,
)


def _find_version(
    crd: CustomResourceDefinitionSpec, version: str
) -> Optional[CustomResourceDefinitionVersion]:
    return next((ver for ver in crd.versions or () if ver.name == version), None)


def _subresources_for(
    crd: CustomResourceDefinitionSpec, version: str
) -> Optional[CustomResourceSubresources]:
    ver = _find_version(crd, version)
    if ver is None:
        return None
    if ver.subresources is None:
        ver.subresources = CustomResourceSubresources()
    return ver.subresources


@dataclass(frozen=True)
class SubresourceStatus:
    """Enables the "/status" subresource on a CRD."""

    def apply_to_crd(self, crd: CustomResourceDefinitionSpec, version: str) -> None:
        subresources = _subresources_for(crd, version)
        if subresources is None:
            raise ValueError(
                f"status subresource applied to version {json.dumps(version)} not in CRD"
            )
        subresources.status = CustomResourceSubresourceStatus()


@dataclass(frozen=True)
class SubresourceScale:
    """Enables the "/scale" subresource on a CRD."""

    spec_path: str = ""
    status_path: str = ""
    selector_path: Optional[str] = None

    def apply_to_crd(self, crd: CustomResourceDefinitionSpec, version: str) -> None:
        subresources = _subresources_for(crd, version)
        if subresources is None:
            raise ValueError(
                f"scale subresource applied to version {json.dumps(version)} not in CRD"
            )
        subresources.scale = CustomResourceSubresourceScale(
            spec_replicas_path=self.spec_path,
            status_replicas_path=self.status_path,
            label_selector_path=self.selector_path,
        )


@dataclass(frozen=True)
class StorageVersion:
    """Marks this version as the storage version of the CRD."""

    def apply_to_crd(self, crd: CustomResourceDefinitionSpec, version: str) -> None:
        if not version:
            return
        ver = _find_version(crd, version)
        if ver is not None:
            ver.storage = True


@dataclass(frozen=True)
class SkipVersion:
    """Removes this version from the CRD's versions."""

    def apply_to_crd(self, crd: CustomResourceDefinitionSpec, version: str) -> None:
        if not version:
            raise ValueError("cannot skip a version if there is only a single version")
        remaining = [ver for ver in crd.versions or () if ver.name != version]
        crd.versions = remaining or None


@dataclass(frozen=True)
class PrintColumn:
    """Adds a column to "kubectl get" output for this CRD."""

    name: str = ""
    type: str = ""
    json_path: str = ""
    description: str = ""
    format: str = ""
    priority: int = 0

    def apply_to_crd(self, crd: CustomResourceDefinitionSpec, version: str) -> None:
        ver = _find_version(crd, version)
        if ver is None:
            raise ValueError(
                f"printer columns applied to version {json.dumps(version)} not in CRD"
            )
        if ver.subresources is None:
            ver.subresources = CustomResourceSubresources()
        column = CustomResourceColumnDefinition(
            name=self.name,
            type=self.type,
            json_path=self.json_path,
            description=self.description,
            format=self.format,
            priority=self.priority,
        )
        ver.additional_printer_columns = (ver.additional_printer_columns or []) + [column]


@dataclass(frozen=True)
class Resource:
    """Configures naming and scope for a CRD."""

    path: str = ""
    short_name: Optional[list[str]] = field(default=None, hash=False)
    categories: Optional[list[str]] = field(default=None, hash=False)
    singular: str = ""
    scope: str = ""

    def apply_to_crd(self, crd: CustomResourceDefinitionSpec, version: str) -> None:
        if self.path:
            crd.names.plural = self.path
        if self.singular:
            crd.names.singular = self.singular
        crd.names.short_names = self.short_name
        crd.names.categories = self.categories
        crd.scope = self.scope or NAMESPACE_SCOPED


@dataclass(frozen=True)
class UnservedVersion:
    """Stops serving this version."""

    def apply_to_crd(self, crd: CustomResourceDefinitionSpec, version: str) -> None:
        ver = _find_version(crd, version)
        if ver is not None:
            ver.served = False