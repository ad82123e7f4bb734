"""Collecting types from packages and building schemata and CRDs from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from crdgen.apiext import (
    NAMESPACE_SCOPED,
    CustomResourceDefinition,
    CustomResourceDefinitionNames,
    CustomResourceDefinitionSpec,
    CustomResourceDefinitionVersion,
    CustomResourceValidation,
    JSONSchemaProps,
)
from crdgen.description import truncate_description
from crdgen.flatten import Flattener, flatten_embedded
from crdgen.ident import GroupKind, GroupVersion, Package, TypeIdent, TypeInfo
from crdgen.schema import info_to_schema

PackageOverride = Callable[["Parser", Package], None]

_UNCOUNTABLE = frozenset(
    {
        "equipment", "information", "rice", "money", "species", "series",
        "fish", "sheep", "deer", "news", "data", "metadata", "moose", "police",
    }
)
_IRREGULAR = {
    "person": "people",
    "man": "men",
    "woman": "women",
    "child": "children",
    "tooth": "teeth",
    "foot": "feet",
    "mouse": "mice",
    "goose": "geese",
    "ox": "oxen",
    "quiz": "quizzes",
    "index": "indices",
    "matrix": "matrices",
    "vertex": "vertices",
    "analysis": "analyses",
    "crisis": "crises",
    "thesis": "theses",
    "criterion": "criteria",
    "datum": "data",
}
_VES_ENDINGS = (("knife", "knives"), ("wife", "wives"), ("life", "lives"), ("lf", "lves"), ("eaf", "eaves"))
_ES_ENDINGS = ("s", "x", "z", "ch", "sh")
_VOWELS = frozenset("aeiou")


def pluralize(word: str) -> str:
    """Return the English plural of ``word``."""
    if not word:
        return word
    lower = word.lower()
    if lower in _UNCOUNTABLE:
        return word
    if lower in _IRREGULAR.values():
        return word
    if lower in _IRREGULAR:
        plural = _IRREGULAR[lower]
        return word[0] + plural[1:] if word[0].isupper() else plural
    for singular_end, plural_end in _VES_ENDINGS:
        if lower.endswith(singular_end):
            return word[: len(word) - len(singular_end)] + plural_end
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in _VOWELS:
        return word[:-1] + "ies"
    if lower.endswith(_ES_ENDINGS):
        return word + "es"
    return word + "s"


def _non_vendor_path(path: str) -> str:
    idx = path.rfind("/vendor/")
    if idx >= 0:
        return path[idx + len("/vendor/"):]
    if path.startswith("vendor/"):
        return path[len("vendor/"):]
    return path


def _first_marker(markers: dict[str, list[Any]], name: str) -> Any:
    values = markers.get(name)
    if not values:
        return None
    return values[0]


@dataclass(eq=False)
class Parser:
    """Collects type information and generates schemata and CRDs on demand.

    Every ``need_*`` method caches its result and may be called repeatedly.
    Errors are recorded on the relevant package.
    """

    types: dict[TypeIdent, TypeInfo] = field(default_factory=dict)
    schemata: dict[TypeIdent, JSONSchemaProps] = field(default_factory=dict)
    group_versions: dict[Package, GroupVersion] = field(default_factory=dict)
    custom_resource_definitions: dict[GroupKind, CustomResourceDefinition] = field(
        default_factory=dict
    )
    flattened_schemata: dict[TypeIdent, JSONSchemaProps] = field(default_factory=dict)
    package_overrides: dict[str, PackageOverride] = field(default_factory=dict)
    _packages: set[Package] = field(default_factory=set, init=False, repr=False)
    _flattener: Flattener = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._flattener = Flattener(parser=self)

    def _index_types(self, pkg: Package) -> None:
        if "kubebuilder:skip" in pkg.markers:
            return
        group = _first_marker(pkg.markers, "groupName")
        if group is not None:
            version = _first_marker(pkg.markers, "versionName")
            self.group_versions[pkg] = GroupVersion(
                group=group, version=version if version is not None else pkg.name
            )
        for info in pkg.types:
            self.types[TypeIdent(package=pkg, name=info.name)] = info

    def lookup_type(self, pkg: Package, name: str) -> Optional[TypeInfo]:
        """Return the known type information for ``name`` in ``pkg``, if any."""
        return self.types.get(TypeIdent(package=pkg, name=name))

    def need_schema_for(self, typ: TypeIdent) -> None:
        """Generate the (unflattened) schema for ``typ``."""
        self.need_package(typ.package)
        if typ in self.schemata:
            return
        info = self.types.get(typ)
        if info is None:
            typ.package.add_error(LookupError(f"unknown type {typ}"))
            return
        # a placeholder breaks cycles in recursive types
        self.schemata[typ] = JSONSchemaProps()
        self.schemata[typ] = info_to_schema(info, typ.package)

    def need_flattened_schema_for(self, typ: TypeIdent) -> None:
        """Generate the schema for ``typ`` with references and embeddings resolved."""
        if typ in self.flattened_schemata:
            return
        self.need_schema_for(typ)
        partial = self._flattener.flatten_type(typ)
        if partial is None:
            return
        self.flattened_schemata[typ] = flatten_embedded(partial, typ.package)

    def add_package(self, pkg: Package) -> None:
        """Index the types of ``pkg``, ignoring any override."""
        if pkg in self._packages:
            return
        self._index_types(pkg)
        self._packages.add(pkg)

    def need_package(self, pkg: Package) -> None:
        """Load ``pkg``, going through its override when one is registered."""
        if pkg in self._packages:
            return
        override = self.package_overrides.get(_non_vendor_path(pkg.pkg_path))
        if override is not None:
            override(self, pkg)
            self._packages.add(pkg)
            return
        self.add_package(pkg)

    def need_crd_for(self, group_kind: GroupKind, max_desc_len: Optional[int]) -> None:
        """Build the CRD for ``group_kind`` from the already loaded packages."""
        if group_kind in self.custom_resource_definitions:
            return

        packages = [
            pkg for pkg, gv in self.group_versions.items() if gv.group == group_kind.group
        ]

        default_plural = pluralize(group_kind.kind.lower())
        crd = CustomResourceDefinition(
            name=f"{default_plural}.{group_kind.group}",
            spec=CustomResourceDefinitionSpec(
                group=group_kind.group,
                names=CustomResourceDefinitionNames(
                    kind=group_kind.kind,
                    list_kind=group_kind.kind + "List",
                    plural=default_plural,
                    singular=group_kind.kind.lower(),
                ),
                scope=NAMESPACE_SCOPED,
            ),
        )

        for pkg in packages:
            ident = TypeIdent(package=pkg, name=group_kind.kind)
            if ident not in self.types:
                continue
            self.need_flattened_schema_for(ident)
            flattened = self.flattened_schemata.get(ident)
            if flattened is None:
                continue
            full_schema = flattened.deep_copy()
            if max_desc_len is not None:
                truncate_description(full_schema, max_desc_len)
            version = CustomResourceDefinitionVersion(
                name=self.group_versions[pkg].version,
                served=True,
                schema=CustomResourceValidation(open_api_v3_schema=full_schema),
            )
            crd.spec.versions = (crd.spec.versions or []) + [version]

        for pkg in packages:
            info = self.types.get(TypeIdent(package=pkg, name=group_kind.kind))
            if info is None:
                continue
            version_name = self.group_versions[pkg].version
            for values in info.markers.values():
                for value in values:
                    apply = getattr(value, "apply_to_crd", None)
                    if apply is None:
                        continue
                    try:
                        apply(crd.spec, version_name)
                    except (ValueError, TypeError) as err:
                        pkg.add_error(err)

        crd.name = f"{crd.spec.names.plural}.{group_kind.group}"

        if not crd.spec.versions:
            return

        crd.spec.versions.sort(key=lambda ver: ver.name)

        if len(crd.spec.versions) == 1:
            crd.spec.versions[0].storage = True

        if not any(ver.storage for ver in crd.spec.versions):
            packages[0].add_error(ValueError(f"CRD for {group_kind} has no storage version"))

        if not any(ver.served for ver in crd.spec.versions):
            names = [ver.name for ver in crd.spec.versions]
            packages[0].add_error(
                ValueError(f"CRD for {group_kind} with version(s) {names} does not serve any version")
            )

        crd.conditions = []
        crd.stored_versions = []

        self.custom_resource_definitions[group_kind] = crd