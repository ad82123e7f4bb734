"""Identifiers for packages, types and API group coordinates."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class TypeInfo:
    """Describes a declared type, or a field of a struct type.

    ``type_expr`` holds the declared type expression.  For struct fields,
    ``json_tag`` is the value of the field's ``json`` tag, or ``None`` when
    the field carries no such tag.
    """

    name: str = ""
    doc: str = ""
    markers: dict[str, list[Any]] = field(default_factory=dict)
    fields: list[TypeInfo] = field(default_factory=list)
    type_expr: Any = None
    json_tag: Optional[str] = None


@dataclass(eq=False)
class Package:
    """A loaded package of types; compared and hashed by identity.

    Errors found while processing the package are collected in ``errors``.
    """

    pkg_path: str = ""
    name: str = ""
    id: str = ""
    imports: dict[str, Package] = field(default_factory=dict)
    markers: dict[str, list[Any]] = field(default_factory=dict)
    types: list[TypeInfo] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.id:
            self.id = self.pkg_path

    def add_error(self, err: Exception) -> None:
        """Record that the given error occurred while processing this package."""
        self.errors.append(err)


@dataclass(frozen=True)
class TypeIdent:
    """A named type within a package."""

    package: Package
    name: str

    def __str__(self) -> str:
        return f"{json.dumps(self.package.id)}.{self.name}"


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with a version."""

    group: str = ""
    version: str = ""

    def __str__(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"


@dataclass(frozen=True)
class GroupKind:
    """An API group together with a kind."""

    group: str = ""
    kind: str = ""

    def __str__(self) -> str:
        if not self.group:
            return self.kind
        return f"{self.kind}.{self.group}"