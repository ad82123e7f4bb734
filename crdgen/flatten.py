"""Flattening references and embedded ``allOf`` branches out of schemata."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Optional

from crdgen.apiext import JSONSchemaProps, JSONSchemaPropsOrBool
from crdgen.ident import Package, TypeIdent
from crdgen.schema import DEF_PREFIX
from crdgen.visitor import SchemaVisitor, edit_schema

_SKIPPED_FIELDS = frozenset({"all_of", "title", "description", "example", "external_docs"})
_DOC_FIELDS = ("description", "title", "external_docs", "example")


def ref_parts(ref: str) -> tuple[str, str]:
    """Split a reference link into ``(type name, package path)``.

    The package path is empty for a local reference.
    """
    if not ref.startswith(DEF_PREFIX):
        raise ValueError(f"non-standard reference link {json.dumps(ref)}")
    ref = ref[len(DEF_PREFIX):].replace("~1", "/").replace("~0", "~")
    parts = ref.split("~", 1)
    if len(parts) == 1:
        return parts[0], ""
    return parts[1], parts[0]


def ident_from_ref(ref: str, context_pkg: Package) -> TypeIdent:
    """Resolve a reference link relative to ``context_pkg``."""
    typ, pkg_name = ref_parts(ref)
    if not pkg_name:
        return TypeIdent(package=context_pkg, name=typ)
    imported = context_pkg.imports.get(pkg_name)
    if imported is None:
        raise ValueError(f"unknown package {json.dumps(pkg_name)}")
    return TypeIdent(package=imported, name=typ)


def _assign(dst: JSONSchemaProps, src: JSONSchemaProps) -> None:
    for f in fields(JSONSchemaProps):
        setattr(dst, f.name, getattr(src, f.name))


def _is_zero(value: Any, default: Any) -> bool:
    return value is None if default is None else value == default


def _same(a: Any, b: Any, default: Any) -> bool:
    if default is None:
        if isinstance(a, (list, dict)):
            return False
        return a is b
    return a == b


def _flatten_all_of_into(dst: JSONSchemaProps, src: JSONSchemaProps, err_rec: Any) -> None:
    for embedded in src.all_of or ():
        _flatten_all_of_into(dst, embedded, err_rec)

    src_rem = JSONSchemaProps()
    dst_rem = JSONSchemaProps()
    hoisted = False

    for f in fields(JSONSchemaProps):
        name = f.name
        if name in _SKIPPED_FIELDS:
            continue
        default = f.default
        src_val = getattr(src, name)
        if _is_zero(src_val, default):
            continue
        dst_val = getattr(dst, name)
        if _is_zero(dst_val, default):
            setattr(dst, name, src_val)
            continue
        if _same(src_val, dst_val, default):
            continue

        if name == "properties":
            for key, value in src_val.items():
                if key not in dst_val:
                    dst_val[key] = value
                    continue
                merged = copy.copy(dst_val[key])
                _flatten_all_of_into(merged, value, err_rec)
                dst_val[key] = merged
        elif name == "required":
            dst.required = dst_val + src_val
        elif name == "type":
            err_rec.add_error(
                ValueError(f"conflicting types in allOf branches in schema: {dst_val} vs {src_val}")
            )
        elif name == "additional_properties":
            if src_val.schema is None:
                continue
            if dst_val.schema is None:
                dst_val.schema = JSONSchemaProps()
            _flatten_all_of_into(dst_val.schema, src_val.schema, err_rec)
        else:
            hoisted = True
            setattr(src_rem, name, src_val)
            setattr(dst_rem, name, dst_val)
            setattr(dst, name, default)

    if hoisted:
        dst.all_of = (dst.all_of or []) + [dst_rem, src_rem]

    if dst.required:
        dst.required = sorted(set(dst.required))


class _AllOfVisitor(SchemaVisitor):
    def __init__(self, err_rec: Any) -> None:
        self.err_rec = err_rec

    def visit(self, schema: Optional[JSONSchemaProps]) -> Optional[SchemaVisitor]:
        if schema is None:
            return self
        orig = schema.all_of
        schema.all_of = None
        for embedded in orig or ():
            _flatten_all_of_into(schema, embedded, self.err_rec)
        return self


def flatten_embedded(schema: JSONSchemaProps, err_rec: Any) -> JSONSchemaProps:
    """Return a copy of ``schema`` with resolved ``allOf`` branches merged in.

    Conflicts are reported through ``err_rec.add_error``.
    """
    out = schema.deep_copy()
    edit_schema(out, _AllOfVisitor(err_rec))
    return out


def _preserve_fields(dst: JSONSchemaProps, src: JSONSchemaProps) -> None:
    src = copy.copy(src)
    docs = {name: getattr(src, name) for name in _DOC_FIELDS}
    src.description, src.title, src.external_docs, src.example = "", "", None, None
    src.ref = None

    inner = copy.copy(dst)
    _assign(
        dst,
        JSONSchemaProps(
            all_of=[inner, src],
            description=inner.description,
            title=inner.title,
            external_docs=inner.external_docs,
            example=inner.example,
        ),
    )
    for name, value in docs.items():
        if value:
            setattr(dst, name, value)


@dataclass
class Flattener:
    """Flattens references out of types, caching each flattened type.

    ``parser`` must offer ``need_schema_for(typ)`` and a ``schemata`` mapping.
    """

    parser: Any
    lookup_reference: Optional[Callable[[str, Package], TypeIdent]] = None
    _flattened_types: dict[TypeIdent, JSONSchemaProps] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.lookup_reference is None:
            self.lookup_reference = ident_from_ref

    def _cache_type(self, typ: TypeIdent, schema: JSONSchemaProps) -> None:
        self._flattened_types[typ] = schema

    def _load_unflattened(self, typ: TypeIdent) -> JSONSchemaProps:
        self.parser.need_schema_for(typ)
        try:
            return self.parser.schemata[typ]
        except KeyError:
            raise LookupError(f"unable to locate schema for type {typ}") from None

    def flatten_type(self, typ: TypeIdent) -> Optional[JSONSchemaProps]:
        """Flatten a loaded type; errors are recorded on its package."""
        cached = self._flattened_types.get(typ)
        if cached is not None:
            return copy.copy(cached)
        try:
            base = self._load_unflattened(typ)
        except LookupError as err:
            typ.package.add_error(err)
            return None
        result = self.flatten_schema(base, typ.package)
        self._cache_type(typ, copy.copy(result))
        return result

    def flatten_schema(self, base_schema: JSONSchemaProps, current_package: Package) -> JSONSchemaProps:
        """Return a copy of ``base_schema`` with all references resolved."""
        result = base_schema.deep_copy()
        edit_schema(result, _FlattenVisitor(self, current_package))
        return result


class _FlattenVisitor(SchemaVisitor):
    def __init__(
        self,
        flattener: Flattener,
        current_package: Package,
        current_type: Optional[TypeIdent] = None,
        current_schema: Optional[JSONSchemaProps] = None,
        original_field: Optional[JSONSchemaProps] = None,
    ) -> None:
        self.flattener = flattener
        self.current_package = current_package
        self.current_type = current_type
        self.current_schema = current_schema
        self.original_field = original_field

    def visit(self, base: Optional[JSONSchemaProps]) -> Optional[SchemaVisitor]:
        fl = self.flattener
        if base is None:
            if self.current_type is not None:
                fl._cache_type(self.current_type, copy.copy(self.current_schema))
                _preserve_fields(self.current_schema, self.original_field)
            return self

        if base.ref:
            try:
                ref_ident = fl.lookup_reference(base.ref, self.current_package)
            except (ValueError, LookupError) as err:
                self.current_package.add_error(err)
                return None

            cached = fl._flattened_types.get(ref_ident)
            if cached is not None:
                cached = copy.copy(cached)
                _preserve_fields(cached, base)
                _assign(base, cached)
                return None

            try:
                ref_schema = fl._load_unflattened(ref_ident)
            except LookupError as err:
                self.current_package.add_error(err)
                return None
            ref_schema = ref_schema.deep_copy()

            orig_field = copy.copy(base)
            _assign(base, ref_schema)
            fl._cache_type(ref_ident, JSONSchemaProps())
            return _FlattenVisitor(fl, ref_ident.package, ref_ident, base, orig_field)

        if self.current_type is not None:
            return _FlattenVisitor(fl, self.current_package)
        return self


__all__ = [
    "Flattener",
    "JSONSchemaPropsOrBool",
    "flatten_embedded",
    "ident_from_ref",
    "ref_parts",
]