"""Build a :class:`Scope` from a declarative (YAML or JSON) tree description."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .config import FormatConfig
from .model import Block, Enum, Function, Impl, ItemContainer, Struct, Trait, TypeAlias, TypeDef, make_import
from .scope import Scope
from .types import BlockSpec, FieldSpec, FunctionSpec, ScopeSpec

logger = logging.getLogger(__name__)

ITEM_KINDS: tuple[str, ...] = ("struct", "enum", "fn", "impl", "trait", "module", "type_alias", "raw")


def _str_list(data: Dict[str, Any], key: str, where: str) -> List[str]:
    raw: Any = data.get(key, [])
    if isinstance(raw, str):
        return [raw]
    if not isinstance(raw, list) or not all(isinstance(v, str) for v in raw):
        raise ValueError(f"{where}: '{key}' must be a string or a list of strings")
    return raw


def _opt_str(data: Dict[str, Any], key: str, where: str) -> Optional[str]:
    raw: Any = data.get(key)
    if raw is not None and not isinstance(raw, str):
        raise ValueError(f"{where}: '{key}' must be a string")
    return raw


def _mappings(data: Dict[str, Any], key: str, where: str) -> List[Dict[str, Any]]:
    raw: Any = data.get(key, [])
    if not isinstance(raw, list) or not all(isinstance(v, dict) for v in raw):
        raise ValueError(f"{where}: '{key}' must be a list of mappings")
    return raw


def _field_parts(spec: FieldSpec, where: str) -> tuple[str, str]:
    name: Any = spec.get("name")
    ty: Any = spec.get("type")
    if not isinstance(name, str) or not isinstance(ty, str):
        raise ValueError(f"{where}: fields need string 'name' and 'type'")
    return name, ty


def _apply_imports(target: Any, raw: Any, where: str) -> None:
    if raw is None:
        return
    if not isinstance(raw, list):
        raise ValueError(f"{where}: 'imports' must be a list")
    for entry in raw:
        if isinstance(entry, str):
            target.imports.append(make_import(entry))
        elif isinstance(entry, dict) and isinstance(entry.get("path"), str):
            name = _opt_str(entry, "name", f"{where} import {entry['path']}")
            vis = _opt_str(entry, "vis", f"{where} import {entry['path']}")
            target.imports.append(make_import(entry["path"], name, vis))
        else:
            raise ValueError(f"{where}: import entries must be a path string or a mapping with 'path'")


def _apply_type_def(td: TypeDef, spec: Dict[str, Any], where: str) -> None:
    vis = _opt_str(spec, "vis", where)
    if vis:
        td.visibility = vis
    doc = _opt_str(spec, "doc", where)
    if doc is not None:
        td.docs.extend(doc.splitlines() or [""])
    for g in _str_list(spec, "generics", where):
        td.ty.generic(g)
    td.derives.extend(_str_list(spec, "derive", where))
    td.allows.extend(_str_list(spec, "allow", where))
    td.macros.extend(_str_list(spec, "macros", where))
    repr_hint = _opt_str(spec, "repr", where)
    if repr_hint:
        td.repr_hint = repr_hint


def _apply_bounds(target: Any, spec: Dict[str, Any], where: str) -> None:
    for b in _mappings(spec, "bounds", where):
        if not isinstance(b.get("name"), str) or not isinstance(b.get("bound"), str):
            raise ValueError(f"{where}: bounds need string 'name' and 'bound'")
        target.bound(b["name"], b["bound"])


def _block(spec: BlockSpec, where: str) -> Block:
    block = Block(_opt_str(spec, "block", where))  # type: ignore[arg-type]
    for stmt in _body(spec.get("body", []), where):
        block.body.append(stmt)
    after = _opt_str(spec, "after", where)  # type: ignore[arg-type]
    if after is not None:
        block.after(after)
    return block


def _body(raw: Any, where: str) -> List[Any]:
    if not isinstance(raw, list):
        raise ValueError(f"{where}: 'body' must be a list")
    out: List[Any] = []
    for stmt in raw:
        if isinstance(stmt, str):
            out.append(stmt)
        elif isinstance(stmt, dict) and "block" in stmt:
            out.append(_block(stmt, where))  # type: ignore[arg-type]
        else:
            raise ValueError(f"{where}: body entries must be strings or mappings with 'block'")
    return out


def build_function(spec: FunctionSpec, where: str, bodiless: bool = False) -> Function:
    data: Dict[str, Any] = dict(spec)
    name = _opt_str(data, "fn", where)
    if not name:
        raise ValueError(f"{where}: 'fn' must name the function")
    func = Function(name, body=None if bodiless else [])
    where = f"{where} fn {name}"
    vis = _opt_str(data, "vis", where)
    if vis:
        func.vis(vis)
    doc = _opt_str(data, "doc", where)
    if doc is not None:
        func.doc(doc)
    func.allows.extend(_str_list(data, "allow", where))
    func.attributes.extend(_str_list(data, "attrs", where))
    abi = _opt_str(data, "extern", where)
    if abi:
        func.extern_abi(abi)
    is_async: Any = data.get("is_async", False)
    if not isinstance(is_async, bool):
        raise ValueError(f"{where}: 'is_async' must be true or false")
    func.set_async(is_async)
    func.generics.extend(_str_list(data, "generics", where))
    self_arg = _opt_str(data, "self", where)
    if self_arg:
        func.self_arg = self_arg
    for arg in _mappings(data, "args", where):
        func.arg(*_field_parts(arg, where))  # type: ignore[arg-type]
    ret = _opt_str(data, "ret", where)
    if ret:
        func.ret(ret)
    _apply_bounds(func, data, where)
    if "body" in data:
        func.body = _body(data["body"], where)
    _apply_imports(func, data.get("imports"), where)
    return func


def _build_struct(spec: Dict[str, Any], where: str) -> Struct:
    item = Struct(spec["struct"])
    _apply_type_def(item.type_def, spec, where)
    _apply_bounds(item, spec, where)
    for fspec in _mappings(spec, "fields", where):
        fld = item.new_field(*_field_parts(fspec, where))  # type: ignore[arg-type]
        vis = _opt_str(fspec, "vis", where)
        if vis:
            fld.vis(vis)
        doc = _opt_str(fspec, "doc", where)
        if doc is not None:
            fld.doc(doc)
        fld.annotations.extend(_str_list(fspec, "annotations", where))
    for ty in _str_list(spec, "tuple", where):
        item.tuple_field(ty)
    _apply_imports(item, spec.get("imports"), where)
    return item


def _build_enum(spec: Dict[str, Any], where: str) -> Enum:
    item = Enum(spec["enum"])
    _apply_type_def(item.type_def, spec, where)
    _apply_bounds(item, spec, where)
    for vspec in _mappings(spec, "variants", where):
        if not isinstance(vspec.get("name"), str):
            raise ValueError(f"{where}: variants need a string 'name'")
        variant = item.new_variant(vspec["name"])
        doc = _opt_str(vspec, "doc", where)
        if doc is not None:
            variant.doc(doc)
        variant.annotations.extend(_str_list(vspec, "annotations", where))
        for ty in _str_list(vspec, "tuple", where):
            variant.tuple(ty)
        for fspec in _mappings(vspec, "fields", where):
            variant.named(*_field_parts(fspec, where))  # type: ignore[arg-type]
    _apply_imports(item, spec.get("imports"), where)
    return item


def _build_impl(spec: Dict[str, Any], where: str) -> Impl:
    item = Impl(spec["impl"])
    item.generics.extend(_str_list(spec, "generics", where))
    trait = _opt_str(spec, "impl_trait", where)
    if trait:
        item.impl_trait(trait)
    item.macros.extend(_str_list(spec, "macros", where))
    _apply_bounds(item, spec, where)
    for assoc in _mappings(spec, "types", where):
        item.associate_type(*_field_parts(assoc, where))  # type: ignore[arg-type]
    for const in _mappings(spec, "consts", where):
        name, ty = _field_parts(const, where)  # type: ignore[arg-type]
        item.associate_const(name, ty, str(const.get("value", "")))
    for i, fspec in enumerate(_mappings(spec, "fns", where)):
        item.push_fn(build_function(fspec, f"{where} fns[{i}]"))  # type: ignore[arg-type]
    _apply_imports(item, spec.get("imports"), where)
    return item


def _build_trait(spec: Dict[str, Any], where: str) -> Trait:
    item = Trait(spec["trait"])
    _apply_type_def(item.type_def, spec, where)
    _apply_bounds(item, spec, where)
    for parent in _str_list(spec, "parents", where):
        item.parent(parent)
    for assoc in _mappings(spec, "types", where):
        if not isinstance(assoc.get("name"), str):
            raise ValueError(f"{where}: associated types need a string 'name'")
        handle = item.associated_type(assoc["name"])
        for b in _str_list(assoc, "bounds", where):
            handle.bound(b)
    for const in _mappings(spec, "consts", where):
        name, ty = _field_parts(const, where)  # type: ignore[arg-type]
        handle_c = item.associated_const(name, ty)
        if const.get("value") is not None:
            handle_c.value(str(const["value"]))
    for i, fspec in enumerate(_mappings(spec, "fns", where)):
        item.push_fn(build_function(fspec, f"{where} fns[{i}]", bodiless="body" not in fspec))  # type: ignore[arg-type]
    _apply_imports(item, spec.get("imports"), where)
    return item


def _build_type_alias(spec: Dict[str, Any], where: str) -> TypeAlias:
    target = _opt_str(spec, "target", where)
    if not target:
        raise ValueError(f"{where}: type aliases need a 'target'")
    item = TypeAlias(spec["type_alias"], target)
    _apply_type_def(item.type_def, spec, where)
    _apply_bounds(item, spec, where)
    _apply_imports(item, spec.get("imports"), where)
    return item


def populate(container: ItemContainer, data: Dict[str, Any], where: str = "scope") -> ItemContainer:
    """Add the imports and items described by ``data`` to ``container``."""
    _apply_imports(container, data.get("imports"), where)
    for i, spec in enumerate(_mappings(data, "items", where)):
        loc = f"{where} items[{i}]"
        kinds = [k for k in ITEM_KINDS if k in spec]
        if len(kinds) != 1:
            raise ValueError(f"{loc}: expected exactly one of {', '.join(ITEM_KINDS)}")
        kind = kinds[0]
        if not isinstance(spec[kind], str):
            raise ValueError(f"{loc}: '{kind}' must be a string")

        if kind == "struct":
            container.push_struct(_build_struct(spec, loc))
        elif kind == "enum":
            container.push_enum(_build_enum(spec, loc))
        elif kind == "fn":
            container.push_fn(build_function(spec, loc))  # type: ignore[arg-type]
        elif kind == "impl":
            container.push_impl(_build_impl(spec, loc))
        elif kind == "trait":
            container.push_trait(_build_trait(spec, loc))
        elif kind == "type_alias":
            container.push_type_alias(_build_type_alias(spec, loc))
        elif kind == "module":
            module = container.new_module(spec["module"])
            vis = _opt_str(spec, "vis", loc)
            if vis:
                module.vis(vis)
            doc = _opt_str(spec, "doc", loc)
            if doc is not None:
                module.doc(doc)
            populate(module, spec, f"{loc} module {spec['module']}")
        else:
            container.raw(spec["raw"])
    return container


def scope_from_dict(data: ScopeSpec) -> Scope:
    if not isinstance(data, dict):
        raise ValueError("description must be a mapping")
    scope = Scope()
    populate(scope, dict(data))
    logger.debug("loaded scope with %d item(s)", len(scope.items))
    return scope


def config_from_dict(data: ScopeSpec) -> FormatConfig:
    raw: Any = data.get("format")
    if raw is not None and not isinstance(raw, dict):
        raise ValueError("'format' must be a mapping")
    return FormatConfig.from_mapping(raw)


def load_description(path: Path) -> ScopeSpec:
    """Read a YAML (or JSON) description file."""
    data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    return data  # type: ignore[return-value]
