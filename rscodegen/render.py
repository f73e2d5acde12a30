"""Deterministic renderer from the element tree to Rust source text.

The renderer walks a scope in a fixed order: the import block, then each
item in insertion order with exactly one blank line between siblings. Item
kinds form a closed set; ``render_item`` dispatches over it and rejects
anything else. All formatting knobs come from the ``FormatConfig`` the
renderer was built with, so two renderers never share state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from .codegen import CodeBuilder
from .config import DEFAULT_CONFIG, FormatConfig
from .imports import collect_imports, emit_imports
from .model import (
    Block, Body, Bound, Enum, Field, Function, Impl, ItemContainer, Module, Raw,
    Struct, Trait, TypeAlias, TypeDef, Variant,
)

logger = logging.getLogger(__name__)

DOC_PREFIX = "///"
# width of "where " so later predicates line up under the first
WHERE_CONTINUATION = " " * len("where ")


def _derive_attr(names: Sequence[str]) -> str:
    return f"#[derive({', '.join(names)})]"


def _prefixed(keyword: str, visibility: str | None) -> str:
    return f"{visibility} {keyword}" if visibility else keyword


def _generics(names: Sequence[str]) -> str:
    return f"<{', '.join(names)}>" if names else ""


class Renderer:
    def __init__(self, config: FormatConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG

    # ----------- entry points ------------

    def render(self, container: ItemContainer) -> str:
        cb = CodeBuilder(indent_unit=self.config.indent_unit)
        logger.debug("rendering %d top-level item(s)", len(container.items))
        self.render_container(container, cb)
        return cb.render()

    def render_container(self, container: ItemContainer, cb: CodeBuilder) -> None:
        imports = collect_imports(container)
        emit_imports(cb, imports)
        if imports and container.items:
            cb.write()

        for i, item in enumerate(container.items):
            if i > 0:
                cb.write()
            self.render_item(item, cb)

    def render_item(self, item: object, cb: CodeBuilder) -> None:
        if isinstance(item, Struct):
            self.render_struct(item, cb)
        elif isinstance(item, Enum):
            self.render_enum(item, cb)
        elif isinstance(item, Function):
            self.render_function(item, cb)
        elif isinstance(item, Impl):
            self.render_impl(item, cb)
        elif isinstance(item, Trait):
            self.render_trait(item, cb)
        elif isinstance(item, TypeAlias):
            self.render_type_alias(item, cb)
        elif isinstance(item, Module):
            self.render_module(item, cb)
        elif isinstance(item, Raw):
            cb.writelines(item.text)
        else:
            raise TypeError(f"cannot render object of type {type(item).__name__}")

    # ----------- shared pieces ------------

    def _docs(self, docs: Sequence[str], cb: CodeBuilder) -> None:
        for ln in docs:
            cb.write(f"{DOC_PREFIX} {ln}" if ln else DOC_PREFIX)

    def derive_lines(self, derives: Sequence[str], cb: CodeBuilder) -> list[str]:
        """Lay out a derive list at the builder's current depth.

        One attribute line while it fits in ``wrap_width`` columns; otherwise
        the names are packed greedily, in order, into as many lines as needed.
        """
        if not derives:
            return []
        single = _derive_attr(derives)
        if cb.width_of(single) <= self.config.wrap_width:
            return [single]

        lines: list[str] = []
        current: list[str] = []
        for name in derives:
            if current and cb.width_of(_derive_attr([*current, name])) > self.config.wrap_width:
                lines.append(_derive_attr(current))
                current = [name]
            else:
                current.append(name)
        if current:
            lines.append(_derive_attr(current))
        return lines

    def _type_attrs(self, td: TypeDef, cb: CodeBuilder) -> None:
        for lint in td.allows:
            cb.write(f"#[allow({lint})]")
        for ln in self.derive_lines(td.derives, cb):
            cb.write(ln)
        if td.repr_hint:
            cb.write(f"#[repr({td.repr_hint})]")
        for m in td.macros:
            cb.write(m)

    def _type_head(self, keyword: str, td: TypeDef) -> str:
        return f"{_prefixed(keyword, td.visibility)} {td.ty}"

    def _where(self, bounds: Sequence[Bound], cb: CodeBuilder) -> None:
        for i, bound in enumerate(bounds):
            lead = "where " if i == 0 else WHERE_CONTINUATION
            cb.write(f"{lead}{bound.name}: {bound.rhs()},")

    def _braced(self, head: str, bounds: Sequence[Bound], body: Callable[[], None], cb: CodeBuilder) -> None:
        if bounds:
            cb.write(head)
            self._where(bounds, cb)
            cb.scoped_block("{", "}", body)
        else:
            cb.scoped_block(f"{head} {{", "}", body)

    def _terminated(self, head: str, bounds: Sequence[Bound], cb: CodeBuilder, tail: str = ";") -> None:
        if bounds:
            cb.write(head)
            self._where(bounds, cb)
            cb.write(tail)
        else:
            cb.write(f"{head}{tail}")

    def _field(self, fld: Field, cb: CodeBuilder) -> None:
        self._docs(fld.docs, cb)
        for ann in fld.annotations:
            cb.write(ann)
        cb.write(f"{_prefixed(fld.name, fld.visibility)}: {fld.ty},")

    def _body(self, body: Sequence[Body], cb: CodeBuilder) -> None:
        for stmt in body:
            if isinstance(stmt, Block):
                self.render_block(stmt, cb)
            else:
                cb.writelines(stmt)

    # ----------- items ------------

    def render_struct(self, item: Struct, cb: CodeBuilder) -> None:
        td = item.type_def
        self._docs(td.docs, cb)
        self._type_attrs(td, cb)
        head = self._type_head("struct", td)
        if item.tuple_fields:
            head += f"({', '.join(str(t) for t in item.tuple_fields)})"
            if not item.fields:
                self._terminated(head, td.bounds, cb)
                return

        def body() -> None:
            for fld in item.fields:
                self._field(fld, cb)

        self._braced(head, td.bounds, body, cb)

    def render_variant(self, variant: Variant, cb: CodeBuilder) -> None:
        self._docs(variant.docs, cb)
        for ann in variant.annotations:
            cb.write(ann)
        head = variant.name
        if variant.tuple_fields:
            head += f"({', '.join(str(t) for t in variant.tuple_fields)})"
        if not variant.fields:
            cb.write(f"{head},")
            return

        def body() -> None:
            for fld in variant.fields:
                self._field(fld, cb)

        cb.scoped_block(f"{head} {{", "},", body)

    def render_enum(self, item: Enum, cb: CodeBuilder) -> None:
        td = item.type_def
        self._docs(td.docs, cb)
        self._type_attrs(td, cb)

        def body() -> None:
            for variant in item.variants:
                self.render_variant(variant, cb)

        self._braced(self._type_head("enum", td), td.bounds, body, cb)

    def render_type_alias(self, item: TypeAlias, cb: CodeBuilder) -> None:
        td = item.type_def
        self._docs(td.docs, cb)
        self._type_attrs(td, cb)
        head = self._type_head("type", td)
        if td.bounds:
            self._terminated(head, td.bounds, cb, tail=f"= {item.target};")
        else:
            cb.write(f"{head} = {item.target};")

    def signature(self, func: Function) -> str:
        parts = [func.visibility] if func.visibility else []
        if func.is_async:
            parts.append("async")
        if func.abi:
            parts.append(f'extern "{func.abi}"')
        args = [func.self_arg] if func.self_arg else []
        args.extend(f"{a.name}: {a.ty}" for a in func.args)
        sig = f"fn {func.name}{_generics(func.generics)}({', '.join(args)})"
        if func.ret_type is not None:
            sig += f" -> {func.ret_type}"
        parts.append(sig)
        return " ".join(parts)

    def render_function(self, func: Function, cb: CodeBuilder) -> None:
        self._docs(func.docs, cb)
        for lint in func.allows:
            cb.write(f"#[allow({lint})]")
        for attr in func.attributes:
            cb.write(f"#[{attr}]")

        sig = self.signature(func)
        if func.body is None:
            self._terminated(sig, func.bounds, cb)
            return
        body = func.body
        self._braced(sig, func.bounds, lambda: self._body(body, cb), cb)

    def render_block(self, block: Block, cb: CodeBuilder) -> None:
        opener = f"{block.before} {{" if block.before else "{"
        closer = f"}}{block.after_text}" if block.after_text else "}"
        cb.scoped_block(opener, closer, lambda: self._body(block.body, cb))

    def _methods(self, fns: Sequence[Function], has_assoc: bool, cb: CodeBuilder) -> None:
        for i, func in enumerate(fns):
            if i > 0 or has_assoc:
                cb.write()
            self.render_function(func, cb)

    def render_impl(self, item: Impl, cb: CodeBuilder) -> None:
        for m in item.macros:
            cb.write(m)
        head = f"impl{_generics(item.generics)}"
        if item.trait_ty is not None:
            head += f" {item.trait_ty} for"
        head += f" {item.target}"

        def body() -> None:
            for ty in item.assoc_types:
                cb.write(f"type {ty.name} = {ty.ty};")
            for const in item.assoc_consts:
                cb.write(f"const {const.name}: {const.ty} = {const.expr};")
            self._methods(item.fns, bool(item.assoc_types or item.assoc_consts), cb)

        self._braced(head, item.bounds, body, cb)

    def render_trait(self, item: Trait, cb: CodeBuilder) -> None:
        td = item.type_def
        self._docs(td.docs, cb)
        self._type_attrs(td, cb)
        head = self._type_head("trait", td)
        if item.parents:
            head += f": {' + '.join(str(p) for p in item.parents)}"

        def body() -> None:
            for assoc in item.assoc_types:
                if assoc.bounds:
                    cb.write(f"type {assoc.name}: {' + '.join(str(b) for b in assoc.bounds)};")
                else:
                    cb.write(f"type {assoc.name};")
            for const in item.assoc_consts:
                if const.expr is None:
                    cb.write(f"const {const.name}: {const.ty};")
                else:
                    cb.write(f"const {const.name}: {const.ty} = {const.expr};")
            self._methods(item.fns, bool(item.assoc_types or item.assoc_consts), cb)

        self._braced(head, td.bounds, body, cb)

    def render_module(self, item: Module, cb: CodeBuilder) -> None:
        self._docs(item.docs, cb)
        head = f"{_prefixed('mod', item.visibility)} {item.name}"
        cb.scoped_block(f"{head} {{", "}", lambda: self.render_container(item, cb))
