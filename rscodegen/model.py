"""Element tree for generated Rust source.

Every node is a plain dataclass holding ordered lists. Builder methods append
to those lists and return a handle (the node itself, or the child they just
created) so calls chain. Nothing here validates identifiers or combinations;
the renderer prints whatever the tree holds.
"""

from __future__ import annotations

import logging
from dataclasses import InitVar, dataclass, field as dc_field
from typing import Any, Union

logger = logging.getLogger(__name__)


# -----------------------------
# Types, bounds, imports
# -----------------------------

@dataclass
class Type:
    name: str
    generics: list[Type] = dc_field(default_factory=list)

    def generic(self, ty: TypeLike) -> Type:
        self.generics.append(as_type(ty))
        return self

    def path(self, path: str) -> Type:
        """Return a copy of this type qualified by ``path``."""
        return Type(f"{path}::{self.name}", list(self.generics))

    def __str__(self) -> str:
        if not self.generics:
            return self.name
        return f"{self.name}<{', '.join(str(g) for g in self.generics)}>"


TypeLike = Union[str, Type]


def as_type(ty: TypeLike) -> Type:
    if isinstance(ty, Type):
        return ty
    return Type(str(ty))


@dataclass
class Bound:
    """A single ``where`` predicate, e.g. ``T: Clone + Send``."""
    name: str
    bound: list[Type] = dc_field(default_factory=list)

    def rhs(self) -> str:
        return " + ".join(str(t) for t in self.bound)


@dataclass(frozen=True, order=True)
class Import:
    path: str
    vis: str = ""

    def to_code(self) -> str:
        if self.vis:
            return f"{self.vis} use {self.path};"
        return f"use {self.path};"


def make_import(path: str, name: str | None = None, vis: str | None = None) -> Import:
    if name:
        # "a::B" names a type inside B; only B itself is brought into scope
        name = name.split("::", 1)[0]
        path = f"{path}::{name}"
    return Import(path=path, vis=vis or "")


class _Importing:
    """Mixin for nodes that can register imports for their enclosing scope."""

    imports: list[Import]

    def import_(self, path: str, name: str | None = None, vis: str | None = None) -> Any:
        self.imports.append(make_import(path, name, vis))
        return self


# -----------------------------
# Fields, variants, bodies
# -----------------------------

@dataclass
class Field:
    name: str
    ty: TypeLike
    docs: list[str] = dc_field(default_factory=list)
    annotations: list[str] = dc_field(default_factory=list)
    visibility: str | None = None

    def __post_init__(self) -> None:
        self.ty = as_type(self.ty)

    def doc(self, *lines: str) -> Field:
        for text in lines:
            self.docs.extend(text.splitlines() or [""])
        return self

    def annotation(self, *annotations: str) -> Field:
        self.annotations.extend(annotations)
        return self

    def vis(self, visibility: str) -> Field:
        self.visibility = visibility
        return self


@dataclass
class Variant:
    name: str
    fields: list[Field] = dc_field(default_factory=list)
    tuple_fields: list[Type] = dc_field(default_factory=list)
    docs: list[str] = dc_field(default_factory=list)
    annotations: list[str] = dc_field(default_factory=list)

    def named(self, name: str, ty: TypeLike) -> Variant:
        self.fields.append(Field(name, ty))
        return self

    def tuple(self, ty: TypeLike) -> Variant:
        self.tuple_fields.append(as_type(ty))
        return self

    def doc(self, *lines: str) -> Variant:
        for text in lines:
            self.docs.extend(text.splitlines() or [""])
        return self

    def annotation(self, *annotations: str) -> Variant:
        self.annotations.extend(annotations)
        return self


@dataclass
class Block:
    """A braced statement block, e.g. ``if x {`` ... ``}``."""
    before: str | None = None
    body: list[Body] = dc_field(default_factory=list)
    after_text: str | None = None

    def line(self, line: Any) -> Block:
        self.body.append(str(line))
        return self

    def push_block(self, block: Block) -> Block:
        self.body.append(block)
        return self

    def new_block(self, before: str) -> Block:
        block = Block(before)
        self.body.append(block)
        return block

    def after(self, after: str) -> Block:
        self.after_text = after
        return self


Body = Union[str, Block]


# -----------------------------
# Declarations
# -----------------------------

@dataclass
class TypeDef:
    """Header data shared by structs, enums, traits and type aliases."""
    ty: Type
    visibility: str | None = None
    docs: list[str] = dc_field(default_factory=list)
    derives: list[str] = dc_field(default_factory=list)
    allows: list[str] = dc_field(default_factory=list)
    repr_hint: str | None = None
    bounds: list[Bound] = dc_field(default_factory=list)
    macros: list[str] = dc_field(default_factory=list)


class _TypeDefBuilder:
    type_def: TypeDef

    @property
    def ty(self) -> Type:
        return self.type_def.ty

    def vis(self, vis: str) -> Any:
        self.type_def.visibility = vis
        return self

    def generic(self, name: str) -> Any:
        self.type_def.ty.generic(name)
        return self

    def bound(self, name: str, ty: TypeLike) -> Any:
        self.type_def.bounds.append(Bound(name, [as_type(ty)]))
        return self

    def doc(self, docs: str) -> Any:
        self.type_def.docs.extend(docs.splitlines() or [""])
        return self

    def derive(self, name: str) -> Any:
        self.type_def.derives.append(name)
        return self

    def allow(self, lint: str) -> Any:
        self.type_def.allows.append(lint)
        return self

    def repr(self, repr_hint: str) -> Any:
        self.type_def.repr_hint = repr_hint
        return self

    def macro(self, text: str) -> Any:
        self.type_def.macros.append(text)
        return self


@dataclass
class Struct(_TypeDefBuilder, _Importing):
    name: InitVar[str]
    type_def: TypeDef = dc_field(init=False)
    fields: list[Field] = dc_field(default_factory=list)
    tuple_fields: list[Type] = dc_field(default_factory=list)
    imports: list[Import] = dc_field(default_factory=list)

    def __post_init__(self, name: str) -> None:
        self.type_def = TypeDef(Type(name))

    def push_field(self, fld: Field) -> Struct:
        self.fields.append(fld)
        return self

    def field(self, name: str, ty: TypeLike) -> Struct:
        return self.push_field(Field(name, ty))

    def new_field(self, name: str, ty: TypeLike) -> Field:
        fld = Field(name, ty)
        self.fields.append(fld)
        return fld

    def tuple_field(self, ty: TypeLike) -> Struct:
        self.tuple_fields.append(as_type(ty))
        return self


@dataclass
class Enum(_TypeDefBuilder, _Importing):
    name: InitVar[str]
    type_def: TypeDef = dc_field(init=False)
    variants: list[Variant] = dc_field(default_factory=list)
    imports: list[Import] = dc_field(default_factory=list)

    def __post_init__(self, name: str) -> None:
        self.type_def = TypeDef(Type(name))

    def new_variant(self, name: str) -> Variant:
        variant = Variant(name)
        self.variants.append(variant)
        return variant

    def push_variant(self, variant: Variant) -> Enum:
        self.variants.append(variant)
        return self


@dataclass
class TypeAlias(_TypeDefBuilder, _Importing):
    name: InitVar[str]
    target: TypeLike = ""
    type_def: TypeDef = dc_field(init=False)
    imports: list[Import] = dc_field(default_factory=list)

    def __post_init__(self, name: str) -> None:
        self.type_def = TypeDef(Type(name))
        self.target = as_type(self.target)

    def set_target(self, ty: TypeLike) -> TypeAlias:
        self.target = as_type(ty)
        return self


@dataclass
class Function(_Importing):
    name: str
    docs: list[str] = dc_field(default_factory=list)
    allows: list[str] = dc_field(default_factory=list)
    attributes: list[str] = dc_field(default_factory=list)
    visibility: str | None = None
    abi: str | None = None
    is_async: bool = False
    generics: list[str] = dc_field(default_factory=list)
    self_arg: str | None = None
    args: list[Field] = dc_field(default_factory=list)
    ret_type: Type | None = None
    bounds: list[Bound] = dc_field(default_factory=list)
    # None means a bodiless signature (trait method declaration)
    body: list[Body] | None = dc_field(default_factory=list)
    imports: list[Import] = dc_field(default_factory=list)

    def doc(self, docs: str) -> Function:
        self.docs.extend(docs.splitlines() or [""])
        return self

    def allow(self, lint: str) -> Function:
        self.allows.append(lint)
        return self

    def attr(self, attribute: str) -> Function:
        self.attributes.append(attribute)
        return self

    def vis(self, vis: str) -> Function:
        self.visibility = vis
        return self

    def extern_abi(self, abi: str) -> Function:
        self.abi = abi
        return self

    def set_async(self, is_async: bool) -> Function:
        self.is_async = is_async
        return self

    def generic(self, name: str) -> Function:
        self.generics.append(name)
        return self

    def arg_self(self) -> Function:
        self.self_arg = "self"
        return self

    def arg_ref_self(self) -> Function:
        self.self_arg = "&self"
        return self

    def arg_mut_self(self) -> Function:
        self.self_arg = "&mut self"
        return self

    def arg(self, name: str, ty: TypeLike) -> Function:
        self.args.append(Field(name, ty))
        return self

    def ret(self, ty: TypeLike) -> Function:
        self.ret_type = as_type(ty)
        return self

    def bound(self, name: str, ty: TypeLike) -> Function:
        self.bounds.append(Bound(name, [as_type(ty)]))
        return self

    def line(self, line: Any) -> Function:
        if self.body is None:
            self.body = []
        self.body.append(str(line))
        return self

    def push_block(self, block: Block) -> Function:
        if self.body is None:
            self.body = []
        self.body.append(block)
        return self

    def new_block(self, before: str) -> Block:
        block = Block(before)
        self.push_block(block)
        return block


@dataclass
class AssociatedType:
    name: str
    bounds: list[Type] = dc_field(default_factory=list)

    def bound(self, ty: TypeLike) -> AssociatedType:
        self.bounds.append(as_type(ty))
        return self


@dataclass
class AssociatedConst:
    name: str
    ty: TypeLike
    expr: str | None = None

    def __post_init__(self) -> None:
        self.ty = as_type(self.ty)

    def value(self, expression: str) -> AssociatedConst:
        self.expr = expression
        return self


@dataclass
class Trait(_TypeDefBuilder, _Importing):
    name: InitVar[str]
    type_def: TypeDef = dc_field(init=False)
    parents: list[Type] = dc_field(default_factory=list)
    assoc_types: list[AssociatedType] = dc_field(default_factory=list)
    assoc_consts: list[AssociatedConst] = dc_field(default_factory=list)
    fns: list[Function] = dc_field(default_factory=list)
    imports: list[Import] = dc_field(default_factory=list)

    def __post_init__(self, name: str) -> None:
        self.type_def = TypeDef(Type(name))

    def parent(self, ty: TypeLike) -> Trait:
        self.parents.append(as_type(ty))
        return self

    def associated_type(self, name: str) -> AssociatedType:
        assoc = AssociatedType(name)
        self.assoc_types.append(assoc)
        return assoc

    def associated_const(self, name: str, ty: TypeLike) -> AssociatedConst:
        const = AssociatedConst(name, ty)
        self.assoc_consts.append(const)
        return const

    def new_fn(self, name: str) -> Function:
        func = Function(name, body=None)
        self.fns.append(func)
        return func

    def push_fn(self, func: Function) -> Trait:
        self.fns.append(func)
        return self


@dataclass
class Impl(_Importing):
    target: TypeLike
    generics: list[str] = dc_field(default_factory=list)
    trait_ty: Type | None = None
    assoc_types: list[Field] = dc_field(default_factory=list)
    assoc_consts: list[AssociatedConst] = dc_field(default_factory=list)
    bounds: list[Bound] = dc_field(default_factory=list)
    fns: list[Function] = dc_field(default_factory=list)
    macros: list[str] = dc_field(default_factory=list)
    imports: list[Import] = dc_field(default_factory=list)

    def __post_init__(self) -> None:
        # owned copy: target_generic appends to it
        target = as_type(self.target)
        self.target = Type(target.name, list(target.generics))

    def generic(self, name: str) -> Impl:
        self.generics.append(name)
        return self

    def target_generic(self, ty: TypeLike) -> Impl:
        self.target.generic(ty)
        return self

    def impl_trait(self, ty: TypeLike) -> Impl:
        self.trait_ty = as_type(ty)
        return self

    def macro(self, text: str) -> Impl:
        self.macros.append(text)
        return self

    def associate_type(self, name: str, ty: TypeLike) -> Impl:
        self.assoc_types.append(Field(name, ty))
        return self

    def associate_const(self, name: str, ty: TypeLike, value: str) -> Impl:
        self.assoc_consts.append(AssociatedConst(name, ty, value))
        return self

    def bound(self, name: str, ty: TypeLike) -> Impl:
        self.bounds.append(Bound(name, [as_type(ty)]))
        return self

    def new_fn(self, name: str) -> Function:
        func = Function(name)
        self.fns.append(func)
        return func

    def push_fn(self, func: Function) -> Impl:
        self.fns.append(func)
        return self


@dataclass
class Raw:
    text: str


# -----------------------------
# Containers
# -----------------------------

class ItemContainer(_Importing):
    """Builder entry points shared by the root scope and by modules."""

    items: list[Item]

    def _push(self, item: Item) -> Any:
        self.items.append(item)
        return item

    def new_struct(self, name: str) -> Struct:
        return self._push(Struct(name))

    def push_struct(self, item: Struct) -> Any:
        self.items.append(item)
        return self

    def new_enum(self, name: str) -> Enum:
        return self._push(Enum(name))

    def push_enum(self, item: Enum) -> Any:
        self.items.append(item)
        return self

    def new_fn(self, name: str) -> Function:
        return self._push(Function(name))

    def push_fn(self, item: Function) -> Any:
        self.items.append(item)
        return self

    def new_impl(self, target: TypeLike) -> Impl:
        return self._push(Impl(target))

    def push_impl(self, item: Impl) -> Any:
        self.items.append(item)
        return self

    def new_trait(self, name: str) -> Trait:
        return self._push(Trait(name))

    def push_trait(self, item: Trait) -> Any:
        self.items.append(item)
        return self

    def new_type_alias(self, name: str, target: TypeLike) -> TypeAlias:
        return self._push(TypeAlias(name, target))

    def push_type_alias(self, item: TypeAlias) -> Any:
        self.items.append(item)
        return self

    def new_module(self, name: str) -> Module:
        return self._push(Module(name))

    def push_module(self, item: Module) -> Any:
        self.items.append(item)
        return self

    def get_module(self, name: str) -> Module | None:
        for item in self.items:
            if isinstance(item, Module) and item.name == name:
                return item
        return None

    def get_or_new_module(self, name: str) -> Module:
        existing = self.get_module(name)
        if existing is not None:
            return existing
        return self.new_module(name)

    def raw(self, text: str) -> Any:
        self.items.append(Raw(text))
        return self


@dataclass
class Module(ItemContainer):
    """A ``mod`` item. It is its own import scope."""
    name: str
    visibility: str | None = None
    docs: list[str] = dc_field(default_factory=list)
    items: list[Item] = dc_field(default_factory=list)
    imports: list[Import] = dc_field(default_factory=list)

    def vis(self, vis: str) -> Module:
        self.visibility = vis
        return self

    def doc(self, docs: str) -> Module:
        self.docs.extend(docs.splitlines() or [""])
        return self


Item = Union[Struct, Enum, Function, Impl, Trait, TypeAlias, Module, Raw]
