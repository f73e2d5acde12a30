from __future__ import annotations

from typing import Any, NotRequired, TypedDict, Union


class FieldSpec(TypedDict):
    name: str
    type: str
    vis: NotRequired[str]
    doc: NotRequired[str]
    annotations: NotRequired[list[str]]


class BoundSpec(TypedDict):
    name: str
    bound: str


class ImportSpec(TypedDict, total=False):
    path: str
    name: str
    vis: str


class VariantSpec(TypedDict):
    name: str
    doc: NotRequired[str]
    annotations: NotRequired[list[str]]
    tuple: NotRequired[list[str]]
    fields: NotRequired[list[FieldSpec]]


class BlockSpec(TypedDict):
    block: str
    body: NotRequired[list[Any]]
    after: NotRequired[str]


class FunctionSpec(TypedDict):
    fn: str
    vis: NotRequired[str]
    doc: NotRequired[str]
    attrs: NotRequired[list[str]]
    allow: NotRequired[list[str]]
    extern: NotRequired[str]
    is_async: NotRequired[bool]
    generics: NotRequired[list[str]]
    self: NotRequired[str]
    args: NotRequired[list[FieldSpec]]
    ret: NotRequired[str]
    bounds: NotRequired[list[BoundSpec]]
    body: NotRequired[list[Union[str, BlockSpec]]]
    imports: NotRequired[list[Union[str, ImportSpec]]]


class ScopeSpec(TypedDict, total=False):
    format: dict[str, int]
    imports: list[Union[str, ImportSpec]]
    items: list[dict[str, Any]]
