from .codegen import CodeBuilder, IndentUnderflowError
from .config import FormatConfig
from .model import (
    AssociatedConst, AssociatedType, Block, Bound, Enum, Field, Function, Impl,
    Import, Module, Raw, Struct, Trait, Type, TypeAlias, Variant,
)
from .imports import collect_imports
from .render import Renderer
from .scope import Scope
from .loader import scope_from_dict, load_description

__all__ = [
    # writer & config
    "CodeBuilder", "IndentUnderflowError", "FormatConfig",
    # model
    "AssociatedConst", "AssociatedType", "Block", "Bound", "Enum", "Field", "Function",
    "Impl", "Import", "Module", "Raw", "Struct", "Trait", "Type", "TypeAlias", "Variant",
    # rendering
    "Renderer", "Scope", "collect_imports",
    # descriptions
    "scope_from_dict", "load_description",
]
