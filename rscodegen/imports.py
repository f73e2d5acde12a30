"""Collects, de-duplicates and orders ``use`` declarations for one scope."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from .codegen import CodeBuilder
from .model import Enum, Function, Impl, Import, ItemContainer, Struct, Trait, TypeAlias

logger = logging.getLogger(__name__)


def iter_imports(container: ItemContainer) -> Iterator[Import]:
    """Yield every import registered on ``container`` or on the items it owns.

    Nested modules are skipped: each module renders its own import block.
    """
    yield from container.imports
    for item in container.items:
        if not isinstance(item, (Struct, Enum, Function, Impl, Trait, TypeAlias)):
            continue
        yield from item.imports
        if isinstance(item, (Impl, Trait)):
            for func in item.fns:
                yield from func.imports


def resolve_imports(imports: Iterable[Import]) -> list[Import]:
    # sorted by full path, then visibility; insertion order is irrelevant
    resolved = sorted(set(imports))
    logger.debug("resolved %d import(s)", len(resolved))
    return resolved


def collect_imports(container: ItemContainer) -> list[Import]:
    return resolve_imports(iter_imports(container))


def emit_imports(cb: CodeBuilder, imports: Iterable[Import]) -> int:
    count = 0
    for imp in imports:
        cb.write(imp.to_code())
        count += 1
    return count
