from __future__ import annotations

from dataclasses import dataclass, field

from .config import FormatConfig
from .model import Import, Item, ItemContainer
from .render import Renderer


@dataclass
class Scope(ItemContainer):
    """Root of a generated file.

    Build the tree with the ``new_*`` / ``push_*`` / ``raw`` / ``import_``
    methods, then call :meth:`to_string`. Rendering only reads the tree, so it
    can be repeated and the tree can keep growing afterwards.
    """
    items: list[Item] = field(default_factory=list)
    imports: list[Import] = field(default_factory=list)

    def to_string(self, config: FormatConfig | None = None) -> str:
        return Renderer(config).render(self)

    def __str__(self) -> str:
        return self.to_string()
