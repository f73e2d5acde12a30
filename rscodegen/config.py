from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_INDENT_WIDTH = 4
DEFAULT_WRAP_WIDTH = 80


@dataclass(frozen=True)
class FormatConfig:
    """Formatting knobs handed to every render.

    ``wrap_width`` is the widest a single ``#[derive(..)]`` line may be,
    indentation included, before the derive list is split across lines.
    """

    indent_width: int = DEFAULT_INDENT_WIDTH
    wrap_width: int = DEFAULT_WRAP_WIDTH

    def __post_init__(self) -> None:
        if self.indent_width < 0:
            raise ValueError(f"indent_width must be >= 0, got {self.indent_width}")
        if self.wrap_width <= 0:
            raise ValueError(f"wrap_width must be > 0, got {self.wrap_width}")

    @property
    def indent_unit(self) -> str:
        return " " * self.indent_width

    def replace(self, indent_width: int | None = None, wrap_width: int | None = None) -> "FormatConfig":
        return FormatConfig(
            indent_width=self.indent_width if indent_width is None else indent_width,
            wrap_width=self.wrap_width if wrap_width is None else wrap_width,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "FormatConfig":
        if not data:
            return cls()
        unknown = set(data) - {"indent", "wrap_width"}
        if unknown:
            raise ValueError(f"unknown format option(s): {sorted(unknown)}")
        indent: Any = data.get("indent", DEFAULT_INDENT_WIDTH)
        wrap: Any = data.get("wrap_width", DEFAULT_WRAP_WIDTH)
        if not isinstance(indent, int) or isinstance(indent, bool):
            raise ValueError("format.indent must be an integer")
        if not isinstance(wrap, int) or isinstance(wrap, bool):
            raise ValueError("format.wrap_width must be an integer")
        return cls(indent_width=indent, wrap_width=wrap)


DEFAULT_CONFIG = FormatConfig()
