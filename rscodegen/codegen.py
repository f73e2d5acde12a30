from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field


class IndentUnderflowError(RuntimeError):
    """Raised when a builder is dedented past column zero."""


@dataclass
class CodeBuilder:
    """
    Minimal, explicit indentation-aware code builder.
    Lines are append-only; nothing already written is ever rewritten.
    """
    indent_unit: str = "    "
    lines: list[str] = field(default_factory=list)
    _level: int = 0

    @property
    def depth(self) -> int:
        return self._level

    def width_of(self, line: str) -> int:
        """Column width ``line`` would occupy if written at the current depth."""
        return len(self.indent_unit) * self._level + len(line)

    def write(self, line: str = "") -> None:
        # blank lines never carry indentation
        if not line:
            self.lines.append("")
            return
        self.lines.append(f"{self.indent_unit * self._level}{line}")

    write_line = write

    def writelines(self, raw: str) -> None:
        """Write every line of ``raw`` at the current depth.

        A trailing newline yields a final blank line; an empty string yields
        one blank line.
        """
        for ln in raw.split("\n"):
            self.write(ln)

    def indent(self) -> None:
        self._level += 1

    def dedent(self) -> None:
        if self._level == 0:
            raise IndentUnderflowError("dedent called at indentation depth 0")
        self._level -= 1

    def block(self) -> "_Block":
        return _Block(self)

    def scoped_block(self, open_token: str, close_token: str, body: Callable[[], None]) -> None:
        self.write(open_token)
        with self.block():
            body()
        self.write(close_token)

    def render(self) -> str:
        return "\n".join(self.lines)


class _Block:
    def __init__(self, cb: CodeBuilder) -> None:
        self.cb = cb

    def __enter__(self) -> None:
        self.cb.indent()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cb.dedent()
