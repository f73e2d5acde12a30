"""Simple profiling of tree construction and rendering."""

from __future__ import annotations

import timeit
import tracemalloc

from rscodegen import FormatConfig, Scope


def _build_scope(width: int, depth: int) -> Scope:
    scope = Scope()
    container = scope
    for level in range(depth):
        container = container.new_module(f"m{level}")
        container.import_("std::fmt")
        for i in range(width):
            item = container.new_struct(f"S{i}").derive("Debug").derive("Clone").derive("PartialEq")
            item.field("id", "u64").field("name", "String")
            f = container.new_fn(f"f{i}").arg("x", "u64").ret("u64")
            f.new_block("if x > 0").line("return x - 1;")
            f.line("x")
    return scope


def main() -> None:
    build: float = timeit.timeit(lambda: _build_scope(20, 5), number=50)
    print(f"Scope construction (100 structs): {build:.4f}s/50")

    scope: Scope = _build_scope(20, 5)
    render: float = timeit.timeit(lambda: scope.to_string(), number=50)
    print(f"Scope.to_string(): {render:.4f}s/50")

    narrow = FormatConfig(wrap_width=24)
    wrapped: float = timeit.timeit(lambda: scope.to_string(narrow), number=50)
    print(f"Scope.to_string() with derive wrapping: {wrapped:.4f}s/50")

    tracemalloc.start()
    _build_scope(50, 10).to_string()
    current: int
    peak: int
    current, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    print(f"Large tree render memory: current={current} bytes peak={peak} bytes")


if __name__ == "__main__":
    main()
