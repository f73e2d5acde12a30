from hypothesis import given, strategies as st

from rscodegen import FormatConfig, Scope

idents = st.from_regex(r"[a-z][a-z0-9_]{0,7}", fullmatch=True)
type_names = st.from_regex(r"[A-Z][A-Za-z0-9]{0,7}", fullmatch=True)
paths = st.lists(st.from_regex(r"[a-z]{1,4}", fullmatch=True), min_size=1, max_size=3).map("::".join)


@given(st.lists(paths, min_size=1, max_size=12), st.data())
def test_import_block_ignores_insertion_order(import_paths: list[str], data: st.DataObject) -> None:
    shuffled: list[str] = data.draw(st.permutations(import_paths))
    a, b = Scope(), Scope()
    for p in import_paths:
        a.import_(p)
    for p in shuffled:
        b.import_(p)
    a.new_struct("Foo")
    b.new_struct("Foo")

    out = a.to_string()
    assert out == b.to_string()
    expected = [f"use {p};" for p in sorted(set(import_paths))]
    lines = out.splitlines()
    assert lines[: len(expected)] == expected
    assert lines[len(expected)] == ""


@given(st.lists(st.tuples(idents, type_names), max_size=10))
def test_field_order_preserved(fields: list[tuple[str, str]]) -> None:
    scope = Scope()
    item = scope.new_struct("Foo")
    for name, ty in fields:
        item.field(name, ty)
    lines = scope.to_string().splitlines()
    assert lines[0] == "struct Foo {"
    assert lines[-1] == "}"
    assert lines[1:-1] == [f"    {name}: {ty}," for name, ty in fields]


@given(st.lists(idents, max_size=10))
def test_variant_and_statement_order_preserved(names: list[str]) -> None:
    scope = Scope()
    enum = scope.new_enum("E")
    func = scope.new_fn("f")
    for n in names:
        enum.new_variant(n)
        func.line(f"{n}();")
    out = scope.to_string()
    enum_text, fn_text = out.split("\n\n")
    assert enum_text.splitlines()[1:-1] == [f"    {n}," for n in names]
    assert fn_text.splitlines()[1:-1] == [f"    {n}();" for n in names]


@given(st.integers(min_value=0, max_value=6), st.integers(min_value=1, max_value=8))
def test_indent_matches_nesting_depth(depth: int, width: int) -> None:
    scope = Scope()
    container = scope
    for i in range(depth):
        container = container.new_module(f"m{i}")
    container.new_struct("Foo").field("x", "u8")

    lines = scope.to_string(FormatConfig(indent_width=width)).splitlines()
    for level in range(depth):
        assert lines[level] == " " * (width * level) + f"mod m{level} {{"
    assert lines[depth] == " " * (width * depth) + "struct Foo {"
    assert lines[depth + 1] == " " * (width * (depth + 1)) + "x: u8,"
    assert lines[depth + 2] == " " * (width * depth) + "}"


@given(
    st.lists(type_names, min_size=1, max_size=5),
    st.lists(idents, max_size=5),
    st.lists(type_names, max_size=8),
    st.integers(min_value=20, max_value=120),
)
def test_rendering_is_idempotent(
    structs: list[str], fns: list[str], derives: list[str], wrap: int
) -> None:
    scope = Scope()
    for name in structs:
        item = scope.new_struct(name)
        for d in derives:
            item.derive(d)
        mod = scope.get_or_new_module("inner")
        mod.new_struct(name).field("x", name)
    for name in fns:
        scope.new_fn(name).line("todo!()")
        scope.import_(f"crate::{name}")
    config = FormatConfig(wrap_width=wrap)
    first = scope.to_string(config)
    assert scope.to_string(config) == first


@given(st.lists(type_names, min_size=1, max_size=10), st.integers(min_value=12, max_value=60))
def test_wrapped_derives_keep_order_and_width(derives: list[str], wrap: int) -> None:
    scope = Scope()
    item = scope.new_struct("Foo")
    for d in derives:
        item.derive(d)
    attr_lines = [ln for ln in scope.to_string(FormatConfig(wrap_width=wrap)).splitlines() if ln.startswith("#[derive(")]

    names: list[str] = []
    for ln in attr_lines:
        names.extend(ln[len("#[derive("):-len(")]")].split(", "))
        # only a single oversized name may exceed the limit
        assert len(ln) <= wrap or ln.count(",") == 0
    assert names == derives
