from pathlib import Path

import pytest
import yaml

from rscodegen.config import FormatConfig
from rscodegen.loader import config_from_dict, load_description, scope_from_dict


DESCRIPTION = {
    "format": {"indent": 4, "wrap_width": 100},
    "imports": ["std::fmt", {"path": "std::collections", "name": "HashMap"}],
    "items": [
        {
            "struct": "Foo",
            "vis": "pub",
            "doc": "A foo.",
            "derive": ["Debug", "Clone"],
            "generics": ["T"],
            "bounds": [{"name": "T", "bound": "Clone"}],
            "fields": [{"name": "one", "type": "T", "vis": "pub"}],
        },
        {"enum": "Kind", "variants": [{"name": "A"}, {"name": "B", "tuple": ["u8"]}]},
        {
            "impl": "Foo<T>",
            "generics": ["T"],
            "impl_trait": "fmt::Display",
            "fns": [
                {
                    "fn": "fmt",
                    "self": "&self",
                    "args": [{"name": "f", "type": "&mut fmt::Formatter<'_>"}],
                    "ret": "fmt::Result",
                    "body": ['write!(f, "foo")'],
                }
            ],
        },
        {"trait": "Greeter", "fns": [{"fn": "greet", "self": "&self"}]},
        {
            "module": "inner",
            "imports": ["super::Foo"],
            "items": [{"type_alias": "Alias", "target": "Foo<u8>"}],
        },
        {
            "fn": "main",
            "body": [{"block": "if true", "body": ["run();"]}],
        },
        {"raw": "// end"},
    ],
}

EXPECTED = """\
use std::collections::HashMap;
use std::fmt;

/// A foo.
#[derive(Debug, Clone)]
pub struct Foo<T>
where T: Clone,
{
    pub one: T,
}

enum Kind {
    A,
    B(u8),
}

impl<T> fmt::Display for Foo<T> {
    fn fmt(&self, f: &mut fmt::Formatter<'_>) -> fmt::Result {
        write!(f, "foo")
    }
}

trait Greeter {
    fn greet(&self);
}

mod inner {
    use super::Foo;

    type Alias = Foo<u8>;
}

fn main() {
    if true {
        run();
    }
}

// end"""


def test_scope_from_dict_renders_every_kind() -> None:
    scope = scope_from_dict(DESCRIPTION)  # type: ignore[arg-type]
    assert scope.to_string() == EXPECTED


def test_config_from_dict() -> None:
    assert config_from_dict(DESCRIPTION) == FormatConfig(indent_width=4, wrap_width=100)  # type: ignore[arg-type]
    assert config_from_dict({}) == FormatConfig()


def test_load_description_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "tree.yaml"
    path.write_text(yaml.safe_dump(DESCRIPTION), encoding="utf-8")
    data = load_description(path)
    assert scope_from_dict(data).to_string() == EXPECTED


def test_load_description_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert scope_from_dict(load_description(path)).to_string() == ""


def test_load_description_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        load_description(path)


@pytest.mark.parametrize(
    "data, message",
    [
        ({"items": [{"struct": "A", "enum": "B"}]}, "exactly one"),
        ({"items": [{"nothing": 1}]}, "exactly one"),
        ({"items": [{"struct": 3}]}, "must be a string"),
        ({"items": [{"struct": "A", "fields": [{"name": "x"}]}]}, "'name' and 'type'"),
        ({"items": [{"fn": "f", "body": [1]}]}, "body entries"),
        ({"imports": [3]}, "import entries"),
        ({"items": [{"struct": "A", "derive": [1]}]}, "'derive'"),
        ({"items": [{"type_alias": "A"}]}, "target"),
        ({"items": "nope"}, "list of mappings"),
        ({"imports": [{"path": "a", "name": 5}]}, "'name' must be a string"),
        ({"imports": [{"path": "a", "vis": 1}, "a"]}, "'vis' must be a string"),
        ({"items": [{"struct": "A", "fields": [{"name": "x", "type": "u8", "doc": 5}]}]}, "'doc'"),
        ({"items": [{"struct": "A", "fields": [{"name": "x", "type": "u8", "vis": ["pub"]}]}]}, "'vis'"),
        ({"items": [{"struct": "A", "fields": [{"name": "x", "type": "u8", "annotations": [1]}]}]}, "'annotations'"),
        ({"items": [{"enum": "E", "variants": [{"name": "A", "doc": 5}]}]}, "'doc'"),
        ({"items": [{"fn": "f", "is_async": "false"}]}, "is_async"),
    ],
)
def test_malformed_descriptions(data: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        scope_from_dict(data)  # type: ignore[arg-type]


def test_bad_format_section() -> None:
    with pytest.raises(ValueError, match="unknown format"):
        config_from_dict({"format": {"tabs": True}})  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="wrap_width"):
        config_from_dict({"format": {"wrap_width": "wide"}})  # type: ignore[arg-type]
