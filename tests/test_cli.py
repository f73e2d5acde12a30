import json
from pathlib import Path

import pytest

from rscodegen.cli import build_parser, main


def _write(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "tree.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_render_to_stdout(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, {"items": [{"struct": "Foo", "fields": [{"name": "x", "type": "u8"}]}]})
    assert main(["render", str(path)]) == 0
    assert capsys.readouterr().out == "struct Foo {\n    x: u8,\n}\n"


def test_render_to_file_with_overrides(tmp_path: Path) -> None:
    path = _write(tmp_path, {
        "format": {"indent": 8},
        "items": [{"module": "m", "items": [{"raw": "// hi"}]}],
    })
    out = tmp_path / "lib.rs"
    assert main(["render", str(path), "-o", str(out), "--indent", "2"]) == 0
    assert out.read_text(encoding="utf-8") == "mod m {\n  // hi\n}\n"


def test_description_format_section_is_used(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, {
        "format": {"wrap_width": 16},
        "items": [{"struct": "S", "derive": ["Debug", "Clone"]}],
    })
    assert main(["render", str(path)]) == 0
    assert capsys.readouterr().out.splitlines()[:2] == ["#[derive(Debug)]", "#[derive(Clone)]"]


def test_empty_description_prints_nothing(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, {})
    assert main(["render", str(path)]) == 0
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize(
    "content",
    [
        '{"items": [{"struct": 1}]}',
        "{not: [valid",
        "[1, 2]",
        '{"imports": [{"path": "a", "name": 5}]}',
        '{"imports": [{"path": "a", "vis": 1}, "a"]}',
        '{"items": [{"struct": "A", "fields": [{"name": "x", "type": "u8", "doc": 5}]}]}',
    ],
)
def test_malformed_description_exits_2(tmp_path: Path, capsys: pytest.CaptureFixture[str], content: str) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(content, encoding="utf-8")
    assert main(["render", str(path)]) == 2
    assert capsys.readouterr().err.startswith("error: ")


def test_missing_file_exits_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["render", str(tmp_path / "missing.yaml")]) == 2
    assert "error:" in capsys.readouterr().err


def test_invalid_override_exits_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, {})
    assert main(["render", str(path), "--wrap-width", "0"]) == 2
    assert "wrap_width" in capsys.readouterr().err


def test_parser_requires_subcommand() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
