import argparse
import logging
import sys
from pathlib import Path

import yaml

from .loader import config_from_dict, load_description, scope_from_dict

logger = logging.getLogger(__name__)


def cmd_render(args: argparse.Namespace) -> int:
    try:
        data = load_description(Path(args.description))
        scope = scope_from_dict(data)
        config = config_from_dict(data).replace(indent_width=args.indent, wrap_width=args.wrap_width)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    code: str = scope.to_string(config)
    if code:
        code += "\n"
    if args.output:
        Path(args.output).write_text(code, encoding="utf-8")
        logger.info("wrote %d bytes to %s", len(code), args.output)
    else:
        print(code, end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser("rscodegen")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(required=True)

    s = sub.add_parser("render", help="Render a YAML/JSON tree description to Rust source")
    s.add_argument("description", help="Path to the tree description file")
    s.add_argument("-o", "--output", help="Write the code here instead of stdout")
    s.add_argument("--indent", type=int, default=None, help="Spaces per indentation level")
    s.add_argument("--wrap-width", dest="wrap_width", type=int, default=None,
                   help="Widest single #[derive(..)] line before wrapping")
    s.set_defaults(func=cmd_render)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
