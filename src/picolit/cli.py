"""Command-line interface for picolit."""

from __future__ import annotations

import argparse
import io
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from picolit.errors import ConfigurationError, ParseError
from picolit.markers import Markers


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    markers: Markers
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="picolit",
        description="Extract literate documentation from source-code comments",
    )
    p.add_argument("input", help="Input source file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover picolit.toml)",
    )
    p.add_argument("--line-marker", metavar="TOKEN", help="Single-line documentation marker")
    p.add_argument("--block-start", metavar="TOKEN", help="Documentation comment opener")
    p.add_argument("--block-end", metavar="TOKEN", help="Documentation comment closer")
    p.add_argument(
        "--continuation",
        metavar="CHARS",
        help="Characters allowed at the start of a documentation comment line",
    )
    p.add_argument(
        "--no-block",
        action="store_true",
        help="Recognize single-line documentation markers only",
    )
    p.add_argument("--debug", action="store_true", help="Log parser activity to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "picolit.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def markers_table(config: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of the config's ``[markers]`` table (empty if absent)."""
    table = config.get("markers")
    if isinstance(table, dict):
        return dict(table)
    return {}


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    table = markers_table(config)
    if args.line_marker is not None:
        table["line"] = args.line_marker
    if args.block_start is not None:
        table["block_start"] = args.block_start
    if args.block_end is not None:
        table["block_end"] = args.block_end
    if args.continuation is not None:
        table["continuation"] = args.continuation
    if args.no_block:
        table["block"] = False

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        markers=Markers.from_mapping(table),
        debug=args.debug,
    )


def extract_file(options: CliOptions) -> str:
    """Read and parse a source file, returning the dumped document tree."""
    from picolit.debug import dump_ast
    from picolit.parser import Parser

    source = options.input_file.read_text(encoding="utf-8")
    doc = Parser(options.markers).parse(source, str(options.input_file))

    out = io.StringIO()
    dump_ast(doc, file=out)
    return out.getvalue()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        options = resolve_options(args)
    except ConfigurationError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config file: {exc}", file=sys.stderr)
        return 2

    try:
        tree = extract_file(options)
    except ParseError as exc:
        print(exc.format(str(options.input_file)), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.output_file:
        options.output_file.write_text(tree, encoding="utf-8")
    else:
        sys.stdout.write(tree)

    return 0
