"""Command-line interface for dhallparse."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from dhallparse.config import ConfigError, load_config, parser_config
from dhallparse.errors import ParseError

logger = logging.getLogger(__name__)

STDIN_NAME = "<stdin>"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None
    filename: str
    max_depth: int
    expression: bool
    check: bool
    debug: bool


def positive_int(s: str) -> int:
    """argparse type for --max-depth."""
    try:
        value = int(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {s}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {s}")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="dhallparse",
        description="Parse a configuration expression and print its syntax tree",
    )
    p.add_argument("input", help="Input file, or - for stdin")
    p.add_argument(
        "--expression",
        action="store_true",
        help="Parse a single expression and allow input after it",
    )
    p.add_argument("--check", action="store_true", help="Only report errors, print no tree")
    p.add_argument("--debug", action="store_true", help="Dump the tree to stderr instead of stdout")
    p.add_argument(
        "--max-depth",
        type=positive_int,
        default=None,
        metavar="N",
        help="Maximum expression nesting depth (default: 32)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover dhallparse.toml)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log parser activity to stderr")
    return p


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    if args.input == "-":
        input_file = None
        filename = STDIN_NAME
        input_dir = Path(".")
    else:
        input_file = Path(args.input)
        filename = str(input_file)
        input_dir = input_file.parent
        if not input_dir.parts:
            input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    settings = parser_config(load_config(config_path, input_dir), filename)

    max_depth = settings.max_depth
    if args.max_depth is not None:
        max_depth = args.max_depth

    return CliOptions(
        input_file=input_file,
        filename=settings.filename,
        max_depth=max_depth,
        expression=args.expression,
        check=args.check,
        debug=args.debug,
    )


def read_source(options: CliOptions) -> bytes:
    if options.input_file is None:
        return sys.stdin.buffer.read()
    return options.input_file.read_bytes()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr)

    try:
        options = resolve_options(args)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        source = read_source(options)
    except OSError as exc:
        print(f"error: cannot read {options.filename}: {exc.strerror or exc}", file=sys.stderr)
        return 2

    from dhallparse.debug import dump_ast
    from dhallparse.parser import parse, parse_expression

    logger.debug("parsing %s (%d bytes, max depth %d)", options.filename, len(source), options.max_depth)
    try:
        if options.expression:
            expr, end = parse_expression(source, options.filename, max_depth=options.max_depth)
            logger.debug("expression ends at offset %d", end)
        else:
            expr = parse(source, options.filename, max_depth=options.max_depth)
    except ParseError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if options.debug:
        dump_ast(expr, file=sys.stderr)
    elif not options.check:
        dump_ast(expr, file=sys.stdout)
    return 0


def run() -> None:
    """Console-script wrapper around main()."""
    sys.exit(main())
