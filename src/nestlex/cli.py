"""Command-line interface for nestlex — dump the flat tokens or grouped tree of a file."""

from __future__ import annotations

import argparse
import io
import logging
import sys
from dataclasses import dataclass, replace
from pathlib import Path

from nestlex.config import LexerConfig, load_config
from nestlex.errors import ConfigError, LexError, UnbalancedDelimiterError
from nestlex.tokens import LIT


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    config: LexerConfig
    flat: bool
    verbose: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="nestlex",
        description="Tokenize a file and print its delimiter-grouped token tree",
    )
    p.add_argument("input", help="Input file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover nestlex.toml)",
    )
    p.add_argument(
        "-p",
        "--pattern",
        action="append",
        default=[],
        metavar="TYPE=REGEX",
        help="Append a pattern rule (repeatable, tried in order)",
    )
    p.add_argument(
        "--pair",
        action="append",
        nargs=2,
        default=[],
        metavar=("OPEN", "CLOSE"),
        help="Add a literal delimiter pair (repeatable)",
    )
    p.add_argument(
        "--strict", action="store_true", help="Fail on characters no rule recognizes"
    )
    p.add_argument("--flat", action="store_true", help="Print flat tokens instead of the tree")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    return p


def parse_pattern_arg(s: str) -> tuple[str, str]:
    """Parse a TYPE=REGEX string into (type, regex)."""
    name, sep, regex = s.partition("=")
    if not sep or not name or not regex:
        raise argparse.ArgumentTypeError(f"invalid pattern format (expected TYPE=REGEX): {s}")
    return name, regex


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = LexerConfig.from_dict(load_config(config_path, input_dir))

    # CLI pattern rules run after the configured ones
    config = config.with_patterns(*(parse_pattern_arg(raw) for raw in args.pattern))
    config = config.with_pairs(*((LIT, opener, closer) for opener, closer in args.pair))
    if args.strict:
        config = replace(config, strict=True)

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        config=config,
        flat=args.flat,
        verbose=args.verbose,
    )


def render_file(options: CliOptions) -> str:
    """Read, tokenize and (unless flat) group a file; return the dump text."""
    from nestlex.debug import dump_tokens, dump_tree
    from nestlex.lexer import Lexer

    source = options.input_file.read_text(encoding="utf-8")
    lexer = Lexer(source, config=options.config, filename=str(options.input_file))

    out = io.StringIO()
    if options.flat:
        dump_tokens(lexer.tokens(), file=out)
    else:
        dump_tree(lexer.group_tokens(), file=out)
    return out.getvalue()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except (argparse.ArgumentTypeError, ConfigError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.verbose:
        logging.basicConfig(
            level=logging.DEBUG, stream=sys.stderr, format="%(name)s: %(message)s"
        )

    try:
        text = render_file(options)
    except (LexError, UnbalancedDelimiterError) as exc:
        print(exc.format(str(options.input_file)), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)

    return 0
