"""Tests for the CLI module: arg parsing, config merge, exit codes, end-to-end."""

from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from nestlex.cli import (
    CliOptions,
    build_parser,
    main,
    parse_pattern_arg,
    render_file,
    resolve_options,
)
from nestlex.config import LexerConfig

# ---------------------------------------------------------------------------
# Argument parsing helpers
# ---------------------------------------------------------------------------


class TestParseHelpers:
    def test_parse_pattern_arg_simple(self) -> None:
        assert parse_pattern_arg(r"num=\d+") == ("num", r"\d+")

    def test_parse_pattern_arg_equals_in_regex(self) -> None:
        assert parse_pattern_arg("op===") == ("op", "==")

    def test_parse_pattern_arg_no_equals_raises(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_pattern_arg("noequals")

    def test_parse_pattern_arg_empty_regex_raises(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_pattern_arg("num=")


# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        ns = build_parser().parse_args(["expr.txt"])
        assert ns.input == "expr.txt"
        assert ns.output is None
        assert ns.flat is False

    def test_pattern_flags(self) -> None:
        ns = build_parser().parse_args(["expr.txt", "-p", "a=x", "--pattern", "b=y"])
        assert ns.pattern == ["a=x", "b=y"]

    def test_pair_flags(self) -> None:
        ns = build_parser().parse_args(["expr.txt", "--pair", "<", ">"])
        assert ns.pair == [["<", ">"]]

    def test_switches(self) -> None:
        ns = build_parser().parse_args(["expr.txt", "--strict", "--flat", "-v"])
        assert ns.strict is True
        assert ns.flat is True
        assert ns.verbose is True


# ---------------------------------------------------------------------------
# Config merge
# ---------------------------------------------------------------------------


class TestConfigMerge:
    def test_config_file_discovered(self, tmp_path: Path) -> None:
        (tmp_path / "nestlex.toml").write_text("[lexer]\nstrict = true\n")
        doc = tmp_path / "expr.txt"
        doc.write_text("")
        opts = resolve_options(build_parser().parse_args([str(doc)]))
        assert opts.config.strict is True

    def test_cli_patterns_after_config_patterns(self, tmp_path: Path) -> None:
        (tmp_path / "nestlex.toml").write_text(
            "[[patterns]]\ntype = \"num\"\npattern = '\\d+'\n"
        )
        doc = tmp_path / "expr.txt"
        doc.write_text("")
        opts = resolve_options(build_parser().parse_args([str(doc), "-p", "id=[a-z]+"]))
        assert [r.type for r in opts.config.patterns] == ["num", "id"]

    def test_cli_pair_added(self, tmp_path: Path) -> None:
        doc = tmp_path / "expr.txt"
        doc.write_text("")
        opts = resolve_options(build_parser().parse_args([str(doc), "--pair", "<", ">"]))
        assert (opts.config.pairs[-1].opener, opts.config.pairs[-1].closer) == ("<", ">")

    def test_explicit_config(self, tmp_path: Path) -> None:
        cfg = tmp_path / "other.toml"
        cfg.write_text('[lexer]\nliterals = "+"\n')
        doc = tmp_path / "expr.txt"
        doc.write_text("")
        opts = resolve_options(build_parser().parse_args([str(doc), "--config", str(cfg)]))
        assert opts.config.literals == frozenset("+")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "ok.txt"
        doc.write_text("(1+2)*3\n")
        assert main([str(doc), "-p", r"num=\d+"]) == 0
        out = capsys.readouterr().out
        assert "Group lit '('" in out
        assert "  Token num '1'" in out

    def test_unbalanced_returns_1(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "bad.txt"
        doc.write_text("(1+2\n")
        assert main([str(doc)]) == 1
        err = capsys.readouterr().err
        assert "unclosed '('" in err
        assert f"{doc}:1:1" in err

    def test_strict_lex_error_returns_1(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "bad.txt"
        doc.write_text("1 $")
        assert main([str(doc), "--strict"]) == 1
        assert "unrecognized character" in capsys.readouterr().err

    def test_bad_pattern_arg_returns_2(self, tmp_path: Path) -> None:
        doc = tmp_path / "expr.txt"
        doc.write_text("")
        assert main([str(doc), "-p", "nope"]) == 2

    def test_bad_config_returns_2(self, tmp_path: Path) -> None:
        (tmp_path / "nestlex.toml").write_text('[[precedence]]\nassoc = "up"\nlexemes = ["+"]\n')
        doc = tmp_path / "expr.txt"
        doc.write_text("")
        assert main([str(doc)]) == 2

    def test_multichar_pair_returns_2(self, tmp_path: Path, capsys) -> None:
        doc = tmp_path / "expr.txt"
        doc.write_text("<<1>>")
        assert main([str(doc), "--pair", "<<", ">>"]) == 2
        assert "single characters" in capsys.readouterr().err

    def test_missing_input_returns_2(self, tmp_path: Path) -> None:
        assert main([str(tmp_path / "absent.txt")]) == 2


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class TestOutput:
    def test_output_file(self, tmp_path: Path) -> None:
        doc = tmp_path / "expr.txt"
        doc.write_text("[1]")
        out = tmp_path / "out.txt"
        assert main([str(doc), "-o", str(out)]) == 0
        assert out.read_text().startswith("Group lit '['")

    def test_render_flat(self, tmp_path: Path) -> None:
        doc = tmp_path / "expr.txt"
        doc.write_text("(1)")
        opts = CliOptions(
            input_file=doc,
            output_file=None,
            config=LexerConfig().with_patterns(("num", r"\d+")),
            flat=True,
            verbose=False,
        )
        lines = render_file(opts).splitlines()
        assert lines == [
            "lit '(' @1:1 [0, 1)",
            "num '1' @1:2 [1, 2)",
            "lit ')' @1:3 [2, 3)",
        ]

    def test_render_flat_does_not_group(self, tmp_path: Path) -> None:
        doc = tmp_path / "expr.txt"
        doc.write_text("(1")
        opts = CliOptions(
            input_file=doc,
            output_file=None,
            config=LexerConfig(),
            flat=True,
            verbose=False,
        )
        assert render_file(opts) == "lit '(' @1:1 [0, 1)\n"
