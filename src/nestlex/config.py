"""Lexer configuration: recognition rules, delimiter pairs, and precedence declarations."""

from __future__ import annotations

import re
import sys
import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any

from nestlex.errors import ConfigError
from nestlex.tokens import LIT

CONFIG_FILENAME = "nestlex.toml"


class Associativity(Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True, slots=True)
class PatternRule:
    """Regex rule producing tokens of ``type``."""

    type: str
    pattern: re.Pattern[str]

    @classmethod
    def compile(cls, type: str, pattern: str | re.Pattern[str]) -> PatternRule:
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as exc:
                raise ConfigError(f"invalid pattern for {type!r}: {exc}") from exc
        return cls(sys.intern(type), pattern)


@dataclass(frozen=True, slots=True)
class DelimiterPair:
    """Opener/closer lexemes for tokens of ``type``."""

    type: str
    opener: str
    closer: str

    @classmethod
    def checked(cls, type: str, opener: str, closer: str) -> DelimiterPair:
        """Build a pair, rejecting ones no token could ever match.

        ``lit`` tokens are always one character, so ``lit`` openers and
        closers must be single characters.
        """
        if not opener or not closer:
            raise ConfigError(f"delimiter pair for {type!r} needs a non-empty opener and closer")
        if type == LIT and (len(opener) != 1 or len(closer) != 1):
            raise ConfigError(
                f"literal delimiter pair {opener!r}/{closer!r} must be single characters"
            )
        return cls(sys.intern(type), opener, closer)


@dataclass(frozen=True, slots=True)
class PrecedenceRule:
    """Lexemes sharing one precedence rank and associativity."""

    type: str
    associativity: Associativity
    lexemes: tuple[str, ...]


def _default_pairs() -> tuple[DelimiterPair, ...]:
    return (
        DelimiterPair(LIT, "(", ")"),
        DelimiterPair(LIT, "{", "}"),
        DelimiterPair(LIT, "[", "]"),
    )


def _default_precedence() -> tuple[PrecedenceRule, ...]:
    return (
        PrecedenceRule(LIT, Associativity.LEFT, ("+", "-")),
        PrecedenceRule(LIT, Associativity.LEFT, ("*", "/")),
        PrecedenceRule(LIT, Associativity.RIGHT, ("-",)),
    )


@dataclass(frozen=True, slots=True)
class LexerConfig:
    """Immutable lexer configuration, passed once at construction.

    Attributes:
        ignore: single characters skipped between tokens
        literals: single characters emitted as ``lit`` tokens
        pairs: opener/closer pairs consulted by the group matcher
        precedence: ordered declarations; later entries rank higher
        patterns: pattern rules, tried in order after the literal set
        strict: raise LexError instead of skipping unrecognized characters
    """

    ignore: frozenset[str] = frozenset(" \t")
    literals: frozenset[str] = frozenset("+-*/%^<>=!?()[]{}.,;:")
    pairs: tuple[DelimiterPair, ...] = field(default_factory=_default_pairs)
    precedence: tuple[PrecedenceRule, ...] = field(default_factory=_default_precedence)
    patterns: tuple[PatternRule, ...] = ()
    strict: bool = False

    def with_patterns(self, *rules: tuple[str, str | re.Pattern[str]]) -> LexerConfig:
        """Return a copy with pattern rules appended in the given order."""
        extra = tuple(PatternRule.compile(t, p) for t, p in rules)
        return replace(self, patterns=self.patterns + extra)

    def with_pairs(self, *pairs: tuple[str, str, str]) -> LexerConfig:
        """Return a copy with (type, opener, closer) pairs appended."""
        extra = tuple(DelimiterPair.checked(t, o, c) for t, o, c in pairs)
        return replace(self, pairs=self.pairs + extra)

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> LexerConfig:
        """Build a config from a mapping shaped like a ``nestlex.toml`` document.

        Keys that are absent keep their defaults; unknown keys are ignored.
        ``pairs`` and ``patterns`` extend the defaults, ``precedence`` replaces
        them.
        """
        base = cls()
        lexer = config_dict.get("lexer", {})
        if not isinstance(lexer, Mapping):
            raise ConfigError("[lexer] must be a table")

        ignore = base.ignore
        if "ignore" in lexer:
            ignore = frozenset(_expect_str(lexer["ignore"], "lexer.ignore"))
        literals = base.literals
        if "literals" in lexer:
            literals = frozenset(_expect_str(lexer["literals"], "lexer.literals"))
        strict = lexer.get("strict", base.strict)
        if not isinstance(strict, bool):
            raise ConfigError("lexer.strict must be a boolean")

        pairs = base.pairs + tuple(
            DelimiterPair.checked(
                _expect_str(entry.get("type", LIT), "pairs.type"),
                _expect_str(entry.get("open"), "pairs.open"),
                _expect_str(entry.get("close"), "pairs.close"),
            )
            for entry in _tables(config_dict.get("pairs", []), "pairs")
        )

        patterns = tuple(
            PatternRule.compile(
                _expect_str(entry.get("type"), "patterns.type"),
                _expect_str(entry.get("pattern"), "patterns.pattern"),
            )
            for entry in _tables(config_dict.get("patterns", []), "patterns")
        )

        precedence = base.precedence
        if "precedence" in config_dict:
            precedence = tuple(
                _precedence_rule(entry)
                for entry in _tables(config_dict["precedence"], "precedence")
            )

        return cls(
            ignore=ignore,
            literals=literals,
            pairs=pairs,
            precedence=precedence,
            patterns=patterns,
            strict=strict,
        )


DEFAULT_CONFIG = LexerConfig()


def _expect_str(value: Any, key: str) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{key} must be a non-empty string")
    return value


def _tables(value: Any, key: str) -> Iterable[Mapping[str, Any]]:
    if not isinstance(value, list) or not all(isinstance(v, Mapping) for v in value):
        raise ConfigError(f"{key} must be an array of tables")
    return value


def _precedence_rule(entry: Mapping[str, Any]) -> PrecedenceRule:
    assoc = entry.get("assoc", "left")
    try:
        associativity = Associativity(assoc)
    except ValueError:
        raise ConfigError(
            f"precedence.assoc must be 'left' or 'right', got {assoc!r}"
        ) from None
    lexemes = entry.get("lexemes")
    if not isinstance(lexemes, list) or not lexemes:
        raise ConfigError("precedence.lexemes must be a non-empty array")
    return PrecedenceRule(
        sys.intern(_expect_str(entry.get("type", LIT), "precedence.type")),
        associativity,
        tuple(_expect_str(lx, "precedence.lexemes") for lx in lexemes),
    )


def load_config(config_path: Path | None, search_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else search_dir / CONFIG_FILENAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"{path}: {exc}") from exc
