"""Shared test fixtures and helpers."""

from __future__ import annotations

from typing import Any

import pytest

from nestlex.config import LexerConfig
from nestlex.lexer import Lexer
from nestlex.tokens import Token


@pytest.fixture
def num_config() -> LexerConfig:
    """Default config plus a digit-run pattern rule."""
    return LexerConfig().with_patterns(("num", r"\d+"))


@pytest.fixture
def lex(num_config):
    """Return a helper that tokenizes source with the digit config."""

    def _lex(source: str, config: LexerConfig | None = None) -> list[Token]:
        return list(Lexer(source, config=config or num_config).tokens())

    return _lex


@pytest.fixture
def group_source(num_config):
    """Return a helper that groups source with the digit config."""

    def _group(source: str, config: LexerConfig | None = None) -> list[Token]:
        return Lexer(source, config=config or num_config).group_tokens()

    return _group


def lexemes(tokens: list[Token]) -> list[str]:
    """Return the lexeme text of each token."""
    return [t.lexeme for t in tokens]


def assert_types(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def shape(tokens: list[Token]) -> list[Any]:
    """Nested lexeme structure: plain tokens as str, group heads as (head, children)."""
    out: list[Any] = []
    for t in tokens:
        if t.children:
            out.append((t.lexeme, shape(t.children)))
        else:
            out.append(t.lexeme)
    return out
