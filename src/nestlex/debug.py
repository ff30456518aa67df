"""Human-readable token and tree dumps."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from nestlex.tokens import Token


def dump_tokens(tokens: Iterable[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one line per flat token to *file*."""
    for token in tokens:
        file.write(f"{_describe(token)}\n")


def dump_tree(tokens: Iterable[Token], *, file: TextIO = sys.stderr) -> None:
    """Print the grouped token tree to *file*, children indented under their head."""
    for token in tokens:
        _dump_token(token, 0, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _describe(token: Token) -> str:
    return f"{token.type} {token.lexeme!r} @{token.line}:{token.column} [{token.start}, {token.end})"


def _dump_token(token: Token, depth: int, f: TextIO) -> None:
    label = "Group" if token.children else "Token"
    f.write(f"{_indent(depth)}{label} {_describe(token)}\n")
    for child in token.children:
        _dump_token(child, depth + 1, f)
