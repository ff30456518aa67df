"""Error types with formatted source context."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nestlex.tokens import Position

if TYPE_CHECKING:
    from nestlex.scanner import SourceText
    from nestlex.tokens import Token


def _render(message: str, source: SourceText, pos: Position, width: int, filename: str) -> str:
    source_line = source.line_text(pos.line)
    col = pos.column

    # Underline at least one char, but stay within the line
    underline_len = max(1, min(width, len(source_line) - col + 1))

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(pos.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{pos.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class LexError(Exception):
    """Raised in strict mode when no rule recognizes the character at a position."""

    def __init__(self, message: str, position: Position, source: SourceText) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "<input>") -> str:
        return _render(self.message, self.source, self.position, 1, filename)


class UnbalancedDelimiterError(Exception):
    """Raised when a grouping pass ends with an opener still waiting for its closer.

    Carries the outermost unmatched opener.
    """

    def __init__(self, opener: Token, expected: str) -> None:
        self.opener = opener
        self.type = opener.type
        self.lexeme = opener.lexeme
        self.line = opener.line
        self.expected = expected
        self.message = f"unclosed {self.lexeme!r} (expected {expected!r})"
        super().__init__(self.format())

    @property
    def position(self) -> Position:
        return self.opener.position

    def format(self, filename: str = "<input>") -> str:
        width = len(self.lexeme)
        return _render(self.message, self.opener.source, self.position, width, filename)


class ConfigError(Exception):
    """Raised on a malformed lexer configuration."""
