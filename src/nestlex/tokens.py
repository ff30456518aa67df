"""Token data structures and location types."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from nestlex.scanner import SourceText

# Built-in token type tags. Callers add their own via pattern rules.
LIT = sys.intern("lit")
ID = sys.intern("id")


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based byte offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(slots=True, eq=False)
class Token:
    """A recognized span of the source buffer.

    The lexeme is never copied out of the buffer; ``start``/``end`` are
    half-open byte offsets into ``source.data``. ``children`` is filled in by
    the group matcher and ``value`` by a handler.
    """

    type: str
    source: SourceText
    line: int
    start: int
    end: int
    children: list[Token] = field(default_factory=list)
    value: Any = None

    @property
    def lexeme(self) -> str:
        return self.source.slice(self.start, self.end)

    @property
    def column(self) -> int:
        return self.source.column_at(self.start)

    @property
    def position(self) -> Position:
        return Position(self.line, self.column, self.start)

    @property
    def span(self) -> Span:
        end = Position(
            self.source.line_at(self.end), self.source.column_at(self.end), self.end
        )
        return Span(self.position, end)

    @property
    def is_group(self) -> bool:
        return bool(self.children)

    def reduced(self) -> Token:
        """Copy of this token without children or value."""
        return Token(self.type, self.source, self.line, self.start, self.end)

    def walk(self) -> Iterator[Token]:
        """Yield this token and all descendants, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def __repr__(self) -> str:
        parts = [f"type={self.type!r}", f"lexeme={self.lexeme!r}", f"line={self.line}"]
        parts.append(f"start={self.start}")
        parts.append(f"end={self.end}")
        if self.children:
            parts.append(f"children={self.children!r}")
        if self.value is not None:
            parts.append(f"value={self.value!r}")
        return f"Token({', '.join(parts)})"
