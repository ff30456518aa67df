"""Immutable source buffer with codepoint-boundary scanning over UTF-8 bytes."""

from __future__ import annotations


class SourceText:
    """Read-only text buffer shared by every token cut from it.

    Offsets are byte offsets into the UTF-8 encoding of the text. The buffer
    is never mutated after construction.
    """

    __slots__ = ("_text", "_data")

    def __init__(self, text: str) -> None:
        self._text = text
        try:
            self._data = text.encode("utf-8")
        except UnicodeEncodeError as exc:
            # e.g. lone surrogates left by surrogateescape decoding
            raise ValueError(
                f"source is not valid Unicode text: {text[exc.start : exc.end]!r} "
                f"at character {exc.start} cannot be encoded as UTF-8"
            ) from exc

    @property
    def text(self) -> str:
        return self._text

    @property
    def data(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"SourceText({len(self._data)} bytes)"

    def next_boundary(self, pos: int) -> int | None:
        """Return the offset of the next character boundary after *pos*.

        The sequence length comes from the run of high bits in the leading
        byte, at least 1. Returns None at or past the end of the buffer, or
        when the sequence would run past it. *pos* must be boundary-aligned.
        """
        data = self._data
        if pos >= len(data):
            return None
        byte = data[pos]
        width = 0
        while byte & 0x80:
            width += 1
            byte = (byte << 1) & 0xFF
        nxt = pos + max(1, width)
        if nxt > len(data):
            return None
        return nxt

    def line_at(self, pos: int) -> int:
        """1-based line number at *pos*.

        Recounts newlines in ``[0, pos)`` on every call, so this is O(pos).
        """
        return self._data.count(b"\n", 0, pos) + 1

    def column_at(self, pos: int) -> int:
        """1-based character column at *pos*."""
        line_start = self._data.rfind(b"\n", 0, pos) + 1
        return len(self._data[line_start:pos].decode("utf-8", errors="replace")) + 1

    def slice(self, start: int, end: int) -> str:
        """Decoded text of the byte span ``[start, end)``."""
        return self._data[start:end].decode("utf-8")

    def line_text(self, line: int) -> str:
        """Text of the 1-based *line*, without its line terminator."""
        # Split on "\n" only so numbering agrees with line_at
        lines = self._text.split("\n")
        if 0 < line <= len(lines):
            return lines[line - 1].rstrip("\r")
        return ""
