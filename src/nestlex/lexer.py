"""nestlex lexer — converts source text into flat tokens and a tree of delimiter groups."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from typing import Any

from nestlex.config import DEFAULT_CONFIG, DelimiterPair, LexerConfig, PatternRule
from nestlex.errors import LexError, UnbalancedDelimiterError
from nestlex.grouping import GroupMatcher
from nestlex.handler import HandlerLike, dispatch
from nestlex.precedence import PrecedenceTable
from nestlex.scanner import SourceText
from nestlex.tokens import LIT, Position, Token

logger = logging.getLogger(__name__)


class Lexer:
    """Tokenize source text with ordered rules and group it by delimiter pairs.

    A Lexer holds a scan cursor and is not safe to drive from more than one
    thread at a time. The source buffer itself is immutable and shared with
    every token produced.
    """

    def __init__(
        self,
        source: str,
        handler: HandlerLike | None = None,
        config: LexerConfig | None = None,
        filename: str = "<input>",
    ) -> None:
        if config is None:
            config = DEFAULT_CONFIG
        self._source = SourceText(source)
        self._filename = filename
        self._handler = handler
        self._ignore = config.ignore
        self._literals = config.literals
        self._strict = config.strict
        self._patterns: list[PatternRule] = list(config.patterns)
        self._pairs: dict[tuple[str, str], str] = {
            (p.type, p.opener): p.closer for p in config.pairs
        }
        self._precedence = PrecedenceTable(config.precedence)
        self._pos = 0  # byte offset
        self._index = 0  # character offset of the same position
        self._tree: list[Token] | None = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def source(self) -> SourceText:
        return self._source

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def precedence(self) -> PrecedenceTable:
        return self._precedence

    @property
    def pairs(self) -> dict[tuple[str, str], str]:
        return dict(self._pairs)

    @property
    def patterns(self) -> tuple[PatternRule, ...]:
        return tuple(self._patterns)

    def add_pattern_rule(self, type: str, pattern: str | re.Pattern[str]) -> None:
        """Append a pattern rule; earlier rules win when several match."""
        self._patterns.append(PatternRule.compile(type, pattern))

    def add_delimiter_pair(self, type: str, opener: str, closer: str) -> None:
        pair = DelimiterPair.checked(type, opener, closer)
        self._pairs[(pair.type, pair.opener)] = pair.closer

    # ------------------------------------------------------------------
    # Flat tokens
    # ------------------------------------------------------------------

    def next_token(self) -> Token | None:
        """Return the next token, or None once the cursor reaches the end."""
        source = self._source
        while True:
            ori = self._pos
            nxt = source.next_boundary(ori)
            if nxt is None:
                return None
            ch = source.slice(ori, nxt)

            if ch in self._ignore:
                self._step(nxt)
                continue

            if ch in self._literals:
                self._step(nxt)
                return self._make(LIT, ori, nxt)

            token = self._match_patterns(ori)
            if token is not None:
                return token

            if self._strict:
                raise self._error(f"unrecognized character {ch!r}", ori)
            logger.debug("skipping unrecognized %r at offset %d", ch, ori)
            self._step(nxt)

    def tokens(self) -> Iterator[Token]:
        """Yield the remaining flat tokens."""
        while (token := self.next_token()) is not None:
            yield token

    def _match_patterns(self, ori: int) -> Token | None:
        text = self._source.text
        for rule in self._patterns:
            m = rule.pattern.match(text, self._index)
            # An empty match would produce a zero-width token
            if m is None or m.end() == self._index:
                continue
            width = len(text[self._index : m.end()].encode("utf-8"))
            end = ori + width
            self._pos = end
            self._index = m.end()
            return self._make(rule.type, ori, end)
        return None

    def _step(self, nxt: int) -> None:
        self._pos = nxt
        self._index += 1

    def _make(self, type: str, start: int, end: int) -> Token:
        return Token(type, self._source, self._source.line_at(start), start, end)

    def _error(self, message: str, offset: int) -> LexError:
        pos = Position(
            self._source.line_at(offset), self._source.column_at(offset), offset
        )
        return LexError(message, pos, self._source)

    # ------------------------------------------------------------------
    # Grouping and evaluation
    # ------------------------------------------------------------------

    @property
    def tree(self) -> list[Token] | None:
        """Result of the last successful grouping pass, if any."""
        return self._tree

    def group_tokens(self) -> list[Token]:
        """Scan to exhaustion and fold the tokens into delimiter groups.

        The tree is kept on the lexer; later calls return it unchanged. A
        failed pass leaves no tree behind and rewinds the cursor, so a retry
        raises the same error again.
        """
        if self._tree is None:
            start = (self._pos, self._index)
            try:
                self._tree = GroupMatcher(self._pairs).group(self.tokens())
            except (LexError, UnbalancedDelimiterError):
                self._pos, self._index = start
                raise
        return self._tree

    def evaluate(self, handler: HandlerLike | None = None) -> list[Any]:
        """Group if not already done, then hand each root token to the handler."""
        if handler is None:
            handler = self._handler
        if handler is None:
            raise TypeError("evaluate() needs a handler")
        return dispatch(self.group_tokens(), handler)


def tokenize(source: str, config: LexerConfig | None = None) -> list[Token]:
    """Convenience function: return all flat tokens of *source*."""
    return list(Lexer(source, config=config).tokens())


def group(source: str, config: LexerConfig | None = None) -> list[Token]:
    """Convenience function: return the grouped token tree of *source*."""
    return Lexer(source, config=config).group_tokens()
