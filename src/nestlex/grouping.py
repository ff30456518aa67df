"""Group matcher — folds a flat token stream into a tree of delimiter groups."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from nestlex.errors import UnbalancedDelimiterError
from nestlex.tokens import Token

logger = logging.getLogger(__name__)


class GroupMatcher:
    """Single-pass stack matcher for opener/closer pairs.

    ``pairs`` maps ``(type, opener lexeme)`` to the closer lexeme. An opener
    becomes a group head: every following token is appended to its children
    until the matching closer, which is appended as the last child.
    """

    def __init__(self, pairs: Mapping[tuple[str, str], str]) -> None:
        self._pairs = pairs
        self._built: list[Token] = []
        self._pending: list[Token] = []

    @property
    def depth(self) -> int:
        """Number of openers still waiting for a closer."""
        return len(self._pending)

    def feed(self, token: Token) -> None:
        lexeme = token.lexeme

        if (token.type, lexeme) in self._pairs:
            self._pending.append(token.reduced())
            self._built.append(token)
            logger.debug("open %r at line %d (depth %d)", lexeme, token.line, len(self._pending))
            return

        if not self._pending:
            self._built.append(token)
            return

        self._built[-1].children.append(token)
        opener = self._pending[-1]
        if opener.type != token.type:
            return
        if self._pairs.get((opener.type, opener.lexeme)) != lexeme:
            return

        self._pending.pop()
        logger.debug("close %r at line %d (depth %d)", lexeme, token.line, len(self._pending))
        if self._pending:
            finished = self._built.pop()
            self._built[-1].children.append(finished)

    def finish(self) -> list[Token]:
        """Return the root-level tokens, or raise on an unclosed opener."""
        if self._pending:
            outermost = self._pending[0]
            expected = self._pairs[(outermost.type, outermost.lexeme)]
            self._pending.clear()
            self._built.clear()
            raise UnbalancedDelimiterError(outermost, expected)
        tree, self._built = self._built, []
        return tree

    def group(self, tokens: Iterable[Token]) -> list[Token]:
        for token in tokens:
            self.feed(token)
        return self.finish()


def group_tokens(tokens: Iterable[Token], pairs: Mapping[tuple[str, str], str]) -> list[Token]:
    """Convenience function: fold *tokens* using *pairs* and return the roots."""
    return GroupMatcher(pairs).group(tokens)
