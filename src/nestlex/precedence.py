"""Operator precedence lookup table.

The table is data only. Nothing in the tokenizer consumes it; it is built for
the handler that turns grouped tokens into expressions.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from nestlex.config import Associativity, PrecedenceRule


@dataclass(frozen=True, slots=True)
class PrecedenceEntry:
    associativity: Associativity
    rank: int

    @property
    def left(self) -> bool:
        return self.associativity is Associativity.LEFT


class PrecedenceTable:
    """Flattened ``(type, lexeme) -> (associativity, rank)`` map.

    Rank is the declaring rule's index. When a lexeme appears in more than one
    rule the last declaration wins.
    """

    __slots__ = ("_rules", "_entries")

    def __init__(self, rules: Iterable[PrecedenceRule]) -> None:
        self._rules = tuple(rules)
        entries: dict[tuple[str, str], PrecedenceEntry] = {}
        for rank, rule in enumerate(self._rules):
            for lexeme in rule.lexemes:
                entries[(rule.type, lexeme)] = PrecedenceEntry(rule.associativity, rank)
        self._entries = entries

    @property
    def rules(self) -> tuple[PrecedenceRule, ...]:
        return self._rules

    def lookup(self, type: str, lexeme: str) -> PrecedenceEntry | None:
        return self._entries.get((type, lexeme))

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"PrecedenceTable({len(self._rules)} rules, {len(self._entries)} entries)"
