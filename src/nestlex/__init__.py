"""nestlex — rule-driven tokenizer that folds tokens into delimiter groups."""

from __future__ import annotations

from nestlex.config import (
    DEFAULT_CONFIG,
    Associativity,
    DelimiterPair,
    LexerConfig,
    PatternRule,
    PrecedenceRule,
)
from nestlex.errors import ConfigError, LexError, UnbalancedDelimiterError
from nestlex.handler import Handler
from nestlex.lexer import Lexer, group, tokenize
from nestlex.precedence import PrecedenceEntry, PrecedenceTable
from nestlex.tokens import ID, LIT, Position, Span, Token

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "ID",
    "LIT",
    "Associativity",
    "ConfigError",
    "DelimiterPair",
    "Handler",
    "LexError",
    "Lexer",
    "LexerConfig",
    "PatternRule",
    "Position",
    "PrecedenceEntry",
    "PrecedenceRule",
    "PrecedenceTable",
    "Span",
    "Token",
    "UnbalancedDelimiterError",
    "group",
    "tokenize",
]
