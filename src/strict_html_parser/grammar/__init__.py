"""Grammar layer for strict HTML parsing.

This module defines which inputs are documents: a declarative production table,
the parsing-expression combinators it is written in, and the matcher that turns
accepted input into a raw span tree.

Key Components:
    Rule: Enumeration of the named productions
    GRAMMAR: Production table mapping each Rule to its parsing expression
    GrammarMatcher: Matches input against a production and builds Span trees
    Span: One matched production with its nested spans
    parse: Low-level entry point running any production over a whole input
"""

from .expressions import (
    Choice,
    EndOfInput,
    Expression,
    Literal,
    MatchState,
    Opt,
    Pattern,
    Ref,
    Sequence,
    ZeroOrMore,
)
from .matcher import GrammarMatcher, parse
from .rules import GRAMMAR, Rule, resolve_rule, rule_names
from .span import Span

__all__ = [
    "Choice",
    "EndOfInput",
    "Expression",
    "Literal",
    "MatchState",
    "Opt",
    "Pattern",
    "Ref",
    "Sequence",
    "ZeroOrMore",
    "GrammarMatcher",
    "parse",
    "GRAMMAR",
    "Rule",
    "resolve_rule",
    "rule_names",
    "Span",
]
