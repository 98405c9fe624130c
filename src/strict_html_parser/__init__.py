"""Strict HTML Parser.

A whole-document parser for a small, well-defined subset of HTML: tags with
double-quoted attributes, nested content, self-closing tags and free text.
Conforming documents become an ordered sequence of Element and Text nodes;
anything else is rejected with a structured ParseError.

Progressive API Disclosure:
- Level 1: Simple functions - parse_html(), parse_file(), parse()
- Level 2: Configured parser - HtmlParser class with ParserConfig
- Level 3: Internals - strict_html_parser.grammar (GRAMMAR, GrammarMatcher)
  and strict_html_parser.tree (AstBuilder)
"""

__version__ = "0.1.0"
__author__ = "Strict HTML Parser Team"

# Level 1: Simple functions
# Level 2: Configured parser
from .api import HtmlParser, parse, parse_file, parse_html

# Raw span tree for rule-level parsing
from .grammar import Rule, Span

# Configuration and errors
from .shared import (
    ConfigError,
    ConfigValidationError,
    GrammarSyntaxError,
    NestingDepthError,
    ParseError,
    ParserConfig,
    SourceReadError,
    TagMatchingPolicy,
    TagMismatchError,
    UnknownRuleError,
)

# Document model
from .tree import Element, Node, Text

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse_html",
    "parse_file",
    "parse",

    # Level 2: Configured parser
    "HtmlParser",
    "ParserConfig",
    "TagMatchingPolicy",

    # Result objects and data structures
    "Element",
    "Node",
    "Text",
    "Rule",
    "Span",

    # Errors
    "ParseError",
    "GrammarSyntaxError",
    "TagMismatchError",
    "UnknownRuleError",
    "NestingDepthError",
    "SourceReadError",
    "ConfigError",
    "ConfigValidationError",
]
