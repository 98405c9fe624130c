"""Declarative production table for the strict HTML grammar.

The grammar is a fixed, ordered set of parsing expressions keyed by
:class:`Rule`. Lexical productions (identifiers, tag names, quoted strings,
text) are atomic patterns; structural productions are sequences, ordered
choices and repetitions of references to other productions. Whitespace is a
silent production: it separates tokens but never appears in the span tree.
"""

from enum import Enum
from typing import Dict, List, Union

from strict_html_parser.shared.errors import UnknownRuleError

from .expressions import (
    Choice,
    EndOfInput,
    Expression,
    Literal,
    Opt,
    Pattern,
    Ref,
    Sequence,
    ZeroOrMore,
)


class Rule(Enum):
    """Named grammar productions."""

    WHITESPACE = "whitespace"
    IDENTIFIER = "identifier"
    TAG_NAME = "tag_name"
    QUOTED_STRING = "quoted_string"
    ATTRIBUTE = "attribute"
    ATTRIBUTE_LIST = "attribute_list"
    OPENING_TAG = "opening_tag"
    CLOSING_TAG = "closing_tag"
    SELF_CLOSED_TAG = "self_closed_tag"
    TEXT = "text"
    CONTENT = "content"
    ELEMENT = "element"
    ELEMENTS = "elements"
    HTML = "html"


# Letter-led ASCII alphanumerics; no underscore, hyphen or colon
NAME_PATTERN = r"[A-Za-z][A-Za-z0-9]*"

# A run without '<' holding at least one non-whitespace character
TEXT_PATTERN = r"[ \t\r\n]*[^< \t\r\n][^<]*"

_ws = Ref(Rule.WHITESPACE, silent=True)
_tag_attributes = Opt(Sequence(_ws, Ref(Rule.ATTRIBUTE_LIST)))
_markup = Choice(Ref(Rule.ELEMENT), Ref(Rule.SELF_CLOSED_TAG))

GRAMMAR: Dict[Rule, Expression] = {
    Rule.WHITESPACE: Pattern(r"[ \t\r\n]+", "whitespace", silent=True),
    Rule.IDENTIFIER: Pattern(NAME_PATTERN, "identifier"),
    Rule.TAG_NAME: Pattern(NAME_PATTERN, "tag_name"),
    Rule.QUOTED_STRING: Sequence(
        Literal('"'),
        Opt(Pattern(r'[^"]+', "string content", silent=True)),
        Literal('"'),
    ),
    Rule.ATTRIBUTE: Sequence(
        Ref(Rule.IDENTIFIER), Literal("="), Ref(Rule.QUOTED_STRING)
    ),
    Rule.ATTRIBUTE_LIST: Opt(Sequence(
        Ref(Rule.ATTRIBUTE),
        ZeroOrMore(Sequence(_ws, Ref(Rule.ATTRIBUTE))),
    )),
    Rule.OPENING_TAG: Sequence(
        Literal("<"), Ref(Rule.TAG_NAME), _tag_attributes, Opt(_ws), Literal(">")
    ),
    Rule.CLOSING_TAG: Sequence(
        Literal("</"), Ref(Rule.TAG_NAME), Opt(_ws), Literal(">")
    ),
    Rule.SELF_CLOSED_TAG: Sequence(
        Literal("<"), Ref(Rule.TAG_NAME), _tag_attributes, Opt(_ws), Literal("/>")
    ),
    Rule.TEXT: Pattern(TEXT_PATTERN, "text"),
    Rule.CONTENT: ZeroOrMore(Choice(
        Ref(Rule.ELEMENT),
        Ref(Rule.SELF_CLOSED_TAG),
        Ref(Rule.TEXT),
        _ws,
    )),
    Rule.ELEMENT: Sequence(
        Ref(Rule.OPENING_TAG), Ref(Rule.CONTENT), Ref(Rule.CLOSING_TAG)
    ),
    Rule.ELEMENTS: Opt(Sequence(
        _markup,
        ZeroOrMore(Sequence(Opt(_ws), _markup)),
    )),
    Rule.HTML: Sequence(Opt(_ws), Ref(Rule.ELEMENTS), Opt(_ws), EndOfInput()),
}

# Productions whose nesting is bounded by ParserConfig.max_nesting_depth,
# and the production whose match commits to one more level
NESTING_RULES = (Rule.ELEMENT,)
NESTING_GUARD = Rule.OPENING_TAG


def rule_names() -> List[str]:
    """Get the names of all productions in declaration order."""
    return [rule.value for rule in Rule]


def resolve_rule(rule: Union[str, Rule]) -> Rule:
    """Resolve a production name (case-insensitive) or Rule member to a Rule."""
    if isinstance(rule, Rule):
        return rule
    if isinstance(rule, str):
        try:
            return Rule(rule.strip().lower())
        except ValueError:
            pass
    raise UnknownRuleError(str(rule), rule_names())
