"""Parsing expression combinators used to declare the grammar.

Each expression matches at a position of a :class:`MatchState` and returns
either the new position plus the spans it produced, or ``None``. Failures are
never raised; they are recorded on the state so the matcher can report the
furthest point the input was understood up to. Ordered choice commits to the
first alternative that succeeds, and repetition is greedy.
"""

import re
from typing import TYPE_CHECKING, Dict, List, Optional, Set, Tuple

from strict_html_parser.shared.errors import NestingDepthError
from strict_html_parser.shared.result import SourcePosition

from .span import Span

if TYPE_CHECKING:
    from .rules import Rule

MatchOutcome = Optional[Tuple[int, List[Span]]]


class MatchState:
    """Per-call matching state: the input, the grammar and failure tracking."""

    def __init__(
        self,
        source: str,
        grammar: Dict["Rule", "Expression"],
        max_depth: int,
        depth_rules: Tuple["Rule", ...] = (),
        depth_guard: Optional["Rule"] = None,
    ) -> None:
        self.source = source
        self.grammar = grammar
        self.max_depth = max_depth
        self.depth_rules = depth_rules
        self.depth_guard = depth_guard
        self.depth = 0
        self.deepest = 0
        self.deepest_offset = 0
        self.furthest = 0
        self.expected: Set[str] = set()
        self.spans_matched = 0

    def fail(self, position: int, label: str) -> None:
        """Record that ``label`` was expected at ``position``."""
        if position > self.furthest:
            self.furthest = position
            self.expected = {label}
        elif position == self.furthest:
            self.expected.add(label)

    def enter(self, rule: "Rule", position: int) -> None:
        if rule in self.depth_rules:
            self.depth += 1
            if self.depth > self.deepest:
                self.deepest = self.depth
                self.deepest_offset = position

    def check_depth(self, rule: "Rule", position: int) -> None:
        """Raise once a guard production matches deeper than the limit allows.

        Depth is counted on entering a nesting production, but only enforced
        when its guard matched, so merely trying an element at a closing or
        self-closing tag does not count as nesting.
        """
        if rule is self.depth_guard and self.depth > self.max_depth:
            raise NestingDepthError(
                self.max_depth, SourcePosition.from_offset(self.source, position)
            )

    def leave(self, rule: "Rule") -> None:
        if rule in self.depth_rules:
            self.depth -= 1


class Expression:
    """Base class for parsing expressions."""

    def match(self, state: MatchState, position: int) -> MatchOutcome:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.describe()})"


class Literal(Expression):
    """Match an exact string."""

    def __init__(self, value: str) -> None:
        if not value:
            raise ValueError("Literal value cannot be empty")
        self.value = value

    def match(self, state: MatchState, position: int) -> MatchOutcome:
        if state.source.startswith(self.value, position):
            return position + len(self.value), []
        state.fail(position, self.describe())
        return None

    def describe(self) -> str:
        return f"'{self.value}'"


class Pattern(Expression):
    """Match a regular expression anchored at the current position.

    Patterns must not match the empty string; optional repetition is expressed
    with :class:`ZeroOrMore` or :class:`Opt` instead. Silent patterns do not
    contribute to failure expectations.
    """

    def __init__(self, pattern: str, label: str, silent: bool = False) -> None:
        self.regex = re.compile(pattern)
        self.label = label
        self.silent = silent

    def match(self, state: MatchState, position: int) -> MatchOutcome:
        found = self.regex.match(state.source, position)
        if found is None or found.end() == position:
            if not self.silent:
                state.fail(position, self.label)
            return None
        return found.end(), []

    def describe(self) -> str:
        return self.label


class EndOfInput(Expression):
    """Match only at the end of the input."""

    def match(self, state: MatchState, position: int) -> MatchOutcome:
        if position == len(state.source):
            return position, []
        state.fail(position, self.describe())
        return None

    def describe(self) -> str:
        return "EOI"


class Sequence(Expression):
    """Match every sub-expression in order."""

    def __init__(self, *items: Expression) -> None:
        self.items = items

    def match(self, state: MatchState, position: int) -> MatchOutcome:
        spans: List[Span] = []
        for item in self.items:
            outcome = item.match(state, position)
            if outcome is None:
                return None
            position, produced = outcome
            spans.extend(produced)
        return position, spans

    def describe(self) -> str:
        return " ~ ".join(item.describe() for item in self.items)


class Choice(Expression):
    """Ordered choice: the first alternative that matches wins."""

    def __init__(self, *alternatives: Expression) -> None:
        self.alternatives = alternatives

    def match(self, state: MatchState, position: int) -> MatchOutcome:
        for alternative in self.alternatives:
            outcome = alternative.match(state, position)
            if outcome is not None:
                return outcome
        return None

    def describe(self) -> str:
        return " | ".join(alt.describe() for alt in self.alternatives)


class ZeroOrMore(Expression):
    """Greedy repetition that always succeeds."""

    def __init__(self, item: Expression) -> None:
        self.item = item

    def match(self, state: MatchState, position: int) -> MatchOutcome:
        spans: List[Span] = []
        while True:
            outcome = self.item.match(state, position)
            if outcome is None or outcome[0] == position:
                return position, spans
            position, produced = outcome
            spans.extend(produced)

    def describe(self) -> str:
        return f"({self.item.describe()})*"


class Opt(Expression):
    """Optional match that always succeeds."""

    def __init__(self, item: Expression) -> None:
        self.item = item

    def match(self, state: MatchState, position: int) -> MatchOutcome:
        outcome = self.item.match(state, position)
        if outcome is None:
            return position, []
        return outcome

    def describe(self) -> str:
        return f"({self.item.describe()})?"


class Ref(Expression):
    """Reference to a named production.

    A successful match is wrapped in a :class:`Span` tagged with the rule, unless
    the rule is silent. A failure that consumed nothing is reported under the
    rule's own name instead of the literals tried inside it.
    """

    def __init__(self, rule: "Rule", silent: bool = False) -> None:
        self.rule = rule
        self.silent = silent

    def match(self, state: MatchState, position: int) -> MatchOutcome:
        furthest_before = state.furthest
        expected_before = set(state.expected)

        state.enter(self.rule, position)
        try:
            outcome = state.grammar[self.rule].match(state, position)
        finally:
            state.leave(self.rule)

        if outcome is None:
            if state.furthest == position and not self.silent:
                state.expected = (
                    expected_before if furthest_before == position else set()
                )
                state.fail(position, self.rule.value)
            return None

        state.check_depth(self.rule, position)
        end, children = outcome
        if self.silent:
            return end, []
        state.spans_matched += 1
        span = Span(
            rule=self.rule,
            start=position,
            end=end,
            text=state.source[position:end],
            children=tuple(children),
        )
        return end, [span]

    def describe(self) -> str:
        return self.rule.value
