"""Grammar matcher producing raw span trees.

The matcher interprets the production table in :mod:`.rules` against a whole
input string. It either returns the span tree of the requested production,
which must consume the entire input, or raises :class:`GrammarSyntaxError`
naming the furthest position reached and what was expected there.
"""

import time
from typing import Optional, Union

from strict_html_parser.shared import (
    GrammarSyntaxError,
    NestingDepthError,
    ParserConfig,
    SourcePosition,
    get_logger,
)

from .expressions import EndOfInput, MatchState, Ref, Sequence
from .rules import GRAMMAR, NESTING_GUARD, NESTING_RULES, Rule, resolve_rule
from .span import Span

MS_PER_SECOND = 1000


class GrammarMatcher:
    """Matches input text against a named production of the grammar.

    Holds only configuration, so one instance can serve concurrent callers;
    all per-call state lives in a fresh :class:`MatchState`.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "grammar_matcher")

    def match(self, rule: Union[str, Rule], source: str) -> Span:
        """Match ``source`` in full against ``rule``.

        Args:
            rule: Production name or Rule member to start from
            source: Complete input text

        Returns:
            Span for the start production covering the whole input

        Raises:
            UnknownRuleError: If ``rule`` does not name a production
            GrammarSyntaxError: If the input does not match
            NestingDepthError: If elements nest deeper than allowed
        """
        if not isinstance(source, str):
            raise TypeError("Input must be a string")

        start_rule = resolve_rule(rule)
        start_time = time.perf_counter()
        state = MatchState(
            source,
            GRAMMAR,
            max_depth=self.config.max_nesting_depth,
            depth_rules=NESTING_RULES,
            depth_guard=NESTING_GUARD,
        )

        try:
            outcome = Sequence(Ref(start_rule), EndOfInput()).match(state, 0)
        except RecursionError:
            raise NestingDepthError(
                self.config.max_nesting_depth,
                SourcePosition.from_offset(source, state.deepest_offset),
                depth=state.deepest,
            ) from None

        elapsed_ms = (time.perf_counter() - start_time) * MS_PER_SECOND

        if outcome is None:
            error = GrammarSyntaxError(
                SourcePosition.from_offset(source, state.furthest),
                state.expected,
                rule=start_rule.value,
                source=source,
            )
            self.logger.debug(
                "Grammar match failed",
                extra={
                    "rule": start_rule.value,
                    "input_length": len(source),
                    "failure_offset": state.furthest,
                    "expected": list(error.expected),
                    "processing_time_ms": elapsed_ms,
                },
            )
            raise error

        _, spans = outcome
        self.logger.debug(
            "Grammar match completed",
            extra={
                "rule": start_rule.value,
                "input_length": len(source),
                "spans_matched": state.spans_matched,
                "processing_time_ms": elapsed_ms,
            },
        )
        return spans[0]


def parse(
    rule_name: Union[str, Rule],
    text: str,
    config: Optional[ParserConfig] = None
) -> Span:
    """Run the grammar from ``rule_name`` and return the raw span tree.

    This is the low-level entry point for exercising single productions:

        >>> parse("identifier", "src").text
        'src'
        >>> parse("attribute", 'href="x"').find(Rule.QUOTED_STRING).text
        '"x"'
    """
    return GrammarMatcher(config).match(rule_name, text)
