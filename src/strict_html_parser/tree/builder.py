"""AST builder for strict HTML parsing.

This module projects the raw span tree produced by the grammar matcher into
:class:`Element` and :class:`Text` nodes. The grammar has already committed to
a single parse, so the projection is a straight recursive walk with no
backtracking. Spans that do not have the shape their production guarantees
raise :class:`GrammarInvariantError`.
"""

import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

from strict_html_parser.grammar import Rule, Span
from strict_html_parser.shared import (
    GrammarInvariantError,
    ParserConfig,
    SourcePosition,
    TagMismatchError,
    get_logger,
)

from .nodes import Attribute, Element, Node, Text

QUOTE = '"'


@dataclass
class _BuildState:
    """Per-call state threaded through the projection."""

    source: str
    base_offset: int = 0
    nodes_built: int = 0

    def position(self, offset: int) -> SourcePosition:
        return SourcePosition.from_offset(self.source, offset - self.base_offset)


class AstBuilder:
    """Builds the semantic node tree from a matched ``html`` span.

    Instances hold only configuration and may be shared between threads.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize AST builder.

        Args:
            config: Parser configuration; decides whether closing tag names are checked
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "ast_builder")

    def build(self, root: Span, source: Optional[str] = None) -> List[Node]:
        """Build the document node sequence from a span tree.

        Args:
            root: Span of an ``html`` or ``elements`` production
            source: Original input, used for error positions; defaults to the
                root span's text

        Returns:
            Top-level nodes in source order

        Raises:
            TagMismatchError: If tag names are checked and a closing tag differs
            GrammarInvariantError: If ``root`` is not a document span
        """
        start_time = time.perf_counter()
        if source is None:
            state = _BuildState(source=root.text, base_offset=root.start)
        else:
            state = _BuildState(source=source)

        if root.rule is Rule.HTML:
            elements = root.find(Rule.ELEMENTS)
            nodes = self._build_elements(elements, state) if elements is not None else []
        elif root.rule is Rule.ELEMENTS:
            nodes = self._build_elements(root, state)
        else:
            raise GrammarInvariantError(
                f"Cannot build a document from a {root.rule.value} span"
            )

        self.logger.info(
            "AST build completed",
            extra={
                "top_level_nodes": len(nodes),
                "nodes_built": state.nodes_built,
                "tag_matching": self.config.tag_matching.name,
                "processing_time_ms": (time.perf_counter() - start_time) * 1000,
            },
        )
        return nodes

    def build_node(self, span: Span, source: Optional[str] = None) -> Node:
        """Build a single node from an ``element``, ``self_closed_tag`` or ``text`` span."""
        if source is None:
            state = _BuildState(source=span.text, base_offset=span.start)
        else:
            state = _BuildState(source=source)
        return self._build_node(span, state)

    def _build_elements(self, span: Span, state: _BuildState) -> List[Node]:
        nodes: List[Node] = []
        for child in span.children:
            if child.rule in (Rule.ELEMENT, Rule.SELF_CLOSED_TAG):
                nodes.append(self._build_node(child, state))
        return nodes

    def _build_node(self, span: Span, state: _BuildState) -> Node:
        if span.rule is Rule.ELEMENT:
            node: Node = self._build_element(span, state)
        elif span.rule is Rule.SELF_CLOSED_TAG:
            tag_name, attributes = self._tag_head(span)
            node = Element(tag_name=tag_name, attributes=attributes)
        elif span.rule is Rule.TEXT:
            node = Text(span.text)
        else:
            raise GrammarInvariantError(
                f"Unexpected {span.rule.value} span at offset {span.start}"
            )
        state.nodes_built += 1
        return node

    def _build_element(self, span: Span, state: _BuildState) -> Element:
        opening = self._require(span, Rule.OPENING_TAG)
        closing = self._require(span, Rule.CLOSING_TAG)
        tag_name, attributes = self._tag_head(opening)

        children: List[Node] = []
        content = span.find(Rule.CONTENT)
        if content is not None:
            for child in content.children:
                children.append(self._build_node(child, state))

        # Checked after the children so the earliest bad closing tag is reported
        if self.config.checks_tag_names:
            closing_name = self._require(closing, Rule.TAG_NAME).text
            if closing_name != tag_name:
                raise TagMismatchError(
                    expected=tag_name,
                    found=closing_name,
                    position=state.position(closing.start),
                )

        return Element(
            tag_name=tag_name,
            attributes=tuple(attributes),
            children=tuple(children),
        )

    def _tag_head(self, span: Span) -> Tuple[str, Tuple[Attribute, ...]]:
        """Extract tag name and attributes from an opening or self-closing tag."""
        tag_name = self._require(span, Rule.TAG_NAME).text
        attribute_list = span.find(Rule.ATTRIBUTE_LIST)
        if attribute_list is None:
            return tag_name, ()
        return tag_name, self._attributes(attribute_list)

    def _attributes(self, span: Span) -> Tuple[Attribute, ...]:
        attributes = []
        for attribute in span.find_all(Rule.ATTRIBUTE):
            key = self._require(attribute, Rule.IDENTIFIER).text
            quoted = self._require(attribute, Rule.QUOTED_STRING).text
            if len(quoted) < 2 or quoted[0] != QUOTE or quoted[-1] != QUOTE:
                raise GrammarInvariantError(
                    f"Quoted string at offset {attribute.start} is not delimited"
                )
            attributes.append((key, quoted[1:-1]))
        return tuple(attributes)

    @staticmethod
    def _require(span: Span, rule: Rule) -> Span:
        child = span.find(rule)
        if child is None:
            raise GrammarInvariantError(
                f"{span.rule.value} span at offset {span.start} has no {rule.value}"
            )
        return child
