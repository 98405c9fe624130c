"""Core parser API for strict HTML parsing.

This module provides the entry points callers use: module-level functions for
one-off parsing and the configurable :class:`HtmlParser` class for reuse.
Parsing is two-staged. The grammar matcher turns text into a raw span tree,
then the AST builder projects that tree into nodes. Either stage may raise a
:class:`ParseError`; no partial tree is ever returned.
"""

import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from strict_html_parser.grammar import GrammarMatcher, Rule, Span
from strict_html_parser.shared import (
    ParseError,
    ParseMetrics,
    ParserConfig,
    SourceReadError,
    get_logger,
)
from strict_html_parser.tree import AstBuilder, Node, count_nodes

PathType = Union[str, Path]

MS_PER_SECOND = 1000


def parse_html(text: str, config: Optional[ParserConfig] = None) -> List[Node]:
    """Parse a whole document into its top-level nodes.

    Args:
        text: Complete document text
        config: Optional parser configuration (strict tag matching by default)

    Returns:
        Top-level nodes in source order; empty for an empty document

    Raises:
        GrammarSyntaxError: If the text does not match the grammar
        TagMismatchError: If tag names are checked and a closing tag differs
        NestingDepthError: If elements nest deeper than allowed

    Examples:
        >>> parse_html('<a href="https://example.com">Link</a>')[0].attributes
        (('href', 'https://example.com'),)
        >>> parse_html("")
        []
    """
    return HtmlParser(config).parse_html(text)


def parse(
    rule_name: Union[str, Rule],
    text: str,
    config: Optional[ParserConfig] = None
) -> Span:
    """Run the grammar from any named production and return the raw span tree.

    Raises:
        UnknownRuleError: If ``rule_name`` does not name a production
        GrammarSyntaxError: If the text does not match the production in full
    """
    return HtmlParser(config).parse(rule_name, text)


def parse_file(
    path: PathType,
    encoding: str = "utf-8",
    config: Optional[ParserConfig] = None
) -> List[Node]:
    """Read a document from disk and parse it.

    Raises:
        SourceReadError: If the file cannot be read or decoded
    """
    return HtmlParser(config).parse_file(path, encoding=encoding)


def read_source(path: PathType, encoding: str = "utf-8") -> str:
    """Read a document, mapping I/O and decoding failures to SourceReadError."""
    file_path = Path(path)
    try:
        return file_path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(file_path, e) from e


class HtmlParser:
    """Configured parser for repeated use.

    Holds a grammar matcher and an AST builder built from one configuration,
    plus usage statistics. Parsing itself keeps no state between calls, so an
    instance may be shared between threads.

    Examples:
        >>> parser = HtmlParser(ParserConfig.lenient())
        >>> parser.parse_html("<div></span>")[0].tag_name
        'div'
        >>> parser.statistics["total_parses"]
        1
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize parser.

        Args:
            config: Parser configuration (defaults to strict tag matching)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "html_parser")

        self._matcher = GrammarMatcher(self.config, self.correlation_id)
        self._builder = AstBuilder(self.config, self.correlation_id)

        self._lock = threading.Lock()
        self._local = threading.local()
        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

    @property
    def last_metrics(self) -> Optional[ParseMetrics]:
        """Metrics of the latest successful ``parse_html`` on the calling thread."""
        return getattr(self._local, "metrics", None)

    def parse_html(self, text: str) -> List[Node]:
        """Parse a whole document into its top-level nodes."""
        start_time = time.perf_counter()
        try:
            root = self._matcher.match(Rule.HTML, text)
            nodes = self._builder.build(root, source=text)
        except ParseError as e:
            processing_time = (time.perf_counter() - start_time) * MS_PER_SECOND
            self._record(False, processing_time)
            self.logger.info(
                "Document rejected",
                extra={
                    "error_type": type(e).__name__,
                    "error": str(e),
                    "input_length": len(text),
                    "processing_time_ms": processing_time,
                },
            )
            raise

        processing_time = (time.perf_counter() - start_time) * MS_PER_SECOND
        metrics = ParseMetrics(
            processing_time_ms=processing_time,
            characters_processed=len(text),
            spans_matched=root.count(),
            nodes_built=count_nodes(nodes),
        )
        self._local.metrics = metrics
        self._record(True, processing_time)
        self.logger.info("Document parsed", extra=metrics.to_dict())
        return nodes

    def parse(self, rule_name: Union[str, Rule], text: str) -> Span:
        """Run the grammar from ``rule_name`` and return the raw span tree."""
        return self._matcher.match(rule_name, text)

    def parse_file(self, path: PathType, encoding: str = "utf-8") -> List[Node]:
        """Read a document from disk and parse it."""
        text = read_source(path, encoding)
        self.logger.debug(
            "Read source file", extra={"path": str(path), "input_length": len(text)}
        )
        return self.parse_html(text)

    def reconfigure(self, config: ParserConfig) -> None:
        """Replace the configuration and rebuild the parsing components."""
        self.config = config
        self._matcher = GrammarMatcher(config, self.correlation_id)
        self._builder = AstBuilder(config, self.correlation_id)
        self.logger.info(
            "Parser reconfigured",
            extra={
                "tag_matching": config.tag_matching.name,
                "max_nesting_depth": config.max_nesting_depth,
            },
        )

    def _record(self, success: bool, processing_time: float) -> None:
        with self._lock:
            self._parse_count += 1
            self._total_processing_time += processing_time
            if success:
                self._successful_parses += 1

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        with self._lock:
            total = self._parse_count
            successful = self._successful_parses
            elapsed = self._total_processing_time
        return {
            "total_parses": total,
            "successful_parses": successful,
            "failed_parses": total - successful,
            "success_rate": successful / total if total > 0 else 0.0,
            "total_processing_time_ms": elapsed,
            "average_processing_time_ms": elapsed / total if total > 0 else 0.0,
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        with self._lock:
            self._parse_count = 0
            self._successful_parses = 0
            self._total_processing_time = 0.0
        self.logger.info("Parser statistics reset")
