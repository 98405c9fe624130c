"""Shared utilities for strict HTML parsing.

This module provides configuration objects, the error taxonomy, source
positions, metrics and logging helpers used by the grammar, tree and API layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
    TagMatchingPolicy,
)
from .errors import (
    GrammarInvariantError,
    GrammarSyntaxError,
    NestingDepthError,
    ParseError,
    SourceReadError,
    TagMismatchError,
    UnknownRuleError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    ParseMetrics,
    SourcePosition,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "TagMatchingPolicy",
    "GrammarInvariantError",
    "GrammarSyntaxError",
    "NestingDepthError",
    "ParseError",
    "SourceReadError",
    "TagMismatchError",
    "UnknownRuleError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "ParseMetrics",
    "SourcePosition",
]
