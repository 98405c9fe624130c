"""Source positions and metrics for strict HTML parsing.

This module defines the small value objects shared by the grammar, tree and API
layers: where in the input something happened, and how much work a parse did.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class SourcePosition:
    """Location of a character in the parsed input."""

    offset: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")

    @classmethod
    def from_offset(cls, source: str, offset: int) -> "SourcePosition":
        """Compute line and column for a character offset into ``source``.

        Offsets past the end of the input are clamped to the end, which is
        where end-of-input failures are reported.
        """
        offset = max(0, min(offset, len(source)))
        line = source.count("\n", 0, offset) + 1
        line_start = source.rfind("\n", 0, offset) + 1
        return cls(offset=offset, line=line, column=offset - line_start + 1)

    def to_dict(self) -> Dict[str, int]:
        """Convert position to dictionary representation."""
        return {"offset": self.offset, "line": self.line, "column": self.column}

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass
class ParseMetrics:
    """Counters gathered while parsing a single document."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    spans_matched: int = 0
    nodes_built: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary representation."""
        return {
            "processing_time_ms": self.processing_time_ms,
            "characters_processed": self.characters_processed,
            "spans_matched": self.spans_matched,
            "nodes_built": self.nodes_built,
        }
