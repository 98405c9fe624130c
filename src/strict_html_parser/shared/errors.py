"""Error taxonomy for strict HTML parsing.

Every failure a parse call can produce derives from :class:`ParseError`, so a
caller can catch one type for "the input was rejected" while still telling
syntax failures, tag mismatches and unreadable sources apart.
"""

import os
from typing import Iterable, Optional, Sequence, Tuple, Union

from .result import SourcePosition

PathLike = Union[str, os.PathLike]


class ParseError(Exception):
    """Base exception for all parse failures."""


class GrammarSyntaxError(ParseError):
    """Raised when the input does not conform to the grammar.

    Attributes:
        position: Furthest position the matcher reached
        expected: Sorted names of the productions or literals expected there
        rule: Name of the production the match started from
        source: The input that was being matched
    """

    def __init__(
        self,
        position: SourcePosition,
        expected: Iterable[str],
        rule: str = "html",
        source: str = "",
    ) -> None:
        self.position = position
        self.expected: Tuple[str, ...] = tuple(sorted(set(expected)))
        self.rule = rule
        self.source = source
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        expected = ", ".join(self.expected) if self.expected else "nothing"
        return (
            f"Parsing error at line {self.position.line}, "
            f"column {self.position.column}: expected {expected}"
        )

    @property
    def line_text(self) -> str:
        """Get the full source line containing the failure position."""
        lines = self.source.split("\n")
        index = self.position.line - 1
        return lines[index] if index < len(lines) else ""

    def render(self) -> str:
        """Render the error with the offending source line and a caret marker."""
        gutter = " " * len(str(self.position.line))
        return "\n".join([
            f"{gutter}--> {self.position}",
            f"{gutter} |",
            f"{self.position.line} | {self.line_text}",
            f"{gutter} | {' ' * (self.position.column - 1)}^",
            f"{gutter} = {self}",
        ])


class TagMismatchError(ParseError):
    """Raised when a closing tag names a different element than its opening tag."""

    def __init__(
        self,
        expected: str,
        found: str,
        position: Optional[SourcePosition] = None,
    ) -> None:
        self.expected = expected
        self.found = found
        self.position = position
        message = f"Mismatched tag: expected {expected}, found {found}"
        if position is not None:
            message += f" at line {position.line}, column {position.column}"
        super().__init__(message)


class UnknownRuleError(ParseError, LookupError):
    """Raised when a production name is not part of the grammar."""

    def __init__(self, rule_name: str, known: Sequence[str] = ()) -> None:
        self.rule_name = rule_name
        self.known = tuple(known)
        message = f"Unknown grammar rule: {rule_name!r}"
        if self.known:
            message += f" (known rules: {', '.join(self.known)})"
        super().__init__(message)


class NestingDepthError(ParseError):
    """Raised when elements nest deeper than the parser can follow.

    ``depth`` is set when the interpreter stack ran out before the configured
    ``limit`` was reached; it is the deepest element level entered.
    """

    def __init__(
        self,
        limit: int,
        position: SourcePosition,
        depth: Optional[int] = None,
    ) -> None:
        self.limit = limit
        self.position = position
        self.depth = depth
        location = f"at line {position.line}, column {position.column}"
        if depth is None:
            message = f"Maximum nesting depth of {limit} exceeded {location}"
        else:
            message = (
                f"Nesting depth of {depth} exceeds the interpreter stack "
                f"(configured limit {limit}) {location}"
            )
        super().__init__(message)


class SourceReadError(ParseError):
    """Raised when a document cannot be read before parsing starts."""

    def __init__(self, path: PathLike, cause: Exception) -> None:
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Failed to read file: {self.path}: {cause}")


class GrammarInvariantError(RuntimeError):
    """Raised when a matched span does not have the shape its production guarantees.

    This signals a defect in the grammar or builder, never bad input.
    """
