"""Raw span tree produced by the grammar matcher.

A :class:`Span` records which production matched which region of the input,
together with the spans of the named productions matched inside it. It carries
no semantic interpretation; that is the AST builder's job.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Tuple

if TYPE_CHECKING:
    from .rules import Rule


@dataclass(frozen=True)
class Span:
    """One matched production over ``source[start:end]``."""

    rule: "Rule"
    start: int
    end: int
    text: str
    children: Tuple["Span", ...] = ()

    def __post_init__(self) -> None:
        """Validate span bounds."""
        if self.start < 0 or self.end < self.start:
            raise ValueError("Span bounds must satisfy 0 <= start <= end")
        if len(self.text) != self.end - self.start:
            raise ValueError("Span text length must equal end - start")

    def __len__(self) -> int:
        return self.end - self.start

    def find(self, rule: "Rule") -> Optional["Span"]:
        """Find the first direct child matched by ``rule``."""
        for child in self.children:
            if child.rule is rule:
                return child
        return None

    def find_all(self, rule: "Rule") -> List["Span"]:
        """Find all direct children matched by ``rule``."""
        return [child for child in self.children if child.rule is rule]

    def walk(self) -> Iterator["Span"]:
        """Iterate over this span and all descendants in source order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def count(self) -> int:
        """Count this span and all of its descendants."""
        return 1 + sum(child.count() for child in self.children)

    def to_dict(self) -> Dict[str, Any]:
        """Convert span tree to dictionary representation."""
        result: Dict[str, Any] = {
            "rule": self.rule.value,
            "start": self.start,
            "end": self.end,
            "text": self.text,
        }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result

    def pretty(self, indent: int = 0) -> str:
        """Render the span tree as an indented outline.

        Leaf spans show their matched text; inner spans show only the rule name.
        """
        pad = "  " * indent
        if not self.children:
            return f'{pad}- {self.rule.value}: "{self.text}"'
        lines = [f"{pad}- {self.rule.value}"]
        lines.extend(child.pretty(indent + 1) for child in self.children)
        return "\n".join(lines)
