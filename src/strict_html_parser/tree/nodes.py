"""AST value types for strict HTML documents.

A parsed document is an ordered sequence of :data:`Node` values, each either an
:class:`Element` or a :class:`Text`. Both are frozen: a tree is built once per
parse call and never mutated afterwards.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

Attribute = Tuple[str, str]


@dataclass(frozen=True)
class Text:
    """A run of literal text, stored exactly as it appeared in the input."""

    value: str

    def __post_init__(self) -> None:
        """Validate text value."""
        if not isinstance(self.value, str):
            raise TypeError("Text value must be a string")

    def to_dict(self) -> Dict[str, Any]:
        """Convert text node to dictionary representation."""
        return {"type": "text", "value": self.value}


@dataclass(frozen=True)
class Element:
    """A matched tag with its attributes and child nodes.

    Attributes keep source order and duplicates, so they are stored as a
    sequence of ``(key, value)`` pairs rather than a mapping. Lists passed in
    for ``attributes`` or ``children`` are converted to tuples.
    """

    tag_name: str
    attributes: Tuple[Attribute, ...] = ()
    children: Tuple["Node", ...] = ()

    def __post_init__(self) -> None:
        """Validate element values and freeze sequence fields."""
        if not self.tag_name:
            raise ValueError("Element tag name cannot be empty")

        attributes = tuple(tuple(pair) for pair in self.attributes)
        for pair in attributes:
            if len(pair) != 2:
                raise ValueError("Attributes must be (key, value) pairs")
        object.__setattr__(self, "attributes", attributes)

        children = tuple(self.children)
        for child in children:
            if not isinstance(child, (Element, Text)):
                raise TypeError("Children must be Element or Text instances")
        object.__setattr__(self, "children", children)

    def get_attribute(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get the value of the first attribute named ``key``."""
        for name, value in self.attributes:
            if name == key:
                return value
        return default

    def get_all(self, key: str) -> List[str]:
        """Get the values of every attribute named ``key`` in source order."""
        return [value for name, value in self.attributes if name == key]

    def has_attribute(self, key: str) -> bool:
        """Check if element has an attribute named ``key``."""
        return any(name == key for name, _ in self.attributes)

    @property
    def child_elements(self) -> List["Element"]:
        """Get direct children that are elements."""
        return [child for child in self.children if isinstance(child, Element)]

    @property
    def text_content(self) -> str:
        """Concatenate all descendant text in document order."""
        parts = []
        for child in self.children:
            if isinstance(child, Text):
                parts.append(child.value)
            else:
                parts.append(child.text_content)
        return "".join(parts)

    def iter_elements(self) -> Iterator["Element"]:
        """Iterate over this element and all descendant elements in document order."""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter_elements()

    def find(self, tag_name: str) -> Optional["Element"]:
        """Find the first descendant element with matching tag name."""
        for element in self.iter_elements():
            if element is not self and element.tag_name == tag_name:
                return element
        return None

    def find_all(self, tag_name: str) -> List["Element"]:
        """Find all descendant elements with matching tag name."""
        return [
            element for element in self.iter_elements()
            if element is not self and element.tag_name == tag_name
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        return {
            "type": "element",
            "tag_name": self.tag_name,
            "attributes": [list(pair) for pair in self.attributes],
            "children": [child.to_dict() for child in self.children],
        }


Node = Union[Element, Text]


def iter_elements(nodes: Iterable[Node]) -> Iterator[Element]:
    """Iterate over every element in a node sequence in document order."""
    for node in nodes:
        if isinstance(node, Element):
            yield from node.iter_elements()


def nodes_to_dict(nodes: Sequence[Node]) -> List[Dict[str, Any]]:
    """Convert a node sequence to a list of dictionaries."""
    return [node.to_dict() for node in nodes]


def node_from_dict(data: Dict[str, Any]) -> Node:
    """Rebuild a node from the output of ``to_dict``."""
    node_type = data.get("type")
    if node_type == "text":
        return Text(data["value"])
    if node_type == "element":
        return Element(
            tag_name=data["tag_name"],
            attributes=tuple(
                (str(key), str(value)) for key, value in data.get("attributes", [])
            ),
            children=tuple(node_from_dict(child) for child in data.get("children", [])),
        )
    raise ValueError(f"Unknown node type: {node_type!r}")


def format_tree(nodes: Sequence[Node], indent: str = "  ") -> str:
    """Render a node sequence as an indented outline for display."""
    lines: List[str] = []

    def render(node: Node, depth: int) -> None:
        pad = indent * depth
        if isinstance(node, Text):
            lines.append(f"{pad}Text({node.value!r})")
            return
        attributes = " ".join(f'{key}="{value}"' for key, value in node.attributes)
        head = f"{node.tag_name} {attributes}" if attributes else node.tag_name
        lines.append(f"{pad}Element <{head}>")
        for child in node.children:
            render(child, depth + 1)

    for node in nodes:
        render(node, 0)
    return "\n".join(lines)


def count_nodes(nodes: Iterable[Node]) -> int:
    """Count every node in a sequence, descendants included."""
    total = 0
    for node in nodes:
        total += 1
        if isinstance(node, Element):
            total += count_nodes(node.children)
    return total
