"""Tree layer for strict HTML parsing.

This module turns matched span trees into the semantic document model.

Key Components:
    Element: A tag with ordered attributes and child nodes
    Text: A verbatim run of text
    Node: Union of Element and Text
    AstBuilder: Projection from span trees to node sequences
"""

from .builder import AstBuilder
from .nodes import (
    Attribute,
    Element,
    Node,
    Text,
    count_nodes,
    format_tree,
    iter_elements,
    node_from_dict,
    nodes_to_dict,
)

__all__ = [
    "AstBuilder",
    "Attribute",
    "Element",
    "Node",
    "Text",
    "count_nodes",
    "format_tree",
    "iter_elements",
    "node_from_dict",
    "nodes_to_dict",
]
