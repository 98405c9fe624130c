"""API layer for strict HTML parsing.

Module-level functions for one-off parsing, the reusable HtmlParser class, and
adapters exporting documents to other element-tree libraries.
"""

from .adapters import (
    ADAPTERS,
    AdapterMetadata,
    BeautifulSoupAdapter,
    ConversionResult,
    ElementTreeAdapter,
    LxmlAdapter,
    TreeAdapter,
    get_adapter,
)
from .parser import HtmlParser, parse, parse_file, parse_html, read_source

__all__ = [
    "ADAPTERS",
    "AdapterMetadata",
    "BeautifulSoupAdapter",
    "ConversionResult",
    "ElementTreeAdapter",
    "LxmlAdapter",
    "TreeAdapter",
    "get_adapter",
    "HtmlParser",
    "parse",
    "parse_file",
    "parse_html",
    "read_source",
]
