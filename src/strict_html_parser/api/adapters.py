"""Export adapters for strict HTML document trees.

Adapters convert a parsed node sequence into the element trees of other
libraries, so documents can be queried with XPath or CSS selectors, or
serialised. The target models store attributes as a mapping, so duplicate
attribute keys collapse to the last value; the ElementTree-style models also
store text as ``.text``/``.tail``, so text is redistributed accordingly.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from strict_html_parser.shared import get_logger
from strict_html_parser.tree import Element, Node, Text


@dataclass
class AdapterMetadata:
    """Description of an export adapter."""

    name: str
    target_library: str
    description: str = ""


@dataclass
class ConversionResult:
    """Converted elements plus what the conversion could not carry over."""

    elements: List[Any] = field(default_factory=list)
    dropped_text: List[str] = field(default_factory=list)
    dropped_attributes: List[Tuple[str, str]] = field(default_factory=list)
    collapsed_attributes: int = 0
    conversion_time_ms: float = 0.0

    @property
    def lossless(self) -> bool:
        """Check whether every text run and attribute survived the conversion."""
        return (
            not self.dropped_text
            and not self.dropped_attributes
            and self.collapsed_attributes == 0
        )


class TreeAdapter(ABC):
    """Base class for converting node sequences into another library's elements."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, f"{self.metadata.name}_adapter")

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _convert_element(self, element: Element, result: ConversionResult) -> Any:
        """Convert one element and its descendants."""

    @abstractmethod
    def serialize(self, nodes: Sequence[Node]) -> str:
        """Serialise top-level nodes to markup text."""

    def convert(self, nodes: Sequence[Node]) -> ConversionResult:
        """Convert top-level nodes into a list of target elements.

        Top-level text has no element to attach to and is reported in
        ``dropped_text``; the grammar never produces it, but hand-built
        sequences may contain it.
        """
        start_time = time.perf_counter()
        result = ConversionResult()

        for node in nodes:
            if isinstance(node, Text):
                result.dropped_text.append(node.value)
                continue
            result.elements.append(self._convert_element(node, result))

        result.conversion_time_ms = (time.perf_counter() - start_time) * 1000
        self.logger.debug(
            "Conversion completed",
            extra={
                "target": self.metadata.target_library,
                "element_count": len(result.elements),
                "lossless": result.lossless,
            },
        )
        return result

    def to_target(self, nodes: Sequence[Node]) -> List[Any]:
        """Convert top-level nodes and return only the target elements."""
        return self.convert(nodes).elements

    @staticmethod
    def _attribute_map(element: Element, result: ConversionResult) -> Dict[str, str]:
        attributes: Dict[str, str] = {}
        for key, value in element.attributes:
            if key in attributes:
                result.collapsed_attributes += 1
            attributes[key] = value
        return attributes


class _EtreeStyleAdapter(TreeAdapter):
    """Shared conversion for libraries following the ElementTree API."""

    @abstractmethod
    def _module(self) -> Any:
        """Return the element-tree module used to build elements."""

    def _convert_element(self, element: Element, result: ConversionResult) -> Any:
        module = self._module()
        target = module.Element(element.tag_name)
        for key, value in self._attribute_map(element, result).items():
            try:
                target.set(key, value)
            except ValueError:
                # lxml rejects control characters that XML cannot represent
                result.dropped_attributes.append((key, value))

        last_child = None
        for child in element.children:
            if isinstance(child, Text):
                try:
                    if last_child is None:
                        target.text = (target.text or "") + child.value
                    else:
                        last_child.tail = (last_child.tail or "") + child.value
                except ValueError:
                    result.dropped_text.append(child.value)
            else:
                last_child = self._convert_element(child, result)
                target.append(last_child)
        return target

    def serialize(self, nodes: Sequence[Node]) -> str:
        return self.serialize_elements(self.to_target(nodes))

    def serialize_elements(self, elements: Sequence[Any]) -> str:
        """Serialise already converted elements."""
        etree = self._module()
        return "".join(etree.tostring(element, encoding="unicode") for element in elements)


class LxmlAdapter(_EtreeStyleAdapter):
    """Adapter producing ``lxml.etree`` elements."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            target_library="lxml",
            description="Convert documents to lxml.etree elements",
        )

    def is_available(self) -> bool:
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _module(self) -> Any:
        import lxml.etree

        return lxml.etree


class ElementTreeAdapter(_EtreeStyleAdapter):
    """Adapter producing standard library ``xml.etree.ElementTree`` elements."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="etree",
            target_library="xml.etree.ElementTree",
            description="Convert documents to xml.etree.ElementTree elements",
        )

    def is_available(self) -> bool:
        return True

    def _module(self) -> Any:
        import xml.etree.ElementTree

        return xml.etree.ElementTree


class BeautifulSoupAdapter(TreeAdapter):
    """Adapter producing BeautifulSoup tags.

    BeautifulSoup keeps text as ordered string children, so mixed content
    converts without redistribution.
    """

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="beautifulsoup",
            target_library="beautifulsoup4",
            description="Convert documents to bs4 Tag objects",
        )

    def is_available(self) -> bool:
        try:
            from bs4 import BeautifulSoup  # noqa: F401
            return True
        except ImportError:
            return False

    def _convert_element(self, element: Element, result: ConversionResult) -> Any:
        from bs4 import BeautifulSoup

        return self._build_tag(BeautifulSoup("", "html.parser"), element, result)

    def _build_tag(self, soup: Any, element: Element, result: ConversionResult) -> Any:
        from bs4 import NavigableString

        tag = soup.new_tag(element.tag_name, attrs=self._attribute_map(element, result))
        for child in element.children:
            if isinstance(child, Text):
                tag.append(NavigableString(child.value))
            else:
                tag.append(self._build_tag(soup, child, result))
        return tag

    def serialize(self, nodes: Sequence[Node]) -> str:
        return "".join(str(tag) for tag in self.to_target(nodes))


ADAPTERS: Dict[str, Type[TreeAdapter]] = {
    "lxml": LxmlAdapter,
    "etree": ElementTreeAdapter,
    "beautifulsoup": BeautifulSoupAdapter,
}


def get_adapter(name: str, correlation_id: Optional[str] = None) -> TreeAdapter:
    """Create the adapter registered under ``name``."""
    try:
        adapter_class = ADAPTERS[name]
    except KeyError:
        raise KeyError(
            f"Unknown adapter {name!r}; available: {', '.join(sorted(ADAPTERS))}"
        ) from None
    return adapter_class(correlation_id)
