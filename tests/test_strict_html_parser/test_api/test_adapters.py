"""Tests for element-tree export adapters."""

import xml.etree.ElementTree as ET

import pytest

from strict_html_parser import Element, Text, parse_html
from strict_html_parser.api import (
    ADAPTERS,
    BeautifulSoupAdapter,
    ElementTreeAdapter,
    LxmlAdapter,
    get_adapter,
)


@pytest.fixture
def mixed_document():
    """Document with text before and after child elements."""
    return parse_html('<p class="intro">Hi <b>bold</b> and <i>italic</i> done</p>')


class TestElementTreeAdapter:
    """Test conversion into xml.etree.ElementTree elements."""

    def test_metadata(self):
        """Test adapter metadata."""
        adapter = ElementTreeAdapter()

        assert adapter.metadata.name == "etree"
        assert adapter.metadata.target_library == "xml.etree.ElementTree"

    def test_text_and_tail_distribution(self, mixed_document):
        """Test leading text becomes .text and following text becomes the tail."""
        result = ElementTreeAdapter().convert(mixed_document)

        root = result.elements[0]
        assert isinstance(root, ET.Element)
        assert root.tag == "p"
        assert root.get("class") == "intro"
        assert root.text == "Hi "
        assert [child.tag for child in root] == ["b", "i"]
        assert root[0].text == "bold"
        assert root[0].tail == " and "
        assert root[1].tail == " done"
        assert result.lossless

    def test_duplicate_attributes_collapse_to_last(self):
        """Test duplicate keys keep the last value and are counted."""
        result = ElementTreeAdapter().convert(parse_html('<a x="1" x="2" y="3"></a>'))

        assert result.elements[0].attrib == {"x": "2", "y": "3"}
        assert result.collapsed_attributes == 1
        assert not result.lossless

    def test_top_level_text_reported(self):
        """Test hand-built top-level text is reported rather than lost silently."""
        result = ElementTreeAdapter().convert([Text("stray"), Element("br")])

        assert result.dropped_text == ["stray"]
        assert len(result.elements) == 1
        assert not result.lossless

    def test_serialize(self, mixed_document):
        """Test serialisation of converted elements."""
        markup = ElementTreeAdapter().serialize(mixed_document)

        assert markup == '<p class="intro">Hi <b>bold</b> and <i>italic</i> done</p>'

    def test_serialize_escapes_text(self):
        """Test markup characters in text are escaped on output."""
        markup = ElementTreeAdapter().serialize([Element("p", children=[Text("a & b")])])

        assert markup == "<p>a &amp; b</p>"

    def test_to_target(self):
        """Test to_target returns the bare element list."""
        elements = ElementTreeAdapter().to_target(parse_html("<a></a><b></b>"))

        assert [element.tag for element in elements] == ["a", "b"]


class TestLxmlAdapter:
    """Test conversion into lxml elements."""

    def test_convert_and_query(self, mixed_document):
        """Test converted elements support XPath queries."""
        pytest.importorskip("lxml")

        root = LxmlAdapter().to_target(mixed_document)[0]

        assert root.xpath("string(.)") == "Hi bold and italic done"
        assert root.xpath("./i/text()") == ["italic"]

    def test_control_characters_are_reported(self):
        """Test text and attributes lxml rejects are recorded instead of raising."""
        pytest.importorskip("lxml")

        nodes = parse_html('<p title="x\x01y" id="k">a\x0cb<b>c</b>d\x0be</p>')
        result = LxmlAdapter().convert(nodes)

        root = result.elements[0]
        assert result.dropped_text == ["a\x0cb", "d\x0be"]
        assert result.dropped_attributes == [("title", "x\x01y")]
        assert root.get("id") == "k"
        assert root.find("b").text == "c"
        assert not result.lossless

    def test_serialize(self):
        """Test lxml serialisation of nested elements."""
        pytest.importorskip("lxml")

        markup = LxmlAdapter().serialize(parse_html('<ul><li id="1">One</li></ul>'))

        assert markup == '<ul><li id="1">One</li></ul>'


class TestAdapterRegistry:
    """Test adapter lookup by name."""

    def test_registered_adapters(self):
        """Test every adapter is registered."""
        assert set(ADAPTERS) == {"lxml", "etree", "beautifulsoup"}
        assert isinstance(get_adapter("etree"), ElementTreeAdapter)
        assert isinstance(get_adapter("lxml", correlation_id="x"), LxmlAdapter)

    def test_unknown_adapter(self):
        """Test unknown names raise KeyError listing the alternatives."""
        with pytest.raises(KeyError, match="available: beautifulsoup, etree, lxml"):
            get_adapter("bs4")


class TestBeautifulSoupAdapter:
    """Test conversion into BeautifulSoup tags."""

    def test_mixed_content_kept_in_order(self, mixed_document):
        """Test text and element children keep their source order."""
        pytest.importorskip("bs4")

        tag = BeautifulSoupAdapter().to_target(mixed_document)[0]

        assert tag.name == "p"
        assert [getattr(child, "name", None) or str(child) for child in tag.contents] == [
            "Hi ", "b", " and ", "i", " done",
        ]
        assert tag.get_text() == "Hi bold and italic done"

    def test_select(self):
        """Test converted tags support CSS selectors."""
        pytest.importorskip("bs4")

        nodes = parse_html('<ul><li><a href="/a">A</a></li><li><a href="/b">B</a></li></ul>')
        tag = BeautifulSoupAdapter().to_target(nodes)[0]

        assert [link["href"] for link in tag.select("li > a")] == ["/a", "/b"]

    def test_serialize(self):
        """Test serialisation keeps attributes and escapes text."""
        pytest.importorskip("bs4")

        nodes = parse_html('<p id="x">a &amp; b <b>c</b></p>')
        markup = BeautifulSoupAdapter().serialize(nodes)

        assert markup == '<p id="x">a &amp;amp; b <b>c</b></p>'

    def test_duplicate_attributes_counted(self):
        """Test duplicate keys collapse like the other adapters."""
        pytest.importorskip("bs4")

        result = BeautifulSoupAdapter().convert(parse_html('<a x="1" x="2"></a>'))

        assert result.elements[0]["x"] == "2"
        assert result.collapsed_attributes == 1


class TestAvailability:
    """Test adapter availability checks."""

    def test_etree_always_available(self):
        """Test the standard library adapter is always available."""
        assert ElementTreeAdapter().is_available()

    def test_third_party_adapters_report_imports(self):
        """Test availability reflects whether the target library imports."""
        lxml_installed = True
        try:
            import lxml.etree  # noqa: F401
        except ImportError:
            lxml_installed = False

        assert LxmlAdapter().is_available() is lxml_installed
