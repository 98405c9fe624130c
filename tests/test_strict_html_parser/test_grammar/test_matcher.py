"""Tests for the grammar matcher and span trees."""

import threading
from typing import List

import pytest

from strict_html_parser.grammar import GrammarMatcher, Rule, Span, parse
from strict_html_parser.shared import (
    GrammarSyntaxError,
    NestingDepthError,
    ParserConfig,
)


def nested(depth: int) -> str:
    """Build a document of ``depth`` nested div elements."""
    return "<div>" * depth + "</div>" * depth


class TestGrammarMatcher:
    """Test GrammarMatcher behaviour."""

    def test_match_returns_span_for_whole_input(self):
        """Test the start production spans the entire input."""
        matcher = GrammarMatcher()
        source = '<p class="intro">Hi</p>'

        span = matcher.match(Rule.HTML, source)

        assert span.rule is Rule.HTML
        assert span.start == 0
        assert span.end == len(source)
        assert span.text == source

    def test_rejects_non_string_input(self):
        """Test that bytes are not accepted."""
        with pytest.raises(TypeError, match="Input must be a string"):
            GrammarMatcher().match(Rule.HTML, b"<p></p>")  # type: ignore[arg-type]

    def test_unclosed_tag_reports_furthest_position(self):
        """Test an unclosed tag fails at end of input with the expected productions."""
        with pytest.raises(GrammarSyntaxError) as exc_info:
            GrammarMatcher().match("html", "<div><p>Unclosed tag")

        error = exc_info.value
        assert error.position.offset == 20
        assert error.position.line == 1
        assert error.position.column == 21
        assert error.expected == ("closing_tag", "element", "self_closed_tag", "text")
        assert error.rule == "html"
        assert str(error) == (
            "Parsing error at line 1, column 21: "
            "expected closing_tag, element, self_closed_tag, text"
        )

    def test_error_position_on_later_line(self):
        """Test line and column are computed across newlines."""
        source = "<div>\n<p x=1></p>\n</div>"

        with pytest.raises(GrammarSyntaxError) as exc_info:
            GrammarMatcher().match("html", source)

        error = exc_info.value
        assert error.position.line == 2
        assert error.position.column == 6
        assert error.expected == ("quoted_string",)
        assert error.line_text == "<p x=1></p>"

    def test_render_points_at_failure(self):
        """Test the rendered error shows the source line and a caret."""
        with pytest.raises(GrammarSyntaxError) as exc_info:
            GrammarMatcher().match("html", "<div><p>Unclosed tag")

        rendered = exc_info.value.render()

        assert "--> 1:21" in rendered
        assert "1 | <div><p>Unclosed tag" in rendered
        assert " |" + " " * 21 + "^" in rendered

    def test_whole_parse_fails_without_partial_tree(self):
        """Test a failure after valid elements still rejects the document."""
        with pytest.raises(GrammarSyntaxError) as exc_info:
            GrammarMatcher().match("html", "<a></a><b></b><c>")

        assert exc_info.value.position.offset == 17

    def test_matcher_is_reusable(self):
        """Test a failed match leaves no state behind for the next call."""
        matcher = GrammarMatcher()

        with pytest.raises(GrammarSyntaxError):
            matcher.match("html", "<div>")
        span = matcher.match("html", "<div></div>")

        assert span.find(Rule.ELEMENTS).children[0].rule is Rule.ELEMENT


class TestNestingDepth:
    """Test the nesting depth limit."""

    def test_depth_at_limit_is_accepted(self):
        """Test documents nested exactly to the limit parse."""
        matcher = GrammarMatcher(ParserConfig(max_nesting_depth=3))

        span = matcher.match("html", "<a><b><c><br/></c></b></a>")

        assert span.end == 26

    def test_depth_beyond_limit_raises(self):
        """Test one level too deep raises NestingDepthError at the opening tag."""
        matcher = GrammarMatcher(ParserConfig(max_nesting_depth=3))

        with pytest.raises(NestingDepthError) as exc_info:
            matcher.match("html", "<a><b><c><d></d></c></b></a>")

        assert exc_info.value.limit == 3
        assert exc_info.value.position.offset == 9

    def test_default_limit(self):
        """Test the default configuration allows 100 levels."""
        matcher = GrammarMatcher()

        assert matcher.match("html", nested(100)).end == len(nested(100))
        with pytest.raises(NestingDepthError):
            matcher.match("html", nested(101))

    def test_stack_exhaustion_reports_limit_and_deepest_element(self):
        """Test running out of stack below a raised limit names the real limit and position."""
        matcher = GrammarMatcher(ParserConfig(max_nesting_depth=5000))

        with pytest.raises(NestingDepthError) as exc_info:
            matcher.match("html", nested(1500))

        error = exc_info.value
        assert error.limit == 5000
        assert 100 < error.depth < 1500
        assert error.position.offset == 5 * (error.depth - 1)
        assert "exceeds the interpreter stack" in str(error)


class TestSpan:
    """Test Span helpers."""

    @pytest.fixture
    def document(self) -> Span:
        return parse("html", '<ul id="list"><li>One</li><li>Two</li></ul>')

    def test_invalid_bounds_raise(self):
        """Test span validation."""
        with pytest.raises(ValueError, match="Span bounds"):
            Span(Rule.TEXT, 5, 2, "")
        with pytest.raises(ValueError, match="Span text length"):
            Span(Rule.TEXT, 0, 3, "ab")

    def test_find_and_find_all(self, document: Span):
        """Test direct child lookups."""
        ul = document.find(Rule.ELEMENTS).find(Rule.ELEMENT)
        items = ul.find(Rule.CONTENT).find_all(Rule.ELEMENT)

        assert len(items) == 2
        assert ul.find(Rule.TEXT) is None

    def test_walk_visits_in_source_order(self, document: Span):
        """Test walk yields spans depth-first in source order."""
        texts = [span.text for span in document.walk() if span.rule is Rule.TEXT]

        assert texts == ["One", "Two"]
        assert document.count() == len(list(document.walk()))

    def test_to_dict(self):
        """Test dictionary conversion of a span tree."""
        span = parse("attribute", 'id="x"')

        assert span.to_dict() == {
            "rule": "attribute",
            "start": 0,
            "end": 6,
            "text": 'id="x"',
            "children": [
                {"rule": "identifier", "start": 0, "end": 2, "text": "id"},
                {"rule": "quoted_string", "start": 3, "end": 6, "text": '"x"'},
            ],
        }

    def test_pretty(self):
        """Test the indented outline rendering."""
        span = parse("attribute", 'id="x"')

        assert span.pretty() == (
            "- attribute\n"
            '  - identifier: "id"\n'
            '  - quoted_string: ""x""'
        )


class TestConcurrency:
    """Test that independent calls do not share state."""

    def test_parallel_matches_are_independent(self):
        """Test many threads matching different inputs through one matcher."""
        matcher = GrammarMatcher()
        results: List[int] = []
        errors: List[Exception] = []
        lock = threading.Lock()

        def worker(index: int) -> None:
            source = "<p>" + "x" * index + "</p>"
            try:
                if index % 2:
                    with pytest.raises(GrammarSyntaxError):
                        matcher.match("html", source[:-1])
                span = matcher.match("html", source)
            except Exception as e:
                with lock:
                    errors.append(e)
            else:
                with lock:
                    results.append(span.end)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(1, 21)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert sorted(results) == [len("<p></p>") + i for i in range(1, 21)]
