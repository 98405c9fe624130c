"""Tests for the error taxonomy and source positions."""

import pytest

from strict_html_parser.shared import (
    GrammarInvariantError,
    GrammarSyntaxError,
    NestingDepthError,
    ParseError,
    ParseMetrics,
    SourcePosition,
    SourceReadError,
    TagMismatchError,
    UnknownRuleError,
)


class TestSourcePosition:
    """Test suite for SourcePosition."""

    def test_from_offset_first_line(self):
        """Test columns are one-based."""
        position = SourcePosition.from_offset("<a></a>", 3)

        assert position == SourcePosition(offset=3, line=1, column=4)

    def test_from_offset_later_line(self):
        """Test line and column after a newline."""
        position = SourcePosition.from_offset("ab\ncd", 4)

        assert position.line == 2
        assert position.column == 2
        assert str(position) == "2:2"

    def test_from_offset_clamps_to_end(self):
        """Test offsets past the end are reported at the end of input."""
        position = SourcePosition.from_offset("ab\ncd", 99)

        assert position.to_dict() == {"offset": 5, "line": 2, "column": 3}

    @pytest.mark.parametrize("offset,line,column", [(-1, 1, 1), (0, 0, 1), (0, 1, 0)])
    def test_invalid_values(self, offset, line, column):
        """Test out-of-range values are rejected."""
        with pytest.raises(ValueError):
            SourcePosition(offset=offset, line=line, column=column)


class TestParseMetrics:
    """Test suite for ParseMetrics."""

    def test_characters_per_second(self):
        """Test throughput calculation."""
        metrics = ParseMetrics(processing_time_ms=500.0, characters_processed=1000)

        assert metrics.characters_per_second == 2000.0

    def test_zero_time(self):
        """Test throughput is zero when no time was measured."""
        assert ParseMetrics(characters_processed=10).characters_per_second == 0.0

    def test_to_dict(self):
        """Test dictionary representation."""
        metrics = ParseMetrics(1.5, 20, 30, 4)

        assert metrics.to_dict() == {
            "processing_time_ms": 1.5,
            "characters_processed": 20,
            "spans_matched": 30,
            "nodes_built": 4,
        }


class TestGrammarSyntaxError:
    """Test suite for GrammarSyntaxError."""

    def test_message(self):
        """Test the message names the position and expectations."""
        error = GrammarSyntaxError(
            SourcePosition(offset=20, line=1, column=21),
            ["text", "closing_tag", "element", "self_closed_tag"],
        )

        assert str(error) == (
            "Parsing error at line 1, column 21: "
            "expected closing_tag, element, self_closed_tag, text"
        )
        assert error.rule == "html"

    def test_expected_sorted_and_deduplicated(self):
        """Test expectations are stored sorted without duplicates."""
        error = GrammarSyntaxError(SourcePosition(0, 1, 1), ["b", "a", "a"])

        assert error.expected == ("a", "b")

    def test_nothing_expected(self):
        """Test an empty expectation set still yields a readable message."""
        error = GrammarSyntaxError(SourcePosition(0, 1, 1), [])

        assert str(error).endswith("expected nothing")

    def test_line_text(self):
        """Test the offending line is extracted from multi-line input."""
        source = "<div>\n  <a href=x></a>\n</div>"
        error = GrammarSyntaxError(
            SourcePosition.from_offset(source, 14), ["quoted_string"], source=source
        )

        assert error.position.line == 2
        assert error.line_text == "  <a href=x></a>"

    def test_render(self):
        """Test the rendered report marks the failing column."""
        source = "<a href=x></a>"
        error = GrammarSyntaxError(
            SourcePosition.from_offset(source, 8), ["quoted_string"], source=source
        )

        assert error.render().split("\n") == [
            " --> 1:9",
            "  |",
            "1 | <a href=x></a>",
            "  |         ^",
            " = Parsing error at line 1, column 9: expected quoted_string",
        ]


class TestOtherErrors:
    """Test suite for the remaining error types."""

    def test_tag_mismatch_message(self):
        """Test mismatch messages with and without a position."""
        assert str(TagMismatchError("div", "span")) == "Mismatched tag: expected div, found span"

        error = TagMismatchError("div", "span", SourcePosition(5, 1, 6))
        assert str(error) == "Mismatched tag: expected div, found span at line 1, column 6"
        assert error.expected == "div"
        assert error.found == "span"

    def test_unknown_rule_is_lookup_error(self):
        """Test unknown rules can be caught as LookupError."""
        error = UnknownRuleError("doctype", ["html", "element"])

        assert isinstance(error, LookupError)
        assert "'doctype'" in str(error)
        assert "known rules: html, element" in str(error)

    def test_nesting_depth_message(self):
        """Test nesting errors report the limit and position."""
        error = NestingDepthError(100, SourcePosition(500, 1, 501))

        assert str(error) == "Maximum nesting depth of 100 exceeded at line 1, column 501"
        assert error.depth is None

    def test_nesting_depth_stack_message(self):
        """Test stack exhaustion reports the depth reached and the configured limit."""
        error = NestingDepthError(5000, SourcePosition(995, 1, 996), depth=200)

        assert error.limit == 5000
        assert error.depth == 200
        assert str(error) == (
            "Nesting depth of 200 exceeds the interpreter stack "
            "(configured limit 5000) at line 1, column 996"
        )

    def test_source_read_message(self):
        """Test read errors keep the path and cause."""
        cause = FileNotFoundError("no such file")
        error = SourceReadError("page.html", cause)

        assert error.path == "page.html"
        assert error.cause is cause
        assert str(error) == "Failed to read file: page.html: no such file"

    def test_hierarchy(self):
        """Test input failures share ParseError while invariant breaks do not."""
        for error_type in (
            GrammarSyntaxError, TagMismatchError, UnknownRuleError,
            NestingDepthError, SourceReadError,
        ):
            assert issubclass(error_type, ParseError)

        assert issubclass(GrammarInvariantError, RuntimeError)
        assert not issubclass(GrammarInvariantError, ParseError)
