"""
Tests for the start-tag scanner.

The scanner provides the byte ranges every fix transform splices into,
so its spans are checked against the source text directly.
"""

import pytest

from quality_gate.analyzers import scan_start_tag


class TestScanStartTag:
    """Tests for scan_start_tag()."""

    def test_simple_tag(self):
        source = "<html>"
        span = scan_start_tag(source, 0)

        assert span.name == "html"
        assert span.start == 0
        assert span.name_end == 5
        assert span.end == 6
        assert span.attrs == {}

    def test_double_quoted_attribute(self):
        source = '<a href="https://example.com">x</a>'
        span = scan_start_tag(source, 0)
        attr = span.attrs["href"]

        assert source[attr.value_start:attr.value_end] == "https://example.com"
        assert attr.quote == '"'
        assert span.end == source.index(">") + 1

    def test_single_quoted_and_unquoted(self):
        source = "<a target=_blank rel='nofollow'>"
        span = scan_start_tag(source, 0)

        target = span.attrs["target"]
        rel = span.attrs["rel"]
        assert source[target.value_start:target.value_end] == "_blank"
        assert target.quote == ""
        assert source[rel.value_start:rel.value_end] == "nofollow"
        assert rel.quote == "'"

    def test_valueless_attribute(self):
        span = scan_start_tag("<input disabled required>", 0)

        assert not span.attrs["disabled"].has_value
        assert not span.attrs["required"].has_value

    def test_gt_inside_quotes_does_not_end_tag(self):
        source = '<img alt="a > b" src="x.png">'
        span = scan_start_tag(source, 0)

        assert span.end == len(source)
        assert "src" in span.attrs

    def test_names_are_lowercased(self):
        span = scan_start_tag('<IMG SRC="x.png">', 0)

        assert span.name == "img"
        assert "src" in span.attrs

    def test_multiline_tag(self):
        source = '<img\n  src="a.png"\n  alt="x">'
        span = scan_start_tag(source, 0)

        assert span.end == len(source)
        assert set(span.attrs) == {"src", "alt"}

    def test_self_closing(self):
        source = '<meta charset="UTF-8"/>'
        span = scan_start_tag(source, 0)

        assert span.end == len(source)
        assert "charset" in span.attrs

    def test_duplicate_attribute_keeps_first(self):
        source = '<html lang="en" lang="fr">'
        span = scan_start_tag(source, 0)
        attr = span.attrs["lang"]

        assert source[attr.value_start:attr.value_end] == "en"

    def test_offset_inside_source(self):
        source = '<p>text <b class="x">bold</b></p>'
        offset = source.index("<b")
        span = scan_start_tag(source, offset)

        assert span.name == "b"
        assert span.start == offset
        assert source[span.start:span.end] == '<b class="x">'

    @pytest.mark.parametrize("source,offset", [
        ('<a href="unterminated>', 0),
        ("<div class='x'", 0),
        ("</div>", 0),
        ("<!-- comment -->", 0),
        ("text", 0),
        ("<p>", 5),
        ("<p>", -1),
    ])
    def test_malformed_returns_none(self, source, offset):
        assert scan_start_tag(source, offset) is None
