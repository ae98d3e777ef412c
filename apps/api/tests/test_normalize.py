"""Tests for content-kind detection and plain-text normalization."""

from __future__ import annotations

import pytest

from dealdesk.models.enums import ContentKind
from dealdesk.modules.doc_compare.normalize import detect_content_kind, normalize_content


class TestDetectContentKind:
    @pytest.mark.parametrize(
        "content",
        [
            "<p>Hello</p>",
            "<div class='clause'>Term</div>",
            "Intro <SPAN>x</SPAN>",
            "<h2>Section 1</h2>",
            "line<p/>",
        ],
    )
    def test_html_markers(self, content: str) -> None:
        assert detect_content_kind(content) == ContentKind.HTML

    @pytest.mark.parametrize(
        "content",
        ["Hello", "a < b and c > d", "<pre>not a marker</pre>", "<table></table>", ""],
    )
    def test_plain_text(self, content: str) -> None:
        assert detect_content_kind(content) == ContentKind.PLAIN_TEXT


class TestNormalizeContent:
    def test_html_passes_through_unchanged(self) -> None:
        assert normalize_content("<p>Hello</p>") == "<p>Hello</p>"

    def test_blank_line_becomes_paragraph_break(self) -> None:
        assert normalize_content("Hello\n\nWorld") == "<p>Hello</p><p>World</p>"

    def test_single_newline_becomes_br(self) -> None:
        assert normalize_content("Line one\nLine two") == "<p>Line one<br>Line two</p>"

    def test_crlf_is_treated_as_newline(self) -> None:
        assert normalize_content("a\r\n\r\nb") == "<p>a</p><p>b</p>"

    def test_inline_markers(self) -> None:
        html = normalize_content("**Cap** is *firm* and ~final~")
        assert html == "<p><strong>Cap</strong> is <em>firm</em> and <u>final</u></p>"

    def test_underscore_markers(self) -> None:
        assert normalize_content("__bold__ _italic_") == "<p><strong>bold</strong> <em>italic</em></p>"

    def test_plain_text_is_escaped(self) -> None:
        html = normalize_content("Cap < $10M & <script>alert(1)</script>", ContentKind.PLAIN_TEXT)
        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "&amp;" in html

    def test_explicit_kind_overrides_detection(self) -> None:
        # Stored as plain text even though it looks like markup
        assert normalize_content("<p>x</p>", ContentKind.PLAIN_TEXT) == "<p>&lt;p&gt;x&lt;/p&gt;</p>"
        assert normalize_content("just text", ContentKind.HTML) == "just text"
