"""Tests for word-level redlines and raw-content extraction."""

from __future__ import annotations

import pytest

from dealdesk.modules.doc_compare import diff
from dealdesk.modules.doc_compare.diff import (
    BINARY_WORD_PLACEHOLDER,
    NO_CONTENT,
    diff_words,
    extract_readable_text,
    render_diff_html,
    tokenize,
)


class TestTokenize:
    def test_words_whitespace_and_punctuation(self) -> None:
        assert tokenize("Cap: $8M.") == ["Cap", ":", " ", "$", "8M", "."]

    def test_round_trips_to_source(self) -> None:
        text = "The  Investor\nmay   appoint one observer."
        assert "".join(tokenize(text)) == text


class TestDiffWords:
    def test_identical_text_is_all_equal(self) -> None:
        assert all(op == "equal" for op, _ in diff_words("same text", "same text"))

    def test_replacement_emits_removed_then_added(self) -> None:
        parts = diff_words("Discount Rate: 20%", "Discount Rate: 15%")
        changed = [(op, text) for op, text in parts if op != "equal"]
        assert changed == [("removed", "20"), ("added", "15")]

    def test_insertion(self) -> None:
        parts = diff_words("one two", "one new two")
        assert ("added", "new ") in parts or ("added", " new") in parts

    def test_parts_rebuild_both_sides(self) -> None:
        old, new = "alpha beta gamma", "alpha delta gamma epsilon"
        parts = diff_words(old, new)
        assert "".join(t for op, t in parts if op != "added") == old
        assert "".join(t for op, t in parts if op != "removed") == new


class TestRenderDiffHtml:
    def test_marks_additions_and_removals(self) -> None:
        html = render_diff_html("Purchase Amount: $500,000", "Purchase Amount: $750,000", "SAFE")
        assert 'class="diff-removed"' in html
        assert 'class="diff-added"' in html
        assert ">500</span>" in html
        assert ">750</span>" in html
        assert ">SAFE</h1>" in html

    def test_no_differences(self) -> None:
        html = render_diff_html("same", "same", "doc.txt")
        assert "No differences found between the two versions." in html
        assert "diff-added" not in html

    def test_content_and_title_are_escaped(self) -> None:
        html = render_diff_html("a", "<script>x</script>", "<b>title</b>")
        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "&lt;b&gt;title&lt;/b&gt;" in html

    def test_paragraphs_split_on_blank_lines(self) -> None:
        html = render_diff_html("one\n\ntwo", "one\n\nthree", "t")
        assert html.count("<p style=") == 2

    def test_failure_is_rendered_not_raised(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _boom(old: str, new: str):
            raise RuntimeError("matcher exploded")

        monkeypatch.setattr(diff, "diff_words", _boom)
        html = render_diff_html("a", "b", "t")
        assert "Error generating document comparison" in html
        assert "matcher exploded" in html


class TestExtractReadableText:
    def test_empty_content(self) -> None:
        assert extract_readable_text("a.txt", "") == NO_CONTENT
        assert extract_readable_text("a.txt", None) == NO_CONTENT

    def test_plain_text_passes_through(self) -> None:
        assert extract_readable_text("a.txt", "Hello") == "Hello"

    @pytest.mark.parametrize("content", ["UEsDBBQABgAIAAAAIQ", "junk PK\x03\x04 more"])
    def test_binary_word_content(self, content: str) -> None:
        assert extract_readable_text("term-sheet.docx", content) == BINARY_WORD_PLACEHOLDER

    def test_rtf_control_words_are_stripped(self) -> None:
        rtf = r"{\rtf1\ansi\deff0 {\fonttbl}\viewkind4\uc1 \pard Hello \b World\b0 \par}"
        text = extract_readable_text("memo.rtf", rtf)
        assert "Hello" in text
        assert "World" in text
        assert "\\" not in text
        assert "{" not in text
