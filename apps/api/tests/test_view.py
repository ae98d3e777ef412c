"""Tests for the three-tab comparison view and its HTML export."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from dealdesk.models.enums import ContentKind
from dealdesk.modules.doc_compare.report import render_comparison_report, report_filename
from dealdesk.modules.doc_compare.schemas import AISummary, ComparedVersion
from dealdesk.modules.doc_compare.summarizer import demo_summary
from dealdesk.modules.doc_compare.view import ComparisonTab, ComparisonView

DOCUMENT_ID = uuid.uuid4()
UPLOADER_ID = uuid.uuid4()


def _version(number: int, kind: ContentKind = ContentKind.PLAIN_TEXT) -> ComparedVersion:
    return ComparedVersion(
        id=uuid.uuid4(),
        document_id=DOCUMENT_ID,
        version=number,
        file_name=f"term-sheet-v{number}.txt",
        content_kind=kind,
        uploaded_by_id=UPLOADER_ID,
        created_at=datetime(2026, 10, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def on_close() -> MagicMock:
    return MagicMock()


@pytest.fixture
def view(on_close: MagicMock) -> ComparisonView:
    return ComparisonView(
        original_version=_version(1),
        new_version=_version(2, ContentKind.HTML),
        diff_html='<div class="document-compare">diff</div>',
        on_close=on_close,
        content_v1="Cap: **$8M**\n\nDiscount: 20%",
        content_v2="<p>Cap: <strong>$10M</strong></p>",
        kind_v1=ContentKind.PLAIN_TEXT,
        kind_v2=ContentKind.HTML,
        ai_summary=demo_summary(),
    )


class TestTabs:
    def test_opens_on_changes_tab(self, view: ComparisonView) -> None:
        assert view.active_tab is ComparisonTab.CHANGES
        assert view.render() == '<div class="document-compare">diff</div>'

    def test_original_tab_is_normalized(self, view: ComparisonView) -> None:
        view.select_tab(ComparisonTab.ORIGINAL)
        assert view.render() == "<p>Cap: <strong>$8M</strong></p><p>Discount: 20%</p>"

    def test_new_tab_html_passes_through(self, view: ComparisonView) -> None:
        view.select_tab("new")
        assert view.render() == "<p>Cap: <strong>$10M</strong></p>"

    def test_tab_switching_has_no_side_effects(self, view: ComparisonView, on_close: MagicMock) -> None:
        for tab in ("original", "new", "changes", "new"):
            view.select_tab(tab)
        assert view.active_tab is ComparisonTab.NEW
        assert not view.closed
        on_close.assert_not_called()

    def test_unknown_tab_is_rejected(self, view: ComparisonView) -> None:
        with pytest.raises(ValueError):
            view.select_tab("history")

    def test_missing_content_renders_empty_paragraph(self, on_close: MagicMock) -> None:
        bare = ComparisonView(
            original_version=_version(1),
            new_version=_version(2),
            diff_html="",
            on_close=on_close,
        )
        assert bare.tab_html(ComparisonTab.ORIGINAL) == "<p></p>"

    def test_tabs_returns_all_three(self, view: ComparisonView) -> None:
        assert set(view.tabs()) == set(ComparisonTab)


class TestDismissal:
    def test_escape_closes_from_any_tab(self, view: ComparisonView, on_close: MagicMock) -> None:
        view.select_tab(ComparisonTab.ORIGINAL)
        view.handle_key("Escape")
        assert view.closed
        on_close.assert_called_once_with()

    def test_other_keys_are_ignored(self, view: ComparisonView, on_close: MagicMock) -> None:
        view.handle_key("Enter")
        view.handle_key("escape")
        assert not view.closed
        on_close.assert_not_called()

    def test_on_close_fires_once(self, view: ComparisonView, on_close: MagicMock) -> None:
        view.handle_key("Escape")
        view.close()
        view.handle_key("Escape")
        assert on_close.call_count == 1

    def test_closed_view_ignores_tab_changes(self, view: ComparisonView) -> None:
        view.close()
        view.select_tab(ComparisonTab.NEW)
        assert view.active_tab is ComparisonTab.CHANGES


class TestReport:
    def test_filename(self, view: ComparisonView) -> None:
        assert report_filename(view) == "comparison_term-sheet-v1.txt_vs_term-sheet-v2.txt.html"

    def test_report_contains_every_panel(self, view: ComparisonView) -> None:
        html = render_comparison_report(
            view, generated_at=datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)
        )
        assert "2026-10-19 09:30 UTC" in html
        assert '<div class="document-compare">diff</div>' in html
        assert "<strong>$8M</strong>" in html
        assert "<strong>$10M</strong>" in html
        assert "Financial Terms" in html
        assert "Closing Conditions" in html

    def test_summary_text_is_escaped(self, view: ComparisonView) -> None:
        view.ai_summary = AISummary(summary="<img src=x onerror=alert(1)>")
        html = render_comparison_report(view)
        assert "<img src=x" not in html
        assert "&lt;img src=x" in html
