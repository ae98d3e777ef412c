"""Presentation state for the three-tab comparison view."""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass, field

from dealdesk.models.enums import ContentKind
from dealdesk.modules.doc_compare.normalize import normalize_content
from dealdesk.modules.doc_compare.schemas import AISummary, ComparedVersion

ESCAPE_KEY = "Escape"


class ComparisonTab(str, enum.Enum):
    CHANGES = "changes"
    ORIGINAL = "original"
    NEW = "new"


@dataclass
class ComparisonView:
    """Which of diff / original / new is shown, and whether the view is open.

    Tab switching has no side effects. ``Escape`` (or ``close()``) dismisses
    the whole view from any tab and fires ``on_close`` once.
    """

    original_version: ComparedVersion
    new_version: ComparedVersion
    diff_html: str
    on_close: Callable[[], None]
    content_v1: str | None = None
    content_v2: str | None = None
    kind_v1: ContentKind | None = None
    kind_v2: ContentKind | None = None
    ai_summary: AISummary | None = None
    active_tab: ComparisonTab = ComparisonTab.CHANGES
    closed: bool = field(default=False, init=False)

    def select_tab(self, tab: ComparisonTab | str) -> None:
        if self.closed:
            return
        self.active_tab = ComparisonTab(tab)

    def handle_key(self, key: str) -> None:
        if key == ESCAPE_KEY:
            self.close()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.on_close()

    def tab_html(self, tab: ComparisonTab) -> str:
        if tab is ComparisonTab.ORIGINAL:
            return normalize_content(self.content_v1 or "", self.kind_v1)
        if tab is ComparisonTab.NEW:
            return normalize_content(self.content_v2 or "", self.kind_v2)
        return self.diff_html

    def render(self) -> str:
        """HTML for the active tab, normalized afresh on every call."""
        return self.tab_html(self.active_tab)

    def tabs(self) -> dict[ComparisonTab, str]:
        return {tab: self.tab_html(tab) for tab in ComparisonTab}
