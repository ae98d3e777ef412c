"""Standalone HTML export of a comparison (the "download comparison" action)."""

from __future__ import annotations

import os
from datetime import datetime, timezone

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from dealdesk.modules.doc_compare.view import ComparisonTab, ComparisonView

_TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "templates")
_env = Environment(loader=FileSystemLoader(_TEMPLATES_DIR), autoescape=True)


def report_filename(view: ComparisonView) -> str:
    return (
        f"comparison_{view.original_version.file_name}"
        f"_vs_{view.new_version.file_name}.html"
    )


def render_comparison_report(view: ComparisonView, generated_at: datetime | None = None) -> str:
    tabs = view.tabs()
    template = _env.get_template("comparison_report.html")
    return template.render(
        original=view.original_version,
        new=view.new_version,
        generated_at=(generated_at or datetime.now(timezone.utc)).strftime("%Y-%m-%d %H:%M UTC"),
        ai_summary=view.ai_summary,
        # Tab bodies are produced by the diff renderer / normalizer, which escape plain text
        changes_html=Markup(tabs[ComparisonTab.CHANGES]),
        original_html=Markup(tabs[ComparisonTab.ORIGINAL]),
        new_html=Markup(tabs[ComparisonTab.NEW]),
    )
