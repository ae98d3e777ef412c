"""Turn stored version content into renderable HTML for the comparison tabs."""

from __future__ import annotations

import re

from markupsafe import escape

from dealdesk.models.enums import ContentKind

_HTML_TAG_RE = re.compile(r"<(?:p|div|span|h[1-6])(?:\s[^>]*)?/?>", re.IGNORECASE)

# Applied in order to plain text; bold must run before italic so that
# "**x**" is not consumed as two empty italics.
_PLAIN_TEXT_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\n{2,}"), "</p><p>"),
    (re.compile(r"\n"), "<br>"),
    (re.compile(r"\*\*(.+?)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"__(.+?)__"), r"<strong>\1</strong>"),
    (re.compile(r"\*(.+?)\*"), r"<em>\1</em>"),
    (re.compile(r"_(.+?)_"), r"<em>\1</em>"),
    (re.compile(r"~(.+?)~"), r"<u>\1</u>"),
]


def detect_content_kind(content: str) -> ContentKind:
    """Classify content at ingest, or caller-extracted content at comparison time."""
    if _HTML_TAG_RE.search(content):
        return ContentKind.HTML
    return ContentKind.PLAIN_TEXT


def normalize_content(content: str, kind: ContentKind | None = None) -> str:
    """Return HTML for ``content``.

    HTML passes through untouched. Plain text is escaped, then blank lines
    become paragraph breaks, newlines become ``<br>``, and ``**bold**``,
    ``*italic*`` and ``~underline~`` markers become tags.
    """
    if kind is None:
        kind = detect_content_kind(content)
    if kind == ContentKind.HTML:
        return content

    html = str(escape(content.replace("\r\n", "\n")))
    for pattern, replacement in _PLAIN_TEXT_RULES:
        html = pattern.sub(replacement, html)
    return f"<p>{html}</p>"
