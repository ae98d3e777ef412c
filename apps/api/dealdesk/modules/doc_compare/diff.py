"""Word-level redline rendering and raw-content extraction."""

from __future__ import annotations

import re
from difflib import SequenceMatcher

import structlog
from markupsafe import escape

logger = structlog.get_logger()

NO_CONTENT = "No content available"
BINARY_WORD_PLACEHOLDER = "Binary content (Word document) - text extraction limited"

_FONT = "font-family: 'Calibri', 'Arial', sans-serif; font-size: 11pt;"
_ADDED_STYLE = (
    "color: #166534; text-decoration: underline; text-decoration-color: #166534; "
    "background-color: #dcfce7; display: inline;"
)
_REMOVED_STYLE = (
    "color: #991b1b; text-decoration: line-through; text-decoration-color: #991b1b; "
    "background-color: #fee2e2; display: inline;"
)

# Words, whitespace runs and single punctuation marks are separate tokens
_TOKEN_RE = re.compile(r"\s+|\w+|[^\w\s]", re.UNICODE)

_RTF_HEADER_RE = re.compile(r"\{\\rtf1.*?\\viewkind4", re.DOTALL)
_RTF_CONTROL_RE = re.compile(r"\\\w+\s?")


# ── Content extraction ────────────────────────────────────────────────────────


def is_binary_word(content: str) -> bool:
    """Base64-encoded or raw .docx (zip) content."""
    return content.startswith("UEsDB") or "PK\x03\x04" in content


def extract_readable_text(file_name: str, content: str | None) -> str:
    """Best-effort plain text for diffing and summarization."""
    if not content:
        return NO_CONTENT

    extension = file_name[file_name.rfind("."):].lower() if "." in file_name else ""
    if is_binary_word(content):
        return BINARY_WORD_PLACEHOLDER
    if extension == ".rtf":
        text = _RTF_HEADER_RE.sub("", content)
        text = _RTF_CONTROL_RE.sub(" ", text)
        return text.replace("{", "").replace("}", "").strip()
    return content


# ── Diff ──────────────────────────────────────────────────────────────────────


def tokenize(text: str) -> list[str]:
    return _TOKEN_RE.findall(text)


def diff_words(old_text: str, new_text: str) -> list[tuple[str, str]]:
    """Return ``(op, text)`` runs where op is ``equal``, ``removed`` or ``added``."""
    old_tokens = tokenize(old_text)
    new_tokens = tokenize(new_text)
    matcher = SequenceMatcher(None, old_tokens, new_tokens, autojunk=False)

    parts: list[tuple[str, str]] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            parts.append(("equal", "".join(old_tokens[i1:i2])))
            continue
        if tag in ("delete", "replace"):
            parts.append(("removed", "".join(old_tokens[i1:i2])))
        if tag in ("insert", "replace"):
            parts.append(("added", "".join(new_tokens[j1:j2])))
    return parts


def _format_paragraphs(marked_up: str) -> str:
    paragraph = f'<p style="{_FONT} margin-bottom: 10pt;">{{}}</p>'
    if "\n" not in marked_up:
        return paragraph.format(marked_up)
    return "".join(
        paragraph.format(chunk.replace("\n", "<br>"))
        for chunk in re.split(r"\n\n+", marked_up)
    )


def _no_differences_html() -> str:
    return (
        f'<div class="document-compare" style="{_FONT} line-height: 1.5; color: #333;">'
        '<div class="no-differences" style="text-align: center; padding: 20px; color: #666;">'
        "<p>No differences found between the two versions.</p>"
        '<p class="text-sm">The documents appear to be identical.</p>'
        "</div></div>"
    )


def _error_html(message: str) -> str:
    return (
        f'<div class="document-compare" style="{_FONT} line-height: 1.5; color: #333;">'
        '<div class="error" style="color: #b91c1c; padding: 20px; border: 1px solid #fecaca; '
        'border-radius: 4px; margin: 10px 0;">'
        '<h3 style="margin-top: 0;">Error generating document comparison</h3>'
        f"<p>{escape(message)}</p>"
        "</div></div>"
    )


def render_diff_html(old_text: str, new_text: str, title: str) -> str:
    """Render a track-changes view of ``new_text`` against ``old_text``.

    Rendering failures are reported inside the returned HTML, never raised.
    """
    try:
        parts = diff_words(old_text, new_text)
        if not any(op != "equal" for op, _ in parts):
            return _no_differences_html()

        marked_up = []
        for op, text in parts:
            escaped = escape(text)
            if op == "added":
                marked_up.append(f'<span class="diff-added" style="{_ADDED_STYLE}">{escaped}</span>')
            elif op == "removed":
                marked_up.append(f'<span class="diff-removed" style="{_REMOVED_STYLE}">{escaped}</span>')
            else:
                marked_up.append(str(escaped))

        return (
            f'<div class="document-compare" style="{_FONT} line-height: 1.5; color: #333; margin: 0;">'
            '<div class="full-document-with-changes">'
            f'<div class="document-content" style="{_FONT} line-height: 1.5; color: #333;">'
            f'<h1 style="{_FONT} font-size: 16pt; font-weight: bold; color: #000; '
            f'text-align: center; margin-bottom: 24pt;">{escape(title)}</h1>'
            f"{_format_paragraphs(''.join(marked_up))}"
            "</div></div></div>"
        )
    except Exception as exc:
        logger.error("doc_compare.diff_failed", error=str(exc), title=title)
        return _error_html(str(exc) or "An unknown error occurred while comparing documents")
