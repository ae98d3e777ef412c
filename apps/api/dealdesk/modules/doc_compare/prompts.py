"""Prompt text and fixed payloads for the change summarizer."""

from __future__ import annotations

from typing import Any

SYSTEM_PROMPT = (
    "You are an expert legal document analyst. You will be provided with two versions "
    "of a legal document. Your task is to analyze the changes between them and provide "
    "a structured summary. Focus on substantive changes that affect legal meaning, "
    "financial terms, rights, and obligations. Ignore purely stylistic edits such as "
    "formatting, punctuation, or rewording that does not change meaning."
)

USER_PROMPT_TEMPLATE = """I need you to compare these two versions of a legal document and summarize the key changes:

ORIGINAL VERSION:
{original}

UPDATED VERSION:
{updated}

Analyze the changes and respond with a JSON object containing:
1. "significant_changes": a list of significant changes, each with "section" (where it appears), \
"change_type" (addition, removal, or modification), "description", and "significance" (high, medium, or low)
2. "unchanged_sections": a list of section names that remained unchanged
3. "summary": a concise overall summary of the changes (max 50 words)"""


def build_messages(original: str, updated: str) -> list[dict[str, Any]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": USER_PROMPT_TEMPLATE.format(original=original, updated=updated),
        },
    ]


# Returned verbatim when no provider key is configured (local runs and demos).
DEMO_SUMMARY: dict[str, Any] = {
    "significant_changes": [
        {
            "section": "Financial Terms",
            "change_type": "modification",
            "description": (
                "Increased the initial investment amount from $5M to $7.5M and "
                "valuation cap from $25M to $30M"
            ),
            "significance": "high",
        },
        {
            "section": "Board Representation",
            "change_type": "addition",
            "description": (
                "Added observer rights for the investor at all board meetings in "
                "addition to board appointment"
            ),
            "significance": "medium",
        },
        {
            "section": "Intellectual Property",
            "change_type": "modification",
            "description": (
                "Expanded intellectual property representation to include licensed IP "
                "and added requirement for IP audit"
            ),
            "significance": "high",
        },
    ],
    "unchanged_sections": ["Introduction", "Closing Conditions"],
    "summary": (
        "This revision significantly increases the investment amount and valuation cap, "
        "adds board observer rights, and expands IP representations to include licensed "
        "IP with an audit requirement. No changes were made to the introduction or "
        "closing conditions."
    ),
}

ERROR_SUMMARY_TEXT = (
    "An error occurred while analyzing the document changes. "
    "Please try again, or compare smaller documents."
)
