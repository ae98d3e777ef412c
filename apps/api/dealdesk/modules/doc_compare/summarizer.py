"""AI change summaries for a pair of document versions.

``ChangeSummarizer.summarize`` always returns a structurally complete
``AISummary``. The inner pipeline raises typed ``SummarizerError``s and a
single adapter maps each one to its degraded result:

* no completion client      -> fixed demo payload
* transport / provider error -> one synthetic ``change_type="error"`` entry
* empty or non-JSON body     -> empty summary
* oversize input             -> proportional truncation + summary note
"""

from __future__ import annotations

import asyncio
import json
import math
import re
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import ValidationError

from dealdesk.modules.doc_compare.prompts import DEMO_SUMMARY, ERROR_SUMMARY_TEXT, build_messages
from dealdesk.modules.doc_compare.schemas import AISummary, SignificantChange
from dealdesk.services.llm import CompletionClient

logger = structlog.get_logger()

CHARS_PER_TOKEN = 4
MAX_TOKEN_LIMIT = 24_000  # leaves headroom for the model's response
TEMPERATURE = 0.2

TRUNCATION_NOTICE = (
    "\n\n[NOTE: The document has been truncated due to size constraints. "
    "This analysis covers only the first portion of the document.]"
)
TRUNCATED_SUMMARY_SUFFIX = " Note: Due to document size, only the first portion was analyzed."


# ── Errors ────────────────────────────────────────────────────────────────────


class SummarizerError(Exception):
    """Base class for failures inside the summarization pipeline."""


class NetworkFailure(SummarizerError):
    """The completion endpoint could not be reached or returned an error."""


class MalformedResponse(SummarizerError):
    """The completion body was missing or not a JSON object."""


# ── Token budget ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class BudgetedTexts:
    original: str
    updated: str
    original_tokens: int | None = None
    updated_tokens: int | None = None

    @property
    def truncated(self) -> bool:
        return self.original_tokens is not None


def estimate_tokens(*texts: str) -> int:
    return math.ceil(sum(len(t) for t in texts) / CHARS_PER_TOKEN)


def _truncate(text: str, tokens: int) -> str:
    max_chars = tokens * CHARS_PER_TOKEN
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_NOTICE


def fit_to_token_budget(
    original: str, updated: str, limit: int = MAX_TOKEN_LIMIT
) -> BudgetedTexts:
    """Shrink both texts proportionally so together they fit ``limit`` tokens."""
    if estimate_tokens(original, updated) <= limit:
        return BudgetedTexts(original, updated)

    total_length = len(original) + len(updated)
    original_tokens = math.floor(limit * len(original) / total_length)
    updated_tokens = limit - original_tokens
    return BudgetedTexts(
        original=_truncate(original, original_tokens),
        updated=_truncate(updated, updated_tokens),
        original_tokens=original_tokens,
        updated_tokens=updated_tokens,
    )


# ── Response parsing ──────────────────────────────────────────────────────────


def _parse_json_object(text: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # Models occasionally wrap the object in fences or prose
        cleaned = re.sub(r"```(?:json)?\s*", "", text)
        cleaned = re.sub(r"```\s*$", "", cleaned).strip()
        match = re.search(r"\{[\s\S]*\}", cleaned)
        if not match:
            raise MalformedResponse("Completion did not contain a JSON object") from None
        try:
            data = json.loads(match.group())
        except json.JSONDecodeError as exc:
            raise MalformedResponse(f"Invalid JSON in completion: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedResponse(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _coerce_summary(data: dict[str, Any]) -> AISummary:
    raw_changes = data.get("significant_changes") or []
    if not isinstance(raw_changes, list):
        logger.warning("doc_compare.changes_not_a_list", value_type=type(raw_changes).__name__)
        raw_changes = []

    changes: list[SignificantChange] = []
    for raw in raw_changes:
        if isinstance(raw, dict):
            raw = {
                k: v.lower() if k in ("change_type", "significance") and isinstance(v, str) else v
                for k, v in raw.items()
            }
        try:
            changes.append(SignificantChange.model_validate(raw))
        except ValidationError as exc:
            logger.warning("doc_compare.change_entry_dropped", entry=str(raw)[:200], error=str(exc))

    unchanged = data.get("unchanged_sections") or []
    if not isinstance(unchanged, list):
        unchanged = []
    summary = data.get("summary") or ""
    return AISummary(
        significant_changes=changes,
        unchanged_sections=[str(s) for s in unchanged],
        summary=str(summary),
    )


def demo_summary() -> AISummary:
    return AISummary.model_validate(DEMO_SUMMARY)


def error_summary(message: str) -> AISummary:
    return AISummary(
        significant_changes=[
            SignificantChange(
                section="Error",
                change_type="error",
                description=message,
                significance="medium",
            )
        ],
        unchanged_sections=[],
        summary=ERROR_SUMMARY_TEXT,
    )


# ── Summarizer ────────────────────────────────────────────────────────────────


class ChangeSummarizer:
    """Summarise substantive changes between two document texts.

    Pass ``client=None`` to run in demo mode: no network call is made and the
    fixed demo payload is returned for every input.
    """

    def __init__(
        self,
        client: CompletionClient | None,
        *,
        token_limit: int = MAX_TOKEN_LIMIT,
        timeout: float | None = None,
    ) -> None:
        self.client = client
        self.token_limit = token_limit
        self.timeout = timeout

    @property
    def service_available(self) -> bool:
        return self.client is not None

    async def summarize(self, original: str, updated: str) -> AISummary:
        if self.client is None:
            logger.warning("doc_compare.demo_summary", reason="no completion client configured")
            return demo_summary()

        budget = fit_to_token_budget(original, updated, self.token_limit)
        if budget.truncated:
            logger.info(
                "doc_compare.inputs_truncated",
                estimated_tokens=estimate_tokens(original, updated),
                original_tokens=budget.original_tokens,
                updated_tokens=budget.updated_tokens,
            )

        try:
            result = await self._summarize(self.client, budget)
        except NetworkFailure as exc:
            logger.error("doc_compare.summary_failed", error=str(exc))
            return error_summary(str(exc))
        except MalformedResponse as exc:
            logger.warning("doc_compare.summary_malformed", error=str(exc))
            result = AISummary()

        if budget.truncated:
            result.summary += TRUNCATED_SUMMARY_SUFFIX
        return result

    async def _summarize(self, client: CompletionClient, budget: BudgetedTexts) -> AISummary:
        messages = build_messages(budget.original, budget.updated)
        try:
            call = client.complete(
                messages,
                temperature=TEMPERATURE,
                response_format={"type": "json_object"},
            )
            if self.timeout is not None:
                content = await asyncio.wait_for(call, timeout=self.timeout)
            else:
                content = await call
        except TimeoutError as exc:
            raise NetworkFailure(
                f"Change summary timed out after {self.timeout:g} seconds"
            ) from exc
        except Exception as exc:
            raise NetworkFailure(str(exc) or type(exc).__name__) from exc

        if not content or not content.strip():
            return AISummary()
        return _coerce_summary(_parse_json_object(content))
