"""Thin completion client over litellm.

The comparison summarizer only needs one call shape (chat messages in,
message text out), so callers depend on the ``CompletionClient`` protocol and
tests hand in a mock instead of patching litellm.
"""

from __future__ import annotations

from typing import Any, Protocol

import litellm
import structlog

from dealdesk.core.config import settings

logger = structlog.get_logger()

litellm.set_verbose = False


class CompletionClient(Protocol):
    async def complete(
        self,
        messages: list[dict[str, Any]],
        *,
        temperature: float,
        response_format: dict[str, Any] | None = None,
    ) -> str | None: ...


class LiteLLMCompletionClient:
    """Single-attempt completion against one fixed model."""

    def __init__(self, model: str, api_key: str, timeout: float) -> None:
        self.model = model
        self._api_key = api_key
        self.timeout = timeout

    async def complete(
        self,
        messages: list[dict[str, Any]],
        *,
        temperature: float,
        response_format: dict[str, Any] | None = None,
    ) -> str | None:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "api_key": self._api_key,
            "timeout": self.timeout,
        }
        if response_format:
            kwargs["response_format"] = response_format

        response = await litellm.acompletion(**kwargs)

        choices = getattr(response, "choices", None) or []
        if not choices:
            return None
        content = choices[0].message.content

        usage = getattr(response, "usage", None)
        logger.info(
            "completion_success",
            model=self.model,
            prompt_tokens=getattr(usage, "prompt_tokens", None),
            completion_tokens=getattr(usage, "completion_tokens", None),
            stop_reason=choices[0].finish_reason,
        )
        return content


def build_completion_client() -> CompletionClient | None:
    """Return a client when a provider key is configured, else None."""
    if not settings.OPENAI_API_KEY:
        return None
    return LiteLLMCompletionClient(
        model=settings.AI_COMPARISON_MODEL,
        api_key=settings.OPENAI_API_KEY,
        timeout=settings.AI_COMPARISON_TIMEOUT_SECONDS,
    )
