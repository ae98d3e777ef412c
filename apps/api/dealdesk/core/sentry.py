"""Sentry setup for the DealDesk API.

Deal documents are confidential, so events never carry version content:
request bodies are stripped of document text and auth headers are redacted.
"""

import sentry_sdk
import structlog
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.httpx import HttpxIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

logger = structlog.get_logger()

_REDACTED = "[REDACTED]"
_SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key"}
_DOCUMENT_FIELDS = {"file_content", "content", "content_v1", "content_v2"}


def _redact_documents(data):
    if isinstance(data, dict):
        return {
            key: _REDACTED if key in _DOCUMENT_FIELDS else _redact_documents(value)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [_redact_documents(item) for item in data]
    return data


def _scrub_event(event: dict, hint: dict) -> dict:
    request = event.get("request") or {}
    headers = request.get("headers") or {}
    for name in list(headers):
        if name.lower() in _SENSITIVE_HEADERS:
            headers[name] = _REDACTED
    if "data" in request:
        request["data"] = _redact_documents(request["data"])
    return event


def init_sentry(
    dsn: str | None,
    environment: str = "development",
    release: str | None = None,
) -> None:
    """Must run before the FastAPI app is built. Does nothing without a DSN."""
    if not dsn:
        logger.warning("sentry_disabled", reason="SENTRY_DSN not set")
        return

    traces_sample_rate = 0.1 if environment == "production" else 1.0
    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        traces_sample_rate=traces_sample_rate,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            # LLM summary calls go out through httpx inside litellm
            HttpxIntegration(),
        ],
        send_default_pii=False,
        max_request_body_size="medium",
        before_send=_scrub_event,
    )
    sentry_sdk.set_tag("service", "dealdesk-api")
    logger.info("sentry_initialized", environment=environment, traces_sample_rate=traces_sample_rate)
