"""Security middleware: response headers and request body size enforcement.

Both are pure ASGI middleware (no BaseHTTPMiddleware) so they wrap the
comparison report download without buffering it.
"""

import structlog
from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from dealdesk.core.errors import ErrorResponse

logger = structlog.get_logger()

# ── 1. Security Headers ───────────────────────────────────────────────────────


class SecurityHeadersMiddleware:
    """Append security headers to every HTTP response.

    HTML responses (the comparison report) embed stored version content, which
    may itself be HTML, so they also get a CSP that allows the report's inline
    styles and nothing executable.
    """

    _STATIC_HEADERS = [
        ("x-content-type-options", "nosniff"),
        ("x-frame-options", "DENY"),
        ("x-xss-protection", "0"),
        ("referrer-policy", "strict-origin-when-cross-origin"),
    ]
    _HTML_CSP = (
        "content-security-policy",
        "default-src 'none'; style-src 'unsafe-inline'; img-src data:; form-action 'none'",
    )
    _HSTS_HEADER = ("strict-transport-security", "max-age=63072000; includeSubDomains; preload")

    def __init__(self, app: ASGIApp, is_production: bool = False) -> None:
        self.app = app
        self._headers = list(self._STATIC_HEADERS)
        if is_production:
            self._headers.append(self._HSTS_HEADER)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def _send(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in self._headers:
                    headers.append(name, value)
                if headers.get("content-type", "").startswith("text/html"):
                    headers.append(*self._HTML_CSP)
                headers["server"] = "DealDesk"
            await send(message)

        await self.app(scope, receive, _send)


# ── 2. Request Body Size Limiter ──────────────────────────────────────────────


class RequestBodySizeLimitMiddleware:
    """Reject requests whose Content-Length exceeds max_bytes before they hit handlers.

    Per-file limits for redline uploads are enforced separately in the
    comparison service; this is the coarse whole-request cap.
    """

    def __init__(self, app: ASGIApp, max_bytes: int = 52_428_800) -> None:  # 50 MB
        self.app = app
        self.max_bytes = max_bytes

    def _too_large(self, scope: Scope) -> bool:
        raw = Headers(scope=scope).get("content-length")
        if not raw:
            return False
        try:
            return int(raw) > self.max_bytes
        except ValueError:
            # Malformed header: the server rejects it downstream
            return False

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self._too_large(scope):
            await self.app(scope, receive, send)
            return

        logger.warning(
            "request_body_too_large",
            path=scope.get("path"),
            content_length=Headers(scope=scope).get("content-length"),
            max_bytes=self.max_bytes,
        )
        message = f"Request body too large. Maximum {self.max_bytes // 1_048_576} MB."
        response = JSONResponse(
            status_code=413,
            content=ErrorResponse(
                error="payload_too_large",
                message=message,
                detail=message,
                request_id=Headers(scope=scope).get("x-request-id", "unknown"),
            ).model_dump(),
        )
        await response(scope, receive, send)
