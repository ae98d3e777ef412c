from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from dealdesk.core.config import settings
from dealdesk.core.database import engine, get_db
from dealdesk.core.errors import (
    DealDeskError,
    domain_exception_handler,
    global_exception_handler,
    http_exception_handler,
)
from dealdesk.core.sentry import init_sentry
from dealdesk.middleware.security import (
    RequestBodySizeLimitMiddleware,
    SecurityHeadersMiddleware,
)

# Register all models on Base.metadata at startup
import dealdesk.models  # noqa: F401

from dealdesk.modules.doc_compare.router import router as doc_compare_router
from dealdesk.modules.doc_versions.router import router as doc_versions_router

# ── Sentry: must be initialised BEFORE FastAPI app is created ───────────────
init_sentry(settings.SENTRY_DSN, settings.SENTRY_ENVIRONMENT, settings.APP_VERSION)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    logger.info(
        "Starting DealDesk API",
        env=settings.APP_ENV,
        ai_summaries="live" if settings.OPENAI_API_KEY else "demo",
    )
    yield
    logger.info("Shutting down DealDesk API")
    await engine.dispose()


_is_prod = settings.APP_ENV == "production"

app = FastAPI(
    title="DealDesk API",
    description="Deal document versioning, redlines and AI change summaries.",
    version="0.1.0",
    docs_url=None if _is_prod else "/docs",
    redoc_url=None if _is_prod else "/redoc",
    openapi_url=None if _is_prod else "/openapi.json",
    lifespan=lifespan,
)

app.add_exception_handler(DealDeskError, domain_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
    expose_headers=["Content-Disposition"],
)
# Security middleware (added last = outermost = first to see requests, last to touch responses)
app.add_middleware(
    RequestBodySizeLimitMiddleware,  # type: ignore[arg-type]
    max_bytes=settings.MAX_REQUEST_BODY_BYTES,
)
app.add_middleware(
    SecurityHeadersMiddleware,  # type: ignore[arg-type]
    is_production=_is_prod,
)


# ── X-API-Version response header ────────────────────────────────────────────


@app.middleware("http")
async def add_version_header(request: Request, call_next) -> Response:
    response = await call_next(request)
    response.headers["X-API-Version"] = "v1"
    return response


# ── Health check (root-level, not under /v1) ─────────────────────────────────


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)) -> dict:
    """Check the database and report whether AI summaries run live or in demo mode."""
    checks: dict[str, dict] = {}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = {"status": "healthy"}
    except Exception as exc:
        checks["database"] = {"status": "unhealthy", "error": str(exc)}

    checks["llm"] = {
        "status": "healthy",
        "mode": "live" if settings.OPENAI_API_KEY else "demo",
        "model": settings.AI_COMPARISON_MODEL,
    }

    overall = (
        "healthy"
        if all(c["status"] == "healthy" for c in checks.values())
        else "degraded"
    )
    return {"status": overall, "service": "dealdesk-api", "checks": checks}


# ── /v1 versioned router ──────────────────────────────────────────────────────

api_v1 = APIRouter(prefix="/v1")

# Comparison routes first: /document-versions/compare must win over /document-versions/{version_id}
api_v1.include_router(doc_compare_router)
api_v1.include_router(doc_versions_router)

app.include_router(api_v1)
