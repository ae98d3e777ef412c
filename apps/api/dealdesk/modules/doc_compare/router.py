"""Document comparison API router.

``ComparisonError`` from the service layer is rendered by the app-wide
``DealDeskError`` handler (404 missing version, 400 cross-document pair,
422 unsupported upload, 413 oversize upload).
"""

from __future__ import annotations

import uuid
from urllib.parse import quote

import structlog
from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from dealdesk.core.database import get_db
from dealdesk.modules.doc_compare import service
from dealdesk.modules.doc_compare.report import render_comparison_report, report_filename
from dealdesk.modules.doc_compare.schemas import (
    CompareVersionsRequest,
    ComparisonResult,
    RedlineRequest,
    RedlineResponse,
)
from dealdesk.modules.doc_compare.service import get_change_summarizer
from dealdesk.modules.doc_compare.summarizer import ChangeSummarizer
from dealdesk.modules.doc_compare.view import ComparisonView

logger = structlog.get_logger()

router = APIRouter(tags=["document-compare"])


def content_disposition(filename: str) -> str:
    """Attachment header; non-ASCII names use the RFC 5987 ``filename*`` form."""
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


@router.get("/document-versions/compare", response_model=ComparisonResult)
async def compare_versions(
    version1: uuid.UUID = Query(..., description="First version id"),
    version2: uuid.UUID = Query(..., description="Second version id"),
    include_summary: bool = Query(True, description="Ask the LLM for a change summary"),
    db: AsyncSession = Depends(get_db),
    summarizer: ChangeSummarizer = Depends(get_change_summarizer),
):
    """Redline two versions of a document, older version as the original."""
    return await service.compare_versions(
        db, version1, version2, summarizer, include_summary=include_summary
    )


@router.post("/document-versions/compare", response_model=ComparisonResult)
async def compare_versions_with_content(
    body: CompareVersionsRequest,
    db: AsyncSession = Depends(get_db),
    summarizer: ChangeSummarizer = Depends(get_change_summarizer),
):
    """Compare two versions using content the client already extracted."""
    return await service.compare_versions(
        db,
        body.version1,
        body.version2,
        summarizer,
        content_1=body.content_v1,
        content_2=body.content_v2,
        include_summary=body.include_summary,
    )


@router.get("/document-versions/compare/report", response_class=HTMLResponse)
async def download_comparison_report(
    version1: uuid.UUID = Query(...),
    version2: uuid.UUID = Query(...),
    include_summary: bool = Query(True),
    db: AsyncSession = Depends(get_db),
    summarizer: ChangeSummarizer = Depends(get_change_summarizer),
):
    """Download the comparison as a standalone HTML document."""
    result = await service.compare_versions(
        db, version1, version2, summarizer, include_summary=include_summary
    )
    view = ComparisonView(
        original_version=result.original_version,
        new_version=result.new_version,
        diff_html=result.diff_html,
        content_v1=result.content_v1,
        content_v2=result.content_v2,
        kind_v1=result.content_kind_v1,
        kind_v2=result.content_kind_v2,
        ai_summary=result.ai_summary,
        on_close=lambda: None,
    )
    filename = report_filename(view)
    logger.info("doc_compare.report_exported", filename=filename)
    return HTMLResponse(
        content=render_comparison_report(view),
        headers={"Content-Disposition": content_disposition(filename)},
    )


@router.post("/tools/redline", response_model=RedlineResponse)
async def redline(
    body: RedlineRequest,
    summarizer: ChangeSummarizer = Depends(get_change_summarizer),
):
    """Redline two ad-hoc files (not stored as versions)."""
    return await service.redline_files(
        body.original_file,
        body.new_file,
        summarizer,
        include_summary=body.include_summary,
    )
