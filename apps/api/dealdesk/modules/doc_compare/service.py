"""Document comparison: diff + AI summary for two versions or two files."""

from __future__ import annotations

import asyncio
import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from dealdesk.core.config import settings
from dealdesk.core.errors import DealDeskError
from dealdesk.models.core import User
from dealdesk.models.documents import DocumentVersion
from dealdesk.models.enums import ContentKind
from dealdesk.modules.doc_compare.diff import extract_readable_text, render_diff_html
from dealdesk.modules.doc_compare.normalize import detect_content_kind
from dealdesk.modules.doc_compare.schemas import (
    AISummary,
    ComparedVersion,
    ComparisonResult,
    FileData,
    RedlineResponse,
    UploaderSummary,
)
from dealdesk.modules.doc_compare.summarizer import ChangeSummarizer
from dealdesk.modules.doc_versions import service as versions_service
from dealdesk.services.llm import build_completion_client

logger = structlog.get_logger()

ALLOWED_EXTENSIONS = frozenset(
    {".pdf", ".docx", ".doc", ".odt", ".txt", ".rtf", ".text", ".md", ".log", ".html", ".htm"}
)


class ComparisonError(DealDeskError):
    """Raised when two versions or uploaded files cannot be compared."""

    error = "comparison_failed"


def get_change_summarizer() -> ChangeSummarizer:
    """FastAPI dependency: summarizer wired to the configured provider (or demo mode)."""
    return ChangeSummarizer(
        build_completion_client(),
        timeout=settings.AI_COMPARISON_TIMEOUT_SECONDS,
    )


async def _diff_and_summarize(
    old_text: str,
    new_text: str,
    title: str,
    summarizer: ChangeSummarizer,
    include_summary: bool,
) -> tuple[str, AISummary | None]:
    diff_task = asyncio.to_thread(render_diff_html, old_text, new_text, title)
    if not include_summary:
        return await diff_task, None
    diff_html, ai_summary = await asyncio.gather(
        diff_task, summarizer.summarize(old_text, new_text)
    )
    return diff_html, ai_summary


async def compare_versions(
    db: AsyncSession,
    version_id_1: uuid.UUID,
    version_id_2: uuid.UUID,
    summarizer: ChangeSummarizer,
    content_1: str | None = None,
    content_2: str | None = None,
    include_summary: bool = True,
) -> ComparisonResult:
    """Compare two stored versions; the lower version number is the original.

    ``content_1`` / ``content_2`` replace the stored content of the older /
    newer version respectively (e.g. text already extracted from a .docx).
    """
    first, second = await versions_service.get_version_pair(db, version_id_1, version_id_2)
    if not first or not second:
        missing = [str(v) for v, row in ((version_id_1, first), (version_id_2, second)) if not row]
        logger.warning("doc_compare.version_not_found", missing=missing)
        raise ComparisonError("One or both document versions not found", status_code=404)
    if first.document_id != second.document_id:
        raise ComparisonError("Versions belong to different documents")

    older, newer = versions_service.order_pair(first, second)
    logger.info(
        "doc_compare.started",
        document_id=str(older.document_id),
        older=older.version,
        newer=newer.version,
        custom_content=bool(content_1 or content_2),
    )

    text_v1 = content_1 or _version_text(older)
    text_v2 = content_2 or _version_text(newer)
    diff_html, ai_summary = await _diff_and_summarize(
        text_v1, text_v2, newer.file_name, summarizer, include_summary
    )
    return ComparisonResult(
        original_version=await _compared_version(db, older),
        new_version=await _compared_version(db, newer),
        diff_html=diff_html,
        content_v1=text_v1,
        content_v2=text_v2,
        content_kind_v1=_compared_kind(older, content_1),
        content_kind_v2=_compared_kind(newer, content_2),
        ai_summary=ai_summary,
    )


async def _compared_version(db: AsyncSession, version: DocumentVersion) -> ComparedVersion:
    uploader = await db.get(User, version.uploaded_by_id)
    return ComparedVersion.model_validate(version).model_copy(
        update={"uploaded_by": UploaderSummary.model_validate(uploader) if uploader else None}
    )


def _compared_kind(version: DocumentVersion, override: str | None) -> ContentKind:
    if override:
        return detect_content_kind(override)
    return version.content_kind


def _version_text(version: DocumentVersion) -> str:
    return extract_readable_text(version.file_name, version.file_content)


def validate_upload(file: FileData) -> None:
    extension = file.name[file.name.rfind("."):].lower() if "." in file.name else ""
    if extension not in ALLOWED_EXTENSIONS:
        raise ComparisonError(
            f"Unsupported file type '{extension or file.name}'. Only document file types "
            "(PDF, DOCX, DOC, ODT, TXT, RTF, MD, HTML) are allowed",
            status_code=422,
        )
    if len(file.content.encode("utf-8")) > settings.MAX_UPLOAD_BYTES:
        raise ComparisonError(
            f"File '{file.name}' exceeds the {settings.MAX_UPLOAD_BYTES // 1_048_576}MB limit",
            status_code=413,
        )


async def redline_files(
    original_file: FileData,
    new_file: FileData,
    summarizer: ChangeSummarizer,
    include_summary: bool = False,
) -> RedlineResponse:
    """Compare two ad-hoc files that are not stored as document versions."""
    validate_upload(original_file)
    validate_upload(new_file)

    text_v1 = extract_readable_text(original_file.name, original_file.content)
    text_v2 = extract_readable_text(new_file.name, new_file.content)
    diff_html, ai_summary = await _diff_and_summarize(
        text_v1, text_v2, new_file.name, summarizer, include_summary
    )
    logger.info(
        "doc_compare.redline_generated",
        original=original_file.name,
        new=new_file.name,
        with_summary=include_summary,
    )
    return RedlineResponse(
        diff=diff_html,
        content_v1=text_v1,
        content_v2=text_v2,
        ai_summary=ai_summary,
    )
