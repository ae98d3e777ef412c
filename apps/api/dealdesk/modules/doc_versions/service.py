"""Document Version Control service: append-only version history."""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealdesk.models.core import User
from dealdesk.models.documents import Document, DocumentVersion
from dealdesk.models.enums import TimelineEventType
from dealdesk.models.timeline import TimelineEvent
from dealdesk.modules.doc_compare.normalize import detect_content_kind

logger = structlog.get_logger()


async def get_document(db: AsyncSession, document_id: uuid.UUID) -> Document | None:
    return await db.get(Document, document_id)


async def get_latest_version_number(db: AsyncSession, document_id: uuid.UUID) -> int:
    """Highest version number for the document, 0 when it has none yet."""
    result = await db.execute(
        select(func.max(DocumentVersion.version)).where(
            DocumentVersion.document_id == document_id
        )
    )
    return result.scalar_one_or_none() or 0


async def list_versions(
    db: AsyncSession, document_id: uuid.UUID
) -> list[tuple[DocumentVersion, User | None]]:
    """All versions in ascending order, each paired with its uploader."""
    result = await db.execute(
        select(DocumentVersion, User)
        .outerjoin(User, User.id == DocumentVersion.uploaded_by_id)
        .where(DocumentVersion.document_id == document_id)
        .order_by(DocumentVersion.version.asc())
    )
    return [(version, user) for version, user in result.all()]


async def get_version(db: AsyncSession, version_id: uuid.UUID) -> DocumentVersion | None:
    return await db.get(DocumentVersion, version_id)


async def create_version(
    db: AsyncSession,
    document: Document,
    file_name: str,
    file_size: int,
    file_type: str,
    file_content: str,
    uploaded_by_id: uuid.UUID,
    comment: str | None = None,
) -> DocumentVersion:
    """Append the next version of ``document`` and record it on the deal timeline.

    Two concurrent uploads can compute the same number; the unique
    (document_id, version) constraint rejects the loser at flush time.
    """
    latest = await get_latest_version_number(db, document.id)

    version = DocumentVersion(
        document_id=document.id,
        version=latest + 1,
        file_name=file_name,
        file_size=file_size,
        file_type=file_type,
        file_content=file_content,
        content_kind=detect_content_kind(file_content),
        uploaded_by_id=uploaded_by_id,
        comment=comment or None,
    )
    db.add(version)

    description = f"New version (v{version.version}) of {document.title} uploaded."
    if version.comment:
        description += f" Comment: {version.comment}"
    db.add(
        TimelineEvent(
            deal_id=document.deal_id,
            title="Document Updated",
            description=description,
            event_type=TimelineEventType.DOCUMENT,
            reference_id=document.id,
            reference_type="document",
        )
    )
    await db.flush()
    return version


def order_pair(
    first: DocumentVersion, second: DocumentVersion
) -> tuple[DocumentVersion, DocumentVersion]:
    """Return (older, newer) by version number."""
    if first.version <= second.version:
        return first, second
    return second, first


async def get_version_pair(
    db: AsyncSession,
    version_id_1: uuid.UUID,
    version_id_2: uuid.UUID,
) -> tuple[DocumentVersion | None, DocumentVersion | None]:
    """Retrieve two versions for comparison, by id."""
    result = await db.execute(
        select(DocumentVersion).where(DocumentVersion.id.in_([version_id_1, version_id_2]))
    )
    versions = {v.id: v for v in result.scalars().all()}
    return versions.get(version_id_1), versions.get(version_id_2)
