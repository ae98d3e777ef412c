"""Document Version Control API router."""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from dealdesk.core.database import get_db
from dealdesk.models.core import User
from dealdesk.modules.doc_compare.schemas import UploaderSummary
from dealdesk.modules.doc_versions import service
from dealdesk.modules.doc_versions.schemas import (
    CreateVersionRequest,
    DocumentVersionResponse,
    DocumentVersionWithUploader,
    LatestVersionResponse,
)

logger = structlog.get_logger()

router = APIRouter(tags=["document-versions"])


@router.get(
    "/documents/{document_id}/versions",
    response_model=list[DocumentVersionWithUploader],
)
async def list_versions(
    document_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """List all versions of a document, oldest first, with their uploaders."""
    rows = await service.list_versions(db, document_id=document_id)
    return [
        DocumentVersionWithUploader(
            **DocumentVersionResponse.model_validate(version).model_dump(),
            uploaded_by=UploaderSummary.model_validate(user) if user else None,
        )
        for version, user in rows
    ]


@router.get(
    "/documents/{document_id}/latest-version",
    response_model=LatestVersionResponse,
)
async def get_latest_version(
    document_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Highest version number of a document (0 when none uploaded yet)."""
    latest = await service.get_latest_version_number(db, document_id)
    return LatestVersionResponse(latest_version=latest)


@router.post(
    "/documents/{document_id}/versions",
    response_model=DocumentVersionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_version(
    document_id: uuid.UUID,
    body: CreateVersionRequest,
    db: AsyncSession = Depends(get_db),
):
    """Upload a new version; it is numbered one above the current latest."""
    document = await service.get_document(db, document_id)
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    if not await db.get(User, body.uploaded_by_id):
        raise HTTPException(status_code=422, detail="Uploader not found")

    try:
        version = await service.create_version(
            db,
            document=document,
            file_name=body.file_name,
            file_size=body.file_size,
            file_type=body.file_type,
            file_content=body.file_content,
            uploaded_by_id=body.uploaded_by_id,
            comment=body.comment,
        )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("doc_version.conflict", document_id=str(document_id))
        raise HTTPException(
            status_code=409,
            detail="Another version was uploaded concurrently; retry the upload",
        ) from None
    await db.refresh(version)
    logger.info(
        "doc_version.created",
        document_id=str(document_id),
        version=version.version,
        content_kind=version.content_kind.value,
    )
    return DocumentVersionResponse.model_validate(version)


@router.get("/document-versions/{version_id}", response_model=DocumentVersionResponse)
async def get_version(
    version_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a specific version record."""
    version = await service.get_version(db, version_id)
    if not version:
        raise HTTPException(status_code=404, detail="Version not found")
    return DocumentVersionResponse.model_validate(version)
