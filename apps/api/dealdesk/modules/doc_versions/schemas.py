"""Document Version Control: Pydantic schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from dealdesk.models.enums import ContentKind
from dealdesk.modules.doc_compare.schemas import UploaderSummary


class DocumentVersionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    document_id: uuid.UUID
    version: int
    file_name: str
    file_size: int
    file_type: str
    file_content: str
    content_kind: ContentKind
    uploaded_by_id: uuid.UUID
    comment: str | None
    created_at: datetime


class DocumentVersionWithUploader(DocumentVersionResponse):
    uploaded_by: UploaderSummary | None = None


class LatestVersionResponse(BaseModel):
    latest_version: int


class CreateVersionRequest(BaseModel):
    """Body for uploading a new version; the version number is assigned server-side."""

    file_name: str = Field(min_length=1, max_length=500)
    file_size: int = Field(ge=0)
    file_type: str = Field(min_length=1, max_length=255)
    file_content: str
    uploaded_by_id: uuid.UUID
    comment: str | None = None
