"""Document comparison: Pydantic schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from dealdesk.models.enums import ContentKind

ChangeType = Literal["addition", "removal", "modification", "error"]
Significance = Literal["high", "medium", "low"]


# ── AI summary ────────────────────────────────────────────────────────────────


class SignificantChange(BaseModel):
    section: str
    change_type: ChangeType
    description: str
    significance: Significance


class AISummary(BaseModel):
    """Structured change summary; all three fields are always present."""

    significant_changes: list[SignificantChange] = Field(default_factory=list)
    unchanged_sections: list[str] = Field(default_factory=list)
    summary: str = ""


# ── Comparison of stored versions ─────────────────────────────────────────────


class UploaderSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    full_name: str
    initials: str
    avatar_color: str


class ComparedVersion(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    document_id: uuid.UUID
    version: int
    file_name: str
    content_kind: ContentKind
    uploaded_by_id: uuid.UUID
    created_at: datetime
    uploaded_by: UploaderSummary | None = None


class ComparisonResult(BaseModel):
    original_version: ComparedVersion
    new_version: ComparedVersion
    diff_html: str
    content_v1: str
    content_v2: str
    # Kind of the text actually compared; differs from the stored kind when
    # the caller supplies extracted content (e.g. HTML from a .docx)
    content_kind_v1: ContentKind
    content_kind_v2: ContentKind
    ai_summary: AISummary | None = None


class CompareVersionsRequest(BaseModel):
    """Body for comparing two versions with caller-extracted content."""

    version1: uuid.UUID
    version2: uuid.UUID
    content_v1: str | None = None
    content_v2: str | None = None
    include_summary: bool = True


# ── Ad-hoc redline of two uploaded files ──────────────────────────────────────


class FileData(BaseModel):
    name: str = Field(min_length=1, max_length=500)
    content: str
    type: str = ""


class RedlineRequest(BaseModel):
    original_file: FileData
    new_file: FileData
    include_summary: bool = False


class RedlineResponse(BaseModel):
    diff: str
    content_v1: str
    content_v2: str
    ai_summary: AISummary | None = None
