"""SQLAlchemy models package: import all models so Base.metadata is populated."""

from dealdesk.models.base import BaseModel, ModelMixin, TimestampedModel
from dealdesk.models.core import User
from dealdesk.models.documents import Document, DocumentVersion
from dealdesk.models.enums import ContentKind, DocumentStatus, TimelineEventType
from dealdesk.models.timeline import TimelineEvent

__all__ = [
    "BaseModel",
    "ContentKind",
    "Document",
    "DocumentStatus",
    "DocumentVersion",
    "ModelMixin",
    "TimelineEvent",
    "TimelineEventType",
    "TimestampedModel",
    "User",
]
