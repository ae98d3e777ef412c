"""Shared enumerations for models and schemas."""

import enum


class ContentKind(str, enum.Enum):
    """How stored version content must be treated when rendered."""

    HTML = "html"
    PLAIN_TEXT = "plain_text"


class DocumentStatus(str, enum.Enum):
    DRAFT = "draft"
    IN_REVIEW = "in_review"
    FINAL = "final"
    EXECUTED = "executed"


class TimelineEventType(str, enum.Enum):
    DOCUMENT = "document"
    TASK = "task"
    ISSUE = "issue"
    DEAL = "deal"
