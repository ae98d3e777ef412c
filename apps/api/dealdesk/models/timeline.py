"""Deal timeline: append-only activity feed."""

import uuid

from sqlalchemy import Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from dealdesk.models.base import TimestampedModel
from dealdesk.models.enums import TimelineEventType


class TimelineEvent(TimestampedModel):
    __tablename__ = "timeline_events"
    __table_args__ = (
        Index("ix_timeline_events_deal_id", "deal_id"),
    )

    deal_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    event_type: Mapped[TimelineEventType] = mapped_column(nullable=False)
    reference_id: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    reference_type: Mapped[str | None] = mapped_column(String(50))
