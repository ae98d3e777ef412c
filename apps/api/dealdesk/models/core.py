"""Core models: User."""

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from dealdesk.models.base import BaseModel


class User(BaseModel):
    """Team member or counsel who uploads document versions."""

    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_email", "email", unique=True),
    )

    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    initials: Mapped[str] = mapped_column(String(8), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    role: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar_color: Mapped[str] = mapped_column(String(20), nullable=False, default="#0F766E")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r})>"
