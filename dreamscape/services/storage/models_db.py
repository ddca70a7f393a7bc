"""
SQLAlchemy ORM models for the dream archive.

Tables: ``dreams``.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from dreamscape.services.storage.database import Base


class Dream(Base):
    """One archived dream: transcript, structure, and generated video."""

    __tablename__ = "dreams"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    user_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    ai_title: Mapped[str] = mapped_column(String(255), default="")
    ai_description: Mapped[str] = mapped_column(Text, default="")
    transcript_raw: Mapped[str] = mapped_column(Text, default="")
    transcript_json: Mapped[dict] = mapped_column(JSON, default=dict)
    video_url: Mapped[str] = mapped_column(Text, default="")
    video_thumbnail: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), index=True
    )
    emojis: Mapped[list] = mapped_column(JSON, default=list)

    def __repr__(self) -> str:
        return f"<Dream id={self.id!r} ai_title={self.ai_title!r}>"
