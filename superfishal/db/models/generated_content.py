"""Generated content model."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from superfishal.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GeneratedContent(Base):
    """Marketing copy produced by a language model and kept for reuse."""

    __tablename__ = "generated_content"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    key_points: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    youtube_script_idea: Mapped[str] = mapped_column(Text, nullable=False)
    full_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    youtube_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    related_resource_ids: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)

    def __repr__(self) -> str:  # pragma: no cover
        return f"GeneratedContent(id={self.id!r}, title={self.title!r})"
