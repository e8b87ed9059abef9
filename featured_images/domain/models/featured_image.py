from __future__ import annotations
from datetime import datetime
from uuid import uuid4, UUID

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, String, Text, func, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base
from content.domain.models.content import Content
from featured_images.domain.entities.featured_image import ImageKind, SourceMode


class ContentFeaturedImage(Base):
    """Featured image request and resolution state of one content item."""

    __tablename__ = "content_featured_images"
    __table_args__ = (
        UniqueConstraint("content_id", name="uq_content_featured_images_content"),
    )

    id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), primary_key=True, default=uuid4)
    content_id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), ForeignKey("contents.id", ondelete="CASCADE"), nullable=False)

    # request, written by the editing surface
    source_mode: Mapped[SourceMode] = mapped_column(
        SAEnum(SourceMode, name="featured_image_source"),
        nullable=False,
        default=SourceMode.media,
    )
    raw_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # resolution
    chosen_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    original_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    kind: Mapped[ImageKind | None] = mapped_column(SAEnum(ImageKind, name="featured_image_kind"), nullable=True)
    provider_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_error_kind: Mapped[str | None] = mapped_column(String(32), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    content: Mapped[Content] = relationship(back_populates="featured_image")
