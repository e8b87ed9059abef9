from __future__ import annotations
from datetime import datetime
from enum import Enum
from uuid import uuid4, UUID

from sqlalchemy import DateTime, Enum as SAEnum, String, Text, func
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base


class ContentStatus(str, Enum):
    draft = "draft"
    published = "published"

class Content(Base):
    __tablename__ = "contents"

    id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    canonical_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # uploaded ("media library") image; wins over any external featured image
    native_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[ContentStatus] = mapped_column(SAEnum(ContentStatus, name="content_status"), default=ContentStatus.draft, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # one-to-one to the external featured image state
    featured_image = relationship(
        "ContentFeaturedImage",
        back_populates="content",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
