from __future__ import annotations
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base

SETTINGS_ROW_ID = 1


class FeaturedImageSettings(Base):
    """Single-row settings table; the Flickr API key is stored encrypted."""

    __tablename__ = "featured_image_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SETTINGS_ROW_ID)
    api_key_secret: Mapped[str | None] = mapped_column(Text, nullable=True)
    size_policy: Mapped[str] = mapped_column(String(32), nullable=False, default="optimize_social")
    cache_ttl_value: Mapped[int] = mapped_column(Integer, nullable=False, default=24)
    cache_ttl_unit: Mapped[str] = mapped_column(String(16), nullable=False, default="hours")
    cache_ttl_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=86400)

    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
