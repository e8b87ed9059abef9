from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import ConfigDict, field_validator

from content.domain.entities.content import ContentBase


class ContentOut(ContentBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def _status_value(cls, v):
        # ORM rows carry the ContentStatus enum
        return getattr(v, "value", v)
