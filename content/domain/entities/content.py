from pydantic import BaseModel, HttpUrl, constr
from typing import Literal, Optional

ContentStatus = Literal["draft", "published"]

class ContentBase(BaseModel):
    title: constr(min_length=1, max_length=255)
    description: str | None = None
    canonical_url: HttpUrl | None = None
    native_image_url: HttpUrl | None = None
    status: ContentStatus = "draft"

class ContentCreate(ContentBase):
    pass

class ContentUpdate(BaseModel):
    title: Optional[constr(min_length=1, max_length=255)] = None
    description: str | None = None
    canonical_url: HttpUrl | None = None
    native_image_url: HttpUrl | None = None
    status: Optional[ContentStatus] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Harbour at dusk (revisited)",
                "description": "The old harbour, one year later.",
                "canonical_url": "https://example.org/posts/harbour-at-dusk",
            }
        }
    }
