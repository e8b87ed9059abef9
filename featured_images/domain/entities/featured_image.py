from datetime import datetime
from enum import Enum
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from featured_images.domain.errors import ErrorKind


class SourceMode(str, Enum):
    media = "media"
    external = "external"

class UrlKind(str, Enum):
    invalid = "invalid"
    direct_image = "direct_image"
    provider_page = "provider_page"

class ImageKind(str, Enum):
    direct = "direct"
    provider = "provider"

class ResolutionStatus(str, Enum):
    no_external_image = "no_external_image"
    pending_resolution = "pending_resolution"
    resolved = "resolved"
    failed = "failed"


class ExternalImageRequest(BaseModel):
    source_mode: SourceMode = SourceMode.media
    raw_url: Optional[str] = None

    @property
    def wants_external(self) -> bool:
        return self.source_mode == SourceMode.external and bool(self.raw_url)


class ResolvedImage(BaseModel):
    chosen_url: str
    original_url: str               # input URL that produced chosen_url
    kind: ImageKind
    provider_id: Optional[str] = None
    resolved_at: datetime


class EntityResolutionState(BaseModel):
    """Per content item resolution state; `resolved` may be stale when `last_error` is set."""

    request: ExternalImageRequest = Field(default_factory=ExternalImageRequest)
    resolved: Optional[ResolvedImage] = None
    last_error: Optional[str] = None
    last_error_kind: Optional[ErrorKind] = None

    @property
    def status(self) -> ResolutionStatus:
        if not self.request.wants_external:
            return ResolutionStatus.no_external_image
        if self.resolved is not None:
            return ResolutionStatus.resolved
        if self.last_error:
            return ResolutionStatus.failed
        return ResolutionStatus.pending_resolution

    def is_current_for(self, raw_url: str) -> bool:
        return (
            self.resolved is not None
            and self.resolved.original_url == raw_url
            and not self.last_error
        )


class SizeDescriptor(BaseModel):
    """One entry of the provider's size list."""

    model_config = ConfigDict(extra="ignore")

    label: Optional[str] = None
    width: int = 0
    height: int = 0
    media: Optional[str] = None
    source: Optional[str] = None

    @field_validator("width", "height", mode="before")
    @classmethod
    def _coerce_dimension(cls, value):
        # Flickr sends dimensions as ints or numeric strings
        try:
            return int(value)
        except (TypeError, ValueError):
            return 0

    @field_validator("label", "media", "source", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        if value is None or value == "":
            return None
        return str(value)


class ProviderResolution(BaseModel):
    chosen_url: str
    provider_id: str
    source: Literal["cache", "api"]


class DisplayImage(BaseModel):
    url: str
    kind: ImageKind
    original_url: Optional[str] = None
    provider_id: Optional[str] = None


class PreviewResult(BaseModel):
    url: str
    kind: ImageKind
    provider_id: Optional[str] = None


class SocialMeta(BaseModel):
    og_image: str
    twitter_card: str = "summary_large_image"
    twitter_image: str
    title: str
    description: Optional[str] = None
    url: Optional[str] = None

    def meta_tags(self) -> list[dict[str, str]]:
        return [
            {"property": "og:image", "content": self.og_image},
            {"name": "twitter:card", "content": self.twitter_card},
            {"name": "twitter:image", "content": self.twitter_image},
        ]


# ---------- API payloads ----------

class FeaturedImageIn(BaseModel):
    source_mode: SourceMode = SourceMode.media
    raw_url: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "source_mode": "external",
                "raw_url": "https://www.flickr.com/photos/someone/12345/",
            }
        }
    }


class FeaturedImageStateOut(BaseModel):
    content_id: UUID
    status: ResolutionStatus
    source_mode: SourceMode
    raw_url: Optional[str] = None
    resolved: Optional[ResolvedImage] = None
    last_error: Optional[str] = None
    last_error_kind: Optional[ErrorKind] = None
    validation_message: Optional[str] = None

    @classmethod
    def from_state(cls, content_id: UUID, state: EntityResolutionState, validation_message: Optional[str] = None):
        return cls(
            content_id=content_id,
            status=state.status,
            source_mode=state.request.source_mode,
            raw_url=state.request.raw_url,
            resolved=state.resolved,
            last_error=state.last_error,
            last_error_kind=state.last_error_kind,
            validation_message=validation_message,
        )


class PreviewIn(BaseModel):
    url: str
    content_id: Optional[UUID] = None
    session: Optional[str] = None
