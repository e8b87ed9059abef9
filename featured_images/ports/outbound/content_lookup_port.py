from typing import Optional, Protocol
from uuid import UUID


class ContentView(Protocol):
    title: str
    description: Optional[str]
    canonical_url: Optional[str]
    native_image_url: Optional[str]


class ContentLookupPort(Protocol):
    """Read-only view of content items consumed by the featured image engine."""

    async def get(self, content_id: UUID) -> Optional[ContentView]: ...

    async def exists(self, content_id: UUID) -> bool: ...
