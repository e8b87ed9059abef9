from typing import Sequence, Optional
from uuid import UUID

from content.domain.entities.content import ContentCreate, ContentUpdate
from content.domain.repositories import ContentRepository
from shared.entities.content import ContentOut


class ContentService:
    """
    Content items host the featured image state; this service is plain CRUD.
    Deleting an item also drops its featured image row (see ContentRepository.delete).
    """

    def __init__(self, repo: ContentRepository):
        self.repo = repo

    async def create(self, payload: ContentCreate) -> ContentOut:
        obj = await self.repo.insert(payload)
        return ContentOut.model_validate(obj)

    async def update(self, content_id: UUID, payload: ContentUpdate) -> Optional[ContentOut]:
        obj = await self.repo.update(content_id, payload)
        if not obj:
            return None
        return ContentOut.model_validate(obj)

    async def delete(self, content_id: UUID) -> bool:
        return await self.repo.delete(content_id)

    async def get(self, content_id: UUID) -> Optional[ContentOut]:
        obj = await self.repo.get(content_id)
        if not obj:
            return None
        return ContentOut.model_validate(obj)

    async def list(self, status: Optional[str] = None, limit: int = 20, offset: int = 0) -> Sequence[ContentOut]:
        rows = await self.repo.list(status=status, limit=limit, offset=offset)
        return [ContentOut.model_validate(r) for r in rows]
