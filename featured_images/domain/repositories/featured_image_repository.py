from typing import Optional
from uuid import UUID

from sqlalchemy import select, delete

from featured_images.domain.entities import (
    EntityResolutionState,
    ExternalImageRequest,
    ResolvedImage,
)
from featured_images.domain.errors import ErrorKind
from featured_images.domain.models.featured_image import ContentFeaturedImage
from shared.abstracts.abstract_repository import AbstractRepository


class FeaturedImageStateRepository(AbstractRepository):
    """EntityResolutionState persistence, one row per content item."""

    async def _row(self, content_id: UUID) -> Optional[ContentFeaturedImage]:
        res = await self.db.execute(
            select(ContentFeaturedImage).where(ContentFeaturedImage.content_id == content_id)
        )
        return res.scalars().first()

    async def get(self, content_id: UUID) -> Optional[EntityResolutionState]:
        row = await self._row(content_id)
        if row is None:
            return None
        return _to_state(row)

    async def put(self, content_id: UUID, state: EntityResolutionState) -> None:
        row = await self._row(content_id)
        if row is None:
            row = ContentFeaturedImage(content_id=content_id)
            self.db.add(row)

        row.source_mode = state.request.source_mode
        row.raw_url = state.request.raw_url

        resolved = state.resolved
        row.chosen_url = resolved.chosen_url if resolved else None
        row.original_url = resolved.original_url if resolved else None
        row.kind = resolved.kind if resolved else None
        row.provider_id = resolved.provider_id if resolved else None
        row.resolved_at = resolved.resolved_at if resolved else None

        row.last_error = state.last_error
        row.last_error_kind = state.last_error_kind.value if state.last_error_kind else None

        await self.db.commit()

    async def delete(self, content_id: UUID) -> bool:
        res = await self.db.execute(
            delete(ContentFeaturedImage).where(ContentFeaturedImage.content_id == content_id)
        )
        await self.db.commit()
        return bool(getattr(res, "rowcount", 0))


def _to_state(row: ContentFeaturedImage) -> EntityResolutionState:
    resolved = None
    if row.chosen_url and row.kind is not None:
        resolved = ResolvedImage(
            chosen_url=row.chosen_url,
            original_url=row.original_url or row.chosen_url,
            kind=row.kind,
            provider_id=row.provider_id,
            resolved_at=row.resolved_at or row.updated_at,
        )
    return EntityResolutionState(
        request=ExternalImageRequest(source_mode=row.source_mode, raw_url=row.raw_url),
        resolved=resolved,
        last_error=row.last_error,
        last_error_kind=ErrorKind(row.last_error_kind) if row.last_error_kind else None,
    )
