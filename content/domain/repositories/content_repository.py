from typing import Sequence, Optional
from uuid import UUID

from sqlalchemy import select, delete

from content.domain.models.content import Content, ContentStatus
from content.domain.entities import ContentCreate, ContentUpdate
from featured_images.domain.models.featured_image import ContentFeaturedImage
from shared.abstracts.abstract_repository import AbstractRepository

_URL_FIELDS = ("canonical_url", "native_image_url")


class ContentRepository(AbstractRepository):

    async def insert(self, payload: ContentCreate) -> Content:
        obj = Content(
            title=payload.title,
            description=payload.description,
            canonical_url=str(payload.canonical_url) if payload.canonical_url else None,
            native_image_url=str(payload.native_image_url) if payload.native_image_url else None,
            status=ContentStatus(payload.status),
        )
        self.db.add(obj)
        await self.commit(obj)
        return obj

    async def get(self, content_id: UUID) -> Optional[Content]:
        res = await self.db.execute(select(Content).where(Content.id == content_id))
        return res.scalars().first()

    async def exists(self, content_id: UUID) -> bool:
        res = await self.db.execute(select(Content.id).where(Content.id == content_id))
        return res.first() is not None

    async def update(self, content_id: UUID, payload: ContentUpdate) -> Optional[Content]:
        obj = await self.get(content_id)
        if not obj:
            return None
        data = payload.model_dump(exclude_unset=True)

        for field, value in data.items():
            if field == "status":
                if value is not None:
                    obj.status = ContentStatus(value)
            elif field in _URL_FIELDS:
                setattr(obj, field, str(value) if value else None)
            elif field == "title":
                if value is not None:
                    obj.title = value
            else:
                setattr(obj, field, value)

        await self.commit(obj)
        return obj

    async def delete(self, content_id: UUID) -> bool:
        # remove the featured image row first to avoid FK errors if cascade isn't present
        await self.db.execute(
            delete(ContentFeaturedImage).where(ContentFeaturedImage.content_id == content_id)
        )
        res = await self.db.execute(delete(Content).where(Content.id == content_id))
        await self.db.commit()
        # rowcount can be None on some DBs; coerce safely
        return bool(getattr(res, "rowcount", 0))

    async def list(self, *, status: str | None = None, limit: int = 50, offset: int = 0) -> Sequence[Content]:
        stmt = select(Content)
        if status:
            stmt = stmt.where(Content.status == ContentStatus(status))
        stmt = stmt.order_by(Content.created_at.desc()).limit(limit).offset(offset)
        res = await self.db.execute(stmt)
        return res.scalars().all()
