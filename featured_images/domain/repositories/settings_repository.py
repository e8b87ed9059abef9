from typing import Any, Optional

from sqlalchemy import select

from featured_images.domain.models.settings import FeaturedImageSettings, SETTINGS_ROW_ID
from shared.abstracts.abstract_repository import AbstractRepository

_FIELDS = ("api_key_secret", "size_policy", "cache_ttl_value", "cache_ttl_unit", "cache_ttl_seconds")


class SettingsRepository(AbstractRepository):

    async def get(self, entity_id: int = SETTINGS_ROW_ID) -> Optional[FeaturedImageSettings]:
        res = await self.db.execute(
            select(FeaturedImageSettings).where(FeaturedImageSettings.id == entity_id)
        )
        return res.scalars().first()

    async def save(self, **values: Any) -> FeaturedImageSettings:
        obj = await self.get()
        if obj is None:
            obj = FeaturedImageSettings(id=SETTINGS_ROW_ID)
            self.db.add(obj)
        for field in _FIELDS:
            if field in values:
                setattr(obj, field, values[field])
        await self.commit(obj)
        return obj

    async def delete(self, entity_id: int = SETTINGS_ROW_ID) -> bool:
        obj = await self.get(entity_id)
        if obj is None:
            return False
        await self.db.delete(obj)
        await self.db.commit()
        return True
