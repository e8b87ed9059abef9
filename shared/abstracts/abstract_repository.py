from abc import ABC, abstractmethod

from sqlalchemy.ext.asyncio import AsyncSession


class AbstractRepository(ABC):
    """
    Minimal, framework-agnostic repository contract.

    Concrete implementations add the write operations their aggregate needs.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @abstractmethod
    async def get(self, entity_id): ...

    @abstractmethod
    async def delete(self, entity_id) -> bool: ...

    async def commit(self, obj=None):
        await self.db.commit()
        if obj is not None:
            await self.db.refresh(obj)
