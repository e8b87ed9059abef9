from typing import Optional, Protocol
from uuid import UUID

from featured_images.domain.entities import EntityResolutionState


class EntityResolutionStateRepository(Protocol):
    async def get(self, content_id: UUID) -> Optional[EntityResolutionState]: ...

    async def put(self, content_id: UUID, state: EntityResolutionState) -> None: ...
