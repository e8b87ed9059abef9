from typing import Optional, Protocol


class ResolutionCachePort(Protocol):
    """(provider id, size policy) -> chosen URL, expiring by TTL. Advisory only."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...
