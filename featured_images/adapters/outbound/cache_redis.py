from __future__ import annotations
from typing import Optional

from featured_images.ports.outbound.resolution_cache_port import ResolutionCachePort
from app.core.cache import Cache, cache  # <- shared client managed in app lifespan


class RedisResolutionCache(ResolutionCachePort):
    """
    Thin adapter over the shared async cache client in app.core.cache.
    Redis applies the TTL itself (SET ... EX), so expired keys simply read as absent.
    """

    def __init__(self, client: Cache | None = None) -> None:
        self._cache = client or cache

    async def get(self, key: str) -> Optional[str]:
        value = await self._cache.get(key)
        if isinstance(value, str) and value:
            return value
        return None

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._cache.set(key, value, ttl_seconds)
