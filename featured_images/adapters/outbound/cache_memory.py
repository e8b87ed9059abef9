import time
from typing import Callable, Dict, Optional, Tuple

from featured_images.ports.outbound.resolution_cache_port import ResolutionCachePort


class InMemoryResolutionCache(ResolutionCachePort):
    """Process-local TTL map.

    Entries are evicted lazily on read once ``now >= expires_at``; there is no
    background sweep. A restart loses everything, which only costs extra
    provider calls.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = (value, self._clock() + ttl_seconds)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
