# app/core/cache.py
from __future__ import annotations

from typing import Any, Optional
import json
import asyncio
import logging

# IMPORTANT: use the asyncio namespace
import redis.asyncio as redis
from redis.exceptions import RedisError

from app.core.config import settings

logger = logging.getLogger(__name__)


class Cache:
    """
    Shared async Redis client, opened/closed by the app lifespan.

    Every call degrades to a miss (or a skipped write) when Redis is not
    configured or not reachable: cached values are advisory only.
    """

    def __init__(self, url: str | None = None) -> None:
        self._url = url or settings.redis_url
        self._redis: Optional[redis.Redis] = None

    @property
    def connected(self) -> bool:
        return self._redis is not None

    async def init(self) -> None:
        # from_url returns an async Redis client object; do NOT await here
        client = redis.from_url(
            self._url,
            encoding="utf-8",
            decode_responses=True,
        )
        try:
            await client.ping()
        except (RedisError, OSError) as e:
            logger.warning("Redis not reachable at %s, running without shared cache: %s", self._url, e)
            return
        self._redis = client

    async def close(self) -> None:
        if self._redis is not None:
            # redis-py v5 has aclose(); v4 uses close()
            close = getattr(self._redis, "aclose", None) or getattr(self._redis, "close", None)
            if asyncio.iscoroutinefunction(close):
                await close()  # type: ignore[arg-type]
            elif callable(close):
                close()        # type: ignore[misc]
            self._redis = None

    async def get(self, key: str) -> Any | None:
        if self._redis is None:
            return None
        try:
            val = await self._redis.get(key)
        except RedisError as e:
            logger.warning("cache get failed for %s: %s", key, e)
            return None
        if val is None:
            return None
        try:
            return json.loads(val)
        except ValueError:
            return val

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        if self._redis is None:
            return False
        payload = json.dumps(value, default=str)
        try:
            if ttl and ttl > 0:
                return bool(await self._redis.set(key, payload, ex=ttl))
            return bool(await self._redis.set(key, payload))
        except RedisError as e:
            logger.warning("cache set failed for %s: %s", key, e)
            return False

    async def delete(self, key: str) -> bool:
        if self._redis is None:
            return False
        try:
            return (await self._redis.delete(key)) > 0
        except RedisError as e:
            logger.warning("cache delete failed for %s: %s", key, e)
            return False


cache = Cache()
