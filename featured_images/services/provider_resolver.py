import asyncio
import hashlib
import logging
from typing import Optional, Union

from featured_images.domain.entities import PluginSettings, ProviderResolution
from featured_images.domain.entities.settings import DAY_IN_SECONDS, MINUTE_IN_SECONDS
from featured_images.domain.errors import (
    ErrorKind,
    MSG_INVALID_IDENTIFIER,
    MSG_MISSING_API_KEY,
    MSG_NO_SUITABLE_SIZE,
    MSG_OVERRIDE_EMPTY,
    ResolutionError,
    SizeLookupError,
)
from featured_images.ports.outbound.resolution_cache_port import ResolutionCachePort
from featured_images.ports.outbound.size_lookup_port import SizeLookupPort
from featured_images.services.hooks import ResolutionHooks
from featured_images.services.size_policy import select_size
from featured_images.services.url_classifier import extract_photo_id

logger = logging.getLogger(__name__)

CACHE_PREFIX = "featured:flickr:"


def cache_key(photo_id: str, policy: str) -> str:
    digest = hashlib.md5(f"{photo_id}|{policy}".encode("utf-8")).hexdigest()
    return f"{CACHE_PREFIX}{digest}"


def effective_ttl(ttl: int) -> int:
    if ttl <= 0:
        ttl = DAY_IN_SECONDS
    return max(MINUTE_IN_SECONDS, ttl)


class FlickrResolver:
    """
    Flickr photo page URL -> one image URL, through the resolution cache.

    Failures are returned as ResolutionError values; nothing raises out of resolve().
    """

    def __init__(
        self,
        cache: ResolutionCachePort,
        sizes_client: SizeLookupPort,
        hooks: Optional[ResolutionHooks] = None,
    ):
        self.cache = cache
        self.sizes_client = sizes_client
        self.hooks = hooks or ResolutionHooks()

    async def resolve(self, page_url: str, cfg: PluginSettings) -> Union[ProviderResolution, ResolutionError]:
        photo_id = extract_photo_id(page_url)
        if not photo_id:
            return ResolutionError(ErrorKind.invalid_identifier, MSG_INVALID_IDENTIFIER)

        policy = cfg.size_policy.value
        ttl = effective_ttl(int(self.hooks.cache_ttl(cfg.cache_ttl_seconds, photo_id)))
        key = cache_key(photo_id, policy)

        cached = await self.cache.get(key)
        if cached:
            logger.debug("flickr %s (%s) served from cache", photo_id, policy)
            return ProviderResolution(chosen_url=cached, provider_id=photo_id, source="cache")

        if not cfg.api_key:
            return ResolutionError(ErrorKind.missing_credentials, MSG_MISSING_API_KEY)

        try:
            # requests is blocking; keep it off the event loop
            sizes = await asyncio.to_thread(self.sizes_client.fetch_sizes, photo_id, cfg.api_key)
        except SizeLookupError as e:
            logger.warning("flickr getSizes failed for %s: [%s] %s", photo_id, e.kind.value, e.message)
            return e.to_error()

        chosen = select_size(sizes, cfg.size_policy)
        if not chosen:
            return ResolutionError(ErrorKind.no_suitable_size, MSG_NO_SUITABLE_SIZE)

        context = {"photo_id": photo_id, "size_policy": policy, "page_url": page_url}
        chosen = self.hooks.size_override(chosen, sizes, context)
        if not chosen:
            return ResolutionError(ErrorKind.no_suitable_size, MSG_OVERRIDE_EMPTY)

        await self.cache.set(key, chosen, ttl)
        logger.info("flickr %s resolved to %s (policy=%s, ttl=%ss)", photo_id, chosen, policy, ttl)
        return ProviderResolution(chosen_url=chosen, provider_id=photo_id, source="api")
