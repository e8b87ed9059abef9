from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import cache
from app.core.config import settings
from app.core.database.db import get_session
from content.domain.repositories import ContentRepository
from content.services.content_service import ContentService

# Featured image ports + adapters
from featured_images.ports.outbound.resolution_cache_port import ResolutionCachePort
from featured_images.ports.outbound.size_lookup_port import SizeLookupPort
from featured_images.adapters.outbound.cache_memory import InMemoryResolutionCache
from featured_images.adapters.outbound.cache_redis import RedisResolutionCache
from featured_images.adapters.outbound.flickr_sizes_client import FlickrSizesClient

# Featured image services
from featured_images.domain.repositories import FeaturedImageStateRepository, SettingsRepository
from featured_images.services.featured_image_service import FeaturedImageService
from featured_images.services.hooks import ResolutionHooks
from featured_images.services.preview_coordinator import PreviewCoordinator, preview_coordinator
from featured_images.services.provider_resolver import FlickrResolver
from featured_images.services.rendering import FeaturedImageRenderer
from featured_images.services.secret_store import SecretStore
from featured_images.services.settings_service import SettingsService

_memory_cache = InMemoryResolutionCache()
_hooks = ResolutionHooks()


def get_resolution_cache() -> ResolutionCachePort:
    # fall back to the process-local cache when Redis is off or unreachable
    if settings.cache_backend == "memory" or not cache.connected:
        return _memory_cache
    return RedisResolutionCache(cache)

def get_size_lookup() -> SizeLookupPort:
    return FlickrSizesClient()

@lru_cache
def get_secret_store() -> SecretStore:
    """Built once; raises SecretStoreConfigError on a missing ENCRYPTION_SECRET."""
    return SecretStore.from_settings(settings)

def get_hooks() -> ResolutionHooks:
    return _hooks

def get_preview_coordinator() -> PreviewCoordinator:
    return preview_coordinator


def get_content_service(db: AsyncSession = Depends(get_session)) -> ContentService:
    return ContentService(ContentRepository(db))


def get_settings_service(
    db: AsyncSession = Depends(get_session),
    secret_store: SecretStore = Depends(get_secret_store),
) -> SettingsService:
    return SettingsService(SettingsRepository(db), secret_store)


def get_featured_image_service(
    db: AsyncSession = Depends(get_session),
    resolution_cache: ResolutionCachePort = Depends(get_resolution_cache),
    size_lookup: SizeLookupPort = Depends(get_size_lookup),
    settings_service: SettingsService = Depends(get_settings_service),
    hooks: ResolutionHooks = Depends(get_hooks),
) -> FeaturedImageService:
    """
    All repositories share ONE DB session for the request.
    """
    return FeaturedImageService(
        state_repo=FeaturedImageStateRepository(db),
        content_repo=ContentRepository(db),
        resolver=FlickrResolver(resolution_cache, size_lookup, hooks),
        settings_service=settings_service,
        hooks=hooks,
        image_extensions=settings.featured_image_extensions,
    )


def get_renderer(
    db: AsyncSession = Depends(get_session),
    service: FeaturedImageService = Depends(get_featured_image_service),
) -> FeaturedImageRenderer:
    return FeaturedImageRenderer(service, ContentRepository(db), service.hooks)
