import asyncio

import pytest

from conftest import FLICKR_PAGE, StaticSettings
from featured_images.domain.entities import SizePolicy
from featured_images.domain.errors import (
    ErrorKind,
    MSG_OVERRIDE_EMPTY,
    ResolutionError,
    SizeLookupApiError,
    SizeLookupHttpError,
)
from featured_images.services.provider_resolver import cache_key, effective_ttl


@pytest.mark.asyncio
async def test_should_call_flickr_once_when_resolving_same_photo_twice(resolver, size_lookup, plugin_settings):
    # GIVEN
    cfg = plugin_settings.value

    # WHEN
    first = await resolver.resolve(FLICKR_PAGE, cfg)
    second = await resolver.resolve("https://flickr.com/photos/other-owner/12345", cfg)   # -> same photo id

    # THEN
    assert first.source == "api"
    assert second.source == "cache"
    assert second.chosen_url == first.chosen_url == "https://live.staticflickr.com/A.jpg"
    assert second.provider_id == "12345"
    assert size_lookup.calls == [("12345", "flickr-key")]


@pytest.mark.asyncio
async def test_should_cache_per_policy(resolver, size_lookup):
    # GIVEN
    social = StaticSettings().value
    largest = StaticSettings(size_policy=SizePolicy.largest_available).value

    # WHEN
    a = await resolver.resolve(FLICKR_PAGE, social)
    c = await resolver.resolve(FLICKR_PAGE, largest)

    # THEN
    assert a.chosen_url.endswith("A.jpg")
    assert c.chosen_url.endswith("C.jpg")
    assert len(size_lookup.calls) == 2
    assert cache_key("12345", "optimize_social") != cache_key("12345", "largest_available")


@pytest.mark.asyncio
async def test_should_call_again_when_cache_entry_expires(resolver, size_lookup, plugin_settings, clock):
    # GIVEN
    plugin_settings.value.cache_ttl_seconds = 120
    await resolver.resolve(FLICKR_PAGE, plugin_settings.value)

    # WHEN
    clock.advance(119)
    await resolver.resolve(FLICKR_PAGE, plugin_settings.value)
    clock.advance(1)                                                 # -> now == expires_at
    await resolver.resolve(FLICKR_PAGE, plugin_settings.value)

    # THEN
    assert len(size_lookup.calls) == 2


@pytest.mark.asyncio
async def test_should_fail_with_invalid_identifier_when_url_has_no_photo_id(resolver, plugin_settings, size_lookup):
    # WHEN
    result = await resolver.resolve("https://www.flickr.com/photos/someone/", plugin_settings.value)

    # THEN
    assert isinstance(result, ResolutionError)
    assert result.kind == ErrorKind.invalid_identifier
    assert size_lookup.calls == []


@pytest.mark.asyncio
async def test_should_fail_with_missing_credentials_only_on_cache_miss(resolver, size_lookup, plugin_settings):
    # GIVEN
    await resolver.resolve(FLICKR_PAGE, plugin_settings.value)      # -> warms the cache with a key
    no_key = StaticSettings(api_key=None).value

    # WHEN
    cached = await resolver.resolve(FLICKR_PAGE, no_key)
    missing = await resolver.resolve("https://www.flickr.com/photos/someone/999/", no_key)

    # THEN
    assert cached.source == "cache"
    assert isinstance(missing, ResolutionError)
    assert missing.kind == ErrorKind.missing_credentials
    assert len(size_lookup.calls) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("error, kind", [
    (SizeLookupHttpError("connection reset"), ErrorKind.http_error),
    (SizeLookupHttpError("Unexpected Flickr response code: 503", status_code=503), ErrorKind.http_error),
    (SizeLookupApiError("Photo not found"), ErrorKind.api_error),
])
async def test_should_return_error_value_when_lookup_fails(resolver, size_lookup, plugin_settings, memory_cache, error, kind):
    # GIVEN
    size_lookup.error = error

    # WHEN
    result = await resolver.resolve(FLICKR_PAGE, plugin_settings.value)

    # THEN
    assert isinstance(result, ResolutionError)
    assert result.kind == kind
    assert result.message == error.message
    assert len(memory_cache) == 0                                    # -> failures are not cached


@pytest.mark.asyncio
async def test_should_fail_with_no_suitable_size_when_policy_matches_nothing(resolver, size_lookup, plugin_settings):
    # GIVEN
    size_lookup.sizes = [s.model_copy(update={"media": "video"}) for s in size_lookup.sizes]

    # WHEN
    result = await resolver.resolve(FLICKR_PAGE, plugin_settings.value)

    # THEN
    assert isinstance(result, ResolutionError)
    assert result.kind == ErrorKind.no_suitable_size


@pytest.mark.asyncio
async def test_should_apply_size_override_before_caching(resolver, hooks, plugin_settings, memory_cache):
    # GIVEN
    seen = {}

    def override(url, sizes, context):
        seen.update(context, url=url, n=len(sizes))
        return url.replace("A.jpg", "A_custom.jpg")

    hooks.size_override = override

    # WHEN
    result = await resolver.resolve(FLICKR_PAGE, plugin_settings.value)

    # THEN
    assert result.chosen_url.endswith("A_custom.jpg")
    assert seen == {"photo_id": "12345", "size_policy": "optimize_social", "page_url": FLICKR_PAGE,
                    "url": "https://live.staticflickr.com/A.jpg", "n": 3}
    assert await memory_cache.get(cache_key("12345", "optimize_social")) == result.chosen_url


@pytest.mark.asyncio
async def test_should_fail_when_size_override_empties_selection(resolver, hooks, plugin_settings, memory_cache):
    # GIVEN
    hooks.size_override = lambda url, sizes, context: ""

    # WHEN
    result = await resolver.resolve(FLICKR_PAGE, plugin_settings.value)

    # THEN
    assert result == ResolutionError(ErrorKind.no_suitable_size, MSG_OVERRIDE_EMPTY)
    assert len(memory_cache) == 0


@pytest.mark.asyncio
async def test_should_pass_ttl_through_hook_and_clamp(resolver, hooks, plugin_settings, memory_cache, clock, size_lookup):
    # GIVEN
    hooks.cache_ttl = lambda ttl, photo_id: 5                        # -> below the one-minute floor
    await resolver.resolve(FLICKR_PAGE, plugin_settings.value)

    # WHEN
    clock.advance(59)
    await resolver.resolve(FLICKR_PAGE, plugin_settings.value)
    clock.advance(1)
    await resolver.resolve(FLICKR_PAGE, plugin_settings.value)

    # THEN
    assert len(size_lookup.calls) == 2


def test_should_normalize_ttl():
    assert effective_ttl(0) == 86400
    assert effective_ttl(-5) == 86400
    assert effective_ttl(10) == 60
    assert effective_ttl(3600) == 3600


@pytest.mark.asyncio
async def test_should_tolerate_concurrent_misses_for_same_photo(resolver, size_lookup, plugin_settings):
    # WHEN
    results = await asyncio.gather(*[resolver.resolve(FLICKR_PAGE, plugin_settings.value) for _ in range(3)])

    # THEN
    assert {r.chosen_url for r in results} == {"https://live.staticflickr.com/A.jpg"}
    assert 1 <= len(size_lookup.calls) <= 3
