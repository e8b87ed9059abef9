import pytest

from conftest import FLICKR_PAGE
from featured_images.domain.entities import SourceMode
from featured_images.services.rendering import THUMBNAIL_CLASS, FeaturedImageRenderer

A_URL = "https://live.staticflickr.com/A.jpg"


@pytest.fixture
def renderer(featured_service, content_repo, hooks) -> FeaturedImageRenderer:
    return FeaturedImageRenderer(featured_service, content_repo, hooks)


@pytest.mark.asyncio
async def test_should_build_lazy_img_attributes_for_external_image(renderer, featured_service, content_repo):
    # GIVEN
    cid = content_repo.add(title="Harbour at dusk")
    await featured_service.save(cid, SourceMode.external, FLICKR_PAGE)

    # WHEN
    attrs = await renderer.thumbnail_attributes(cid)

    # THEN
    assert attrs == {
        "src": A_URL,
        "class": THUMBNAIL_CLASS,
        "alt": "Harbour at dusk",
        "loading": "lazy",
        "decoding": "async",
    }


@pytest.mark.asyncio
async def test_should_let_hook_adjust_thumbnail_attributes(renderer, featured_service, content_repo, hooks):
    # GIVEN
    cid = content_repo.add(title="")
    await featured_service.save(cid, SourceMode.external, FLICKR_PAGE)
    hooks.thumbnail_attrs = lambda attrs, ctx: {**attrs, "class": ["hero", "wide"], "loading": None, "data-size": ctx["size"]}

    # WHEN
    attrs = await renderer.thumbnail_attributes(cid, size="large")

    # THEN
    assert attrs["class"] == "hero wide"
    assert "loading" not in attrs
    assert attrs["alt"] == ""                                         # -> empty alt is kept
    assert attrs["data-size"] == "large"


@pytest.mark.asyncio
async def test_should_skip_thumbnail_when_native_image_exists(renderer, featured_service, content_repo, size_lookup):
    # GIVEN
    cid = content_repo.add(native_image_url="https://example.org/uploads/native.jpg")
    await featured_service.set_external_image_request(cid, SourceMode.external, FLICKR_PAGE)

    # WHEN / THEN
    assert await renderer.thumbnail_attributes(cid) is None
    assert await renderer.social_meta(cid) is None
    assert size_lookup.calls == []                                    # -> no lazy resolve either


@pytest.mark.asyncio
async def test_should_skip_thumbnail_when_override_hook_declines(renderer, featured_service, content_repo, hooks):
    # GIVEN
    cid = content_repo.add()
    await featured_service.save(cid, SourceMode.external, FLICKR_PAGE)
    hooks.should_override_thumbnail = lambda ctx: False

    # WHEN / THEN
    assert await renderer.thumbnail_attributes(cid) is None


@pytest.mark.asyncio
async def test_should_build_social_meta_from_display_image_and_content(renderer, featured_service, content_repo):
    # GIVEN
    cid = content_repo.add(title="Harbour at dusk", description="Evening walk.", canonical_url="https://example.org/p/1")
    await featured_service.save(cid, SourceMode.external, FLICKR_PAGE)

    # WHEN
    meta = await renderer.social_meta(cid)

    # THEN
    assert meta.og_image == meta.twitter_image == A_URL
    assert meta.twitter_card == "summary_large_image"
    assert (meta.title, meta.description, meta.url) == ("Harbour at dusk", "Evening walk.", "https://example.org/p/1")
    assert meta.meta_tags() == [
        {"property": "og:image", "content": A_URL},
        {"name": "twitter:card", "content": "summary_large_image"},
        {"name": "twitter:image", "content": A_URL},
    ]


@pytest.mark.asyncio
async def test_should_skip_social_meta_when_disabled_or_nothing_to_show(renderer, featured_service, content_repo, hooks):
    # GIVEN
    empty = content_repo.add()
    cid = content_repo.add()
    await featured_service.save(cid, SourceMode.external, FLICKR_PAGE)

    # WHEN / THEN
    assert await renderer.social_meta(empty) is None
    hooks.og_enabled = lambda ctx: False
    assert await renderer.social_meta(cid) is None
