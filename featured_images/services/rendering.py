from typing import Any, Dict, Optional
from uuid import UUID

from featured_images.domain.entities import SocialMeta
from featured_images.domain.errors import ContentNotFoundError
from featured_images.ports.outbound.content_lookup_port import ContentLookupPort
from featured_images.services.featured_image_service import FeaturedImageService
from featured_images.services.hooks import ResolutionHooks


THUMBNAIL_CLASS = "featured-image external-featured-image"


class FeaturedImageRenderer:
    """Thumbnail attributes and social tags for content items with an external image.

    A native (uploaded) image always wins: both helpers return None when one is set.
    """

    def __init__(
        self,
        service: FeaturedImageService,
        content_repo: ContentLookupPort,
        hooks: Optional[ResolutionHooks] = None,
    ):
        self.service = service
        self.content_repo = content_repo
        self.hooks = hooks or service.hooks

    async def _content(self, content_id: UUID):
        content = await self.content_repo.get(content_id)
        if content is None:
            raise ContentNotFoundError(content_id)
        return content

    async def thumbnail_attributes(self, content_id: UUID, size: str = "post-thumbnail") -> Optional[Dict[str, str]]:
        content = await self._content(content_id)
        if content.native_image_url:
            return None

        context = {"content_id": content_id, "size": size}
        if not self.hooks.should_override_thumbnail(context):
            return None

        image = await self.service.get_display_image(content_id)
        if image is None:
            return None

        attrs: Dict[str, Any] = {
            "src": image.url,
            "class": THUMBNAIL_CLASS,
            "alt": content.title or "",
            "loading": "lazy",
            "decoding": "async",
        }
        attrs = self.hooks.thumbnail_attrs(attrs, {**context, "image": image})
        return _clean_attrs(attrs)

    async def social_meta(self, content_id: UUID) -> Optional[SocialMeta]:
        content = await self._content(content_id)
        if content.native_image_url:
            return None
        if not self.hooks.og_enabled({"content_id": content_id}):
            return None

        image = await self.service.get_display_image(content_id)
        if image is None:
            return None
        return SocialMeta(
            og_image=image.url,
            twitter_image=image.url,
            title=content.title,
            description=content.description,
            url=content.canonical_url,
        )


def _clean_attrs(attrs: Dict[str, Any]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for name, value in (attrs or {}).items():
        if isinstance(value, (list, tuple)):
            value = " ".join(str(v) for v in value if v)
        if value is None or (value == "" and name != "alt"):
            continue
        out[name] = str(value)
    return out
