from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence

from featured_images.domain.entities import SizeDescriptor

SizeOverride = Callable[[str, Sequence[SizeDescriptor], Dict[str, Any]], Optional[str]]
CacheTtl = Callable[[int, str], int]
ThumbnailAttrs = Callable[[Dict[str, Any], Dict[str, Any]], Dict[str, Any]]
OgEnabled = Callable[[Dict[str, Any]], bool]
ShouldOverrideThumbnail = Callable[[Dict[str, Any]], bool]


def _keep_url(url, sizes, context):
    return url


def _keep_ttl(ttl, photo_id):
    return ttl


def _keep_attrs(attrs, context):
    return attrs


def _always(context):
    return True


@dataclass
class ResolutionHooks:
    """
    Extension points around resolution and rendering. Every default is a pass-through.

    size_override(url, sizes, context) -> url or None
        runs after the size policy; an empty result fails with no_suitable_size.
        context: {"photo_id", "size_policy", "page_url"}
    cache_ttl(ttl_seconds, photo_id) -> ttl_seconds
    thumbnail_attrs(attrs, context) -> attrs
    og_enabled(context) -> bool
    should_override_thumbnail(context) -> bool
    """

    size_override: SizeOverride = _keep_url
    cache_ttl: CacheTtl = _keep_ttl
    thumbnail_attrs: ThumbnailAttrs = _keep_attrs
    og_enabled: OgEnabled = _always
    should_override_thumbnail: ShouldOverrideThumbnail = _always
