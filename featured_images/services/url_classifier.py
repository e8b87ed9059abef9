import re
from typing import Iterable, Optional
from urllib.parse import urlsplit

from featured_images.domain.entities import SourceMode, UrlKind
from featured_images.domain.errors import MSG_API_KEY_REQUIRED, MSG_INVALID_URL

DEFAULT_IMAGE_EXTENSIONS = ("jpg", "jpeg", "png")

FLICKR_PHOTO_RE = re.compile(
    r"^https://(?:www\.)?flickr\.com/photos/[^/?#]+/(\d+)(?:[/?#]|$)",
    re.IGNORECASE,
)


def _split_https(url) -> Optional[tuple]:
    if not isinstance(url, str):
        return None
    url = url.strip()
    if not url:
        return None
    try:
        parts = urlsplit(url)
        # .port validates the netloc; bad IPv6 literals raise here too
        parts.port
    except ValueError:
        return None
    if parts.scheme.lower() != "https" or not parts.netloc:
        return None
    return parts


def is_https(url) -> bool:
    return _split_https(url) is not None


def _has_image_extension(path: str, extensions: Iterable[str]) -> bool:
    exts = "|".join(re.escape(e.lower().lstrip(".")) for e in extensions)
    if not exts:
        return False
    # some CMSes glue "&w=..." onto the path instead of a query string
    return re.search(rf"\.(?:{exts})(?:&.*)?$", path, re.IGNORECASE) is not None


def extract_photo_id(url) -> Optional[str]:
    if not isinstance(url, str):
        return None
    m = FLICKR_PHOTO_RE.match(url.strip())
    return m.group(1) if m else None


def classify(url, image_extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS) -> UrlKind:
    """Classify an external image URL. Pure and total: never raises."""
    parts = _split_https(url)
    if parts is None:
        return UrlKind.invalid
    if _has_image_extension(parts.path, image_extensions):
        return UrlKind.direct_image
    if extract_photo_id(url) is not None:
        return UrlKind.provider_page
    return UrlKind.invalid


def validation_message(
    source_mode: SourceMode,
    raw_url: Optional[str],
    has_api_key: bool,
    image_extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS,
) -> Optional[str]:
    """Message shown next to the URL field in the editor, or None when all is well."""
    if source_mode != SourceMode.external or not raw_url or not raw_url.strip():
        return None
    kind = classify(raw_url, image_extensions)
    if kind == UrlKind.invalid:
        return MSG_INVALID_URL
    if kind == UrlKind.provider_page and not has_api_key:
        return MSG_API_KEY_REQUIRED
    return None
