import logging
from typing import Any, List, Optional

import requests

from app.core.config import settings
from featured_images.domain.entities import SizeDescriptor
from featured_images.domain.errors import (
    MSG_UNEXPECTED_RESPONSE,
    SizeLookupApiError,
    SizeLookupHttpError,
)
from featured_images.ports.outbound.size_lookup_port import SizeLookupPort

logger = logging.getLogger(__name__)


class FlickrSizesClient(SizeLookupPort):
    """flickr.photos.getSizes over the REST endpoint. One GET, no retries."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url or settings.flickr_api_url
        self.timeout = timeout if timeout is not None else settings.flickr_timeout_seconds
        self._http = session or requests

    def fetch_sizes(self, photo_id: str, api_key: str) -> List[SizeDescriptor]:
        params = {
            "method": "flickr.photos.getSizes",
            "api_key": api_key,
            "photo_id": photo_id,
            "format": "json",
            "nojsoncallback": "1",
        }
        try:
            r = self._http.get(self.api_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Flickr getSizes transport failure for photo %s: %s", photo_id, e)
            raise SizeLookupHttpError(str(e) or e.__class__.__name__) from e

        if r.status_code != 200:
            raise SizeLookupHttpError(
                f"Unexpected Flickr response code: {r.status_code}",
                status_code=r.status_code,
            )

        try:
            data: Any = r.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise SizeLookupApiError(MSG_UNEXPECTED_RESPONSE)

        sizes = _size_list(data)
        if not sizes:
            message = data.get("message")
            if message:
                raise SizeLookupApiError(str(message))
            raise SizeLookupApiError(MSG_UNEXPECTED_RESPONSE)

        return [SizeDescriptor.model_validate(s) for s in sizes if isinstance(s, dict)]


def _size_list(data: dict) -> list:
    block = data.get("sizes")
    if not isinstance(block, dict):
        return []
    sizes = block.get("size")
    return sizes if isinstance(sizes, list) else []
