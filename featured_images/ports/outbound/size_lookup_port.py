from typing import List, Protocol

from featured_images.domain.entities import SizeDescriptor


class SizeLookupPort(Protocol):
    """Blocking size-listing call to the photo provider.

    Raises SizeLookupHttpError / SizeLookupApiError on failure.
    """

    def fetch_sizes(self, photo_id: str, api_key: str) -> List[SizeDescriptor]: ...
