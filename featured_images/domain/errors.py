from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    invalid_input = "invalid_input"
    invalid_identifier = "invalid_identifier"
    missing_credentials = "missing_credentials"
    http_error = "http_error"
    api_error = "api_error"
    no_suitable_size = "no_suitable_size"


# user-facing messages
MSG_INVALID_URL = "Enter a valid HTTPS image URL or Flickr page URL."
MSG_HTTPS_ONLY = "Only HTTPS image URLs are supported."
MSG_UNSUPPORTED_URL = "Enter a direct .jpg/.png image URL or a Flickr photo URL."
MSG_API_KEY_REQUIRED = "Add a Flickr API key to resolve Flickr URLs."
MSG_INVALID_IDENTIFIER = "Unable to determine Flickr photo ID from URL."
MSG_MISSING_API_KEY = "Flickr API key is not configured."
MSG_UNEXPECTED_RESPONSE = "Unexpected Flickr API response."
MSG_NO_SUITABLE_SIZE = "Unable to determine a suitable Flickr image size."
MSG_OVERRIDE_EMPTY = "Flickr size selection was overridden to an empty value."


@dataclass(frozen=True)
class ResolutionError:
    """A failed resolution, returned as a value rather than raised."""

    kind: ErrorKind
    message: str

    @property
    def clears_stale(self) -> bool:
        # a bad URL must never keep showing an older, unrelated image
        return self.kind in (ErrorKind.invalid_input, ErrorKind.invalid_identifier)


class SizeLookupError(Exception):
    """Raised by size-lookup adapters; converted to ResolutionError by the resolver."""

    kind: ErrorKind = ErrorKind.api_error

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def to_error(self) -> ResolutionError:
        return ResolutionError(self.kind, self.message)


class SizeLookupHttpError(SizeLookupError):
    kind = ErrorKind.http_error


class SizeLookupApiError(SizeLookupError):
    kind = ErrorKind.api_error


class SecretStoreConfigError(RuntimeError):
    pass


class ContentNotFoundError(LookupError):
    def __init__(self, content_id):
        super().__init__(f"content {content_id} not found")
        self.content_id = content_id
