from enum import Enum
from typing import Optional

from pydantic import BaseModel

MINUTE_IN_SECONDS = 60
HOUR_IN_SECONDS = 60 * MINUTE_IN_SECONDS
DAY_IN_SECONDS = 24 * HOUR_IN_SECONDS
# Stored in a 32-bit INTEGER column
MAX_TTL_SECONDS = 365 * DAY_IN_SECONDS


class SizePolicy(str, Enum):
    optimize_social = "optimize_social"
    largest_available = "largest_available"

class TtlUnit(str, Enum):
    minutes = "minutes"
    hours = "hours"
    days = "days"

TTL_UNIT_SECONDS = {
    TtlUnit.minutes: MINUTE_IN_SECONDS,
    TtlUnit.hours: HOUR_IN_SECONDS,
    TtlUnit.days: DAY_IN_SECONDS,
}


class PluginSettings(BaseModel):
    """Process-wide featured image settings with the API key already decrypted."""

    api_key: Optional[str] = None
    size_policy: SizePolicy = SizePolicy.optimize_social
    cache_ttl_value: int = 24
    cache_ttl_unit: TtlUnit = TtlUnit.hours
    cache_ttl_seconds: int = DAY_IN_SECONDS

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


class SettingsUpdate(BaseModel):
    # None leaves the stored key untouched, "" clears it
    api_key: Optional[str] = None
    size_policy: Optional[str] = None
    cache_ttl_value: Optional[int] = None
    cache_ttl_unit: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "api_key": "0123456789abcdef0123456789abcdef",
                "size_policy": "optimize_social",
                "cache_ttl_value": 12,
                "cache_ttl_unit": "hours",
            }
        }
    }


class SettingsOut(BaseModel):
    api_key: Optional[str] = None   # obscured, display only
    has_api_key: bool = False
    size_policy: SizePolicy
    cache_ttl_value: int
    cache_ttl_unit: TtlUnit
    cache_ttl_seconds: int
