import logging
from typing import Optional, Tuple

from featured_images.domain.entities import (
    PluginSettings,
    SettingsOut,
    SettingsUpdate,
    SizePolicy,
    TtlUnit,
)
from featured_images.domain.entities.settings import MAX_TTL_SECONDS, MINUTE_IN_SECONDS, TTL_UNIT_SECONDS
from featured_images.domain.repositories import SettingsRepository
from featured_images.services.secret_store import SecretStore

logger = logging.getLogger(__name__)

DEFAULT_TTL_VALUE = 24
DEFAULT_TTL_UNIT = TtlUnit.hours


def normalize_ttl(
    value: Optional[int],
    unit: Optional[str],
    fallback_unit: TtlUnit = DEFAULT_TTL_UNIT,
) -> Tuple[int, TtlUnit, int]:
    """(value, unit) -> (value, unit, seconds).

    An unknown unit becomes `fallback_unit`. Non-positive values fall back to 24 hours.
    The result is at least one minute and at most MAX_TTL_SECONDS; an oversized value
    is reduced to the largest whole count of its unit that fits.
    """
    try:
        ttl_unit = TtlUnit(unit)
    except ValueError:
        ttl_unit = fallback_unit
    if value is None or value <= 0:
        value, ttl_unit = DEFAULT_TTL_VALUE, DEFAULT_TTL_UNIT
    unit_seconds = TTL_UNIT_SECONDS[ttl_unit]
    value = min(value, MAX_TTL_SECONDS // unit_seconds)
    seconds = max(MINUTE_IN_SECONDS, value * unit_seconds)
    return value, ttl_unit, seconds


class SettingsService:
    """Administrative read/update of the process-wide featured image settings."""

    def __init__(self, repo: SettingsRepository, secret_store: SecretStore):
        self.repo = repo
        self.secret_store = secret_store

    async def load(self) -> PluginSettings:
        row = await self.repo.get()
        if row is None:
            return PluginSettings()

        api_key = self.secret_store.decrypt(row.api_key_secret)
        if row.api_key_secret and not api_key:
            # wrong ENCRYPTION_SECRET or tampered row; treat as "no key"
            logger.warning("stored Flickr API key could not be decrypted; treating it as unset")

        try:
            policy = SizePolicy(row.size_policy)
        except ValueError:
            policy = SizePolicy.optimize_social
        value, unit, seconds = normalize_ttl(row.cache_ttl_value, row.cache_ttl_unit)

        return PluginSettings(
            api_key=api_key or None,
            size_policy=policy,
            cache_ttl_value=value,
            cache_ttl_unit=unit,
            cache_ttl_seconds=seconds,
        )

    async def update(self, payload: SettingsUpdate) -> PluginSettings:
        current = await self.load()
        values = {}

        if payload.api_key is not None:
            key = payload.api_key.strip()
            values["api_key_secret"] = self.secret_store.encrypt(key) if key else None

        policy = current.size_policy
        if payload.size_policy is not None:
            try:
                policy = SizePolicy(payload.size_policy)
            except ValueError:
                policy = SizePolicy.optimize_social
        values["size_policy"] = policy.value

        raw_value = payload.cache_ttl_value if payload.cache_ttl_value is not None else current.cache_ttl_value
        raw_unit = payload.cache_ttl_unit if payload.cache_ttl_unit is not None else current.cache_ttl_unit.value
        value, unit, seconds = normalize_ttl(raw_value, raw_unit, fallback_unit=current.cache_ttl_unit)
        values.update(cache_ttl_value=value, cache_ttl_unit=unit.value, cache_ttl_seconds=seconds)

        await self.repo.save(**values)
        logger.info("featured image settings updated (policy=%s, ttl=%ss)", policy.value, seconds)
        return await self.load()

    def to_out(self, cfg: PluginSettings) -> SettingsOut:
        return SettingsOut(
            api_key=self.secret_store.obscure(cfg.api_key) or None,
            has_api_key=cfg.has_api_key,
            size_policy=cfg.size_policy,
            cache_ttl_value=cfg.cache_ttl_value,
            cache_ttl_unit=cfg.cache_ttl_unit,
            cache_ttl_seconds=cfg.cache_ttl_seconds,
        )
