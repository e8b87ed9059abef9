import pytest

from featured_images.domain.entities import SettingsUpdate, SizePolicy, TtlUnit
from featured_images.domain.entities.settings import MAX_TTL_SECONDS
from featured_images.domain.repositories import SettingsRepository
from featured_images.services.secret_store import SecretStore
from featured_images.services.settings_service import SettingsService, normalize_ttl


@pytest.fixture
def settings_service(db_session, secret_store) -> SettingsService:
    return SettingsService(SettingsRepository(db_session), secret_store)


def test_should_normalize_ttl_units():
    assert normalize_ttl(30, "minutes") == (30, TtlUnit.minutes, 1800)
    assert normalize_ttl(2, "days") == (2, TtlUnit.days, 172800)
    assert normalize_ttl(0, "days") == (24, TtlUnit.hours, 86400)      # -> non-positive means one day
    assert normalize_ttl(-3, "minutes") == (24, TtlUnit.hours, 86400)
    assert normalize_ttl(5, "fortnights") == (5, TtlUnit.hours, 18000)
    assert normalize_ttl(5, "fortnights", fallback_unit=TtlUnit.minutes) == (5, TtlUnit.minutes, 300)
    assert normalize_ttl(1, "minutes")[2] == 60                         # -> one-minute floor
    assert normalize_ttl(100000, "days") == (365, TtlUnit.days, MAX_TTL_SECONDS)  # -> capped to a year


@pytest.mark.asyncio
async def test_should_return_defaults_when_nothing_stored(settings_service):
    # WHEN
    cfg = await settings_service.load()

    # THEN
    assert cfg.api_key is None
    assert cfg.size_policy == SizePolicy.optimize_social
    assert cfg.cache_ttl_seconds == 86400


@pytest.mark.asyncio
async def test_should_store_api_key_encrypted_and_return_it_decrypted(settings_service, db_session):
    # WHEN
    cfg = await settings_service.update(SettingsUpdate(api_key="  0123456789abcdef  "))
    row = await SettingsRepository(db_session).get()

    # THEN
    assert cfg.api_key == "0123456789abcdef"
    assert row.api_key_secret and "0123456789abcdef" not in row.api_key_secret
    assert settings_service.to_out(cfg).api_key == "xxxxxxxxxxxxcdef"


@pytest.mark.asyncio
async def test_should_keep_key_when_omitted_and_clear_when_empty(settings_service):
    # GIVEN
    await settings_service.update(SettingsUpdate(api_key="flickr-key"))

    # WHEN
    kept = await settings_service.update(SettingsUpdate(size_policy="largest_available"))
    cleared = await settings_service.update(SettingsUpdate(api_key=""))

    # THEN
    assert kept.api_key == "flickr-key"
    assert kept.size_policy == SizePolicy.largest_available
    assert cleared.api_key is None
    assert cleared.size_policy == SizePolicy.largest_available          # -> untouched when absent
    assert settings_service.to_out(cleared).has_api_key is False


@pytest.mark.asyncio
async def test_should_fall_back_to_optimize_social_when_policy_is_unknown(settings_service):
    # GIVEN
    await settings_service.update(SettingsUpdate(size_policy="largest_available"))

    # WHEN
    cfg = await settings_service.update(SettingsUpdate(size_policy="tiniest"))

    # THEN
    assert cfg.size_policy == SizePolicy.optimize_social


@pytest.mark.asyncio
async def test_should_normalize_ttl_on_update(settings_service):
    # WHEN
    minutes = await settings_service.update(SettingsUpdate(cache_ttl_value=15, cache_ttl_unit="minutes"))
    zero = await settings_service.update(SettingsUpdate(cache_ttl_value=0))

    # THEN
    assert minutes.cache_ttl_seconds == 900
    assert (zero.cache_ttl_value, zero.cache_ttl_unit, zero.cache_ttl_seconds) == (24, TtlUnit.hours, 86400)


@pytest.mark.asyncio
async def test_should_keep_current_unit_when_update_names_unknown_unit(settings_service):
    # GIVEN
    await settings_service.update(SettingsUpdate(cache_ttl_value=15, cache_ttl_unit="minutes"))

    # WHEN
    cfg = await settings_service.update(SettingsUpdate(cache_ttl_value=20, cache_ttl_unit="fortnights"))

    # THEN
    assert cfg.cache_ttl_unit == TtlUnit.minutes                       # -> stored unit survives the bad input
    assert cfg.cache_ttl_seconds == 1200


@pytest.mark.asyncio
async def test_should_cap_ttl_so_it_fits_the_seconds_column(settings_service):
    # WHEN
    cfg = await settings_service.update(SettingsUpdate(cache_ttl_value=100000, cache_ttl_unit="days"))

    # THEN
    assert cfg.cache_ttl_unit == TtlUnit.days
    assert cfg.cache_ttl_value == 365                                   # -> largest whole count that fits
    assert cfg.cache_ttl_seconds == MAX_TTL_SECONDS
    assert cfg.cache_ttl_seconds <= 2**31 - 1                           # -> INTEGER column range


@pytest.mark.asyncio
async def test_should_treat_undecryptable_key_as_unset(db_session, caplog):
    # GIVEN
    await SettingsService(SettingsRepository(db_session), SecretStore("old-secret")).update(
        SettingsUpdate(api_key="flickr-key")
    )
    rotated = SettingsService(SettingsRepository(db_session), SecretStore("new-secret"))

    # WHEN
    with caplog.at_level("WARNING"):
        cfg = await rotated.load()

    # THEN
    assert cfg.api_key != "flickr-key"
