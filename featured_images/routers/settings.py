from fastapi import APIRouter, Depends

from app.core.auth import require_admin
from featured_images.domain.entities import SettingsOut, SettingsUpdate
from featured_images.services.settings_service import SettingsService
from shared.wiring import get_settings_service

router = APIRouter(prefix="/v1/featured-image/settings", tags=["featured-image"])


@router.get(
    "",
    summary="Read featured image settings (admin only)",
    description="The API key is never returned in clear; only its last 4 characters are visible.",
    response_model=SettingsOut,
    dependencies=[Depends(require_admin)],
    responses={
        401: {"description": "Not authenticated."},
        403: {"description": "Authenticated but not authorized (admin required)."},
    },
)
async def read_settings(svc: SettingsService = Depends(get_settings_service)):
    return svc.to_out(await svc.load())


@router.patch(
    "",
    summary="Update featured image settings (admin only)",
    description=(
        "Partial update.\n\n"
        "- `api_key`: omitted keeps the stored key, empty string clears it.\n"
        "- `size_policy`: `optimize_social` or `largest_available`; anything else falls back to "
        "`optimize_social`.\n"
        "- `cache_ttl_value` + `cache_ttl_unit` (`minutes`/`hours`/`days`): a value <= 0 means "
        "24 hours; an unknown unit keeps the stored unit; the effective TTL is between one minute "
        "and 365 days.\n"
    ),
    response_model=SettingsOut,
    dependencies=[Depends(require_admin)],
    responses={
        401: {"description": "Not authenticated."},
        403: {"description": "Authenticated but not authorized (admin required)."},
    },
)
async def update_settings(
    payload: SettingsUpdate,
    svc: SettingsService = Depends(get_settings_service),
):
    return svc.to_out(await svc.update(payload))
