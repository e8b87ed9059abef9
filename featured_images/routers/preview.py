from typing import Optional

from fastapi import APIRouter, Depends, Request

from app.core.auth import Principal, require_staff
from featured_images.domain.entities import PreviewIn, PreviewResult
from featured_images.domain.errors import ResolutionError
from featured_images.routers.errors import resolution_http_error, superseded
from featured_images.services.featured_image_service import FeaturedImageService
from featured_images.services.preview_coordinator import PreviewCoordinator
from shared.wiring import get_featured_image_service, get_preview_coordinator

router = APIRouter(prefix="/v1/featured-image", tags=["featured-image"])


def _session_key(payload: PreviewIn, user: Principal, request: Request) -> str:
    if payload.session:
        return f"{user.sub}:{payload.session}"
    if payload.content_id:
        return f"{user.sub}:content:{payload.content_id}"
    host = request.client.host if request.client else "-"
    return f"{user.sub}:{host}"


@router.post(
    "/preview",
    summary="Preview a URL without saving (staff only)",
    description=(
        "Runs the same classification, Flickr lookup and cache as a save, but never touches "
        "stored state. A newer preview from the same editor session cancels the older one, "
        "which then answers **409** with code `superseded`."
    ),
    response_model=PreviewResult,
    responses={
        401: {"description": "Not authenticated."},
        403: {"description": "Authenticated but not authorized (staff required)."},
        409: {"description": "Superseded by a newer preview, or Flickr API key missing."},
        422: {"description": "Invalid URL or no suitable size."},
        502: {"description": "Flickr unreachable or returned an error."},
    },
)
async def preview(
    payload: PreviewIn,
    request: Request,
    user: Principal = Depends(require_staff),
    service: FeaturedImageService = Depends(get_featured_image_service),
    coordinator: PreviewCoordinator = Depends(get_preview_coordinator),
):
    key = _session_key(payload, user, request)
    outcome = await coordinator.run(key, lambda: service.preview_resolve(payload.url))
    if outcome.superseded:
        raise superseded()
    result: Optional[PreviewResult | ResolutionError] = outcome.value
    if isinstance(result, ResolutionError):
        raise resolution_http_error(result)
    return result
