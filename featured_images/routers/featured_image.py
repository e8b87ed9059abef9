from typing import Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel

from app.core.auth import optional_current_user, require_staff
from featured_images.domain.entities import (
    DisplayImage,
    FeaturedImageIn,
    FeaturedImageStateOut,
    SocialMeta,
)
from featured_images.domain.errors import ContentNotFoundError
from featured_images.routers.errors import not_found, resolution_http_error
from featured_images.services.featured_image_service import FeaturedImageService
from featured_images.services.rendering import FeaturedImageRenderer
from shared.wiring import get_featured_image_service, get_renderer

router = APIRouter(prefix="/v1/contents/{content_id}/featured-image", tags=["featured-image"])


class DisplayImageOut(BaseModel):
    image: Optional[DisplayImage] = None
    thumbnail: Optional[Dict[str, str]] = None


class SocialMetaOut(BaseModel):
    meta: Optional[SocialMeta] = None
    tags: list[dict[str, str]] = []


@router.get(
    "",
    summary="Display image for a content item",
    description=(
        "Returns the external featured image to render, plus ready-made `<img>` attributes.\n\n"
        "A pending item is resolved on demand. `image` is null when no external image is "
        "configured or no resolution ever succeeded.\n\n"
        "**Auth:** Optional."
    ),
    response_model=DisplayImageOut,
    dependencies=[Depends(optional_current_user)],
    responses={404: {"description": "Content not found."}},
)
async def get_display_image(
    content_id: UUID = Path(..., description="Content UUID"),
    service: FeaturedImageService = Depends(get_featured_image_service),
    renderer: FeaturedImageRenderer = Depends(get_renderer),
):
    try:
        image = await service.get_display_image(content_id)
        thumbnail = await renderer.thumbnail_attributes(content_id) if image else None
    except ContentNotFoundError as e:
        raise not_found(e)
    return DisplayImageOut(image=image, thumbnail=thumbnail)


@router.get(
    "/state",
    summary="Resolution state (staff only)",
    description="Full resolution state for the editor: status, resolved value and last error.",
    response_model=FeaturedImageStateOut,
    dependencies=[Depends(require_staff)],
    responses={
        401: {"description": "Not authenticated."},
        403: {"description": "Authenticated but not authorized (staff required)."},
        404: {"description": "Content not found."},
    },
)
async def get_state(
    content_id: UUID = Path(..., description="Content UUID"),
    service: FeaturedImageService = Depends(get_featured_image_service),
):
    try:
        state = await service.get_state(content_id)
    except ContentNotFoundError as e:
        raise not_found(e)
    return FeaturedImageStateOut.from_state(content_id, state)


@router.put(
    "",
    summary="Set the external image (staff only)",
    description=(
        "Stores the editor's source mode and URL, then resolves it (the content-save trigger).\n\n"
        "Resolution failures do not fail the request: they are reported in `last_error` and, "
        "for provider outages, the previous image is kept. `validation_message` carries the "
        "editor hint for the URL field."
    ),
    response_model=FeaturedImageStateOut,
    dependencies=[Depends(require_staff)],
    responses={
        200: {
            "description": "Saved and processed.",
            "content": {
                "application/json": {
                    "examples": {
                        "resolved": {
                            "value": {
                                "content_id": "7e6f5a20-5a62-4e25-9b02-8a8af5f1a901",
                                "status": "resolved",
                                "source_mode": "external",
                                "raw_url": "https://www.flickr.com/photos/someone/12345/",
                                "resolved": {
                                    "chosen_url": "https://live.staticflickr.com/1/12345_abc_k.jpg",
                                    "original_url": "https://www.flickr.com/photos/someone/12345/",
                                    "kind": "provider",
                                    "provider_id": "12345",
                                    "resolved_at": "2025-08-14T20:12:44Z",
                                },
                                "last_error": None,
                                "last_error_kind": None,
                                "validation_message": None,
                            }
                        }
                    }
                }
            },
        },
        401: {"description": "Not authenticated."},
        403: {"description": "Authenticated but not authorized (staff required)."},
        404: {"description": "Content not found."},
    },
)
async def save_featured_image(
    payload: FeaturedImageIn,
    content_id: UUID = Path(..., description="Content UUID"),
    service: FeaturedImageService = Depends(get_featured_image_service),
):
    try:
        outcome, message = await service.save(content_id, payload.source_mode, payload.raw_url)
    except ContentNotFoundError as e:
        raise not_found(e)
    return FeaturedImageStateOut.from_state(content_id, outcome.state, message)


@router.post(
    "/resolve",
    summary="Force re-resolution (staff only)",
    description=(
        "Re-validates and re-fetches, skipping the already-resolved short-circuit. "
        "Fails with the mapped error only when nothing could be shown at all."
    ),
    response_model=FeaturedImageStateOut,
    dependencies=[Depends(require_staff)],
    responses={
        401: {"description": "Not authenticated."},
        403: {"description": "Authenticated but not authorized (staff required)."},
        404: {"description": "Content not found."},
        409: {"description": "Flickr API key missing."},
        422: {"description": "Invalid URL or no suitable size."},
        502: {"description": "Flickr unreachable or returned an error."},
    },
)
async def force_resolve(
    content_id: UUID = Path(..., description="Content UUID"),
    service: FeaturedImageService = Depends(get_featured_image_service),
):
    try:
        outcome = await service.resolve(content_id, force=True)
    except ContentNotFoundError as e:
        raise not_found(e)
    if outcome.error is not None and outcome.state.resolved is None:
        raise resolution_http_error(outcome.error)
    return FeaturedImageStateOut.from_state(content_id, outcome.state)


@router.get(
    "/social-meta",
    summary="Open Graph / Twitter tags",
    description=(
        "og:image, twitter:card and twitter:image for the external image. Empty when the item "
        "has a native image, tags are disabled, or there is nothing to show.\n\n**Auth:** Optional."
    ),
    response_model=SocialMetaOut,
    dependencies=[Depends(optional_current_user)],
    responses={404: {"description": "Content not found."}},
)
async def get_social_meta(
    content_id: UUID = Path(..., description="Content UUID"),
    renderer: FeaturedImageRenderer = Depends(get_renderer),
):
    try:
        meta = await renderer.social_meta(content_id)
    except ContentNotFoundError as e:
        raise not_found(e)
    if meta is None:
        return SocialMetaOut()
    return SocialMetaOut(meta=meta, tags=meta.meta_tags())
