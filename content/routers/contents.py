from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, status, Path, Body

from app.core.auth import optional_current_user, require_staff
from content.domain.entities.content import ContentCreate, ContentUpdate
from content.services.content_service import ContentService
from shared.entities.content import ContentOut
from shared.wiring import get_content_service

router = APIRouter(prefix="/v1/contents", tags=["contents"])

_EXAMPLE = {
    "id": "7e6f5a20-5a62-4e25-9b02-8a8af5f1a901",
    "title": "Harbour at dusk",
    "description": "Evening walk along the old harbour.",
    "canonical_url": "https://example.org/posts/harbour-at-dusk",
    "native_image_url": None,
    "status": "published",
    "created_at": "2025-08-14T20:12:44Z",
    "updated_at": "2025-08-14T20:12:44Z",
}


@router.post(
    "",
    summary="Create content (staff only)",
    description=(
        "Creates a new content item.\n\n"
        "**Auth:** Editors/Admins only (via `require_staff`).\n\n"
        "Required fields include `title`; optional fields are `description`, "
        "`canonical_url`, `native_image_url` and `status`.\n"
    ),
    response_model=ContentOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_staff)],
    responses={
        201: {
            "description": "Content created.",
            "content": {"application/json": {"examples": {"created": {"value": _EXAMPLE}}}},
        },
        401: {"description": "Not authenticated."},
        403: {"description": "Authenticated but not authorized (staff required)."},
    },
)
async def create_content(
    payload: ContentCreate,
    content_svc: ContentService = Depends(get_content_service),
):
    return await content_svc.create(payload)

@router.patch(
    "/{content_id}",
    summary="Update content (staff only)",
    description="Partially updates a content item.\n\n**Auth:** Editors/Admins only.",
    response_model=ContentOut,
    dependencies=[Depends(require_staff)],
    responses={
        200: {"description": "Content updated; full object returned."},
        401: {"description": "Not authenticated."},
        403: {"description": "Authenticated but not authorized (staff required)."},
        404: {"description": "Content not found."},
    },
)
async def update_content(
    content_id: UUID = Path(..., description="Content UUID"),
    payload: ContentUpdate = Body(..., description="Partial update payload"),
    content_svc: ContentService = Depends(get_content_service),
):
    obj = await content_svc.update(content_id, payload)
    if not obj:
        raise HTTPException(status_code=404, detail="not found")
    return obj

@router.delete(
    "/{content_id}",
    summary="Delete content (staff only)",
    description="Deletes a content item and its featured image state. Returns `{ \"ok\": true }` on success.",
    dependencies=[Depends(require_staff)],
    responses={
        200: {
            "description": "Deleted.",
            "content": {"application/json": {"examples": {"ok": {"value": {"ok": True}}}}},
        },
        401: {"description": "Not authenticated."},
        403: {"description": "Authenticated but not authorized (staff required)."},
        404: {"description": "Content not found."},
    },
)
async def delete_content(
    content_id: UUID = Path(..., description="Content UUID"),
    content_svc: ContentService = Depends(get_content_service),
):
    ok = await content_svc.delete(content_id)
    if not ok:
        raise HTTPException(status_code=404, detail="not found")
    return {"ok": True}

@router.get(
    "",
    summary="List contents",
    description="Returns a paginated list of content items, newest first. **Auth:** Optional.",
    response_model=List[ContentOut],
    dependencies=[Depends(optional_current_user)],
    responses={
        200: {
            "description": "List of content items (paginated via `limit`/`offset`).",
            "content": {"application/json": {"examples": {"list": {"value": [_EXAMPLE]}}}},
        },
    },
)
async def list_contents(
    status: Optional[str] = Query(None, pattern="^(draft|published)$", description="Filter by content status."),
    limit: int = Query(20, ge=1, le=100, description="Page size (1-100)."),
    offset: int = Query(0, ge=0, description="Offset for pagination."),
    content_svc: ContentService = Depends(get_content_service),
):
    return await content_svc.list(status, limit, offset)

@router.get(
    "/{content_id}",
    summary="Get content by ID",
    description="Fetches a single content item by UUID. **Auth:** Optional.",
    response_model=ContentOut,
    dependencies=[Depends(optional_current_user)],
    responses={
        200: {
            "description": "Content found.",
            "content": {"application/json": {"examples": {"content": {"value": _EXAMPLE}}}},
        },
        404: {
            "description": "Content not found.",
            "content": {"application/json": {"examples": {"not_found": {"value": {"detail": "not found"}}}}},
        },
    },
)
async def get_content(
    content_id: UUID = Path(..., description="Content UUID"),
    content_svc: ContentService = Depends(get_content_service),
):
    obj = await content_svc.get(content_id)
    if not obj:
        raise HTTPException(status_code=404, detail="not found")
    return obj
