"""Media library API router.

Supports registering externally hosted files and multipart uploads to S3.
"""

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.auth import require_permission
from fastpress.core.config import get_settings
from fastpress.core.database import get_session
from fastpress.core.roles import MANAGE_MEDIA
from fastpress.integrations.storage import StorageClient, get_storage
from fastpress.schemas.media import MediaCreate, MediaListResponse, MediaResponse, MediaUpdate
from fastpress.services.media import MediaService

router = APIRouter(prefix="/media", tags=["Media"])

manager = [Depends(require_permission(MANAGE_MEDIA))]


@router.get("", response_model=MediaListResponse)
async def list_media(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    mime_prefix: str | None = Query(None, description="e.g. 'image/'"),
    db: AsyncSession = Depends(get_session),
) -> MediaListResponse:
    """List media newest first."""
    items, total = await MediaService.list_media(db, limit, offset, mime_prefix)
    return MediaListResponse(
        items=[MediaResponse.model_validate(m) for m in items],
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + len(items) < total,
    )


@router.get("/{media_id}", response_model=MediaResponse)
async def get_media(media_id: str, db: AsyncSession = Depends(get_session)) -> MediaResponse:
    """Get a media item."""
    return MediaResponse.model_validate(await MediaService.get_media(db, media_id))


@router.post(
    "",
    response_model=MediaResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=manager,
)
async def create_media(data: MediaCreate, db: AsyncSession = Depends(get_session)) -> MediaResponse:
    """Register an externally hosted file."""
    return MediaResponse.model_validate(await MediaService.create_media(db, data))


@router.post(
    "/upload",
    response_model=MediaResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=manager,
)
async def upload_media(
    file: UploadFile = File(...),
    alt: str | None = Form(None),
    db: AsyncSession = Depends(get_session),
    storage: StorageClient = Depends(get_storage),
) -> MediaResponse:
    """Upload a file to object storage under media/<uuid>/<filename>."""
    content = await file.read()
    media = await MediaService.upload_media(
        db,
        storage,
        filename=file.filename or "file",
        content=content,
        content_type=file.content_type,
        alt=alt,
        max_bytes=get_settings().media_max_bytes,
    )
    return MediaResponse.model_validate(media)


@router.patch("/{media_id}", response_model=MediaResponse, dependencies=manager)
async def update_media(
    media_id: str,
    data: MediaUpdate,
    db: AsyncSession = Depends(get_session),
) -> MediaResponse:
    """Update alt text, caption or focal point."""
    return MediaResponse.model_validate(await MediaService.update_media(db, media_id, data))


@router.delete("/{media_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=manager)
async def delete_media(
    media_id: str,
    db: AsyncSession = Depends(get_session),
    storage: StorageClient = Depends(get_storage),
) -> None:
    """Delete a media item and its stored file."""
    await MediaService.delete_media(db, media_id, storage)
