"""Media library service.

Uploaded files are stored under `media/<uuid>/<filename>` in object storage;
imported or externally hosted files only keep their URL.
"""

import re
from uuid import uuid4

from fastapi import HTTPException, status
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.logging import get_logger
from fastpress.integrations.storage import (
    StorageClient,
    StorageError,
    StorageNotConfiguredError,
    StorageNotFoundError,
)
from fastpress.models.media import Media
from fastpress.models.page import Page
from fastpress.models.post import Post
from fastpress.models.user import User
from fastpress.schemas.media import MediaCreate, MediaUpdate

logger = get_logger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(filename: str) -> str:
    """Reduce a client-supplied filename to a storage-safe basename."""
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    name = _UNSAFE_FILENAME_CHARS.sub("-", name).strip("-.")
    return name or "file"


def storage_key_for(filename: str) -> str:
    """Object key for a new upload."""
    return f"media/{uuid4()}/{safe_filename(filename)}"


class MediaService:
    """Service class for Media operations."""

    @staticmethod
    async def list_media(
        db: AsyncSession,
        limit: int = 20,
        offset: int = 0,
        mime_prefix: str | None = None,
    ) -> tuple[list[Media], int]:
        """List media newest first, optionally filtered by MIME prefix (e.g. 'image/')."""
        stmt = select(Media)
        if mime_prefix:
            stmt = stmt.where(Media.mime_type.startswith(mime_prefix))

        total = (
            await db.execute(select(func.count()).select_from(stmt.subquery()))
        ).scalar_one()
        result = await db.execute(
            stmt.order_by(Media.created_at.desc()).limit(limit).offset(offset)
        )
        return list(result.scalars().all()), total

    @staticmethod
    async def get_media(db: AsyncSession, media_id: str) -> Media:
        """Get a media item by ID.

        Raises:
            HTTPException: 404 if media not found.
        """
        media = await db.get(Media, media_id)
        if media is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Media with id '{media_id}' not found",
            )
        return media

    @staticmethod
    async def create_media(db: AsyncSession, data: MediaCreate) -> Media:
        """Register an externally hosted file."""
        media = Media(
            filename=data.filename,
            url=data.url,
            mime_type=data.mime_type,
            filesize=data.filesize,
            width=data.width,
            height=data.height,
            alt=data.alt,
            caption=data.caption,
        )
        db.add(media)
        await db.flush()
        await db.refresh(media)
        logger.info(
            "Media registered",
            extra={"media_id": media.id, "media_filename": media.filename},
        )
        return media

    @staticmethod
    async def upload_media(
        db: AsyncSession,
        storage: StorageClient,
        filename: str,
        content: bytes,
        content_type: str | None,
        alt: str | None = None,
        max_bytes: int | None = None,
    ) -> Media:
        """Store an uploaded file and create its media row.

        Raises:
            HTTPException: 400 for empty files, 413 when over `max_bytes`,
                503 when storage is unavailable, 502 when the upload fails.
        """
        if not content:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Uploaded file is empty",
            )
        if max_bytes is not None and len(content) > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File exceeds the maximum size of {max_bytes} bytes",
            )

        mime_type = content_type or "application/octet-stream"
        key = storage_key_for(filename)
        try:
            await storage.upload_file(key, content, mime_type)
        except StorageNotConfiguredError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Media storage is not configured",
            ) from e
        except StorageError as e:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Upload failed: {e}",
            ) from e

        media = Media(
            filename=safe_filename(filename),
            mime_type=mime_type,
            filesize=len(content),
            alt=alt,
            url=storage.public_url(key),
            storage_key=key,
        )
        db.add(media)
        await db.flush()
        await db.refresh(media)

        logger.info(
            "Media uploaded",
            extra={"media_id": media.id, "storage_key": key, "filesize": media.filesize},
        )
        return media

    @staticmethod
    async def update_media(db: AsyncSession, media_id: str, data: MediaUpdate) -> Media:
        """Update alt text, caption or focal point."""
        media = await MediaService.get_media(db, media_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(media, field, value)
        await db.flush()
        await db.refresh(media)
        return media

    @staticmethod
    async def delete_media(
        db: AsyncSession, media_id: str, storage: StorageClient | None = None
    ) -> None:
        """Delete a media item, removing its stored object first.

        References from posts, pages and avatars are cleared.

        Raises:
            HTTPException: 404 if not found, 502 when the stored object
                cannot be removed.
        """
        media = await MediaService.get_media(db, media_id)

        if media.storage_key and storage is not None and storage.available:
            try:
                await storage.delete_file(media.storage_key)
            except StorageNotFoundError:
                logger.warning(
                    "Stored object already missing",
                    extra={"media_id": media_id, "storage_key": media.storage_key},
                )
            except StorageError as e:
                raise HTTPException(
                    status_code=status.HTTP_502_BAD_GATEWAY,
                    detail=f"Failed to delete stored file: {e}",
                ) from e

        await db.execute(
            update(Post).where(Post.featured_media_id == media_id).values(featured_media_id=None)
        )
        await db.execute(
            update(Page).where(Page.meta_image_id == media_id).values(meta_image_id=None)
        )
        await db.execute(update(User).where(User.avatar_id == media_id).values(avatar_id=None))
        await db.delete(media)
        await db.flush()
        logger.info("Media deleted", extra={"media_id": media_id})
