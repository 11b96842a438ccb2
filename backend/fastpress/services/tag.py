"""Tag service."""

from fastapi import HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.models.taxonomy import Tag, post_tags
from fastpress.schemas.taxonomy import TagCreate
from fastpress.utils.slug import make_slug


class TagService:
    """Service class for Tag operations."""

    @staticmethod
    async def list_tags(db: AsyncSession, limit: int = 100) -> list[Tag]:
        """List tags ordered by name."""
        result = await db.execute(select(Tag).order_by(Tag.name).limit(limit))
        return list(result.scalars().all())

    @staticmethod
    async def get_by_slug(db: AsyncSession, slug: str) -> Tag:
        """Get a tag by slug.

        Raises:
            HTTPException: 404 if tag not found.
        """
        result = await db.execute(select(Tag).where(Tag.slug == slug))
        tag = result.scalar_one_or_none()
        if tag is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Tag '{slug}' not found",
            )
        return tag

    @staticmethod
    async def create_tag(db: AsyncSession, data: TagCreate) -> Tag:
        """Create a tag.

        Raises:
            HTTPException: 409 if the slug is taken.
        """
        slug = make_slug(data.slug or data.name, "tag")
        existing = await db.execute(select(Tag.id).where(Tag.slug == slug))
        if existing.first() is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Tag slug '{slug}' already exists",
            )
        tag = Tag(name=data.name, slug=slug)
        db.add(tag)
        await db.flush()
        return tag

    @staticmethod
    async def get_or_create_by_names(db: AsyncSession, names: list[str]) -> list[Tag]:
        """Resolve tag names to Tag rows, creating missing ones (by slug)."""
        tags: list[Tag] = []
        seen: set[str] = set()
        for raw in names:
            name = raw.strip()
            if not name:
                continue
            slug = make_slug(name, "tag")
            if slug in seen:
                continue
            seen.add(slug)
            result = await db.execute(select(Tag).where(Tag.slug == slug))
            tag = result.scalar_one_or_none()
            if tag is None:
                tag = Tag(name=name, slug=slug)
                db.add(tag)
                await db.flush()
            tags.append(tag)
        return tags

    @staticmethod
    async def delete_tag(db: AsyncSession, tag_id: str) -> None:
        """Delete a tag and its post associations.

        Raises:
            HTTPException: 404 if tag not found.
        """
        tag = await db.get(Tag, tag_id)
        if tag is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Tag with id '{tag_id}' not found",
            )
        await db.execute(delete(post_tags).where(post_tags.c.tag_id == tag_id))
        await db.delete(tag)
        await db.flush()
