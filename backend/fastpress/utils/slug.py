"""Slug generation and uniqueness checks."""

from typing import Any

from slugify import slugify
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

MAX_SLUG_LENGTH = 200


def make_slug(value: str, fallback: str = "item") -> str:
    """Build a URL slug from free text."""
    slug = slugify(value or "", max_length=MAX_SLUG_LENGTH)
    return slug or fallback


async def slug_exists(
    db: AsyncSession,
    model: Any,
    slug: str,
    exclude_id: str | None = None,
) -> bool:
    """Check whether `slug` is taken in `model`'s table."""
    stmt = select(model.id).where(model.slug == slug)
    if exclude_id is not None:
        stmt = stmt.where(model.id != exclude_id)
    result = await db.execute(stmt.limit(1))
    return result.first() is not None


async def unique_slug(
    db: AsyncSession,
    model: Any,
    base: str,
    exclude_id: str | None = None,
) -> str:
    """Return `base`, or `base-2`, `base-3`... whichever is free first."""
    candidate = base
    counter = 2
    while await slug_exists(db, model, candidate, exclude_id):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate
