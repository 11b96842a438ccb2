"""Category service with hierarchical CRUD operations.

Provides business logic for Category entities, separating concerns from API routes.
"""

from fastapi import HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.logging import get_logger
from fastpress.models.post import ContentStatus, Post
from fastpress.models.taxonomy import Category, post_categories
from fastpress.schemas.post import CategoryDetailResponse, PostSummary
from fastpress.schemas.taxonomy import CategoryCreate, CategorySummary, CategoryUpdate
from fastpress.utils.slug import make_slug, slug_exists, unique_slug

logger = get_logger(__name__)

# Posts embedded in a category detail response
CATEGORY_DETAIL_POST_LIMIT = 10


class CategoryService:
    """Service class for Category CRUD operations."""

    @staticmethod
    async def list_categories(
        db: AsyncSession,
        parent_id: str | None = None,
        roots_only: bool = False,
        limit: int = 50,
    ) -> list[Category]:
        """List categories ordered by name.

        Args:
            db: AsyncSession for database operations.
            parent_id: Only return children of this category.
            roots_only: Only return top-level categories (ignored when parent_id given).
            limit: Maximum number of categories.
        """
        stmt = select(Category)
        if parent_id is not None:
            stmt = stmt.where(Category.parent_id == parent_id)
        elif roots_only:
            stmt = stmt.where(Category.parent_id.is_(None))
        stmt = stmt.order_by(Category.name).limit(limit)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_category(db: AsyncSession, category_id: str) -> Category:
        """Get a category by ID.

        Raises:
            HTTPException: 404 if category not found.
        """
        category = await db.get(Category, category_id)
        if category is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Category with id '{category_id}' not found",
            )
        return category

    @staticmethod
    async def get_by_slug(db: AsyncSession, slug: str) -> Category:
        """Get a category by slug.

        Raises:
            HTTPException: 404 if category not found.
        """
        result = await db.execute(select(Category).where(Category.slug == slug))
        category = result.scalar_one_or_none()
        if category is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Category '{slug}' not found",
            )
        return category

    @staticmethod
    async def get_detail(db: AsyncSession, slug: str) -> CategoryDetailResponse:
        """Get a category with its parent, children and latest published posts."""
        category = await CategoryService.get_by_slug(db, slug)

        parent = (
            await db.get(Category, category.parent_id) if category.parent_id else None
        )
        children = await CategoryService.list_categories(db, parent_id=category.id)
        posts, _ = await CategoryService.list_posts(
            db, category.id, limit=CATEGORY_DETAIL_POST_LIMIT
        )

        response = CategoryDetailResponse.model_validate(category)
        response.parent = CategorySummary.model_validate(parent) if parent else None
        response.children = [CategorySummary.model_validate(c) for c in children]
        response.posts = [PostSummary.model_validate(p) for p in posts]
        return response

    @staticmethod
    async def list_posts(
        db: AsyncSession,
        category_id: str,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Post], int]:
        """List published posts in a category, newest first.

        Returns:
            Tuple of (posts, total matching posts).
        """
        base = (
            select(Post)
            .join(post_categories, post_categories.c.post_id == Post.id)
            .where(
                post_categories.c.category_id == category_id,
                Post.status == ContentStatus.PUBLISHED.value,
            )
        )
        total = (
            await db.execute(select(func.count()).select_from(base.subquery()))
        ).scalar_one()
        result = await db.execute(
            base.order_by(Post.published_at.desc(), Post.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), total

    @staticmethod
    async def _resolve_slug(
        db: AsyncSession,
        requested: str | None,
        name: str,
        exclude_id: str | None = None,
    ) -> str:
        """Use an explicit slug (409 if taken) or derive a unique one from the name."""
        if requested:
            slug = make_slug(requested)
            if await slug_exists(db, Category, slug, exclude_id):
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Category slug '{slug}' already exists",
                )
            return slug
        return await unique_slug(db, Category, make_slug(name, "category"), exclude_id)

    @staticmethod
    async def _check_parent(
        db: AsyncSession, category_id: str | None, parent_id: str | None
    ) -> None:
        """Ensure the parent exists and would not create a cycle."""
        if parent_id is None:
            return
        if parent_id == category_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Category cannot be its own parent",
            )
        parent = await db.get(Category, parent_id)
        if parent is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Parent category with id '{parent_id}' not found",
            )
        if category_id is None:
            return

        seen: set[str] = set()
        current: Category | None = parent
        while current is not None and current.parent_id is not None:
            if current.parent_id == category_id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Category cannot be moved under one of its descendants",
                )
            if current.parent_id in seen:
                break
            seen.add(current.parent_id)
            current = await db.get(Category, current.parent_id)

    @staticmethod
    async def create_category(db: AsyncSession, data: CategoryCreate) -> Category:
        """Create a new category.

        Raises:
            HTTPException: 404 if parent missing, 409 if slug taken.
        """
        await CategoryService._check_parent(db, None, data.parent_id)
        slug = await CategoryService._resolve_slug(db, data.slug, data.name)

        category = Category(
            name=data.name,
            slug=slug,
            description=data.description,
            parent_id=data.parent_id,
            meta_title=data.meta_title,
            meta_description=data.meta_description,
        )
        db.add(category)
        await db.flush()
        await db.refresh(category)

        logger.info("Category created", extra={"category_id": category.id, "slug": slug})
        return category

    @staticmethod
    async def update_category(
        db: AsyncSession, category_id: str, data: CategoryUpdate
    ) -> Category:
        """Update an existing category.

        Raises:
            HTTPException: 404 if not found, 400 on parent cycles, 409 if slug taken.
        """
        category = await CategoryService.get_category(db, category_id)
        update_data = data.model_dump(exclude_unset=True)

        if "parent_id" in update_data:
            await CategoryService._check_parent(db, category.id, update_data["parent_id"])

        if update_data.get("slug"):
            update_data["slug"] = await CategoryService._resolve_slug(
                db, update_data["slug"], category.name, exclude_id=category.id
            )
        else:
            update_data.pop("slug", None)

        for field, value in update_data.items():
            if field == "name" and value is None:
                continue
            setattr(category, field, value)

        await db.flush()
        await db.refresh(category)
        return category

    @staticmethod
    async def delete_category(db: AsyncSession, category_id: str) -> None:
        """Delete a category that has no child categories.

        Raises:
            HTTPException: 404 if not found, 409 when children exist.
        """
        category = await CategoryService.get_category(db, category_id)

        child_count = (
            await db.execute(
                select(func.count(Category.id)).where(Category.parent_id == category_id)
            )
        ).scalar_one()
        if child_count:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Cannot delete category with child categories",
            )

        await db.execute(
            delete(post_categories).where(post_categories.c.category_id == category_id)
        )
        await db.delete(category)
        await db.flush()
        logger.info("Category deleted", extra={"category_id": category_id})
