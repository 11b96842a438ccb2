"""Post service with CRUD, search and related-post lookups.

Provides business logic for Post entities, separating concerns from API routes.
Visibility rules:
- Readers without `read_private_posts` only ever see published posts.
- Publishing (creating or moving a post to 'published') needs `publish_posts`.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import HTTPException, status
from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.logging import get_logger
from fastpress.core.roles import PUBLISH_POSTS
from fastpress.models.comment import Comment
from fastpress.models.post import ContentStatus, Post
from fastpress.models.seo_analysis import SEOAnalysis
from fastpress.models.taxonomy import Category, post_categories, post_tags
from fastpress.models.user import User
from fastpress.schemas.post import PostCreate, PostResponse, PostUpdate
from fastpress.schemas.user import AuthorSummary
from fastpress.services.tag import TagService
from fastpress.utils.slug import make_slug, slug_exists, unique_slug
from fastpress.utils.text import count_words, reading_time

if TYPE_CHECKING:
    from fastpress.core.auth import UserInfo

logger = get_logger(__name__)

SEARCH_LIMIT = 20


def _can_read_private(viewer: "UserInfo | None") -> bool:
    return viewer is not None and viewer.can_read_private


class PostService:
    """Service class for Post operations."""

    @staticmethod
    async def list_posts(
        db: AsyncSession,
        viewer: "UserInfo | None" = None,
        status_filter: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Post], int]:
        """List posts newest first.

        Args:
            db: AsyncSession for database operations.
            viewer: Current user, or None for anonymous readers.
            status_filter: Restrict to one status (readers are always limited to published).
            limit: Page size.
            offset: Page offset.

        Returns:
            Tuple of (posts, total matching posts).
        """
        stmt = select(Post)
        if not _can_read_private(viewer):
            if status_filter not in (None, ContentStatus.PUBLISHED.value):
                return [], 0
            stmt = stmt.where(Post.status == ContentStatus.PUBLISHED.value)
        elif status_filter is not None:
            stmt = stmt.where(Post.status == status_filter)

        total = (
            await db.execute(select(func.count()).select_from(stmt.subquery()))
        ).scalar_one()
        result = await db.execute(
            stmt.order_by(Post.created_at.desc()).limit(limit).offset(offset)
        )
        return list(result.scalars().all()), total

    @staticmethod
    async def get_post(db: AsyncSession, post_id: str) -> Post:
        """Get a post by ID regardless of status.

        Raises:
            HTTPException: 404 if post not found.
        """
        result = await db.execute(
            select(Post)
            .where(Post.id == post_id)
            .execution_options(populate_existing=True)
        )
        post = result.scalar_one_or_none()
        if post is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Post with id '{post_id}' not found",
            )
        return post

    @staticmethod
    async def get_visible_post(
        db: AsyncSession, post_id: str, viewer: "UserInfo | None"
    ) -> Post:
        """Get a post by ID, hiding unpublished posts from readers."""
        post = await PostService.get_post(db, post_id)
        if not post.is_published and not _can_read_private(viewer):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Post with id '{post_id}' not found",
            )
        return post

    @staticmethod
    async def get_by_slug(
        db: AsyncSession, slug: str, viewer: "UserInfo | None" = None
    ) -> Post:
        """Get a post by slug.

        Raises:
            HTTPException: 404 if missing or not visible to the viewer.
        """
        result = await db.execute(select(Post).where(Post.slug == slug))
        post = result.scalar_one_or_none()
        if post is None or (not post.is_published and not _can_read_private(viewer)):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Post '{slug}' not found",
            )
        return post

    @staticmethod
    async def _resolve_slug(
        db: AsyncSession,
        requested: str | None,
        title: str,
        exclude_id: str | None = None,
    ) -> str:
        """Use an explicit slug (409 if taken) or derive a unique one from the title."""
        if requested:
            slug = make_slug(requested)
            if await slug_exists(db, Post, slug, exclude_id):
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Post slug '{slug}' already exists",
                )
            return slug
        return await unique_slug(db, Post, make_slug(title, "post"), exclude_id)

    @staticmethod
    async def _load_categories(db: AsyncSession, category_ids: list[str]) -> list[Category]:
        """Load categories by id, failing on unknown ids."""
        if not category_ids:
            return []
        unique_ids = list(dict.fromkeys(category_ids))
        result = await db.execute(select(Category).where(Category.id.in_(unique_ids)))
        categories = list(result.scalars().all())
        missing = set(unique_ids) - {c.id for c in categories}
        if missing:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Category not found: {', '.join(sorted(missing))}",
            )
        return categories

    @staticmethod
    def _check_publish(user: "UserInfo", new_status: str) -> None:
        if new_status == ContentStatus.PUBLISHED.value and not user.has_permission(
            PUBLISH_POSTS
        ):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied: Requires permission '{PUBLISH_POSTS}'",
            )

    @staticmethod
    async def create_post(db: AsyncSession, data: PostCreate, author: "UserInfo") -> Post:
        """Create a new post.

        Word count and reading time are derived from the content. Posts
        created as published get `published_at` stamped.

        Raises:
            HTTPException: 403 if the author may not publish, 404 on unknown
                categories, 409 if an explicit slug is taken.
        """
        PostService._check_publish(author, data.status)
        slug = await PostService._resolve_slug(db, data.slug, data.title)
        categories = await PostService._load_categories(db, data.category_ids)
        tags = await TagService.get_or_create_by_names(db, data.tags)

        words = count_words(data.content)
        post = Post(
            title=data.title,
            slug=slug,
            content=data.content,
            excerpt=data.excerpt,
            status=data.status,
            author_id=author.id,
            featured_media_id=data.featured_media_id,
            meta_title=data.meta_title,
            meta_description=data.meta_description,
            focus_keyword=data.focus_keyword,
            canonical_url=data.canonical_url,
            no_index=data.no_index,
            no_follow=data.no_follow,
            word_count=words,
            reading_time=reading_time(words),
            published_at=datetime.now(UTC)
            if data.status == ContentStatus.PUBLISHED.value
            else None,
            categories=categories,
            tags=tags,
        )
        db.add(post)
        await db.flush()

        logger.info(
            "Post created",
            extra={"post_id": post.id, "slug": slug, "status": post.status},
        )
        return post

    @staticmethod
    async def update_post(
        db: AsyncSession, post_id: str, data: PostUpdate, user: "UserInfo"
    ) -> Post:
        """Update an existing post.

        Recomputes word count and reading time when content changes and
        stamps `published_at` the first time the post becomes published.

        Raises:
            HTTPException: 404 if not found, 403 if publishing without
                permission, 409 if the slug is taken.
        """
        post = await PostService.get_post(db, post_id)
        update_data = data.model_dump(exclude_unset=True)

        new_status = update_data.get("status")
        if new_status and new_status != post.status:
            PostService._check_publish(user, new_status)

        if update_data.get("slug"):
            update_data["slug"] = await PostService._resolve_slug(
                db, update_data["slug"], post.title, exclude_id=post.id
            )
        else:
            update_data.pop("slug", None)

        category_ids = update_data.pop("category_ids", None)
        if category_ids is not None:
            post.categories = await PostService._load_categories(db, category_ids)

        tag_names = update_data.pop("tags", None)
        if tag_names is not None:
            post.tags = await TagService.get_or_create_by_names(db, tag_names)

        for field, value in update_data.items():
            if field in ("title", "content", "status", "no_index", "no_follow") and value is None:
                continue
            setattr(post, field, value)

        if "content" in update_data and update_data["content"] is not None:
            post.word_count = count_words(post.content)
            post.reading_time = reading_time(post.word_count)

        if post.status == ContentStatus.PUBLISHED.value and post.published_at is None:
            post.published_at = datetime.now(UTC)

        await db.flush()
        return post

    @staticmethod
    async def delete_post(db: AsyncSession, post_id: str) -> None:
        """Delete a post with its comments and SEO analysis.

        Raises:
            HTTPException: 404 if post not found.
        """
        post = await PostService.get_post(db, post_id)

        # Replies first so parent references never dangle
        await db.execute(
            delete(Comment).where(Comment.post_id == post_id, Comment.parent_id.is_not(None))
        )
        await db.execute(delete(Comment).where(Comment.post_id == post_id))
        await db.execute(delete(SEOAnalysis).where(SEOAnalysis.post_id == post_id))
        # Category/tag association rows go with the loaded collections
        await db.delete(post)
        await db.flush()

        logger.info("Post deleted", extra={"post_id": post_id})

    @staticmethod
    async def search_posts(
        db: AsyncSession, query: str, limit: int = SEARCH_LIMIT
    ) -> list[Post]:
        """Search published posts by title or content (case-insensitive)."""
        term = query.strip()
        if not term:
            return []
        pattern = f"%{term}%"
        result = await db.execute(
            select(Post)
            .where(
                Post.status == ContentStatus.PUBLISHED.value,
                or_(Post.title.ilike(pattern), Post.content.ilike(pattern)),
            )
            .order_by(Post.published_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    @staticmethod
    async def related_posts(db: AsyncSession, post_id: str, limit: int = 5) -> list[Post]:
        """Published posts sharing categories or tags, most shared terms first."""
        post = await PostService.get_post(db, post_id)
        category_ids = {c.id for c in post.categories}
        tag_ids = {t.id for t in post.tags}
        if not category_ids and not tag_ids:
            return []

        scores: dict[str, int] = {}
        if category_ids:
            rows = await db.execute(
                select(post_categories.c.post_id).where(
                    post_categories.c.category_id.in_(category_ids),
                    post_categories.c.post_id != post_id,
                )
            )
            for (other_id,) in rows.all():
                scores[other_id] = scores.get(other_id, 0) + 1
        if tag_ids:
            rows = await db.execute(
                select(post_tags.c.post_id).where(
                    post_tags.c.tag_id.in_(tag_ids),
                    post_tags.c.post_id != post_id,
                )
            )
            for (other_id,) in rows.all():
                scores[other_id] = scores.get(other_id, 0) + 1

        if not scores:
            return []

        result = await db.execute(
            select(Post).where(
                Post.id.in_(scores.keys()),
                Post.status == ContentStatus.PUBLISHED.value,
            )
        )
        candidates = list(result.scalars().all())
        candidates.sort(
            key=lambda p: (
                -scores[p.id],
                -(p.published_at or p.created_at).timestamp(),
            )
        )
        return candidates[:limit]

    @staticmethod
    async def to_response_list(db: AsyncSession, posts: list[Post]) -> list[PostResponse]:
        """Convert posts to responses with author summaries stitched in."""
        author_ids = {p.author_id for p in posts if p.author_id}
        authors: dict[str, User] = {}
        if author_ids:
            result = await db.execute(select(User).where(User.id.in_(author_ids)))
            authors = {u.id: u for u in result.scalars().all()}

        responses = []
        for post in posts:
            response = PostResponse.model_validate(post)
            author = authors.get(post.author_id) if post.author_id else None
            response.author = AuthorSummary.model_validate(author) if author else None
            responses.append(response)
        return responses

    @staticmethod
    async def to_response(db: AsyncSession, post: Post) -> PostResponse:
        """Convert a Post to PostResponse."""
        return (await PostService.to_response_list(db, [post]))[0]
