"""WordPress bulk import.

Writes an `ImportBundle` in one transaction, entity by entity:

    users -> categories -> tags -> media -> posts -> pages -> comments

Each phase records legacy id -> new id so later phases can resolve their
references. Records that already exist are reused instead of duplicated:

- users by email
- categories and tags by slug
- media by legacy id or URL
- posts and pages by legacy `wp_post_id`
- comments by legacy `wp_comment_id`

Category, page and comment parents are resolved in a second pass, so a child
may appear before its parent in the export.
"""

import time
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.database import transaction
from fastpress.core.logging import import_logger
from fastpress.core.roles import DEFAULT_ROLE_SLUG
from fastpress.models.comment import Comment, CommentStatus
from fastpress.models.media import Media
from fastpress.models.page import Page
from fastpress.models.post import ContentStatus, Post
from fastpress.models.taxonomy import Category, Tag
from fastpress.models.user import User
from fastpress.schemas.wp_import import EntityResult, ImportBundle, ImportSummary, WPItem
from fastpress.services.role import RoleService
from fastpress.services.user import UserService, login_base
from fastpress.utils.slug import make_slug, unique_slug
from fastpress.utils.text import count_words, reading_time

SKIPPED_STATUSES = frozenset({"trash", "auto-draft", "inherit"})


def map_status(wp_status: str) -> str:
    """Map a WordPress post status to a content status."""
    if wp_status == "publish":
        return ContentStatus.PUBLISHED.value
    if wp_status == "private":
        return ContentStatus.PRIVATE.value
    return ContentStatus.DRAFT.value


def map_comment_status(value: str) -> str:
    if value in (CommentStatus.APPROVED.value, CommentStatus.SPAM.value):
        return value
    return CommentStatus.PENDING.value


class _Importer:
    """State of a single import run: legacy id maps and counters."""

    def __init__(self, db: AsyncSession, bundle: ImportBundle) -> None:
        self.db = db
        self.bundle = bundle
        self.summary = ImportSummary()

        self.users: dict[int, str] = {}
        self.user_logins: dict[str, str] = {}
        self.categories: dict[int, Category] = {}
        self.categories_by_slug: dict[str, Category] = {}
        self.tags: dict[int, Tag] = {}
        self.tags_by_slug: dict[str, Tag] = {}
        self.media: dict[int, str] = {}
        self.posts: dict[int, str] = {}
        self.pages: dict[int, str] = {}
        self.comments: dict[int, str] = {}

    def _done(self, entity: str, result: EntityResult) -> None:
        import_logger.entity_imported(entity, result.created, result.reused)

    async def import_users(self) -> None:
        result = self.summary.users
        role = await RoleService.get_or_seed(self.db, DEFAULT_ROLE_SLUG)

        for wp_user in self.bundle.users:
            email = wp_user.email.strip().lower()
            user = await UserService.get_by_email(self.db, email)
            if user is not None:
                result.reused += 1
            else:
                login = await UserService.unique_login(
                    self.db, login_base(wp_user.login, email)
                )
                user = User(
                    email=email,
                    name=wp_user.display_name,
                    user_login=login,
                    user_nicename=make_slug(wp_user.login, login),
                    display_name=wp_user.display_name,
                    first_name=wp_user.first_name,
                    last_name=wp_user.last_name,
                    role_id=role.id,
                    wp_user_id=wp_user.wp_id,
                )
                self.db.add(user)
                await self.db.flush()
                result.created += 1

            self.users[wp_user.wp_id] = user.id
            self.user_logins[wp_user.login] = user.id

        self._done("users", result)

    async def import_categories(self) -> None:
        result = self.summary.categories

        for wp_category in self.bundle.categories:
            slug = make_slug(wp_category.slug, "uncategorized")
            category = self.categories_by_slug.get(slug)
            if category is None:
                existing = await self.db.execute(select(Category).where(Category.slug == slug))
                category = existing.scalar_one_or_none()
                if category is not None:
                    result.reused += 1
                else:
                    category = Category(
                        name=wp_category.name,
                        slug=slug,
                        description=wp_category.description,
                        wp_term_id=wp_category.wp_id,
                    )
                    self.db.add(category)
                    await self.db.flush()
                    result.created += 1

            if wp_category.wp_id:
                self.categories[wp_category.wp_id] = category
            self.categories_by_slug[slug] = category

        # Parents may be listed after their children
        for wp_category in self.bundle.categories:
            category = self.categories_by_slug[make_slug(wp_category.slug, "uncategorized")]
            if category.parent_id is not None:
                continue
            parent = self.categories.get(wp_category.parent) if wp_category.parent else None
            if parent is None and wp_category.parent_slug:
                parent = self.categories_by_slug.get(make_slug(wp_category.parent_slug))
            if parent is not None and parent.id != category.id:
                category.parent_id = parent.id
        await self.db.flush()

        self._done("categories", result)

    async def import_tags(self) -> None:
        result = self.summary.tags

        for wp_tag in self.bundle.tags:
            slug = make_slug(wp_tag.slug, "untagged")
            tag = self.tags_by_slug.get(slug)
            if tag is None:
                existing = await self.db.execute(select(Tag).where(Tag.slug == slug))
                tag = existing.scalar_one_or_none()
                if tag is not None:
                    result.reused += 1
                else:
                    tag = Tag(name=wp_tag.name, slug=slug, wp_term_id=wp_tag.wp_id)
                    self.db.add(tag)
                    await self.db.flush()
                    result.created += 1

            if wp_tag.wp_id:
                self.tags[wp_tag.wp_id] = tag
            self.tags_by_slug[slug] = tag

        self._done("tags", result)

    async def import_media(self) -> None:
        result = self.summary.media

        for wp_media in self.bundle.media:
            stmt = select(Media).where(Media.wp_post_id == wp_media.wp_id)
            if wp_media.url:
                stmt = select(Media).where(
                    (Media.wp_post_id == wp_media.wp_id) | (Media.url == wp_media.url)
                )
            existing = (await self.db.execute(stmt.limit(1))).scalar_one_or_none()
            if existing is not None:
                self.media[wp_media.wp_id] = existing.id
                result.reused += 1
                continue

            media = Media(
                filename=wp_media.filename,
                mime_type=wp_media.mime_type,
                filesize=wp_media.filesize,
                url=wp_media.url,
                alt=wp_media.alt,
                caption=wp_media.caption,
                wp_post_id=wp_media.wp_id,
            )
            self.db.add(media)
            await self.db.flush()
            self.media[wp_media.wp_id] = media.id
            result.created += 1

        self._done("media", result)

    def _author_id(self, item: WPItem) -> str | None:
        if item.author is not None and item.author in self.users:
            return self.users[item.author]
        if item.author_login:
            return self.user_logins.get(item.author_login)
        return None

    def _terms(self, refs: list[str | int], by_id: dict, by_slug: dict) -> list:
        """Resolve term references by legacy id or slug, dropping unknown ones."""
        found = []
        for ref in refs:
            if isinstance(ref, int):
                term = by_id.get(ref)
            else:
                term = by_slug.get(make_slug(ref))
            if term is not None and term not in found:
                found.append(term)
        return found

    def _published_at(self, item: WPItem, status: str) -> datetime | None:
        if status == ContentStatus.DRAFT.value:
            return None
        return item.published_at or datetime.now(UTC)

    def _skip_item(self, entity: str, item: WPItem) -> bool:
        if item.status in SKIPPED_STATUSES:
            import_logger.record_skipped(entity, item.wp_id, f"status '{item.status}'")
            self.summary.skipped_items += 1
            return True
        return False

    async def import_posts(self) -> None:
        result = self.summary.posts

        for item in self.bundle.posts:
            if self._skip_item("post", item):
                continue

            existing = await self.db.execute(
                select(Post.id).where(Post.wp_post_id == item.wp_id).limit(1)
            )
            post_id = existing.scalar_one_or_none()
            if post_id is not None:
                self.posts[item.wp_id] = post_id
                result.reused += 1
                continue

            status = map_status(item.status)
            words = count_words(item.content)
            post = Post(
                title=item.title,
                slug=await unique_slug(self.db, Post, make_slug(item.slug, f"post-{item.wp_id}")),
                content=item.content,
                excerpt=item.excerpt or None,
                status=status,
                author_id=self._author_id(item),
                featured_media_id=self.media.get(item.featured_media)
                if item.featured_media is not None
                else None,
                published_at=self._published_at(item, status),
                word_count=words,
                reading_time=reading_time(words),
                wp_post_id=item.wp_id,
            )
            post.categories = self._terms(
                item.categories, self.categories, self.categories_by_slug
            )
            post.tags = self._terms(item.tags, self.tags, self.tags_by_slug)
            self.db.add(post)
            await self.db.flush()
            self.posts[item.wp_id] = post.id
            result.created += 1

        self._done("posts", result)

    async def import_pages(self) -> None:
        result = self.summary.pages
        created: list[tuple[Page, WPItem]] = []

        for item in self.bundle.pages:
            if self._skip_item("page", item):
                continue

            existing = await self.db.execute(
                select(Page.id).where(Page.wp_post_id == item.wp_id).limit(1)
            )
            page_id = existing.scalar_one_or_none()
            if page_id is not None:
                self.pages[item.wp_id] = page_id
                result.reused += 1
                continue

            status = map_status(item.status)
            page = Page(
                title=item.title,
                slug=await unique_slug(self.db, Page, make_slug(item.slug, f"page-{item.wp_id}")),
                content=item.content,
                status=status,
                author_id=self._author_id(item),
                menu_order=item.menu_order,
                layout=[],
                published_at=self._published_at(item, status),
                wp_post_id=item.wp_id,
            )
            self.db.add(page)
            await self.db.flush()
            self.pages[item.wp_id] = page.id
            created.append((page, item))
            result.created += 1

        for page, item in created:
            if item.parent is not None and item.parent in self.pages:
                page.parent_id = self.pages[item.parent]
        await self.db.flush()

        self._done("pages", result)

    async def import_comments(self) -> None:
        result = self.summary.comments
        created: list[tuple[Comment, int]] = []

        for wp_comment in self.bundle.comments:
            if wp_comment.post in self.pages and wp_comment.post not in self.posts:
                import_logger.record_skipped("comment", wp_comment.wp_id, "comment on a page")
                self.summary.skipped_comments += 1
                continue
            post_id = self.posts.get(wp_comment.post)
            if post_id is None:
                import_logger.record_skipped("comment", wp_comment.wp_id, "post not imported")
                self.summary.skipped_comments += 1
                continue

            existing = await self.db.execute(
                select(Comment.id).where(Comment.wp_comment_id == wp_comment.wp_id).limit(1)
            )
            comment_id = existing.scalar_one_or_none()
            if comment_id is not None:
                self.comments[wp_comment.wp_id] = comment_id
                result.reused += 1
                continue

            comment = Comment(
                post_id=post_id,
                author_name=wp_comment.author or "Anonymous",
                author_email=wp_comment.email.strip().lower(),
                author_url=wp_comment.url,
                content=wp_comment.content,
                status=map_comment_status(wp_comment.status),
                ip_address=wp_comment.ip_address,
                wp_comment_id=wp_comment.wp_id,
                created_at=wp_comment.created_at or datetime.now(UTC),
            )
            self.db.add(comment)
            await self.db.flush()
            self.comments[wp_comment.wp_id] = comment.id
            if wp_comment.parent is not None:
                created.append((comment, wp_comment.parent))
            result.created += 1

        for comment, legacy_parent in created:
            parent_id = self.comments.get(legacy_parent)
            if parent_id is not None and parent_id != comment.id:
                comment.parent_id = parent_id
        await self.db.flush()

        self._done("comments", result)

    async def run(self) -> ImportSummary:
        await self.import_users()
        await self.import_categories()
        await self.import_tags()
        await self.import_media()
        await self.import_posts()
        await self.import_pages()
        await self.import_comments()
        return self.summary


async def bulk_import(db: AsyncSession, bundle: ImportBundle) -> ImportSummary:
    """Import a bundle atomically and return created/reused counts.

    Any failure rolls the whole import back.
    """
    start_time = time.monotonic()
    import_logger.import_start(bundle.counts())

    async with transaction(db, "wp_import"):
        summary = await _Importer(db, bundle).run()

    import_logger.import_complete(
        summary.model_dump(), (time.monotonic() - start_time) * 1000
    )
    return summary
