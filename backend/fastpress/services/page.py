"""Page service: hierarchical pages with block layouts.

Pages form a tree via parent_id. Every write validates the block layout
against the block registry and refuses parent changes that would create a
cycle.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fastapi import HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.logging import get_logger
from fastpress.models.page import Page
from fastpress.models.post import ContentStatus
from fastpress.models.seo_analysis import SEOAnalysis
from fastpress.models.user import User
from fastpress.schemas.page import (
    PageCreate,
    PageDetailResponse,
    PageListItem,
    PageSummary,
    PageTreeNode,
    PageUpdate,
)
from fastpress.schemas.user import AuthorSummary
from fastpress.services.blocks import validate_layout
from fastpress.utils.slug import make_slug, slug_exists, unique_slug

if TYPE_CHECKING:
    from fastpress.core.auth import UserInfo

logger = get_logger(__name__)


def _can_read_private(viewer: "UserInfo | None") -> bool:
    return viewer is not None and viewer.can_read_private


class PageService:
    """Service class for Page operations."""

    @staticmethod
    async def list_pages(
        db: AsyncSession,
        viewer: "UserInfo | None" = None,
        status_filter: str | None = None,
        parent_id: str | None = None,
        roots_only: bool = False,
        limit: int = 50,
    ) -> list[PageListItem]:
        """List pages ordered by menu order and title, with parent and child count."""
        stmt = select(Page)
        if not _can_read_private(viewer):
            if status_filter not in (None, ContentStatus.PUBLISHED.value):
                return []
            stmt = stmt.where(Page.status == ContentStatus.PUBLISHED.value)
        elif status_filter is not None:
            stmt = stmt.where(Page.status == status_filter)

        if parent_id is not None:
            stmt = stmt.where(Page.parent_id == parent_id)
        elif roots_only:
            stmt = stmt.where(Page.parent_id.is_(None))

        result = await db.execute(stmt.order_by(Page.menu_order, Page.title).limit(limit))
        pages = list(result.scalars().all())
        if not pages:
            return []

        page_ids = [p.id for p in pages]
        count_rows = await db.execute(
            select(Page.parent_id, func.count(Page.id))
            .where(Page.parent_id.in_(page_ids))
            .group_by(Page.parent_id)
        )
        child_counts = {parent: count for parent, count in count_rows.all()}

        parent_ids = {p.parent_id for p in pages if p.parent_id}
        parents: dict[str, Page] = {}
        if parent_ids:
            parent_rows = await db.execute(select(Page).where(Page.id.in_(parent_ids)))
            parents = {p.id: p for p in parent_rows.scalars().all()}

        items = []
        for page in pages:
            item = PageListItem.model_validate(page)
            parent = parents.get(page.parent_id) if page.parent_id else None
            item.parent = PageSummary.model_validate(parent) if parent else None
            item.child_count = child_counts.get(page.id, 0)
            items.append(item)
        return items

    @staticmethod
    async def get_page(db: AsyncSession, page_id: str) -> Page:
        """Get a page by ID.

        Raises:
            HTTPException: 404 if page not found.
        """
        page = await db.get(Page, page_id)
        if page is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Page with id '{page_id}' not found",
            )
        return page

    @staticmethod
    async def get_by_slug(
        db: AsyncSession, slug: str, viewer: "UserInfo | None" = None
    ) -> Page:
        """Get a page by slug, hiding unpublished pages from readers."""
        result = await db.execute(select(Page).where(Page.slug == slug))
        page = result.scalar_one_or_none()
        if page is None or (
            page.status != ContentStatus.PUBLISHED.value and not _can_read_private(viewer)
        ):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Page '{slug}' not found",
            )
        return page

    @staticmethod
    async def get_detail(
        db: AsyncSession, page: Page, viewer: "UserInfo | None" = None
    ) -> PageDetailResponse:
        """Stitch author, parent and visible children onto a page."""
        response = PageDetailResponse.model_validate(page)

        if page.author_id:
            author = await db.get(User, page.author_id)
            response.author = AuthorSummary.model_validate(author) if author else None
        if page.parent_id:
            parent = await db.get(Page, page.parent_id)
            response.parent = PageSummary.model_validate(parent) if parent else None

        stmt = select(Page).where(Page.parent_id == page.id)
        if not _can_read_private(viewer):
            stmt = stmt.where(Page.status == ContentStatus.PUBLISHED.value)
        children = await db.execute(stmt.order_by(Page.menu_order, Page.title))
        response.children = [PageSummary.model_validate(c) for c in children.scalars().all()]
        return response

    @staticmethod
    async def breadcrumbs(
        db: AsyncSession, page_id: str, viewer: "UserInfo | None" = None
    ) -> list[PageSummary]:
        """Ancestors of a page from the root down to the page itself.

        Readers get 404 for an unpublished page and never see unpublished
        ancestors in the trail.
        """
        page = await PageService.get_page(db, page_id)
        can_read_private = _can_read_private(viewer)
        if page.status != ContentStatus.PUBLISHED.value and not can_read_private:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Page with id '{page_id}' not found",
            )
        trail = [page]
        seen = {page.id}
        while trail[-1].parent_id and trail[-1].parent_id not in seen:
            parent = await db.get(Page, trail[-1].parent_id)
            if parent is None:
                break
            seen.add(parent.id)
            trail.append(parent)
        if not can_read_private:
            trail = [p for p in trail if p.status == ContentStatus.PUBLISHED.value]
        return [PageSummary.model_validate(p) for p in reversed(trail)]

    @staticmethod
    def _check_layout(layout: list[Any]) -> None:
        problems = validate_layout(layout)
        if problems:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"message": "Invalid page layout", "blocks": problems},
            )

    @staticmethod
    async def _check_parent(
        db: AsyncSession, page_id: str | None, parent_id: str | None
    ) -> None:
        """Ensure the parent exists and is not the page or one of its descendants."""
        if parent_id is None:
            return
        if parent_id == page_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Page cannot be its own parent",
            )
        parent = await db.get(Page, parent_id)
        if parent is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Parent page with id '{parent_id}' not found",
            )
        if page_id is None:
            return

        seen: set[str] = set()
        current: Page | None = parent
        while current is not None and current.parent_id is not None:
            if current.parent_id == page_id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Page cannot be moved under one of its descendants",
                )
            if current.parent_id in seen:
                break
            seen.add(current.parent_id)
            current = await db.get(Page, current.parent_id)

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
            if await slug_exists(db, Page, slug, exclude_id):
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Page slug '{slug}' already exists",
                )
            return slug
        return await unique_slug(db, Page, make_slug(title, "page"), exclude_id)

    @staticmethod
    async def create_page(db: AsyncSession, data: PageCreate, author: "UserInfo") -> Page:
        """Create a new page.

        Raises:
            HTTPException: 422 on invalid layout, 404 on missing parent,
                409 if an explicit slug is taken.
        """
        PageService._check_layout(data.layout)
        await PageService._check_parent(db, None, data.parent_id)
        slug = await PageService._resolve_slug(db, data.slug, data.title)

        page = Page(
            title=data.title,
            slug=slug,
            content=data.content,
            status=data.status,
            author_id=author.id,
            parent_id=data.parent_id,
            template=data.template,
            menu_order=data.menu_order,
            hero=data.hero,
            layout=data.layout,
            meta_title=data.meta_title,
            meta_description=data.meta_description,
            meta_image_id=data.meta_image_id,
            published_at=datetime.now(UTC)
            if data.status == ContentStatus.PUBLISHED.value
            else None,
        )
        db.add(page)
        await db.flush()
        await db.refresh(page)

        logger.info("Page created", extra={"page_id": page.id, "slug": slug})
        return page

    @staticmethod
    async def update_page(db: AsyncSession, page_id: str, data: PageUpdate) -> Page:
        """Update an existing page.

        Raises:
            HTTPException: 404 if not found, 400 on parent cycles, 422 on
                invalid layout, 409 if the slug is taken.
        """
        page = await PageService.get_page(db, page_id)
        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("layout") is not None:
            PageService._check_layout(update_data["layout"])
        if "parent_id" in update_data:
            await PageService._check_parent(db, page.id, update_data["parent_id"])

        if update_data.get("slug"):
            update_data["slug"] = await PageService._resolve_slug(
                db, update_data["slug"], page.title, exclude_id=page.id
            )
        else:
            update_data.pop("slug", None)

        for field, value in update_data.items():
            if field in ("title", "content", "status", "menu_order", "layout") and value is None:
                continue
            setattr(page, field, value)

        if page.status == ContentStatus.PUBLISHED.value and page.published_at is None:
            page.published_at = datetime.now(UTC)

        await db.flush()
        await db.refresh(page)
        return page

    @staticmethod
    async def delete_page(db: AsyncSession, page_id: str) -> None:
        """Delete a page without children.

        Raises:
            HTTPException: 404 if not found, 409 when child pages exist.
        """
        page = await PageService.get_page(db, page_id)
        child_count = (
            await db.execute(select(func.count(Page.id)).where(Page.parent_id == page_id))
        ).scalar_one()
        if child_count:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Cannot delete page with child pages",
            )
        await db.execute(delete(SEOAnalysis).where(SEOAnalysis.page_id == page_id))
        await db.delete(page)
        await db.flush()
        logger.info("Page deleted", extra={"page_id": page_id})

    @staticmethod
    async def duplicate_page(db: AsyncSession, page_id: str, author: "UserInfo") -> Page:
        """Copy a page as a new draft titled '<title> (Copy)'."""
        source = await PageService.get_page(db, page_id)
        slug = await unique_slug(db, Page, f"{source.slug}-copy")

        copy = Page(
            title=f"{source.title} (Copy)",
            slug=slug,
            content=source.content,
            status=ContentStatus.DRAFT.value,
            author_id=author.id,
            parent_id=source.parent_id,
            template=source.template,
            menu_order=source.menu_order,
            hero=dict(source.hero) if source.hero else None,
            layout=[dict(block) for block in source.layout or []],
            meta_title=source.meta_title,
            meta_description=source.meta_description,
            meta_image_id=source.meta_image_id,
        )
        db.add(copy)
        await db.flush()
        await db.refresh(copy)
        return copy

    @staticmethod
    async def get_tree(
        db: AsyncSession, statuses: list[str] | None = None
    ) -> list[PageTreeNode]:
        """Build the page hierarchy (published pages unless `statuses` given)."""
        wanted = statuses or [ContentStatus.PUBLISHED.value]
        result = await db.execute(
            select(Page)
            .where(Page.status.in_(wanted))
            .order_by(Page.menu_order, Page.title)
        )
        pages = list(result.scalars().all())

        nodes = {
            p.id: PageTreeNode(
                id=p.id, title=p.title, slug=p.slug, status=p.status, menu_order=p.menu_order
            )
            for p in pages
        }
        roots: list[PageTreeNode] = []
        for page in pages:
            node = nodes[page.id]
            if page.parent_id and page.parent_id in nodes:
                nodes[page.parent_id].children.append(node)
            else:
                roots.append(node)
        return roots
