"""API v1 router and endpoint organization."""

from fastapi import APIRouter

from fastpress.api.v1 import (
    blocks,
    categories,
    comments,
    dashboard,
    forms,
    media,
    migration,
    pages,
    posts,
    roles,
    seo,
    settings,
    tags,
    users,
)
from fastpress.api.v1.feeds import router as feeds_router

router = APIRouter(prefix="/api/v1")

router.include_router(posts.router)
router.include_router(categories.router)
router.include_router(tags.router)
router.include_router(pages.router)
router.include_router(blocks.router)
router.include_router(comments.router)
router.include_router(media.router)
router.include_router(settings.router)
router.include_router(seo.router)
router.include_router(forms.router)
router.include_router(users.router)
router.include_router(roles.router)
router.include_router(migration.router)
router.include_router(dashboard.router)

__all__ = ["feeds_router", "router"]
