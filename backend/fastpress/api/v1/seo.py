"""SEO analysis API router."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.auth import require_permission
from fastpress.core.database import get_session
from fastpress.core.roles import EDIT_POSTS, MANAGE_PAGES
from fastpress.schemas.seo import (
    AnalyzeRequest,
    SEOAnalysisResponse,
    SEOOverviewResponse,
    SitemapEntry,
)
from fastpress.services.feeds import sitemap_entries
from fastpress.services.seo import SEOService

router = APIRouter(prefix="/seo", tags=["SEO"])

editor = [Depends(require_permission(EDIT_POSTS))]
page_manager = [Depends(require_permission(MANAGE_PAGES))]


@router.post("/posts/{post_id}/analyze", response_model=SEOAnalysisResponse, dependencies=editor)
async def analyze_post(
    post_id: str, data: AnalyzeRequest, db: AsyncSession = Depends(get_session)
) -> SEOAnalysisResponse:
    """Score a post for a focus keyword."""
    analysis = await SEOService.analyze_post(db, post_id, data.focus_keyword)
    return SEOAnalysisResponse.model_validate(analysis)


@router.get("/posts/{post_id}", response_model=SEOAnalysisResponse, dependencies=editor)
async def get_post_analysis(
    post_id: str, db: AsyncSession = Depends(get_session)
) -> SEOAnalysisResponse:
    """Latest analysis of a post."""
    analysis = await SEOService.get_for_post(db, post_id)
    if analysis is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No SEO analysis for post '{post_id}'",
        )
    return SEOAnalysisResponse.model_validate(analysis)


@router.post(
    "/pages/{page_id}/analyze", response_model=SEOAnalysisResponse, dependencies=page_manager
)
async def analyze_page(
    page_id: str, data: AnalyzeRequest, db: AsyncSession = Depends(get_session)
) -> SEOAnalysisResponse:
    """Score a page for a focus keyword."""
    analysis = await SEOService.analyze_page(db, page_id, data.focus_keyword)
    return SEOAnalysisResponse.model_validate(analysis)


@router.get("/pages/{page_id}", response_model=SEOAnalysisResponse, dependencies=page_manager)
async def get_page_analysis(
    page_id: str, db: AsyncSession = Depends(get_session)
) -> SEOAnalysisResponse:
    """Latest analysis of a page."""
    analysis = await SEOService.get_for_page(db, page_id)
    if analysis is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No SEO analysis for page '{page_id}'",
        )
    return SEOAnalysisResponse.model_validate(analysis)


@router.get("/overview", response_model=SEOOverviewResponse, dependencies=editor)
async def get_overview(db: AsyncSession = Depends(get_session)) -> SEOOverviewResponse:
    """Site-wide score distribution and recent analyses."""
    return await SEOService.overview(db)


@router.get("/sitemap", response_model=list[SitemapEntry])
async def get_sitemap_entries(db: AsyncSession = Depends(get_session)) -> list[SitemapEntry]:
    """Published posts and pages as sitemap entries."""
    return await sitemap_entries(db)
