"""Public feed routes served from the site root."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.database import get_session
from fastpress.services.feeds import llms_txt, robots_txt, rss_feed, sitemap_xml

router = APIRouter(tags=["Feeds"])


@router.get("/sitemap.xml")
async def get_sitemap(db: AsyncSession = Depends(get_session)) -> Response:
    return Response(content=await sitemap_xml(db), media_type="application/xml")


@router.get("/feed.xml")
async def get_feed(db: AsyncSession = Depends(get_session)) -> Response:
    return Response(content=await rss_feed(db), media_type="application/rss+xml")


@router.get("/robots.txt")
async def get_robots() -> Response:
    return Response(content=robots_txt(), media_type="text/plain")


@router.get("/llms.txt")
async def get_llms_txt(db: AsyncSession = Depends(get_session)) -> Response:
    return Response(content=await llms_txt(db), media_type="text/plain")
