"""Public discovery documents: sitemap, RSS feed, robots.txt and llms.txt."""

import xml.etree.ElementTree as ET
from datetime import UTC, datetime
from email.utils import format_datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.config import get_settings
from fastpress.models.page import Page
from fastpress.models.post import ContentStatus, Post
from fastpress.models.taxonomy import Category
from fastpress.schemas.seo import SitemapEntry
from fastpress.utils.text import html_to_text, truncate

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
SITEMAP_POST_LIMIT = 1000
RSS_EXCERPT_LENGTH = 200
LLMS_POST_LIMIT = 50


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)


def _base_url(base_url: str | None) -> str:
    return (base_url or get_settings().site_url).rstrip("/")


def _to_xml(root: ET.Element) -> str:
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'


async def _published_posts(db: AsyncSession, limit: int) -> list[Post]:
    result = await db.execute(
        select(Post)
        .where(Post.status == ContentStatus.PUBLISHED.value)
        .order_by(Post.published_at.desc().nulls_last(), Post.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def _published_pages(db: AsyncSession) -> list[Page]:
    result = await db.execute(
        select(Page)
        .where(Page.status == ContentStatus.PUBLISHED.value)
        .order_by(Page.menu_order, Page.title)
    )
    return list(result.scalars().all())


async def sitemap_entries(db: AsyncSession) -> list[SitemapEntry]:
    """Site-relative sitemap entries: posts weekly/0.8, pages monthly/0.7."""
    posts = await _published_posts(db, SITEMAP_POST_LIMIT)
    pages = await _published_pages(db)
    entries = [
        SitemapEntry(
            url=f"/{post.slug}",
            last_modified=_as_utc(post.updated_at),
            change_freq="weekly",
            priority=0.8,
        )
        for post in posts
    ]
    entries.extend(
        SitemapEntry(
            url=f"/{page.slug}",
            last_modified=_as_utc(page.updated_at),
            change_freq="monthly",
            priority=0.7,
        )
        for page in pages
    )
    return entries


async def sitemap_xml(db: AsyncSession, base_url: str | None = None) -> str:
    """sitemap.xml covering the home page, posts, pages and categories."""
    base = _base_url(base_url)
    urlset = ET.Element("urlset", xmlns=SITEMAP_NS)

    def add(loc: str, changefreq: str, priority: str, lastmod: datetime | None = None) -> None:
        url = ET.SubElement(urlset, "url")
        ET.SubElement(url, "loc").text = loc
        if lastmod is not None:
            ET.SubElement(url, "lastmod").text = _as_utc(lastmod).date().isoformat()
        ET.SubElement(url, "changefreq").text = changefreq
        ET.SubElement(url, "priority").text = priority

    add(base, "daily", "1.0")
    for post in await _published_posts(db, SITEMAP_POST_LIMIT):
        add(f"{base}/{post.slug}", "weekly", "0.8", post.published_at or post.updated_at)
    for page in await _published_pages(db):
        add(f"{base}/{page.slug}", "monthly", "0.7", page.updated_at)

    categories = await db.execute(select(Category).order_by(Category.name))
    for category in categories.scalars().all():
        add(f"{base}/category/{category.slug}", "weekly", "0.6")

    return _to_xml(urlset)


async def rss_feed(db: AsyncSession, base_url: str | None = None) -> str:
    """RSS 2.0 feed of the latest published posts."""
    settings = get_settings()
    base = _base_url(base_url)

    rss = ET.Element("rss", version="2.0")
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = settings.site_title
    ET.SubElement(channel, "description").text = settings.site_description
    ET.SubElement(channel, "link").text = base
    ET.SubElement(channel, "language").text = "en-us"
    ET.SubElement(channel, "lastBuildDate").text = format_datetime(datetime.now(UTC), usegmt=True)

    for post in await _published_posts(db, settings.feed_item_limit):
        link = f"{base}/{post.slug}"
        description = post.excerpt or truncate(
            html_to_text(post.content), RSS_EXCERPT_LENGTH
        )
        published = _as_utc(post.published_at or post.created_at)

        item = ET.SubElement(channel, "item")
        ET.SubElement(item, "title").text = post.title
        ET.SubElement(item, "description").text = description
        ET.SubElement(item, "link").text = link
        ET.SubElement(item, "guid").text = link
        ET.SubElement(item, "pubDate").text = format_datetime(published, usegmt=True)
        if post.categories:
            for category in post.categories:
                ET.SubElement(item, "category").text = category.name
        else:
            ET.SubElement(item, "category").text = "Uncategorized"

    return _to_xml(rss)


def robots_txt(base_url: str | None = None) -> str:
    """robots.txt allowing everything and pointing at the sitemap."""
    return f"User-agent: *\nAllow: /\n\nSitemap: {_base_url(base_url)}/sitemap.xml\n"


async def llms_txt(db: AsyncSession, base_url: str | None = None) -> str:
    """Markdown site summary for language-model crawlers."""
    settings = get_settings()
    base = _base_url(base_url)

    lines = [f"# {settings.site_title}", "", f"> {settings.site_description}", ""]

    pages = await _published_pages(db)
    if pages:
        lines.append("## Pages")
        lines.append("")
        lines.extend(
            f"- [{page.title}]({base}/{page.slug})"
            + (f": {page.meta_description}" if page.meta_description else "")
            for page in pages
        )
        lines.append("")

    posts = await _published_posts(db, LLMS_POST_LIMIT)
    if posts:
        lines.append("## Posts")
        lines.append("")
        for post in posts:
            summary = post.meta_description or post.excerpt
            entry = f"- [{post.title}]({base}/{post.slug})"
            lines.append(f"{entry}: {summary}" if summary else entry)
        lines.append("")

    categories = (await db.execute(select(Category).order_by(Category.name))).scalars().all()
    if categories:
        lines.append("## Categories")
        lines.append("")
        lines.extend(f"- [{c.name}]({base}/category/{c.slug})" for c in categories)
        lines.append("")

    lines.append("## Feeds")
    lines.append("")
    lines.append(f"- [Sitemap]({base}/sitemap.xml)")
    lines.append(f"- [RSS]({base}/feed.xml)")
    return "\n".join(lines) + "\n"
