"""On-page SEO scoring for posts and pages.

The analysis is a set of text heuristics over the title, meta description
and body of a document:

    overall = 0.25 * title + 0.2 * meta_description + 0.35 * content + 0.2 * readability

Each component is scored 0-100. Results are stored one row per post or page;
analysing a post also writes the scores and focus keyword back onto it.
"""

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.logging import get_logger
from fastpress.models.page import Page
from fastpress.models.post import Post
from fastpress.models.seo_analysis import SEOAnalysis
from fastpress.schemas.seo import ScoreDistribution, SEOAnalysisResponse, SEOOverviewResponse

logger = get_logger(__name__)

TITLE_WEIGHT = 0.25
META_DESCRIPTION_WEIGHT = 0.2
CONTENT_WEIGHT = 0.35
READABILITY_WEIGHT = 0.2

RECENT_ANALYSES = 10

_SENTENCE_SPLIT = re.compile(r"[.!?]+")


@dataclass
class AnalysisResult:
    """Scores computed for a single document."""

    focus_keyword: str
    keyword_density: float
    title_score: int
    meta_description_score: int
    content_score: int
    readability_score: int
    overall_score: int
    suggestions: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def keyword_occurrences(text: str, keyword: str) -> int:
    """Case-insensitive count of non-overlapping keyword occurrences."""
    if not keyword:
        return 0
    return len(re.findall(re.escape(keyword.lower()), text.lower()))


def title_score(title: str, keyword: str) -> int:
    score = 0
    if 30 <= len(title) <= 60:
        score += 40
    elif title:
        score += 20
    if keyword.lower() in title.lower():
        score += 40
    if title:
        score += 20
    return min(score, 100)


def meta_description_score(description: str, keyword: str) -> int:
    score = 0
    if 120 <= len(description) <= 160:
        score += 50
    elif description:
        score += 25
    if keyword.lower() in description.lower():
        score += 30
    if description:
        score += 20
    return min(score, 100)


def content_score(content: str, keyword: str) -> int:
    score = 0
    if len(content) >= 300:
        score += 30
    if keyword_occurrences(content, keyword) >= 2:
        score += 30
    if "#" in content or "<h" in content:
        score += 20
    if "![" in content or "<img" in content:
        score += 20
    return min(score, 100)


def readability_score(content: str) -> int:
    """100 minus a penalty for long average sentences (>15 and >20 words)."""
    sentences = [s for s in _SENTENCE_SPLIT.split(content) if s.strip()]
    words = content.split()
    if not sentences or not words:
        return 0

    avg_words = len(words) / len(sentences)
    score = 100
    if avg_words > 20:
        score -= 30
    elif avg_words > 15:
        score -= 15
    return max(score, 0)


def recommendations(
    title: str,
    description: str,
    content: str,
    keyword: str,
    density: float,
    scores: dict[str, int],
) -> tuple[list[str], list[str]]:
    """Suggestions and warnings for every component scoring low."""
    suggestions: list[str] = []
    warnings: list[str] = []
    keyword_lower = keyword.lower()

    if scores["title"] < 80:
        if len(title) < 30:
            suggestions.append("Consider making your title longer (30-60 characters)")
        if len(title) > 60:
            warnings.append("Title is too long, it may be truncated in search results")
        if keyword_lower not in title.lower():
            suggestions.append("Include your focus keyword in the title")

    if scores["meta_description"] < 80:
        if len(description) < 120:
            suggestions.append("Write a longer meta description (120-160 characters)")
        if len(description) > 160:
            warnings.append("Meta description is too long")
        if keyword_lower not in description.lower():
            suggestions.append("Include your focus keyword in the meta description")

    if scores["content"] < 80:
        if len(content) < 300:
            suggestions.append("Add more content - aim for at least 300 words")
        if density < 0.5:
            suggestions.append("Use your focus keyword more frequently in the content")
        if density > 3:
            warnings.append("Keyword density is too high - avoid keyword stuffing")

    if scores["readability"] < 70:
        suggestions.append("Improve readability by using shorter sentences and paragraphs")

    return suggestions, warnings


def analyze(
    title: str | None,
    meta_description: str | None,
    content: str | None,
    focus_keyword: str,
) -> AnalysisResult:
    """Score a document for a focus keyword."""
    title = title or ""
    description = meta_description or ""
    body = content or ""

    total_words = len(body.split()) or 1
    density = keyword_occurrences(body, focus_keyword) / total_words * 100 if body else 0.0

    scores = {
        "title": title_score(title, focus_keyword),
        "meta_description": meta_description_score(description, focus_keyword),
        "content": content_score(body, focus_keyword),
        "readability": readability_score(body),
    }
    overall = round(
        scores["title"] * TITLE_WEIGHT
        + scores["meta_description"] * META_DESCRIPTION_WEIGHT
        + scores["content"] * CONTENT_WEIGHT
        + scores["readability"] * READABILITY_WEIGHT
    )
    suggestions, warnings = recommendations(
        title, description, body, focus_keyword, density, scores
    )

    return AnalysisResult(
        focus_keyword=focus_keyword,
        keyword_density=round(density, 2),
        title_score=scores["title"],
        meta_description_score=scores["meta_description"],
        content_score=scores["content"],
        readability_score=scores["readability"],
        overall_score=overall,
        suggestions=suggestions,
        warnings=warnings,
    )


def score_bucket(score: int) -> str:
    if score >= 90:
        return "excellent"
    if score >= 70:
        return "good"
    if score >= 50:
        return "needs_improvement"
    return "poor"


class SEOService:
    """Service class for SEO analysis storage."""

    @staticmethod
    async def _store(
        db: AsyncSession,
        result: AnalysisResult,
        post_id: str | None = None,
        page_id: str | None = None,
    ) -> SEOAnalysis:
        if post_id is not None:
            stmt = select(SEOAnalysis).where(SEOAnalysis.post_id == post_id)
        else:
            stmt = select(SEOAnalysis).where(SEOAnalysis.page_id == page_id)
        analysis = (await db.execute(stmt)).scalar_one_or_none()

        if analysis is None:
            analysis = SEOAnalysis(post_id=post_id, page_id=page_id)
            db.add(analysis)

        analysis.focus_keyword = result.focus_keyword
        analysis.keyword_density = result.keyword_density
        analysis.title_score = result.title_score
        analysis.meta_description_score = result.meta_description_score
        analysis.content_score = result.content_score
        analysis.readability_score = result.readability_score
        analysis.overall_score = result.overall_score
        analysis.suggestions = result.suggestions
        analysis.warnings = result.warnings
        analysis.analyzed_at = datetime.now(UTC)

        await db.flush()
        await db.refresh(analysis)
        return analysis

    @staticmethod
    async def analyze_post(db: AsyncSession, post_id: str, focus_keyword: str) -> SEOAnalysis:
        """Analyse a post and write the scores back onto it.

        Raises:
            HTTPException: 404 if post not found.
        """
        post = await db.get(Post, post_id)
        if post is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Post with id '{post_id}' not found",
            )

        result = analyze(post.title, post.meta_description, post.content, focus_keyword)
        analysis = await SEOService._store(db, result, post_id=post_id)

        post.focus_keyword = focus_keyword
        post.seo_score = result.overall_score
        post.readability_score = result.readability_score
        await db.flush()

        logger.info(
            "Post analysed",
            extra={"post_id": post_id, "overall_score": result.overall_score},
        )
        return analysis

    @staticmethod
    async def analyze_page(db: AsyncSession, page_id: str, focus_keyword: str) -> SEOAnalysis:
        """Analyse a page.

        Raises:
            HTTPException: 404 if page not found.
        """
        page = await db.get(Page, page_id)
        if page is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Page with id '{page_id}' not found",
            )

        result = analyze(page.title, page.meta_description, page.content, focus_keyword)
        analysis = await SEOService._store(db, result, page_id=page_id)
        logger.info(
            "Page analysed",
            extra={"page_id": page_id, "overall_score": result.overall_score},
        )
        return analysis

    @staticmethod
    async def get_for_post(db: AsyncSession, post_id: str) -> SEOAnalysis | None:
        result = await db.execute(select(SEOAnalysis).where(SEOAnalysis.post_id == post_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_for_page(db: AsyncSession, page_id: str) -> SEOAnalysis | None:
        result = await db.execute(select(SEOAnalysis).where(SEOAnalysis.page_id == page_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def overview(db: AsyncSession) -> SEOOverviewResponse:
        """Count, average and score distribution of all analyses."""
        scores = list((await db.execute(select(SEOAnalysis.overall_score))).scalars().all())
        distribution = ScoreDistribution()
        for score in scores:
            bucket = score_bucket(score)
            setattr(distribution, bucket, getattr(distribution, bucket) + 1)

        average = (
            await db.execute(select(func.avg(SEOAnalysis.overall_score)))
        ).scalar_one_or_none()

        recent = await db.execute(
            select(SEOAnalysis).order_by(SEOAnalysis.analyzed_at.desc()).limit(RECENT_ANALYSES)
        )
        return SEOOverviewResponse(
            total_analyses=len(scores),
            average_score=round(float(average)) if average is not None else 0,
            score_distribution=distribution,
            recent_analyses=[
                SEOAnalysisResponse.model_validate(a) for a in recent.scalars().all()
            ],
        )
