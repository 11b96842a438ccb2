"""Pydantic schemas for SEO analysis and sitemap data."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AnalyzeRequest(BaseModel):
    """Request to analyse a post or page for a keyword."""

    focus_keyword: str = Field(..., max_length=255)

    @field_validator("focus_keyword")
    @classmethod
    def validate_focus_keyword(cls, v: str) -> str:
        """Strip and reject blank keywords."""
        v = v.strip()
        if not v:
            raise ValueError("Focus keyword cannot be empty")
        return v


class SEOAnalysisResponse(BaseModel):
    """Stored SEO analysis."""

    id: str
    post_id: str | None = None
    page_id: str | None = None
    focus_keyword: str
    keyword_density: float
    title_score: int
    meta_description_score: int
    content_score: int
    readability_score: int
    overall_score: int
    suggestions: list[str]
    warnings: list[str]
    analyzed_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ScoreDistribution(BaseModel):
    """Analyses bucketed by overall score."""

    excellent: int = 0
    good: int = 0
    needs_improvement: int = 0
    poor: int = 0


class SEOOverviewResponse(BaseModel):
    """Aggregate of all stored analyses."""

    total_analyses: int
    average_score: int
    score_distribution: ScoreDistribution
    recent_analyses: list[SEOAnalysisResponse]


class SitemapEntry(BaseModel):
    """One URL of the sitemap."""

    url: str
    last_modified: datetime
    change_freq: str
    priority: float
