"""Tests for SEO scoring.

Covers:
- Component scores (title, meta description, content, readability)
- Keyword matching with regex metacharacters
- Overall score weighting and recommendations
- Score buckets
- Stored analyses for posts (scores written back onto the post)
"""

import pytest
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.models.post import Post
from fastpress.services.seo import (
    SEOService,
    analyze,
    content_score,
    keyword_occurrences,
    meta_description_score,
    readability_score,
    score_bucket,
    title_score,
)


class TestKeywordOccurrences:
    def test_case_insensitive(self) -> None:
        assert keyword_occurrences("Python and PYTHON and python", "python") == 3

    def test_regex_characters_are_literal(self) -> None:
        assert keyword_occurrences("C++ beats c++ and c", "c++") == 2

    def test_empty_keyword(self) -> None:
        assert keyword_occurrences("anything", "") == 0


class TestComponentScores:
    def test_ideal_title(self) -> None:
        title = "A practical guide to Python testing"
        assert title_score(title, "python") == 100

    def test_short_title_with_keyword(self) -> None:
        assert title_score("Python tips", "python") == 80

    def test_title_without_keyword(self) -> None:
        assert title_score("Gardening tips", "python") == 40

    def test_ideal_meta_description(self) -> None:
        description = "Learn python " + "x" * 120
        assert meta_description_score(description, "python") == 100

    def test_missing_meta_description(self) -> None:
        assert meta_description_score("", "python") == 0

    def test_content_with_headings_and_images(self) -> None:
        content = "<h2>Intro</h2>" + "python " * 50 + '<img src="a.png">'
        assert content_score(content, "python") == 100

    def test_content_without_structure(self) -> None:
        assert content_score("python " * 50, "python") == 60

    def test_readability_short_sentences(self) -> None:
        assert readability_score("Short sentence here. Another one.") == 100

    def test_readability_long_sentence(self) -> None:
        sentence = " ".join(["word"] * 25) + "."
        assert readability_score(sentence) == 70

    def test_readability_medium_sentence(self) -> None:
        sentence = " ".join(["word"] * 18) + "."
        assert readability_score(sentence) == 85

    def test_readability_empty(self) -> None:
        assert readability_score("") == 0


class TestAnalyze:
    def test_empty_document(self) -> None:
        result = analyze("Python tips", None, "", "python")

        assert result.title_score == 80
        assert result.meta_description_score == 0
        assert result.content_score == 0
        assert result.readability_score == 0
        assert result.overall_score == 20
        assert result.keyword_density == 0.0
        assert result.warnings == []
        assert result.suggestions == [
            "Write a longer meta description (120-160 characters)",
            "Include your focus keyword in the meta description",
            "Add more content - aim for at least 300 words",
            "Use your focus keyword more frequently in the content",
            "Improve readability by using shorter sentences and paragraphs",
        ]

    def test_keyword_density(self) -> None:
        result = analyze("t", "d", "python is great python", "python")
        assert result.keyword_density == 50.0

    def test_long_title_warning(self) -> None:
        result = analyze("x" * 80, None, "", "python")
        assert "Title is too long, it may be truncated in search results" in result.warnings


class TestScoreBucket:
    @pytest.mark.parametrize(
        ("score", "bucket"),
        [
            (100, "excellent"),
            (90, "excellent"),
            (89, "good"),
            (70, "good"),
            (69, "needs_improvement"),
            (50, "needs_improvement"),
            (49, "poor"),
            (0, "poor"),
        ],
    )
    def test_thresholds(self, score: int, bucket: str) -> None:
        assert score_bucket(score) == bucket


class TestSEOService:
    """Tests for stored analyses."""

    @pytest.mark.asyncio
    async def test_analyze_post_writes_scores_back(self, db_session: AsyncSession) -> None:
        post = Post(title="Python tips", slug="python-tips", content="", status="draft")
        db_session.add(post)
        await db_session.flush()

        analysis = await SEOService.analyze_post(db_session, post.id, "python")

        assert analysis.post_id == post.id
        assert analysis.overall_score == 20
        assert post.focus_keyword == "python"
        assert post.seo_score == 20
        assert post.readability_score == 0

    @pytest.mark.asyncio
    async def test_reanalysis_replaces_row(self, db_session: AsyncSession) -> None:
        post = Post(title="Python tips", slug="python-tips", content="", status="draft")
        db_session.add(post)
        await db_session.flush()

        first = await SEOService.analyze_post(db_session, post.id, "python")
        second = await SEOService.analyze_post(db_session, post.id, "gardening")

        assert first.id == second.id
        assert second.focus_keyword == "gardening"
        overview = await SEOService.overview(db_session)
        assert overview.total_analyses == 1

    @pytest.mark.asyncio
    async def test_analyze_missing_post(self, db_session: AsyncSession) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await SEOService.analyze_post(db_session, "missing", "python")
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_overview_empty(self, db_session: AsyncSession) -> None:
        overview = await SEOService.overview(db_session)
        assert overview.total_analyses == 0
        assert overview.average_score == 0
        assert overview.recent_analyses == []
