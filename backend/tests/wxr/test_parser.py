"""Tests for the WXR export parser.

Tests parsing of the sample export in tests/fixtures:
- Authors with email and display name fallbacks
- Categories with slug parents, tags
- Posts, pages and attachments by post type (other types ignored)
- Dates, featured images and term references
- Comments, skipping pingbacks and mapping approval states
- Invalid input
"""

from datetime import UTC, datetime

import pytest

from fastpress.schemas.wp_import import ImportBundle
from fastpress.wxr.parser import (
    WXRParseError,
    comment_status,
    parse_wp_date,
    parse_wxr,
)


@pytest.fixture
def bundle(sample_wxr: bytes) -> ImportBundle:
    return parse_wxr(sample_wxr)


class TestParseWxr:
    """Tests for parse_wxr against the sample export."""

    def test_counts(self, bundle: ImportBundle) -> None:
        assert bundle.counts() == {
            "users": 2,
            "categories": 2,
            "tags": 1,
            "posts": 3,
            "pages": 2,
            "comments": 5,
            "media": 1,
        }

    def test_authors(self, bundle: ImportBundle) -> None:
        admin, writer = bundle.users
        assert admin.wp_id == 1
        assert admin.login == "admin"
        assert admin.email == "Admin@Example.com"
        assert admin.display_name == "Site Admin"
        assert admin.first_name == "Ada"
        assert admin.last_name == "Lovelace"

        assert writer.email == "user2@example.com"
        assert writer.display_name == "writer"

    def test_categories(self, bundle: ImportBundle) -> None:
        by_slug = {c.slug: c for c in bundle.categories}
        assert by_slug["local"].parent is None
        assert by_slug["local"].parent_slug == "news"
        assert by_slug["news"].parent is None
        assert by_slug["news"].parent_slug is None
        assert by_slug["news"].description == "Company news"

    def test_tags(self, bundle: ImportBundle) -> None:
        (tag,) = bundle.tags
        assert (tag.wp_id, tag.name, tag.slug) == (20, "Python", "python")

    def test_post_fields(self, bundle: ImportBundle) -> None:
        post = next(p for p in bundle.posts if p.wp_id == 100)
        assert post.title == "Hello World"
        assert post.slug == "hello-world"
        assert post.status == "publish"
        assert post.author == 1
        assert post.author_login == "admin"
        assert post.content.startswith("<p>Welcome")
        assert post.excerpt == "Welcome"
        assert post.categories == ["news", "local"]
        assert post.tags == ["python"]
        assert post.featured_media == 50
        assert post.published_at == datetime(2020, 1, 2, 3, 4, 5, tzinfo=UTC)

    def test_post_defaults(self, bundle: ImportBundle) -> None:
        draft = next(p for p in bundle.posts if p.wp_id == 101)
        assert draft.slug == "post-101"
        assert draft.author == 2
        assert draft.featured_media is None
        # Empty GMT date falls back to the local date
        assert draft.published_at == datetime(2020, 2, 1, 10, 0, 0, tzinfo=UTC)

    def test_pages(self, bundle: ImportBundle) -> None:
        about, team = bundle.pages
        assert about.slug == "about"
        assert about.parent is None
        assert about.menu_order == 1
        assert team.parent == 200
        assert team.menu_order == 2

    def test_attachment(self, bundle: ImportBundle) -> None:
        (media,) = bundle.media
        assert media.wp_id == 50
        assert media.filename == "photo.jpg"
        assert media.mime_type == "image/jpeg"
        assert media.url == "https://old.example.com/wp-content/uploads/2020/01/photo.jpg"
        assert media.alt == "A photo"
        assert media.caption == "Sunset over the bay"

    def test_comments(self, bundle: ImportBundle) -> None:
        by_id = {c.wp_id: c for c in bundle.comments}
        assert set(by_id) == {1, 2, 4, 5, 6}

        first = by_id[1]
        assert first.post == 100
        assert first.parent is None
        assert first.status == "approved"
        assert first.email == "Reader@Example.com"
        assert first.ip_address == "203.0.113.5"
        assert first.created_at == datetime(2020, 1, 3, 14, 0, 0, tzinfo=UTC)

        assert by_id[2].parent == 1
        assert by_id[2].status == "pending"
        assert by_id[4].status == "spam"
        assert by_id[6].post == 200

    def test_accepts_text(self, sample_wxr: bytes) -> None:
        bundle = parse_wxr(sample_wxr.decode("utf-8"))
        assert len(bundle.posts) == 3


class TestInvalidInput:
    def test_malformed_xml(self) -> None:
        with pytest.raises(WXRParseError, match="Invalid WordPress export format"):
            parse_wxr("<rss><channel>")

    def test_not_rss(self) -> None:
        with pytest.raises(WXRParseError):
            parse_wxr("<feed><entry/></feed>")

    def test_rss_without_channel(self) -> None:
        with pytest.raises(WXRParseError):
            parse_wxr('<rss version="2.0"></rss>')

    def test_empty_channel(self) -> None:
        bundle = parse_wxr('<rss version="2.0"><channel><title>x</title></channel></rss>')
        assert bundle.counts() == dict.fromkeys(bundle.counts(), 0)


class TestHelpers:
    def test_parse_wp_date(self) -> None:
        assert parse_wp_date("2021-05-06 07:08:09") == datetime(2021, 5, 6, 7, 8, 9, tzinfo=UTC)

    @pytest.mark.parametrize("value", [None, "", "0000-00-00 00:00:00", "yesterday"])
    def test_parse_wp_date_empty_or_invalid(self, value: str | None) -> None:
        assert parse_wp_date(value) is None

    @pytest.mark.parametrize(
        ("approved", "status"),
        [("1", "approved"), ("spam", "spam"), ("0", "pending"), (None, "pending")],
    )
    def test_comment_status(self, approved: str | None, status: str) -> None:
        assert comment_status(approved) == status
