"""Create the content schema: identity, media, taxonomy, posts, pages,
comments, settings, SEO analyses and forms.

Revision ID: 0001
Revises: None
Create Date: 2026-10-18

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=False),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _uuid_fk(name: str, target: str, ondelete: str, nullable: bool = True) -> sa.Column:
    return sa.Column(
        name,
        postgresql.UUID(as_uuid=False),
        sa.ForeignKey(target, ondelete=ondelete),
        nullable=nullable,
    )


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def _jsonb(name: str, default: str) -> sa.Column:
    return sa.Column(
        name,
        postgresql.JSONB(astext_type=sa.Text()),
        server_default=sa.text(f"'{default}'::jsonb"),
        nullable=False,
    )


def _index(table: str, column: str, unique: bool = False) -> None:
    op.create_index(op.f(f"ix_{table}_{column}"), table, [column], unique=unique)


def upgrade() -> None:
    """Create all content tables."""
    op.create_table(
        "roles",
        _id(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _jsonb("permissions", "[]"),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("roles", "slug", unique=True)

    op.create_table(
        "media",
        _id(),
        sa.Column("filename", sa.String(length=255), nullable=False),
        sa.Column(
            "mime_type",
            sa.String(length=255),
            server_default=sa.text("'application/octet-stream'"),
            nullable=False,
        ),
        sa.Column("filesize", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        sa.Column("alt", sa.String(length=1024), nullable=True),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("url", sa.String(length=2048), nullable=False),
        sa.Column("storage_key", sa.String(length=1024), nullable=True),
        sa.Column("focal_x", sa.Float(), nullable=True),
        sa.Column("focal_y", sa.Float(), nullable=True),
        sa.Column("wp_post_id", sa.Integer(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("media", "url")
    _index("media", "wp_post_id")
    _index("media", "created_at")

    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("user_login", sa.String(length=60), nullable=True),
        sa.Column("user_nicename", sa.String(length=60), nullable=True),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("user_url", sa.String(length=2048), nullable=True),
        _uuid_fk("avatar_id", "media.id", "SET NULL"),
        _uuid_fk("role_id", "roles.id", "SET NULL"),
        _jsonb("meta", "{}"),
        sa.Column("wp_user_id", sa.Integer(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("users", "email", unique=True)
    _index("users", "user_login", unique=True)
    _index("users", "role_id")
    _index("users", "wp_user_id")

    op.create_table(
        "auth_sessions",
        sa.Column("id", sa.String(length=255), nullable=False),
        _uuid_fk("user_id", "users.id", "CASCADE", nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("auth_sessions", "user_id")

    op.create_table(
        "categories",
        _id(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _uuid_fk("parent_id", "categories.id", "SET NULL"),
        sa.Column("meta_title", sa.String(length=255), nullable=True),
        sa.Column("meta_description", sa.Text(), nullable=True),
        sa.Column("wp_term_id", sa.Integer(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("categories", "slug", unique=True)
    _index("categories", "parent_id")
    _index("categories", "wp_term_id")

    op.create_table(
        "tags",
        _id(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("wp_term_id", sa.Integer(), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("tags", "slug", unique=True)
    _index("tags", "wp_term_id")

    op.create_table(
        "posts",
        _id(),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column(
            "status", sa.String(length=20), server_default=sa.text("'draft'"), nullable=False
        ),
        _uuid_fk("author_id", "users.id", "SET NULL"),
        _uuid_fk("featured_media_id", "media.id", "SET NULL"),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("meta_title", sa.String(length=255), nullable=True),
        sa.Column("meta_description", sa.Text(), nullable=True),
        sa.Column("focus_keyword", sa.String(length=255), nullable=True),
        sa.Column("seo_score", sa.Integer(), nullable=True),
        sa.Column("readability_score", sa.Integer(), nullable=True),
        sa.Column("canonical_url", sa.String(length=2048), nullable=True),
        sa.Column("no_index", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("no_follow", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("word_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("reading_time", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("wp_post_id", sa.Integer(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("posts", "slug", unique=True)
    _index("posts", "status")
    _index("posts", "author_id")
    _index("posts", "published_at")
    _index("posts", "wp_post_id")
    _index("posts", "created_at")

    op.create_table(
        "post_categories",
        _uuid_fk("post_id", "posts.id", "CASCADE", nullable=False),
        _uuid_fk("category_id", "categories.id", "CASCADE", nullable=False),
        sa.PrimaryKeyConstraint("post_id", "category_id"),
    )
    op.create_table(
        "post_tags",
        _uuid_fk("post_id", "posts.id", "CASCADE", nullable=False),
        _uuid_fk("tag_id", "tags.id", "CASCADE", nullable=False),
        sa.PrimaryKeyConstraint("post_id", "tag_id"),
    )

    op.create_table(
        "pages",
        _id(),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column(
            "status", sa.String(length=20), server_default=sa.text("'draft'"), nullable=False
        ),
        _uuid_fk("author_id", "users.id", "SET NULL"),
        _uuid_fk("parent_id", "pages.id", "SET NULL"),
        sa.Column("template", sa.String(length=100), nullable=True),
        sa.Column("menu_order", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("hero", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        _jsonb("layout", "[]"),
        sa.Column("meta_title", sa.String(length=255), nullable=True),
        sa.Column("meta_description", sa.Text(), nullable=True),
        _uuid_fk("meta_image_id", "media.id", "SET NULL"),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("wp_post_id", sa.Integer(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("pages", "slug", unique=True)
    _index("pages", "status")
    _index("pages", "parent_id")
    _index("pages", "wp_post_id")

    op.create_table(
        "comments",
        _id(),
        _uuid_fk("post_id", "posts.id", "CASCADE", nullable=False),
        _uuid_fk("parent_id", "comments.id", "CASCADE"),
        sa.Column("author_name", sa.String(length=255), nullable=False),
        sa.Column("author_email", sa.String(length=320), nullable=False),
        sa.Column("author_url", sa.String(length=2048), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "status", sa.String(length=20), server_default=sa.text("'pending'"), nullable=False
        ),
        sa.Column("user_agent", sa.String(length=1024), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("wp_comment_id", sa.Integer(), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("comments", "post_id")
    _index("comments", "parent_id")
    _index("comments", "status")
    _index("comments", "wp_comment_id")
    _index("comments", "created_at")

    op.create_table(
        "site_settings",
        _id(),
        sa.Column("key", sa.String(length=255), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column(
            "value_type",
            sa.String(length=20),
            server_default=sa.text("'string'"),
            nullable=False,
        ),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("site_settings", "key", unique=True)

    op.create_table(
        "seo_analyses",
        _id(),
        _uuid_fk("post_id", "posts.id", "CASCADE"),
        _uuid_fk("page_id", "pages.id", "CASCADE"),
        sa.Column("focus_keyword", sa.String(length=255), nullable=False),
        sa.Column("keyword_density", sa.Float(), server_default=sa.text("0"), nullable=False),
        sa.Column("title_score", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "meta_description_score", sa.Integer(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column("content_score", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "readability_score", sa.Integer(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column("overall_score", sa.Integer(), server_default=sa.text("0"), nullable=False),
        _jsonb("suggestions", "[]"),
        _jsonb("warnings", "[]"),
        _timestamp("analyzed_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post_id"),
        sa.UniqueConstraint("page_id"),
    )
    _index("seo_analyses", "overall_score")
    _index("seo_analyses", "analyzed_at")

    op.create_table(
        "forms",
        _id(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _jsonb("fields", "[]"),
        sa.Column(
            "submit_action",
            sa.String(length=50),
            server_default=sa.text("'basic'"),
            nullable=False,
        ),
        sa.Column("confirmation_message", sa.Text(), nullable=True),
        sa.Column(
            "status", sa.String(length=20), server_default=sa.text("'draft'"), nullable=False
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("forms", "slug", unique=True)

    op.create_table(
        "form_submissions",
        _id(),
        _uuid_fk("form_id", "forms.id", "CASCADE", nullable=False),
        _jsonb("data", "{}"),
        sa.Column(
            "status",
            sa.String(length=20),
            server_default=sa.text("'received'"),
            nullable=False,
        ),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.String(length=1024), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("form_submissions", "form_id")
    _index("form_submissions", "created_at")


def downgrade() -> None:
    """Drop all content tables."""
    for table in (
        "form_submissions",
        "forms",
        "seo_analyses",
        "site_settings",
        "comments",
        "pages",
        "post_tags",
        "post_categories",
        "posts",
        "tags",
        "categories",
        "auth_sessions",
        "users",
        "media",
        "roles",
    ):
        op.drop_table(table)
