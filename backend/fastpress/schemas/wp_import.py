"""Normalized WordPress export data and import results.

An `ImportBundle` is what the WXR parser produces and what the import
endpoint accepts as JSON. All `wp_id`/`parent`/`author` values are the
numeric identifiers of the source WordPress site.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class WPUser(BaseModel):
    """A WordPress author."""

    wp_id: int
    login: str
    email: str
    display_name: str
    first_name: str | None = None
    last_name: str | None = None


class WPCategory(BaseModel):
    """A WordPress category; the parent is referenced by legacy id or slug."""

    wp_id: int
    name: str
    slug: str
    description: str | None = None
    parent: int | None = None
    parent_slug: str | None = None


class WPTag(BaseModel):
    """A WordPress tag."""

    wp_id: int
    name: str
    slug: str


class WPItem(BaseModel):
    """A WordPress post or page.

    `categories` and `tags` hold term slugs (or legacy term ids).
    """

    wp_id: int
    title: str = "Untitled"
    slug: str
    content: str = ""
    excerpt: str = ""
    status: str = "publish"
    author: int | None = None
    author_login: str | None = None
    published_at: datetime | None = None
    categories: list[str | int] = Field(default_factory=list)
    tags: list[str | int] = Field(default_factory=list)
    parent: int | None = None
    menu_order: int = 0
    featured_media: int | None = None


class WPComment(BaseModel):
    """A WordPress comment attached to a post by legacy id."""

    wp_id: int
    post: int
    parent: int | None = None
    author: str = "Anonymous"
    email: str = ""
    url: str | None = None
    content: str = ""
    ip_address: str | None = None
    created_at: datetime | None = None
    status: str = "pending"


class WPMedia(BaseModel):
    """A WordPress attachment."""

    wp_id: int
    filename: str
    mime_type: str = "application/octet-stream"
    url: str = ""
    filesize: int = 0
    title: str | None = None
    caption: str | None = None
    alt: str | None = None


class ImportBundle(BaseModel):
    """Normalized content of a WordPress export."""

    users: list[WPUser] = Field(default_factory=list)
    categories: list[WPCategory] = Field(default_factory=list)
    tags: list[WPTag] = Field(default_factory=list)
    posts: list[WPItem] = Field(default_factory=list)
    pages: list[WPItem] = Field(default_factory=list)
    comments: list[WPComment] = Field(default_factory=list)
    media: list[WPMedia] = Field(default_factory=list)

    def counts(self) -> dict[str, int]:
        """Number of records per entity."""
        return {
            "users": len(self.users),
            "categories": len(self.categories),
            "tags": len(self.tags),
            "posts": len(self.posts),
            "pages": len(self.pages),
            "comments": len(self.comments),
            "media": len(self.media),
        }


class BundleImportRequest(BaseModel):
    """Body of POST /migrate/wp."""

    data: ImportBundle | None = None


class XMLImportRequest(BaseModel):
    """Body of POST /migrate/wp/xml."""

    xml: str | None = None


class EntityResult(BaseModel):
    """Created and reused record counts of one entity."""

    created: int = 0
    reused: int = 0


class ImportSummary(BaseModel):
    """Outcome of a bulk import."""

    users: EntityResult = Field(default_factory=EntityResult)
    categories: EntityResult = Field(default_factory=EntityResult)
    tags: EntityResult = Field(default_factory=EntityResult)
    media: EntityResult = Field(default_factory=EntityResult)
    posts: EntityResult = Field(default_factory=EntityResult)
    pages: EntityResult = Field(default_factory=EntityResult)
    comments: EntityResult = Field(default_factory=EntityResult)
    skipped_items: int = 0
    skipped_comments: int = 0


class ImportResponse(BaseModel):
    """Response of the import endpoints."""

    summary: ImportSummary
