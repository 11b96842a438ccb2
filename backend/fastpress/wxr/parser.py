"""WordPress eXtended RSS (WXR) export parser.

Turns an export file into an `ImportBundle`:

- authors from `wp:author`
- categories and tags from the channel-level `wp:category` / `wp:tag`
- items by `wp:post_type`: posts, pages and attachments (other types such as
  nav_menu_item or revision are ignored)
- comments nested in each item
"""

import time
import xml.etree.ElementTree as ET
from datetime import UTC, datetime

from fastpress.core.logging import import_logger
from fastpress.schemas.wp_import import (
    ImportBundle,
    WPCategory,
    WPComment,
    WPItem,
    WPMedia,
    WPTag,
    WPUser,
)

CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"
EXCERPT_NS = "http://wordpress.org/export/1.2/excerpt/"
DC_NS = "http://purl.org/dc/elements/1.1/"
WP_NS_PREFIX = "http://wordpress.org/export/"
DEFAULT_WP_NS = "http://wordpress.org/export/1.2/"

WP_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
EMPTY_WP_DATE = "0000-00-00 00:00:00"


class WXRParseError(ValueError):
    """Raised when the input is not a readable WordPress export."""


def _detect_wp_namespace(channel: ET.Element) -> str:
    """Namespace URI of the `wp:` elements (differs between WXR versions)."""
    for element in channel.iter():
        tag = element.tag
        if isinstance(tag, str) and tag.startswith("{" + WP_NS_PREFIX):
            uri = tag[1 : tag.index("}")]
            if not uri.rstrip("/").endswith("excerpt"):
                return uri
    return DEFAULT_WP_NS


def _detect_excerpt_namespace(channel: ET.Element) -> str:
    for element in channel.iter():
        tag = element.tag
        if isinstance(tag, str) and tag.startswith("{") and "/excerpt/" in tag:
            return tag[1 : tag.index("}")]
    return EXCERPT_NS


def _text(element: ET.Element | None) -> str | None:
    """Stripped text of an element, None when absent or blank."""
    if element is None or element.text is None:
        return None
    value = element.text.strip()
    return value or None


def _raw_text(element: ET.Element | None) -> str | None:
    """Unstripped text of an element (HTML bodies keep their whitespace)."""
    if element is None:
        return None
    return element.text


def _int(value: str | None, default: int | None = None) -> int | None:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def parse_wp_date(value: str | None) -> datetime | None:
    """Parse a WordPress 'YYYY-MM-DD HH:MM:SS' timestamp as UTC."""
    if not value or value == EMPTY_WP_DATE:
        return None
    try:
        return datetime.strptime(value, WP_DATE_FORMAT).replace(tzinfo=UTC)
    except ValueError:
        return None


def comment_status(approved: str | None) -> str:
    """Map `wp:comment_approved` to a comment status."""
    if approved == "1":
        return "approved"
    if approved == "spam":
        return "spam"
    return "pending"


class _WXRReader:
    """Reads one parsed channel using the export's own namespaces."""

    def __init__(self, channel: ET.Element) -> None:
        self.channel = channel
        self.wp = _detect_wp_namespace(channel)
        self.excerpt = _detect_excerpt_namespace(channel)

    def wp_tag(self, name: str) -> str:
        return f"{{{self.wp}}}{name}"

    def wp_text(self, element: ET.Element, name: str) -> str | None:
        return _text(element.find(self.wp_tag(name)))

    def users(self) -> list[WPUser]:
        users = []
        for index, author in enumerate(self.channel.findall(self.wp_tag("author")), start=1):
            wp_id = _int(self.wp_text(author, "author_id"), index)
            login = self.wp_text(author, "author_login") or f"user{index}"
            users.append(
                WPUser(
                    wp_id=wp_id,
                    login=login,
                    email=self.wp_text(author, "author_email") or f"user{index}@example.com",
                    display_name=self.wp_text(author, "author_display_name") or login,
                    first_name=self.wp_text(author, "author_first_name"),
                    last_name=self.wp_text(author, "author_last_name"),
                )
            )
        return users

    def categories(self) -> list[WPCategory]:
        categories = []
        for element in self.channel.findall(self.wp_tag("category")):
            parent_slug = self.wp_text(element, "category_parent")
            parent_id = _int(parent_slug)
            categories.append(
                WPCategory(
                    wp_id=_int(self.wp_text(element, "term_id"), 0),
                    name=self.wp_text(element, "cat_name") or "Uncategorized",
                    slug=self.wp_text(element, "category_nicename") or "uncategorized",
                    description=self.wp_text(element, "category_description"),
                    parent=parent_id or None,
                    parent_slug=parent_slug if parent_id is None else None,
                )
            )
        return categories

    def tags(self) -> list[WPTag]:
        return [
            WPTag(
                wp_id=_int(self.wp_text(element, "term_id"), 0),
                name=self.wp_text(element, "tag_name") or "Untagged",
                slug=self.wp_text(element, "tag_slug") or "untagged",
            )
            for element in self.channel.findall(self.wp_tag("tag"))
        ]

    def item_terms(self, item: ET.Element, domain: str) -> list[str]:
        terms = []
        for element in item.findall("category"):
            if element.get("domain") != domain:
                continue
            nicename = element.get("nicename") or _text(element)
            if nicename and nicename not in terms:
                terms.append(nicename)
        return terms

    def post_meta(self, item: ET.Element) -> dict[str, str]:
        meta = {}
        for element in item.findall(self.wp_tag("postmeta")):
            key = self.wp_text(element, "meta_key")
            if key:
                meta[key] = _raw_text(element.find(self.wp_tag("meta_value"))) or ""
        return meta

    def item(self, item: ET.Element, wp_id: int, author_ids: dict[str, int]) -> WPItem:
        author_login = _text(item.find(f"{{{DC_NS}}}creator"))
        published_at = parse_wp_date(self.wp_text(item, "post_date_gmt")) or parse_wp_date(
            self.wp_text(item, "post_date")
        )
        meta = self.post_meta(item)
        return WPItem(
            wp_id=wp_id,
            title=_text(item.find("title")) or "Untitled",
            slug=self.wp_text(item, "post_name") or f"post-{wp_id}",
            content=_raw_text(item.find(f"{{{CONTENT_NS}}}encoded")) or "",
            excerpt=_raw_text(item.find(f"{{{self.excerpt}}}encoded")) or "",
            status=self.wp_text(item, "status") or "publish",
            author=author_ids.get(author_login) if author_login else None,
            author_login=author_login,
            published_at=published_at,
            categories=self.item_terms(item, "category"),
            tags=self.item_terms(item, "post_tag"),
            parent=_int(self.wp_text(item, "post_parent")) or None,
            menu_order=_int(self.wp_text(item, "menu_order"), 0),
            featured_media=_int(meta.get("_thumbnail_id")),
        )

    def attachment(self, item: ET.Element, wp_id: int) -> WPMedia:
        url = self.wp_text(item, "attachment_url") or ""
        meta = self.post_meta(item)
        filename = url.rsplit("/", 1)[-1] if url else ""
        return WPMedia(
            wp_id=wp_id,
            filename=filename or self.wp_text(item, "post_name") or f"attachment-{wp_id}",
            mime_type=self.wp_text(item, "post_mime_type") or "application/octet-stream",
            url=url,
            title=_text(item.find("title")),
            caption=_raw_text(item.find(f"{{{self.excerpt}}}encoded")) or None,
            alt=meta.get("_wp_attachment_image_alt") or None,
        )

    def comments(self, item: ET.Element, post_id: int) -> list[WPComment]:
        comments = []
        for element in item.findall(self.wp_tag("comment")):
            comment_type = self.wp_text(element, "comment_type")
            if comment_type in ("pingback", "trackback"):
                continue
            created_at = parse_wp_date(
                self.wp_text(element, "comment_date_gmt")
            ) or parse_wp_date(self.wp_text(element, "comment_date"))
            comments.append(
                WPComment(
                    wp_id=_int(self.wp_text(element, "comment_id"), 0),
                    post=post_id,
                    parent=_int(self.wp_text(element, "comment_parent")) or None,
                    author=self.wp_text(element, "comment_author") or "Anonymous",
                    email=self.wp_text(element, "comment_author_email") or "",
                    url=self.wp_text(element, "comment_author_url"),
                    content=_raw_text(element.find(self.wp_tag("comment_content"))) or "",
                    ip_address=self.wp_text(element, "comment_author_IP"),
                    created_at=created_at,
                    status=comment_status(self.wp_text(element, "comment_approved")),
                )
            )
        return comments


def parse_wxr(xml: str | bytes) -> ImportBundle:
    """Parse a WordPress export into an `ImportBundle`.

    Raises:
        WXRParseError: If the XML is malformed or has no rss/channel.
    """
    start_time = time.monotonic()
    import_logger.parse_start(len(xml))

    try:
        root = ET.fromstring(xml)
    except ET.ParseError as e:
        import_logger.parse_error(e)
        raise WXRParseError("Invalid WordPress export format") from e

    channel = root.find("channel") if root.tag == "rss" else None
    if channel is None:
        error = WXRParseError("Invalid WordPress export format")
        import_logger.parse_error(error)
        raise error

    reader = _WXRReader(channel)
    users = reader.users()
    author_ids = {user.login: user.wp_id for user in users}
    bundle = ImportBundle(users=users, categories=reader.categories(), tags=reader.tags())

    for item in channel.findall("item"):
        post_type = reader.wp_text(item, "post_type")
        wp_id = _int(reader.wp_text(item, "post_id"), 0)

        if post_type == "post":
            bundle.posts.append(reader.item(item, wp_id, author_ids))
        elif post_type == "page":
            bundle.pages.append(reader.item(item, wp_id, author_ids))
        elif post_type == "attachment":
            bundle.media.append(reader.attachment(item, wp_id))
            continue
        else:
            continue

        bundle.comments.extend(reader.comments(item, wp_id))

    import_logger.parse_complete(bundle.counts(), (time.monotonic() - start_time) * 1000)
    return bundle
