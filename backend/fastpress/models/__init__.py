"""Models layer - SQLAlchemy ORM models.

Models define the database schema and relationships.
All models inherit from the Base class defined in core.database.
"""

from fastpress.core.database import Base
from fastpress.models.comment import Comment, CommentStatus
from fastpress.models.form import Form, FormSubmission
from fastpress.models.media import Media
from fastpress.models.page import Page
from fastpress.models.post import ContentStatus, Post
from fastpress.models.role import Role
from fastpress.models.seo_analysis import SEOAnalysis
from fastpress.models.site_setting import SETTING_TYPES, SiteSetting
from fastpress.models.taxonomy import Category, Tag, post_categories, post_tags
from fastpress.models.user import AuthSession, User

__all__ = [
    "AuthSession",
    "Base",
    "Category",
    "Comment",
    "CommentStatus",
    "ContentStatus",
    "Form",
    "FormSubmission",
    "Media",
    "Page",
    "Post",
    "Role",
    "SEOAnalysis",
    "SETTING_TYPES",
    "SiteSetting",
    "Tag",
    "User",
    "post_categories",
    "post_tags",
]
