"""Built-in roles and permission names."""

# Permission names
MANAGE_POSTS = "manage_posts"
MANAGE_PAGES = "manage_pages"
MANAGE_CATEGORIES = "manage_categories"
MANAGE_COMMENTS = "manage_comments"
MANAGE_MEDIA = "manage_media"
MANAGE_USERS = "manage_users"
MANAGE_ROLES = "manage_roles"
MANAGE_SETTINGS = "manage_settings"
MODERATE_COMMENTS = "moderate_comments"
PUBLISH_POSTS = "publish_posts"
EDIT_POSTS = "edit_posts"
DELETE_POSTS = "delete_posts"
READ_PRIVATE_POSTS = "read_private_posts"
READ_POSTS = "read_posts"

ADMINISTRATOR = "administrator"
EDITOR = "editor"
SUBSCRIBER = "subscriber"

_EDITOR_PERMISSIONS = [
    MANAGE_POSTS,
    MANAGE_PAGES,
    MANAGE_CATEGORIES,
    MANAGE_COMMENTS,
    MANAGE_MEDIA,
    MODERATE_COMMENTS,
    PUBLISH_POSTS,
    EDIT_POSTS,
    DELETE_POSTS,
    READ_PRIVATE_POSTS,
]

DEFAULT_ROLES: dict[str, dict[str, object]] = {
    ADMINISTRATOR: {
        "name": "Administrator",
        "description": "Full access to all features",
        "permissions": [
            *_EDITOR_PERMISSIONS,
            MANAGE_USERS,
            MANAGE_ROLES,
            MANAGE_SETTINGS,
        ],
    },
    EDITOR: {
        "name": "Editor",
        "description": "Can manage content but not users or settings",
        "permissions": list(_EDITOR_PERMISSIONS),
    },
    SUBSCRIBER: {
        "name": "Subscriber",
        "description": "Can read content and leave comments",
        "permissions": [READ_POSTS],
    },
}

DEFAULT_ROLE_SLUG = SUBSCRIBER
