"""Block registry for page layouts.

A page layout is a list of block descriptors:

    {"blockType": "text", "id": "block_1712345678901_k3j2h1g0f", "title": "", "content": "..."}

Each block type is declared once here with its editable fields and default
props. The registry drives the block picker (available blocks), new block
creation and layout validation on page writes.
"""

import copy
import random
import string
import time
from dataclasses import asdict, dataclass, field
from typing import Any

VALID_FIELD_TYPES = frozenset(
    {"text", "textarea", "number", "boolean", "select", "color", "image"}
)
VALID_BLOCK_CATEGORIES = frozenset({"content", "layout", "media", "data"})


@dataclass(frozen=True)
class FieldOption:
    """Choice of a select field."""

    label: str
    value: str


@dataclass(frozen=True)
class BlockField:
    """Editable field of a block."""

    name: str
    label: str
    type: str
    required: bool = False
    default_value: Any = None
    placeholder: str | None = None
    options: tuple[FieldOption, ...] = ()


@dataclass(frozen=True)
class BlockConfig:
    """Declaration of a block type."""

    id: str
    label: str
    description: str
    icon: str
    category: str
    fields: tuple[BlockField, ...]
    default_props: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        return asdict(self)


@dataclass
class BlockValidation:
    """Result of validating one block."""

    is_valid: bool
    errors: list[str]


_ALIGNMENT_OPTIONS = (
    FieldOption("Left", "left"),
    FieldOption("Center", "center"),
    FieldOption("Right", "right"),
)

BLOCK_CONFIGS: dict[str, BlockConfig] = {
    "text": BlockConfig(
        id="text",
        label="Text",
        description="Simple text block with optional title",
        icon="📝",
        category="content",
        fields=(
            BlockField("title", "Title", "text", placeholder="Enter a title (optional)"),
            BlockField(
                "content",
                "Content",
                "textarea",
                required=True,
                placeholder="Enter your text content...",
            ),
        ),
        default_props={"title": "", "content": "", "disableContainer": False},
    ),
    "banner": BlockConfig(
        id="banner",
        label="Banner",
        description="Full-width announcement banner",
        icon="📣",
        category="layout",
        fields=(
            BlockField("heading", "Heading", "text", required=True),
            BlockField("subheading", "Subheading", "textarea"),
            BlockField("backgroundColor", "Background color", "color", default_value="#ffffff"),
            BlockField("alignment", "Alignment", "select", default_value="center", options=_ALIGNMENT_OPTIONS),
        ),
        default_props={"heading": "", "subheading": ""},
    ),
    "cta": BlockConfig(
        id="cta",
        label="Call to Action",
        description="Heading, text and a button linking elsewhere",
        icon="👉",
        category="content",
        fields=(
            BlockField("heading", "Heading", "text", required=True),
            BlockField("text", "Text", "textarea"),
            BlockField("buttonLabel", "Button label", "text", required=True, default_value="Learn more"),
            BlockField("buttonUrl", "Button URL", "text", required=True, placeholder="https://"),
        ),
        default_props={"heading": "", "text": ""},
    ),
    "feature": BlockConfig(
        id="feature",
        label="Feature",
        description="Feature highlight with image and description",
        icon="✨",
        category="content",
        fields=(
            BlockField("heading", "Heading", "text", required=True),
            BlockField("description", "Description", "textarea"),
            BlockField("image", "Image", "image"),
            BlockField("columns", "Columns", "number", default_value=3),
        ),
        default_props={"heading": "", "description": ""},
    ),
    "gallery": BlockConfig(
        id="gallery",
        label="Gallery",
        description="Grid of images",
        icon="🖼️",
        category="media",
        fields=(
            BlockField("title", "Title", "text"),
            BlockField("columns", "Columns", "number", default_value=3),
            BlockField("showCaptions", "Show captions", "boolean", default_value=False),
        ),
        default_props={"title": "", "images": []},
    ),
    "logos": BlockConfig(
        id="logos",
        label="Logos",
        description="Row of partner or customer logos",
        icon="🏷️",
        category="media",
        fields=(
            BlockField("title", "Title", "text"),
            BlockField(
                "designVersion",
                "Design version",
                "select",
                required=True,
                default_value="LOGOS2",
                options=(FieldOption("LOGOS2", "LOGOS2"), FieldOption("LOGOS3", "LOGOS3")),
            ),
        ),
        default_props={"title": "", "logos": []},
    ),
    "media": BlockConfig(
        id="media",
        label="Media",
        description="Single image or video from the media library",
        icon="🎞️",
        category="media",
        fields=(
            BlockField("media", "Media", "image", required=True),
            BlockField("caption", "Caption", "text"),
        ),
        default_props={"media": None, "caption": ""},
    ),
    "testimonial": BlockConfig(
        id="testimonial",
        label="Testimonial",
        description="Customer quote with attribution",
        icon="💬",
        category="content",
        fields=(
            BlockField("quote", "Quote", "textarea", required=True),
            BlockField("author", "Author", "text", required=True),
            BlockField("role", "Role", "text"),
            BlockField("avatar", "Avatar", "image"),
        ),
        default_props={"quote": "", "author": ""},
    ),
    "contact": BlockConfig(
        id="contact",
        label="Contact",
        description="Contact details with an embedded form",
        icon="✉️",
        category="data",
        fields=(
            BlockField("heading", "Heading", "text", default_value="Contact us"),
            BlockField("email", "Email", "text"),
            BlockField("phone", "Phone", "text"),
            BlockField("formSlug", "Form", "text", placeholder="Slug of a published form"),
        ),
        default_props={},
    ),
}


def get_block_config(block_type: str) -> BlockConfig | None:
    """Get a block declaration by type."""
    return BLOCK_CONFIGS.get(block_type)


def get_all_block_configs() -> list[BlockConfig]:
    """All registered block declarations."""
    return list(BLOCK_CONFIGS.values())


def get_blocks_by_category(category: str) -> list[BlockConfig]:
    """Block declarations in one category."""
    return [config for config in BLOCK_CONFIGS.values() if config.category == category]


def get_available_blocks() -> list[dict[str, str]]:
    """Summaries for a block picker."""
    return [
        {
            "id": config.id,
            "label": config.label,
            "description": config.description,
            "icon": config.icon,
            "category": config.category,
        }
        for config in BLOCK_CONFIGS.values()
    ]


def generate_block_id() -> str:
    """Generate a block id like `block_<epoch ms>_<9 random chars>`."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"block_{int(time.time() * 1000)}_{suffix}"


def create_default_block(block_type: str) -> dict[str, Any] | None:
    """Build a new block of `block_type` with defaults, or None if unknown."""
    config = get_block_config(block_type)
    if config is None:
        return None

    block: dict[str, Any] = {
        "blockType": block_type,
        "id": generate_block_id(),
        **copy.deepcopy(config.default_props),
    }
    for block_field in config.fields:
        if block_field.default_value is not None and block_field.name not in block:
            block[block_field.name] = copy.deepcopy(block_field.default_value)
    return block


def validate_block(block: Any) -> BlockValidation:
    """Check a block's type is registered and its required fields are filled."""
    if not isinstance(block, dict):
        return BlockValidation(is_valid=False, errors=["Block must be an object"])

    block_type = block.get("blockType")
    if not isinstance(block_type, str):
        return BlockValidation(is_valid=False, errors=["Block type must be a string"])

    config = get_block_config(block_type)
    if config is None:
        return BlockValidation(is_valid=False, errors=["Unknown block type"])

    errors = [
        f"{block_field.label} is required"
        for block_field in config.fields
        if block_field.required and block.get(block_field.name) in (None, "")
    ]
    return BlockValidation(is_valid=not errors, errors=errors)


def validate_layout(layout: list[Any]) -> list[dict[str, Any]]:
    """Validate every block in a layout.

    Returns:
        One entry per invalid block: {"index", "block_type", "errors"}.
    """
    problems: list[dict[str, Any]] = []
    for index, block in enumerate(layout):
        result = validate_block(block)
        if not result.is_valid:
            problems.append(
                {
                    "index": index,
                    "block_type": block.get("blockType") if isinstance(block, dict) else None,
                    "errors": result.errors,
                }
            )
    return problems
