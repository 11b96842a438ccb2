"""Site settings key/value store.

Values are persisted as text with a declared type and parsed on read:
- number: int when integral, else float
- boolean: "true" / "false"
- json: any JSON document
- string: as stored
"""

import json
import math
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.logging import get_logger
from fastpress.models.site_setting import SETTING_TYPES, SiteSetting

logger = get_logger(__name__)

COMMENTS_ENABLED_KEY = "commentsEnabledGlobally"


def infer_type(value: Any) -> str:
    """Infer the setting type of a Python value."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, (dict, list)):
        return "json"
    return "string"


def serialize_value(value: Any, value_type: str) -> str:
    """Serialize a value for storage under `value_type`."""
    if value_type == "boolean":
        if isinstance(value, str):
            return "true" if value.strip().lower() == "true" else "false"
        return "true" if value else "false"
    if value_type == "json":
        return json.dumps(value, allow_nan=False)
    if value_type == "number":
        if isinstance(value, bool):
            raise ValueError(f"Value {value!r} is not a number")
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Value {value!r} is not a number") from e
        if not math.isfinite(number):
            raise ValueError(f"Value {value!r} is not a finite number")
        return str(value).strip()


def parse_value(raw: str, value_type: str) -> Any:
    """Parse a stored value according to its type."""
    if value_type == "boolean":
        return raw == "true"
    if value_type == "number":
        number = float(raw)
        return int(number) if number.is_integer() and "." not in raw else number
    if value_type == "json":
        return json.loads(raw)
    return raw


class SiteSettingsService:
    """Service class for site settings."""

    @staticmethod
    async def get_record(db: AsyncSession, key: str) -> SiteSetting | None:
        """Get the stored row of a setting, or None when unset."""
        result = await db.execute(select(SiteSetting).where(SiteSetting.key == key))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_setting(db: AsyncSession, key: str) -> Any:
        """Get a parsed setting value, or None when unset."""
        setting = await SiteSettingsService.get_record(db, key)
        if setting is None:
            return None
        return parse_value(setting.value, setting.value_type)

    @staticmethod
    async def list_settings(db: AsyncSession) -> list[SiteSetting]:
        """List all settings ordered by key."""
        result = await db.execute(select(SiteSetting).order_by(SiteSetting.key))
        return list(result.scalars().all())

    @staticmethod
    async def set_setting(
        db: AsyncSession, key: str, value: Any, value_type: str | None = None
    ) -> SiteSetting:
        """Create or update a setting.

        Args:
            db: AsyncSession for database operations.
            key: Setting key.
            value: Python value to store.
            value_type: Explicit type; inferred from the value when omitted.

        Raises:
            HTTPException: 422 on an unknown type or a value that does not fit it.
        """
        resolved_type = value_type or infer_type(value)
        if resolved_type not in SETTING_TYPES:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Invalid setting type '{resolved_type}'. Must be one of: {', '.join(SETTING_TYPES)}",
            )
        try:
            raw = serialize_value(value, resolved_type)
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(e),
            ) from e

        setting = await SiteSettingsService.get_record(db, key)
        if setting is None:
            setting = SiteSetting(key=key, value=raw, value_type=resolved_type)
            db.add(setting)
        else:
            setting.value = raw
            setting.value_type = resolved_type

        await db.flush()
        await db.refresh(setting)
        logger.info("Site setting updated", extra={"key": key, "type": resolved_type})
        return setting

    @staticmethod
    async def delete_setting(db: AsyncSession, key: str) -> None:
        """Delete a setting.

        Raises:
            HTTPException: 404 if the setting does not exist.
        """
        setting = await SiteSettingsService.get_record(db, key)
        if setting is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Setting '{key}' not found",
            )
        await db.delete(setting)
        await db.flush()

    @staticmethod
    async def comments_enabled(db: AsyncSession) -> bool:
        """Whether visitors may comment (defaults to enabled)."""
        value = await SiteSettingsService.get_setting(db, COMMENTS_ENABLED_KEY)
        return True if value is None else bool(value)

    @staticmethod
    async def set_comments_enabled(db: AsyncSession, enabled: bool) -> SiteSetting:
        """Turn visitor comments on or off site-wide."""
        return await SiteSettingsService.set_setting(
            db, COMMENTS_ENABLED_KEY, enabled, "boolean"
        )
