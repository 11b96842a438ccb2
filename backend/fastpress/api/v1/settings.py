"""Site settings API router."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.auth import require_permission
from fastpress.core.database import get_session
from fastpress.core.roles import MANAGE_SETTINGS
from fastpress.models.site_setting import SiteSetting
from fastpress.schemas.site_settings import CommentsEnabledUpdate, SettingResponse, SettingWrite
from fastpress.services.site_settings import SiteSettingsService, parse_value

router = APIRouter(prefix="/settings", tags=["Settings"])

admin = [Depends(require_permission(MANAGE_SETTINGS))]


def _to_response(setting: SiteSetting) -> SettingResponse:
    return SettingResponse(
        key=setting.key,
        value=parse_value(setting.value, setting.value_type),
        type=setting.value_type,
        updated_at=setting.updated_at,
    )


@router.get("", response_model=list[SettingResponse], dependencies=admin)
async def list_settings(db: AsyncSession = Depends(get_session)) -> list[SettingResponse]:
    """All settings with parsed values."""
    return [_to_response(s) for s in await SiteSettingsService.list_settings(db)]


@router.get("/comments-enabled", response_model=CommentsEnabledUpdate)
async def get_comments_enabled(db: AsyncSession = Depends(get_session)) -> CommentsEnabledUpdate:
    """Whether visitors may comment."""
    return CommentsEnabledUpdate(enabled=await SiteSettingsService.comments_enabled(db))


@router.put("/comments-enabled", response_model=CommentsEnabledUpdate, dependencies=admin)
async def set_comments_enabled(
    data: CommentsEnabledUpdate, db: AsyncSession = Depends(get_session)
) -> CommentsEnabledUpdate:
    """Turn visitor comments on or off."""
    await SiteSettingsService.set_comments_enabled(db, data.enabled)
    return data


@router.get("/{key}", response_model=SettingResponse, dependencies=admin)
async def get_setting(key: str, db: AsyncSession = Depends(get_session)) -> SettingResponse:
    """Get one setting.

    Raises:
        HTTPException: 404 if the setting is unset.
    """
    setting = await SiteSettingsService.get_record(db, key)
    if setting is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Setting '{key}' not found",
        )
    return _to_response(setting)


@router.put("/{key}", response_model=SettingResponse, dependencies=admin)
async def put_setting(
    key: str, data: SettingWrite, db: AsyncSession = Depends(get_session)
) -> SettingResponse:
    """Create or replace a setting. The type is inferred when omitted."""
    return _to_response(await SiteSettingsService.set_setting(db, key, data.value, data.type))


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT, dependencies=admin)
async def delete_setting(key: str, db: AsyncSession = Depends(get_session)) -> None:
    """Delete a setting."""
    await SiteSettingsService.delete_setting(db, key)
