"""Admin dashboard API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.auth import require_permission
from fastpress.core.database import get_session
from fastpress.core.roles import EDIT_POSTS
from fastpress.schemas.dashboard import DashboardResponse
from fastpress.services.dashboard import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get(
    "",
    response_model=DashboardResponse,
    dependencies=[Depends(require_permission(EDIT_POSTS))],
)
async def get_dashboard(db: AsyncSession = Depends(get_session)) -> DashboardResponse:
    """Content counts and the five most recent posts."""
    return await DashboardService.get_stats(db)
