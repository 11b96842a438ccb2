"""Forms API router.

Published forms accept anonymous submissions; building forms and reading
submissions requires `manage_pages`.
"""

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.auth import require_permission
from fastpress.core.database import get_session
from fastpress.core.roles import MANAGE_PAGES
from fastpress.schemas.form import (
    FormCreate,
    FormResponse,
    FormSubmit,
    FormUpdate,
    SubmissionResponse,
    SubmitResult,
)
from fastpress.services.form import FormService

router = APIRouter(prefix="/forms", tags=["Forms"])

manager = [Depends(require_permission(MANAGE_PAGES))]


@router.get("", response_model=list[FormResponse], dependencies=manager)
async def list_forms(
    status_filter: str | None = Query(None, alias="status", pattern="^(draft|published)$"),
    db: AsyncSession = Depends(get_session),
) -> list[FormResponse]:
    """List forms newest first."""
    return [FormResponse.model_validate(f) for f in await FormService.list_forms(db, status_filter)]


@router.get("/slug/{slug}", response_model=FormResponse)
async def get_form_by_slug(slug: str, db: AsyncSession = Depends(get_session)) -> FormResponse:
    """Get a form for rendering."""
    return FormResponse.model_validate(await FormService.get_by_slug(db, slug))


@router.post(
    "",
    response_model=FormResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=manager,
)
async def create_form(data: FormCreate, db: AsyncSession = Depends(get_session)) -> FormResponse:
    """Create a form.

    Raises:
        HTTPException: 409 if an explicit slug is already taken.
    """
    return FormResponse.model_validate(await FormService.create_form(db, data))


@router.patch("/{form_id}", response_model=FormResponse, dependencies=manager)
async def update_form(
    form_id: str, data: FormUpdate, db: AsyncSession = Depends(get_session)
) -> FormResponse:
    """Update a form."""
    return FormResponse.model_validate(await FormService.update_form(db, form_id, data))


@router.post(
    "/{form_id}/submit",
    response_model=SubmitResult,
    status_code=status.HTTP_201_CREATED,
)
async def submit_form(
    form_id: str,
    data: FormSubmit,
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> SubmitResult:
    """Submit a published form.

    Raises:
        HTTPException: 404 when the form is not published, 422 when required
            fields are missing.
    """
    form, submission = await FormService.submit(
        db,
        form_id,
        data.data,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return SubmitResult(submission_id=submission.id, message=form.confirmation_message)


@router.get(
    "/{form_id}/submissions",
    response_model=list[SubmissionResponse],
    dependencies=manager,
)
async def list_submissions(
    form_id: str,
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_session),
) -> list[SubmissionResponse]:
    """Submissions of a form, newest first."""
    submissions = await FormService.list_submissions(db, form_id, limit)
    return [SubmissionResponse.model_validate(s) for s in submissions]
