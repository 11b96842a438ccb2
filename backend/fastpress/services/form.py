"""Form builder service: form definitions and visitor submissions."""

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.logging import get_logger
from fastpress.models.form import Form, FormSubmission
from fastpress.schemas.form import FormCreate, FormUpdate
from fastpress.utils.slug import make_slug, slug_exists, unique_slug

logger = get_logger(__name__)

SUBMISSION_LIST_LIMIT = 50

SUBMISSION_RECEIVED = "received"
SUBMISSION_NEEDS_REVIEW = "needs_review"


def missing_required_fields(form: Form, data: dict) -> list[str]:
    """Names of required fields absent or blank in `data`."""
    missing = []
    for form_field in form.fields or []:
        if not form_field.get("required"):
            continue
        value = data.get(form_field["name"])
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(form_field["name"])
    return missing


class FormService:
    """Service class for Form operations."""

    @staticmethod
    async def list_forms(db: AsyncSession, status_filter: str | None = None) -> list[Form]:
        """List forms newest first."""
        stmt = select(Form)
        if status_filter is not None:
            stmt = stmt.where(Form.status == status_filter)
        result = await db.execute(stmt.order_by(Form.created_at.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def get_form(db: AsyncSession, form_id: str) -> Form:
        """Get a form by ID.

        Raises:
            HTTPException: 404 if form not found.
        """
        form = await db.get(Form, form_id)
        if form is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Form with id '{form_id}' not found",
            )
        return form

    @staticmethod
    async def get_by_slug(db: AsyncSession, slug: str) -> Form:
        """Get a form by slug.

        Raises:
            HTTPException: 404 if form not found.
        """
        result = await db.execute(select(Form).where(Form.slug == slug))
        form = result.scalar_one_or_none()
        if form is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Form '{slug}' not found",
            )
        return form

    @staticmethod
    async def create_form(db: AsyncSession, data: FormCreate) -> Form:
        """Create a form.

        Raises:
            HTTPException: 409 if an explicit slug is taken.
        """
        if data.slug:
            slug = make_slug(data.slug)
            if await slug_exists(db, Form, slug):
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Form slug '{slug}' already exists",
                )
        else:
            slug = await unique_slug(db, Form, make_slug(data.title, "form"))

        form = Form(
            title=data.title,
            slug=slug,
            description=data.description,
            fields=data.fields,
            submit_action=data.submit_action,
            confirmation_message=data.confirmation_message,
            status=data.status,
        )
        db.add(form)
        await db.flush()
        await db.refresh(form)
        logger.info("Form created", extra={"form_id": form.id, "slug": slug})
        return form

    @staticmethod
    async def update_form(db: AsyncSession, form_id: str, data: FormUpdate) -> Form:
        """Update a form."""
        form = await FormService.get_form(db, form_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if field in ("title", "fields", "submit_action", "status") and value is None:
                continue
            setattr(form, field, value)
        await db.flush()
        await db.refresh(form)
        return form

    @staticmethod
    async def submit(
        db: AsyncSession,
        form_id: str,
        data: dict,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> tuple[Form, FormSubmission]:
        """Store a submission of a published form.

        Enhanced forms mark submissions for follow-up.

        Raises:
            HTTPException: 404 when the form is missing or unpublished, 422 when
                required fields are missing.
        """
        form = await db.get(Form, form_id)
        if form is None or form.status != "published":
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Form not found or not published",
            )

        missing = missing_required_fields(form, data)
        if missing:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"message": "Missing required fields", "fields": missing},
            )

        submission = FormSubmission(
            form_id=form.id,
            data=data,
            status=SUBMISSION_NEEDS_REVIEW
            if form.submit_action == "enhanced"
            else SUBMISSION_RECEIVED,
            ip_address=ip_address,
            user_agent=user_agent[:1024] if user_agent else None,
        )
        db.add(submission)
        await db.flush()
        await db.refresh(submission)

        logger.info(
            "Form submitted",
            extra={"form_id": form.id, "submission_id": submission.id},
        )
        return form, submission

    @staticmethod
    async def list_submissions(
        db: AsyncSession, form_id: str, limit: int = SUBMISSION_LIST_LIMIT
    ) -> list[FormSubmission]:
        """Submissions of a form, newest first."""
        await FormService.get_form(db, form_id)
        result = await db.execute(
            select(FormSubmission)
            .where(FormSubmission.form_id == form_id)
            .order_by(FormSubmission.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
