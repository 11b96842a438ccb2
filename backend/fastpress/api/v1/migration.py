"""WordPress migration API router.

Accepts a pre-parsed import bundle (as produced by `fastpress-migrate-wp`),
raw WXR text, or an uploaded WXR file. Administrator only.
"""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from fastpress.core.auth import require_role
from fastpress.core.config import get_settings
from fastpress.core.database import get_session
from fastpress.core.logging import get_logger
from fastpress.core.roles import ADMINISTRATOR
from fastpress.schemas.wp_import import BundleImportRequest, ImportResponse, XMLImportRequest
from fastpress.services.wp_import import bulk_import
from fastpress.wxr import WXRParseError, parse_wxr

logger = get_logger(__name__)

router = APIRouter(
    prefix="/migrate",
    tags=["Migration"],
    dependencies=[Depends(require_role(ADMINISTRATOR))],
)


def _check_export_size(size_bytes: int, source: str | None) -> None:
    max_bytes = get_settings().wxr_max_bytes
    if size_bytes > max_bytes:
        logger.warning(
            "WXR export rejected",
            extra={"source": source, "size_bytes": size_bytes, "max_bytes": max_bytes},
        )
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Export exceeds the {max_bytes} byte limit",
        )


async def _import_xml(db: AsyncSession, xml: str | bytes) -> ImportResponse:
    try:
        bundle = parse_wxr(xml)
    except WXRParseError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    return ImportResponse(summary=await bulk_import(db, bundle))


@router.post("/wp", response_model=ImportResponse)
async def import_bundle(
    data: BundleImportRequest, db: AsyncSession = Depends(get_session)
) -> ImportResponse:
    """Import a parsed WordPress bundle.

    Raises:
        HTTPException: 400 when the `data` field is missing.
    """
    if data.data is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing `data` field",
        )
    return ImportResponse(summary=await bulk_import(db, data.data))


@router.post("/wp/xml", response_model=ImportResponse)
async def import_xml(
    data: XMLImportRequest, db: AsyncSession = Depends(get_session)
) -> ImportResponse:
    """Parse and import WXR text.

    Raises:
        HTTPException: 400 when `xml` is missing or not a WordPress export,
            413 when too large.
    """
    if not data.xml:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing `xml` field",
        )
    _check_export_size(len(data.xml.encode("utf-8")), "xml")
    return await _import_xml(db, data.xml)


@router.post("/wp/upload", response_model=ImportResponse)
async def import_upload(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_session),
) -> ImportResponse:
    """Parse and import an uploaded WXR file.

    Raises:
        HTTPException: 400 for an empty or invalid file, 413 when too large.
    """
    content = await file.read()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is empty",
        )
    _check_export_size(len(content), file.filename)
    return await _import_xml(db, content)
