"""
Garment API routes.

Lookup by code (scanner and manual search), Excel bulk import and
photo upload.
"""

from io import BytesIO
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, UploadFile, File
from fastapi.responses import JSONResponse
import structlog

from models.garment import GarmentCreate, GarmentResponse, ImageUploadResponse
from models.garment_import import ReconciliationReport
from services.garment_service import get_garment_service
from services.garment_import_service import get_garment_import_service
from services.image_service import get_image_service
from exceptions import (
    AppError,
    GarmentNotFoundError,
    NoFileError,
    InvalidFileTypeError,
)

logger = structlog.get_logger(__name__)

router = APIRouter()

EXCEL_EXTENSIONS = [".xlsx", ".xlsm"]


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.get("", response_model=list[GarmentResponse])
async def list_garments():
    """List every garment ordered by code."""
    try:
        return get_garment_service().get_all()
    except Exception as e:
        return handle_error(e)


@router.post("", response_model=GarmentResponse, status_code=201)
async def create_garment(data: GarmentCreate):
    """
    Create a single garment.

    Raises:
        409: Code already exists
        422: Validation error
    """
    try:
        return get_garment_service().create(data)
    except Exception as e:
        return handle_error(e)


@router.post("/upload", response_model=ReconciliationReport)
async def upload_garments(file: Optional[UploadFile] = File(None)):
    """
    Bulk import garments from an Excel file.

    New codes are created, known codes updated (photos are kept).
    Row problems are listed in the report; the rest of the file still imports.

    Raises:
        400: No file, wrong file type, empty file or no data rows
        422: Unreadable workbook or missing required column
    """
    try:
        if file is None or not file.filename:
            raise NoFileError("file")

        if Path(file.filename).suffix.lower() not in EXCEL_EXTENSIONS:
            raise InvalidFileTypeError(file.filename, EXCEL_EXTENSIONS)

        logger.info(
            "garment_upload_started",
            filename=file.filename,
            content_type=file.content_type
        )

        content = await file.read()
        return get_garment_import_service().import_workbook(BytesIO(content))

    except Exception as e:
        if isinstance(e, AppError):
            logger.warning("garment_upload_rejected", code=e.code, message=e.message)
        return handle_error(e)


@router.get("/{code}", response_model=GarmentResponse)
async def get_garment(code: str):
    """
    Get a garment by code.

    Raises:
        404: Garment not found
    """
    try:
        garment = get_garment_service().get_by_code(code)
        if not garment:
            raise GarmentNotFoundError(code)
        return garment
    except Exception as e:
        return handle_error(e)


@router.post("/{code}/image", response_model=ImageUploadResponse)
async def upload_garment_image(code: str, image: Optional[UploadFile] = File(None)):
    """
    Attach a photo to a garment.

    Raises:
        400: No image, not an image, or too large
        404: Garment not found
    """
    try:
        if image is None or not image.filename:
            raise NoFileError("image")

        content = await image.read()
        garment, image_url = get_image_service().attach(
            code,
            content,
            content_type=image.content_type,
            filename=image.filename,
        )

        return ImageUploadResponse(
            message="Image uploaded successfully",
            image_url=image_url,
            garment=garment
        )
    except Exception as e:
        return handle_error(e)
