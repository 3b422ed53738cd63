"""
Custom exception classes for the application.

Every error carries a stable code, a human-readable message and the HTTP
status the API answers with.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "GARMENT_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class BadRequestError(AppError):
    """Request rejected before processing (400)."""

    def __init__(
        self,
        message: str,
        code: str = "BAD_REQUEST",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=400,
            details=details
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with existing resource (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class DuplicateError(ConflictError):
    """Duplicate resource (409)."""

    def __init__(
        self,
        resource: str,
        field: str,
        value: str
    ):
        super().__init__(
            code=f"{resource.upper()}_{field.upper()}_EXISTS",
            message=f"{resource} with this {field} already exists",
            details={field: value}
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# GARMENT ERRORS
# ===================

class GarmentNotFoundError(NotFoundError):
    """Garment not found."""

    def __init__(self, code: str):
        super().__init__(
            resource="Garment",
            identifier=code,
            code="GARMENT_NOT_FOUND"
        )


class GarmentCodeExistsError(DuplicateError):
    """Garment code already exists."""

    def __init__(self, code: str):
        super().__init__(
            resource="Garment",
            field="code",
            value=code
        )


# ===================
# EXCEL IMPORT ERRORS
# ===================

class ExcelParseError(ValidationError):
    """Excel file parsing failed."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="EXCEL_PARSE_ERROR",
            message=message,
            details=details
        )


class MissingColumnError(ValidationError):
    """A required logical column has no matching header."""

    def __init__(self, column: str, label: str):
        self.column = column
        super().__init__(
            code="MISSING_COLUMN",
            message=f"Missing required column: {label}",
            details={"column": column, "label": label}
        )


class EmptyFileError(BadRequestError):
    """Uploaded workbook has no rows at all."""

    def __init__(self):
        super().__init__(
            code="EMPTY_FILE",
            message="The Excel file is empty"
        )


class NoDataRowsError(BadRequestError):
    """Uploaded workbook has a header but no data rows."""

    def __init__(self):
        super().__init__(
            code="NO_DATA",
            message="The Excel file has no data rows"
        )


class NoFileError(BadRequestError):
    """Multipart request carried no file."""

    def __init__(self, field: str = "file"):
        super().__init__(
            code="NO_FILE",
            message="No file provided",
            details={"field": field}
        )


class InvalidFileTypeError(BadRequestError):
    """Uploaded file is not an accepted workbook type."""

    def __init__(self, filename: Optional[str], allowed: list[str]):
        super().__init__(
            code="INVALID_FILE_TYPE",
            message=f"File type not supported, expected one of: {', '.join(allowed)}",
            details={"filename": filename, "allowed": allowed}
        )


# ===================
# IMAGE ERRORS
# ===================

class InvalidImageError(BadRequestError):
    """Uploaded photo is not an image or is too large."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="INVALID_IMAGE",
            message=message,
            details=details
        )
