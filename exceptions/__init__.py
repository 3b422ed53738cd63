"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    BadRequestError,
    ValidationError,
    ConflictError,
    DuplicateError,
    DatabaseError,

    # Garments
    GarmentNotFoundError,
    GarmentCodeExistsError,

    # Excel import
    ExcelParseError,
    MissingColumnError,
    EmptyFileError,
    NoDataRowsError,
    NoFileError,
    InvalidFileTypeError,

    # Images
    InvalidImageError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "BadRequestError",
    "ValidationError",
    "ConflictError",
    "DuplicateError",
    "DatabaseError",

    # Garments
    "GarmentNotFoundError",
    "GarmentCodeExistsError",

    # Excel import
    "ExcelParseError",
    "MissingColumnError",
    "EmptyFileError",
    "NoDataRowsError",
    "NoFileError",
    "InvalidFileTypeError",

    # Images
    "InvalidImageError",
]
