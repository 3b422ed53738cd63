"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    TimestampMixin,
)
from models.garment import (
    IMPORT_FIELDS,
    GarmentCreate,
    GarmentResponse,
    ImageUploadResponse,
)
from models.garment_import import (
    ImportRowErrorResponse,
    ReconciliationReport,
)

__all__ = [
    # Base
    "BaseSchema",
    "TimestampMixin",

    # Garment
    "IMPORT_FIELDS",
    "GarmentCreate",
    "GarmentResponse",
    "ImageUploadResponse",

    # Import
    "ImportRowErrorResponse",
    "ReconciliationReport",
]
