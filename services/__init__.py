"""
Business logic services.

Each service handles one domain area.
"""

from services.garment_service import GarmentService, get_garment_service
from services.garment_import_service import (
    GarmentImportService,
    get_garment_import_service,
)
from services.image_service import ImageService, get_image_service

__all__ = [
    "GarmentService",
    "get_garment_service",
    "GarmentImportService",
    "get_garment_import_service",
    "ImageService",
    "get_image_service",
]
