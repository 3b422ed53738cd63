"""
Garment schemas for validation and serialization.

A garment is keyed by its code. Every descriptive field is required; the
photo URL is optional and owned by the image upload flow.
"""

from pydantic import Field
from typing import Optional

from models.base import BaseSchema, TimestampMixin


# Fields an Excel import writes. image_url belongs to the photo upload flow.
IMPORT_FIELDS = (
    "code",
    "area",
    "category",
    "item_type",
    "model",
    "fabric",
    "color",
    "size",
    "embroidery_ref",
)


class GarmentCreate(BaseSchema):
    """
    Create or import a garment.

    Required: every field except image_url (non-empty after trim)
    """

    code: str = Field(
        ...,
        min_length=1,
        description="Garment code (unique identifier, scanned from the barcode)",
        examples=["X1", "7501234567890"]
    )
    area: str = Field(..., min_length=1, description="Production area")
    category: str = Field(
        ...,
        min_length=1,
        description="Dama/Caballero line",
        examples=["DAMA", "CAB"]
    )
    item_type: str = Field(..., min_length=1, description="Garment type (prenda)")
    model: str = Field(..., min_length=1, description="Model reference")
    fabric: str = Field(..., min_length=1, description="Fabric (tela)")
    color: str = Field(..., min_length=1, description="Color")
    size: str = Field(..., min_length=1, description="Size (talla)")
    embroidery_ref: str = Field(
        ...,
        min_length=1,
        description="Embroidery sheet reference (ficha de bordado)"
    )
    image_url: Optional[str] = Field(None, description="Photo URL")

    def import_patch(self) -> dict:
        """Fields a re-import overwrites on an existing garment."""
        return {name: getattr(self, name) for name in IMPORT_FIELDS if name != "code"}


class GarmentResponse(BaseSchema, TimestampMixin):
    """
    Garment response with all fields.

    Used for GET responses.
    """

    id: str = Field(..., description="Garment UUID")
    code: str
    area: str
    category: str
    item_type: str
    model: str
    fabric: str
    color: str
    size: str
    embroidery_ref: str
    image_url: Optional[str] = None


class ImageUploadResponse(BaseSchema):
    """Result of attaching a photo to a garment."""

    message: str
    image_url: str
    garment: GarmentResponse
