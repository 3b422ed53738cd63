"""
Image service: stores garment photos and links them by code.
"""

from pathlib import Path
from typing import Optional
import random
import time
import structlog

from config import settings
from models.garment import GarmentResponse
from services.garment_service import GarmentService, get_garment_service
from exceptions import GarmentNotFoundError, InvalidImageError

logger = structlog.get_logger(__name__)

URL_PREFIX = "/uploads"


class ImageService:
    """Photo storage on local disk, served under /uploads."""

    def __init__(
        self,
        garment_service: Optional[GarmentService] = None,
        upload_dir: Optional[Path] = None,
    ):
        self.garments = garment_service or get_garment_service()
        self.upload_dir = Path(upload_dir or settings.upload_dir)

    def attach(
        self,
        code: str,
        content: bytes,
        content_type: Optional[str],
        filename: Optional[str],
    ) -> tuple[GarmentResponse, str]:
        """
        Save a photo and set it as the garment's image.

        Args:
            code: Garment code
            content: Raw image bytes
            content_type: MIME type reported by the client
            filename: Original filename (only its extension is kept)

        Returns:
            Tuple of (updated garment, image URL)

        Raises:
            InvalidImageError: If not an image or too large
            GarmentNotFoundError: If the code is unknown (file is removed)
        """
        self._validate(content, content_type)

        path = self._store(content, filename)
        image_url = f"{URL_PREFIX}/{path.name}"

        try:
            garment = self.garments.update_image(code, image_url)
        except Exception:
            path.unlink(missing_ok=True)
            raise

        if garment is None:
            path.unlink(missing_ok=True)
            logger.warning("image_garment_not_found", code=code)
            raise GarmentNotFoundError(code)

        logger.info("garment_image_attached", code=code, image_url=image_url)
        return garment, image_url

    def _validate(self, content: bytes, content_type: Optional[str]) -> None:
        if not content_type or not content_type.startswith("image/"):
            raise InvalidImageError(
                "Only image files are allowed",
                details={"content_type": content_type}
            )
        if not content:
            raise InvalidImageError("Image file is empty")
        if len(content) > settings.max_image_size_bytes:
            raise InvalidImageError(
                "Image exceeds the maximum size",
                details={
                    "size": len(content),
                    "max_size": settings.max_image_size_bytes
                }
            )

    def _store(self, content: bytes, filename: Optional[str]) -> Path:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

        suffix = Path(filename).suffix.lower() if filename else ""
        unique = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
        path = self.upload_dir / f"garment-{unique}{suffix}"
        path.write_bytes(content)

        logger.debug("image_stored", path=str(path), size=len(content))
        return path


# Singleton instance for convenience
_image_service: Optional[ImageService] = None


def get_image_service() -> ImageService:
    """Get or create ImageService instance."""
    global _image_service
    if _image_service is None:
        _image_service = ImageService()
    return _image_service
