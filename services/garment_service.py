"""
Garment service: the keyed record store.

Garments live in one Supabase table with a unique constraint on code.
Writes go through insert/update by code so callers can rely on the
constraint instead of read-then-decide.
"""

from datetime import datetime, timezone
from typing import Optional
import structlog

from postgrest.exceptions import APIError

from config import get_supabase_client, settings
from models.garment import GarmentCreate, GarmentResponse
from exceptions import (
    GarmentNotFoundError,
    GarmentCodeExistsError,
    DatabaseError
)

logger = structlog.get_logger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"

PAGE_SIZE = 1000


def is_unique_violation(error: Exception) -> bool:
    """True when a Supabase error is a duplicate-key conflict."""
    if isinstance(error, APIError) and error.code == UNIQUE_VIOLATION:
        return True
    return "duplicate key" in str(error).lower()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class GarmentService:
    """
    Garment persistence.

    Handles lookups, inserts, updates and photo assignment by code.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = settings.garments_table

    # ===================
    # READ OPERATIONS
    # ===================

    def get_by_code(self, code: str) -> Optional[GarmentResponse]:
        """
        Get a garment by code.

        Args:
            code: Garment code (trimmed, case-sensitive)

        Returns:
            GarmentResponse or None if not found
        """
        code = code.strip()
        logger.debug("getting_garment_by_code", code=code)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("code", code)
                .execute()
            )
        except Exception as e:
            logger.error("get_garment_by_code_failed", code=code, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            return None

        return GarmentResponse(**result.data[0])

    def get_all(self) -> list[GarmentResponse]:
        """
        Get every garment, ordered by code.

        Pages through the table so results are not cut at the API row limit.
        """
        logger.info("getting_garments")

        garments: list[GarmentResponse] = []
        offset = 0

        try:
            while True:
                result = (
                    self.db.table(self.table)
                    .select("*")
                    .order("code")
                    .range(offset, offset + PAGE_SIZE - 1)
                    .execute()
                )
                garments.extend(GarmentResponse(**row) for row in result.data)
                if len(result.data) < PAGE_SIZE:
                    break
                offset += PAGE_SIZE
        except Exception as e:
            logger.error("get_garments_failed", error=str(e))
            raise DatabaseError("select", str(e))

        logger.info("garments_retrieved", count=len(garments))
        return garments

    # ===================
    # WRITE OPERATIONS
    # ===================

    def insert(self, data: GarmentCreate) -> GarmentResponse:
        """
        Insert a new garment.

        Args:
            data: Garment fields

        Returns:
            Created GarmentResponse

        Raises:
            GarmentCodeExistsError: If the code is already stored
            DatabaseError: On any other storage failure
        """
        now = _now()
        insert_data = {
            **data.model_dump(),
            "created_at": now,
            "updated_at": now,
        }

        try:
            result = (
                self.db.table(self.table)
                .insert(insert_data)
                .execute()
            )
        except Exception as e:
            if is_unique_violation(e):
                raise GarmentCodeExistsError(data.code) from e
            logger.error("insert_garment_failed", code=data.code, error=str(e))
            raise DatabaseError("insert", str(e))

        garment = GarmentResponse(**result.data[0])
        logger.debug("garment_inserted", code=garment.code)
        return garment

    def create(self, data: GarmentCreate) -> GarmentResponse:
        """
        Create a single garment from the API.

        Raises:
            GarmentCodeExistsError: If code already exists
        """
        logger.info("creating_garment", code=data.code)

        garment = self.insert(data)

        logger.info("garment_created", garment_id=garment.id, code=garment.code)
        return garment

    def update_by_code(self, code: str, patch: dict) -> GarmentResponse:
        """
        Overwrite fields of an existing garment and bump updated_at.

        Args:
            code: Garment code
            patch: Columns to overwrite (never code, id or created_at)

        Returns:
            Updated GarmentResponse

        Raises:
            GarmentNotFoundError: If no garment has this code
            DatabaseError: On storage failure
        """
        update_data = {
            key: value for key, value in patch.items()
            if key not in ("id", "code", "created_at")
        }
        update_data["updated_at"] = _now()

        try:
            result = (
                self.db.table(self.table)
                .update(update_data)
                .eq("code", code)
                .execute()
            )
        except Exception as e:
            logger.error("update_garment_failed", code=code, error=str(e))
            raise DatabaseError("update", str(e))

        if not result.data:
            raise GarmentNotFoundError(code)

        logger.debug("garment_updated", code=code, fields=list(update_data.keys()))
        return GarmentResponse(**result.data[0])

    def update_image(self, code: str, image_url: str) -> Optional[GarmentResponse]:
        """
        Set the photo URL of a garment.

        Returns:
            Updated GarmentResponse, or None if the code is unknown
        """
        logger.info("updating_garment_image", code=code, image_url=image_url)

        try:
            return self.update_by_code(code, {"image_url": image_url})
        except GarmentNotFoundError:
            return None

    def delete_all(self) -> int:
        """
        Delete every garment.

        Returns:
            Number of deleted rows
        """
        logger.warning("deleting_all_garments")

        try:
            result = (
                self.db.table(self.table)
                .delete()
                .neq("code", "")
                .execute()
            )
        except Exception as e:
            logger.error("delete_all_garments_failed", error=str(e))
            raise DatabaseError("delete", str(e))

        deleted = len(result.data or [])
        logger.info("all_garments_deleted", count=deleted)
        return deleted


# Singleton instance for convenience
_garment_service: Optional[GarmentService] = None


def get_garment_service() -> GarmentService:
    """Get or create GarmentService instance."""
    global _garment_service
    if _garment_service is None:
        _garment_service = GarmentService()
    return _garment_service
