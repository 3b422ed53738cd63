"""
Garment import service: reconciles a parsed spreadsheet with the store.

Each candidate is inserted; a duplicate-key conflict turns the insert into
an update of the existing garment. Any other storage failure only skips
that row. There is no whole-file transaction, so rows written before a
failure stay written.
"""

from collections import Counter
from io import BytesIO
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence, Union
import structlog

from config import settings
from models.garment_import import ImportRowErrorResponse, ReconciliationReport
from parsers.garment_parser import (
    GarmentCandidate,
    parse_garment_rows,
    read_workbook_rows,
)
from services.garment_service import GarmentService, get_garment_service
from exceptions import GarmentCodeExistsError

logger = structlog.get_logger(__name__)

CREATED = "created"
UPDATED = "updated"
SKIPPED = "skipped"


class GarmentImportService:
    """
    Excel bulk import.

    Candidates are reconciled in batches to bound the work done per step;
    the report is the same for any batch size.
    """

    def __init__(
        self,
        garment_service: Optional[GarmentService] = None,
        batch_size: Optional[int] = None,
        error_display_limit: Optional[int] = None,
    ):
        if batch_size is None:
            batch_size = settings.import_batch_size
        if error_display_limit is None:
            error_display_limit = settings.import_error_display_limit
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")

        self.garments = garment_service or get_garment_service()
        self.batch_size = batch_size
        self.error_display_limit = max(error_display_limit, 0)

    def import_workbook(self, file: Union[str, Path, BytesIO]) -> ReconciliationReport:
        """
        Import the first sheet of an Excel workbook.

        Raises:
            ExcelParseError, EmptyFileError, NoDataRowsError, MissingColumnError
        """
        rows = read_workbook_rows(file)
        return self.import_rows(rows)

    def import_rows(self, rows: Sequence[Sequence[Any]]) -> ReconciliationReport:
        """
        Import a raw tabular payload (row 0 = header).

        Fatal problems raise before anything is written. Row problems are
        collected in the report and never stop the import.

        Returns:
            ReconciliationReport
        """
        parsed = parse_garment_rows(rows)

        logger.info(
            "garment_import_started",
            total_rows=parsed.total_rows,
            candidates=len(parsed.candidates),
            batch_size=self.batch_size
        )

        outcomes: Counter = Counter()
        for batch_number, batch in enumerate(self._batches(parsed.candidates), start=1):
            batch_outcomes = Counter(self._reconcile(candidate) for candidate in batch)
            outcomes.update(batch_outcomes)
            logger.debug(
                "garment_import_batch_complete",
                batch=batch_number,
                size=len(batch),
                **batch_outcomes
            )

        report = ReconciliationReport(
            total_rows=parsed.total_rows,
            created=outcomes[CREATED],
            updated=outcomes[UPDATED],
            skipped=outcomes[SKIPPED],
            error_count=len(parsed.errors),
            errors=[
                ImportRowErrorResponse(row=e.row, message=e.message)
                for e in parsed.errors[:self.error_display_limit]
            ],
        )

        logger.info(
            "garment_import_complete",
            total_rows=report.total_rows,
            created=report.created,
            updated=report.updated,
            skipped=report.skipped,
            error_count=report.error_count
        )

        return report

    def _batches(self, candidates: list[GarmentCandidate]) -> Iterator[list[GarmentCandidate]]:
        for start in range(0, len(candidates), self.batch_size):
            yield candidates[start:start + self.batch_size]

    def _reconcile(self, candidate: GarmentCandidate) -> str:
        """Insert or update one candidate; returns its outcome."""
        garment = candidate.garment

        try:
            self.garments.insert(garment)
            return CREATED
        except GarmentCodeExistsError:
            pass
        except Exception as e:
            logger.error(
                "garment_row_skipped",
                row=candidate.row,
                code=garment.code,
                operation="insert",
                error=str(e)
            )
            return SKIPPED

        # Existing garment: overwrite imported fields, keep image_url
        try:
            self.garments.update_by_code(garment.code, garment.import_patch())
            return UPDATED
        except Exception as e:
            logger.error(
                "garment_row_skipped",
                row=candidate.row,
                code=garment.code,
                operation="update",
                error=str(e)
            )
            return SKIPPED


# Singleton instance for convenience
_garment_import_service: Optional[GarmentImportService] = None


def get_garment_import_service() -> GarmentImportService:
    """Get or create GarmentImportService instance."""
    global _garment_import_service
    if _garment_import_service is None:
        _garment_import_service = GarmentImportService()
    return _garment_import_service
