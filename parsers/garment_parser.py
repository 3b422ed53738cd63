"""
Garment Excel parser for bulk imports.

Turns the first sheet of an uploaded workbook into validated garment
candidates. Header order is free: each logical column is located by
label containment, so "CÓDIGO DE BARRAS" still binds to the code column.

Pipeline per data row:
    normalize -> empty code? (silent skip) -> duplicate in file? (error)
    -> schema validation (error) -> candidate
"""

from dataclasses import dataclass, field, asdict
from io import BytesIO
from pathlib import Path
from typing import Any, Optional, Sequence, Union
import unicodedata
import structlog

import pandas as pd
from pydantic import ValidationError as SchemaValidationError

from exceptions import (
    ExcelParseError,
    MissingColumnError,
    EmptyFileError,
    NoDataRowsError,
)
from models.garment import GarmentCreate

logger = structlog.get_logger(__name__)


# ===================
# COLUMN LABELS
# ===================

# Logical column -> header labels, canonical label first.
# Unaccented spellings are only tried when the canonical label matches nothing.
COLUMN_LABELS: dict[str, tuple[str, ...]] = {
    "code": ("CÓDIGO", "CODIGO"),
    "area": ("ÁREA", "AREA"),
    "category": ("DAMA/CAB",),
    "item_type": ("PRENDA",),
    "model": ("MODELO",),
    "fabric": ("TELA",),
    "color": ("COLOR",),
    "size": ("TALLA",),
    "embroidery_ref": ("FICHA DE BORDADO",),
}

HEADER_ROW_NUMBER = 1


# ===================
# DATA CLASSES
# ===================

@dataclass
class ImportRow:
    """One spreadsheet row resolved against the column map."""
    row_number: int
    code: str
    area: str
    category: str
    item_type: str
    model: str
    fabric: str
    color: str
    size: str
    embroidery_ref: str

    def fields(self) -> dict[str, str]:
        data = asdict(self)
        data.pop("row_number")
        return data


@dataclass
class ImportRowError:
    """Single rejected row."""
    row: int
    message: str

    def __str__(self) -> str:
        return f"Row {self.row}: {self.message}"


@dataclass
class GarmentCandidate:
    """Validated row eligible for storage."""
    row: int
    garment: GarmentCreate


@dataclass
class GarmentSheetParseResult:
    """Result of parsing a garment sheet."""
    total_rows: int = 0
    candidates: list[GarmentCandidate] = field(default_factory=list)
    errors: list[ImportRowError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True if no row was rejected."""
        return len(self.errors) == 0


# ===================
# WORKBOOK READING
# ===================

def read_workbook_rows(file: Union[str, Path, BytesIO]) -> list[list[Any]]:
    """
    Read the first sheet of a workbook as raw rows.

    Args:
        file: File path (str/Path) or file-like object (BytesIO)

    Returns:
        List of rows, each a list of cell values (blank cells are None)

    Raises:
        ExcelParseError: If the file cannot be read as a workbook
    """
    logger.info("reading_workbook", file_type=type(file).__name__)

    try:
        excel = pd.ExcelFile(file, engine="openpyxl")
        if not excel.sheet_names:
            return []
        sheet_name = excel.sheet_names[0]
        df = excel.parse(
            sheet_name,
            header=None,
            dtype=object,
            keep_default_na=False,
            na_filter=False,
        )
    except Exception as e:
        logger.error("excel_read_failed", error=str(e))
        raise ExcelParseError(
            message="Failed to read Excel file",
            details={"original_error": str(e)}
        ) from e

    rows = [
        [None if _is_blank(cell) or cell == "" else cell for cell in row]
        for row in df.itertuples(index=False, name=None)
    ]

    logger.debug("workbook_read", sheet=sheet_name, rows=len(rows))
    return rows


# ===================
# COLUMN RESOLUTION
# ===================

def resolve_columns(header: Sequence[Any]) -> dict[str, int]:
    """
    Map every logical column to the index of its header cell.

    A header cell matches when its uppercased, trimmed text contains the
    label. The first matching cell wins.

    Raises:
        MissingColumnError: If a logical column matches no header
    """
    headers = [unicodedata.normalize("NFC", cell_to_str(cell)).upper() for cell in header]
    columns: dict[str, int] = {}

    for column, labels in COLUMN_LABELS.items():
        index = _find_header(headers, labels)
        if index is None:
            logger.warning("missing_column", column=column, headers=headers)
            raise MissingColumnError(column, labels[0])
        columns[column] = index

    return columns


def _find_header(headers: list[str], labels: tuple[str, ...]) -> Optional[int]:
    for label in labels:
        for index, text in enumerate(headers):
            if label in text:
                return index
    return None


# ===================
# ROW HANDLING
# ===================

def normalize_row(
    row: Sequence[Any],
    columns: dict[str, int],
    row_number: int
) -> Optional[ImportRow]:
    """
    Resolve one data row against the column map.

    Missing or blank cells become "". Returns None when the code is empty,
    which is how trailing blank rows are ignored.
    """
    values = {
        column: cell_to_str(row[index]) if index < len(row) else ""
        for column, index in columns.items()
    }

    if not values["code"]:
        return None

    return ImportRow(row_number=row_number, **values)


def validate_row(row: ImportRow) -> GarmentCreate:
    """
    Enforce the garment schema on a normalized row.

    Raises:
        pydantic.ValidationError: listing every failing field
    """
    return GarmentCreate(**row.fields())


def format_validation_error(error: SchemaValidationError) -> str:
    """Render a schema failure as "field: reason, field: reason"."""
    return ", ".join(
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}"
        for item in error.errors()
    )


def parse_garment_rows(rows: Sequence[Sequence[Any]]) -> GarmentSheetParseResult:
    """
    Parse a raw tabular payload into garment candidates.

    Args:
        rows: Ordered rows of cells, row 0 holds the header labels

    Returns:
        GarmentSheetParseResult with candidates in file order and row errors

    Raises:
        EmptyFileError: If there are no rows at all
        NoDataRowsError: If there is only a header row
        MissingColumnError: If a required column is absent
    """
    if not rows:
        raise EmptyFileError()

    header, data_rows = rows[0], rows[1:]
    if not data_rows:
        raise NoDataRowsError()

    columns = resolve_columns(header)
    logger.info("parsing_garment_sheet", rows=len(data_rows), columns=columns)

    result = GarmentSheetParseResult(total_rows=len(data_rows))
    seen_codes: set[str] = set()

    for row_number, raw in enumerate(data_rows, start=HEADER_ROW_NUMBER + 1):
        row = normalize_row(raw, columns, row_number)
        if row is None:
            continue

        # Duplicates are reported before schema errors
        if row.code in seen_codes:
            result.errors.append(ImportRowError(
                row=row_number,
                message=f"duplicate code '{row.code}' in file"
            ))
            logger.debug("duplicate_code_in_file", row=row_number, code=row.code)
            continue
        seen_codes.add(row.code)

        try:
            garment = validate_row(row)
        except SchemaValidationError as e:
            result.errors.append(ImportRowError(
                row=row_number,
                message=format_validation_error(e)
            ))
            continue

        result.candidates.append(GarmentCandidate(row=row_number, garment=garment))

    logger.info(
        "garment_sheet_parsed",
        total_rows=result.total_rows,
        candidates=len(result.candidates),
        error_count=len(result.errors)
    )

    return result


# ===================
# HELPERS
# ===================

def cell_to_str(value: Any) -> str:
    """Convert a cell to trimmed text. Whole-number floats drop the ".0"."""
    if _is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
