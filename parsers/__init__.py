"""
Excel and file parsers module.
"""

from parsers.garment_parser import (
    read_workbook_rows,
    parse_garment_rows,
    resolve_columns,
    GarmentSheetParseResult,
)

__all__ = [
    "read_workbook_rows",
    "parse_garment_rows",
    "resolve_columns",
    "GarmentSheetParseResult",
]
