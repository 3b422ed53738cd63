"""
Schemas for the Excel bulk-import report.
"""

from pydantic import BaseModel, Field


class ImportRowErrorResponse(BaseModel):
    """One rejected spreadsheet row."""

    row: int = Field(..., description="1-based sheet row (header is row 1)")
    message: str


class ReconciliationReport(BaseModel):
    """
    Outcome of one import call.

    errors holds at most the display limit; error_count is the true total.
    """

    total_rows: int = Field(0, description="Data rows in the file, header excluded")
    created: int = 0
    updated: int = 0
    skipped: int = 0
    error_count: int = 0
    errors: list[ImportRowErrorResponse] = Field(default_factory=list)
