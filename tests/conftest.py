"""
Shared test fixtures.
"""

import os
import sys
import tempfile
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings are loaded at import time; provide test values first
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="garment-uploads-"))

import pytest
from unittest.mock import patch
from datetime import datetime, timezone
from typing import Generator, Optional
from uuid import uuid4

from postgrest.exceptions import APIError


# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """
    Mock Supabase query builder with chainable methods.

    Operates on the owning table's rows, so inserts and updates are visible
    to later queries.
    """

    def __init__(self, table: "MockSupabaseTable", operation: str, payload=None):
        self._table = table
        self._operation = operation
        self._payload = payload
        self._filters = []
        self._order = None
        self._range = None

    def select(self, *args, **kwargs):
        return self

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self._filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column, values):
        self._filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc: bool = False, **kwargs):
        self._order = (column, desc)
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def limit(self, count):
        self._range = (0, count - 1)
        return self

    def _matches(self, row: dict) -> bool:
        return all(check(row) for check in self._filters)

    def execute(self) -> MockSupabaseResponse:
        self._table.calls.append(self._operation)
        self._table.raise_if_failing(self._operation, self._payload, self._filters)

        if self._operation == "insert":
            return MockSupabaseResponse(data=self._table.insert_rows(self._payload))

        matched = [row for row in self._table.rows if self._matches(row)]

        if self._operation == "update":
            for row in matched:
                row.update(self._payload)
            return MockSupabaseResponse(data=[dict(row) for row in matched])

        if self._operation == "delete":
            self._table.rows = [row for row in self._table.rows if not self._matches(row)]
            return MockSupabaseResponse(data=[dict(row) for row in matched])

        if self._order:
            column, desc = self._order
            matched.sort(key=lambda row: row.get(column) or "", reverse=desc)
        total = len(matched)
        if self._range:
            start, end = self._range
            matched = matched[start:end + 1]
        return MockSupabaseResponse(data=[dict(row) for row in matched], count=total)


class MockSupabaseTable:
    """In-memory table enforcing a unique constraint on one column."""

    def __init__(self, name: str, unique_column: Optional[str] = None):
        self.name = name
        self.unique_column = unique_column
        self.rows: list[dict] = []
        self.calls: list[str] = []
        self._failures: list[tuple[str, Optional[str]]] = []

    def fail_on(self, operation: str, code: Optional[str] = None):
        """Make an operation raise a storage fault (optionally only for one code)."""
        self._failures.append((operation, code))

    def raise_if_failing(self, operation: str, payload, filters):
        for failing_operation, code in self._failures:
            if failing_operation != operation:
                continue
            if code is None or self._touches_code(operation, payload, filters, code):
                raise RuntimeError(f"connection reset during {operation}")

    def _touches_code(self, operation, payload, filters, code) -> bool:
        if operation == "insert":
            items = payload if isinstance(payload, list) else [payload]
            return any(item.get("code") == code for item in items)
        return all(check({"code": code}) for check in filters)

    def insert_rows(self, payload) -> list[dict]:
        items = payload if isinstance(payload, list) else [payload]
        inserted = []
        for item in items:
            if self.unique_column and any(
                row.get(self.unique_column) == item.get(self.unique_column)
                for row in self.rows
            ):
                raise APIError({
                    "message": f'duplicate key value violates unique constraint "{self.name}_{self.unique_column}_key"',
                    "code": "23505",
                    "hint": None,
                    "details": f"Key ({self.unique_column})=({item.get(self.unique_column)}) already exists.",
                })
            now = datetime.now(timezone.utc).isoformat()
            row = {"id": str(uuid4()), "created_at": now, "updated_at": now, **item}
            self.rows.append(row)
            inserted.append(dict(row))
        return inserted

    def select(self, *args, **kwargs):
        return MockSupabaseQuery(self, "select")

    def insert(self, data):
        return MockSupabaseQuery(self, "insert", data)

    def update(self, data):
        return MockSupabaseQuery(self, "update", dict(data))

    def delete(self):
        return MockSupabaseQuery(self, "delete")


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables = {"garments": MockSupabaseTable("garments", unique_column="code")}

    def set_table_data(self, table_name: str, data: list):
        """Seed rows for a table."""
        self.table(table_name).rows = [dict(row) for row in data]

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table."""
        if name not in self._tables:
            self._tables[name] = MockSupabaseTable(name)
        return self._tables[name]


# ===================
# FIXTURES
# ===================

@pytest.fixture(autouse=True)
def reset_service_singletons():
    """Drop cached service instances so each test sees its own mock client."""
    import services.garment_service as garment_service
    import services.garment_import_service as garment_import_service
    import services.image_service as image_service

    garment_service._garment_service = None
    garment_import_service._garment_import_service = None
    image_service._image_service = None
    yield
    garment_service._garment_service = None
    garment_import_service._garment_import_service = None
    image_service._image_service = None


@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("garments", [
                {"id": "1", "code": "X1", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("garments", [...])
            # Now any code using get_supabase_client() gets the mock
    """
    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("services.garment_service.get_supabase_client", return_value=mock_supabase):
            yield mock_supabase


@pytest.fixture
def garments_table(mock_supabase) -> MockSupabaseTable:
    """The in-memory garments table."""
    return mock_supabase.table("garments")


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client_with_mock_db(mock_db):
    """
    Create FastAPI test client with mocked database.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("garments", [...])
            response = test_client_with_mock_db.get("/api/garments")
    """
    from fastapi.testclient import TestClient
    from main import app

    with patch("main.check_connection", return_value={"status": "healthy", "garments_count": 0}):
        yield TestClient(app)
