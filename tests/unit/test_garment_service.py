"""
Unit tests for GarmentService.

Run: pytest tests/unit/test_garment_service.py -v
"""

import pytest

from services.garment_service import GarmentService, get_garment_service, is_unique_violation
from models.garment import GarmentCreate
from exceptions import GarmentCodeExistsError, GarmentNotFoundError, DatabaseError
from tests.factories import GarmentFactory


class TestGarmentServiceGetByCode:
    """Tests for GarmentService.get_by_code()"""

    def test_returns_garment(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("garments", [GarmentFactory.create(code="X1")])
        service = GarmentService()

        garment = service.get_by_code("X1")

        assert garment is not None
        assert garment.code == "X1"

    def test_trims_code(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("garments", [GarmentFactory.create(code="X1")])
        service = GarmentService()

        assert service.get_by_code("  X1 ") is not None

    def test_not_found_returns_none(self, mock_db):
        service = GarmentService()

        assert service.get_by_code("NOPE") is None

    def test_storage_fault_raises_database_error(self, mock_db, garments_table):
        garments_table.fail_on("select")
        service = GarmentService()

        with pytest.raises(DatabaseError) as exc_info:
            service.get_by_code("X1")

        assert exc_info.value.status_code == 500


class TestGarmentServiceGetAll:
    """Tests for GarmentService.get_all()"""

    def test_returns_all_ordered_by_code(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("garments", [
            GarmentFactory.create(code="B"),
            GarmentFactory.create(code="A"),
            GarmentFactory.create(code="C"),
        ])
        service = GarmentService()

        garments = service.get_all()

        assert [g.code for g in garments] == ["A", "B", "C"]

    def test_pages_past_row_limit(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("garments", GarmentFactory.create_batch(1005))
        service = GarmentService()

        garments = service.get_all()

        assert len(garments) == 1005

    def test_empty(self, mock_db):
        assert GarmentService().get_all() == []


class TestGarmentServiceInsert:
    """Tests for GarmentService.insert() and create()"""

    def test_insert_sets_timestamps(self, mock_db, garments_table):
        service = GarmentService()

        garment = service.insert(GarmentCreate(**GarmentFactory.fields(code="X1")))

        assert garment.code == "X1"
        assert garment.id
        assert garment.created_at == garment.updated_at
        assert len(garments_table.rows) == 1

    def test_insert_existing_code_raises_conflict(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("garments", [GarmentFactory.create(code="X1")])
        service = GarmentService()

        with pytest.raises(GarmentCodeExistsError) as exc_info:
            service.insert(GarmentCreate(**GarmentFactory.fields(code="X1")))

        assert exc_info.value.status_code == 409
        assert exc_info.value.code == "GARMENT_CODE_EXISTS"

    def test_insert_storage_fault_raises_database_error(self, mock_db, garments_table):
        garments_table.fail_on("insert")
        service = GarmentService()

        with pytest.raises(DatabaseError):
            service.insert(GarmentCreate(**GarmentFactory.fields()))

    def test_create_keeps_image_url(self, mock_db):
        service = GarmentService()
        data = GarmentCreate(**GarmentFactory.fields(code="X9"), image_url="/uploads/a.png")

        garment = service.create(data)

        assert garment.image_url == "/uploads/a.png"


class TestGarmentServiceUpdate:
    """Tests for GarmentService.update_by_code() and update_image()"""

    def test_update_overwrites_fields_and_protects_keys(self, mock_db, mock_supabase, garments_table):
        existing = GarmentFactory.create(code="X1", color="Azul")
        mock_supabase.set_table_data("garments", [existing])
        service = GarmentService()

        garment = service.update_by_code("X1", {
            "color": "Rojo",
            "code": "HACKED",
            "id": "other",
            "created_at": "2000-01-01T00:00:00+00:00",
        })

        assert garment.color == "Rojo"
        row = garments_table.rows[0]
        assert row["code"] == "X1"
        assert row["id"] == existing["id"]
        assert row["created_at"] == existing["created_at"]

    def test_update_unknown_code_raises(self, mock_db):
        with pytest.raises(GarmentNotFoundError):
            GarmentService().update_by_code("NOPE", {"color": "Rojo"})

    def test_update_image(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("garments", [GarmentFactory.create(code="X1")])

        garment = GarmentService().update_image("X1", "/uploads/garment-1.jpg")

        assert garment.image_url == "/uploads/garment-1.jpg"

    def test_update_image_unknown_code_returns_none(self, mock_db):
        assert GarmentService().update_image("NOPE", "/uploads/x.jpg") is None


class TestGarmentServiceDeleteAll:
    """Tests for GarmentService.delete_all()"""

    def test_delete_all(self, mock_db, mock_supabase, garments_table):
        mock_supabase.set_table_data("garments", GarmentFactory.create_batch(3))

        deleted = GarmentService().delete_all()

        assert deleted == 3
        assert garments_table.rows == []


class TestUniqueViolation:

    def test_detects_postgres_unique_violation(self):
        from postgrest.exceptions import APIError

        error = APIError({"message": "conflict", "code": "23505", "hint": None, "details": None})

        assert is_unique_violation(error) is True
        assert is_unique_violation(RuntimeError("timeout")) is False


class TestSingleton:

    def test_get_garment_service_returns_same_instance(self, mock_db):
        assert get_garment_service() is get_garment_service()
