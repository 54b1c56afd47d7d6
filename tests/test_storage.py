"""
Tests for the record store
"""

import json

import pytest

from core.storage import (
    APPRAISAL_REPORTS,
    COMPARABLES,
    PROPERTIES,
    RecordNotFoundError,
    Storage,
    UnknownTableError,
)


@pytest.fixture
def storage():
    return Storage()


@pytest.fixture
def persisted_storage(tmp_path):
    return Storage(persist_path=str(tmp_path / "data" / "store.json"))


class TestCrud:

    def test_create_assigns_identity(self, storage):
        record = storage.create(PROPERTIES, {"address": "1 Main St", "city": "Austin"})

        assert record["id"] == 1
        assert record["uuid"]
        assert record["createdAt"] == record["updatedAt"]

    def test_ids_are_serial_per_table(self, storage):
        storage.create(PROPERTIES, {"address": "a"})
        second = storage.create(PROPERTIES, {"address": "b"})
        report = storage.create(APPRAISAL_REPORTS, {"propertyId": 2})

        assert second["id"] == 2
        assert report["id"] == 1

    def test_callers_cannot_set_protected_fields(self, storage):
        record = storage.create(PROPERTIES, {"id": 99, "uuid": "x", "address": "a"})

        assert record["id"] == 1
        assert record["uuid"] != "x"

    def test_find_filters_and_ignores_none(self, storage):
        storage.create(PROPERTIES, {"city": "Austin", "state": "TX"})
        storage.create(PROPERTIES, {"city": "Dallas", "state": "TX"})

        assert len(storage.find(PROPERTIES, {"state": "TX", "city": None})) == 2
        assert [r["city"] for r in storage.find(PROPERTIES, {"city": "Dallas"})] == ["Dallas"]

    def test_returned_records_are_copies(self, storage):
        created = storage.create(PROPERTIES, {"features": {"pool": True}})
        created["features"]["pool"] = False

        assert storage.get(PROPERTIES, 1)["features"]["pool"] is True

    def test_update_merges_fields(self, storage):
        storage.create(PROPERTIES, {"city": "Austin", "bedrooms": 3})

        updated = storage.update(PROPERTIES, 1, {"bedrooms": 4, "id": 50})

        assert updated["id"] == 1
        assert updated["city"] == "Austin"
        assert updated["bedrooms"] == 4

    def test_update_missing_record(self, storage):
        with pytest.raises(RecordNotFoundError):
            storage.update(PROPERTIES, 1, {"city": "Austin"})

    def test_get_missing_record(self, storage):
        with pytest.raises(RecordNotFoundError) as exc_info:
            storage.get(PROPERTIES, 42)

        assert exc_info.value.record_id == 42
        assert storage.find_by_id(PROPERTIES, 42) is None

    def test_remove(self, storage):
        storage.create(PROPERTIES, {"city": "Austin"})

        assert storage.remove(PROPERTIES, 1) is True
        assert storage.remove(PROPERTIES, 1) is False
        assert storage.count(PROPERTIES) == 0

    def test_remove_where(self, storage):
        for report_id in (1, 1, 2):
            storage.create(COMPARABLES, {"reportId": report_id})

        assert storage.remove_where(COMPARABLES, {"reportId": 1}) == 2
        assert storage.count(COMPARABLES) == 1

    def test_unknown_table(self, storage):
        with pytest.raises(UnknownTableError):
            storage.find("invoices")


class TestPersistence:

    def test_round_trip_through_file(self, persisted_storage, tmp_path):
        persisted_storage.create(PROPERTIES, {"city": "Austin"})

        reloaded = Storage(persist_path=str(tmp_path / "data" / "store.json"))

        assert reloaded.get(PROPERTIES, 1)["city"] == "Austin"
        assert reloaded.create(PROPERTIES, {"city": "Waco"})["id"] == 2

    def test_corrupt_file_starts_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{ not json")

        storage = Storage(persist_path=str(path))

        assert storage.count(PROPERTIES) == 0

    def test_file_lists_every_table(self, persisted_storage, tmp_path):
        persisted_storage.create(PROPERTIES, {"city": "Austin"})

        data = json.loads((tmp_path / "data" / "store.json").read_text())

        assert set(data["tables"]) >= {PROPERTIES, APPRAISAL_REPORTS, COMPARABLES}
        assert data["next_ids"][PROPERTIES] == 2
