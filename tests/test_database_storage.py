import re
import uuid

import pytest

from rms.errors import Conflict, ConnectionFailure, InvalidInput
from rms.storage.database_provider import DatabaseStorage
from rms.storage.entities import EntitySpec


def test_connect_provisions_default_admin(database):
    admin = database.get_user_by_username("admin")
    assert admin["role"] == "admin"
    assert uuid.UUID(admin["id"])
    # already there, nothing to do
    assert database.ensure_default_admin() is None
    assert len(database.get_all_users()) == 1


def test_connect_failure_returns_false():
    storage = DatabaseStorage()
    assert storage.connect("sqlite:////nonexistent-dir/records/rms.db") is False
    assert not storage.is_connected


def test_operations_before_connect_raise():
    storage = DatabaseStorage()
    with pytest.raises(ConnectionFailure):
        storage.get_cases()


def test_random_business_numbers(database):
    case = database.create_case({"title": "a"})
    entry = database.create_ob_entry({"type": "t", "description": "d"})
    assert re.fullmatch(r"CASE-2025-[0-9A-Z]{6}", case["case_number"])
    assert re.fullmatch(r"OB-2025-[0-9A-Z]{6}", entry["ob_number"])


def test_ids_are_uuid_strings(database):
    case = database.create_case({"title": "a"})
    assert str(uuid.UUID(case["id"])) == case["id"]
    assert database.get_case(uuid.UUID(case["id"]))["id"] == case["id"]


def test_metadata_column_round_trips(database):
    geofile = database.create_geofile({"filename": "m.kml", "file_type": "kml", "metadata": {"creator": "unit"}})
    assert geofile["metadata"] == '{"creator": "unit"}'
    assert database.get_geofile(geofile["id"])["metadata"] == '{"creator": "unit"}'


def test_disconnect(database):
    database.disconnect()
    assert not database.is_connected
    with pytest.raises(ConnectionFailure):
        database.get_user_by_username("admin")


def test_not_null_violation_is_invalid_input(database, monkeypatch):
    # let the NULL reach the database constraint
    monkeypatch.setattr(EntitySpec, "check_required", lambda self, record, partial=False: None)
    case = database.create_case({"title": "Burglary"})
    with pytest.raises(InvalidInput):
        database.update_case(case["id"], {"status": None})
    assert database.get_case(case["id"])["status"] == "open"


def test_unique_violation_carries_value(database):
    database.create_license_plate({"plate_number": "KDA-001"})
    with pytest.raises(Conflict) as exc:
        database.create_license_plate({"plate_number": "KDA-001"})
    assert exc.value.field == "plate_number"
    assert exc.value.value == "KDA-001"
