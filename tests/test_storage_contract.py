"""
Behaviour both backends must share. Every test runs against the in-memory
store and the SQLAlchemy store (SQLite in memory).
"""
import json
from datetime import datetime

import pytest

from rms.errors import Conflict, InvalidId, InvalidInput, NotFound


def _geofile(**overrides):
    data = {
        "filename": "alpha.kml",
        "file_type": "kml",
        "description": "alpha patrol routes",
        "access_level": "internal",
    }
    data.update(overrides)
    return data


# ---------- generic CRUD ----------
def test_create_then_get_returns_generated_fields(storage):
    case = storage.create_case({"title": "Stolen bicycle", "description": "Taken from rack"})

    assert case["id"] is not None
    assert case["case_number"].startswith("CASE-2025-")
    assert case["status"] == "open"
    assert case["priority"] == "medium"
    assert case["created_at"] == case["updated_at"]
    assert storage.get_case(case["id"]) == case
    assert storage.get_case_by_number(case["case_number"]) == case


def test_generated_fields_in_input_are_ignored(storage):
    case = storage.create_case({"title": "x", "case_number": "MINE", "id": 42})
    assert case["case_number"] != "MINE"


def test_unknown_field_is_rejected(storage):
    with pytest.raises(InvalidInput):
        storage.create_case({"title": "x", "colour": "blue"})


def test_get_missing_returns_none(storage, missing_id):
    assert storage.get_case(missing_id) is None
    assert storage.get_geofile(missing_id) is None


def test_malformed_id_raises(storage):
    with pytest.raises(InvalidId):
        storage.get_case("not-an-id")


def test_update_merges_and_advances_updated_at(storage, clock):
    case = storage.create_case({"title": "Vandalism", "location": "Park"})
    updated = storage.update_case(case["id"], {"status": "closed"})

    assert updated["status"] == "closed"
    assert updated["title"] == "Vandalism"
    assert updated["location"] == "Park"
    assert updated["created_at"] == case["created_at"]
    # clock has not moved, the stamp still has to
    assert updated["updated_at"] > case["updated_at"]

    clock.tick(minutes=5)
    again = storage.update_case(case["id"], {"priority": "high"})
    assert again["updated_at"] == clock.now
    assert storage.get_case(case["id"]) == again


def test_update_missing_raises_not_found(storage, missing_id):
    with pytest.raises(NotFound):
        storage.update_case(missing_id, {"title": "x"})
    with pytest.raises(NotFound):
        storage.update_user_password(missing_id, "secret")


def test_delete(storage):
    plate = storage.create_license_plate({"plate_number": "ABC-123", "owner_name": "Jane Doe"})

    assert storage.delete_license_plate(plate["id"]) is True
    assert storage.get_license_plate(plate["id"]) is None
    assert storage.delete_license_plate(plate["id"]) is False


# (create, get, delete, input)
ENTITY_OPERATIONS = [
    ("create_user", "get_user", "delete_user", {"username": "roundtrip", "email": "rt@police.gov"}),
    ("create_case", "get_case", "delete_case", {"title": "Round trip", "location": "Pier 39"}),
    ("create_ob_entry", "get_ob_entry", "delete_ob_entry", {"type": "Theft", "description": "bike"}),
    ("create_license_plate", "get_license_plate", "delete_license_plate", {"plate_number": "RT-1"}),
    ("create_evidence", "get_evidence_item", "delete_evidence", {"type": "Photo", "storage_location": "Locker 4"}),
    ("create_report", "get_report", "delete_report", {"title": "Weekly", "type": "summary"}),
    ("create_geofile", "get_geofile", "delete_geofile", {"filename": "rt.kml", "file_type": "kml"}),
    ("create_police_vehicle", "get_police_vehicle", "delete_police_vehicle", {"vehicle_id": "RT-1", "license_plate": "POL-RT"}),
]


@pytest.mark.parametrize(
    "create, get, delete, data", ENTITY_OPERATIONS, ids=[op[0][len("create_"):] for op in ENTITY_OPERATIONS]
)
def test_every_entity_round_trips_and_deletes(storage, create, get, delete, data):
    record = getattr(storage, create)(data)

    for key, value in data.items():
        assert record[key] == value
    assert record["id"] is not None
    assert record["created_at"] == record["updated_at"]
    assert getattr(storage, get)(record["id"]) == record

    assert getattr(storage, delete)(record["id"]) is True
    assert getattr(storage, get)(record["id"]) is None
    assert getattr(storage, delete)(record["id"]) is False


# ---------- required fields ----------
def test_null_required_field_on_update_is_rejected(storage):
    case = storage.create_case({"title": "Assault"})
    with pytest.raises(InvalidInput):
        storage.update_case(case["id"], {"status": None})
    assert storage.get_case(case["id"])["status"] == "open"


def test_user_without_username_is_rejected(storage):
    for _ in range(2):
        with pytest.raises(InvalidInput):
            storage.create_user({"email": "nobody@police.gov"})
    assert storage.get_user_by_email("nobody@police.gov") is None


def test_vehicle_without_plate_is_rejected(storage):
    with pytest.raises(InvalidInput):
        storage.create_police_vehicle({"vehicle_id": "P-7"})
    vehicle = storage.create_police_vehicle({"vehicle_id": "P-7", "license_plate": "POL-7"})
    with pytest.raises(InvalidInput):
        storage.update_police_vehicle(vehicle["id"], {"status": None})


def test_null_for_defaulted_field_on_create_takes_default(storage):
    geofile = storage.create_geofile({"filename": "d.kml", "access_level": None, "download_count": None})
    assert geofile["access_level"] == "internal"
    assert geofile["download_count"] == 0


# ---------- uniqueness ----------
def test_duplicate_username_conflicts(storage):
    storage.create_user({"username": "jdoe", "email": "jdoe@police.gov"})
    with pytest.raises(Conflict) as exc:
        storage.create_user({"username": "jdoe", "email": "other@police.gov"})
    assert exc.value.field == "username"
    assert exc.value.value == "jdoe"
    assert "jdoe" in str(exc.value)
    assert storage.get_user_by_email("other@police.gov") is None


def test_update_to_taken_email_conflicts(storage):
    storage.create_user({"username": "a", "email": "a@police.gov"})
    b = storage.create_user({"username": "b", "email": "b@police.gov"})
    with pytest.raises(Conflict) as exc:
        storage.update_user(b["id"], {"email": "a@police.gov"})
    assert exc.value.field == "email"
    assert exc.value.value == "a@police.gov"
    assert storage.get_user(b["id"])["email"] == "b@police.gov"


def test_duplicate_plate_number_conflicts(storage):
    storage.create_license_plate({"plate_number": "XYZ-999"})
    with pytest.raises(Conflict):
        storage.create_license_plate({"plate_number": "XYZ-999"})


def test_vehicle_license_plate_unique(storage):
    storage.create_police_vehicle({"vehicle_id": "P-1", "license_plate": "POL-1"})
    with pytest.raises(Conflict):
        storage.create_police_vehicle({"vehicle_id": "P-2", "license_plate": "POL-1"})


# ---------- users ----------
def test_user_defaults_and_lookups(storage):
    user = storage.create_user({"username": "officer", "email": "officer@police.gov", "password": "pw"})
    assert user["role"] == "user"
    assert user["is_active"] is True
    assert storage.get_user_by_username("officer")["id"] == user["id"]
    assert storage.get_user_by_email("officer@police.gov")["id"] == user["id"]
    assert user["id"] in [u["id"] for u in storage.get_all_users()]


def test_last_login_does_not_touch_updated_at(storage, clock):
    user = storage.create_user({"username": "login", "email": "login@police.gov"})
    clock.tick(minutes=1)
    storage.update_last_login(user["id"])

    fetched = storage.get_user(user["id"])
    assert fetched["last_login_at"] == clock.now
    assert fetched["updated_at"] == user["updated_at"]


def test_update_password(storage):
    user = storage.create_user({"username": "pw", "email": "pw@police.gov", "password": "old"})
    storage.update_user_password(user["id"], "new")
    assert storage.get_user(user["id"])["password"] == "new"


# ---------- password reset tokens ----------
def test_reset_token_expires_after_an_hour(storage, clock):
    user = storage.create_user({"username": "reset", "email": "reset@police.gov"})
    token = storage.create_password_reset_token(user["id"], "tok-1")
    assert token["expires_at"] == clock.now.replace(hour=13)

    clock.tick(minutes=59)
    assert storage.get_password_reset_token("tok-1")["token"] == "tok-1"

    clock.tick(minutes=1)
    assert storage.get_password_reset_token("tok-1") is None
    # evicted on lookup
    assert storage.delete_password_reset_token("tok-1") is False


def test_reset_token_delete_and_duplicate(storage):
    user = storage.create_user({"username": "t", "email": "t@police.gov"})
    storage.create_password_reset_token(user["id"], "tok-2")
    with pytest.raises(Conflict):
        storage.create_password_reset_token(user["id"], "tok-2")
    assert storage.delete_password_reset_token("tok-2") is True
    assert storage.get_password_reset_token("tok-2") is None
    assert storage.get_password_reset_token("never-issued") is None


# ---------- ordering ----------
def test_cases_newest_first(storage, clock):
    first = storage.create_case({"title": "first"})
    clock.tick(seconds=1)
    second = storage.create_case({"title": "second"})
    assert [c["id"] for c in storage.get_cases()] == [second["id"], first["id"]]


def test_ob_entries_newest_first_by_occurrence(storage):
    older = storage.create_ob_entry({"type": "Theft", "description": "a", "date_time": datetime(2025, 1, 1, 9)})
    newer = storage.create_ob_entry({"type": "Noise", "description": "b", "date_time": "2025-02-01T09:00:00"})
    assert newer["status"] == "recorded"
    assert [e["id"] for e in storage.get_ob_entries()] == [newer["id"], older["id"]]


def test_ob_entry_defaults_to_recording_time(storage, clock):
    entry = storage.create_ob_entry({"type": "Lost property", "description": "wallet"})
    assert entry["date_time"] == clock.now
    assert entry["ob_number"].startswith("OB")


# ---------- evidence & reports ----------
def test_evidence_and_report_numbers(storage):
    case = storage.create_case({"title": "Burglary"})
    evidence = storage.create_evidence({"case_id": case["id"], "type": "Fingerprint"})
    report = storage.create_report({"title": "Monthly", "type": "summary", "parameters": {"month": 1}})

    assert evidence["evidence_number"].startswith("EV")
    assert storage.get_evidence_by_number(evidence["evidence_number"])["id"] == evidence["id"]
    assert storage.get_evidence_item(evidence["id"])["case_id"] == case["id"]
    assert report["status"] == "pending"
    assert json.loads(report["parameters"]) == {"month": 1}
    assert storage.get_report_by_number(report["report_number"])["id"] == report["id"]


# ---------- geofiles ----------
def test_geofile_defaults(storage, clock):
    geofile = storage.create_geofile({"filename": "a.kml", "file_type": "kml"})
    assert geofile["access_level"] == "internal"
    assert geofile["is_public"] is False
    assert geofile["tags"] == "[]"
    assert geofile["download_count"] == 0
    assert geofile["last_accessed_at"] == clock.now


def test_geofile_filters(storage, clock):
    alpha = storage.create_geofile(_geofile())
    clock.tick(days=1)
    beta = storage.create_geofile(_geofile(
        filename="beta.gpx", file_type="gpx", description="beta evacuation", access_level="public",
    ))

    assert [g["id"] for g in storage.get_geofiles()] == [beta["id"], alpha["id"]]
    assert [g["id"] for g in storage.get_geofiles({"file_type": "KML"})] == [alpha["id"]]
    assert [g["id"] for g in storage.get_geofiles({"search": "BETA"})] == [beta["id"]]
    assert storage.get_geofiles({"file_type": "kml", "access_level": "public"}) == []
    assert [g["id"] for g in storage.get_geofiles({"date_from": "2025-03-02T00:00:00"})] == [beta["id"]]
    assert [g["id"] for g in storage.get_geofiles({"date_to": datetime(2025, 3, 1, 12, 0)})] == [alpha["id"]]


def test_geofile_search_covers_address_and_location_name(storage):
    by_address = storage.create_geofile(_geofile(description=None, address="100 Market Street"))
    by_place = storage.create_geofile(_geofile(description=None, location_name="Mission District"))
    assert [g["id"] for g in storage.get_geofiles({"search": "market"})] == [by_address["id"]]
    assert [g["id"] for g in storage.get_geofiles({"search": "mission"})] == [by_place["id"]]
    # LIKE wildcards are literal text
    assert storage.get_geofiles({"search": "%"}) == []


def test_geofile_tag_filter_is_exact(storage):
    patrol = storage.create_geofile(_geofile(tags=["patrol", "downtown"]))
    storage.create_geofile(_geofile(tags=["patrolling"]))
    assert [g["id"] for g in storage.get_geofiles({"tags": ["patrol"]})] == [patrol["id"]]
    assert [g["id"] for g in storage.get_geofiles({"tags": "nothing, downtown"})] == [patrol["id"]]


def test_unknown_geofile_filter_rejected(storage):
    with pytest.raises(InvalidInput):
        storage.get_geofiles({"colour": "red"})


def test_location_search(storage):
    here = storage.create_geofile(_geofile(coordinates=[-122.4194, 37.7749]))
    near = storage.create_geofile(_geofile(coordinates=json.dumps([-122.4094, 37.7849])))
    storage.create_geofile(_geofile(coordinates="not json"))
    storage.create_geofile(_geofile())

    assert [g["id"] for g in storage.search_geofiles_by_location(37.7749, -122.4194, 0)] == [here["id"]]
    assert [g["id"] for g in storage.search_geofiles_by_location(37.7749, -122.4194)] == [here["id"]]
    found = {g["id"] for g in storage.search_geofiles_by_location(37.7749, -122.4194, 2000)}
    assert found == {here["id"], near["id"]}


def test_add_tags_is_idempotent(storage, missing_id):
    geofile = storage.create_geofile(_geofile(tags=["existing"]))
    storage.add_geofile_tags(geofile["id"], ["a", "b"])
    updated = storage.add_geofile_tags(geofile["id"], ["a", "b"])
    assert json.loads(updated["tags"]) == ["existing", "a", "b"]

    with pytest.raises(NotFound):
        storage.add_geofile_tags(missing_id, ["a"])
    with pytest.raises(InvalidInput):
        storage.add_geofile_tags(geofile["id"], "a,b")


def test_add_tags_to_untagged_geofile(storage):
    geofile = storage.create_geofile(_geofile())
    storage.add_geofile_tags(geofile["id"], ["a", "b"])
    updated = storage.add_geofile_tags(geofile["id"], ["a", "b"])
    assert json.loads(updated["tags"]) == ["a", "b"]


def test_link_geofile_to_case(storage, missing_id):
    geofile = storage.create_geofile(_geofile())
    case = storage.create_case({"title": "Linked"})

    linked = storage.link_geofile_to_case(geofile["id"], case["id"])
    assert linked["case_id"] == case["id"]

    with pytest.raises(NotFound):
        storage.link_geofile_to_case(geofile["id"], missing_id)
    with pytest.raises(NotFound):
        storage.link_geofile_to_case(missing_id, case["id"])


def test_download_and_access_bookkeeping(storage, clock, missing_id):
    geofile = storage.create_geofile(_geofile())
    clock.tick(hours=2)
    storage.increment_geofile_download(geofile["id"])
    storage.increment_geofile_download(geofile["id"])

    fetched = storage.get_geofile(geofile["id"])
    assert fetched["download_count"] == 2
    assert fetched["last_accessed_at"] == clock.now
    assert fetched["updated_at"] == geofile["updated_at"]

    clock.tick(hours=1)
    storage.update_geofile_access(geofile["id"])
    assert storage.get_geofile(geofile["id"])["last_accessed_at"] == clock.now

    # absent records are ignored
    storage.increment_geofile_download(missing_id)
    storage.update_geofile_access(missing_id)


# ---------- police vehicles ----------
def test_vehicle_location_and_status(storage, clock, missing_id):
    vehicle = storage.create_police_vehicle({"vehicle_id": "PATROL-9", "license_plate": "POL-9"})
    assert vehicle["status"] == "available"

    clock.tick(minutes=3)
    moved = storage.update_vehicle_location(vehicle["id"], [-122.41, 37.78])
    assert json.loads(moved["current_location"]) == [-122.41, 37.78]
    assert moved["last_update"] == moved["updated_at"] == clock.now

    clock.tick(minutes=3)
    responding = storage.update_vehicle_status(vehicle["id"], "responding")
    assert responding["status"] == "responding"
    assert responding["last_update"] == clock.now
    assert storage.get_police_vehicle_by_license_plate("POL-9")["status"] == "responding"

    with pytest.raises(NotFound):
        storage.update_vehicle_status(missing_id, "available")
    with pytest.raises(InvalidInput):
        storage.update_vehicle_location(vehicle["id"], ["east", "north"])
