import json

import pytest

from rms.errors import Conflict
from rms.storage.memory_provider import MemoryStorage


@pytest.fixture
def seeded(clock):
    return MemoryStorage(seed=True, clock=clock)


def test_fixtures_loaded(seeded):
    assert [u["username"] for u in seeded.get_all_users()] == ["admin"]
    assert len(seeded.get_cases()) == 3
    assert len(seeded.get_police_vehicles()) == 4
    assert len(seeded.get_geofiles()) == 5


def test_fixture_vehicles_have_location_and_patrol_area(seeded):
    for vehicle in seeded.get_police_vehicles():
        assert len(json.loads(vehicle["current_location"])) == 2
        area = json.loads(vehicle["assigned_area"])
        assert area[0] == area[-1]


def test_fixture_geofile_queries(seeded):
    assert [g["filename"] for g in seeded.get_geofiles({"file_type": "KML"})] == ["patrol_routes_downtown.kml"]
    assert len(seeded.get_geofiles({"access_level": "internal"})) == 2
    assert len(seeded.get_geofiles({"tags": "routes"})) == 2
    nearby = seeded.search_geofiles_by_location(37.7749, -122.4194, 100)
    assert {g["filename"] for g in nearby} == {"patrol_routes_downtown.kml", "incident_locations_jan2025.kmz"}


def test_seeding_can_be_disabled(memory):
    assert memory.get_all_users() == []
    assert memory.get_geofiles() == []


def test_sequential_business_numbers(memory):
    assert memory.create_case({"title": "a"})["case_number"] == "CASE-2025-001"
    assert memory.create_case({"title": "b"})["case_number"] == "CASE-2025-002"
    assert memory.create_ob_entry({"type": "t", "description": "d"})["ob_number"] == "OB/2025/0001"
    assert memory.create_evidence({"case_id": 1, "type": "Photo"})["evidence_number"] == "EV-2025-0001"
    assert memory.create_report({"title": "r", "type": "x"})["report_number"] == "RPT-2025-0001"


def test_numbers_continue_after_fixtures(seeded):
    case = seeded.create_case({"title": "new"})
    assert case["id"] == 4
    assert case["case_number"] == "CASE-2025-004"


def test_conflict_does_not_consume_an_id(memory):
    first = memory.create_user({"username": "u1", "email": "u1@police.gov"})
    with pytest.raises(Conflict):
        memory.create_user({"username": "u1", "email": "x@police.gov"})
    second = memory.create_user({"username": "u2", "email": "u2@police.gov"})
    assert second["id"] == first["id"] + 1


def test_string_ids_are_accepted(memory):
    case = memory.create_case({"title": "a"})
    assert memory.get_case(str(case["id"]))["id"] == case["id"]


def test_returned_records_are_copies(memory):
    case = memory.create_case({"title": "original"})
    case["title"] = "mutated"
    memory.get_case(case["id"])["title"] = "mutated again"
    assert memory.get_case(case["id"])["title"] == "original"
    assert memory.get_cases()[0]["title"] == "original"


def test_malformed_stored_tags_are_skipped_by_filter(memory):
    memory.create_geofile({"filename": "broken.kml", "file_type": "kml", "tags": "{not json"})
    tagged = memory.create_geofile({"filename": "ok.kml", "file_type": "kml", "tags": ["patrol"]})
    assert [g["id"] for g in memory.get_geofiles({"tags": ["patrol"]})] == [tagged["id"]]
