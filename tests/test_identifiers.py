import re
from datetime import date, datetime, timedelta

import pytest

from rms.errors import InvalidInput
from rms.storage.identifiers import (
    advance,
    current_year,
    parse_datetime,
    random_number,
    sequential_number,
)


def test_sequential_number_formats():
    assert sequential_number("CASE", 2025, 1, width=3) == "CASE-2025-001"
    assert sequential_number("OB", 2025, 12, separator="/") == "OB/2025/0012"
    assert sequential_number("EV", 2025, 12345) == "EV-2025-12345"


def test_random_number_shape():
    number = random_number("RPT", 2025)
    assert re.fullmatch(r"RPT-2025-[0-9A-Z]{6}", number)


def test_current_year_uses_local_timezone():
    # 2025-01-01 03:00 UTC is still New Year's Eve in Los Angeles
    assert current_year(datetime(2025, 1, 1, 3, 0), "America/Los_Angeles") == 2024
    assert current_year(datetime(2025, 1, 1, 3, 0), "UTC") == 2025


def test_advance_is_strictly_increasing():
    stamp = datetime(2025, 3, 1, 12, 0)
    assert advance(stamp, stamp) == stamp + timedelta(microseconds=1)
    assert advance(stamp, stamp - timedelta(seconds=5)) > stamp
    later = stamp + timedelta(seconds=1)
    assert advance(stamp, later) == later
    assert advance(None, stamp) == stamp


def test_parse_datetime():
    assert parse_datetime(None) is None
    assert parse_datetime("") is None
    assert parse_datetime("2025-01-15T10:00:00Z") == datetime(2025, 1, 15, 10, 0)
    assert parse_datetime("2025-01-15T12:00:00+02:00") == datetime(2025, 1, 15, 10, 0)
    assert parse_datetime(date(2025, 1, 15)) == datetime(2025, 1, 15)
    with pytest.raises(InvalidInput):
        parse_datetime("yesterday")
    with pytest.raises(InvalidInput):
        parse_datetime(42)
