import uuid
from datetime import datetime, timedelta

import pytest

from rms.storage.database_provider import DatabaseStorage
from rms.storage.memory_provider import MemoryStorage


class FakeClock:
    """Settable naive-UTC clock."""

    def __init__(self, start: datetime = datetime(2025, 3, 1, 12, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def tick(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory(clock):
    return MemoryStorage(seed=False, clock=clock)


@pytest.fixture
def database(clock):
    storage = DatabaseStorage(clock=clock)
    assert storage.connect("sqlite://")
    yield storage
    storage.disconnect()


@pytest.fixture(params=["memory", "database"])
def storage(request, clock):
    if request.param == "memory":
        yield MemoryStorage(seed=False, clock=clock)
        return
    backend = DatabaseStorage(clock=clock)
    assert backend.connect("sqlite://")
    yield backend
    backend.disconnect()


@pytest.fixture
def missing_id(storage):
    """A well-formed id that no record has."""
    return 999999 if storage.backend_name == "memory" else str(uuid.uuid4())
