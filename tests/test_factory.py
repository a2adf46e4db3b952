from rms.config import Settings
from rms.storage.factory import create_storage


def test_memory_by_default():
    storage = create_storage(Settings(use_database=False, seed_fixtures=False))
    assert storage.backend_name == "memory"
    assert storage.get_cases() == []


def test_database_when_enabled():
    storage = create_storage(Settings(use_database=True, database_url="sqlite://"))
    try:
        assert storage.backend_name == "database"
        assert storage.get_user_by_username("admin") is not None
    finally:
        storage.close()


def test_production_uses_database():
    settings = Settings(environment="production", use_database=False, database_url="sqlite://")
    assert settings.database_enabled
    storage = create_storage(settings)
    try:
        assert storage.backend_name == "database"
    finally:
        storage.close()


def test_falls_back_to_memory_when_database_unreachable():
    settings = Settings(use_database=True, database_url="sqlite:////nonexistent-dir/records/rms.db", seed_fixtures=True)
    storage = create_storage(settings)
    assert storage.backend_name == "memory"
    assert len(storage.get_cases()) == 3
