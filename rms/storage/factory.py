import os

import structlog

from ..config import Settings, settings as default_settings
from ..logging import mask_url
from .database_provider import DatabaseStorage
from .memory_provider import MemoryStorage
from .provider import RecordStorage

logger = structlog.get_logger(__name__)


def create_storage(settings: Settings = None) -> RecordStorage:
    """
    Pick the storage backend for this process.
    Uses DatabaseStorage when USE_DATABASE is set or in production; if the
    database cannot be reached, falls back to in-memory storage so the API
    still starts.
    """
    settings = settings or default_settings
    if settings.database_enabled:
        # Ensure local SQLite directory exists
        if settings.database_url.startswith("sqlite:///./"):
            os.makedirs(os.path.dirname(settings.database_url[len("sqlite:///"):]), exist_ok=True)
        storage = DatabaseStorage()
        if storage.connect(settings.database_url):
            logger.info("storage_selected", backend=storage.backend_name, url=mask_url(settings.database_url))
            return storage
        logger.warning("storage_fallback", backend=MemoryStorage.backend_name, url=mask_url(settings.database_url))
    storage = MemoryStorage(seed=settings.seed_fixtures)
    logger.info("storage_selected", backend=storage.backend_name)
    return storage
