"""
Storage error taxonomy.

NotFound and Conflict propagate to the HTTP layer, which maps them to
404 and 409. ConnectionFailure only surfaces during backend selection.
"""
from typing import Any, Optional


class StorageError(Exception):
    """Base class for every error raised by a storage backend."""


class NotFound(StorageError):
    def __init__(self, entity: str, record_id: Any = None):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} not found" if record_id is None else f"{entity} {record_id} not found")


class Conflict(StorageError):
    def __init__(self, entity: str, field: str, value: Any = None):
        self.entity = entity
        self.field = field
        self.value = value
        super().__init__(f"{entity} with {field}={value!r} already exists")


class ConnectionFailure(StorageError):
    pass


class InvalidInput(StorageError):
    pass


class InvalidId(InvalidInput):
    def __init__(self, record_id: Any, entity: Optional[str] = None):
        self.record_id = record_id
        self.entity = entity
        super().__init__(f"Invalid identifier {record_id!r}" + (f" for {entity}" if entity else ""))
