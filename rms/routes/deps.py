from typing import Optional

from fastapi import HTTPException, Request

from ..storage.provider import Record, RecordStorage


def get_storage(request: Request) -> RecordStorage:
    """Storage backend chosen at startup and attached to the app."""
    return request.app.state.storage


def found(record: Optional[Record], label: str) -> Record:
    if record is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return record


def deleted(ok: bool, label: str) -> dict:
    if not ok:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return {"message": f"{label} deleted successfully"}
