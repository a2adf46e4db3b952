from fastapi import APIRouter, Depends

from ..schemas.records import OBEntryCreate, OBEntryUpdate
from ..storage.provider import RecordStorage
from .deps import deleted, found, get_storage

router = APIRouter(prefix="/api/ob-entries", tags=["occurrence-book"])


@router.get("")
def list_ob_entries(storage: RecordStorage = Depends(get_storage)):
    """Occurrence book, most recent occurrence first."""
    return storage.get_ob_entries()


@router.get("/{entry_id}")
def get_ob_entry(entry_id: str, storage: RecordStorage = Depends(get_storage)):
    return found(storage.get_ob_entry(entry_id), "OB entry")


@router.post("", status_code=201)
def create_ob_entry(body: OBEntryCreate, storage: RecordStorage = Depends(get_storage)):
    return storage.create_ob_entry(body.model_dump(mode="json"))


@router.patch("/{entry_id}")
def update_ob_entry(entry_id: str, body: OBEntryUpdate, storage: RecordStorage = Depends(get_storage)):
    return storage.update_ob_entry(entry_id, body.model_dump(mode="json", exclude_unset=True))


@router.delete("/{entry_id}")
def delete_ob_entry(entry_id: str, storage: RecordStorage = Depends(get_storage)):
    return deleted(storage.delete_ob_entry(entry_id), "OB entry")
