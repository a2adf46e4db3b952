from fastapi import APIRouter, Depends

from ..schemas.records import CaseCreate, CaseUpdate
from ..storage.provider import RecordStorage
from .deps import deleted, found, get_storage

router = APIRouter(prefix="/api/cases", tags=["cases"])


@router.get("")
def list_cases(storage: RecordStorage = Depends(get_storage)):
    """All cases, newest first."""
    return storage.get_cases()


@router.get("/number/{case_number}")
def get_case_by_number(case_number: str, storage: RecordStorage = Depends(get_storage)):
    return found(storage.get_case_by_number(case_number), "Case")


@router.get("/{case_id}")
def get_case(case_id: str, storage: RecordStorage = Depends(get_storage)):
    return found(storage.get_case(case_id), "Case")


@router.post("", status_code=201)
def create_case(body: CaseCreate, storage: RecordStorage = Depends(get_storage)):
    return storage.create_case(body.model_dump(mode="json"))


@router.patch("/{case_id}")
def update_case(case_id: str, body: CaseUpdate, storage: RecordStorage = Depends(get_storage)):
    return storage.update_case(case_id, body.model_dump(mode="json", exclude_unset=True))


@router.delete("/{case_id}")
def delete_case(case_id: str, storage: RecordStorage = Depends(get_storage)):
    return deleted(storage.delete_case(case_id), "Case")
