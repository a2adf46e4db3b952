from fastapi import APIRouter, Depends

from ..schemas.records import EvidenceCreate, EvidenceUpdate
from ..storage.provider import RecordStorage
from .deps import deleted, found, get_storage

router = APIRouter(prefix="/api/evidence", tags=["evidence"])


@router.get("")
def list_evidence(storage: RecordStorage = Depends(get_storage)):
    return storage.get_evidence()


@router.get("/number/{evidence_number}")
def get_evidence_by_number(evidence_number: str, storage: RecordStorage = Depends(get_storage)):
    return found(storage.get_evidence_by_number(evidence_number), "Evidence")


@router.get("/{evidence_id}")
def get_evidence_item(evidence_id: str, storage: RecordStorage = Depends(get_storage)):
    return found(storage.get_evidence_item(evidence_id), "Evidence")


@router.post("", status_code=201)
def create_evidence(body: EvidenceCreate, storage: RecordStorage = Depends(get_storage)):
    return storage.create_evidence(body.model_dump(mode="json"))


@router.patch("/{evidence_id}")
def update_evidence(evidence_id: str, body: EvidenceUpdate, storage: RecordStorage = Depends(get_storage)):
    return storage.update_evidence(evidence_id, body.model_dump(mode="json", exclude_unset=True))


@router.delete("/{evidence_id}")
def delete_evidence(evidence_id: str, storage: RecordStorage = Depends(get_storage)):
    return deleted(storage.delete_evidence(evidence_id), "Evidence")
