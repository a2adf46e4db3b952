from fastapi import APIRouter, Depends

from ..schemas.records import LicensePlateCreate, LicensePlateUpdate
from ..storage.provider import RecordStorage
from .deps import deleted, found, get_storage

router = APIRouter(prefix="/api/license-plates", tags=["license-plates"])


@router.get("")
def list_license_plates(storage: RecordStorage = Depends(get_storage)):
    return storage.get_license_plates()


@router.get("/lookup/{plate_number}")
def lookup_license_plate(plate_number: str, storage: RecordStorage = Depends(get_storage)):
    """Exact plate number lookup"""
    return found(storage.get_license_plate_by_number(plate_number), "License plate")


@router.get("/{plate_id}")
def get_license_plate(plate_id: str, storage: RecordStorage = Depends(get_storage)):
    return found(storage.get_license_plate(plate_id), "License plate")


@router.post("", status_code=201)
def create_license_plate(body: LicensePlateCreate, storage: RecordStorage = Depends(get_storage)):
    return storage.create_license_plate(body.model_dump(mode="json"))


@router.patch("/{plate_id}")
def update_license_plate(plate_id: str, body: LicensePlateUpdate, storage: RecordStorage = Depends(get_storage)):
    return storage.update_license_plate(plate_id, body.model_dump(mode="json", exclude_unset=True))


@router.delete("/{plate_id}")
def delete_license_plate(plate_id: str, storage: RecordStorage = Depends(get_storage)):
    return deleted(storage.delete_license_plate(plate_id), "License plate")
