from fastapi import APIRouter, Depends

from ..schemas.records import PoliceVehicleCreate, PoliceVehicleUpdate, VehicleLocationUpdate, VehicleStatusUpdate
from ..storage.provider import RecordStorage
from .deps import deleted, found, get_storage

router = APIRouter(prefix="/api/police-vehicles", tags=["police-vehicles"])


@router.get("")
def list_police_vehicles(storage: RecordStorage = Depends(get_storage)):
    return storage.get_police_vehicles()


@router.get("/plate/{license_plate}")
def get_police_vehicle_by_plate(license_plate: str, storage: RecordStorage = Depends(get_storage)):
    return found(storage.get_police_vehicle_by_license_plate(license_plate), "Police vehicle")


@router.get("/{vehicle_id}")
def get_police_vehicle(vehicle_id: str, storage: RecordStorage = Depends(get_storage)):
    return found(storage.get_police_vehicle(vehicle_id), "Police vehicle")


@router.post("", status_code=201)
def create_police_vehicle(body: PoliceVehicleCreate, storage: RecordStorage = Depends(get_storage)):
    return storage.create_police_vehicle(body.model_dump(mode="json"))


@router.patch("/{vehicle_id}")
def update_police_vehicle(vehicle_id: str, body: PoliceVehicleUpdate, storage: RecordStorage = Depends(get_storage)):
    return storage.update_police_vehicle(vehicle_id, body.model_dump(mode="json", exclude_unset=True))


@router.delete("/{vehicle_id}")
def delete_police_vehicle(vehicle_id: str, storage: RecordStorage = Depends(get_storage)):
    return deleted(storage.delete_police_vehicle(vehicle_id), "Police vehicle")


@router.patch("/{vehicle_id}/location")
def update_location(vehicle_id: str, body: VehicleLocationUpdate, storage: RecordStorage = Depends(get_storage)):
    """Position report from the vehicle, ``[lng, lat]``"""
    return storage.update_vehicle_location(vehicle_id, body.location)


@router.patch("/{vehicle_id}/status")
def update_status(vehicle_id: str, body: VehicleStatusUpdate, storage: RecordStorage = Depends(get_storage)):
    return storage.update_vehicle_status(vehicle_id, body.status.value)
