from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

RecordId = Union[int, str]


# Enums
class UserRole(str, Enum):
    admin = "admin"
    user = "user"


class CaseStatus(str, Enum):
    open = "open"
    in_progress = "in_progress"
    closed = "closed"


class CasePriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class AccessLevel(str, Enum):
    internal = "internal"
    department = "department"
    public = "public"


class VehicleStatus(str, Enum):
    available = "available"
    on_patrol = "on_patrol"
    responding = "responding"
    out_of_service = "out_of_service"
    maintenance = "maintenance"


class VehicleType(str, Enum):
    patrol = "patrol"
    motorcycle = "motorcycle"
    k9 = "k9"
    special = "special"
    other = "other"


# Users
class UserCreate(BaseModel):
    username: str
    email: str
    password: str
    first_name: str
    last_name: str
    role: UserRole = UserRole.user
    badge_number: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None


class UserUpdate(BaseModel):
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[UserRole] = None
    badge_number: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    profile_image: Optional[str] = None
    is_active: Optional[bool] = None


# Cases
class CaseCreate(BaseModel):
    title: str
    description: Optional[str] = None
    type: Optional[str] = None
    priority: CasePriority = CasePriority.medium
    status: CaseStatus = CaseStatus.open
    incident_date: Optional[datetime] = None
    location: Optional[str] = None
    assigned_officer: Optional[str] = None
    assigned_officer_id: Optional[RecordId] = None
    created_by_id: Optional[RecordId] = None


class CaseUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    priority: Optional[CasePriority] = None
    status: Optional[CaseStatus] = None
    incident_date: Optional[datetime] = None
    location: Optional[str] = None
    assigned_officer: Optional[str] = None
    assigned_officer_id: Optional[RecordId] = None


# Occurrence book
class OBEntryCreate(BaseModel):
    type: str
    description: str
    location: Optional[str] = None
    reported_by: Optional[str] = None
    reporter_contact: Optional[str] = None
    officer_in_charge: Optional[str] = None
    date_time: Optional[datetime] = None
    case_id: Optional[RecordId] = None
    recorded_by_id: Optional[RecordId] = None


class OBEntryUpdate(BaseModel):
    type: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    reported_by: Optional[str] = None
    reporter_contact: Optional[str] = None
    officer_in_charge: Optional[str] = None
    date_time: Optional[datetime] = None
    status: Optional[str] = None
    case_id: Optional[RecordId] = None


# License plates
class LicensePlateCreate(BaseModel):
    plate_number: str
    owner_name: Optional[str] = None
    owner_phone: Optional[str] = None
    owner_address: Optional[str] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    vehicle_year: Optional[int] = None
    vehicle_color: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class LicensePlateUpdate(BaseModel):
    plate_number: Optional[str] = None
    owner_name: Optional[str] = None
    owner_phone: Optional[str] = None
    owner_address: Optional[str] = None
    owner_image: Optional[str] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    vehicle_year: Optional[int] = None
    vehicle_color: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None


# Evidence
class EvidenceCreate(BaseModel):
    case_id: RecordId
    type: str
    description: Optional[str] = None
    location_found: Optional[str] = None
    collected_by: Optional[RecordId] = None
    collected_at: Optional[datetime] = None
    storage_location: Optional[str] = None
    chain_of_custody: Optional[str] = None
    status: Optional[str] = None
    file_path: Optional[str] = None


class EvidenceUpdate(BaseModel):
    type: Optional[str] = None
    description: Optional[str] = None
    location_found: Optional[str] = None
    storage_location: Optional[str] = None
    chain_of_custody: Optional[str] = None
    status: Optional[str] = None
    file_path: Optional[str] = None


# Reports
class ReportCreate(BaseModel):
    title: str
    type: str
    description: Optional[str] = None
    parameters: Optional[Any] = None
    requested_by: Optional[RecordId] = None


class ReportUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    parameters: Optional[Any] = None
    status: Optional[str] = None
    file_path: Optional[str] = None


# Geofiles
class GeofileCreate(BaseModel):
    filename: str
    file_type: str
    filepath: Optional[str] = None
    file_url: Optional[str] = None
    file_size: Optional[int] = None
    coordinates: Optional[str] = None
    bounding_box: Optional[str] = None
    address: Optional[str] = None
    location_name: Optional[str] = None
    description: Optional[str] = None
    metadata: Optional[str] = None
    tags: Optional[Union[str, List[str]]] = None
    is_public: bool = False
    access_level: AccessLevel = AccessLevel.internal
    patrol_area: Optional[str] = None
    incident_markers: Optional[str] = None
    case_id: Optional[RecordId] = None
    ob_id: Optional[RecordId] = None
    evidence_id: Optional[RecordId] = None
    uploaded_by: Optional[RecordId] = None


class GeofileUpdate(BaseModel):
    filename: Optional[str] = None
    file_type: Optional[str] = None
    file_url: Optional[str] = None
    coordinates: Optional[str] = None
    bounding_box: Optional[str] = None
    address: Optional[str] = None
    location_name: Optional[str] = None
    description: Optional[str] = None
    metadata: Optional[str] = None
    tags: Optional[Union[str, List[str]]] = None
    is_public: Optional[bool] = None
    access_level: Optional[AccessLevel] = None
    patrol_area: Optional[str] = None
    incident_markers: Optional[str] = None
    case_id: Optional[RecordId] = None
    ob_id: Optional[RecordId] = None
    evidence_id: Optional[RecordId] = None


class GeofileTagsRequest(BaseModel):
    tags: List[str]


class GeofileLinkRequest(BaseModel):
    case_id: RecordId


class GeofileFilters(BaseModel):
    """The complete set of geofile filters; both backends honour every key."""
    model_config = ConfigDict(extra="forbid")

    search: Optional[str] = None
    file_type: Optional[str] = None
    access_level: Optional[str] = None
    tags: Optional[List[str]] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        if isinstance(v, str):
            v = [t.strip() for t in v.split(",")]
        if v is not None:
            v = [t for t in v if t]
        return v or None


# Police vehicles
class PoliceVehicleCreate(BaseModel):
    vehicle_id: str
    license_plate: str
    vehicle_type: VehicleType = VehicleType.patrol
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    current_location: Optional[str] = None
    assigned_area: Optional[str] = None
    status: VehicleStatus = VehicleStatus.available
    assigned_officer_id: Optional[RecordId] = None


class PoliceVehicleUpdate(BaseModel):
    vehicle_type: Optional[VehicleType] = None
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    assigned_area: Optional[str] = None
    status: Optional[VehicleStatus] = None
    assigned_officer_id: Optional[RecordId] = None


class VehicleLocationUpdate(BaseModel):
    location: List[float]

    @field_validator("location")
    @classmethod
    def two_coordinates(cls, v):
        if len(v) != 2:
            raise ValueError("location must be [lng, lat]")
        return v


class VehicleStatusUpdate(BaseModel):
    status: VehicleStatus
