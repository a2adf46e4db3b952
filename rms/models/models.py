import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from ..db import Base


def uuid_pk() -> Mapped[uuid.UUID]:
    return mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)


def uuid_ref() -> Mapped[Optional[uuid.UUID]]:
    return mapped_column(UUID(as_uuid=True), index=True)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = uuid_pk()
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, index=True)
    password: Mapped[Optional[str]] = mapped_column(String(255))  # stored as given, hashing is not handled here
    first_name: Mapped[Optional[str]] = mapped_column(String(100))
    last_name: Mapped[Optional[str]] = mapped_column(String(100))
    role: Mapped[str] = mapped_column(String(20), default="user")  # admin|user
    badge_number: Mapped[Optional[str]] = mapped_column(String(50), index=True)
    department: Mapped[Optional[str]] = mapped_column(String(100))
    position: Mapped[Optional[str]] = mapped_column(String(100))
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    profile_image: Mapped[Optional[str]] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class PasswordResetToken(Base):
    __tablename__ = "password_reset_tokens"

    id: Mapped[uuid.UUID] = uuid_pk()
    token: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    user_id: Mapped[Optional[uuid.UUID]] = uuid_ref()
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class Case(Base):
    __tablename__ = "cases"

    id: Mapped[uuid.UUID] = uuid_pk()
    case_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    title: Mapped[Optional[str]] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text)
    type: Mapped[Optional[str]] = mapped_column(String(100))
    priority: Mapped[str] = mapped_column(String(20), default="medium", index=True)  # low|medium|high|critical
    status: Mapped[str] = mapped_column(String(20), default="open", index=True)  # open|in_progress|closed
    incident_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    location: Mapped[Optional[str]] = mapped_column(String(255))
    assigned_officer: Mapped[Optional[str]] = mapped_column(String(255))
    assigned_officer_id: Mapped[Optional[uuid.UUID]] = uuid_ref()
    created_by_id: Mapped[Optional[uuid.UUID]] = uuid_ref()
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class OBEntry(Base):
    """Occurrence book entry"""
    __tablename__ = "ob_entries"

    id: Mapped[uuid.UUID] = uuid_pk()
    ob_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    type: Mapped[Optional[str]] = mapped_column(String(100))
    description: Mapped[Optional[str]] = mapped_column(Text)
    location: Mapped[Optional[str]] = mapped_column(String(255))
    reported_by: Mapped[Optional[str]] = mapped_column(String(255))
    reporter_contact: Mapped[Optional[str]] = mapped_column(String(255))
    officer_in_charge: Mapped[Optional[str]] = mapped_column(String(255))
    date_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(50), default="recorded")
    case_id: Mapped[Optional[uuid.UUID]] = uuid_ref()
    recorded_by_id: Mapped[Optional[uuid.UUID]] = uuid_ref()
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class LicensePlate(Base):
    __tablename__ = "license_plates"

    id: Mapped[uuid.UUID] = uuid_pk()
    plate_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    owner_name: Mapped[Optional[str]] = mapped_column(String(255))
    owner_phone: Mapped[Optional[str]] = mapped_column(String(50))
    owner_address: Mapped[Optional[str]] = mapped_column(String(255))
    owner_image: Mapped[Optional[str]] = mapped_column(Text)
    vehicle_make: Mapped[Optional[str]] = mapped_column(String(100))
    vehicle_model: Mapped[Optional[str]] = mapped_column(String(100))
    vehicle_year: Mapped[Optional[int]] = mapped_column(Integer)
    vehicle_color: Mapped[Optional[str]] = mapped_column(String(50))
    status: Mapped[Optional[str]] = mapped_column(String(50))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class Evidence(Base):
    __tablename__ = "evidence"

    id: Mapped[uuid.UUID] = uuid_pk()
    evidence_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    case_id: Mapped[Optional[uuid.UUID]] = uuid_ref()
    type: Mapped[Optional[str]] = mapped_column(String(100))
    description: Mapped[Optional[str]] = mapped_column(Text)
    location_found: Mapped[Optional[str]] = mapped_column(String(255))
    collected_by: Mapped[Optional[uuid.UUID]] = uuid_ref()
    collected_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    storage_location: Mapped[Optional[str]] = mapped_column(String(255))
    chain_of_custody: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[Optional[str]] = mapped_column(String(50))
    file_path: Mapped[Optional[str]] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class Geofile(Base):
    """Geographic data file (KML, GPX, SHP, GeoJSON...) with access metadata"""
    __tablename__ = "geofiles"

    id: Mapped[uuid.UUID] = uuid_pk()
    filename: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    filepath: Mapped[Optional[str]] = mapped_column(String(500))
    file_url: Mapped[Optional[str]] = mapped_column(String(1000))
    file_type: Mapped[Optional[str]] = mapped_column(String(50), index=True)
    file_size: Mapped[Optional[int]] = mapped_column(Integer)
    coordinates: Mapped[Optional[str]] = mapped_column(Text)  # JSON [lng, lat]
    bounding_box: Mapped[Optional[str]] = mapped_column(Text)  # JSON [[lng, lat], [lng, lat]]
    address: Mapped[Optional[str]] = mapped_column(String(255))
    location_name: Mapped[Optional[str]] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text)
    # "metadata" is reserved on declarative classes
    metadata_: Mapped[Optional[str]] = mapped_column("metadata", Text)  # JSON object
    tags: Mapped[Optional[str]] = mapped_column(Text, default="[]")  # JSON list of strings
    is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    access_level: Mapped[str] = mapped_column(String(20), default="internal", index=True)  # internal|department|public
    patrol_area: Mapped[Optional[str]] = mapped_column(Text)  # JSON polygon
    incident_markers: Mapped[Optional[str]] = mapped_column(Text)  # JSON list
    case_id: Mapped[Optional[uuid.UUID]] = uuid_ref()
    ob_id: Mapped[Optional[uuid.UUID]] = uuid_ref()
    evidence_id: Mapped[Optional[uuid.UUID]] = uuid_ref()
    uploaded_by: Mapped[Optional[uuid.UUID]] = uuid_ref()
    download_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_accessed_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class PoliceVehicle(Base):
    __tablename__ = "police_vehicles"

    id: Mapped[uuid.UUID] = uuid_pk()
    vehicle_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    license_plate: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    vehicle_type: Mapped[Optional[str]] = mapped_column(String(50))
    make: Mapped[Optional[str]] = mapped_column(String(100))
    model: Mapped[Optional[str]] = mapped_column(String(100))
    year: Mapped[Optional[int]] = mapped_column(Integer)
    current_location: Mapped[Optional[str]] = mapped_column(Text)  # JSON [lng, lat]
    assigned_area: Mapped[Optional[str]] = mapped_column(Text)  # JSON polygon
    status: Mapped[str] = mapped_column(String(50), default="available", index=True)
    assigned_officer_id: Mapped[Optional[uuid.UUID]] = uuid_ref()
    last_update: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        Index('idx_police_vehicle_status_type', 'status', 'vehicle_type'),
    )


class Report(Base):
    __tablename__ = "reports"

    id: Mapped[uuid.UUID] = uuid_pk()
    report_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    title: Mapped[Optional[str]] = mapped_column(String(255))
    type: Mapped[Optional[str]] = mapped_column(String(100))
    description: Mapped[Optional[str]] = mapped_column(Text)
    parameters: Mapped[Optional[str]] = mapped_column(Text)  # JSON
    status: Mapped[str] = mapped_column(String(50), default="pending")
    requested_by: Mapped[Optional[uuid.UUID]] = uuid_ref()
    file_path: Mapped[Optional[str]] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
