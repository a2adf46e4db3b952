"""
Declarative description of every stored entity.

Both backends read these specs to apply creation defaults, strip
server-generated fields from caller input, reject unknown fields, enforce
uniqueness and order listings, so the two stay in step.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple

from ..errors import InvalidInput
from .codec import coerce_json_field, coerce_tags_field
from .identifiers import parse_datetime, random_number, sequential_number

Default = Callable[[datetime], Any]


@dataclass(frozen=True)
class BusinessNumber:
    """Human-readable identifier generated at creation."""
    field: str
    prefix: str
    separator: str = "-"
    width: int = 4

    def sequential(self, year: int, seq: int) -> str:
        return sequential_number(self.prefix, year, seq, width=self.width, separator=self.separator)

    def random(self, year: int) -> str:
        return random_number(self.prefix, year)


@dataclass(frozen=True)
class EntitySpec:
    name: str  # key used by the backends (dict name / table name)
    label: str  # used in error messages
    fields: Tuple[str, ...]  # caller-supplied fields
    defaults: Dict[str, Default] = field(default_factory=dict)
    unique: Tuple[str, ...] = ()
    required: Tuple[str, ...] = ()  # never stored as None
    references: Tuple[str, ...] = ()  # fields holding another record's id
    serialized: Tuple[str, ...] = ()  # nested structures stored as JSON text
    datetimes: Tuple[str, ...] = ()
    number: Optional[BusinessNumber] = None
    newest_first_by: Optional[str] = None

    @property
    def generated(self) -> Tuple[str, ...]:
        generated = ("id", "created_at", "updated_at")
        if self.number:
            generated += (self.number.field,)
        return generated

    def clean(self, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Copy caller input without server-generated fields; unknown fields are rejected."""
        cleaned = {k: v for k, v in (data or {}).items() if k not in self.generated}
        unknown = sorted(set(cleaned) - set(self.fields))
        if unknown:
            raise InvalidInput(f"Unknown {self.label} field(s): {', '.join(unknown)}")
        for key in self.serialized:
            if key in cleaned:
                cleaned[key] = coerce_tags_field(cleaned[key]) if key == "tags" else coerce_json_field(cleaned[key])
        for key in self.datetimes:
            if key in cleaned:
                cleaned[key] = parse_datetime(cleaned[key])
        return cleaned

    def check_required(self, record: Dict[str, Any], partial: bool = False) -> None:
        """Reject None for required fields. With ``partial`` only the fields present are checked."""
        missing = [
            key for key in self.required
            if (key in record or not partial) and record.get(key) is None
        ]
        if missing:
            raise InvalidInput(f"{self.label} field(s) may not be null: {', '.join(missing)}")

    def apply_defaults(self, data: Dict[str, Any], now: datetime) -> Dict[str, Any]:
        record = {key: None for key in self.fields}
        record.update(data)
        for key, default in self.defaults.items():
            if record.get(key) is None:
                record[key] = default(now)
        return record


def _const(value: Any) -> Default:
    return lambda now: value


def _now(now: datetime) -> datetime:
    return now


USERS = EntitySpec(
    name="users",
    label="User",
    fields=(
        "username", "email", "password", "first_name", "last_name", "role",
        "badge_number", "department", "position", "phone", "profile_image",
        "is_active", "last_login_at",
    ),
    defaults={
        "role": _const("user"),
        "is_active": _const(True),
    },
    unique=("username", "email"),
    required=("username", "role", "is_active"),
    datetimes=("last_login_at",),
)

CASES = EntitySpec(
    name="cases",
    label="Case",
    fields=(
        "title", "description", "type", "priority", "status", "incident_date",
        "location", "assigned_officer", "assigned_officer_id", "created_by_id",
    ),
    defaults={
        "status": _const("open"),
        "priority": _const("medium"),
    },
    unique=("case_number",),
    required=("case_number", "priority", "status"),
    references=("assigned_officer_id", "created_by_id"),
    datetimes=("incident_date",),
    number=BusinessNumber("case_number", "CASE", width=3),
    newest_first_by="created_at",
)

OB_ENTRIES = EntitySpec(
    name="ob_entries",
    label="OB entry",
    fields=(
        "type", "description", "location", "reported_by", "reporter_contact",
        "officer_in_charge", "date_time", "status", "case_id", "recorded_by_id",
    ),
    defaults={
        "date_time": _now,
        "status": _const("recorded"),
    },
    unique=("ob_number",),
    required=("ob_number", "date_time", "status"),
    references=("case_id", "recorded_by_id"),
    datetimes=("date_time",),
    number=BusinessNumber("ob_number", "OB", separator="/"),
    newest_first_by="date_time",
)

LICENSE_PLATES = EntitySpec(
    name="license_plates",
    label="License plate",
    fields=(
        "plate_number", "owner_name", "owner_phone", "owner_address", "owner_image",
        "vehicle_make", "vehicle_model", "vehicle_year", "vehicle_color", "status", "notes",
    ),
    unique=("plate_number",),
    required=("plate_number",),
)

EVIDENCE = EntitySpec(
    name="evidence",
    label="Evidence",
    fields=(
        "case_id", "type", "description", "location_found", "collected_by",
        "collected_at", "storage_location", "chain_of_custody", "status", "file_path",
    ),
    unique=("evidence_number",),
    required=("evidence_number",),
    references=("case_id", "collected_by"),
    datetimes=("collected_at",),
    number=BusinessNumber("evidence_number", "EV"),
)

GEOFILES = EntitySpec(
    name="geofiles",
    label="Geofile",
    fields=(
        "filename", "filepath", "file_url", "file_type", "file_size", "coordinates",
        "bounding_box", "address", "location_name", "description", "metadata", "tags",
        "is_public", "access_level", "patrol_area", "incident_markers", "case_id",
        "ob_id", "evidence_id", "uploaded_by", "download_count", "last_accessed_at",
    ),
    defaults={
        "access_level": _const("internal"),
        "is_public": _const(False),
        "tags": _const("[]"),
        "metadata": _const("{}"),
        "download_count": _const(0),
        "last_accessed_at": _now,
    },
    required=("is_public", "access_level", "download_count"),
    references=("case_id", "ob_id", "evidence_id", "uploaded_by"),
    serialized=("coordinates", "bounding_box", "metadata", "tags", "patrol_area", "incident_markers"),
    datetimes=("last_accessed_at",),
    newest_first_by="created_at",
)

POLICE_VEHICLES = EntitySpec(
    name="police_vehicles",
    label="Police vehicle",
    fields=(
        "vehicle_id", "license_plate", "vehicle_type", "make", "model", "year",
        "current_location", "assigned_area", "status", "assigned_officer_id", "last_update",
    ),
    defaults={
        "status": _const("available"),
        "last_update": _now,
    },
    unique=("vehicle_id", "license_plate"),
    required=("vehicle_id", "license_plate", "status"),
    references=("assigned_officer_id",),
    serialized=("current_location", "assigned_area"),
    datetimes=("last_update",),
)

REPORTS = EntitySpec(
    name="reports",
    label="Report",
    fields=("title", "type", "description", "parameters", "status", "requested_by", "file_path"),
    defaults={
        "status": _const("pending"),
    },
    unique=("report_number",),
    required=("report_number", "status"),
    references=("requested_by",),
    serialized=("parameters",),
    number=BusinessNumber("report_number", "RPT"),
)

ALL_ENTITIES = (USERS, CASES, OB_ENTRIES, LICENSE_PLATES, EVIDENCE, GEOFILES, POLICE_VEHICLES, REPORTS)

# Text fields matched by the free-text geofile search
GEOFILE_SEARCH_FIELDS = ("filename", "description", "address", "location_name")
