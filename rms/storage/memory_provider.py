"""
In-memory storage backend.
Keeps every record in process-local dicts; nothing survives a restart.
Used by default and as the fallback when the database is unreachable.
"""
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence

import structlog

from ..config import settings
from ..errors import Conflict, InvalidId, InvalidInput, NotFound
from ..services.geofence import within_radius
from . import fixtures
from .codec import decode_point, decode_tags, encode_point, encode_tags, merge_tags
from .entities import (
    ALL_ENTITIES,
    CASES,
    EVIDENCE,
    GEOFILE_SEARCH_FIELDS,
    GEOFILES,
    LICENSE_PLATES,
    OB_ENTRIES,
    POLICE_VEHICLES,
    REPORTS,
    USERS,
    EntitySpec,
)
from .identifiers import advance, current_year, parse_datetime, utcnow
from .provider import Filters, Record, RecordId, RecordStorage, parse_filters

logger = structlog.get_logger(__name__)


def _parse_id(value: Any, entity: Optional[str] = None) -> int:
    if isinstance(value, bool):
        raise InvalidId(value, entity)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    raise InvalidId(value, entity)


class MemoryStorage(RecordStorage):
    backend_name = "memory"

    def __init__(
        self,
        seed: Optional[bool] = None,
        clock: Callable[[], datetime] = utcnow,
        reset_ttl_seconds: Optional[int] = None,
    ):
        self._clock = clock
        ttl = reset_ttl_seconds if reset_ttl_seconds is not None else settings.password_reset_ttl_seconds
        self._reset_ttl = timedelta(seconds=ttl)
        self._tables: Dict[str, Dict[int, Record]] = {spec.name: {} for spec in ALL_ENTITIES}
        self._next_ids: Dict[str, int] = {spec.name: 1 for spec in ALL_ENTITIES}
        self._reset_tokens: Dict[str, Record] = {}
        if settings.seed_fixtures if seed is None else seed:
            self._seed()

    # ---------- generic helpers ----------
    def _find(self, spec: EntitySpec, field: str, value: Any) -> Optional[Record]:
        for record in self._tables[spec.name].values():
            if record.get(field) == value:
                return dict(record)
        return None

    def _check_unique(self, spec: EntitySpec, record: Record, exclude_id: Optional[int] = None) -> None:
        for field in spec.unique:
            value = record.get(field)
            if value is None:
                continue
            for other in self._tables[spec.name].values():
                if other["id"] != exclude_id and other.get(field) == value:
                    raise Conflict(spec.label, field, value)

    def _prepare(self, spec: EntitySpec, data: Optional[Record]) -> Record:
        cleaned = spec.clean(data)
        for field in spec.references:
            if cleaned.get(field) is not None:
                cleaned[field] = _parse_id(cleaned[field], field)
        return cleaned

    def _insert(
        self,
        spec: EntitySpec,
        data: Optional[Record],
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> Record:
        now = self._clock()
        record = spec.apply_defaults(self._prepare(spec, data), now)
        record_id = self._next_ids[spec.name]
        record["id"] = record_id
        if spec.number:
            record[spec.number.field] = spec.number.sequential(current_year(now), record_id)
        record["created_at"] = created_at or now
        record["updated_at"] = updated_at or record["created_at"]
        spec.check_required(record)
        self._check_unique(spec, record)
        self._next_ids[spec.name] = record_id + 1
        self._tables[spec.name][record_id] = record
        return dict(record)

    def _get(self, spec: EntitySpec, record_id: RecordId) -> Optional[Record]:
        record = self._tables[spec.name].get(_parse_id(record_id, spec.label))
        return dict(record) if record else None

    def _list(self, spec: EntitySpec) -> List[Record]:
        records = [dict(r) for r in self._tables[spec.name].values()]
        if spec.newest_first_by:
            key = spec.newest_first_by
            records.sort(key=lambda r: r.get(key) or datetime.min, reverse=True)
        return records

    def _update(
        self,
        spec: EntitySpec,
        record_id: RecordId,
        updates: Optional[Record],
        touch: Sequence[str] = (),
    ) -> Record:
        pk = _parse_id(record_id, spec.label)
        existing = self._tables[spec.name].get(pk)
        if existing is None:
            raise NotFound(spec.label, record_id)
        merged = {**existing, **self._prepare(spec, updates)}
        merged["updated_at"] = advance(existing["updated_at"], self._clock())
        for field in touch:
            merged[field] = merged["updated_at"]
        spec.check_required(merged)
        self._check_unique(spec, merged, exclude_id=pk)
        self._tables[spec.name][pk] = merged
        return dict(merged)

    def _delete(self, spec: EntitySpec, record_id: RecordId) -> bool:
        return self._tables[spec.name].pop(_parse_id(record_id, spec.label), None) is not None

    # ---------- fixtures ----------
    def _seed(self) -> None:
        self._insert(USERS, {
            "username": settings.admin_username,
            "email": settings.admin_email,
            "password": settings.admin_password,
            **fixtures.DEFAULT_ADMIN,
        })
        for case in fixtures.SAMPLE_CASES:
            self._insert(CASES, case, created_at=fixtures.CASE_CREATED_AT, updated_at=fixtures.CASE_UPDATED_AT)
        for vehicle in fixtures.SAMPLE_VEHICLES:
            self._insert(POLICE_VEHICLES, vehicle)
        for geofile in fixtures.SAMPLE_GEOFILES:
            self._insert(
                GEOFILES,
                {**geofile, "last_accessed_at": fixtures.GEOFILE_ACCESSED_AT},
                created_at=fixtures.GEOFILE_CREATED_AT,
                updated_at=fixtures.GEOFILE_UPDATED_AT,
            )
        logger.info(
            "memory_storage_seeded",
            users=len(self._tables[USERS.name]),
            cases=len(self._tables[CASES.name]),
            vehicles=len(self._tables[POLICE_VEHICLES.name]),
            geofiles=len(self._tables[GEOFILES.name]),
        )

    # ---------- users ----------
    def get_user(self, user_id):
        return self._get(USERS, user_id)

    def get_user_by_username(self, username):
        return self._find(USERS, "username", username)

    def get_user_by_email(self, email):
        return self._find(USERS, "email", email)

    def get_all_users(self):
        return self._list(USERS)

    def create_user(self, data):
        return self._insert(USERS, data)

    def update_user(self, user_id, updates):
        return self._update(USERS, user_id, updates)

    def delete_user(self, user_id):
        return self._delete(USERS, user_id)

    def update_last_login(self, user_id):
        user = self._tables[USERS.name].get(_parse_id(user_id, USERS.label))
        if user:
            user["last_login_at"] = self._clock()

    def update_user_password(self, user_id, password):
        self._update(USERS, user_id, {"password": password})

    # ---------- password reset tokens ----------
    def create_password_reset_token(self, user_id, token):
        if token in self._reset_tokens:
            raise Conflict("Password reset token", "token")
        now = self._clock()
        record = {
            "token": token,
            "user_id": _parse_id(user_id, USERS.label),
            "expires_at": now + self._reset_ttl,
            "created_at": now,
        }
        self._reset_tokens[token] = record
        return dict(record)

    def get_password_reset_token(self, token):
        record = self._reset_tokens.get(token)
        if record is None:
            return None
        if record["expires_at"] <= self._clock():
            del self._reset_tokens[token]
            return None
        return dict(record)

    def delete_password_reset_token(self, token):
        return self._reset_tokens.pop(token, None) is not None

    # ---------- cases ----------
    def get_cases(self):
        return self._list(CASES)

    def get_case(self, case_id):
        return self._get(CASES, case_id)

    def get_case_by_number(self, case_number):
        return self._find(CASES, "case_number", case_number)

    def create_case(self, data):
        return self._insert(CASES, data)

    def update_case(self, case_id, updates):
        return self._update(CASES, case_id, updates)

    def delete_case(self, case_id):
        return self._delete(CASES, case_id)

    # ---------- occurrence book ----------
    def get_ob_entries(self):
        return self._list(OB_ENTRIES)

    def get_ob_entry(self, entry_id):
        return self._get(OB_ENTRIES, entry_id)

    def create_ob_entry(self, data):
        return self._insert(OB_ENTRIES, data)

    def update_ob_entry(self, entry_id, updates):
        return self._update(OB_ENTRIES, entry_id, updates)

    def delete_ob_entry(self, entry_id):
        return self._delete(OB_ENTRIES, entry_id)

    # ---------- license plates ----------
    def get_license_plates(self):
        return self._list(LICENSE_PLATES)

    def get_license_plate(self, plate_id):
        return self._get(LICENSE_PLATES, plate_id)

    def get_license_plate_by_number(self, plate_number):
        return self._find(LICENSE_PLATES, "plate_number", plate_number)

    def create_license_plate(self, data):
        return self._insert(LICENSE_PLATES, data)

    def update_license_plate(self, plate_id, updates):
        return self._update(LICENSE_PLATES, plate_id, updates)

    def delete_license_plate(self, plate_id):
        return self._delete(LICENSE_PLATES, plate_id)

    # ---------- evidence ----------
    def get_evidence(self):
        return self._list(EVIDENCE)

    def get_evidence_item(self, evidence_id):
        return self._get(EVIDENCE, evidence_id)

    def get_evidence_by_number(self, evidence_number):
        return self._find(EVIDENCE, "evidence_number", evidence_number)

    def create_evidence(self, data):
        return self._insert(EVIDENCE, data)

    def update_evidence(self, evidence_id, updates):
        return self._update(EVIDENCE, evidence_id, updates)

    def delete_evidence(self, evidence_id):
        return self._delete(EVIDENCE, evidence_id)

    # ---------- geofiles ----------
    def get_geofiles(self, filters: Filters = None):
        f = parse_filters(filters)
        geofiles = self._list(GEOFILES)

        if f.search:
            needle = f.search.lower()
            geofiles = [
                g for g in geofiles
                if any(needle in (g.get(field) or "").lower() for field in GEOFILE_SEARCH_FIELDS)
            ]

        if f.file_type:
            geofiles = [g for g in geofiles if (g.get("file_type") or "").lower() == f.file_type.lower()]

        if f.access_level:
            geofiles = [g for g in geofiles if g.get("access_level") == f.access_level]

        if f.tags:
            wanted = set(f.tags)
            geofiles = [g for g in geofiles if wanted.intersection(decode_tags(g.get("tags")) or [])]

        date_from = parse_datetime(f.date_from)
        date_to = parse_datetime(f.date_to)
        if date_from:
            geofiles = [g for g in geofiles if g["created_at"] >= date_from]
        if date_to:
            geofiles = [g for g in geofiles if g["created_at"] <= date_to]

        return geofiles

    def get_geofile(self, geofile_id):
        return self._get(GEOFILES, geofile_id)

    def create_geofile(self, data):
        return self._insert(GEOFILES, data)

    def update_geofile(self, geofile_id, updates):
        return self._update(GEOFILES, geofile_id, updates)

    def delete_geofile(self, geofile_id):
        return self._delete(GEOFILES, geofile_id)

    def update_geofile_access(self, geofile_id):
        geofile = self._tables[GEOFILES.name].get(_parse_id(geofile_id, GEOFILES.label))
        if geofile:
            geofile["last_accessed_at"] = self._clock()

    def increment_geofile_download(self, geofile_id):
        geofile = self._tables[GEOFILES.name].get(_parse_id(geofile_id, GEOFILES.label))
        if geofile:
            geofile["download_count"] = (geofile.get("download_count") or 0) + 1
            geofile["last_accessed_at"] = self._clock()

    def search_geofiles_by_location(self, lat, lng, radius_m=1000):
        return [
            g for g in self._list(GEOFILES)
            if within_radius(lat, lng, decode_point(g.get("coordinates")), radius_m)
        ]

    def link_geofile_to_case(self, geofile_id, case_id):
        if self._get(GEOFILES, geofile_id) is None:
            raise NotFound(GEOFILES.label, geofile_id)
        if self._get(CASES, case_id) is None:
            raise NotFound(CASES.label, case_id)
        return self._update(GEOFILES, geofile_id, {"case_id": case_id})

    def add_geofile_tags(self, geofile_id, tags):
        if isinstance(tags, str):
            raise InvalidInput("Tags must be a list of strings")
        geofile = self._get(GEOFILES, geofile_id)
        if geofile is None:
            raise NotFound(GEOFILES.label, geofile_id)
        existing = decode_tags(geofile.get("tags"))
        if existing is None:
            raise InvalidInput(f"Geofile {geofile_id} has malformed stored tags")
        return self._update(GEOFILES, geofile_id, {"tags": encode_tags(merge_tags(existing, tags))})

    # ---------- reports ----------
    def get_reports(self):
        return self._list(REPORTS)

    def get_report(self, report_id):
        return self._get(REPORTS, report_id)

    def get_report_by_number(self, report_number):
        return self._find(REPORTS, "report_number", report_number)

    def create_report(self, data):
        return self._insert(REPORTS, data)

    def update_report(self, report_id, updates):
        return self._update(REPORTS, report_id, updates)

    def delete_report(self, report_id):
        return self._delete(REPORTS, report_id)

    # ---------- police vehicles ----------
    def get_police_vehicles(self):
        return self._list(POLICE_VEHICLES)

    def get_police_vehicle(self, vehicle_id):
        return self._get(POLICE_VEHICLES, vehicle_id)

    def get_police_vehicle_by_license_plate(self, license_plate):
        return self._find(POLICE_VEHICLES, "license_plate", license_plate)

    def create_police_vehicle(self, data):
        return self._insert(POLICE_VEHICLES, data)

    def update_police_vehicle(self, vehicle_id, updates):
        return self._update(POLICE_VEHICLES, vehicle_id, updates, touch=("last_update",))

    def delete_police_vehicle(self, vehicle_id):
        return self._delete(POLICE_VEHICLES, vehicle_id)

    def update_vehicle_location(self, vehicle_id, location):
        return self._update(
            POLICE_VEHICLES, vehicle_id, {"current_location": encode_point(location)}, touch=("last_update",)
        )

    def update_vehicle_status(self, vehicle_id, status):
        return self._update(POLICE_VEHICLES, vehicle_id, {"status": status}, touch=("last_update",))
