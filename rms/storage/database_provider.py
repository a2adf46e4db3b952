"""
Database storage backend.
Persists records through SQLAlchemy to DATABASE_URL (PostgreSQL in
production, SQLite in development). Primary keys are UUIDs generated at
insert; uniqueness is enforced by the database's unique indexes.
"""
import uuid
from contextlib import contextmanager
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

import structlog
from sqlalchemy import func, inspect, or_, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import settings
from ..db import Base, build_engine, make_session_factory
from ..errors import Conflict, ConnectionFailure, InvalidId, InvalidInput, NotFound
from ..logging import mask_url
from ..models.models import (
    Case,
    Evidence,
    Geofile,
    LicensePlate,
    OBEntry,
    PasswordResetToken,
    PoliceVehicle,
    Report,
    User,
)
from ..services.geofence import within_radius
from .codec import decode_point, decode_tags, encode_point, encode_tags, merge_tags
from .entities import (
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
from .fixtures import DEFAULT_ADMIN
from .identifiers import advance, current_year, parse_datetime, utcnow
from .provider import Filters, Record, RecordId, RecordStorage, parse_filters

logger = structlog.get_logger(__name__)

MODELS = {
    USERS.name: User,
    CASES.name: Case,
    OB_ENTRIES.name: OBEntry,
    LICENSE_PLATES.name: LicensePlate,
    EVIDENCE.name: Evidence,
    GEOFILES.name: Geofile,
    POLICE_VEHICLES.name: PoliceVehicle,
    REPORTS.name: Report,
}


def _parse_uuid(value: Any, entity: Optional[str] = None) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        raise InvalidId(value, entity)


@lru_cache(maxsize=None)
def _columns(model) -> Dict[str, str]:
    """Column name -> mapped attribute name (they differ for ``metadata``)."""
    return {attr.columns[0].name: attr.key for attr in inspect(model).column_attrs}


def _to_dict(obj) -> Record:
    record = {}
    for name, key in _columns(type(obj)).items():
        value = getattr(obj, key)
        record[name] = str(value) if isinstance(value, uuid.UUID) else value
    return record


class DatabaseStorage(RecordStorage):
    backend_name = "database"

    def __init__(self, clock: Callable[[], datetime] = utcnow, reset_ttl_seconds: Optional[int] = None):
        self._clock = clock
        ttl = reset_ttl_seconds if reset_ttl_seconds is not None else settings.password_reset_ttl_seconds
        self._reset_ttl = timedelta(seconds=ttl)
        self._engine = None
        self._sessions = None

    # ---------- connection lifecycle ----------
    @property
    def is_connected(self) -> bool:
        return self._sessions is not None

    def connect(self, database_url: Optional[str] = None) -> bool:
        """
        Open the pool, verify liveness, provision tables and unique indexes,
        and make sure the default admin exists. Returns False on failure.
        """
        url = database_url or settings.database_url
        engine = None
        try:
            engine = build_engine(url)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            Base.metadata.create_all(bind=engine)
            self._engine = engine
            self._sessions = make_session_factory(engine)
            self.ensure_default_admin()
        except Exception as e:
            logger.warning("database_connect_failed", url=mask_url(url), error=str(e))
            if engine is not None:
                engine.dispose()
            self._engine = None
            self._sessions = None
            return False
        logger.info("database_connected", url=mask_url(url))
        return True

    def disconnect(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            logger.info("database_disconnected")
        self._engine = None
        self._sessions = None

    def close(self) -> None:
        self.disconnect()

    def ensure_default_admin(self) -> Optional[Record]:
        """Create the default admin account unless one already exists."""
        if self.get_user_by_username(settings.admin_username):
            return None
        admin = self.create_user({
            "username": settings.admin_username,
            "email": settings.admin_email,
            "password": settings.admin_password,
            **DEFAULT_ADMIN,
        })
        logger.info("default_admin_created", username=admin["username"])
        return admin

    @contextmanager
    def _session(self) -> Iterator[Session]:
        if self._sessions is None:
            raise ConnectionFailure("Database storage is not connected")
        db = self._sessions()
        try:
            yield db
        finally:
            db.close()

    def _commit(
        self,
        db: Session,
        spec_label: str,
        unique: Sequence[str] = (),
        values: Optional[Record] = None,
    ) -> None:
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            message = str(e.orig)
            # SQLite: "UNIQUE constraint failed", PostgreSQL: "violates unique constraint"
            field = next((f for f in unique if f in message), None) if "unique" in message.lower() else None
            if field is None:
                raise InvalidInput(f"{spec_label} rejected by the database: {message}") from e
            raise Conflict(spec_label, field, (values or {}).get(field)) from e

    # ---------- generic helpers ----------
    def _prepare(self, spec: EntitySpec, data: Optional[Record]) -> Dict[str, Any]:
        cleaned = spec.clean(data)
        for field in spec.references:
            if cleaned.get(field) is not None:
                cleaned[field] = _parse_uuid(cleaned[field], field)
        return cleaned

    def _insert(self, spec: EntitySpec, data: Optional[Record]) -> Record:
        now = self._clock()
        record = spec.apply_defaults(self._prepare(spec, data), now)
        if spec.number:
            record[spec.number.field] = spec.number.random(current_year(now))
        record["created_at"] = now
        record["updated_at"] = now
        spec.check_required(record)
        model = MODELS[spec.name]
        columns = _columns(model)
        with self._session() as db:
            obj = model(**{columns[k]: v for k, v in record.items()})
            db.add(obj)
            self._commit(db, spec.label, spec.unique, record)
            return _to_dict(obj)

    def _get(self, spec: EntitySpec, record_id: RecordId) -> Optional[Record]:
        pk = _parse_uuid(record_id, spec.label)
        with self._session() as db:
            obj = db.get(MODELS[spec.name], pk)
            return _to_dict(obj) if obj else None

    def _find(self, spec: EntitySpec, field: str, value: Any) -> Optional[Record]:
        model = MODELS[spec.name]
        with self._session() as db:
            obj = db.query(model).filter(getattr(model, _columns(model)[field]) == value).first()
            return _to_dict(obj) if obj else None

    def _list(self, spec: EntitySpec) -> List[Record]:
        model = MODELS[spec.name]
        with self._session() as db:
            query = db.query(model)
            if spec.newest_first_by:
                query = query.order_by(getattr(model, spec.newest_first_by).desc())
            else:
                query = query.order_by(model.created_at.asc())
            return [_to_dict(obj) for obj in query.all()]

    def _update(
        self,
        spec: EntitySpec,
        record_id: RecordId,
        updates: Optional[Record],
        touch: Sequence[str] = (),
    ) -> Record:
        pk = _parse_uuid(record_id, spec.label)
        model = MODELS[spec.name]
        columns = _columns(model)
        values = self._prepare(spec, updates)
        with self._session() as db:
            obj = db.get(model, pk)
            if obj is None:
                raise NotFound(spec.label, record_id)
            spec.check_required(values, partial=True)
            for key, value in values.items():
                setattr(obj, columns[key], value)
            stamp = advance(obj.updated_at, self._clock())
            obj.updated_at = stamp
            for field in touch:
                setattr(obj, columns[field], stamp)
            self._commit(db, spec.label, spec.unique, values)
            return _to_dict(obj)

    def _delete(self, spec: EntitySpec, record_id: RecordId) -> bool:
        pk = _parse_uuid(record_id, spec.label)
        model = MODELS[spec.name]
        with self._session() as db:
            deleted = db.query(model).filter(model.id == pk).delete(synchronize_session=False)
            db.commit()
            return deleted > 0

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
        pk = _parse_uuid(user_id, USERS.label)
        with self._session() as db:
            db.query(User).filter(User.id == pk).update(
                {User.last_login_at: self._clock()}, synchronize_session=False
            )
            db.commit()

    def update_user_password(self, user_id, password):
        self._update(USERS, user_id, {"password": password})

    # ---------- password reset tokens ----------
    @staticmethod
    def _token_dict(obj: PasswordResetToken) -> Record:
        record = _to_dict(obj)
        record.pop("id", None)
        return record

    def create_password_reset_token(self, user_id, token):
        now = self._clock()
        with self._session() as db:
            obj = PasswordResetToken(
                token=token,
                user_id=_parse_uuid(user_id, USERS.label),
                expires_at=now + self._reset_ttl,
                created_at=now,
            )
            db.add(obj)
            self._commit(db, "Password reset token", ("token",), {"token": token})
            return self._token_dict(obj)

    def get_password_reset_token(self, token):
        with self._session() as db:
            obj = db.query(PasswordResetToken).filter(PasswordResetToken.token == token).first()
            if obj is None:
                return None
            if obj.expires_at <= self._clock():
                db.delete(obj)
                db.commit()
                return None
            return self._token_dict(obj)

    def delete_password_reset_token(self, token):
        with self._session() as db:
            deleted = db.query(PasswordResetToken).filter(PasswordResetToken.token == token).delete(
                synchronize_session=False
            )
            db.commit()
            return deleted > 0

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
        with self._session() as db:
            query = db.query(Geofile)

            if f.search:
                query = query.filter(or_(*(
                    getattr(Geofile, field).icontains(f.search, autoescape=True)
                    for field in GEOFILE_SEARCH_FIELDS
                )))

            if f.file_type:
                query = query.filter(func.lower(Geofile.file_type) == f.file_type.lower())

            if f.access_level:
                query = query.filter(Geofile.access_level == f.access_level)

            if f.tags:
                # Substring pre-filter; exact membership is checked on the decoded list below
                query = query.filter(or_(*(Geofile.tags.contains(tag, autoescape=True) for tag in f.tags)))

            date_from = parse_datetime(f.date_from)
            date_to = parse_datetime(f.date_to)
            if date_from:
                query = query.filter(Geofile.created_at >= date_from)
            if date_to:
                query = query.filter(Geofile.created_at <= date_to)

            geofiles = [_to_dict(g) for g in query.order_by(Geofile.created_at.desc()).all()]

        if f.tags:
            wanted = set(f.tags)
            geofiles = [g for g in geofiles if wanted.intersection(decode_tags(g.get("tags")) or [])]
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
        pk = _parse_uuid(geofile_id, GEOFILES.label)
        with self._session() as db:
            db.query(Geofile).filter(Geofile.id == pk).update(
                {Geofile.last_accessed_at: self._clock()}, synchronize_session=False
            )
            db.commit()

    def increment_geofile_download(self, geofile_id):
        pk = _parse_uuid(geofile_id, GEOFILES.label)
        with self._session() as db:
            db.query(Geofile).filter(Geofile.id == pk).update(
                {
                    Geofile.download_count: Geofile.download_count + 1,
                    Geofile.last_accessed_at: self._clock(),
                },
                synchronize_session=False,
            )
            db.commit()

    def search_geofiles_by_location(self, lat, lng, radius_m=1000):
        with self._session() as db:
            rows = (
                db.query(Geofile)
                .filter(Geofile.coordinates.isnot(None))
                .order_by(Geofile.created_at.desc())
                .all()
            )
            geofiles = [_to_dict(g) for g in rows]
        return [g for g in geofiles if within_radius(lat, lng, decode_point(g["coordinates"]), radius_m)]

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
