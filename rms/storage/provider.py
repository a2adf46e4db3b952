from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from ..errors import InvalidInput
from ..schemas.records import GeofileFilters

Record = Dict[str, Any]
RecordId = Union[int, str]
Filters = Union[GeofileFilters, Dict[str, Any], None]


class RecordStorage:
    """
    Operation contract shared by every backend.

    ``get_*`` returns ``None`` for unknown ids, ``update_*`` and the
    specialised mutators raise ``NotFound``, ``delete_*`` reports whether a
    record was removed. Creating a duplicate of a unique field raises
    ``Conflict``.
    """

    backend_name = "abstract"

    def close(self) -> None:
        pass

    # Users
    def get_user(self, user_id: RecordId) -> Optional[Record]:
        raise NotImplementedError

    def get_user_by_username(self, username: str) -> Optional[Record]:
        raise NotImplementedError

    def get_user_by_email(self, email: str) -> Optional[Record]:
        raise NotImplementedError

    def get_all_users(self) -> List[Record]:
        raise NotImplementedError

    def create_user(self, data: Record) -> Record:
        raise NotImplementedError

    def update_user(self, user_id: RecordId, updates: Record) -> Record:
        raise NotImplementedError

    def delete_user(self, user_id: RecordId) -> bool:
        raise NotImplementedError

    def update_last_login(self, user_id: RecordId) -> None:
        raise NotImplementedError

    def update_user_password(self, user_id: RecordId, password: str) -> None:
        raise NotImplementedError

    # Password reset tokens
    def create_password_reset_token(self, user_id: RecordId, token: str) -> Record:
        raise NotImplementedError

    def get_password_reset_token(self, token: str) -> Optional[Record]:
        raise NotImplementedError

    def delete_password_reset_token(self, token: str) -> bool:
        raise NotImplementedError

    # Cases
    def get_cases(self) -> List[Record]:
        raise NotImplementedError

    def get_case(self, case_id: RecordId) -> Optional[Record]:
        raise NotImplementedError

    def get_case_by_number(self, case_number: str) -> Optional[Record]:
        raise NotImplementedError

    def create_case(self, data: Record) -> Record:
        raise NotImplementedError

    def update_case(self, case_id: RecordId, updates: Record) -> Record:
        raise NotImplementedError

    def delete_case(self, case_id: RecordId) -> bool:
        raise NotImplementedError

    # Occurrence book
    def get_ob_entries(self) -> List[Record]:
        raise NotImplementedError

    def get_ob_entry(self, entry_id: RecordId) -> Optional[Record]:
        raise NotImplementedError

    def create_ob_entry(self, data: Record) -> Record:
        raise NotImplementedError

    def update_ob_entry(self, entry_id: RecordId, updates: Record) -> Record:
        raise NotImplementedError

    def delete_ob_entry(self, entry_id: RecordId) -> bool:
        raise NotImplementedError

    # License plates
    def get_license_plates(self) -> List[Record]:
        raise NotImplementedError

    def get_license_plate(self, plate_id: RecordId) -> Optional[Record]:
        raise NotImplementedError

    def get_license_plate_by_number(self, plate_number: str) -> Optional[Record]:
        raise NotImplementedError

    def create_license_plate(self, data: Record) -> Record:
        raise NotImplementedError

    def update_license_plate(self, plate_id: RecordId, updates: Record) -> Record:
        raise NotImplementedError

    def delete_license_plate(self, plate_id: RecordId) -> bool:
        raise NotImplementedError

    # Evidence
    def get_evidence(self) -> List[Record]:
        raise NotImplementedError

    def get_evidence_item(self, evidence_id: RecordId) -> Optional[Record]:
        raise NotImplementedError

    def get_evidence_by_number(self, evidence_number: str) -> Optional[Record]:
        raise NotImplementedError

    def create_evidence(self, data: Record) -> Record:
        raise NotImplementedError

    def update_evidence(self, evidence_id: RecordId, updates: Record) -> Record:
        raise NotImplementedError

    def delete_evidence(self, evidence_id: RecordId) -> bool:
        raise NotImplementedError

    # Geofiles
    def get_geofiles(self, filters: Filters = None) -> List[Record]:
        raise NotImplementedError

    def get_geofile(self, geofile_id: RecordId) -> Optional[Record]:
        raise NotImplementedError

    def create_geofile(self, data: Record) -> Record:
        raise NotImplementedError

    def update_geofile(self, geofile_id: RecordId, updates: Record) -> Record:
        raise NotImplementedError

    def delete_geofile(self, geofile_id: RecordId) -> bool:
        raise NotImplementedError

    def update_geofile_access(self, geofile_id: RecordId) -> None:
        raise NotImplementedError

    def increment_geofile_download(self, geofile_id: RecordId) -> None:
        raise NotImplementedError

    def search_geofiles_by_location(self, lat: float, lng: float, radius_m: float = 1000) -> List[Record]:
        raise NotImplementedError

    def link_geofile_to_case(self, geofile_id: RecordId, case_id: RecordId) -> Record:
        raise NotImplementedError

    def add_geofile_tags(self, geofile_id: RecordId, tags: Sequence[str]) -> Record:
        raise NotImplementedError

    # Reports
    def get_reports(self) -> List[Record]:
        raise NotImplementedError

    def get_report(self, report_id: RecordId) -> Optional[Record]:
        raise NotImplementedError

    def get_report_by_number(self, report_number: str) -> Optional[Record]:
        raise NotImplementedError

    def create_report(self, data: Record) -> Record:
        raise NotImplementedError

    def update_report(self, report_id: RecordId, updates: Record) -> Record:
        raise NotImplementedError

    def delete_report(self, report_id: RecordId) -> bool:
        raise NotImplementedError

    # Police vehicles
    def get_police_vehicles(self) -> List[Record]:
        raise NotImplementedError

    def get_police_vehicle(self, vehicle_id: RecordId) -> Optional[Record]:
        raise NotImplementedError

    def get_police_vehicle_by_license_plate(self, license_plate: str) -> Optional[Record]:
        raise NotImplementedError

    def create_police_vehicle(self, data: Record) -> Record:
        raise NotImplementedError

    def update_police_vehicle(self, vehicle_id: RecordId, updates: Record) -> Record:
        raise NotImplementedError

    def delete_police_vehicle(self, vehicle_id: RecordId) -> bool:
        raise NotImplementedError

    def update_vehicle_location(self, vehicle_id: RecordId, location: Sequence[float]) -> Record:
        raise NotImplementedError

    def update_vehicle_status(self, vehicle_id: RecordId, status: str) -> Record:
        raise NotImplementedError


def parse_filters(filters: Filters) -> GeofileFilters:
    """Validate a filter mapping; unknown keys are rejected rather than dropped."""
    if filters is None:
        return GeofileFilters()
    if isinstance(filters, GeofileFilters):
        return filters
    try:
        return GeofileFilters.model_validate(filters)
    except ValidationError as e:
        raise InvalidInput(f"Invalid geofile filters: {e}") from e
