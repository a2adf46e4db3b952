from fastapi import APIRouter, Depends

from ..schemas.records import ReportCreate, ReportUpdate
from ..storage.provider import RecordStorage
from .deps import deleted, found, get_storage

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("")
def list_reports(storage: RecordStorage = Depends(get_storage)):
    return storage.get_reports()


@router.get("/number/{report_number}")
def get_report_by_number(report_number: str, storage: RecordStorage = Depends(get_storage)):
    return found(storage.get_report_by_number(report_number), "Report")


@router.get("/{report_id}")
def get_report(report_id: str, storage: RecordStorage = Depends(get_storage)):
    return found(storage.get_report(report_id), "Report")


@router.post("", status_code=201)
def create_report(body: ReportCreate, storage: RecordStorage = Depends(get_storage)):
    return storage.create_report(body.model_dump(mode="json"))


@router.patch("/{report_id}")
def update_report(report_id: str, body: ReportUpdate, storage: RecordStorage = Depends(get_storage)):
    return storage.update_report(report_id, body.model_dump(mode="json", exclude_unset=True))


@router.delete("/{report_id}")
def delete_report(report_id: str, storage: RecordStorage = Depends(get_storage)):
    return deleted(storage.delete_report(report_id), "Report")
