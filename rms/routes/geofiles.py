from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..schemas.records import GeofileCreate, GeofileLinkRequest, GeofileTagsRequest, GeofileUpdate
from ..storage.provider import RecordStorage
from .deps import deleted, found, get_storage

router = APIRouter(prefix="/api/geofiles", tags=["geofiles"])


@router.get("")
def list_geofiles(
    search: Optional[str] = None,
    file_type: Optional[str] = Query(None, alias="fileType"),
    access_level: Optional[str] = Query(None, alias="accessLevel"),
    tags: Optional[str] = Query(None, description="Comma-separated, matches any"),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    storage: RecordStorage = Depends(get_storage),
):
    """
    List geofiles, newest first.

    Every filter is optional and they combine with AND. ``search`` matches
    filename, description, address and location name case-insensitively.
    """
    filters = {
        "search": search,
        "file_type": file_type,
        "access_level": access_level,
        "tags": tags,
        "date_from": date_from,
        "date_to": date_to,
    }
    return storage.get_geofiles({k: v for k, v in filters.items() if v is not None})


@router.get("/search/location")
def search_by_location(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius: float = Query(1000, gt=0, description="Meters"),
    storage: RecordStorage = Depends(get_storage),
):
    return storage.search_geofiles_by_location(lat, lng, radius)


@router.get("/{geofile_id}")
def get_geofile(geofile_id: str, storage: RecordStorage = Depends(get_storage)):
    found(storage.get_geofile(geofile_id), "Geofile")
    storage.update_geofile_access(geofile_id)
    return storage.get_geofile(geofile_id)


@router.post("", status_code=201)
def create_geofile(body: GeofileCreate, storage: RecordStorage = Depends(get_storage)):
    return storage.create_geofile(body.model_dump(mode="json"))


@router.patch("/{geofile_id}")
def update_geofile(geofile_id: str, body: GeofileUpdate, storage: RecordStorage = Depends(get_storage)):
    return storage.update_geofile(geofile_id, body.model_dump(mode="json", exclude_unset=True))


@router.delete("/{geofile_id}")
def delete_geofile(geofile_id: str, storage: RecordStorage = Depends(get_storage)):
    return deleted(storage.delete_geofile(geofile_id), "Geofile")


@router.post("/{geofile_id}/download")
def record_download(geofile_id: str, storage: RecordStorage = Depends(get_storage)):
    """Count a download and return the file location to fetch it from."""
    found(storage.get_geofile(geofile_id), "Geofile")
    storage.increment_geofile_download(geofile_id)
    geofile = storage.get_geofile(geofile_id)
    return {
        "id": geofile["id"],
        "filename": geofile["filename"],
        "file_url": geofile["file_url"] or geofile["filepath"],
        "download_count": geofile["download_count"],
    }


@router.post("/{geofile_id}/tags")
def add_tags(geofile_id: str, body: GeofileTagsRequest, storage: RecordStorage = Depends(get_storage)):
    return storage.add_geofile_tags(geofile_id, body.tags)


@router.post("/{geofile_id}/link-case")
def link_case(geofile_id: str, body: GeofileLinkRequest, storage: RecordStorage = Depends(get_storage)):
    return storage.link_geofile_to_case(geofile_id, body.case_id)
