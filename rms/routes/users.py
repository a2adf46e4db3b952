from fastapi import APIRouter, Depends

from ..schemas.records import UserCreate, UserUpdate
from ..storage.provider import Record, RecordStorage
from .deps import deleted, found, get_storage

router = APIRouter(prefix="/api/users", tags=["users"])


def _public(user: Record) -> Record:
    return {k: v for k, v in user.items() if k != "password"}


@router.get("")
def list_users(storage: RecordStorage = Depends(get_storage)):
    return [_public(u) for u in storage.get_all_users()]


@router.get("/{user_id}")
def get_user(user_id: str, storage: RecordStorage = Depends(get_storage)):
    return _public(found(storage.get_user(user_id), "User"))


@router.post("", status_code=201)
def create_user(body: UserCreate, storage: RecordStorage = Depends(get_storage)):
    return _public(storage.create_user(body.model_dump(mode="json")))


@router.patch("/{user_id}")
def update_user(user_id: str, body: UserUpdate, storage: RecordStorage = Depends(get_storage)):
    return _public(storage.update_user(user_id, body.model_dump(mode="json", exclude_unset=True)))


@router.delete("/{user_id}")
def delete_user(user_id: str, storage: RecordStorage = Depends(get_storage)):
    return deleted(storage.delete_user(user_id), "User")
