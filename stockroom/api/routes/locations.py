"""Storage location routes."""

from fastapi import APIRouter, Depends, Response

from stockroom.api.deps import admin_user, current_user
from stockroom.db.repositories import location_repo
from stockroom.models.inputs import StorageLocationCreate
from stockroom.models.outputs import StorageLocationOut, UserOut

router = APIRouter(prefix="/storage-locations", tags=["storage-locations"])


@router.get("")
def list_locations(user: UserOut = Depends(current_user)) -> list[StorageLocationOut]:
    return location_repo.list_locations()


@router.post("", status_code=201)
def create_location(body: StorageLocationCreate, admin: UserOut = Depends(admin_user)) -> StorageLocationOut:
    return location_repo.create_location(body.name, body.description)


@router.delete("/{location_id}", status_code=204)
def delete_location(location_id: int, admin: UserOut = Depends(admin_user)) -> Response:
    location_repo.delete_location(location_id)
    return Response(status_code=204)
