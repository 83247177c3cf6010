"""Storage location repository: create, list, guarded delete."""

from sqlalchemy import select

from stockroom.db import get_session
from stockroom.db.models.catalog import StorageLocation
from stockroom.db.repositories.serial_repo import count_at_location
from stockroom.errors import DuplicateName, InvalidInput, LocationInUse, NotFound
from stockroom.models.outputs import StorageLocationOut
from stockroom.utils.logger import get_logger

logger = get_logger("stockroom.locations")


def create_location(name: str, description: str | None = None) -> StorageLocationOut:
    name = (name or "").strip()
    if not name:
        raise InvalidInput("name must not be empty")
    with get_session() as session:
        if session.scalar(select(StorageLocation.id).where(StorageLocation.name == name)) is not None:
            raise DuplicateName("storage location", name)
        row = StorageLocation(name=name, description=description)
        session.add(row)
        session.flush()
        out = StorageLocationOut.model_validate(row)
    logger.info("location.created", location_id=out.id, name=name)
    return out


def list_locations() -> list[StorageLocationOut]:
    with get_session() as session:
        rows = session.scalars(select(StorageLocation).order_by(StorageLocation.name)).all()
        return [StorageLocationOut.model_validate(r) for r in rows]


def delete_location(location_id: int) -> None:
    """Refuses (LocationInUse) while any unit still sits at the location."""
    with get_session() as session:
        row = session.get(StorageLocation, location_id)
        if row is None:
            raise NotFound("StorageLocation", location_id)
        in_use = count_at_location(session, location_id)
        if in_use:
            raise LocationInUse(location_id, in_use)
        session.delete(row)
    logger.info("location.deleted", location_id=location_id)
