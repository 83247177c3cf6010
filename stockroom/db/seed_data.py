"""Seed defaults: a main storage location and a bootstrap admin, created only when missing."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from stockroom import config
from stockroom.db.models.catalog import StorageLocation
from stockroom.db.models.users import User
from stockroom.models.enums import Role
from stockroom.utils.logger import get_logger

logger = get_logger("stockroom.db.seed_data")

DEFAULT_LOCATION_NAME = "Main Storage"


def seed_defaults(session: Session) -> dict[str, int]:
    """Insert the default location and admin if absent. Returns their ids."""
    location = session.scalars(
        select(StorageLocation).where(StorageLocation.name == DEFAULT_LOCATION_NAME)
    ).first()
    if location is None:
        location = StorageLocation(name=DEFAULT_LOCATION_NAME, description="Default storage location")
        session.add(location)
        logger.info("seed.location_created", name=DEFAULT_LOCATION_NAME)

    email = config.BOOTSTRAP_ADMIN_EMAIL.strip().lower()
    admin = session.scalars(select(User).where(User.email == email)).first()
    if admin is None:
        admin = User(name=config.BOOTSTRAP_ADMIN_NAME, email=email, role=Role.ADMIN, is_active=True)
        session.add(admin)
        logger.info("seed.admin_created", email=email)

    session.flush()
    return {"location_id": location.id, "admin_id": admin.id}
