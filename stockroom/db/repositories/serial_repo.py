"""Serial number repository: the unit ledger (create, bulk create, status overwrite, delete, lookups).

Also holds the two session-joined helpers the request workflow builds on:
``claim_in_stock`` (the conditional update that pins a unit while a request
is opened) and ``mark_out_of_stock`` (run inside the approval transaction).
"""

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stockroom import config
from stockroom.db import get_session
from stockroom.db.base import utcnow
from stockroom.db.models.catalog import Product, StorageLocation
from stockroom.db.models.serial import SerialNumber
from stockroom.errors import BatchTooLarge, DuplicateSerial, InvalidInput, NotFound
from stockroom.models.enums import AgingStatus, SerialStatus
from stockroom.models.outputs import BulkCreateResult, SerialNumberOut
from stockroom.utils.logger import get_logger

logger = get_logger("stockroom.serials")


def _require_product(session: Session, product_id: int) -> Product:
    product = session.get(Product, product_id)
    if product is None:
        raise NotFound("Product", product_id)
    return product


def _require_location(session: Session, location_id: int | None) -> None:
    if location_id is not None and session.get(StorageLocation, location_id) is None:
        raise NotFound("StorageLocation", location_id)


def _require_serial(session: Session, serial_number_id: int) -> SerialNumber:
    row = session.get(SerialNumber, serial_number_id)
    if row is None:
        raise NotFound("SerialNumber", serial_number_id)
    return row


def _new_unit(product_id: int, serial: str, status: SerialStatus, location_id, notes) -> SerialNumber:
    now = utcnow()
    return SerialNumber(
        serial=serial,
        product_id=product_id,
        status=status,
        location_id=location_id,
        notes=notes,
        inventory_date=now,
        aging_status=AgingStatus.FRESH,
        needs_attention=False,
        created_at=now,
        updated_at=now,
    )


def default_serial_prefix(sku: str) -> str:
    return f"SN-{sku}"


def generate_serials(base_prefix: str, start: int, count: int) -> list[str]:
    """Build ``PREFIX-NNN`` serials for a range, e.g. ("SN-SKU-00001", 1, 3) -> ...-001 .. ...-003."""
    if count < 1:
        raise InvalidInput("count must be at least 1", count=count)
    if start < 0:
        raise InvalidInput("start must not be negative", start=start)
    return [f"{base_prefix}-{n:03d}" for n in range(start, start + count)]


def create(
    product_id: int,
    serial: str,
    status: SerialStatus = SerialStatus.IN_STOCK,
    location_id: int | None = None,
    notes: str | None = None,
) -> SerialNumberOut:
    """Register one unit. Serials are unique across all products."""
    serial = (serial or "").strip()
    if not serial:
        raise InvalidInput("serial must not be empty")
    with get_session() as session:
        _require_product(session, product_id)
        _require_location(session, location_id)
        if session.scalar(select(SerialNumber.id).where(SerialNumber.serial == serial)) is not None:
            raise DuplicateSerial(serial)
        row = _new_unit(product_id, serial, status, location_id, notes)
        session.add(row)
        try:
            session.flush()
        except IntegrityError as e:
            raise DuplicateSerial(serial) from e
        logger.info("serial.created", serial_number_id=row.id, serial=serial, product_id=product_id)
        return SerialNumberOut.model_validate(row)


def bulk_create(
    product_id: int,
    serials: list[str],
    status: SerialStatus = SerialStatus.IN_STOCK,
    location_id: int | None = None,
) -> BulkCreateResult:
    """Create many units in one transaction. Existing serials and repeats in the batch are skipped."""
    if len(serials) > config.BULK_SERIAL_MAX:
        raise BatchTooLarge(len(serials), config.BULK_SERIAL_MAX)
    cleaned = [(s or "").strip() for s in serials]
    if any(not s for s in cleaned):
        raise InvalidInput("serials must not be empty")
    result = BulkCreateResult()
    with get_session() as session:
        _require_product(session, product_id)
        _require_location(session, location_id)
        existing = set(
            session.scalars(select(SerialNumber.serial).where(SerialNumber.serial.in_(cleaned))).all()
        ) if cleaned else set()
        seen: set[str] = set()
        rows: list[SerialNumber] = []
        for serial in cleaned:
            if serial in existing or serial in seen:
                result.skipped.append(serial)
                continue
            seen.add(serial)
            rows.append(_new_unit(product_id, serial, status, location_id, None))
        session.add_all(rows)
        try:
            session.flush()
        except IntegrityError as e:
            # A concurrent writer took one of these serials after the existence check
            raise DuplicateSerial(", ".join(r.serial for r in rows)) from e
        result.created = [SerialNumberOut.model_validate(r) for r in rows]
    logger.info(
        "serial.bulk_created",
        product_id=product_id,
        created=len(result.created),
        skipped=len(result.skipped),
    )
    return result


def update_status(
    serial_number_id: int,
    status: SerialStatus,
    location_id: int | None = None,
    notes: str | None = None,
) -> SerialNumberOut:
    """Overwrite a unit's status (any status to any status). Location and notes change only when given."""
    with get_session() as session:
        row = _require_serial(session, serial_number_id)
        _require_location(session, location_id)
        previous = row.status
        row.status = status
        if location_id is not None:
            row.location_id = location_id
        if notes is not None:
            row.notes = notes
        session.flush()
        session.refresh(row)
        logger.info(
            "serial.status_updated",
            serial_number_id=serial_number_id,
            from_status=previous.value,
            to_status=status.value,
        )
        return SerialNumberOut.model_validate(row)


def delete(serial_number_id: int) -> None:
    """Hard delete. Requests that pointed at the unit keep their row with no serial."""
    with get_session() as session:
        row = _require_serial(session, serial_number_id)
        session.delete(row)
    logger.info("serial.deleted", serial_number_id=serial_number_id)


def get(serial_number_id: int) -> SerialNumberOut:
    with get_session() as session:
        return SerialNumberOut.model_validate(_require_serial(session, serial_number_id))


def get_by_serial(serial: str) -> SerialNumberOut:
    with get_session() as session:
        row = session.scalars(select(SerialNumber).where(SerialNumber.serial == serial.strip())).first()
        if row is None:
            raise NotFound("SerialNumber", serial)
        return SerialNumberOut.model_validate(row)


def list_available(product_id: int) -> list[SerialNumberOut]:
    """IN_STOCK units of a product, ordered by serial."""
    with get_session() as session:
        _require_product(session, product_id)
        rows = session.scalars(
            select(SerialNumber)
            .where(SerialNumber.product_id == product_id)
            .where(SerialNumber.status == SerialStatus.IN_STOCK)
            .order_by(SerialNumber.serial.asc())
        ).all()
        return [SerialNumberOut.model_validate(r) for r in rows]


def list_for_product(product_id: int) -> list[SerialNumberOut]:
    with get_session() as session:
        _require_product(session, product_id)
        rows = session.scalars(
            select(SerialNumber)
            .where(SerialNumber.product_id == product_id)
            .order_by(SerialNumber.serial.asc())
        ).all()
        return [SerialNumberOut.model_validate(r) for r in rows]


def count_at_location(session: Session, location_id: int) -> int:
    return session.scalar(
        select(func.count(SerialNumber.id)).where(SerialNumber.location_id == location_id)
    ) or 0


def claim_in_stock(session: Session, product_id: int, serial_number_ids: list[int]) -> list[int]:
    """Pin each unit that is IN_STOCK for ``product_id``; return the ids that could not be pinned.

    The no-op write takes the row (SQLite: database) write lock, so a competing
    request for the same unit waits here and then trips the one-pending-request
    index instead of slipping past a plain read.
    """
    failed: list[int] = []
    now = utcnow()
    for serial_number_id in serial_number_ids:
        result = session.execute(
            update(SerialNumber)
            .where(SerialNumber.id == serial_number_id)
            .where(SerialNumber.product_id == product_id)
            .where(SerialNumber.status == SerialStatus.IN_STOCK)
            .values(updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            failed.append(serial_number_id)
    return failed


def mark_out_of_stock(session: Session, serial_number_id: int | None) -> SerialStatus | None:
    """Move a unit to OUT_OF_STOCK inside the caller's transaction. Returns its previous status."""
    if serial_number_id is None:
        return None
    row = session.get(SerialNumber, serial_number_id)
    if row is None:
        return None
    previous = row.status
    row.status = SerialStatus.OUT_OF_STOCK
    return previous
