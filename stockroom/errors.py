"""Typed exceptions raised by the stockroom engine.

Every error carries a machine-readable ``code`` and the HTTP status the API
renders it with. None of them are retried internally; they are terminal,
user-visible outcomes. Store failures (connection loss, driver errors) are
not wrapped here and surface as a generic internal error.

    StockroomError
    +-- NotFound
    +-- InvalidState
    +-- InvalidInput
    |   +-- MissingReason
    |   +-- BatchTooLarge
    +-- Conflict
    |   +-- DuplicateSerial
    |   +-- UnavailableSerials
    |   +-- DuplicateName
    |   +-- LocationInUse
    +-- Unauthorized
    +-- Forbidden
    +-- NoRecipients
"""

from typing import Any


class StockroomError(Exception):
    """Base class for all engine errors."""

    code: str = "stockroom_error"
    http_status: int = 500

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {"error_code": self.code, "message": self.message, "details": self.details}


class NotFound(StockroomError):
    code = "not_found"
    http_status = 404

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} not found: {entity_id!r}", entity=entity, entity_id=entity_id)
        self.entity = entity
        self.entity_id = entity_id


class InvalidState(StockroomError):
    """Transition not allowed from the entity's current status."""

    code = "invalid_state"
    http_status = 409

    def __init__(self, entity: str, entity_id: Any, current: Any, attempted: Any):
        current = getattr(current, "value", current)
        attempted = getattr(attempted, "value", attempted)
        super().__init__(
            f"{entity} {entity_id!r} is {current}; cannot move to {attempted}",
            entity=entity,
            entity_id=entity_id,
            current_status=current,
            attempted_status=attempted,
        )
        self.current = current
        self.attempted = attempted


class InvalidInput(StockroomError):
    code = "invalid_input"
    http_status = 400


class MissingReason(InvalidInput):
    code = "missing_reason"

    def __init__(self, message: str = "Rejection reason is required"):
        super().__init__(message)


class BatchTooLarge(InvalidInput):
    code = "batch_too_large"

    def __init__(self, size: int, limit: int):
        super().__init__(f"Batch of {size} exceeds the limit of {limit}", size=size, limit=limit)
        self.size = size
        self.limit = limit


class Conflict(StockroomError):
    code = "conflict"
    http_status = 409


class DuplicateSerial(Conflict):
    code = "duplicate_serial"

    def __init__(self, serial: str):
        super().__init__(f"Serial number already exists: {serial!r}", serial=serial)
        self.serial = serial


class UnavailableSerials(Conflict):
    """One or more serial numbers are not IN_STOCK for the product (or already claimed)."""

    code = "unavailable_serials"

    def __init__(self, serial_number_ids: list[int]):
        super().__init__(
            "One or more selected serial numbers are not available or do not belong to this product",
            serial_number_ids=list(serial_number_ids),
        )
        self.serial_number_ids = list(serial_number_ids)


class DuplicateName(Conflict):
    code = "duplicate_name"

    def __init__(self, entity: str, name: str):
        super().__init__(f"A {entity} named {name!r} already exists", entity=entity, name=name)


class LocationInUse(Conflict):
    code = "location_in_use"

    def __init__(self, location_id: int, unit_count: int):
        super().__init__(
            "Cannot delete a storage location that still holds serial numbers",
            location_id=location_id,
            unit_count=unit_count,
        )


class Unauthorized(StockroomError):
    code = "unauthorized"
    http_status = 401


class Forbidden(StockroomError):
    code = "forbidden"
    http_status = 403


class NoRecipients(StockroomError):
    code = "no_recipients"
    http_status = 400

    def __init__(self, strategy: str):
        super().__init__(f"Notification resolves to no recipients ({strategy})", strategy=strategy)
