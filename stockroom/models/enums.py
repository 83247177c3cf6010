"""Status vocabularies shared by the ORM, the engine and the API."""

from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    STAFF = "STAFF"


class SerialStatus(str, Enum):
    IN_STOCK = "IN_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    RESERVED = "RESERVED"
    IN_TRANSIT = "IN_TRANSIT"
    DAMAGED = "DAMAGED"
    LOST = "LOST"


class AgingStatus(str, Enum):
    """Canonical aging buckets. Older screens label them ACTIVE / IDLE / OBSOLETE / SURPLUS."""

    FRESH = "FRESH"
    AGING = "AGING"
    STALE = "STALE"
    DEAD_STOCK = "DEAD_STOCK"


LEGACY_AGING_LABELS: dict[str, AgingStatus] = {
    "ACTIVE": AgingStatus.FRESH,
    "IDLE": AgingStatus.AGING,
    "OBSOLETE": AgingStatus.STALE,
    "SURPLUS": AgingStatus.DEAD_STOCK,
}


class RequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"


class NotificationType(str, Enum):
    STOCK_ALERT = "STOCK_ALERT"
    REQUEST_UPDATE = "REQUEST_UPDATE"
    SYSTEM = "SYSTEM"
