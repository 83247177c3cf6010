"""Pydantic models and status enums for stockroom."""

from stockroom.models.enums import (
    AgingStatus,
    NotificationType,
    RequestStatus,
    Role,
    SerialStatus,
)
from stockroom.models.inputs import (
    ApproveBody,
    ProductCreate,
    RejectBody,
    RequestStatusUpdate,
    SerialNumberBulkCreate,
    SerialNumberCreate,
    SerialNumberUpdate,
    SkuPrefixUpdate,
    StockAlertCreate,
    StockRequestCreate,
    StorageLocationCreate,
    UserCreate,
)
from stockroom.models.outputs import (
    AgingAlert,
    AgingSweepResult,
    BulkCreateResult,
    CounterInfo,
    NotificationOut,
    ProductDetailOut,
    ProductOut,
    SerialNumberOut,
    StockRequestOut,
    StorageLocationOut,
    UserOut,
)

__all__ = [
    "AgingStatus",
    "NotificationType",
    "RequestStatus",
    "Role",
    "SerialStatus",
    "ApproveBody",
    "ProductCreate",
    "RejectBody",
    "RequestStatusUpdate",
    "SerialNumberBulkCreate",
    "SerialNumberCreate",
    "SerialNumberUpdate",
    "SkuPrefixUpdate",
    "StockAlertCreate",
    "StockRequestCreate",
    "StorageLocationCreate",
    "UserCreate",
    "AgingAlert",
    "AgingSweepResult",
    "BulkCreateResult",
    "CounterInfo",
    "NotificationOut",
    "ProductDetailOut",
    "ProductOut",
    "SerialNumberOut",
    "StockRequestOut",
    "StorageLocationOut",
    "UserOut",
]
