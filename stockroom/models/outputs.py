"""Read models returned by repositories, the workflow and the API."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from stockroom.models.enums import (
    AgingStatus,
    NotificationType,
    RequestStatus,
    Role,
    SerialStatus,
)


class _OrmModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class UserOut(_OrmModel):
    id: int
    name: str
    email: str
    role: Role
    department: Optional[str] = None
    is_active: bool = True


class StorageLocationOut(_OrmModel):
    id: int
    name: str
    description: Optional[str] = None


class CategoryOut(_OrmModel):
    id: int
    name: str


class ProductOut(_OrmModel):
    id: int
    sku: str
    barcode: Optional[str] = None
    name: str
    description: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    category: CategoryOut
    price: Decimal
    minimum_stock: int


class SerialNumberOut(_OrmModel):
    id: int
    serial: str
    product_id: int
    status: SerialStatus
    location: Optional[StorageLocationOut] = None
    notes: Optional[str] = None
    inventory_date: datetime
    aging_status: AgingStatus
    needs_attention: bool
    last_alert_sent: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ProductDetailOut(ProductOut):
    """Product with its units and the IN_STOCK count derived from them."""

    serial_numbers: list[SerialNumberOut] = Field(default_factory=list)

    @computed_field
    @property
    def in_stock(self) -> int:
        return sum(1 for sn in self.serial_numbers if sn.status == SerialStatus.IN_STOCK)


class BulkCreateResult(BaseModel):
    created: list[SerialNumberOut] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)


class StockRequestOut(_OrmModel):
    id: int
    product_id: int
    requester_id: int
    serial_number_id: Optional[int] = None
    quantity: int
    status: RequestStatus
    notes: Optional[str] = None
    approver_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class NotificationOut(BaseModel):
    """A notification as seen by one recipient (``read`` is that recipient's own mark)."""

    id: int
    title: str
    message: str
    type: NotificationType
    product_id: Optional[int] = None
    request_id: Optional[int] = None
    sender_id: Optional[int] = None
    recipient_ids: list[int] = Field(default_factory=list)
    read: bool = False
    created_at: datetime


class CounterInfo(BaseModel):
    prefix: str
    current_value: int
    next_sku: str


class AgingAlert(BaseModel):
    serial_number_id: int
    serial: str
    product_id: int
    product_name: str
    days: int
    alert_type: str
    notification_id: Optional[int] = None


class AgingSweepResult(BaseModel):
    scanned: int = 0
    reclassified: int = 0
    alerts: list[AgingAlert] = Field(default_factory=list)
    skipped_no_recipients: int = 0

    @property
    def alerts_sent(self) -> int:
        return sum(1 for a in self.alerts if a.notification_id is not None)

    def summary(self) -> dict[str, Any]:
        return {
            "scanned": self.scanned,
            "reclassified": self.reclassified,
            "alerts_sent": self.alerts_sent,
            "skipped_no_recipients": self.skipped_no_recipients,
        }
