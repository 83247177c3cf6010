"""Request bodies accepted by the API and CLI."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from stockroom.models.enums import RequestStatus, Role, SerialStatus


class StockRequestCreate(BaseModel):
    product_id: int
    serial_number_ids: list[int] = Field(min_length=1)
    notes: Optional[str] = None


class ApproveBody(BaseModel):
    notes: Optional[str] = None


class RejectBody(BaseModel):
    # Emptiness is checked by the workflow so it surfaces as missing_reason, not a 422
    notes: Optional[str] = None


class RequestStatusUpdate(BaseModel):
    status: RequestStatus
    notes: Optional[str] = None


class SerialNumberCreate(BaseModel):
    product_id: int
    serial: str = Field(min_length=1, max_length=128)
    status: SerialStatus = SerialStatus.IN_STOCK
    location_id: Optional[int] = None
    notes: Optional[str] = None


class SerialNumberBulkCreate(BaseModel):
    """Either explicit ``serials`` or a generated range (``quantity`` from ``start_number``)."""

    product_id: int
    status: SerialStatus = SerialStatus.IN_STOCK
    location_id: Optional[int] = None
    serials: Optional[list[str]] = None
    quantity: Optional[int] = Field(None, ge=1)
    prefix: Optional[str] = None
    start_number: int = Field(1, ge=0)


class SerialNumberUpdate(BaseModel):
    status: SerialStatus
    location_id: Optional[int] = None
    notes: Optional[str] = None


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    category_name: str = Field(min_length=1)
    sku: Optional[str] = None
    barcode: Optional[str] = None
    description: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    price: Decimal = Decimal("0")
    minimum_stock: int = Field(0, ge=0)


class SkuPrefixUpdate(BaseModel):
    prefix: str


class StorageLocationCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str
    role: Role = Role.STAFF
    department: Optional[str] = None


class StockAlertCreate(BaseModel):
    """Admin-initiated stock alert; no recipients means everyone except the sender."""

    product_id: int
    message: str = Field(min_length=1)
    recipient_ids: Optional[list[int]] = None
