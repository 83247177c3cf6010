"""Re-export all ORM models so Base.metadata has all tables."""

from stockroom.db.models.catalog import Category, Counter, Product, StorageLocation
from stockroom.db.models.notification import Notification, NotificationRecipient
from stockroom.db.models.serial import SerialNumber
from stockroom.db.models.stock_request import StockRequest
from stockroom.db.models.users import User

__all__ = [
    "User",
    "Category",
    "StorageLocation",
    "Product",
    "Counter",
    "SerialNumber",
    "StockRequest",
    "Notification",
    "NotificationRecipient",
]
