"""DB repositories: sync functions that open their own session and return pydantic read models."""

from stockroom.db.repositories import (
    counter_repo,
    location_repo,
    notification_repo,
    product_repo,
    serial_repo,
    user_repo,
)

__all__ = [
    "counter_repo",
    "location_repo",
    "notification_repo",
    "product_repo",
    "serial_repo",
    "user_repo",
]
