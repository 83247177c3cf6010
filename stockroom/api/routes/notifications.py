"""Notification inbox routes and the admin stock alert."""

from typing import Any

from fastapi import APIRouter, Depends, Query

from stockroom.api.deps import admin_user, current_user
from stockroom.db.repositories import notification_repo
from stockroom.models.inputs import StockAlertCreate
from stockroom.models.outputs import NotificationOut, UserOut

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
def list_notifications(
    unread_only: bool = Query(False),
    user: UserOut = Depends(current_user),
) -> list[NotificationOut]:
    return notification_repo.list_for_user(user.id, unread_only=unread_only)


@router.patch("/read-all")
def mark_all_read(user: UserOut = Depends(current_user)) -> dict[str, Any]:
    return {"updated": notification_repo.mark_all_read(user.id)}


@router.patch("/{notification_id}/read")
def mark_read(notification_id: int, user: UserOut = Depends(current_user)) -> NotificationOut:
    return notification_repo.mark_read(notification_id, user.id)


@router.post("", status_code=201)
def send_stock_alert(body: StockAlertCreate, admin: UserOut = Depends(admin_user)) -> NotificationOut:
    """Stock alert from an admin to chosen users, or to everyone else when none are chosen."""
    return notification_repo.send_stock_alert(admin.id, body.product_id, body.message, body.recipient_ids)
