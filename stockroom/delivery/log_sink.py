"""Default sink: writes one structured log event per delivered notification."""

from stockroom.models.outputs import NotificationOut
from stockroom.utils.logger import get_logger

logger = get_logger("stockroom.delivery")


class LoggingSink:
    def deliver(self, notification: NotificationOut) -> None:
        logger.info(
            "notification.delivered",
            notification_id=notification.id,
            type=notification.type.value,
            title=notification.title,
            recipient_count=len(notification.recipient_ids),
            sender_id=notification.sender_id,
        )
