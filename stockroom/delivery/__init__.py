"""Notification delivery: sink protocol, default logging sink, in-memory sink, dispatch."""

from stockroom.delivery.log_sink import LoggingSink
from stockroom.delivery.memory_sink import InMemorySink
from stockroom.delivery.protocol import NotificationSink
from stockroom.models.outputs import NotificationOut
from stockroom.utils.logger import get_logger

logger = get_logger("stockroom.delivery")

_sink: NotificationSink = LoggingSink()


def get_sink() -> NotificationSink:
    return _sink


def set_sink(sink: NotificationSink) -> NotificationSink:
    """Install ``sink`` as the process-wide sink; returns the previous one."""
    global _sink
    previous, _sink = _sink, sink
    return previous


def dispatch(notifications: list[NotificationOut]) -> None:
    """Hand committed notifications to the sink. The notifications are already stored, so a
    sink failure is logged and does not undo the operation that produced them."""
    sink = _sink
    for notification in notifications:
        try:
            sink.deliver(notification)
        except Exception:
            logger.exception("notification.delivery_failed", notification_id=notification.id)


__all__ = [
    "NotificationSink",
    "LoggingSink",
    "InMemorySink",
    "get_sink",
    "set_sink",
    "dispatch",
]
