"""Notification sink protocol: where committed notifications are handed for delivery."""

from typing import Protocol

from stockroom.models.outputs import NotificationOut


class NotificationSink(Protocol):
    """Receives each notification once its transaction has committed."""

    def deliver(self, notification: NotificationOut) -> None:
        """Deliver one notification (push, poll queue, log line). Must not raise for normal operation."""
        ...
