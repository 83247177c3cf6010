"""In-memory sink: keeps delivered notifications per recipient for polling clients and tests."""

import threading
from collections import defaultdict

from stockroom.models.outputs import NotificationOut


class InMemorySink:
    """Thread-safe mailbox per user id. ``drain(user_id)`` empties that user's box."""

    def __init__(self):
        self._lock = threading.Lock()
        self._delivered: list[NotificationOut] = []
        self._boxes: dict[int, list[NotificationOut]] = defaultdict(list)

    def deliver(self, notification: NotificationOut) -> None:
        with self._lock:
            self._delivered.append(notification)
            for user_id in notification.recipient_ids:
                self._boxes[user_id].append(notification)

    @property
    def delivered(self) -> list[NotificationOut]:
        with self._lock:
            return list(self._delivered)

    def drain(self, user_id: int) -> list[NotificationOut]:
        with self._lock:
            return self._boxes.pop(user_id, [])

    def clear(self) -> None:
        with self._lock:
            self._delivered.clear()
            self._boxes.clear()
