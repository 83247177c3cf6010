"""Shared test setup: environment before import, one fresh SQLite file per test, small builders."""

import os
import sys
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path

# A shared file DB, not :memory:, so every session and thread sees the same data
_default_db = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_default_db.close()
os.environ["DATABASE_URL"] = f"sqlite:///{_default_db.name}"
os.environ["LOG_TO_FILE"] = "false"
os.environ["TRACING_ENABLED"] = "false"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import update  # noqa: E402

from stockroom.db import get_engine, get_session, reset_db  # noqa: E402
from stockroom.db.models.serial import SerialNumber  # noqa: E402
from stockroom.db.repositories import product_repo, serial_repo, user_repo  # noqa: E402
from stockroom.delivery import InMemorySink, set_sink  # noqa: E402
from stockroom.models.enums import Role, SerialStatus  # noqa: E402


class DatabaseTestCase(unittest.TestCase):
    """Each test runs against its own empty SQLite file with an in-memory notification sink."""

    def setUp(self):
        fd, self._db_path = tempfile.mkstemp(suffix=".sqlite")
        os.close(fd)
        reset_db(f"sqlite:///{self._db_path}")
        self.sink = InMemorySink()
        self._previous_sink = set_sink(self.sink)

    def tearDown(self):
        set_sink(self._previous_sink)
        get_engine().dispose()
        try:
            os.unlink(self._db_path)
        except OSError:
            pass

    # builders

    def make_user(self, name="Staff Member", role=Role.STAFF, email=None):
        email = email or f"{name.lower().replace(' ', '.')}@example.com"
        return user_repo.create_user(name, email, role)

    def make_admin(self, name="Admin User"):
        return self.make_user(name, Role.ADMIN)

    def make_product(self, name="Laptop", category="Computers", sku=None, **kwargs):
        return product_repo.create_product(name=name, category_name=category, sku=sku, **kwargs)

    def make_unit(self, product_id, serial, status=SerialStatus.IN_STOCK, location_id=None):
        return serial_repo.create(product_id, serial, status, location_id)

    def backdate(self, serial_number_id, days, now=None, last_alert_sent=None):
        """Set a unit's inventory_date to ``days`` before ``now``."""
        now = now or datetime.now(timezone.utc)
        with get_session() as session:
            session.execute(
                update(SerialNumber)
                .where(SerialNumber.id == serial_number_id)
                .values(inventory_date=now - timedelta(days=days), last_alert_sent=last_alert_sent)
            )
        return now
