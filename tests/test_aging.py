"""Tests for the aging classifier boundaries, alert windows, legacy labels and the sweep."""

import unittest
from datetime import datetime, timedelta, timezone

from support import DatabaseTestCase

from stockroom.aging import (
    alert_kind,
    classify,
    days_in_inventory,
    needs_attention,
    parse_aging_status,
    run_sweep,
    should_alert,
)
from stockroom.db.repositories import serial_repo, user_repo
from stockroom.db.repositories.notification_repo import list_for_user
from stockroom.errors import InvalidInput
from stockroom.models.enums import AgingStatus, NotificationType, SerialStatus

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _days_ago(days, hours=0):
    return NOW - timedelta(days=days, hours=hours)


class TestClassifier(unittest.TestCase):
    def test_bucket_boundaries(self):
        cases = [
            (0, AgingStatus.FRESH),
            (30, AgingStatus.FRESH),
            (31, AgingStatus.AGING),
            (44, AgingStatus.AGING),
            (45, AgingStatus.STALE),
            (89, AgingStatus.STALE),
            (90, AgingStatus.DEAD_STOCK),
            (400, AgingStatus.DEAD_STOCK),
        ]
        for days, expected in cases:
            with self.subTest(days=days):
                self.assertEqual(classify(_days_ago(days), NOW), expected)

    def test_days_are_floored(self):
        self.assertEqual(days_in_inventory(_days_ago(30, hours=23), NOW), 30)
        self.assertEqual(classify(_days_ago(30, hours=23), NOW), AgingStatus.FRESH)

    def test_naive_dates_are_utc(self):
        naive = _days_ago(31).replace(tzinfo=None)
        self.assertEqual(classify(naive, NOW), AgingStatus.AGING)

    def test_needs_attention(self):
        self.assertFalse(needs_attention(AgingStatus.FRESH))
        self.assertFalse(needs_attention(AgingStatus.AGING))
        self.assertTrue(needs_attention(AgingStatus.STALE))
        self.assertTrue(needs_attention(AgingStatus.DEAD_STOCK))

    def test_alert_only_on_exact_days(self):
        for days in (30, 37, 39, 43, 45, 60):
            with self.subTest(days=days):
                self.assertFalse(should_alert(_days_ago(days), None, NOW))
        self.assertTrue(should_alert(_days_ago(38), None, NOW))
        self.assertTrue(should_alert(_days_ago(44), None, NOW))

    def test_alert_cooldown(self):
        self.assertFalse(should_alert(_days_ago(38), NOW - timedelta(hours=23), NOW))
        self.assertTrue(should_alert(_days_ago(38), NOW - timedelta(hours=24), NOW))
        self.assertTrue(should_alert(_days_ago(44), NOW - timedelta(days=6), NOW))

    def test_alert_kind(self):
        self.assertEqual(alert_kind(38), "7_DAY_WARNING")
        self.assertEqual(alert_kind(44), "1_DAY_WARNING")

    def test_parse_aging_status(self):
        self.assertEqual(parse_aging_status("stale"), AgingStatus.STALE)
        self.assertEqual(parse_aging_status("ACTIVE"), AgingStatus.FRESH)
        self.assertEqual(parse_aging_status("idle"), AgingStatus.AGING)
        self.assertEqual(parse_aging_status("OBSOLETE"), AgingStatus.STALE)
        self.assertEqual(parse_aging_status("SURPLUS"), AgingStatus.DEAD_STOCK)
        with self.assertRaises(InvalidInput):
            parse_aging_status("ANCIENT")


class TestAgingSweep(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.admin = self.make_admin()
        self.staff = self.make_user("Sam Staff")
        self.product = self.make_product("Router", sku="RTR-1")

    def test_sweep_reclassifies_and_alerts_in_stock_units(self):
        due = self.make_unit(self.product.id, "DUE-38")
        reserved = self.make_unit(self.product.id, "RES-38", SerialStatus.RESERVED)
        stale = self.make_unit(self.product.id, "OLD-50")
        fresh = self.make_unit(self.product.id, "NEW-01")
        self.backdate(due.id, 38, NOW)
        self.backdate(reserved.id, 38, NOW)
        self.backdate(stale.id, 50, NOW)
        self.backdate(fresh.id, 1, NOW)

        result = run_sweep(NOW)
        self.assertEqual(result.scanned, 4)
        self.assertEqual(result.reclassified, 3)
        self.assertEqual([a.serial for a in result.alerts], ["DUE-38"])
        alert = result.alerts[0]
        self.assertEqual(alert.alert_type, "7_DAY_WARNING")
        self.assertEqual(alert.days, 38)
        self.assertEqual(alert.product_name, "Router")

        self.assertEqual(serial_repo.get(reserved.id).aging_status, AgingStatus.AGING)
        old = serial_repo.get(stale.id)
        self.assertEqual(old.aging_status, AgingStatus.STALE)
        self.assertTrue(old.needs_attention)
        self.assertEqual(serial_repo.get(due.id).last_alert_sent, NOW)
        self.assertIsNone(serial_repo.get(reserved.id).last_alert_sent)

        (notice,) = self.sink.delivered
        self.assertEqual(notice.type, NotificationType.STOCK_ALERT)
        self.assertIsNone(notice.sender_id)
        self.assertEqual(notice.recipient_ids, [self.admin.id, self.staff.id])
        self.assertEqual(len(list_for_user(self.staff.id)), 1)

    def test_sweep_is_idempotent_within_cooldown(self):
        unit = self.make_unit(self.product.id, "DUE-44")
        self.backdate(unit.id, 44, NOW)
        first = run_sweep(NOW)
        second = run_sweep(NOW + timedelta(hours=2))
        self.assertEqual(first.alerts_sent, 1)
        self.assertEqual(first.alerts[0].alert_type, "1_DAY_WARNING")
        self.assertEqual(second.alerts_sent, 0)
        self.assertEqual(second.reclassified, 0)
        self.assertEqual(len(self.sink.delivered), 1)

    def test_sweep_without_users_keeps_unit_due(self):
        unit = self.make_unit(self.product.id, "DUE-38")
        self.backdate(unit.id, 38, NOW)
        user_repo.set_active(self.admin.id, False)
        user_repo.set_active(self.staff.id, False)
        result = run_sweep(NOW)
        self.assertEqual(result.skipped_no_recipients, 1)
        self.assertEqual(result.alerts_sent, 0)
        self.assertIsNone(result.alerts[0].notification_id)
        self.assertIsNone(serial_repo.get(unit.id).last_alert_sent)


if __name__ == "__main__":
    unittest.main()
