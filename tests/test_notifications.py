"""Tests for notification fan-out: recipient strategies, per-recipient read state, delivery after commit."""

import unittest

from support import DatabaseTestCase

from stockroom.db import get_session
from stockroom.db.repositories import notification_repo, user_repo
from stockroom.db.repositories.notification_repo import AllExcept, AllUsers, AllWithRole, Explicit
from stockroom.errors import Forbidden, NoRecipients, NotFound
from stockroom.models.enums import NotificationType, Role


class TestNotifications(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.admin = self.make_admin()
        self.alice = self.make_user("Alice")
        self.bob = self.make_user("Bob")

    def _send(self, recipients, sender_id=None):
        return notification_repo.send(
            title="Heads up",
            message="Something happened",
            type=NotificationType.SYSTEM,
            sender_id=sender_id,
            recipients=recipients,
        )

    def test_strategies_resolve_active_users(self):
        self.assertEqual(self._send(AllUsers()).recipient_ids, [self.admin.id, self.alice.id, self.bob.id])
        self.assertEqual(self._send(AllWithRole(Role.ADMIN)).recipient_ids, [self.admin.id])
        self.assertEqual(self._send(AllExcept(self.alice.id)).recipient_ids, [self.admin.id, self.bob.id])
        self.assertEqual(self._send(Explicit([self.bob.id, 777])).recipient_ids, [self.bob.id])

        user_repo.set_active(self.bob.id, False)
        self.assertEqual(self._send(AllUsers()).recipient_ids, [self.admin.id, self.alice.id])

    def test_no_recipients(self):
        user_repo.set_active(self.admin.id, False)
        with self.assertRaises(NoRecipients):
            self._send(AllWithRole(Role.ADMIN))
        with self.assertRaises(NoRecipients):
            self._send(Explicit([]))
        self.assertEqual(self.sink.delivered, [])

    def test_read_state_is_per_recipient(self):
        sent = self._send(Explicit([self.alice.id, self.bob.id]))
        marked = notification_repo.mark_read(sent.id, self.alice.id)
        self.assertTrue(marked.read)

        (alice_view,) = notification_repo.list_for_user(self.alice.id)
        (bob_view,) = notification_repo.list_for_user(self.bob.id)
        self.assertTrue(alice_view.read)
        self.assertFalse(bob_view.read)
        self.assertEqual(notification_repo.list_for_user(self.alice.id, unread_only=True), [])
        self.assertEqual(len(notification_repo.list_for_user(self.bob.id, unread_only=True)), 1)

    def test_mark_read_requires_recipient(self):
        sent = self._send(Explicit([self.alice.id]))
        with self.assertRaises(NotFound):
            notification_repo.mark_read(sent.id, self.bob.id)
        with self.assertRaises(NotFound):
            notification_repo.mark_read(9999, self.alice.id)

    def test_mark_all_read_counts_only_unread(self):
        first = self._send(Explicit([self.alice.id]))
        self._send(AllUsers())
        self._send(AllExcept(self.bob.id))
        notification_repo.mark_read(first.id, self.alice.id)
        self.assertEqual(notification_repo.mark_all_read(self.alice.id), 2)
        self.assertEqual(notification_repo.mark_all_read(self.alice.id), 0)
        self.assertEqual(len(notification_repo.list_for_user(self.bob.id, unread_only=True)), 1)

    def test_list_newest_first(self):
        first = self._send(AllUsers())
        second = self._send(AllUsers())
        ids = [n.id for n in notification_repo.list_for_user(self.alice.id)]
        self.assertEqual(ids, [second.id, first.id])

    def test_delivery_happens_only_after_commit(self):
        with self.assertRaises(RuntimeError):
            with get_session() as session:
                notification_repo.send(
                    title="Never delivered",
                    message="rolled back",
                    type=NotificationType.SYSTEM,
                    sender_id=None,
                    recipients=AllUsers(),
                    session=session,
                )
                self.assertEqual(self.sink.delivered, [])
                raise RuntimeError("abort")
        self.assertEqual(self.sink.delivered, [])
        self.assertEqual(notification_repo.list_for_user(self.alice.id), [])

        sent = self._send(AllUsers())
        self.assertEqual([n.id for n in self.sink.delivered], [sent.id])
        self.assertEqual([n.id for n in self.sink.drain(self.bob.id)], [sent.id])

    def test_stock_alert_defaults_to_everyone_but_sender(self):
        product = self.make_product("Toner", sku="TON-1")
        alert = notification_repo.send_stock_alert(self.admin.id, product.id, "Toner running low")
        self.assertEqual(alert.type, NotificationType.STOCK_ALERT)
        self.assertEqual(alert.title, "Stock Alert: Toner")
        self.assertEqual(alert.sender_id, self.admin.id)
        self.assertEqual(alert.recipient_ids, [self.alice.id, self.bob.id])

        targeted = notification_repo.send_stock_alert(self.admin.id, product.id, "Check shelf", [self.bob.id])
        self.assertEqual(targeted.recipient_ids, [self.bob.id])

    def test_stock_alert_admin_only(self):
        product = self.make_product("Toner", sku="TON-1")
        with self.assertRaises(Forbidden):
            notification_repo.send_stock_alert(self.alice.id, product.id, "hello")
        with self.assertRaises(NotFound):
            notification_repo.send_stock_alert(self.admin.id, 9999, "hello")


if __name__ == "__main__":
    unittest.main()
