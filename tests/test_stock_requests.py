"""Tests for the stock request workflow: all-or-nothing create, approve / reject / complete, permissions, races."""

import threading
import unittest
from unittest.mock import patch

from support import DatabaseTestCase

from stockroom.db.repositories import serial_repo, user_repo
from stockroom.errors import (
    Forbidden,
    InvalidInput,
    InvalidState,
    MissingReason,
    NotFound,
    UnavailableSerials,
)
from stockroom.models.enums import NotificationType, RequestStatus, SerialStatus
from stockroom.workflow import stock_requests


class TestCreateRequests(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.admin = self.make_admin()
        self.staff = self.make_user("Sam Staff")
        self.product = self.make_product("Scanner", sku="SCN-1")
        self.unit_a = self.make_unit(self.product.id, "A")
        self.unit_b = self.make_unit(self.product.id, "B", SerialStatus.OUT_OF_STOCK)

    def test_one_unavailable_unit_fails_whole_call(self):
        with self.assertRaises(UnavailableSerials) as ctx:
            stock_requests.create(self.staff.id, self.product.id, [self.unit_a.id, self.unit_b.id])
        self.assertEqual(ctx.exception.serial_number_ids, [self.unit_b.id])
        self.assertEqual(stock_requests.list_all(), [])
        self.assertEqual(serial_repo.get(self.unit_a.id).status, SerialStatus.IN_STOCK)

        created = stock_requests.create(self.staff.id, self.product.id, [self.unit_a.id])
        self.assertEqual(len(created), 1)
        self.assertEqual(created[0].status, RequestStatus.PENDING)
        self.assertEqual(created[0].quantity, 1)
        self.assertEqual(created[0].serial_number_id, self.unit_a.id)

    def test_one_request_per_unit_and_admins_notified(self):
        unit_c = self.make_unit(self.product.id, "C")
        created = stock_requests.create(self.staff.id, self.product.id, [self.unit_a.id, unit_c.id], notes="urgent")
        self.assertEqual([r.serial_number_id for r in created], [self.unit_a.id, unit_c.id])

        (notice,) = self.sink.delivered
        self.assertEqual(notice.title, "New Stock Request")
        self.assertEqual(notice.type, NotificationType.REQUEST_UPDATE)
        self.assertEqual(notice.recipient_ids, [self.admin.id])
        self.assertIn("2 unit(s) of Scanner", notice.message)
        self.assertIn("urgent", notice.message)

    def test_repeated_unit_fails_whole_call(self):
        with self.assertRaises(UnavailableSerials) as ctx:
            stock_requests.create(self.staff.id, self.product.id, [self.unit_a.id, self.unit_a.id])
        self.assertEqual(ctx.exception.serial_number_ids, [self.unit_a.id])
        self.assertEqual(stock_requests.list_all(), [])

    def test_failure_after_claim_creates_nothing(self):
        with patch("stockroom.workflow.stock_requests.send", side_effect=RuntimeError("store lost")):
            with self.assertRaises(RuntimeError):
                stock_requests.create(self.staff.id, self.product.id, [self.unit_a.id])
        self.assertEqual(stock_requests.list_all(), [])
        self.assertEqual(self.sink.delivered, [])
        created = stock_requests.create(self.staff.id, self.product.id, [self.unit_a.id])
        self.assertEqual(len(created), 1)

    def test_unit_with_pending_request_is_unavailable(self):
        stock_requests.create(self.staff.id, self.product.id, [self.unit_a.id])
        other = self.make_user("Olive Other")
        with self.assertRaises(UnavailableSerials):
            stock_requests.create(other.id, self.product.id, [self.unit_a.id])

    def test_unit_of_other_product_is_unavailable(self):
        other_product = self.make_product("Printer", sku="PRN-1")
        with self.assertRaises(UnavailableSerials):
            stock_requests.create(self.staff.id, other_product.id, [self.unit_a.id])

    def test_unknown_unit_is_unavailable(self):
        with self.assertRaises(UnavailableSerials):
            stock_requests.create(self.staff.id, self.product.id, [424242])

    def test_empty_selection_and_missing_product(self):
        with self.assertRaises(InvalidInput):
            stock_requests.create(self.staff.id, self.product.id, [])
        with self.assertRaises(NotFound):
            stock_requests.create(self.staff.id, 9999, [self.unit_a.id])

    def test_no_admins_still_creates_request(self):
        user_repo.set_active(self.admin.id, False)
        created = stock_requests.create(self.staff.id, self.product.id, [self.unit_a.id])
        self.assertEqual(len(created), 1)
        self.assertEqual(self.sink.delivered, [])

    def test_concurrent_requests_for_same_unit(self):
        other = self.make_user("Olive Other")
        outcomes: list[str] = []
        lock = threading.Lock()
        barrier = threading.Barrier(2)

        def attempt(user_id):
            barrier.wait()
            try:
                stock_requests.create(user_id, self.product.id, [self.unit_a.id])
                result = "ok"
            except UnavailableSerials:
                result = "unavailable"
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=attempt, args=(uid,)) for uid in (self.staff.id, other.id)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(sorted(outcomes), ["ok", "unavailable"])
        self.assertEqual(len(stock_requests.list_all(RequestStatus.PENDING)), 1)


class TestRequestTransitions(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.admin = self.make_admin()
        self.staff = self.make_user("Sam Staff")
        self.product = self.make_product("Scanner", sku="SCN-1")
        self.unit = self.make_unit(self.product.id, "A")
        (self.request,) = stock_requests.create(self.staff.id, self.product.id, [self.unit.id], notes="for site B")
        self.sink.clear()

    def test_approve_moves_unit_out_and_notifies_requester(self):
        approved = stock_requests.approve(self.request.id, self.admin.id, notes="pick up at desk")
        self.assertEqual(approved.status, RequestStatus.APPROVED)
        self.assertEqual(approved.approver_id, self.admin.id)
        self.assertEqual(serial_repo.get(self.unit.id).status, SerialStatus.OUT_OF_STOCK)

        (notice,) = self.sink.drain(self.staff.id)
        self.assertEqual(notice.title, "Request Approved")
        self.assertEqual(notice.request_id, self.request.id)
        self.assertIn("pick up at desk", notice.message)

    def test_approve_rolls_back_when_notification_fails(self):
        with patch("stockroom.workflow.stock_requests.send", side_effect=RuntimeError("store lost")):
            with self.assertRaises(RuntimeError):
                stock_requests.approve(self.request.id, self.admin.id)
        self.assertEqual(stock_requests.get(self.request.id, self.staff.id).status, RequestStatus.PENDING)
        self.assertEqual(serial_repo.get(self.unit.id).status, SerialStatus.IN_STOCK)
        self.assertEqual(self.sink.delivered, [])

    def test_approve_twice_is_invalid_state(self):
        stock_requests.approve(self.request.id, self.admin.id)
        with self.assertRaises(InvalidState) as ctx:
            stock_requests.approve(self.request.id, self.admin.id)
        self.assertEqual(ctx.exception.current, "APPROVED")

    def test_staff_cannot_approve(self):
        with self.assertRaises(Forbidden):
            stock_requests.approve(self.request.id, self.staff.id)
        self.assertEqual(stock_requests.get(self.request.id, self.staff.id).status, RequestStatus.PENDING)

    def test_approve_missing_request(self):
        with self.assertRaises(NotFound):
            stock_requests.approve(9999, self.admin.id)

    def test_reject_requires_reason_before_any_lookup(self):
        for notes in (None, "", "   "):
            with self.subTest(notes=notes):
                with self.assertRaises(MissingReason):
                    stock_requests.reject(9999, self.admin.id, notes)

    def test_reject_appends_reason_and_keeps_unit_in_stock(self):
        rejected = stock_requests.reject(self.request.id, self.admin.id, "  duplicate  ")
        self.assertEqual(rejected.status, RequestStatus.REJECTED)
        self.assertEqual(rejected.notes, "for site B\n\nRejection reason: duplicate")
        self.assertEqual(serial_repo.get(self.unit.id).status, SerialStatus.IN_STOCK)
        (notice,) = self.sink.drain(self.staff.id)
        self.assertEqual(notice.title, "Request Rejected")
        self.assertIn("Reason: duplicate", notice.message)

        # The unit can be requested again once the request is closed
        again = stock_requests.create(self.staff.id, self.product.id, [self.unit.id])
        self.assertEqual(again[0].status, RequestStatus.PENDING)

    def test_reject_after_approve_is_invalid_state(self):
        stock_requests.approve(self.request.id, self.admin.id)
        with self.assertRaises(InvalidState):
            stock_requests.reject(self.request.id, self.admin.id, "too late")

    def test_complete_only_from_approved(self):
        with self.assertRaises(InvalidState):
            stock_requests.complete(self.request.id, self.admin.id)
        stock_requests.approve(self.request.id, self.admin.id)
        completed = stock_requests.complete(self.request.id, self.admin.id)
        self.assertEqual(completed.status, RequestStatus.COMPLETED)
        with self.assertRaises(InvalidState):
            stock_requests.complete(self.request.id, self.admin.id)

    def test_update_status_dispatch(self):
        with self.assertRaises(InvalidState):
            stock_requests.update_status(self.request.id, self.admin.id, RequestStatus.PENDING)
        approved = stock_requests.update_status(self.request.id, self.admin.id, RequestStatus.APPROVED)
        self.assertEqual(approved.status, RequestStatus.APPROVED)
        with self.assertRaises(InvalidState):
            stock_requests.update_status(self.request.id, self.admin.id, RequestStatus.PENDING)

    def test_concurrent_approvals_only_one_wins(self):
        second_admin = self.make_admin("Second Admin")
        outcomes: list[str] = []
        lock = threading.Lock()
        barrier = threading.Barrier(2)

        def attempt(admin_id):
            barrier.wait()
            try:
                stock_requests.approve(self.request.id, admin_id)
                result = "ok"
            except InvalidState:
                result = "invalid_state"
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=attempt, args=(aid,)) for aid in (self.admin.id, second_admin.id)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(sorted(outcomes), ["invalid_state", "ok"])
        self.assertEqual(len(self.sink.drain(self.staff.id)), 1)

    def test_delete_permissions(self):
        other = self.make_user("Olive Other")
        with self.assertRaises(Forbidden):
            stock_requests.delete(self.request.id, other.id)
        stock_requests.delete(self.request.id, self.staff.id)
        with self.assertRaises(NotFound):
            stock_requests.get(self.request.id, self.admin.id)

    def test_admin_deletes_any_state(self):
        stock_requests.approve(self.request.id, self.admin.id)
        stock_requests.delete(self.request.id, self.admin.id)
        self.assertEqual(stock_requests.list_all(), [])
        # Deleting an approved request does not put the unit back
        self.assertEqual(serial_repo.get(self.unit.id).status, SerialStatus.OUT_OF_STOCK)

    def test_visibility(self):
        other = self.make_user("Olive Other")
        with self.assertRaises(Forbidden):
            stock_requests.get(self.request.id, other.id)
        self.assertEqual(stock_requests.get(self.request.id, self.admin.id).id, self.request.id)
        self.assertEqual([r.id for r in stock_requests.list_for_user(self.staff.id)], [self.request.id])
        self.assertEqual(stock_requests.list_for_user(other.id), [])

    def test_list_all_filters_by_status(self):
        unit_2 = self.make_unit(self.product.id, "B")
        (second,) = stock_requests.create(self.staff.id, self.product.id, [unit_2.id])
        stock_requests.approve(second.id, self.admin.id)
        self.assertEqual([r.id for r in stock_requests.list_all(RequestStatus.PENDING)], [self.request.id])
        self.assertEqual([r.id for r in stock_requests.list_all(RequestStatus.APPROVED)], [second.id])
        self.assertEqual(len(stock_requests.list_all()), 2)


if __name__ == "__main__":
    unittest.main()
