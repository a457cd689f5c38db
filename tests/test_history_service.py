"""
Order history repository tests
==============================

- Commit is append-only, newest first, with fresh id / timestamp.
- Blocking errors and unconfirmed below-cost sales are refused.
- Only the owner can delete.
- Store failures leave history untouched.

Uses a LocalStore in a temporary directory.
"""
import json
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from data_integrator import HISTORY_KEY, LocalStore
from domain.models import PricingMode, Role
from services import draft_service
from services.history_service import OrderHistoryRepository


class TestOrderHistoryRepository(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "store.json"
        self.store = LocalStore(self.path)
        self.repo = OrderHistoryRepository(self.store)

    def tearDown(self):
        self.tmp.cleanup()

    def fill_draft(self, customer="Anh Bảy", phone="0909123456", price_buy=12000, price_import=9000):
        draft = self.repo.draft
        draft_service.update_order_fields(draft, customer_name=customer, phone=phone, shipping_cost=20000)
        draft_service.update_item(
            draft, 0, name="Giấy in bạt", width=1.6, length=50, quantity=2,
            price_buy=price_buy, price_import=price_import,
        )
        second = draft_service.add_item(draft)
        draft_service.update_item(draft, 1, name="Mực in", quantity=3, price_buy=150000, price_import=100000)
        return draft, second

    def test_starts_with_blank_draft_and_empty_history(self):
        self.assertEqual(len(self.repo), 0)
        self.assertEqual(len(self.repo.draft.items), 1)

    def test_commit_assigns_identity_and_keeps_values(self):
        draft, _ = self.fill_draft()
        ok, msg, committed = self.repo.commit_draft()
        self.assertTrue(ok, msg)
        self.assertTrue(committed.id)
        self.assertGreater(committed.created_at, 0)
        self.assertEqual(draft.id, "")  # draft itself keeps no identity

        stored = self.repo.list_orders()
        self.assertEqual(len(stored), 1)
        self.assertEqual(stored[0].id, committed.id)

    def test_commit_then_reload_for_edit_round_trip(self):
        draft, _ = self.fill_draft()
        ok, _, committed = self.repo.commit_draft()
        self.assertTrue(ok)

        # new repository over the same file, as after a restart
        fresh = OrderHistoryRepository(LocalStore(self.path))
        loaded = fresh.load_into_draft(committed.id)

        self.assertEqual([i.to_dict() for i in loaded.items], [i.to_dict() for i in draft.items])
        self.assertEqual(loaded.customer_name, draft.customer_name)
        self.assertEqual(loaded.shipping_cost, draft.shipping_cost)
        self.assertIs(loaded.items[0].mode, PricingMode.AREA)

        ok, _, recommitted = fresh.commit_draft()
        self.assertTrue(ok)
        self.assertNotEqual(recommitted.id, committed.id)
        self.assertEqual(len(fresh), 2)

    def test_history_is_newest_first_and_append_only(self):
        self.fill_draft(customer="Khách 1")
        _, _, first = self.repo.commit_draft()
        self.repo.draft.customer_name = "Khách 2"
        _, _, second = self.repo.commit_draft()

        ids = [o.id for o in self.repo.list_orders()]
        self.assertEqual(ids, [second.id, first.id])

        # editing the draft after commit never reaches history
        self.repo.draft.items[0].price_buy = 1
        self.assertEqual(self.repo.get(second.id).items[0].price_buy, 12000)

    def test_returned_orders_are_copies(self):
        self.fill_draft()
        _, _, committed = self.repo.commit_draft()
        listed = self.repo.list_orders()[0]
        listed.customer_name = "changed"
        self.assertEqual(self.repo.get(committed.id).customer_name, "Anh Bảy")

    def test_blocking_error_refuses_commit(self):
        draft, _ = self.fill_draft()
        draft.items[0].width = 0
        ok, msg, order = self.repo.commit_draft()
        self.assertFalse(ok)
        self.assertIsNone(order)
        self.assertEqual(len(self.repo), 0)
        self.assertFalse(self.path.exists())

    def test_owner_must_confirm_below_cost(self):
        self.fill_draft(price_buy=8000, price_import=9000)
        self.assertTrue(self.repo.needs_save_confirmation(self.repo.draft, Role.OWNER))

        ok, _, _ = self.repo.commit_draft(role=Role.OWNER)
        self.assertFalse(ok)
        self.assertEqual(len(self.repo), 0)

        ok, _, _ = self.repo.commit_draft(role=Role.OWNER, confirmed=True)
        self.assertTrue(ok)

    def test_sale_role_is_not_asked_about_cost(self):
        self.fill_draft(price_buy=8000, price_import=9000)
        self.assertFalse(self.repo.needs_save_confirmation(self.repo.draft, Role.SALE))
        ok, _, _ = self.repo.commit_draft(role=Role.SALE)
        self.assertTrue(ok)

    def test_delete_requires_owner(self):
        self.fill_draft()
        _, _, committed = self.repo.commit_draft()

        ok, _, _ = self.repo.delete(committed.id, Role.SALE)
        self.assertFalse(ok)
        self.assertEqual(len(self.repo), 1)

        ok, _, _ = self.repo.delete(committed.id, Role.OWNER)
        self.assertTrue(ok)
        self.assertEqual(len(self.repo), 0)
        self.assertEqual(len(OrderHistoryRepository(LocalStore(self.path))), 0)

    def test_delete_unknown_id(self):
        ok, _, _ = self.repo.delete("missing", Role.OWNER)
        self.assertFalse(ok)

    def test_clear_requires_owner(self):
        self.fill_draft()
        self.repo.commit_draft()
        self.assertFalse(self.repo.clear(Role.SALE)[0])
        self.assertTrue(self.repo.clear(Role.OWNER)[0])
        self.assertEqual(len(self.repo), 0)

    def test_search_by_name_or_phone(self):
        self.fill_draft(customer="Xưởng In Minh", phone="0911222333")
        self.repo.commit_draft()
        self.repo.draft.customer_name = "Chị Lan"
        self.repo.draft.phone = "0988777666"
        self.repo.commit_draft()

        self.assertEqual([o.customer_name for o in self.repo.search("minh")], ["Xưởng In Minh"])
        self.assertEqual([o.customer_name for o in self.repo.search("0988")], ["Chị Lan"])
        self.assertEqual(len(self.repo.search("")), 2)

    def test_duplicate_into_draft(self):
        self.fill_draft()
        _, _, committed = self.repo.commit_draft()
        dup = self.repo.duplicate_into_draft(committed.id)
        self.assertIs(dup, self.repo.draft)
        self.assertEqual(dup.id, "")
        self.assertEqual(dup.order_no, "")
        self.assertNotEqual(dup.items[0].id, committed.items[0].id)

    def test_two_sessions_on_one_store_keep_each_others_orders(self):
        other = OrderHistoryRepository(LocalStore(self.path))

        self.fill_draft(customer="A")
        ok, _, _ = self.repo.commit_draft()
        self.assertTrue(ok)

        draft_service.update_order_fields(other.draft, customer_name="B")
        draft_service.update_item(other.draft, 0, name="Mực in", quantity=1, price_buy=50000)
        ok, _, _ = other.commit_draft()
        self.assertTrue(ok)

        on_disk = [o.customer_name for o in OrderHistoryRepository(LocalStore(self.path)).list_orders()]
        self.assertEqual(on_disk, ["B", "A"])

    def test_clear_in_one_session_is_not_undone_by_another(self):
        other = OrderHistoryRepository(LocalStore(self.path))
        self.fill_draft(customer="A")
        self.repo.commit_draft()
        other.reload()
        self.assertEqual(len(other), 1)

        ok, _, _ = self.repo.clear(Role.OWNER)
        self.assertTrue(ok)

        draft_service.update_order_fields(other.draft, customer_name="C")
        draft_service.update_item(other.draft, 0, name="Mực in", quantity=1, price_buy=50000)
        ok, _, _ = other.commit_draft()
        self.assertTrue(ok)

        on_disk = [o.customer_name for o in OrderHistoryRepository(LocalStore(self.path)).list_orders()]
        self.assertEqual(on_disk, ["C"])

    def test_delete_sees_orders_saved_by_another_session(self):
        other = OrderHistoryRepository(LocalStore(self.path))
        self.fill_draft(customer="A")
        _, _, committed = self.repo.commit_draft()

        ok, _, _ = other.delete(committed.id, Role.OWNER)
        self.assertTrue(ok)
        self.assertEqual(len(OrderHistoryRepository(LocalStore(self.path))), 0)

    def test_failed_write_keeps_history(self):
        self.fill_draft()
        with patch.object(self.store, "write", return_value=(False, "Write failed: disk full", None)):
            ok, msg, order = self.repo.commit_draft()
        self.assertFalse(ok)
        self.assertIn("disk full", msg)
        self.assertEqual(len(self.repo), 0)

    def test_loads_browser_export_records(self):
        legacy = [{
            "id": "k1x9",
            "customerName": "Anh Tư",
            "phone": "0901",
            "date": "2025-12-01",
            "orderNo": "8",
            "shippingCollection": 50000,
            "shippingCost": 30000,
            "discountPercent": 0,
            "createdAt": 1733000000000,
            "items": [
                {"id": "i1", "name": "Giấy PP", "width": 1.07, "length": 30,
                 "quantity": 1, "unit": "Cuộn", "priceBuy": 9000, "priceImport": 6000},
            ],
        }]
        self.path.write_text(json.dumps({HISTORY_KEY: legacy}), encoding="utf-8")

        repo = OrderHistoryRepository(LocalStore(self.path))
        order = repo.get("k1x9")
        self.assertEqual(order.customer_name, "Anh Tư")
        self.assertEqual(order.shipping_collection, 50000)
        self.assertEqual(order.notes, "")
        self.assertIs(order.items[0].mode, PricingMode.AREA)
        self.assertEqual(order.items[0].price_buy, 9000)

    def test_non_finite_stored_numbers_become_zero(self):
        record = {
            "id": "n1", "date": "2026-10-19", "shipping_cost": float("inf"),
            "items": [{"id": "i1", "name": "Mực in", "quantity": 2, "price_buy": float("nan")}],
        }
        self.path.write_text(json.dumps({HISTORY_KEY: [record]}), encoding="utf-8")

        order = OrderHistoryRepository(LocalStore(self.path)).get("n1")
        self.assertEqual(order.shipping_cost, 0.0)
        self.assertEqual(order.items[0].price_buy, 0.0)
        self.assertEqual(order.items[0].quantity, 2.0)

    def test_corrupt_store_is_treated_as_empty(self):
        self.path.write_text("{not json", encoding="utf-8")
        repo = OrderHistoryRepository(LocalStore(self.path))
        self.assertEqual(len(repo), 0)
        self.assertIsNone(repo.load_error)


if __name__ == "__main__":
    unittest.main()
