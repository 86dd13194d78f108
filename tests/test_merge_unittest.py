import unittest
from decimal import Decimal

from cart_core import Cart, merge_guest_into_user
from cart_core import store


class MergeGuestTests(unittest.TestCase):
    def setUp(self):
        self.guest = Cart(owner="guest_abc", session_id="guest_abc")
        self.user = Cart(owner="u1")

    def test_colliding_entries_sum(self):
        store.add_item(self.guest, "perf-001", "50ml", 2, "80.00", "100.00", 20)
        store.add_item(self.user, "perf-001", "50ml", 3, "80.00", "100.00", 20)

        merged = merge_guest_into_user(self.guest, self.user)

        self.assertEqual(len(merged.items), 1)
        self.assertEqual(merged.items[0].quantity, 5)
        self.assertEqual(merged.total_items, 5)
        self.assertTrue(self.guest.is_empty)
        self.assertEqual(self.guest.total_items, 0)

    def test_user_cart_argument_untouched(self):
        store.add_item(self.guest, "perf-001", "50ml", 2, "80.00", "100.00", 20)
        store.add_item(self.user, "perf-001", "50ml", 3, "80.00", "100.00", 20)
        merge_guest_into_user(self.guest, self.user)
        self.assertEqual(self.user.items[0].quantity, 3)

    def test_overflow_is_capped_not_rejected(self):
        store.add_item(self.guest, "perf-001", "50ml", 6, "80.00", "100.00", 20)
        store.add_item(self.user, "perf-001", "50ml", 7, "80.00", "100.00", 20)
        with self.assertLogs("cart_core.merge", level="WARNING"):
            merged = merge_guest_into_user(self.guest, self.user)
        self.assertEqual(merged.items[0].quantity, 10)

    def test_user_price_wins(self):
        store.add_item(self.guest, "perf-001", "50ml", 1, "90.00", "100.00", 10)
        store.add_item(self.user, "perf-001", "50ml", 1, "80.00", "100.00", 20)
        merged = merge_guest_into_user(self.guest, self.user)
        self.assertEqual(merged.items[0].unit_price, Decimal("80.00"))
        self.assertEqual(merged.total_price, Decimal("160.00"))

    def test_new_entries_and_bundles_carried_over(self):
        store.add_item(self.guest, "smpl-001", "2ml", 2, "10.80", "12.00", 10)
        store.add_bundle(self.guest, "coll-002", 1, "50.00", products=[{"productId": "smpl-002", "size": "2ml"}])
        store.add_bundle(self.user, "coll-002", 2, "50.00")
        guest_item_id = self.guest.items[0].id

        merged = merge_guest_into_user(self.guest, self.user)

        self.assertEqual(len(merged.items), 1)
        self.assertNotEqual(merged.items[0].id, guest_item_id)
        self.assertEqual(merged.bundle_items[0].quantity, 3)
        self.assertEqual(merged.total_items, 5)
        self.assertEqual(merged.total_price, Decimal("171.60"))
        self.assertEqual(merged.total_discount, Decimal("2.40"))

    def test_empty_guest_is_noop(self):
        store.add_item(self.user, "perf-001", "50ml", 3, "80.00", "100.00", 20)
        merged = merge_guest_into_user(self.guest, self.user)
        self.assertEqual(merged.items, self.user.items)
        self.assertEqual(merged.total_price, Decimal("240.00"))


if __name__ == "__main__":
    unittest.main()
