import unittest
from decimal import Decimal

from cart_core import Cart, ValidationError, distribute, expand_order
from cart_core import store


class DistributeTests(unittest.TestCase):
    def test_even_split(self):
        self.assertEqual(distribute(Decimal("180.00"), 2), [Decimal("90.00"), Decimal("90.00")])

    def test_leftover_cents_go_first(self):
        shares = distribute(Decimal("50.00"), 3)
        self.assertEqual(shares, [Decimal("16.67"), Decimal("16.67"), Decimal("16.66")])
        self.assertEqual(sum(shares), Decimal("50.00"))

    def test_no_parts(self):
        self.assertEqual(distribute(Decimal("10.00"), 0), [])


class ExpandOrderTests(unittest.TestCase):
    def test_empty_cart_rejected(self):
        with self.assertRaises(ValidationError):
            expand_order(Cart(owner="u1"))

    def test_lines_and_totals(self):
        cart = Cart(owner="u1")
        store.add_item(cart, "perf-001", "50ml", 3, "80.00", "100.00", 20, name="Bleu de Chanel")
        store.add_bundle(
            cart,
            "coll-002",
            2,
            "50.00",
            name="Discovery Trio",
            products=[
                {"productId": "smpl-001", "size": "2ml"},
                {"productId": "smpl-002", "size": "2ml"},
                {"productId": "perf-003", "size": "50ml"},
            ],
        )

        order = expand_order(cart)

        self.assertTrue(order.order_id.startswith("ORD-"))
        self.assertEqual(order.total_items, 5)
        self.assertEqual(order.total_price, Decimal("340.00"))
        self.assertEqual(order.total_discount, Decimal("60.00"))
        self.assertEqual(order.original_total_price, Decimal("400.00"))
        self.assertEqual(order.lines[0].line_total, Decimal("240.00"))
        shares = [p.allocated_price for p in order.bundles[0].products]
        self.assertEqual(sum(shares), Decimal("50.00"))

        data = order.to_dict()
        self.assertEqual(data["totalPrice"], 340.0)
        self.assertEqual(data["items"][0]["name"], "Bleu de Chanel")
        self.assertEqual(len(data["bundleItems"][0]["products"]), 3)

    def test_cart_left_unchanged(self):
        cart = Cart(owner="u1")
        store.add_item(cart, "perf-001", "50ml", 1, "80.00", "100.00", 20)
        expand_order(cart)
        self.assertEqual(cart.total_items, 1)


if __name__ == "__main__":
    unittest.main()
