import unittest
from decimal import Decimal

from cart_core import PriceQuote, ValidationError, effective_price, original_price, quote, resolve_size_price
from cart_core.pricing import to_money, to_percent
from storefront.models.product import SizeOption


class EffectivePriceTests(unittest.TestCase):
    def test_discount_applied(self):
        self.assertEqual(effective_price(100, 20), Decimal("80.00"))

    def test_no_discount_returns_base(self):
        self.assertEqual(effective_price(95, None), Decimal("95.00"))
        self.assertEqual(effective_price(95, 0), Decimal("95.00"))

    def test_full_discount_is_free(self):
        self.assertEqual(effective_price("49.99", 100), Decimal("0.00"))

    def test_rounds_half_up_to_cents(self):
        # 10.05 * 0.5 = 5.025
        self.assertEqual(effective_price("10.05", 50), Decimal("5.03"))

    def test_rejects_out_of_range_discount(self):
        with self.assertRaises(ValidationError):
            effective_price(100, 101)
        with self.assertRaises(ValidationError):
            effective_price(100, -5)

    def test_rejects_negative_price(self):
        with self.assertRaises(ValidationError):
            effective_price(-1, 10)


class OriginalPriceTests(unittest.TestCase):
    def test_inverts_discount(self):
        self.assertEqual(original_price(80, 20), Decimal("100.00"))

    def test_no_discount_is_identity(self):
        self.assertEqual(original_price("68.50", 0), Decimal("68.50"))

    def test_full_discount_cannot_be_reversed(self):
        with self.assertRaises(ValidationError):
            original_price(0, 100)

    def test_round_trip_within_a_cent(self):
        for base, percent in [("99.99", 15), ("12.00", 10), ("250.00", 33)]:
            recovered = original_price(effective_price(base, percent), percent)
            self.assertLessEqual(abs(recovered - Decimal(base)), Decimal("0.01"))


class ConversionTests(unittest.TestCase):
    def test_float_noise_is_dropped(self):
        self.assertEqual(to_money(0.1 + 0.2), Decimal("0.30"))

    def test_booleans_and_garbage_rejected(self):
        for value in (True, None, "abc", float("nan"), float("inf"), "1e30", "\u00b2"):
            with self.assertRaises(ValidationError):
                to_money(value)

    def test_amount_ceiling(self):
        self.assertEqual(to_money("1000000"), Decimal("1000000.00"))
        with self.assertRaises(ValidationError):
            to_money("1000000.01")
        with self.assertRaises(ValidationError):
            effective_price("1e30", 20)

    def test_absent_percent_is_zero(self):
        self.assertEqual(to_percent(None), Decimal(0))


class SizePriceTests(unittest.TestCase):
    sizes = [SizeOption(label="50ml", price=100.0), {"label": "100ml", "price": 150}]

    def test_known_size_uses_its_price(self):
        self.assertEqual(resolve_size_price(120, self.sizes, "50ml"), Decimal("100.00"))
        self.assertEqual(resolve_size_price(120, self.sizes, "100ml"), Decimal("150.00"))

    def test_unknown_size_falls_back_to_base(self):
        with self.assertLogs("cart_core.pricing", level="WARNING"):
            self.assertEqual(resolve_size_price(120, self.sizes, "5ml"), Decimal("120.00"))

    def test_no_sizes_uses_base(self):
        self.assertEqual(resolve_size_price(110, None, ""), Decimal("110.00"))

    def test_quote_locks_list_price_as_original(self):
        self.assertEqual(
            quote(120, self.sizes, "50ml", 20),
            PriceQuote(Decimal("80.00"), Decimal("100.00"), Decimal(20)),
        )


if __name__ == "__main__":
    unittest.main()
