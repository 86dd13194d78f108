"""Cart totals aggregation"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Optional

from .models import BundleItem, Cart, LineItem, utcnow
from .pricing import ZERO, round_money


@dataclass(frozen=True)
class CartTotals:
    """Cart-level totals derived from line items and bundles"""
    total_items: int = 0
    total_price: Decimal = ZERO
    total_discount: Decimal = ZERO


def compute_totals(items: Iterable[LineItem], bundle_items: Iterable[BundleItem]) -> CartTotals:
    """
    Sum quantities, prices and savings.

    Bundles count toward items and price but never toward the discount total.
    Reads nothing but the entries themselves.
    """
    total_items = 0
    total_price = ZERO
    total_discount = ZERO

    for item in items:
        total_items += item.quantity
        total_price += item.line_total
        total_discount += item.line_discount

    for bundle in bundle_items:
        total_items += bundle.quantity
        total_price += bundle.line_total

    return CartTotals(
        total_items=total_items,
        total_price=round_money(total_price),
        total_discount=round_money(total_discount),
    )


def recalculate(cart: Cart) -> Cart:
    """Overwrite the cart's totals from its entries"""
    totals = compute_totals(cart.items, cart.bundle_items)
    cart.total_items = totals.total_items
    cart.total_price = totals.total_price
    cart.total_discount = totals.total_discount
    return cart


def load_cart(data: Any, owner: Optional[str] = None) -> Cart:
    """Normalize stored cart data and force a totals pass"""
    cart = Cart.from_dict(data, owner=owner)
    if cart.updated_at is None:
        cart.updated_at = utcnow()
    return recalculate(cart)
