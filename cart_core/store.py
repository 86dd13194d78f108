"""
Line item store

Merge-aware mutations on a single cart. Every function validates before
touching the cart, so a rejected call leaves it unchanged, and finishes with
an aggregator pass.
"""

import logging
from typing import Iterable, Optional, Union

from .aggregator import recalculate
from .exceptions import CapacityError, NotFoundError, ValidationError
from .models import (
    MAX_QUANTITY,
    MIN_QUANTITY,
    BundleItem,
    BundleProduct,
    Cart,
    LineItem,
    new_id,
    parse_quantity,
    require_id,
)
from .pricing import Number, to_money, to_percent

logger = logging.getLogger(__name__)


def _check_new_quantity(quantity) -> int:
    quantity = parse_quantity(quantity)
    if quantity < MIN_QUANTITY or quantity > MAX_QUANTITY:
        raise ValidationError(f"Quantity must be between {MIN_QUANTITY} and {MAX_QUANTITY}")
    return quantity


def _check_cap(current: int, added: int, what: str) -> int:
    total = current + added
    if total > MAX_QUANTITY:
        raise CapacityError(
            f"Cannot add more than {MAX_QUANTITY} of the same {what} "
            f"(in cart: {current}, requested: {added})"
        )
    return total


def add_item(
    cart: Cart,
    product_id: str,
    size: str,
    quantity: int,
    unit_price: Number,
    original_unit_price: Optional[Number] = None,
    discount_percent: Optional[Number] = None,
    name: Optional[str] = None,
) -> Cart:
    """
    Add a product size to the cart.

    An existing (product_id, size) entry only grows in quantity; its locked-in
    prices are kept even if this call carries a different snapshot.
    """
    product_id = require_id(product_id, "productId")
    size = require_id(size, "size")
    quantity = _check_new_quantity(quantity)
    price = to_money(unit_price, "unitPrice")
    original = price if original_unit_price is None else to_money(original_unit_price, "originalUnitPrice")
    percent = to_percent(discount_percent)
    if original < price:
        raise ValidationError("originalUnitPrice cannot be below unitPrice")

    existing = cart.find_by_key(product_id, size)
    if existing:
        existing.quantity = _check_cap(existing.quantity, quantity, "item")
        if existing.unit_price != price:
            logger.info(
                f"Keeping locked price {existing.unit_price} for {product_id}/{size} "
                f"(request carried {price})"
            )
    else:
        cart.items.append(
            LineItem(
                id=new_id(),
                product_id=product_id,
                size=size,
                quantity=quantity,
                unit_price=price,
                original_unit_price=original,
                discount_percent=percent,
                name=name,
            )
        )
    return recalculate(cart)


def add_bundle(
    cart: Cart,
    bundle_id: str,
    quantity: int,
    unit_price: Number,
    name: Optional[str] = None,
    products: Iterable[Union[BundleProduct, dict]] = (),
) -> Cart:
    """Add a collection; an existing bundle_id grows in quantity"""
    bundle_id = require_id(bundle_id, "bundleId")
    quantity = _check_new_quantity(quantity)
    price = to_money(unit_price, "unitPrice")
    contents = [p if isinstance(p, BundleProduct) else BundleProduct.from_dict(p) for p in products]

    existing = cart.find_by_bundle_id(bundle_id)
    if existing:
        existing.quantity = _check_cap(existing.quantity, quantity, "collection")
    else:
        cart.bundle_items.append(
            BundleItem(
                id=new_id(),
                bundle_id=bundle_id,
                quantity=quantity,
                unit_price=price,
                name=name,
                products=contents,
            )
        )
    return recalculate(cart)


def _locate(cart: Cart, item_id: str) -> Union[LineItem, BundleItem]:
    entry = cart.find_item(item_id) or cart.find_bundle(item_id)
    if entry is None:
        raise NotFoundError(f"Item {item_id} not found in cart")
    return entry


def remove_item(cart: Cart, item_id: str) -> Cart:
    """Delete a product or bundle entry; absent ids are a no-op"""
    cart.items = [i for i in cart.items if i.id != item_id]
    cart.bundle_items = [b for b in cart.bundle_items if b.id != item_id]
    return recalculate(cart)


def set_quantity(cart: Cart, item_id: str, quantity: int) -> Cart:
    """Overwrite an entry's quantity; zero or less removes it"""
    quantity = parse_quantity(quantity)
    entry = _locate(cart, item_id)
    if quantity > MAX_QUANTITY:
        raise CapacityError(f"Quantity cannot exceed {MAX_QUANTITY}")
    if quantity <= 0:
        return remove_item(cart, item_id)
    entry.quantity = quantity
    return recalculate(cart)


def increment(cart: Cart, item_id: str) -> Cart:
    entry = _locate(cart, item_id)
    return set_quantity(cart, item_id, entry.quantity + 1)


def decrement(cart: Cart, item_id: str) -> Cart:
    """Decrease by one; at quantity 1 the entry is removed"""
    entry = _locate(cart, item_id)
    return set_quantity(cart, item_id, entry.quantity - 1)


def clear(cart: Cart) -> Cart:
    cart.items = []
    cart.bundle_items = []
    return recalculate(cart)
