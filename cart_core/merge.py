"""Guest-to-user cart merge"""

import logging
from dataclasses import replace

from .aggregator import recalculate
from .models import MAX_QUANTITY, Cart, new_id

logger = logging.getLogger(__name__)


def merge_guest_into_user(guest_cart: Cart, user_cart: Cart) -> Cart:
    """
    Fold a guest cart into a user cart.

    Runs automatically on login, so collisions never fail: quantities are
    summed and anything above the cap is dropped. The user's locked-in prices
    win on collision. Returns a new recomputed cart owned by the user; the
    guest cart is emptied in place.

    Concurrent merges from two devices are not coordinated here; the last
    write wins at the persistence layer.
    """
    merged = user_cart.copy()

    for item in guest_cart.items:
        existing = merged.find_by_key(*item.key)
        if existing is None:
            merged.items.append(replace(item, id=new_id(), quantity=min(item.quantity, MAX_QUANTITY)))
            continue
        total = existing.quantity + item.quantity
        if total > MAX_QUANTITY:
            logger.warning(
                f"Merge of {item.product_id}/{item.size} capped at {MAX_QUANTITY}, "
                f"dropping {total - MAX_QUANTITY}"
            )
        existing.quantity = min(total, MAX_QUANTITY)

    for bundle in guest_cart.bundle_items:
        existing = merged.find_by_bundle_id(bundle.bundle_id)
        if existing is None:
            merged.bundle_items.append(
                replace(
                    bundle,
                    id=new_id(),
                    quantity=min(bundle.quantity, MAX_QUANTITY),
                    products=[replace(p) for p in bundle.products],
                )
            )
            continue
        total = existing.quantity + bundle.quantity
        if total > MAX_QUANTITY:
            logger.warning(
                f"Merge of collection {bundle.bundle_id} capped at {MAX_QUANTITY}, "
                f"dropping {total - MAX_QUANTITY}"
            )
        existing.quantity = min(total, MAX_QUANTITY)

    guest_cart.items = []
    guest_cart.bundle_items = []
    recalculate(guest_cart)
    return recalculate(merged)
