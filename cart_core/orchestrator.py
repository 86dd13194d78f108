"""
Cart mutation orchestration

Wraps the line item store with load, mutate, recompute and persist. The same
orchestrator serves the user cart store and guest session storage; only the
repository differs.
"""

import logging
from typing import Any, Callable, Iterable, Optional, Protocol, Union

from . import store
from .aggregator import load_cart, recalculate
from .checkout import OrderSummary, expand_order
from .exceptions import CartError, PersistenceError, StaleCartError
from .merge import merge_guest_into_user
from .models import BundleProduct, Cart, require_id, utcnow
from .pricing import Number

logger = logging.getLogger(__name__)


class CartRepository(Protocol):
    """Persistence boundary for serialized carts"""

    def load(self, owner: str) -> Optional[Any]:
        """Return the stored cart document, or None if the owner has none"""
        ...

    def save(self, owner: str, document: dict, expected_version: int) -> None:
        """
        Store a cart document.

        Must raise StaleCartError when the stored version (0 when absent) is
        not ``expected_version``.
        """
        ...

    def delete(self, owner: str) -> None:
        ...


class CartOrchestrator:
    """
    Owner-scoped cart operations.

    Every mutation returns the full recomputed cart. A rejected mutation or a
    failed write leaves the stored cart as it was.
    """

    def __init__(self, repository: CartRepository, guest: bool = False):
        self.repository = repository
        self.guest = guest

    # Persistence boundary

    def _read(self, owner: str) -> Optional[Any]:
        try:
            return self.repository.load(owner)
        except CartError:
            raise
        except Exception as exc:
            logger.error(f"Failed to load cart for {owner}: {exc}")
            raise PersistenceError(f"Failed to load cart: {exc}") from exc

    def _commit(self, cart: Cart, expected_version: int) -> Cart:
        recalculate(cart)
        cart.version = expected_version + 1
        cart.updated_at = utcnow()
        try:
            self.repository.save(cart.owner, cart.to_dict(), expected_version)
        except StaleCartError:
            logger.warning(f"Cart for {cart.owner} changed concurrently (expected v{expected_version})")
            raise
        except PersistenceError as exc:
            logger.error(f"Failed to save cart for {cart.owner}: {exc}")
            raise
        except Exception as exc:
            logger.error(f"Failed to save cart for {cart.owner}: {exc}")
            raise PersistenceError(f"Failed to save cart: {exc}") from exc
        return cart

    def _load(self, owner: str) -> tuple[Cart, bool]:
        owner = require_id(owner, "owner")
        document = self._read(owner)
        if document is None:
            cart = Cart(owner=owner, session_id=owner if self.guest else None, updated_at=utcnow())
            return cart, True
        cart = load_cart(document, owner=owner)
        if self.guest and not cart.session_id:
            cart.session_id = owner
        return cart, False

    def _mutate(self, owner: str, operation: Callable[[Cart], Any]) -> Cart:
        cart, _ = self._load(owner)
        working = cart.copy()
        operation(working)
        return self._commit(working, expected_version=cart.version)

    # Operations

    def get_cart(self, owner: str) -> Cart:
        """Load the owner's cart, creating an empty one on first access"""
        cart, created = self._load(owner)
        if created:
            logger.info(f"Creating {'guest' if self.guest else 'user'} cart for {cart.owner}")
            return self._commit(cart, expected_version=0)
        return cart

    def add_item(
        self,
        owner: str,
        product_id: str,
        size: str,
        quantity: int,
        unit_price: Number,
        original_unit_price: Optional[Number] = None,
        discount_percent: Optional[Number] = None,
        name: Optional[str] = None,
    ) -> Cart:
        return self._mutate(
            owner,
            lambda cart: store.add_item(
                cart, product_id, size, quantity, unit_price, original_unit_price, discount_percent, name
            ),
        )

    def add_bundle(
        self,
        owner: str,
        bundle_id: str,
        quantity: int,
        unit_price: Number,
        name: Optional[str] = None,
        products: Iterable[Union[BundleProduct, dict]] = (),
    ) -> Cart:
        return self._mutate(
            owner,
            lambda cart: store.add_bundle(cart, bundle_id, quantity, unit_price, name, products),
        )

    def set_quantity(self, owner: str, item_id: str, quantity: int) -> Cart:
        return self._mutate(owner, lambda cart: store.set_quantity(cart, item_id, quantity))

    def increment(self, owner: str, item_id: str) -> Cart:
        return self._mutate(owner, lambda cart: store.increment(cart, item_id))

    def decrement(self, owner: str, item_id: str) -> Cart:
        return self._mutate(owner, lambda cart: store.decrement(cart, item_id))

    def remove_item(self, owner: str, item_id: str) -> Cart:
        return self._mutate(owner, lambda cart: store.remove_item(cart, item_id))

    def clear(self, owner: str) -> Cart:
        return self._mutate(owner, store.clear)

    def merge_guest(self, owner: str, guest_cart: Cart) -> Cart:
        """Fold a guest cart into the owner's cart and persist the result"""
        user_cart, _ = self._load(owner)
        merged = merge_guest_into_user(guest_cart, user_cart)
        logger.info(f"Merged guest cart into cart for {user_cart.owner} ({merged.total_items} items)")
        return self._commit(merged, expected_version=user_cart.version)

    def discard(self, owner: str) -> None:
        """Drop the stored cart entirely (guest carts after a merge)"""
        try:
            self.repository.delete(owner)
        except CartError:
            raise
        except Exception as exc:
            logger.error(f"Failed to delete cart for {owner}: {exc}")
            raise PersistenceError(f"Failed to delete cart: {exc}") from exc

    def checkout(self, owner: str) -> OrderSummary:
        """Produce the order hand-off and reset the cart to empty"""
        cart, _ = self._load(owner)
        summary = expand_order(cart)
        working = cart.copy()
        store.clear(working)
        self._commit(working, expected_version=cart.version)
        logger.info(
            f"Order {summary.order_id} handed off for {cart.owner}: "
            f"{summary.total_items} items, {summary.total_price}"
        )
        return summary
