"""Cart API routes for the storefront"""

import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from cart_core import Cart, CartOrchestrator

from ..core.config import get_settings
from ..database.collections import collection_db
from ..database.products import product_db
from ..models.cart import (
    AddBundleRequest,
    AddItemRequest,
    CartOut,
    CartResponse,
    CheckoutResponse,
    UpdateCartItemRequest,
)
from ..security.auth import guest_session, read_guest_session, require_user
from ..services.carts import get_guest_carts, get_user_carts

logger = logging.getLogger(__name__)


def cart_response(cart: Cart, message: Optional[str] = None) -> CartResponse:
    return CartResponse(cart=CartOut.from_cart(cart, get_settings().currency), message=message)


def build_cart_router(
    prefix: str,
    tag: str,
    owner_dependency: Callable,
    carts_dependency: Callable[[], CartOrchestrator],
) -> APIRouter:
    """
    Cart endpoints for one kind of owner.

    Signed-in users and guest sessions expose the same operations; they only
    differ in how the owner is resolved and where the cart is stored.
    """
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.get("", response_model=CartResponse)
    async def get_cart(
        owner: str = Depends(owner_dependency),
        carts: CartOrchestrator = Depends(carts_dependency),
    ):
        """Get the cart, creating an empty one on first access"""
        return cart_response(carts.get_cart(owner))

    @router.post("/items", response_model=CartResponse, status_code=201)
    async def add_to_cart(
        request: AddItemRequest,
        owner: str = Depends(owner_dependency),
        carts: CartOrchestrator = Depends(carts_dependency),
    ):
        """Add a product size, priced from the catalog and locked into the cart"""
        product = product_db.get_product(request.product_id)
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")

        size = request.size or product.default_size
        price = product_db.quote(product, size)
        cart = carts.add_item(
            owner,
            product.id,
            size,
            request.quantity,
            price.unit_price,
            price.original_unit_price,
            price.discount_percent,
            name=product.name,
        )
        return cart_response(cart, f"Added {request.quantity}x {product.name} ({size}) to cart")

    @router.post("/bundles", response_model=CartResponse, status_code=201)
    async def add_collection_to_cart(
        request: AddBundleRequest,
        owner: str = Depends(owner_dependency),
        carts: CartOrchestrator = Depends(carts_dependency),
    ):
        """Add a collection at its fixed price"""
        collection = collection_db.get_collection(request.collection_id)
        if not collection:
            raise HTTPException(status_code=404, detail="Collection not found")

        products = collection_db.resolve_products(collection, request.products)
        cart = carts.add_bundle(
            owner,
            collection.id,
            request.quantity,
            collection.price,
            name=collection.name,
            products=products,
        )
        return cart_response(cart, f"Added {request.quantity}x {collection.name} to cart")

    @router.put("/items/{item_id}", response_model=CartResponse)
    async def update_cart_item(
        item_id: str,
        request: UpdateCartItemRequest,
        owner: str = Depends(owner_dependency),
        carts: CartOrchestrator = Depends(carts_dependency),
    ):
        """Set an entry's quantity; 0 removes it"""
        cart = carts.set_quantity(owner, item_id, request.quantity)
        return cart_response(cart, "Item removed" if request.quantity <= 0 else "Cart updated")

    @router.put("/items/{item_id}/increment", response_model=CartResponse)
    async def increment_cart_item(
        item_id: str,
        owner: str = Depends(owner_dependency),
        carts: CartOrchestrator = Depends(carts_dependency),
    ):
        return cart_response(carts.increment(owner, item_id), "Cart updated")

    @router.put("/items/{item_id}/decrement", response_model=CartResponse)
    async def decrement_cart_item(
        item_id: str,
        owner: str = Depends(owner_dependency),
        carts: CartOrchestrator = Depends(carts_dependency),
    ):
        """Decrease by one; an entry at 1 is removed"""
        return cart_response(carts.decrement(owner, item_id), "Cart updated")

    @router.delete("/items/{item_id}", response_model=CartResponse)
    async def remove_from_cart(
        item_id: str,
        owner: str = Depends(owner_dependency),
        carts: CartOrchestrator = Depends(carts_dependency),
    ):
        """Remove an entry; removing a missing entry is not an error"""
        return cart_response(carts.remove_item(owner, item_id), "Item removed")

    @router.delete("", response_model=CartResponse)
    async def clear_cart(
        owner: str = Depends(owner_dependency),
        carts: CartOrchestrator = Depends(carts_dependency),
    ):
        """Clear all items from cart"""
        return cart_response(carts.clear(owner), "Cart cleared")

    @router.post("/checkout", response_model=CheckoutResponse)
    async def checkout(
        owner: str = Depends(owner_dependency),
        carts: CartOrchestrator = Depends(carts_dependency),
    ):
        """Hand the cart off as an order and empty it"""
        summary = carts.checkout(owner)
        return CheckoutResponse(
            success=True,
            order=summary.to_dict(),
            cart=CartOut.from_cart(carts.get_cart(owner), get_settings().currency),
        )

    return router


router = build_cart_router("/api/cart", "Cart", require_user, get_user_carts)
guest_router = build_cart_router("/api/guest/cart", "Guest Cart", guest_session, get_guest_carts)


@router.post("/merge", response_model=CartResponse)
async def merge_guest_cart(
    request: Request,
    user_id: str = Depends(require_user),
    carts: CartOrchestrator = Depends(get_user_carts),
    guests: CartOrchestrator = Depends(get_guest_carts),
):
    """
    Fold the guest cart named by the session header into the user's cart.

    Called once after login. The guest cart is discarded after the merged
    cart is saved.
    """
    session_id = read_guest_session(request)
    if not session_id:
        raise HTTPException(status_code=400, detail="Guest session header is required")

    guest_cart = guests.get_cart(session_id)
    merged_items = guest_cart.total_items
    cart = carts.merge_guest(user_id, guest_cart)
    guests.discard(session_id)

    logger.info(f"Guest session {session_id} merged into cart for {user_id}")
    return cart_response(cart, f"Merged {merged_items} guest items into cart")
