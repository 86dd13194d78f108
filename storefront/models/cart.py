"""Cart API models for the storefront"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from cart_core import BundleItem, Cart, LineItem

from .product import CamelModel


class LineItemOut(CamelModel):
    """Product entry in a cart"""
    id: str
    product_id: str
    size: str
    quantity: int
    unit_price: float
    original_unit_price: float
    discount_percent: float
    line_total: float
    name: Optional[str] = None

    @classmethod
    def from_item(cls, item: LineItem) -> "LineItemOut":
        return cls(
            id=item.id,
            product_id=item.product_id,
            size=item.size,
            quantity=item.quantity,
            unit_price=float(item.unit_price),
            original_unit_price=float(item.original_unit_price),
            discount_percent=float(item.discount_percent),
            line_total=float(item.line_total),
            name=item.name,
        )


class BundleProductIn(CamelModel):
    """Product selection inside a collection"""
    product_id: str
    size: Optional[str] = None
    quantity: int = 1


class BundleItemOut(CamelModel):
    """Collection entry in a cart"""
    id: str
    bundle_id: str
    quantity: int
    unit_price: float
    discount_percent: float = 0
    line_total: float
    name: Optional[str] = None
    products: list[BundleProductIn] = []

    @classmethod
    def from_bundle(cls, bundle: BundleItem) -> "BundleItemOut":
        return cls(
            id=bundle.id,
            bundle_id=bundle.bundle_id,
            quantity=bundle.quantity,
            unit_price=float(bundle.unit_price),
            line_total=float(bundle.line_total),
            name=bundle.name,
            products=[
                BundleProductIn(product_id=p.product_id, size=p.size, quantity=p.quantity)
                for p in bundle.products
            ],
        )


class CartOut(CamelModel):
    """Full cart state as returned by every cart endpoint"""
    owner: str
    session_id: Optional[str] = None
    items: list[LineItemOut] = []
    bundle_items: list[BundleItemOut] = []
    total_items: int = 0
    total_price: float = 0.0
    total_discount: float = 0.0
    currency: str = "USD"
    version: int = 0
    updated_at: Optional[datetime] = None

    @classmethod
    def from_cart(cls, cart: Cart, currency: str = "USD") -> "CartOut":
        return cls(
            owner=cart.owner,
            session_id=cart.session_id,
            items=[LineItemOut.from_item(i) for i in cart.items],
            bundle_items=[BundleItemOut.from_bundle(b) for b in cart.bundle_items],
            total_items=cart.total_items,
            total_price=float(cart.total_price),
            total_discount=float(cart.total_discount),
            currency=currency,
            version=cart.version,
            updated_at=cart.updated_at,
        )


class AddItemRequest(CamelModel):
    """Request to add a product size to the cart"""
    product_id: str
    size: Optional[str] = None
    quantity: int = Field(default=1, description="1-10, merged with an existing entry")


class AddBundleRequest(CamelModel):
    """Request to add a collection to the cart"""
    collection_id: str
    quantity: int = 1
    products: Optional[list[BundleProductIn]] = None


class UpdateCartItemRequest(CamelModel):
    """Request to set an entry's quantity (0 removes it)"""
    quantity: int


class CartResponse(CamelModel):
    """Cart API response"""
    cart: CartOut
    message: Optional[str] = None


class CheckoutResponse(CamelModel):
    """Order hand-off plus the now-empty cart"""
    success: bool
    order: dict[str, Any]
    cart: CartOut
