"""Order hand-off: expand a cart into order lines"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from .aggregator import compute_totals
from .exceptions import ValidationError
from .models import BundleItem, Cart, utcnow
from .pricing import CENT


@dataclass(frozen=True)
class OrderLine:
    """Product line in an order"""
    product_id: str
    size: str
    quantity: int
    unit_price: Decimal
    original_unit_price: Decimal
    discount_percent: Decimal
    line_total: Decimal
    name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "productId": self.product_id,
            "size": self.size,
            "quantity": self.quantity,
            "unitPrice": float(self.unit_price),
            "originalUnitPrice": float(self.original_unit_price),
            "discountPercent": float(self.discount_percent),
            "lineTotal": float(self.line_total),
            "name": self.name,
        }


@dataclass(frozen=True)
class BundleShare:
    """A contained product's share of one bundle's price"""
    product_id: str
    size: str
    quantity: int
    allocated_price: Decimal

    def to_dict(self) -> dict:
        return {
            "productId": self.product_id,
            "size": self.size,
            "quantity": self.quantity,
            "allocatedPrice": float(self.allocated_price),
        }


@dataclass(frozen=True)
class BundleOrderLine:
    """Collection line in an order"""
    bundle_id: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    name: Optional[str] = None
    products: tuple[BundleShare, ...] = ()

    def to_dict(self) -> dict:
        return {
            "bundleId": self.bundle_id,
            "quantity": self.quantity,
            "unitPrice": float(self.unit_price),
            "lineTotal": float(self.line_total),
            "name": self.name,
            "products": [p.to_dict() for p in self.products],
        }


@dataclass(frozen=True)
class OrderSummary:
    """Everything needed to hand an order off for fulfilment"""
    order_id: str
    owner: str
    lines: tuple[OrderLine, ...]
    bundles: tuple[BundleOrderLine, ...]
    total_items: int
    total_price: Decimal
    total_discount: Decimal
    created_at: datetime = field(default_factory=utcnow)

    @property
    def original_total_price(self) -> Decimal:
        return self.total_price + self.total_discount

    def to_dict(self) -> dict:
        return {
            "orderId": self.order_id,
            "owner": self.owner,
            "items": [line.to_dict() for line in self.lines],
            "bundleItems": [bundle.to_dict() for bundle in self.bundles],
            "totalItems": self.total_items,
            "totalPrice": float(self.total_price),
            "totalDiscount": float(self.total_discount),
            "originalTotalPrice": float(self.original_total_price),
            "createdAt": self.created_at.isoformat(),
        }


def distribute(amount: Decimal, parts: int) -> list[Decimal]:
    """
    Split an amount into ``parts`` cent-exact shares.

    Leftover cents go to the first shares, so the shares always sum to the
    amount.
    """
    if parts <= 0:
        return []
    cents = int(amount / CENT)
    base, remainder = divmod(cents, parts)
    return [(base + (1 if i < remainder else 0)) * CENT for i in range(parts)]


def _bundle_line(bundle: BundleItem) -> BundleOrderLine:
    shares = distribute(bundle.unit_price, len(bundle.products))
    return BundleOrderLine(
        bundle_id=bundle.bundle_id,
        quantity=bundle.quantity,
        unit_price=bundle.unit_price,
        line_total=bundle.line_total,
        name=bundle.name,
        products=tuple(
            BundleShare(
                product_id=product.product_id,
                size=product.size,
                quantity=product.quantity,
                allocated_price=share,
            )
            for product, share in zip(bundle.products, shares)
        ),
    )


def expand_order(cart: Cart) -> OrderSummary:
    """Build an order summary from the cart's locked-in prices"""
    if cart.is_empty:
        raise ValidationError("Cart is empty")

    totals = compute_totals(cart.items, cart.bundle_items)
    lines = tuple(
        OrderLine(
            product_id=item.product_id,
            size=item.size,
            quantity=item.quantity,
            unit_price=item.unit_price,
            original_unit_price=item.original_unit_price,
            discount_percent=item.discount_percent,
            line_total=item.line_total,
            name=item.name,
        )
        for item in cart.items
    )

    return OrderSummary(
        order_id=f"ORD-{uuid.uuid4().hex[:8].upper()}",
        owner=cart.owner,
        lines=lines,
        bundles=tuple(_bundle_line(b) for b in cart.bundle_items),
        total_items=totals.total_items,
        total_price=totals.total_price,
        total_discount=totals.total_discount,
    )
