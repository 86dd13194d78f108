"""Cart data model: line items, bundles and the cart aggregate"""

import copy
import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from .exceptions import ValidationError
from .pricing import ZERO, original_price, to_money, to_percent

logger = logging.getLogger(__name__)

MIN_QUANTITY = 1
MAX_QUANTITY = 10

WHOLE_NUMBER = re.compile(r"-?[0-9]{1,9}")


def new_id() -> str:
    """Opaque identifier for a cart entry"""
    return uuid.uuid4().hex


def generate_session_id() -> str:
    """Identifier for a guest cart session"""
    return f"guest_{uuid.uuid4().hex}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_quantity(value: Any, field_name: str = "quantity") -> int:
    """Accept whole numbers only (ints, integral floats, digit strings)"""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a whole number")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if WHOLE_NUMBER.fullmatch(text):
            return int(text)
    raise ValidationError(f"{field_name} must be a whole number, got {value!r}")


def require_id(value: Any, field_name: str) -> str:
    if value is None or str(value).strip() == "":
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def _pick(data: dict, *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _stored_quantity(data: dict) -> int:
    """Quantity from stored data: missing means 1, above the cap is clamped"""
    raw = data.get("quantity")
    quantity = MIN_QUANTITY if raw is None else parse_quantity(raw)
    if quantity < MIN_QUANTITY:
        raise ValidationError(f"stored quantity {quantity} is not positive")
    if quantity > MAX_QUANTITY:
        logger.warning(f"Clamping stored quantity {quantity} to {MAX_QUANTITY}")
        quantity = MAX_QUANTITY
    return quantity


@dataclass
class LineItem:
    """Single product + size entry with a locked-in price"""
    id: str
    product_id: str
    size: str
    quantity: int
    unit_price: Decimal
    original_unit_price: Decimal
    discount_percent: Decimal = Decimal(0)
    name: Optional[str] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.product_id, self.size)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def line_discount(self) -> Decimal:
        return (self.original_unit_price - self.unit_price) * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "size": self.size,
            "quantity": self.quantity,
            "unitPrice": str(self.unit_price),
            "originalUnitPrice": str(self.original_unit_price),
            "discountPercent": str(self.discount_percent),
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "LineItem":
        """
        Parse a stored line item.

        Also reads the storefront's older field names (price, originalPrice,
        discount). Raises ValidationError for entries that cannot be salvaged.
        """
        if not isinstance(data, dict):
            raise ValidationError(f"line item must be a mapping, got {type(data).__name__}")

        raw_price = _pick(data, "unitPrice", "price")
        if raw_price is None:
            raise ValidationError("line item has no price")
        unit_price = to_money(raw_price, "unitPrice")
        discount = to_percent(_pick(data, "discountPercent", "discount"))

        raw_original = _pick(data, "originalUnitPrice", "originalPrice")
        if raw_original is None:
            original = original_price(unit_price, discount)
        else:
            original = to_money(raw_original, "originalUnitPrice")
        if original < unit_price:
            logger.warning(f"Original price {original} below unit price {unit_price}, using unit price")
            original = unit_price

        return cls(
            id=str(_pick(data, "id", "_id") or new_id()),
            product_id=require_id(_pick(data, "productId", "product"), "productId"),
            size=str(data.get("size") or ""),
            quantity=_stored_quantity(data),
            unit_price=unit_price,
            original_unit_price=original,
            discount_percent=discount,
            name=data.get("name"),
        )


@dataclass
class BundleProduct:
    """Product contained in a bundle (informational)"""
    product_id: str
    size: str = ""
    quantity: int = 1

    def to_dict(self) -> dict:
        return {"productId": self.product_id, "size": self.size, "quantity": self.quantity}

    @classmethod
    def from_dict(cls, data: Any) -> "BundleProduct":
        if not isinstance(data, dict):
            raise ValidationError("bundle product must be a mapping")
        quantity = parse_quantity(data.get("quantity", 1))
        if quantity < MIN_QUANTITY:
            raise ValidationError("bundle product quantity must be positive")
        return cls(
            product_id=require_id(_pick(data, "productId", "product"), "productId"),
            size=str(data.get("size") or ""),
            quantity=quantity,
        )


@dataclass
class BundleItem:
    """A collection sold as one entry at a fixed price"""
    id: str
    bundle_id: str
    quantity: int
    unit_price: Decimal
    name: Optional[str] = None
    products: list[BundleProduct] = field(default_factory=list)

    @property
    def key(self) -> str:
        return self.bundle_id

    @property
    def discount_percent(self) -> Decimal:
        # Discounts apply to individual products only
        return Decimal(0)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "bundleId": self.bundle_id,
            "quantity": self.quantity,
            "unitPrice": str(self.unit_price),
            "discountPercent": "0",
            "name": self.name,
            "products": [p.to_dict() for p in self.products],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "BundleItem":
        """Parse a stored bundle; also reads collectionId / totalPrice / price"""
        if not isinstance(data, dict):
            raise ValidationError(f"bundle must be a mapping, got {type(data).__name__}")

        raw_price = _pick(data, "unitPrice", "totalPrice", "price")
        if raw_price is None:
            raise ValidationError("bundle has no price")

        products = []
        for raw in data.get("products") or []:
            try:
                products.append(BundleProduct.from_dict(raw))
            except ValidationError as exc:
                logger.warning(f"Skipping malformed bundle product: {exc}")

        return cls(
            id=str(_pick(data, "id", "_id") or new_id()),
            bundle_id=require_id(_pick(data, "bundleId", "collectionId"), "bundleId"),
            quantity=_stored_quantity(data),
            unit_price=to_money(raw_price, "unitPrice"),
            name=_pick(data, "name", "collectionName"),
            products=products,
        )


@dataclass
class Cart:
    """
    Cart aggregate root.

    Totals are derived: only the aggregator writes total_items, total_price
    and total_discount.
    """
    owner: str
    items: list[LineItem] = field(default_factory=list)
    bundle_items: list[BundleItem] = field(default_factory=list)
    total_items: int = 0
    total_price: Decimal = ZERO
    total_discount: Decimal = ZERO
    version: int = 0
    session_id: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return not self.items and not self.bundle_items

    def find_item(self, item_id: str) -> Optional[LineItem]:
        return next((i for i in self.items if i.id == item_id), None)

    def find_bundle(self, item_id: str) -> Optional[BundleItem]:
        return next((b for b in self.bundle_items if b.id == item_id), None)

    def find_by_key(self, product_id: str, size: str) -> Optional[LineItem]:
        return next((i for i in self.items if i.key == (product_id, size)), None)

    def find_by_bundle_id(self, bundle_id: str) -> Optional[BundleItem]:
        return next((b for b in self.bundle_items if b.bundle_id == bundle_id), None)

    def copy(self) -> "Cart":
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        return {
            "owner": self.owner,
            "sessionId": self.session_id,
            "items": [i.to_dict() for i in self.items],
            "bundleItems": [b.to_dict() for b in self.bundle_items],
            "totalItems": self.total_items,
            "totalPrice": str(self.total_price),
            "totalDiscount": str(self.total_discount),
            "version": self.version,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: Any, owner: Optional[str] = None) -> "Cart":
        """
        Structural parse of a stored cart.

        Missing arrays become empty, malformed entries are dropped, duplicate
        identity keys are folded together. Stored totals are not read; callers
        run the aggregator (see aggregator.load_cart).
        """
        if not isinstance(data, dict):
            if data is not None:
                logger.warning(f"Stored cart is a {type(data).__name__}, starting empty")
            data = {}

        try:
            version = max(parse_quantity(data.get("version", 0), "version"), 0)
        except ValidationError:
            version = 0

        cart = cls(
            owner=owner or str(data.get("owner") or ""),
            version=version,
            session_id=data.get("sessionId"),
            updated_at=_parse_datetime(_pick(data, "updatedAt", "lastUpdated")),
        )

        raw_items = data.get("items")
        for raw in raw_items if isinstance(raw_items, list) else []:
            try:
                item = LineItem.from_dict(raw)
            except ValidationError as exc:
                logger.warning(f"Dropping malformed cart item: {exc}")
                continue
            existing = cart.find_by_key(*item.key)
            if existing:
                existing.quantity = min(existing.quantity + item.quantity, MAX_QUANTITY)
            else:
                cart.items.append(item)

        raw_bundles = _pick(data, "bundleItems", "collectionItems")
        for raw in raw_bundles if isinstance(raw_bundles, list) else []:
            try:
                bundle = BundleItem.from_dict(raw)
            except ValidationError as exc:
                logger.warning(f"Dropping malformed cart bundle: {exc}")
                continue
            existing = cart.find_by_bundle_id(bundle.bundle_id)
            if existing:
                existing.quantity = min(existing.quantity + bundle.quantity, MAX_QUANTITY)
            else:
                cart.bundle_items.append(bundle)

        return cart
