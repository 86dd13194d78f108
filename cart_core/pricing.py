"""
Pricing calculator

Effective (post-discount) and original (pre-discount) unit prices, and
size-specific price resolution. All money is Decimal rounded to cents.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Optional, Union

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")
MAX_AMOUNT = Decimal("1000000")


def round_money(value: Decimal) -> Decimal:
    """Round to the currency's minor unit, half-up"""
    try:
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"Amount {value} is out of range")


def to_decimal(value: Number, field: str = "value") -> Decimal:
    """Convert a numeric input to Decimal, rejecting booleans and non-finite values"""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number")
    try:
        # str() keeps floats like 0.1 from dragging binary noise along
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number, got {value!r}")
    if not result.is_finite():
        raise ValidationError(f"{field} must be finite")
    return result


def to_money(value: Number, field: str = "price") -> Decimal:
    """Convert to a non-negative cent-rounded amount no larger than MAX_AMOUNT"""
    amount = to_decimal(value, field)
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{field} cannot exceed {MAX_AMOUNT}")
    return round_money(amount)


def to_percent(value: Optional[Number], field: str = "discount_percent") -> Decimal:
    """Validate a discount percentage; absent means no discount"""
    if value is None:
        return Decimal(0)
    percent = to_decimal(value, field)
    if percent < 0 or percent > HUNDRED:
        raise ValidationError(f"{field} must be between 0 and 100, got {value}")
    return percent


def effective_price(base_price_for_size: Number, discount_percent: Optional[Number] = None) -> Decimal:
    """
    Price actually charged per unit.

    Args:
        base_price_for_size: List price of the selected size
        discount_percent: 0-100, absent or 0 means no discount

    Returns:
        base × (1 − discount/100), rounded to cents
    """
    base = to_money(base_price_for_size, "base_price")
    percent = to_percent(discount_percent)
    if percent == 0:
        return base
    return round_money(base * (HUNDRED - percent) / HUNDRED)


def original_price(effective: Number, discount_percent: Optional[Number] = None) -> Decimal:
    """
    Back-compute the pre-discount price from an effective price.

    A 100% discount cannot be reversed and is rejected.
    """
    price = to_money(effective, "effective_price")
    percent = to_percent(discount_percent)
    if percent == 0:
        return price
    if percent == HUNDRED:
        raise ValidationError("Cannot derive original price from a 100% discount")
    return round_money(price * HUNDRED / (HUNDRED - percent))


def _option_field(option: Any, name: str) -> Any:
    if isinstance(option, dict):
        return option.get(name)
    return getattr(option, name, None)


def resolve_size_price(base_price: Number, sizes: Optional[Iterable[Any]], size: str) -> Decimal:
    """
    Pick the list price for a size.

    Size options may be objects or mappings with ``label`` and ``price``.
    An unknown size falls back to the base price.
    """
    if sizes:
        for option in sizes:
            if _option_field(option, "label") == size:
                price = _option_field(option, "price")
                if price is not None:
                    return to_money(price)
        logger.warning(f"No price for size {size!r}, falling back to base price {base_price}")
    return to_money(base_price, "base_price")


@dataclass(frozen=True)
class PriceQuote:
    """Price snapshot locked into a cart line at add time"""
    unit_price: Decimal
    original_unit_price: Decimal
    discount_percent: Decimal


def quote(
    base_price: Number,
    sizes: Optional[Iterable[Any]],
    size: str,
    discount_percent: Optional[Number] = None,
) -> PriceQuote:
    """Quote a product size: list price becomes the original, discount applied on top"""
    list_price = resolve_size_price(base_price, sizes, size)
    percent = to_percent(discount_percent)
    return PriceQuote(
        unit_price=effective_price(list_price, percent),
        original_unit_price=list_price,
        discount_percent=percent,
    )
