# Cart pricing and aggregation engine
# Pure Python, no I/O: shared by the user cart, guest cart and client cache.

from .aggregator import CartTotals, compute_totals, load_cart, recalculate
from .checkout import OrderSummary, distribute, expand_order
from .exceptions import (
    ERRORS_BY_CODE,
    CapacityError,
    CartError,
    NotFoundError,
    PersistenceError,
    StaleCartError,
    ValidationError,
)
from .merge import merge_guest_into_user
from .models import (
    MAX_QUANTITY,
    BundleItem,
    BundleProduct,
    Cart,
    LineItem,
    generate_session_id,
)
from .orchestrator import CartOrchestrator, CartRepository
from .pricing import PriceQuote, effective_price, original_price, quote, resolve_size_price

__all__ = [
    "CartTotals",
    "compute_totals",
    "load_cart",
    "recalculate",
    "OrderSummary",
    "distribute",
    "expand_order",
    "ERRORS_BY_CODE",
    "CapacityError",
    "CartError",
    "NotFoundError",
    "PersistenceError",
    "StaleCartError",
    "ValidationError",
    "merge_guest_into_user",
    "MAX_QUANTITY",
    "BundleItem",
    "BundleProduct",
    "Cart",
    "LineItem",
    "generate_session_id",
    "CartOrchestrator",
    "CartRepository",
    "PriceQuote",
    "effective_price",
    "original_price",
    "quote",
    "resolve_size_price",
]
