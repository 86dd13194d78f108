"""Cart engine errors"""


class CartError(Exception):
    """Base exception for all cart engine failures"""

    code = "cart_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CartError):
    """Malformed input: quantity or discount out of range, missing identifier"""

    code = "validation_error"


class NotFoundError(CartError):
    """Referenced item or bundle is not in the cart"""

    code = "not_found"


class CapacityError(CartError):
    """Per-entry quantity cap would be exceeded"""

    code = "capacity_exceeded"


class PersistenceError(CartError):
    """Underlying storage read/write failed (transient, caller may retry)"""

    code = "persistence_error"


class StaleCartError(PersistenceError):
    """Another writer saved the cart since it was loaded"""

    code = "stale_cart"


ERRORS_BY_CODE = {
    cls.code: cls
    for cls in (
        CartError,
        ValidationError,
        NotFoundError,
        CapacityError,
        PersistenceError,
        StaleCartError,
    )
}
