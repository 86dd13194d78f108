# API Routes

from .products import router as catalog_router
from .cart import router as cart_router, guest_router as guest_cart_router
from .errors import register_error_handlers

__all__ = ["catalog_router", "cart_router", "guest_cart_router", "register_error_handlers"]
