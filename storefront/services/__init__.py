# Services

from .carts import user_carts, guest_carts, get_user_carts, get_guest_carts
from .cart_client import CartClient

__all__ = ["user_carts", "guest_carts", "get_user_carts", "get_guest_carts", "CartClient"]
