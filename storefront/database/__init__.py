# Database modules

from .products import product_db, ProductDatabase
from .collections import collection_db, CollectionDatabase
from .carts import cart_db, guest_cart_db, UserCartDatabase, GuestCartStorage

__all__ = [
    "product_db",
    "ProductDatabase",
    "collection_db",
    "CollectionDatabase",
    "cart_db",
    "guest_cart_db",
    "UserCartDatabase",
    "GuestCartStorage",
]
