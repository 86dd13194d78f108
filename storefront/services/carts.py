"""Cart orchestrators wired to storefront storage"""

from cart_core import CartOrchestrator

from ..database.carts import cart_db, guest_cart_db

user_carts = CartOrchestrator(cart_db)
guest_carts = CartOrchestrator(guest_cart_db, guest=True)


def get_user_carts() -> CartOrchestrator:
    """FastAPI dependency for signed-in user carts"""
    return user_carts


def get_guest_carts() -> CartOrchestrator:
    """FastAPI dependency for guest session carts"""
    return guest_carts
