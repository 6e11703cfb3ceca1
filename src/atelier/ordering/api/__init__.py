"""Ordering API package."""

from atelier.ordering.api.routes import cart_router, checkout_router, order_router, wishlist_router

__all__ = ["cart_router", "wishlist_router", "checkout_router", "order_router"]
