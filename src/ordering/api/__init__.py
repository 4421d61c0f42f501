"""Ordering domain API package."""

from ordering.api.routes import analytics_router, cart_router, maintenance_router, order_router

__all__ = ["analytics_router", "cart_router", "maintenance_router", "order_router"]
