"""Ordering bounded context — Shopping Carts, Order Splitting and Orders.

Handles cart consistency against the catalogue read model, cart abandonment
analytics, and the checkout flow that splits a cart into one order per
seller / address / delivery date.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")


def custom_setting(name, default=None):
    """Read a tunable from the ``[custom]`` section of the active configuration."""
    return (ordering.config.get("custom") or {}).get(name, default)
