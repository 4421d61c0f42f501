"""Cross-domain event contracts for Ordering domain events.

These classes define the event shape for consumption by other domains (the
Payments domain opens a payment plan for every placed order). They are
registered as external events via domain.register_external_event() with
matching __type__ strings.

The source-of-truth events are in src/ordering/order/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, String, Text


class OrderPlaced(BaseEvent):
    """An order was placed at checkout, possibly as one split of a larger checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    checkout_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    seller_id = Identifier()
    items = Text(required=True)  # JSON list of item dicts
    subtotal = Float(required=True)
    shipping_cost = Float(default=0.0)
    grand_total = Float(required=True)
    currency = String(default="USD")
    placed_at = DateTime(required=True)
