"""Domain events for the Order aggregate.

All events are versioned, immutable facts representing state changes.
Events are used for:
- Updating projections via projectors
- Cross-domain communication (Payments opens a plan for every OrderPlaced)
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """An order was placed at checkout, possibly as one split of a larger checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    checkout_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    seller_id = Identifier()
    items = Text(required=True)  # JSON: list of item dicts
    subtotal = Float(required=True)
    shipping_cost = Float(default=0.0)
    grand_total = Float(required=True)
    currency = String(default="USD")
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderConfirmed:
    """The order was fully paid and confirmed."""

    __version__ = 1

    order_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaymentFailed:
    __version__ = 1

    order_id = Identifier(required=True)
    reason = String(required=True)
    failed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaymentRetried:
    __version__ = 1

    order_id = Identifier(required=True)
    retried_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    reason = String(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)
