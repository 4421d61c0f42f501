"""Cross-domain event contracts for Payments domain events.

Consumed by the Ordering domain to confirm orders once their payment plan is
fully paid.

The source-of-truth events are in src/payments/plan/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, String


class PaymentPlanSettled(BaseEvent):
    """Completed partial payments now cover the full order total."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    total_amount = Float(required=True)
    paid_amount = Float(required=True)
    currency = String(default="USD")
    settled_at = DateTime(required=True)
