"""Inbound cross-domain event handler — Payments reacts to Ordering events.

Listens for OrderPlaced events from the Ordering domain and opens a payment
plan for the order's grand total.

Cross-domain events are imported from shared.events.ordering and registered
as external events via payments.register_external_event().
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.ordering import OrderPlaced

from payments.domain import payments
from payments.plan.opening import OpenPaymentPlan
from payments.plan.plan import PaymentPlan

logger = structlog.get_logger(__name__)

# Register external event so Protean can deserialize it
payments.register_external_event(OrderPlaced, "Ordering.OrderPlaced.v1")


@payments.event_handler(part_of=PaymentPlan, stream_category="ordering::order")
class OrderingPaymentPlanEventHandler:
    """Reacts to Ordering domain events to open payment plans."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        logger.info(
            "Opening payment plan for placed order",
            order_id=str(event.order_id),
            checkout_id=str(event.checkout_id),
            grand_total=event.grand_total,
        )
        current_domain.process(
            OpenPaymentPlan(
                order_id=str(event.order_id),
                customer_id=str(event.customer_id),
                total_amount=event.grand_total,
                currency=event.currency or "USD",
            ),
            asynchronous=False,
        )
