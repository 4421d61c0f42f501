"""Inbound cross-domain event handler — Ordering reacts to Payments events.

Listens for PaymentPlanSettled events from the Payments domain and confirms
the order once its partial payments cover the full total.

Cross-domain events are imported from shared.events.payments and registered
as external events via ordering.register_external_event().
"""

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.payments import PaymentPlanSettled

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus
from ordering.order.payment import ConfirmOrder

logger = structlog.get_logger(__name__)

# Register external event so Protean can deserialize it
ordering.register_external_event(PaymentPlanSettled, "Payments.PaymentPlanSettled.v1")


@ordering.event_handler(part_of=Order, stream_category="payments::payment_plan")
class PaymentsOrderEventHandler:
    """Reacts to Payments domain events to drive the order lifecycle."""

    @handle(PaymentPlanSettled)
    def on_payment_plan_settled(self, event: PaymentPlanSettled) -> None:
        try:
            order = current_domain.repository_for(Order).get(event.order_id)
        except ObjectNotFoundError:
            logger.warning("Settled payment plan for unknown order", order_id=str(event.order_id))
            return

        if OrderStatus(order.status) == OrderStatus.CONFIRMED:
            logger.info("Order already confirmed", order_id=str(event.order_id))
            return

        try:
            current_domain.process(ConfirmOrder(order_id=str(event.order_id)), asynchronous=False)
        except ValidationError as exc:
            logger.warning(
                "Could not confirm order after payment",
                order_id=str(event.order_id),
                status=order.status,
                error=str(exc),
            )
            return

        logger.info(
            "Order confirmed after full payment",
            order_id=str(event.order_id),
            paid_amount=event.paid_amount,
        )
