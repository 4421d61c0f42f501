"""Payment plan opening — command and handler.

Plans are opened automatically for every placed order (see
payments.plan.ordering_events) and can also be opened directly.
Opening is idempotent per order.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from payments.domain import payments
from payments.plan.plan import PaymentPlan

logger = structlog.get_logger(__name__)


@payments.command(part_of="PaymentPlan")
class OpenPaymentPlan:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    total_amount = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="USD")


@payments.command_handler(part_of=PaymentPlan)
class OpenPaymentPlanHandler:
    @handle(OpenPaymentPlan)
    def open_payment_plan(self, command):
        repo = current_domain.repository_for(PaymentPlan)
        try:
            repo.get(command.order_id)
            logger.info("Payment plan already open", order_id=str(command.order_id))
            return str(command.order_id)
        except ObjectNotFoundError:
            pass

        plan = PaymentPlan.open(
            order_id=command.order_id,
            customer_id=command.customer_id,
            total_amount=command.total_amount,
            currency=command.currency or "USD",
        )
        repo.add(plan)
        logger.info(
            "Payment plan opened",
            order_id=str(command.order_id),
            total_amount=plan.total_amount,
        )
        return str(plan.order_id)
