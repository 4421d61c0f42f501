"""Payment reminders — command and handler.

Designed to be triggered by an external scheduler. Delivery of the reminder
(email, SMS) belongs to whoever consumes PaymentReminderDue.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from payments.domain import payments
from payments.plan.plan import PaymentPlan

logger = structlog.get_logger(__name__)


@payments.command(part_of="PaymentPlan")
class SendPaymentReminder:
    order_id = Identifier(required=True)


@payments.command_handler(part_of=PaymentPlan)
class PaymentReminderHandler:
    @handle(SendPaymentReminder)
    def send_payment_reminder(self, command):
        repo = current_domain.repository_for(PaymentPlan)
        plan = repo.get(command.order_id)

        if not plan.remind():
            logger.info("No pending payments for reminder", order_id=str(command.order_id))
            return False

        repo.add(plan)
        logger.info(
            "Payment reminder sent",
            order_id=str(command.order_id),
            next_payment_due=str(plan.next_pending_payment().created_at),
        )
        return True
