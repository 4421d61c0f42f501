"""Partial payments — commands and handler for installments against a plan."""

import structlog
from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from payments.domain import payments
from payments.plan.plan import PaymentPlan

logger = structlog.get_logger(__name__)


@payments.command(part_of="PaymentPlan")
class CreatePartialPayment:
    order_id = Identifier(required=True)
    amount = Float(required=True)
    payment_method = String(required=True, max_length=50)
    transaction_id = String(max_length=255)


@payments.command(part_of="PaymentPlan")
class CompletePartialPayment:
    order_id = Identifier(required=True)
    partial_payment_id = Identifier(required=True)


@payments.command(part_of="PaymentPlan")
class RefundPartialPayment:
    order_id = Identifier(required=True)
    partial_payment_id = Identifier(required=True)


@payments.command_handler(part_of=PaymentPlan)
class PartialPaymentHandler:
    @handle(CreatePartialPayment)
    def create_partial_payment(self, command):
        repo = current_domain.repository_for(PaymentPlan)
        plan = repo.get(command.order_id)
        payment = plan.create_partial_payment(
            amount=command.amount,
            payment_method=command.payment_method,
            transaction_id=command.transaction_id,
        )
        repo.add(plan)
        logger.info(
            "Partial payment created",
            order_id=str(command.order_id),
            partial_payment_id=str(payment.id),
            amount=payment.amount,
            remaining_amount=payment.remaining_amount,
        )
        return str(payment.id)

    @handle(CompletePartialPayment)
    def complete_partial_payment(self, command):
        repo = current_domain.repository_for(PaymentPlan)
        plan = repo.get(command.order_id)
        plan.complete_partial_payment(command.partial_payment_id)
        repo.add(plan)
        logger.info(
            "Partial payment completed",
            order_id=str(command.order_id),
            partial_payment_id=str(command.partial_payment_id),
            paid_amount=plan.paid_amount,
            plan_status=plan.status,
        )

    @handle(RefundPartialPayment)
    def refund_partial_payment(self, command):
        repo = current_domain.repository_for(PaymentPlan)
        plan = repo.get(command.order_id)
        plan.refund_partial_payment(command.partial_payment_id)
        repo.add(plan)
        logger.info(
            "Partial payment refunded",
            order_id=str(command.order_id),
            partial_payment_id=str(command.partial_payment_id),
            paid_amount=plan.paid_amount,
        )
