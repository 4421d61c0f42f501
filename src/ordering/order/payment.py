"""Order payment — commands and handler.

Orders are confirmed once their payment plan is settled. A failed payment
moves the order to PAYMENT_FAILED, from which the customer can retry.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class ConfirmOrder:
    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class RecordOrderPaymentFailure:
    order_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


@ordering.command(part_of="Order")
class RetryOrderPayment:
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class OrderPaymentHandler:
    @handle(ConfirmOrder)
    def confirm_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.confirm()
        repo.add(order)

    @handle(RecordOrderPaymentFailure)
    def record_payment_failure(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_payment_failure(reason=command.reason)
        repo.add(order)

    @handle(RetryOrderPayment)
    def retry_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.retry_payment()
        repo.add(order)
