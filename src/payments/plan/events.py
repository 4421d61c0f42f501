"""Domain events for the PaymentPlan aggregate.

All events are versioned, immutable facts representing state changes.
PaymentPlanSettled is also consumed by the Ordering domain to confirm the
order (see shared.events.payments).
"""

from protean.fields import DateTime, Float, Identifier, String

from payments.domain import payments


@payments.event(part_of="PaymentPlan")
class PaymentPlanOpened:
    """A payment plan was opened for an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    total_amount = Float(required=True)
    currency = String(default="USD")
    opened_at = DateTime(required=True)


@payments.event(part_of="PaymentPlan")
class PartialPaymentCreated:
    """An installment was registered against the plan and awaits completion."""

    __version__ = 1

    order_id = Identifier(required=True)
    partial_payment_id = Identifier(required=True)
    amount = Float(required=True)
    payment_method = String(required=True)
    transaction_id = String()
    remaining_amount = Float(required=True)
    created_at = DateTime(required=True)


@payments.event(part_of="PaymentPlan")
class PartialPaymentCompleted:
    __version__ = 1

    order_id = Identifier(required=True)
    partial_payment_id = Identifier(required=True)
    amount = Float(required=True)
    paid_amount = Float(required=True)
    remaining_amount = Float(required=True)
    paid_at = DateTime(required=True)


@payments.event(part_of="PaymentPlan")
class PartialPaymentRefunded:
    __version__ = 1

    order_id = Identifier(required=True)
    partial_payment_id = Identifier(required=True)
    amount = Float(required=True)
    paid_amount = Float(required=True)
    remaining_amount = Float(required=True)
    refunded_at = DateTime(required=True)


@payments.event(part_of="PaymentPlan")
class PaymentPlanSettled:
    """Completed partial payments now cover the full order total."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    total_amount = Float(required=True)
    paid_amount = Float(required=True)
    currency = String(default="USD")
    settled_at = DateTime(required=True)


@payments.event(part_of="PaymentPlan")
class PaymentPlanReopened:
    """A refund brought a settled plan back below the order total."""

    __version__ = 1

    order_id = Identifier(required=True)
    paid_amount = Float(required=True)
    remaining_amount = Float(required=True)
    reopened_at = DateTime(required=True)


@payments.event(part_of="PaymentPlan")
class PaymentReminderDue:
    """The customer should be reminded of the next pending installment."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    partial_payment_id = Identifier(required=True)
    amount = Float(required=True)
    due_date = DateTime(required=True)
    reminded_at = DateTime(required=True)
