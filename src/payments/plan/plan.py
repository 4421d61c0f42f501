"""PaymentPlan aggregate (CQRS) — installments paid against one order.

The plan is identified by the order it belongs to. Only completed
installments count towards the paid amount; pending ones are promises.

State Machine:
    OPEN → SETTLED            (completed installments cover the total, or the total is 0)
    SETTLED → OPEN            (a refund drops the paid amount below the total)

Installment states:
    PENDING → COMPLETED → REFUNDED
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, String

from payments.domain import payments
from payments.plan.events import (
    PartialPaymentCompleted,
    PartialPaymentCreated,
    PartialPaymentRefunded,
    PaymentPlanOpened,
    PaymentPlanReopened,
    PaymentPlanSettled,
    PaymentReminderDue,
)


class PlanStatus(Enum):
    OPEN = "Open"
    SETTLED = "Settled"


class PartialPaymentStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    REFUNDED = "Refunded"


def _round(amount):
    return round(amount, 2)


@payments.entity(part_of="PaymentPlan")
class PartialPayment:
    amount = Float(required=True, min_value=0.0)
    payment_method = String(required=True, max_length=50)
    transaction_id = String(max_length=255)
    status = String(choices=PartialPaymentStatus, default=PartialPaymentStatus.PENDING.value)
    remaining_amount = Float()  # Balance left once this installment completes
    created_at = DateTime()
    paid_at = DateTime()
    refunded_at = DateTime()


@payments.aggregate
class PaymentPlan:
    order_id = Identifier(identifier=True)
    customer_id = Identifier(required=True)
    total_amount = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="USD")
    status = String(choices=PlanStatus, default=PlanStatus.OPEN.value)
    partial_payments = HasMany(PartialPayment)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def settled_plan_must_be_fully_paid(self):
        if self.status == PlanStatus.SETTLED.value and self.paid_amount < _round(self.total_amount):
            raise ValidationError({"status": ["A settled plan must be fully paid"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def open(cls, order_id, customer_id, total_amount, currency="USD"):
        now = datetime.now(UTC)
        plan = cls(
            order_id=order_id,
            customer_id=customer_id,
            total_amount=_round(total_amount),
            currency=currency,
            status=PlanStatus.OPEN.value,
            created_at=now,
            updated_at=now,
        )
        plan.raise_(
            PaymentPlanOpened(
                order_id=str(order_id),
                customer_id=str(customer_id),
                total_amount=plan.total_amount,
                currency=currency,
                opened_at=now,
            )
        )
        # Nothing to collect on a free order
        if plan.is_fully_paid:
            plan.status = PlanStatus.SETTLED.value
            plan._raise_settled(now)
        return plan

    # -------------------------------------------------------------------
    # Balances
    # -------------------------------------------------------------------
    @property
    def paid_amount(self):
        return _round(
            sum(p.amount for p in self.partial_payments if p.status == PartialPaymentStatus.COMPLETED.value)
        )

    @property
    def remaining_amount(self):
        return _round(self.total_amount - self.paid_amount)

    @property
    def is_fully_paid(self):
        return self.paid_amount >= _round(self.total_amount)

    def payments_oldest_first(self):
        return sorted(self.partial_payments, key=lambda p: p.created_at)

    def payments_newest_first(self):
        return sorted(self.partial_payments, key=lambda p: p.created_at, reverse=True)

    def next_pending_payment(self):
        return next(
            (p for p in self.payments_oldest_first() if p.status == PartialPaymentStatus.PENDING.value),
            None,
        )

    def payment_for(self, partial_payment_id):
        payment = next((p for p in self.partial_payments if str(p.id) == str(partial_payment_id)), None)
        if payment is None:
            raise ValidationError({"partial_payment_id": ["Partial payment not found"]})
        return payment

    # -------------------------------------------------------------------
    # Installments
    # -------------------------------------------------------------------
    def create_partial_payment(self, amount, payment_method, transaction_id=None):
        """Register a pending installment and return it."""
        if amount is None or amount <= 0:
            raise ValidationError({"amount": ["Payment amount must be greater than 0"]})

        remaining = self.remaining_amount
        if _round(amount) > remaining:
            raise ValidationError({"amount": [f"Payment amount ({amount:.2f}) exceeds remaining balance ({remaining:.2f})"]})

        now = datetime.now(UTC)
        payment = PartialPayment(
            amount=_round(amount),
            payment_method=payment_method,
            transaction_id=transaction_id,
            status=PartialPaymentStatus.PENDING.value,
            remaining_amount=_round(remaining - amount),
            created_at=now,
        )
        self.add_partial_payments(payment)
        self.updated_at = now

        self.raise_(
            PartialPaymentCreated(
                order_id=str(self.order_id),
                partial_payment_id=str(payment.id),
                amount=payment.amount,
                payment_method=payment_method,
                transaction_id=transaction_id,
                remaining_amount=payment.remaining_amount,
                created_at=now,
            )
        )
        return payment

    def complete_partial_payment(self, partial_payment_id):
        """Mark an installment as paid; settles the plan once the total is covered."""
        payment = self.payment_for(partial_payment_id)
        if payment.status == PartialPaymentStatus.COMPLETED.value:
            raise ValidationError({"partial_payment_id": ["Payment already completed"]})
        if payment.status != PartialPaymentStatus.PENDING.value:
            raise ValidationError({"partial_payment_id": ["Only pending payments can be completed"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            payment.status = PartialPaymentStatus.COMPLETED.value
            payment.paid_at = now
            self.updated_at = now
            settles = self.is_fully_paid and self.status == PlanStatus.OPEN.value
            if settles:
                self.status = PlanStatus.SETTLED.value

        self.raise_(
            PartialPaymentCompleted(
                order_id=str(self.order_id),
                partial_payment_id=str(payment.id),
                amount=payment.amount,
                paid_amount=self.paid_amount,
                remaining_amount=self.remaining_amount,
                paid_at=now,
            )
        )
        if settles:
            self._raise_settled(now)

    def refund_partial_payment(self, partial_payment_id):
        payment = self.payment_for(partial_payment_id)
        if payment.status != PartialPaymentStatus.COMPLETED.value:
            raise ValidationError({"partial_payment_id": ["Only completed payments can be refunded"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            payment.status = PartialPaymentStatus.REFUNDED.value
            payment.refunded_at = now
            self.updated_at = now
            reopens = self.status == PlanStatus.SETTLED.value and not self.is_fully_paid
            if reopens:
                self.status = PlanStatus.OPEN.value

        self.raise_(
            PartialPaymentRefunded(
                order_id=str(self.order_id),
                partial_payment_id=str(payment.id),
                amount=payment.amount,
                paid_amount=self.paid_amount,
                remaining_amount=self.remaining_amount,
                refunded_at=now,
            )
        )
        if reopens:
            self.raise_(
                PaymentPlanReopened(
                    order_id=str(self.order_id),
                    paid_amount=self.paid_amount,
                    remaining_amount=self.remaining_amount,
                    reopened_at=now,
                )
            )

    def _raise_settled(self, now):
        self.raise_(
            PaymentPlanSettled(
                order_id=str(self.order_id),
                customer_id=str(self.customer_id),
                total_amount=self.total_amount,
                paid_amount=self.paid_amount,
                currency=self.currency,
                settled_at=now,
            )
        )

    def remind(self):
        """Raise a reminder for the oldest pending installment.

        Returns False when nothing is pending.
        """
        payment = self.next_pending_payment()
        if payment is None:
            return False

        self.raise_(
            PaymentReminderDue(
                order_id=str(self.order_id),
                customer_id=str(self.customer_id),
                partial_payment_id=str(payment.id),
                amount=payment.amount,
                due_date=payment.created_at,
                reminded_at=datetime.now(UTC),
            )
        )
        return True
