"""Read-side views of a payment plan: status, schedule and history."""

from protean.utils.globals import current_domain

from payments.plan.plan import PartialPaymentStatus, PaymentPlan


def get_plan(order_id):
    """Load a payment plan. Raises ``ObjectNotFoundError`` for unknown orders."""
    return current_domain.repository_for(PaymentPlan).get(order_id)


def _payment_dict(payment):
    return {
        "id": str(payment.id),
        "amount": payment.amount,
        "payment_method": payment.payment_method,
        "status": payment.status,
        "transaction_id": payment.transaction_id,
        "remaining_amount": payment.remaining_amount,
        "created_at": payment.created_at,
        "paid_at": payment.paid_at,
    }


def payment_status(plan):
    return {
        "order_id": str(plan.order_id),
        "customer_id": str(plan.customer_id),
        "status": plan.status,
        "total_amount": plan.total_amount,
        "paid_amount": plan.paid_amount,
        "remaining_amount": plan.remaining_amount,
        "currency": plan.currency,
        "payments": [_payment_dict(p) for p in plan.payments_newest_first()],
    }


def payment_schedule(plan):
    """Installments oldest first, each due on the day it was registered."""
    scheduled = [
        {
            "id": str(p.id),
            "amount": p.amount,
            "due_date": p.created_at,
            "status": p.status,
            "paid_at": p.paid_at,
        }
        for p in plan.payments_oldest_first()
    ]
    next_due = next((entry["due_date"] for entry in scheduled if entry["status"] == PartialPaymentStatus.PENDING.value), None)
    return {
        "order_id": str(plan.order_id),
        "payments": scheduled,
        "total_remaining": plan.remaining_amount,
        "next_payment_due": next_due,
    }


def payment_history(plan):
    return [_payment_dict(p) for p in plan.payments_newest_first()]
