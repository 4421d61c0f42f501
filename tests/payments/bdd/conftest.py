"""Shared BDD fixtures and step definitions for the Payments domain."""

import pytest
from payments.plan.events import (
    PartialPaymentCompleted,
    PartialPaymentCreated,
    PartialPaymentRefunded,
    PaymentPlanReopened,
    PaymentPlanSettled,
)
from payments.plan.plan import PaymentPlan
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

_PLAN_EVENT_CLASSES = {
    "PartialPaymentCreated": PartialPaymentCreated,
    "PartialPaymentCompleted": PartialPaymentCompleted,
    "PartialPaymentRefunded": PartialPaymentRefunded,
    "PaymentPlanSettled": PaymentPlanSettled,
    "PaymentPlanReopened": PaymentPlanReopened,
}


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def installments():
    """Installments created during the scenario, oldest first."""
    return []


@given(parsers.cfparse("a payment plan for an order of {total:f}"), target_fixture="plan")
def open_plan(total):
    plan = PaymentPlan.open(order_id="ord-bdd-001", customer_id="cust-bdd-001", total_amount=total)
    plan._events.clear()
    return plan


@given(parsers.cfparse("an installment of {amount:f} has been paid"))
def installment_paid(plan, installments, amount):
    payment = plan.create_partial_payment(amount=amount, payment_method="credit_card")
    plan.complete_partial_payment(payment.id)
    installments.append(payment)
    plan._events.clear()


@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse('the plan status is "{status}"'))
def plan_status_is(plan, status):
    assert plan.status == status


@then(parsers.cfparse("the plan has {amount:f} paid and {remaining:f} remaining"))
def plan_balances(plan, amount, remaining):
    assert plan.paid_amount == pytest.approx(amount)
    assert plan.remaining_amount == pytest.approx(remaining)


@then(parsers.cfparse("a {event_type} plan event is raised"))
def plan_event_raised(plan, event_type):
    event_cls = _PLAN_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in plan._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in plan._events]}"
