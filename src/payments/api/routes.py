"""FastAPI routes for the Payments domain — payment plans and partial payments.

Partial-payment routes act on behalf of the caller named in the
``X-Customer-Id`` header, who must own the order's payment plan.
"""

from fastapi import APIRouter, Header, HTTPException
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from payments.api.schemas import (
    CreatePartialPaymentRequest,
    OpenPaymentPlanRequest,
    PartialPaymentIdResponse,
    PartialPaymentResponse,
    PaymentPlanIdResponse,
    PaymentPlanStatusResponse,
    PaymentScheduleResponse,
    ReminderResponse,
    StatusResponse,
)
from payments.plan.opening import OpenPaymentPlan
from payments.plan.partial import (
    CompletePartialPayment,
    CreatePartialPayment,
    RefundPartialPayment,
)
from payments.plan.queries import get_plan, payment_history, payment_schedule, payment_status
from payments.plan.reminder import SendPaymentReminder


def _owned_plan(order_id: str, customer_id: str):
    """Load the order's payment plan, checking the caller owns it."""
    try:
        plan = get_plan(order_id)
    except ObjectNotFoundError:
        raise ValidationError({"order_id": ["Order not found"]}) from None
    if str(plan.customer_id) != str(customer_id):
        raise HTTPException(status_code=403, detail="Not authorized to access this order")
    return plan


payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/plans", status_code=201, response_model=PaymentPlanIdResponse)
async def open_payment_plan(body: OpenPaymentPlanRequest) -> PaymentPlanIdResponse:
    command = OpenPaymentPlan(
        order_id=body.order_id,
        customer_id=body.customer_id,
        total_amount=body.total_amount,
        currency=body.currency,
    )
    result = current_domain.process(command, asynchronous=False)
    return PaymentPlanIdResponse(order_id=result)


@payment_router.post(
    "/orders/{order_id}/partial-payments",
    status_code=201,
    response_model=PartialPaymentIdResponse,
)
async def create_partial_payment(
    order_id: str,
    body: CreatePartialPaymentRequest,
    x_customer_id: str = Header(),
) -> PartialPaymentIdResponse:
    _owned_plan(order_id, x_customer_id)
    command = CreatePartialPayment(
        order_id=order_id,
        amount=body.amount,
        payment_method=body.payment_method,
        transaction_id=body.transaction_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return PartialPaymentIdResponse(partial_payment_id=result)


@payment_router.put(
    "/orders/{order_id}/partial-payments/{partial_payment_id}/complete",
    response_model=StatusResponse,
)
async def complete_partial_payment(
    order_id: str,
    partial_payment_id: str,
    x_customer_id: str = Header(),
) -> StatusResponse:
    _owned_plan(order_id, x_customer_id)
    command = CompletePartialPayment(order_id=order_id, partial_payment_id=partial_payment_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@payment_router.put(
    "/orders/{order_id}/partial-payments/{partial_payment_id}/refund",
    response_model=StatusResponse,
)
async def refund_partial_payment(
    order_id: str,
    partial_payment_id: str,
    x_customer_id: str = Header(),
) -> StatusResponse:
    _owned_plan(order_id, x_customer_id)
    command = RefundPartialPayment(order_id=order_id, partial_payment_id=partial_payment_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@payment_router.get("/orders/{order_id}/partial-payments", response_model=PaymentPlanStatusResponse)
async def get_payment_status(order_id: str, x_customer_id: str = Header()) -> PaymentPlanStatusResponse:
    plan = _owned_plan(order_id, x_customer_id)
    return PaymentPlanStatusResponse(**payment_status(plan))


@payment_router.get("/orders/{order_id}/schedule", response_model=PaymentScheduleResponse)
async def get_payment_schedule(order_id: str, x_customer_id: str = Header()) -> PaymentScheduleResponse:
    plan = _owned_plan(order_id, x_customer_id)
    return PaymentScheduleResponse(**payment_schedule(plan))


@payment_router.get("/orders/{order_id}/history", response_model=list[PartialPaymentResponse])
async def get_payment_history(order_id: str, x_customer_id: str = Header()) -> list[PartialPaymentResponse]:
    plan = _owned_plan(order_id, x_customer_id)
    return [PartialPaymentResponse(**entry) for entry in payment_history(plan)]


@payment_router.post("/orders/{order_id}/reminder", response_model=ReminderResponse)
async def send_payment_reminder(order_id: str, x_customer_id: str = Header()) -> ReminderResponse:
    _owned_plan(order_id, x_customer_id)
    result = current_domain.process(SendPaymentReminder(order_id=order_id), asynchronous=False)
    return ReminderResponse(reminded=bool(result))
