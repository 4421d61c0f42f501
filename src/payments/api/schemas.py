"""Pydantic request/response schemas for the Payments API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class OpenPaymentPlanRequest(BaseModel):
    order_id: str
    customer_id: str
    total_amount: float = Field(ge=0)
    currency: str = "USD"


class CreatePartialPaymentRequest(BaseModel):
    amount: float
    payment_method: str
    transaction_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "amount": 25.00,
                    "payment_method": "credit_card",
                    "transaction_id": "txn-0001",
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class PaymentPlanIdResponse(BaseModel):
    order_id: str


class PartialPaymentIdResponse(BaseModel):
    partial_payment_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class ReminderResponse(BaseModel):
    reminded: bool


class PartialPaymentResponse(BaseModel):
    id: str
    amount: float
    payment_method: str
    status: str
    transaction_id: str | None = None
    remaining_amount: float | None = None
    created_at: datetime | None = None
    paid_at: datetime | None = None


class PaymentPlanStatusResponse(BaseModel):
    order_id: str
    customer_id: str
    status: str
    total_amount: float
    paid_amount: float
    remaining_amount: float
    currency: str
    payments: list[PartialPaymentResponse]


class ScheduledPaymentResponse(BaseModel):
    id: str
    amount: float
    due_date: datetime | None = None
    status: str
    paid_at: datetime | None = None


class PaymentScheduleResponse(BaseModel):
    order_id: str
    payments: list[ScheduledPaymentResponse]
    total_remaining: float
    next_payment_due: datetime | None = None
