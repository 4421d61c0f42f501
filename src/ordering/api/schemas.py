"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    street: str
    city: str
    state: str | None = None
    postal_code: str
    country: str | None = None


class CustomAddressSchema(BaseModel):
    item_ids: list[str]
    address: AddressSchema


class CustomDeliveryDateSchema(BaseModel):
    item_ids: list[str]
    delivery_date: date


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    customer_id: str

    model_config = {"json_schema_extra": {"examples": [{"customer_id": "cust-001"}]}}


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(BaseModel):
    quantity: int = Field(ge=0)


class CheckoutRequest(BaseModel):
    shipping_address: AddressSchema | None = None
    split_by_seller: bool = True
    split_by_address: bool = False
    split_by_delivery_date: bool = False
    custom_addresses: list[CustomAddressSchema] = []
    custom_delivery_dates: list[CustomDeliveryDateSchema] = []
    shipping_per_split: float = Field(ge=0, default=0.0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address": {
                        "street": "123 Main St",
                        "city": "Springfield",
                        "state": "IL",
                        "postal_code": "62701",
                        "country": "US",
                    },
                    "split_by_seller": True,
                    "split_by_address": False,
                    "split_by_delivery_date": False,
                    "shipping_per_split": 4.99,
                }
            ]
        }
    }


class DetectAbandonedCartsRequest(BaseModel):
    idle_threshold_hours: int | None = Field(ge=1, default=None)
    as_of: datetime | None = None


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CancelOrderRequest(BaseModel):
    reason: str


class RecordPaymentFailureRequest(BaseModel):
    reason: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartIdResponse(BaseModel):
    cart_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class CartLineResponse(BaseModel):
    product_id: str
    title: str
    quantity: int
    unit_price: float
    line_total: float
    available: bool


class CartSummaryResponse(BaseModel):
    cart_id: str
    customer_id: str
    status: str
    items: list[CartLineResponse]
    total: float
    count: int


class SplitItemResponse(BaseModel):
    id: str
    product_id: str
    title: str | None = None
    quantity: int
    price: float
    seller_id: str | None = None


class OrderSplitResponse(BaseModel):
    seller_id: str | None = None
    shipping_address: AddressSchema | None = None
    delivery_date: date | None = None
    items: list[SplitItemResponse]
    subtotal: float
    shipping: float
    total: float


class SplitSummaryResponse(BaseModel):
    by_seller: dict[str, float]
    by_address: dict[str, float]
    by_date: dict[str, float]


class SplitPreviewResponse(BaseModel):
    splits: list[OrderSplitResponse]
    total_orders: int
    total_amount: float
    summary: SplitSummaryResponse


class CheckoutResponse(BaseModel):
    checkout_id: str
    order_ids: list[str]


class DetectAbandonedCartsResponse(BaseModel):
    abandoned_count: int


class OrderItemResponse(BaseModel):
    product_id: str
    seller_id: str | None = None
    title: str | None = None
    quantity: int
    unit_price: float


class OrderResponse(BaseModel):
    order_id: str
    checkout_id: str
    customer_id: str
    cart_id: str | None = None
    seller_id: str | None = None
    status: str
    items: list[OrderItemResponse]
    shipping_address: AddressSchema | None = None
    delivery_date: date | None = None
    subtotal: float
    shipping_cost: float
    grand_total: float
    currency: str
    cancellation_reason: str | None = None
    created_at: datetime | None = None


class OrderSummaryResponse(BaseModel):
    order_id: str
    checkout_id: str | None = None
    seller_id: str | None = None
    status: str
    item_count: int
    grand_total: float | None = None
    currency: str
    created_at: datetime | None = None


class AbandonedProductResponse(BaseModel):
    product_id: str
    product_name: str
    abandonment_count: int
    total_value: float


class AbandonmentByTimeframeResponse(BaseModel):
    last_24_hours: int
    last_48_hours: int
    last_7_days: int


class CartAbandonmentResponse(BaseModel):
    total_abandoned_carts: int
    abandoned_cart_value: float
    abandonment_rate: float
    average_abandoned_cart_value: float
    top_abandoned_products: list[AbandonedProductResponse]
    abandonment_by_timeframe: AbandonmentByTimeframeResponse
