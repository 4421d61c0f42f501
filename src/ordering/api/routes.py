"""FastAPI routes for the Ordering domain — carts, checkout, orders and analytics."""

import json
from datetime import datetime

from fastapi import APIRouter
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddToCartRequest,
    CancelOrderRequest,
    CartAbandonmentResponse,
    CartIdResponse,
    CartSummaryResponse,
    CheckoutRequest,
    CheckoutResponse,
    CreateCartRequest,
    DetectAbandonedCartsRequest,
    DetectAbandonedCartsResponse,
    OrderResponse,
    OrderSummaryResponse,
    RecordPaymentFailureRequest,
    SplitPreviewResponse,
    StatusResponse,
    UpdateCartQuantityRequest,
)
from ordering.cart.abandonment import DetectAbandonedCarts
from ordering.cart.analytics import AbandonmentFilters, load_cart_abandonment_metrics
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from ordering.cart.management import AbandonCart, CreateCart
from ordering.cart.summary import summarize_cart
from ordering.order.cancellation import CancelOrder
from ordering.order.order import Order
from ordering.order.payment import RecordOrderPaymentFailure, RetryOrderPayment
from ordering.order.placement import PlaceOrder, build_split_options, preview_checkout
from ordering.projections.order_summary import OrderSummary


def _checkout_options(body: CheckoutRequest):
    return build_split_options(
        shipping_address=body.shipping_address.model_dump() if body.shipping_address else None,
        split_by_seller=body.split_by_seller,
        split_by_address=body.split_by_address,
        split_by_delivery_date=body.split_by_delivery_date,
        custom_addresses=[entry.model_dump(mode="json") for entry in body.custom_addresses],
        custom_delivery_dates=[entry.model_dump(mode="json") for entry in body.custom_delivery_dates],
        shipping_per_split=body.shipping_per_split,
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest) -> CartIdResponse:
    command = CreateCart(customer_id=body.customer_id)
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}", response_model=CartSummaryResponse)
async def get_cart(cart_id: str) -> CartSummaryResponse:
    return CartSummaryResponse(**summarize_cart(cart_id))


@cart_router.post("/{cart_id}/items", response_model=StatusResponse)
async def add_cart_item(cart_id: str, body: AddToCartRequest) -> StatusResponse:
    command = AddToCart(
        cart_id=cart_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.put("/{cart_id}/items/{product_id}", response_model=StatusResponse)
async def update_cart_item(cart_id: str, product_id: str, body: UpdateCartQuantityRequest) -> StatusResponse:
    command = UpdateCartQuantity(
        cart_id=cart_id,
        product_id=product_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items/{product_id}", response_model=StatusResponse)
async def remove_cart_item(cart_id: str, product_id: str) -> StatusResponse:
    command = RemoveFromCart(cart_id=cart_id, product_id=product_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items", response_model=StatusResponse)
async def clear_cart(cart_id: str) -> StatusResponse:
    current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    return StatusResponse()


@cart_router.put("/{cart_id}/abandon", response_model=StatusResponse)
async def abandon_cart(cart_id: str) -> StatusResponse:
    current_domain.process(AbandonCart(cart_id=cart_id), asynchronous=False)
    return StatusResponse()


@cart_router.post("/{cart_id}/split-preview", response_model=SplitPreviewResponse)
async def preview_cart_splits(cart_id: str, body: CheckoutRequest) -> SplitPreviewResponse:
    cart = current_domain.repository_for(ShoppingCart).get(cart_id)
    preview = preview_checkout(cart, _checkout_options(body))
    return SplitPreviewResponse(
        splits=[split.to_dict() for split in preview["splits"]],
        total_orders=preview["total_orders"],
        total_amount=preview["total_amount"],
        summary=preview["summary"],
    )


@cart_router.post("/{cart_id}/checkout", status_code=201, response_model=CheckoutResponse)
async def checkout_cart(cart_id: str, body: CheckoutRequest) -> CheckoutResponse:
    command = PlaceOrder(
        cart_id=cart_id,
        shipping_address=json.dumps(body.shipping_address.model_dump()) if body.shipping_address else None,
        split_by_seller=body.split_by_seller,
        split_by_address=body.split_by_address,
        split_by_delivery_date=body.split_by_delivery_date,
        custom_addresses=json.dumps([entry.model_dump(mode="json") for entry in body.custom_addresses]),
        custom_delivery_dates=json.dumps([entry.model_dump(mode="json") for entry in body.custom_delivery_dates]),
        shipping_per_split=body.shipping_per_split,
    )
    result = current_domain.process(command, asynchronous=False)
    return CheckoutResponse(**result)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=list[OrderSummaryResponse])
async def list_orders(customer_id: str) -> list[OrderSummaryResponse]:
    summaries = current_domain.repository_for(OrderSummary)._dao.query.filter(customer_id=customer_id).all().items
    return [
        OrderSummaryResponse(
            order_id=str(s.order_id),
            checkout_id=str(s.checkout_id) if s.checkout_id else None,
            seller_id=str(s.seller_id) if s.seller_id else None,
            status=s.status,
            item_count=s.item_count or 0,
            grand_total=s.grand_total,
            currency=s.currency or "USD",
            created_at=s.created_at,
        )
        for s in summaries
    ]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_id)
    address = order.shipping_address
    return OrderResponse(
        order_id=str(order.id),
        checkout_id=str(order.checkout_id),
        customer_id=str(order.customer_id),
        cart_id=str(order.cart_id) if order.cart_id else None,
        seller_id=str(order.seller_id) if order.seller_id else None,
        status=order.status,
        items=[
            {
                "product_id": str(item.product_id),
                "seller_id": str(item.seller_id) if item.seller_id else None,
                "title": item.title,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
            }
            for item in order.items
        ],
        shipping_address=(
            {
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "postal_code": address.postal_code,
                "country": address.country,
            }
            if address
            else None
        ),
        delivery_date=order.delivery_date,
        subtotal=order.subtotal,
        shipping_cost=order.shipping_cost or 0.0,
        grand_total=order.grand_total,
        currency=order.currency or "USD",
        cancellation_reason=order.cancellation_reason,
        created_at=order.created_at,
    )


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> StatusResponse:
    current_domain.process(CancelOrder(order_id=order_id, reason=body.reason), asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/payment/failure", response_model=StatusResponse)
async def record_payment_failure(order_id: str, body: RecordPaymentFailureRequest) -> StatusResponse:
    command = RecordOrderPaymentFailure(order_id=order_id, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/payment/retry", response_model=StatusResponse)
async def retry_payment(order_id: str) -> StatusResponse:
    current_domain.process(RetryOrderPayment(order_id=order_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Analytics Router
# ---------------------------------------------------------------------------
analytics_router = APIRouter(prefix="/analytics", tags=["analytics"])


@analytics_router.get("/cart-abandonment", response_model=CartAbandonmentResponse)
async def cart_abandonment(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    seller_id: str | None = None,
    category_id: str | None = None,
) -> CartAbandonmentResponse:
    filters = AbandonmentFilters(
        start_date=start_date,
        end_date=end_date,
        seller_id=seller_id,
        category_id=category_id,
    )
    return CartAbandonmentResponse(**load_cart_abandonment_metrics(filters).to_dict())


# ---------------------------------------------------------------------------
# Maintenance Router (triggered by an external scheduler)
# ---------------------------------------------------------------------------
maintenance_router = APIRouter(prefix="/maintenance", tags=["maintenance"])


@maintenance_router.post("/detect-abandoned-carts", response_model=DetectAbandonedCartsResponse)
async def detect_abandoned_carts(body: DetectAbandonedCartsRequest) -> DetectAbandonedCartsResponse:
    command = DetectAbandonedCarts(
        idle_threshold_hours=body.idle_threshold_hours,
        as_of=body.as_of,
    )
    result = current_domain.process(command, asynchronous=False)
    return DetectAbandonedCartsResponse(abandoned_count=result or 0)
