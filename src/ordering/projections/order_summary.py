"""Order summary — lightweight listing/history view.

Also the purchase side of cart-abandonment analytics: a customer who
ordered a product did not abandon it.
"""

import json

from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderPaymentFailed,
    OrderPaymentRetried,
    OrderPlaced,
)
from ordering.order.order import Order


@ordering.projection
class OrderSummary:
    order_id = Identifier(identifier=True, required=True)
    checkout_id = Identifier()
    customer_id = Identifier(required=True)
    seller_id = Identifier()
    status = String(required=True)
    product_ids = Text()  # JSON: list of product ids
    item_count = Integer(default=0)
    grand_total = Float()
    currency = String(default="USD")
    created_at = DateTime()
    updated_at = DateTime()


@ordering.projector(projector_for=OrderSummary, aggregates=[Order])
class OrderSummaryProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        items = json.loads(event.items) if isinstance(event.items, str) else []
        current_domain.repository_for(OrderSummary).add(
            OrderSummary(
                order_id=event.order_id,
                checkout_id=event.checkout_id,
                customer_id=event.customer_id,
                seller_id=event.seller_id,
                status="Pending",
                product_ids=json.dumps([str(item["product_id"]) for item in items]),
                item_count=len(items),
                grand_total=event.grand_total,
                currency=event.currency or "USD",
                created_at=event.placed_at,
                updated_at=event.placed_at,
            )
        )

    @on(OrderConfirmed)
    def on_order_confirmed(self, event):
        self._update_status(event.order_id, "Confirmed", event.confirmed_at)

    @on(OrderPaymentFailed)
    def on_payment_failed(self, event):
        self._update_status(event.order_id, "Payment_Failed", event.failed_at)

    @on(OrderPaymentRetried)
    def on_payment_retried(self, event):
        self._update_status(event.order_id, "Pending", event.retried_at)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        self._update_status(event.order_id, "Cancelled", event.cancelled_at)

    @staticmethod
    def _update_status(order_id, status, timestamp):
        repo = current_domain.repository_for(OrderSummary)
        summary = repo.get(order_id)
        summary.status = status
        summary.updated_at = timestamp
        repo.add(summary)
