"""Order aggregate (CQRS) — one order per split of a checkout.

A checkout converts a cart into one or more orders sharing a ``checkout_id``.
Item prices and titles are captured at placement time and never change,
even if the catalogue prices change later.

State Machine:
    PENDING → CONFIRMED | PAYMENT_FAILED | CANCELLED
    PAYMENT_FAILED → PENDING | CANCELLED
    CONFIRMED → CANCELLED
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    Date,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderPaymentFailed,
    OrderPaymentRetried,
    OrderPlaced,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PAYMENT_FAILED = "Payment_Failed"
    CANCELLED = "Cancelled"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.PAYMENT_FAILED, OrderStatus.CANCELLED},
    OrderStatus.PAYMENT_FAILED: {OrderStatus.PENDING, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.CANCELLED},
    OrderStatus.CANCELLED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """A delivery address captured at checkout time."""

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    seller_id = Identifier()
    title = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    customer_id = Identifier(required=True)
    checkout_id = Identifier(required=True)
    cart_id = Identifier()
    seller_id = Identifier()
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    delivery_date = Date()
    subtotal = Float(default=0.0)
    shipping_cost = Float(default=0.0)
    grand_total = Float(default=0.0)
    currency = String(max_length=3, default="USD")
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_failure_reason = String(max_length=500)
    cancellation_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        checkout_id,
        items_data,
        subtotal,
        shipping_cost=0.0,
        currency="USD",
        cart_id=None,
        seller_id=None,
        shipping_address=None,
        delivery_date=None,
    ):
        """Create a pending order for one split of a checkout.

        Args:
            customer_id: The customer placing the order.
            checkout_id: Identifier shared by every order of the checkout.
            items_data: List of dicts with product_id, seller_id, title,
                        quantity, unit_price.
            subtotal: Sum of unit_price * quantity over the items.
            shipping_cost: Shipping charged for this order.
            shipping_address: Dict with street, city, state, postal_code, country.
        """
        now = datetime.now(UTC)
        grand_total = round(subtotal + (shipping_cost or 0.0), 2)

        order = cls(
            customer_id=customer_id,
            checkout_id=checkout_id,
            cart_id=cart_id,
            seller_id=seller_id,
            shipping_address=ShippingAddress(**shipping_address) if shipping_address else None,
            delivery_date=delivery_date,
            subtotal=round(subtotal, 2),
            shipping_cost=round(shipping_cost or 0.0, 2),
            grand_total=grand_total,
            currency=currency,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        for item in items_data:
            order.add_items(OrderItem(**item))

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                checkout_id=str(checkout_id),
                customer_id=str(customer_id),
                seller_id=str(seller_id) if seller_id else None,
                items=json.dumps(items_data),
                subtotal=order.subtotal,
                shipping_cost=order.shipping_cost,
                grand_total=order.grand_total,
                currency=currency,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    @property
    def product_ids(self):
        return [str(item.product_id) for item in self.items]

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def confirm(self):
        """Confirm the order once its payment plan is settled."""
        self._assert_can_transition(OrderStatus.CONFIRMED)
        now = datetime.now(UTC)
        self.status = OrderStatus.CONFIRMED.value
        self.updated_at = now

        self.raise_(OrderConfirmed(order_id=str(self.id), confirmed_at=now))

    def record_payment_failure(self, reason):
        self._assert_can_transition(OrderStatus.PAYMENT_FAILED)
        now = datetime.now(UTC)
        self.status = OrderStatus.PAYMENT_FAILED.value
        self.payment_failure_reason = reason
        self.updated_at = now

        self.raise_(OrderPaymentFailed(order_id=str(self.id), reason=reason, failed_at=now))

    def retry_payment(self):
        """Return a failed order to Pending so the customer can pay again."""
        if OrderStatus(self.status) != OrderStatus.PAYMENT_FAILED:
            raise ValidationError({"status": ["Only orders with a failed payment can be retried"]})
        now = datetime.now(UTC)
        self.status = OrderStatus.PENDING.value
        self.payment_failure_reason = None
        self.updated_at = now

        self.raise_(OrderPaymentRetried(order_id=str(self.id), retried_at=now))

    def cancel(self, reason):
        previous_status = self.status
        self._assert_can_transition(OrderStatus.CANCELLED)
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                reason=reason,
                previous_status=previous_status,
                cancelled_at=now,
            )
        )
