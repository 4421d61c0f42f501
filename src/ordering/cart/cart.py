"""Shopping Cart aggregate (CQRS) — a customer's cart that converts to orders at checkout.

The cart holds one line per product. Every change that increases a line is
checked against the stock the catalogue currently advertises, so a cart never
asks for more than the seller can ship at the time of the change. Prices are
not stored on the cart; they are resolved from the product listing when the
cart is displayed and when it is checked out.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from ordering.cart.events import (
    CartAbandoned,
    CartCleared,
    CartConverted,
    CartCreated,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from ordering.domain import ordering


class CartStatus(Enum):
    ACTIVE = "Active"
    CONVERTED = "Converted"
    ABANDONED = "Abandoned"


@ordering.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@ordering.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    status = String(choices=CartStatus, default=CartStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def cart_must_have_items_to_convert(self):
        if self.status == CartStatus.CONVERTED.value and not self.items:
            raise ValidationError({"cart": ["Cannot convert an empty cart to an order"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        cart = cls(
            customer_id=customer_id,
            status=CartStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        cart.raise_(
            CartCreated(
                cart_id=str(cart.id),
                customer_id=str(customer_id),
                created_at=now,
            )
        )
        return cart

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _assert_active(self, action):
        if CartStatus(self.status) != CartStatus.ACTIVE:
            raise ValidationError({"status": [f"{action} only allowed on an active cart"]})

    def item_for(self, product_id):
        """Return the cart line for a product, or None."""
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    @property
    def total_quantity(self):
        return sum(item.quantity for item in self.items)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity, available_stock):
        """Add a product to the cart, merging with an existing line.

        Args:
            product_id: The product being added.
            quantity: Units to add, at least 1.
            available_stock: Units the catalogue currently has on hand.
        """
        self._assert_active("Adding items")
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if available_stock < quantity:
            raise ValidationError({"quantity": ["Insufficient stock"]})

        existing = self.item_for(product_id)
        now = datetime.now(UTC)

        if existing:
            new_quantity = existing.quantity + quantity
            if available_stock < new_quantity:
                raise ValidationError({"quantity": ["Insufficient stock for requested quantity"]})
            existing.quantity = new_quantity
        else:
            new_quantity = quantity
            self.add_items(
                CartItem(
                    product_id=product_id,
                    quantity=quantity,
                    added_at=now,
                )
            )

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product_id),
                quantity=quantity,
                new_quantity=new_quantity,
                added_at=now,
            )
        )

    def update_item_quantity(self, product_id, new_quantity, available_stock=None):
        """Set the quantity of a cart line. A quantity of 0 removes the line."""
        self._assert_active("Updating item quantities")
        if new_quantity is None or new_quantity < 0:
            raise ValidationError({"quantity": ["Quantity cannot be negative"]})

        item = self.item_for(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Cart item not found"]})

        if new_quantity == 0:
            self.remove_item(product_id)
            return

        if available_stock is not None and available_stock < new_quantity:
            raise ValidationError({"quantity": ["Insufficient stock"]})

        previous_quantity = item.quantity
        item.quantity = new_quantity
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                updated_at=now,
            )
        )

    def remove_item(self, product_id):
        """Remove a product line from the cart."""
        self._assert_active("Removing items")

        item = self.item_for(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Cart item not found"]})

        self.remove_items(item)
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                product_id=str(product_id),
                removed_at=now,
            )
        )

    def clear(self):
        """Remove every line from the cart."""
        self._assert_active("Clearing")

        removed = list(self.items)
        for item in removed:
            self.remove_items(item)

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                items_removed_count=len(removed),
                cleared_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Cart lifecycle
    # -------------------------------------------------------------------
    def convert_to_order(self, checkout_id):
        """Mark cart as converted into the orders of a checkout."""
        self._assert_active("Conversion")
        if not self.items:
            raise ValidationError({"cart": ["Cannot convert an empty cart"]})

        items_snapshot = [{"product_id": str(item.product_id), "quantity": item.quantity} for item in self.items]

        self.status = CartStatus.CONVERTED.value
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CartConverted(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                checkout_id=str(checkout_id),
                items=json.dumps(items_snapshot),
                converted_at=now,
            )
        )

    def abandon(self):
        """Mark cart as abandoned."""
        if CartStatus(self.status) != CartStatus.ACTIVE:
            raise ValidationError({"status": ["Only active carts can be abandoned"]})

        self.status = CartStatus.ABANDONED.value
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CartAbandoned(
                cart_id=str(self.id),
                abandoned_at=now,
            )
        )
