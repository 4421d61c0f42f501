"""Cart view — current cart state for UI rendering, abandonment detection and analytics."""

import json

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
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


@ordering.projection
class CartView:
    cart_id = Identifier(identifier=True, required=True)
    customer_id = Identifier()
    items = Text()  # JSON: list of {product_id, quantity, added_at}
    status = String(required=True)
    item_count = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()


@ordering.projector(projector_for=CartView, aggregates=[ShoppingCart])
class CartViewProjector:
    @on(CartCreated)
    def on_cart_created(self, event):
        current_domain.repository_for(CartView).add(
            CartView(
                cart_id=event.cart_id,
                customer_id=event.customer_id,
                items="[]",
                status="Active",
                item_count=0,
                created_at=event.created_at,
                updated_at=event.created_at,
            )
        )

    @on(CartItemAdded)
    def on_item_added(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        items = json.loads(view.items) if view.items else []

        existing = next((i for i in items if i.get("product_id") == str(event.product_id)), None)
        if existing:
            existing["quantity"] = event.new_quantity
        else:
            items.append(
                {
                    "product_id": str(event.product_id),
                    "quantity": event.new_quantity,
                    "added_at": event.added_at.isoformat(),
                }
            )

        view.items = json.dumps(items)
        view.item_count = len(items)
        view.updated_at = event.added_at
        repo.add(view)

    @on(CartQuantityUpdated)
    def on_quantity_updated(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        items = json.loads(view.items) if view.items else []
        for item in items:
            if item.get("product_id") == str(event.product_id):
                item["quantity"] = event.new_quantity
                break
        view.items = json.dumps(items)
        view.updated_at = event.updated_at
        repo.add(view)

    @on(CartItemRemoved)
    def on_item_removed(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        items = json.loads(view.items) if view.items else []
        items = [i for i in items if i.get("product_id") != str(event.product_id)]
        view.items = json.dumps(items)
        view.item_count = len(items)
        view.updated_at = event.removed_at
        repo.add(view)

    @on(CartCleared)
    def on_cart_cleared(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        view.items = "[]"
        view.item_count = 0
        view.updated_at = event.cleared_at
        repo.add(view)

    @on(CartConverted)
    def on_cart_converted(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        view.status = "Converted"
        view.updated_at = event.converted_at
        repo.add(view)

    @on(CartAbandoned)
    def on_cart_abandoned(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        view.status = "Abandoned"
        view.updated_at = event.abandoned_at
        repo.add(view)

    @staticmethod
    def _get_or_create_view(repo, cart_id):
        try:
            return repo.get(cart_id)
        except ObjectNotFoundError:
            return CartView(
                cart_id=cart_id,
                status="Active",
                items="[]",
                item_count=0,
            )
