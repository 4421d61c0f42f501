"""Application tests for DetectAbandonedCartsHandler — background job for flagging idle carts.

Covers:
- Idle carts with items are marked as abandoned
- Empty carts and recently touched carts are left alone
- The idle threshold defaults to the configured value
"""

from datetime import UTC, datetime, timedelta

from ordering.cart.abandonment import DetectAbandonedCarts
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import AddToCart
from ordering.cart.management import CreateCart
from ordering.projections.cart_view import CartView
from ordering.projections.product_listing import ProductListing
from protean import current_domain


def _create_cart_with_items(customer_id="cust-abandon-001"):
    """Create a cart and add an item to it, returning the cart_id."""
    current_domain.repository_for(ProductListing).add(
        ProductListing(product_id="prod-001", title="Mug", price=8.0, stock=10, status="Active")
    )
    cart_id = current_domain.process(CreateCart(customer_id=customer_id), asynchronous=False)
    current_domain.process(
        AddToCart(cart_id=cart_id, product_id="prod-001", quantity=2),
        asynchronous=False,
    )
    return cart_id


class TestDetectAbandonedCarts:
    def test_abandons_idle_cart_with_items(self):
        cart_id = _create_cart_with_items()

        result = current_domain.process(
            DetectAbandonedCarts(idle_threshold_hours=1, as_of=datetime.now(UTC) + timedelta(hours=2)),
            asynchronous=False,
        )

        assert result == 1
        assert current_domain.repository_for(ShoppingCart).get(cart_id).status == "Abandoned"
        assert current_domain.repository_for(CartView).get(cart_id).status == "Abandoned"

    def test_recent_cart_is_not_abandoned(self):
        cart_id = _create_cart_with_items()

        result = current_domain.process(
            DetectAbandonedCarts(idle_threshold_hours=1, as_of=datetime.now(UTC)),
            asynchronous=False,
        )

        assert result == 0
        assert current_domain.repository_for(ShoppingCart).get(cart_id).status == "Active"

    def test_empty_cart_is_not_abandoned(self):
        cart_id = current_domain.process(CreateCart(customer_id="cust-empty"), asynchronous=False)

        current_domain.process(
            DetectAbandonedCarts(idle_threshold_hours=1, as_of=datetime.now(UTC) + timedelta(days=3)),
            asynchronous=False,
        )

        assert current_domain.repository_for(ShoppingCart).get(cart_id).status == "Active"

    def test_default_threshold_from_config(self):
        cart_id = _create_cart_with_items()

        # 23 hours idle is below the default 24 hour threshold
        current_domain.process(
            DetectAbandonedCarts(as_of=datetime.now(UTC) + timedelta(hours=23)),
            asynchronous=False,
        )
        assert current_domain.repository_for(ShoppingCart).get(cart_id).status == "Active"

        current_domain.process(
            DetectAbandonedCarts(as_of=datetime.now(UTC) + timedelta(hours=25)),
            asynchronous=False,
        )
        assert current_domain.repository_for(ShoppingCart).get(cart_id).status == "Abandoned"
