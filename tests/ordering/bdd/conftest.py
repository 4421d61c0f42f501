"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.events import (
    CartAbandoned,
    CartCleared,
    CartConverted,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

_CART_EVENT_CLASSES = {
    "CartItemAdded": CartItemAdded,
    "CartQuantityUpdated": CartQuantityUpdated,
    "CartItemRemoved": CartItemRemoved,
    "CartCleared": CartCleared,
    "CartConverted": CartConverted,
    "CartAbandoned": CartAbandoned,
}


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def stock():
    """Units on hand per product, as the product listing advertises them."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart", target_fixture="cart")
def empty_cart():
    cart = ShoppingCart.create(customer_id="cust-bdd-001")
    cart._events.clear()
    return cart


@given(parsers.cfparse('product "{product_id}" has {units:d} in stock'))
def product_in_stock(stock, product_id, units):
    stock[product_id] = units


@given(parsers.cfparse('the cart holds {quantity:d} of "{product_id}"'))
def cart_holds(cart, stock, product_id, quantity):
    cart.add_item(product_id, quantity, available_stock=stock.get(product_id, quantity))
    cart._events.clear()


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse('the cart has {quantity:d} of "{product_id}"'))
def cart_has_quantity(cart, product_id, quantity):
    item = cart.item_for(product_id)
    assert item is not None, f"No line for {product_id}"
    assert item.quantity == quantity


@then(parsers.cfparse('the cart has no line for "{product_id}"'))
def cart_has_no_line(cart, product_id):
    assert cart.item_for(product_id) is None


@then(parsers.cfparse('the cart status is "{status}"'))
def cart_status_is(cart, status):
    assert cart.status == status


@then(parsers.cfparse("a {event_type} cart event is raised"))
def cart_event_raised(cart, event_type):
    event_cls = _CART_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in cart._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in cart._events]}"


@then("no cart event is raised")
def no_cart_event(cart):
    assert cart._events == []
