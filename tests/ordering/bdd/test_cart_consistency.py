"""BDD tests for cart stock consistency and lifecycle guards."""

from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, when

scenarios("features/cart_consistency.feature")


@given("the cart has been abandoned")
def abandoned(cart):
    cart.abandon()
    cart._events.clear()


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('{quantity:d} of "{product_id}" are added'))
def add_units(cart, stock, product_id, quantity, error):
    try:
        cart.add_item(product_id, quantity, available_stock=stock[product_id])
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('the quantity of "{product_id}" is set to {quantity:d}'))
def set_quantity(cart, stock, product_id, quantity, error):
    try:
        cart.update_item_quantity(product_id, quantity, available_stock=stock[product_id])
    except ValidationError as exc:
        error["exc"] = exc


@when("the cart is cleared")
def clear(cart, error):
    try:
        cart.clear()
    except ValidationError as exc:
        error["exc"] = exc
