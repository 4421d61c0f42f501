"""Shared BDD fixtures and step definitions for the Catalogue domain."""

import pytest
from catalogue.product.events import (
    ProductAdded,
    ProductDiscontinued,
    ProductPriceChanged,
    ProductStockAdjusted,
)
from catalogue.product.product import Product
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

# Map event name strings to classes for dynamic lookup
_PRODUCT_EVENT_CLASSES = {
    "ProductAdded": ProductAdded,
    "ProductPriceChanged": ProductPriceChanged,
    "ProductStockAdjusted": ProductStockAdjusted,
    "ProductDiscontinued": ProductDiscontinued,
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("an active product priced {price:f} with {stock:d} in stock"), target_fixture="product")
def active_product(price, stock):
    product = Product.create(title="Test Product", price=price, seller_id="seller-1", stock=stock)
    product._events.clear()
    return product


@given("a discontinued product", target_fixture="product")
def discontinued_product():
    product = Product.create(title="Test Product", price=10.0, seller_id="seller-1", stock=1)
    product.discontinue()
    product._events.clear()
    return product


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse('the product status is "{status}"'))
def product_status_is(product, status):
    assert product.status == status


@then(parsers.cfparse("a {event_type} product event is raised"))
def product_event_raised(product, event_type):
    event_cls = _PRODUCT_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in product._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in product._events]}"
