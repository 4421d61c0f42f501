"""BDD tests for splitting a checkout into orders."""

import pytest
from ordering.order.splitting import Address, SplitItem, SplitOptions, split_order
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/order_splitting.feature")

HOME = Address(street="1 Main St", city="Springfield", postal_code="62701", state="IL")
PARIS = Address(street="2 Rue Cler", city="Paris", postal_code="75007", country="FR")


@pytest.fixture()
def result():
    return {"splits": []}


def _split_for(result, seller_id):
    return next(s for s in result["splits"] if s.seller_id == seller_id)


@pytest.fixture()
def items():
    return []


# ---------------------------------------------------------------------------
# Given / When steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('item "{item_id}" from "{seller_id}" priced {price:f} with quantity {quantity:d}'))
def checkout_item(items, item_id, seller_id, price, quantity):
    items.append(
        SplitItem(
            id=item_id,
            product_id=f"prod-{item_id}",
            seller_id=seller_id,
            price=price,
            quantity=quantity,
        )
    )


@when("the checkout is split with no options")
def split_plain(items, result):
    result["splits"] = split_order(items, SplitOptions(default_address=HOME))


@when("the checkout is split by seller")
def split_seller(items, result):
    result["splits"] = split_order(items, SplitOptions(split_by_seller=True, default_address=HOME))


@when(parsers.cfparse("the checkout is split by seller with {shipping:f} shipping per order"))
def split_seller_with_shipping(items, result, shipping):
    options = SplitOptions(split_by_seller=True, default_address=HOME, shipping_per_split=shipping)
    result["splits"] = split_order(items, options)


@when(parsers.cfparse('item "{item_id}" ships to Paris and the checkout is split by seller'))
def split_with_custom_address(items, result, item_id):
    options = SplitOptions(
        split_by_seller=True,
        default_address=HOME,
        custom_addresses=[([item_id], PARIS)],
    )
    result["splits"] = split_order(items, options)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("there is {count:d} order"))
@then(parsers.cfparse("there are {count:d} orders"))
def order_count(result, count):
    assert len(result["splits"]) == count


@then(parsers.cfparse("the orders total {amount:f}"))
def orders_total(result, amount):
    assert sum(s.total for s in result["splits"]) == pytest.approx(amount)


@then(parsers.cfparse('the order for "{seller_id}" totals {amount:f}'))
def seller_total(result, seller_id, amount):
    assert _split_for(result, seller_id).total == pytest.approx(amount)


@then(parsers.cfparse('the order for "{seller_id}" ships to "{city}"'))
def seller_ships_to(result, seller_id, city):
    assert _split_for(result, seller_id).shipping_address.city == city


@then(parsers.cfparse('the order for "{seller_id}" has no shipping address'))
def seller_has_no_address(result, seller_id):
    assert _split_for(result, seller_id).shipping_address is None
