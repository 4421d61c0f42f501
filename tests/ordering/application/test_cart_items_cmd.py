"""Application tests for cart item commands validated against the product listing."""

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from ordering.cart.management import CreateCart
from ordering.projections.cart_view import CartView
from ordering.projections.product_listing import ProductListing
from protean import current_domain
from protean.exceptions import ValidationError


def _list_product(product_id="prod-001", stock=5, price=10.0, status="Active"):
    current_domain.repository_for(ProductListing).add(
        ProductListing(
            product_id=product_id,
            title=f"Product {product_id}",
            seller_id="seller-1",
            price=price,
            stock=stock,
            status=status,
        )
    )


def _create_cart(customer_id="cust-001"):
    return current_domain.process(CreateCart(customer_id=customer_id), asynchronous=False)


def _add(cart_id, product_id="prod-001", quantity=1):
    current_domain.process(
        AddToCart(cart_id=cart_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


def _cart(cart_id):
    return current_domain.repository_for(ShoppingCart).get(cart_id)


class TestAddToCart:
    def test_add_item_persists_line(self):
        _list_product(stock=5)
        cart_id = _create_cart()
        _add(cart_id, quantity=2)

        cart = _cart(cart_id)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    def test_unknown_product(self):
        cart_id = _create_cart()
        with pytest.raises(ValidationError) as exc:
            _add(cart_id, product_id="prod-missing")
        assert "Product not found" in str(exc.value)

    def test_discontinued_product(self):
        _list_product(status="Discontinued")
        cart_id = _create_cart()
        with pytest.raises(ValidationError) as exc:
            _add(cart_id)
        assert "no longer available" in str(exc.value)

    def test_insufficient_stock(self):
        _list_product(stock=1)
        cart_id = _create_cart()
        with pytest.raises(ValidationError) as exc:
            _add(cart_id, quantity=2)
        assert "Insufficient stock" in str(exc.value)
        assert len(_cart(cart_id).items) == 0

    def test_merged_quantity_checked_against_stock(self):
        _list_product(stock=3)
        cart_id = _create_cart()
        _add(cart_id, quantity=2)
        with pytest.raises(ValidationError):
            _add(cart_id, quantity=2)
        assert _cart(cart_id).items[0].quantity == 2

    def test_default_quantity_is_one(self):
        _list_product()
        cart_id = _create_cart()
        current_domain.process(AddToCart(cart_id=cart_id, product_id="prod-001"), asynchronous=False)
        assert _cart(cart_id).items[0].quantity == 1


class TestUpdateCartQuantity:
    def test_update_within_stock(self):
        _list_product(stock=5)
        cart_id = _create_cart()
        _add(cart_id)
        current_domain.process(
            UpdateCartQuantity(cart_id=cart_id, product_id="prod-001", quantity=5),
            asynchronous=False,
        )
        assert _cart(cart_id).items[0].quantity == 5

    def test_update_beyond_stock(self):
        _list_product(stock=2)
        cart_id = _create_cart()
        _add(cart_id)
        with pytest.raises(ValidationError):
            current_domain.process(
                UpdateCartQuantity(cart_id=cart_id, product_id="prod-001", quantity=3),
                asynchronous=False,
            )

    def test_zero_removes_line_even_if_product_was_delisted(self):
        _list_product()
        cart_id = _create_cart()
        _add(cart_id)
        listing = current_domain.repository_for(ProductListing).get("prod-001")
        listing.status = "Discontinued"
        current_domain.repository_for(ProductListing).add(listing)

        current_domain.process(
            UpdateCartQuantity(cart_id=cart_id, product_id="prod-001", quantity=0),
            asynchronous=False,
        )
        assert len(_cart(cart_id).items) == 0

    def test_update_missing_line(self):
        _list_product()
        cart_id = _create_cart()
        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                UpdateCartQuantity(cart_id=cart_id, product_id="prod-001", quantity=2),
                asynchronous=False,
            )
        assert "Cart item not found" in str(exc.value)


class TestRemoveAndClear:
    def test_remove_from_cart(self):
        _list_product("prod-001")
        _list_product("prod-002")
        cart_id = _create_cart()
        _add(cart_id, "prod-001")
        _add(cart_id, "prod-002")

        current_domain.process(RemoveFromCart(cart_id=cart_id, product_id="prod-001"), asynchronous=False)

        assert [str(i.product_id) for i in _cart(cart_id).items] == ["prod-002"]

    def test_clear_cart_updates_view(self):
        _list_product()
        cart_id = _create_cart()
        _add(cart_id, quantity=2)

        current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)

        assert len(_cart(cart_id).items) == 0
        view = current_domain.repository_for(CartView).get(cart_id)
        assert view.item_count == 0
        assert view.items == "[]"
