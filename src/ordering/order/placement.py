"""Order placement — checkout a cart into one or more split orders.

Every cart line is priced from the product listing at checkout time, turned
into a split item, and run through the splitting pipeline. One Order is
created per split, all sharing a freshly minted ``checkout_id``, and the cart
is converted. The whole checkout commits in a single unit of work.
"""

import json
from uuid import uuid4

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import CartStatus, ShoppingCart
from ordering.domain import ordering
from ordering.order.order import Order
from ordering.order.splitting import (
    DEFAULT_SELLER,
    Address,
    SplitItem,
    SplitOptions,
    preview_order_splits,
    split_order,
)
from ordering.projections.product_listing import get_purchasable_listing
from ordering.utils.time import as_date

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    cart_id = Identifier(required=True)
    shipping_address = Text()  # JSON: address dict
    split_by_seller = Boolean(default=True)
    split_by_address = Boolean(default=False)
    split_by_delivery_date = Boolean(default=False)
    custom_addresses = Text()  # JSON: list of {item_ids, address}
    custom_delivery_dates = Text()  # JSON: list of {item_ids, delivery_date}
    shipping_per_split = Float(default=0.0, min_value=0.0)


def _load(value):
    if value is None or value == "":
        return None
    return json.loads(value) if isinstance(value, str) else value


def build_split_options(
    shipping_address=None,
    split_by_seller=True,
    split_by_address=False,
    split_by_delivery_date=False,
    custom_addresses=None,
    custom_delivery_dates=None,
    shipping_per_split=0.0,
):
    """Translate checkout request data (dicts or JSON strings) into ``SplitOptions``."""
    default_address = Address.from_dict(_load(shipping_address))
    if split_by_address and default_address is None:
        raise ValidationError({"shipping_address": ["Shipping address is required when splitting by address"]})

    return SplitOptions(
        split_by_seller=bool(split_by_seller),
        split_by_address=bool(split_by_address),
        split_by_delivery_date=bool(split_by_delivery_date),
        custom_addresses=[
            ([str(i) for i in entry.get("item_ids", [])], Address.from_dict(entry["address"]))
            for entry in _load(custom_addresses) or []
        ],
        custom_delivery_dates=[
            ([str(i) for i in entry.get("item_ids", [])], as_date(entry["delivery_date"]))
            for entry in _load(custom_delivery_dates) or []
        ],
        default_address=default_address,
        shipping_per_split=shipping_per_split or 0.0,
    )


def checkout_items(cart):
    """Price every line of an active cart from the product listing.

    Raises ``ValidationError`` when the cart cannot be checked out or a line
    no longer refers to a purchasable product with enough stock.
    """
    if CartStatus(cart.status) != CartStatus.ACTIVE:
        raise ValidationError({"cart": ["Only active carts can be checked out"]})
    if not cart.items:
        raise ValidationError({"cart": ["Cannot checkout an empty cart"]})

    items = []
    for line in cart.items:
        listing = get_purchasable_listing(line.product_id)
        if (listing.stock or 0) < line.quantity:
            raise ValidationError({"quantity": [f"Insufficient stock for {listing.title}"]})
        items.append(
            SplitItem(
                id=str(line.product_id),
                product_id=str(line.product_id),
                quantity=line.quantity,
                price=listing.price or 0.0,
                seller_id=str(listing.seller_id) if listing.seller_id else None,
                title=listing.title,
            )
        )
    return items


def preview_checkout(cart, options):
    """Compute the orders a checkout would produce without writing anything."""
    return preview_order_splits(checkout_items(cart), options)


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart_repo = current_domain.repository_for(ShoppingCart)
        cart = cart_repo.get(command.cart_id)

        options = build_split_options(
            shipping_address=command.shipping_address,
            split_by_seller=command.split_by_seller,
            split_by_address=command.split_by_address,
            split_by_delivery_date=command.split_by_delivery_date,
            custom_addresses=command.custom_addresses,
            custom_delivery_dates=command.custom_delivery_dates,
            shipping_per_split=command.shipping_per_split,
        )
        items = checkout_items(cart)
        splits = split_order(items, options)

        placed_item_count = sum(len(split.items) for split in splits)
        if placed_item_count != len(items):
            raise ValidationError({"shipping_address": ["Every item needs a shipping address"]})

        checkout_id = str(uuid4())
        currency = "USD"
        order_repo = current_domain.repository_for(Order)
        order_ids = []
        for split in splits:
            shipping_address = split.shipping_address or options.default_address
            order = Order.place(
                customer_id=cart.customer_id,
                checkout_id=checkout_id,
                cart_id=str(cart.id),
                seller_id=None if split.seller_id == DEFAULT_SELLER else split.seller_id,
                items_data=[
                    {
                        "product_id": item.product_id,
                        "seller_id": item.seller_id,
                        "title": item.title,
                        "quantity": item.quantity,
                        "unit_price": item.price,
                    }
                    for item in split.items
                ],
                subtotal=split.subtotal,
                shipping_cost=split.shipping,
                currency=currency,
                shipping_address=shipping_address.to_dict() if shipping_address else None,
                delivery_date=split.delivery_date,
            )
            order_repo.add(order)
            order_ids.append(str(order.id))

        cart.convert_to_order(checkout_id)
        cart_repo.add(cart)

        logger.info(
            "Checkout placed",
            cart_id=str(cart.id),
            checkout_id=checkout_id,
            order_count=len(order_ids),
        )
        return {"checkout_id": checkout_id, "order_ids": order_ids}
