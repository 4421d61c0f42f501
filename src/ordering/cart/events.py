"""Domain events for the ShoppingCart aggregate."""

from protean.fields import DateTime, Identifier, Integer, Text

from ordering.domain import ordering


@ordering.event(part_of="ShoppingCart")
class CartCreated:
    """A shopping cart was opened for a customer."""

    __version__ = 1

    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    created_at = DateTime(required=True)


@ordering.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the shopping cart, or its quantity was increased."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)  # Quantity added by this change
    new_quantity = Integer(required=True)  # Resulting line quantity
    added_at = DateTime(required=True)


@ordering.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart line was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    updated_at = DateTime(required=True)


@ordering.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A product line was removed from the shopping cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    removed_at = DateTime(required=True)


@ordering.event(part_of="ShoppingCart")
class CartCleared:
    """Every line was removed from the shopping cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    items_removed_count = Integer(required=True)
    cleared_at = DateTime(required=True)


@ordering.event(part_of="ShoppingCart")
class CartConverted:
    """A shopping cart was converted into one or more orders at checkout."""

    __version__ = 1

    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    checkout_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    converted_at = DateTime(required=True)


@ordering.event(part_of="ShoppingCart")
class CartAbandoned:
    """A shopping cart was marked as abandoned due to inactivity."""

    __version__ = 1

    cart_id = Identifier(required=True)
    abandoned_at = DateTime(required=True)
