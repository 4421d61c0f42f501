"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from catalogue.domain import catalogue


@catalogue.event(part_of="Product")
class ProductAdded:
    """A new product was put on sale."""

    __version__ = 1

    product_id: Identifier(required=True)
    title: String(required=True)
    seller_id: Identifier()
    category_id: Identifier()
    price: Float(required=True)
    currency: String(default="USD")
    stock: Integer(default=0)
    added_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductPriceChanged:
    """A product's selling price changed."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_price: Float(required=True)
    new_price: Float(required=True)
    currency: String(default="USD")


@catalogue.event(part_of="Product")
class ProductStockAdjusted:
    """A product's available stock was adjusted."""

    __version__ = 1

    product_id: Identifier(required=True)
    delta: Integer(required=True)
    new_stock: Integer(required=True)
    reason: String()


@catalogue.event(part_of="Product")
class ProductDiscontinued:
    """An active product was discontinued and removed from sale."""

    __version__ = 1

    product_id: Identifier(required=True)
    discontinued_at: DateTime(required=True)
