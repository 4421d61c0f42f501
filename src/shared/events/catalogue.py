"""Cross-domain event contracts for Catalogue domain events.

These classes define the event shape for consumption by other domains (the
Ordering domain keeps a product listing read model from them). They are
registered as external events via domain.register_external_event() with
matching __type__ strings so Protean's stream deserialization works
correctly.

The source-of-truth events are in src/catalogue/product/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, Integer, String


class ProductAdded(BaseEvent):
    """A new product was put on sale."""

    __version__ = 1

    product_id = Identifier(required=True)
    title = String(required=True)
    seller_id = Identifier()
    category_id = Identifier()
    price = Float(required=True)
    currency = String(default="USD")
    stock = Integer(default=0)
    added_at = DateTime(required=True)


class ProductPriceChanged(BaseEvent):
    """A product's selling price changed."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_price = Float(required=True)
    new_price = Float(required=True)
    currency = String(default="USD")


class ProductStockAdjusted(BaseEvent):
    """A product's available stock was adjusted."""

    __version__ = 1

    product_id = Identifier(required=True)
    delta = Integer(required=True)
    new_stock = Integer(required=True)
    reason = String()


class ProductDiscontinued(BaseEvent):
    """An active product was discontinued and removed from sale."""

    __version__ = 1

    product_id = Identifier(required=True)
    discontinued_at = DateTime(required=True)
