"""Inbound cross-domain event handler — Ordering reacts to Catalogue events.

Keeps the ProductListing read model in step with the catalogue: new
products, price changes, stock adjustments and discontinuations. Carts
already holding a discontinued product are not modified; checkout rejects
the line instead.

Cross-domain events are imported from shared.events.catalogue and registered
as external events via ordering.register_external_event().
"""

import json

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.catalogue import (
    ProductAdded,
    ProductDiscontinued,
    ProductPriceChanged,
    ProductStockAdjusted,
)

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering
from ordering.projections.cart_view import CartView
from ordering.projections.product_listing import ProductListing, get_listing

logger = structlog.get_logger(__name__)

# Register external events so Protean can deserialize them
ordering.register_external_event(ProductAdded, "Catalogue.ProductAdded.v1")
ordering.register_external_event(ProductPriceChanged, "Catalogue.ProductPriceChanged.v1")
ordering.register_external_event(ProductStockAdjusted, "Catalogue.ProductStockAdjusted.v1")
ordering.register_external_event(ProductDiscontinued, "Catalogue.ProductDiscontinued.v1")


@ordering.event_handler(part_of=ShoppingCart, stream_category="catalogue::product")
class CatalogueListingEventHandler:
    """Maintains the product listing from Catalogue domain events."""

    @handle(ProductAdded)
    def on_product_added(self, event: ProductAdded) -> None:
        current_domain.repository_for(ProductListing).add(
            ProductListing(
                product_id=str(event.product_id),
                title=event.title,
                seller_id=str(event.seller_id) if event.seller_id else None,
                category_id=str(event.category_id) if event.category_id else None,
                price=event.price,
                currency=event.currency or "USD",
                stock=event.stock or 0,
                status="Active",
            )
        )
        logger.info("Product listed", product_id=str(event.product_id), price=event.price)

    @handle(ProductPriceChanged)
    def on_price_changed(self, event: ProductPriceChanged) -> None:
        listing = get_listing(event.product_id)
        if listing is None:
            logger.warning("Price change for unlisted product ignored", product_id=str(event.product_id))
            return

        listing.price = event.new_price
        current_domain.repository_for(ProductListing).add(listing)

    @handle(ProductStockAdjusted)
    def on_stock_adjusted(self, event: ProductStockAdjusted) -> None:
        listing = get_listing(event.product_id)
        if listing is None:
            logger.warning("Stock adjustment for unlisted product ignored", product_id=str(event.product_id))
            return

        listing.stock = event.new_stock
        current_domain.repository_for(ProductListing).add(listing)

    @handle(ProductDiscontinued)
    def on_product_discontinued(self, event: ProductDiscontinued) -> None:
        listing = get_listing(event.product_id)
        if listing is None:
            logger.warning("Discontinuation of unlisted product ignored", product_id=str(event.product_id))
            return

        listing.status = "Discontinued"
        current_domain.repository_for(ProductListing).add(listing)

        active_carts = current_domain.repository_for(CartView)._dao.query.filter(status="Active").all().items
        affected_count = 0
        for cart in active_carts:
            items = json.loads(cart.items) if cart.items else []
            if any(item.get("product_id") == str(event.product_id) for item in items):
                affected_count += 1

        if affected_count:
            logger.warning(
                "Active carts contain discontinued product",
                product_id=str(event.product_id),
                affected_cart_count=affected_count,
            )
