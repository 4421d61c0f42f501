"""Product listing — Ordering's local copy of what the catalogue sells.

Fed by Catalogue events (see ordering.cart.catalogue_events). Carts validate
stock against it, and cart totals, checkout pricing and abandonment analytics
read prices, sellers and categories from it.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering


@ordering.projection
class ProductListing:
    product_id = Identifier(identifier=True, required=True)
    title = String(max_length=255)
    seller_id = Identifier()
    category_id = Identifier()
    price = Float(default=0.0)
    currency = String(max_length=3, default="USD")
    stock = Integer(default=0)
    status = String(default="Active")


def get_listing(product_id):
    """Return the listing for a product, or None when the catalogue never announced it."""
    try:
        return current_domain.repository_for(ProductListing).get(str(product_id))
    except ObjectNotFoundError:
        return None


def get_purchasable_listing(product_id):
    """Return the listing for a product that can currently be bought."""
    listing = get_listing(product_id)
    if listing is None:
        raise ValidationError({"product_id": ["Product not found"]})
    if listing.status != "Active":
        raise ValidationError({"product_id": ["Product is no longer available"]})
    return listing
