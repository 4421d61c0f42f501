"""Cart summary — a cart priced at the current listing prices."""

from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.projections.product_listing import get_listing


def _round(amount):
    return round(amount, 2)


def summarize_cart(cart_id):
    """Return the cart's lines with titles, current unit prices and totals.

    Lines whose product has left the listing are shown at price 0.
    """
    cart = current_domain.repository_for(ShoppingCart).get(cart_id)

    lines = []
    for item in cart.items:
        listing = get_listing(item.product_id)
        unit_price = (listing.price or 0.0) if listing else 0.0
        lines.append(
            {
                "product_id": str(item.product_id),
                "title": listing.title if listing else str(item.product_id),
                "quantity": item.quantity,
                "unit_price": unit_price,
                "line_total": _round(unit_price * item.quantity),
                "available": bool(listing and listing.status == "Active"),
                "added_at": item.added_at,
            }
        )

    return {
        "cart_id": str(cart.id),
        "customer_id": str(cart.customer_id),
        "status": cart.status,
        "items": lines,
        "total": _round(sum(line["line_total"] for line in lines)),
        "count": len(lines),
    }
