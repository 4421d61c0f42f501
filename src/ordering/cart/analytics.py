"""Cart abandonment analytics — reconcile what customers carted with what they bought.

A customer's cart lines in the reporting window are compared with the
orders they placed in the same window. When none of their carted products
was ordered, their cart counts as abandoned.

``calculate_cart_abandonment_metrics`` is a pure aggregation over plain
records so it can be exercised without a database; ``load_cart_abandonment_metrics``
reads the CartView, OrderSummary and ProductListing read models and feeds it.
"""

import json
from collections import OrderedDict
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime, timedelta

import structlog
from protean.utils.globals import current_domain

from ordering.domain import custom_setting
from ordering.projections.cart_view import CartView
from ordering.projections.order_summary import OrderSummary
from ordering.projections.product_listing import ProductListing
from ordering.utils.time import as_utc

logger = structlog.get_logger(__name__)

EXCLUDED_ORDER_STATUSES = {"Cancelled", "Payment_Failed"}


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------
@dataclass
class CartLine:
    customer_id: str
    product_id: str
    quantity: int
    added_at: datetime


@dataclass
class OrderRecord:
    customer_id: str
    product_ids: list[str]
    status: str
    created_at: datetime


@dataclass
class ProductInfo:
    product_id: str
    title: str
    price: float = 0.0
    seller_id: str | None = None
    category_id: str | None = None


@dataclass
class AbandonmentFilters:
    start_date: datetime | None = None
    end_date: datetime | None = None
    seller_id: str | None = None
    category_id: str | None = None


@dataclass
class AbandonedProduct:
    product_id: str
    product_name: str
    abandonment_count: int = 0
    total_value: float = 0.0


@dataclass
class AbandonmentByTimeframe:
    last_24_hours: int = 0
    last_48_hours: int = 0
    last_7_days: int = 0


@dataclass
class CartAbandonmentMetrics:
    total_abandoned_carts: int = 0
    abandoned_cart_value: float = 0.0
    abandonment_rate: float = 0.0
    average_abandoned_cart_value: float = 0.0
    top_abandoned_products: list[AbandonedProduct] = field(default_factory=list)
    abandonment_by_timeframe: AbandonmentByTimeframe = field(default_factory=AbandonmentByTimeframe)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class _AbandonedCart:
    customer_id: str
    lines: list[CartLine]
    value: float
    created_at: datetime


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------
def _in_window(moment, start, end):
    moment = as_utc(moment)
    return moment is not None and start <= moment <= end


def _price_of(listings, product_id):
    listing = listings.get(product_id)
    return (listing.price or 0.0) if listing else 0.0


def calculate_cart_abandonment_metrics(
    cart_lines: list[CartLine],
    orders: list[OrderRecord],
    listings: dict[str, ProductInfo],
    filters: AbandonmentFilters | None = None,
    now: datetime | None = None,
    top_n: int = 10,
    window_days: int = 7,
) -> CartAbandonmentMetrics:
    """Compute abandonment metrics for the window ``[start_date, end_date]``.

    The window defaults to the ``window_days`` days ending at ``now``. Orders that were
    cancelled or failed payment do not count as purchases. Unknown products
    are valued at 0 and named by their id.
    """
    filters = filters or AbandonmentFilters()
    now = as_utc(now) if now else datetime.now(UTC)
    last_24_hours = now - timedelta(hours=24)
    last_48_hours = now - timedelta(hours=48)
    last_7_days = now - timedelta(days=7)

    start = as_utc(filters.start_date) if filters.start_date else now - timedelta(days=window_days)
    end = as_utc(filters.end_date) if filters.end_date else now

    purchased_pairs = set()
    for order in orders:
        if order.status in EXCLUDED_ORDER_STATUSES or not _in_window(order.created_at, start, end):
            continue
        for product_id in order.product_ids:
            purchased_pairs.add((str(order.customer_id), str(product_id)))

    carts_by_customer: OrderedDict[str, list[CartLine]] = OrderedDict()
    for line in cart_lines:
        if _in_window(line.added_at, start, end):
            carts_by_customer.setdefault(str(line.customer_id), []).append(line)

    abandoned = []
    for customer_id, lines in carts_by_customer.items():
        if any((customer_id, str(line.product_id)) in purchased_pairs for line in lines):
            continue
        abandoned.append(
            _AbandonedCart(
                customer_id=customer_id,
                lines=lines,
                value=sum(_price_of(listings, str(line.product_id)) * line.quantity for line in lines),
                created_at=min(as_utc(line.added_at) for line in lines),
            )
        )

    def matches(cart):
        products = [listings.get(str(line.product_id)) for line in cart.lines]
        if filters.seller_id and not any(p and str(p.seller_id) == str(filters.seller_id) for p in products):
            return False
        if filters.category_id and not any(p and str(p.category_id) == str(filters.category_id) for p in products):
            return False
        return True

    if filters.seller_id or filters.category_id:
        abandoned = [cart for cart in abandoned if matches(cart)]

    total_abandoned = len(abandoned)
    abandoned_value = sum(cart.value for cart in abandoned)
    total_carts = len(carts_by_customer)

    products: OrderedDict[str, AbandonedProduct] = OrderedDict()
    for cart in abandoned:
        for line in cart.lines:
            product_id = str(line.product_id)
            listing = listings.get(product_id)
            entry = products.setdefault(
                product_id,
                AbandonedProduct(
                    product_id=product_id,
                    product_name=listing.title if listing and listing.title else product_id,
                ),
            )
            entry.abandonment_count += 1
            entry.total_value = round(entry.total_value + _price_of(listings, product_id) * line.quantity, 2)

    top_products = sorted(products.values(), key=lambda p: p.abandonment_count, reverse=True)[:top_n]

    return CartAbandonmentMetrics(
        total_abandoned_carts=total_abandoned,
        abandoned_cart_value=round(abandoned_value, 2),
        abandonment_rate=round(total_abandoned / total_carts * 100, 2) if total_carts else 0.0,
        average_abandoned_cart_value=round(abandoned_value / total_abandoned, 2) if total_abandoned else 0.0,
        top_abandoned_products=top_products,
        abandonment_by_timeframe=AbandonmentByTimeframe(
            last_24_hours=sum(1 for cart in abandoned if cart.created_at >= last_24_hours),
            last_48_hours=sum(1 for cart in abandoned if cart.created_at >= last_48_hours),
            last_7_days=sum(1 for cart in abandoned if cart.created_at >= last_7_days),
        ),
    )


# ---------------------------------------------------------------------------
# Read-model loader
# ---------------------------------------------------------------------------
def _cart_lines():
    lines = []
    for view in current_domain.repository_for(CartView)._dao.query.all().items:
        for item in json.loads(view.items) if view.items else []:
            lines.append(
                CartLine(
                    customer_id=str(view.customer_id),
                    product_id=str(item["product_id"]),
                    quantity=int(item.get("quantity") or 0),
                    added_at=as_utc(item.get("added_at")) or as_utc(view.created_at),
                )
            )
    return lines


def _orders():
    return [
        OrderRecord(
            customer_id=str(summary.customer_id),
            product_ids=json.loads(summary.product_ids) if summary.product_ids else [],
            status=summary.status,
            created_at=as_utc(summary.created_at),
        )
        for summary in current_domain.repository_for(OrderSummary)._dao.query.all().items
    ]


def _listings():
    return {
        str(listing.product_id): ProductInfo(
            product_id=str(listing.product_id),
            title=listing.title,
            price=listing.price or 0.0,
            seller_id=str(listing.seller_id) if listing.seller_id else None,
            category_id=str(listing.category_id) if listing.category_id else None,
        )
        for listing in current_domain.repository_for(ProductListing)._dao.query.all().items
    }


def load_cart_abandonment_metrics(filters=None, now=None):
    """Compute abandonment metrics from the ordering read models."""
    metrics = calculate_cart_abandonment_metrics(
        cart_lines=_cart_lines(),
        orders=_orders(),
        listings=_listings(),
        filters=filters,
        now=now,
        top_n=custom_setting("top_abandoned_products", 10),
        window_days=custom_setting("abandonment_window_days", 7),
    )
    logger.info(
        "Cart abandonment metrics calculated",
        total_abandoned_carts=metrics.total_abandoned_carts,
        abandonment_rate=metrics.abandonment_rate,
    )
    return metrics
