"""Order splitting — partition checkout items into separate orders.

A checkout can produce several orders: one per seller, per shipping address
and per delivery date, depending on the options chosen. Splitting is a pure
computation over plain dataclasses so the same pipeline serves both the
split preview and order placement.

Pipeline (each step runs inside the splits produced by the previous one):
    seller → address → custom addresses → delivery date → custom dates → totals

Sub-splits inherit the seller, address and delivery date of the split they
were carved out of.
"""

from collections import OrderedDict
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_SELLER = "default"


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Address:
    street: str
    city: str
    postal_code: str
    country: str = ""
    state: str = ""

    @property
    def key(self) -> str:
        return f"{self.street}-{self.city}-{self.postal_code}"

    def to_dict(self) -> dict:
        return {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "country": self.country,
        }

    @classmethod
    def from_dict(cls, data):
        if data is None or isinstance(data, Address):
            return data
        return cls(
            street=data.get("street", ""),
            city=data.get("city", ""),
            postal_code=data.get("postal_code", ""),
            country=data.get("country", "") or "",
            state=data.get("state", "") or "",
        )


@dataclass
class SplitItem:
    id: str
    product_id: str
    quantity: int
    price: float
    seller_id: str | None = None
    shipping_address: Address | None = None
    delivery_date: date | None = None
    title: str | None = None

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


@dataclass
class OrderSplit:
    items: list[SplitItem] = field(default_factory=list)
    seller_id: str | None = None
    shipping_address: Address | None = None
    delivery_date: date | None = None
    subtotal: float = 0.0
    shipping: float = 0.0
    total: float = 0.0

    def to_dict(self) -> dict:
        return {
            "seller_id": self.seller_id,
            "shipping_address": self.shipping_address.to_dict() if self.shipping_address else None,
            "delivery_date": self.delivery_date.isoformat() if self.delivery_date else None,
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "title": item.title,
                    "quantity": item.quantity,
                    "price": item.price,
                    "seller_id": item.seller_id,
                }
                for item in self.items
            ],
            "subtotal": self.subtotal,
            "shipping": self.shipping,
            "total": self.total,
        }


@dataclass
class SplitOptions:
    split_by_seller: bool = False
    split_by_address: bool = False
    split_by_delivery_date: bool = False
    # item ids -> address / date
    custom_addresses: list[tuple[list[str], Address]] = field(default_factory=list)
    custom_delivery_dates: list[tuple[list[str], date]] = field(default_factory=list)
    default_address: Address | None = None
    shipping_per_split: float = 0.0


# ---------------------------------------------------------------------------
# Individual strategies
# ---------------------------------------------------------------------------
def split_by_seller(items: list[SplitItem]) -> list[OrderSplit]:
    """Group items by seller. Items without a seller share the ``"default"`` group."""
    groups: OrderedDict[str, list[SplitItem]] = OrderedDict()
    for item in items:
        groups.setdefault(item.seller_id or DEFAULT_SELLER, []).append(item)

    return [OrderSplit(seller_id=seller_id, items=group) for seller_id, group in groups.items()]


def split_by_address(items: list[SplitItem], default_address: Address | None = None) -> list[OrderSplit]:
    """Group items by shipping address, falling back to ``default_address``.

    Items with neither an address of their own nor a default are skipped.
    """
    groups: OrderedDict[str, tuple[Address, list[SplitItem]]] = OrderedDict()
    for item in items:
        address = item.shipping_address or default_address
        if address is None:
            logger.warning("No shipping address for item, skipping", item_id=item.id, product_id=item.product_id)
            continue
        groups.setdefault(address.key, (address, []))[1].append(item)

    return [OrderSplit(shipping_address=address, items=group) for address, group in groups.values()]


def split_by_delivery_date(items: list[SplitItem], today: date | None = None) -> list[OrderSplit]:
    """Group items by delivery date. Items without a date are delivered ``today``."""
    fallback = today or datetime.now(UTC).date()
    groups: OrderedDict[str, tuple[date, list[SplitItem]]] = OrderedDict()
    for item in items:
        delivery_date = item.delivery_date or fallback
        groups.setdefault(delivery_date.isoformat(), (delivery_date, []))[1].append(item)

    return [OrderSplit(delivery_date=delivery_date, items=group) for delivery_date, group in groups.values()]


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------
def _inherit(parent: OrderSplit, child: OrderSplit) -> OrderSplit:
    return replace(
        child,
        seller_id=child.seller_id or parent.seller_id,
        shipping_address=child.shipping_address or parent.shipping_address,
        delivery_date=child.delivery_date or parent.delivery_date,
    )


def _first_split_holding(splits: list[OrderSplit], item_ids) -> OrderSplit | None:
    wanted = {str(item_id) for item_id in item_ids}
    return next((s for s in splits if any(str(item.id) in wanted for item in s.items)), None)


def _round(amount: float) -> float:
    return round(amount + 0.0, 2)


def split_order(items: list[SplitItem], options: SplitOptions | None = None) -> list[OrderSplit]:
    """Split checkout items into orders according to ``options``."""
    options = options or SplitOptions()

    if options.split_by_seller:
        splits = split_by_seller(items)
    else:
        splits = [OrderSplit(items=list(items))]

    if options.split_by_address:
        address_splits = []
        for split in splits:
            default_address = split.shipping_address or options.default_address
            for child in split_by_address(split.items, default_address):
                address_splits.append(_inherit(split, child))
        splits = address_splits

    for item_ids, address in options.custom_addresses:
        target = _first_split_holding(splits, item_ids)
        if target is not None:
            target.shipping_address = address

    if options.split_by_delivery_date:
        date_splits = []
        for split in splits:
            for child in split_by_delivery_date(split.items, today=split.delivery_date):
                date_splits.append(_inherit(split, child))
        splits = date_splits

    for item_ids, delivery_date in options.custom_delivery_dates:
        target = _first_split_holding(splits, item_ids)
        if target is not None:
            target.delivery_date = delivery_date

    for split in splits:
        split.subtotal = _round(sum(item.line_total for item in split.items))
        split.shipping = _round(options.shipping_per_split or 0.0)
        split.total = _round(split.subtotal + split.shipping)

    logger.debug("Order split computed", item_count=len(items), split_count=len(splits))
    return splits


def preview_order_splits(items: list[SplitItem], options: SplitOptions | None = None) -> dict:
    """Compute the splits for a checkout and summarise totals by seller, address and date."""
    splits = split_order(items, options)

    by_seller: dict[str, float] = {}
    by_address: dict[str, float] = {}
    by_date: dict[str, float] = {}

    for split in splits:
        if split.seller_id:
            by_seller[split.seller_id] = _round(by_seller.get(split.seller_id, 0.0) + split.total)
        if split.shipping_address:
            address_key = f"{split.shipping_address.city}, {split.shipping_address.state}"
            by_address[address_key] = _round(by_address.get(address_key, 0.0) + split.total)
        if split.delivery_date:
            date_key = split.delivery_date.isoformat()
            by_date[date_key] = _round(by_date.get(date_key, 0.0) + split.total)

    return {
        "splits": splits,
        "total_orders": len(splits),
        "total_amount": _round(sum(split.total for split in splits)),
        "summary": {
            "by_seller": by_seller,
            "by_address": by_address,
            "by_date": by_date,
        },
    }
