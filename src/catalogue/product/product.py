"""Product aggregate root."""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String

from catalogue.domain import catalogue


class ProductStatus(Enum):
    """Enumeration of product sale statuses."""

    ACTIVE = "Active"
    DISCONTINUED = "Discontinued"


@catalogue.aggregate
class Product:
    """A product listed by a seller, with its selling price and available stock."""

    title: String(required=True, max_length=255)
    seller_id: Identifier()
    category_id: Identifier()
    price: Float(required=True, min_value=0.0)
    currency: String(max_length=3, default="USD")
    stock: Integer(default=0, min_value=0)
    status: String(choices=ProductStatus, default=ProductStatus.ACTIVE.value)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, title, price, seller_id=None, category_id=None, currency=None, stock=0):
        from catalogue.product.events import ProductAdded

        now = datetime.now(UTC)
        product = cls(
            title=title,
            seller_id=seller_id,
            category_id=category_id,
            price=price,
            currency=currency or "USD",
            stock=stock or 0,
            status=ProductStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=product.id,
                title=title,
                seller_id=seller_id,
                category_id=category_id,
                price=product.price,
                currency=product.currency,
                stock=product.stock,
                added_at=now,
            )
        )
        return product

    def change_price(self, new_price):
        from catalogue.product.events import ProductPriceChanged

        if new_price is None or new_price < 0:
            raise ValidationError({"price": ["Price cannot be negative"]})

        previous_price = self.price
        self.price = new_price
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductPriceChanged(
                product_id=self.id,
                previous_price=previous_price,
                new_price=new_price,
                currency=self.currency,
            )
        )

    def adjust_stock(self, delta, reason=None):
        from catalogue.product.events import ProductStockAdjusted

        new_stock = (self.stock or 0) + delta
        if new_stock < 0:
            raise ValidationError({"stock": [f"Cannot reduce stock below zero (current {self.stock}, change {delta})"]})

        self.stock = new_stock
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductStockAdjusted(
                product_id=self.id,
                delta=delta,
                new_stock=new_stock,
                reason=reason,
            )
        )

    def discontinue(self):
        from catalogue.product.events import ProductDiscontinued

        if self.status != ProductStatus.ACTIVE.value:
            raise ValidationError({"status": [f"Cannot discontinue product in {self.status} state"]})

        now = datetime.now(UTC)
        self.status = ProductStatus.DISCONTINUED.value
        self.updated_at = now

        self.raise_(
            ProductDiscontinued(
                product_id=self.id,
                discontinued_at=now,
            )
        )
