"""Product management — commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product


@catalogue.command(part_of="Product")
class CreateProduct:
    title: String(required=True, max_length=255)
    seller_id: Identifier()
    category_id: Identifier()
    price: Float(required=True, min_value=0.0)
    currency: String(max_length=3, default="USD")
    stock: Integer(default=0, min_value=0)


@catalogue.command(part_of="Product")
class ChangeProductPrice:
    product_id: Identifier(required=True)
    price: Float(required=True)


@catalogue.command(part_of="Product")
class AdjustProductStock:
    product_id: Identifier(required=True)
    delta: Integer(required=True)
    reason: String(max_length=255)


@catalogue.command(part_of="Product")
class DiscontinueProduct:
    product_id: Identifier(required=True)


@catalogue.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            title=command.title,
            price=command.price,
            seller_id=command.seller_id,
            category_id=command.category_id,
            currency=command.currency,
            stock=command.stock,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(ChangeProductPrice)
    def change_price(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.change_price(command.price)
        repo.add(product)

    @handle(AdjustProductStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.adjust_stock(command.delta, reason=command.reason)
        repo.add(product)

    @handle(DiscontinueProduct)
    def discontinue_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.discontinue()
        repo.add(product)
