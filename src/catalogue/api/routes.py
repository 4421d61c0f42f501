"""FastAPI endpoints for the Catalogue domain."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from catalogue.api.schemas import (
    AdjustStockRequest,
    ChangePriceRequest,
    CreateProductRequest,
    ProductIdResponse,
    ProductResponse,
    StatusResponse,
)
from catalogue.product.management import (
    AdjustProductStock,
    ChangeProductPrice,
    CreateProduct,
    DiscontinueProduct,
)
from catalogue.product.product import Product

product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(
        title=body.title,
        seller_id=body.seller_id,
        category_id=body.category_id,
        price=body.price,
        currency=body.currency,
        stock=body.stock,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).get(product_id)
    return ProductResponse(
        product_id=str(product.id),
        title=product.title,
        seller_id=str(product.seller_id) if product.seller_id else None,
        category_id=str(product.category_id) if product.category_id else None,
        price=product.price,
        currency=product.currency,
        stock=product.stock or 0,
        status=product.status,
    )


@product_router.put("/{product_id}/price", response_model=StatusResponse)
async def change_product_price(product_id: str, body: ChangePriceRequest) -> StatusResponse:
    command = ChangeProductPrice(product_id=product_id, price=body.price)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/stock", response_model=StatusResponse)
async def adjust_product_stock(product_id: str, body: AdjustStockRequest) -> StatusResponse:
    command = AdjustProductStock(product_id=product_id, delta=body.delta, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/discontinue", response_model=StatusResponse)
async def discontinue_product(product_id: str) -> StatusResponse:
    command = DiscontinueProduct(product_id=product_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
