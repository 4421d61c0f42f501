import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api import analytics_router, cart_router, maintenance_router, order_router
from ordering.projections.product_listing import ProductListing
from protean.integrations.fastapi import register_exception_handlers
from protean.utils.globals import current_domain


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(analytics_router)
    app.include_router(maintenance_router)
    register_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def listed_products():
    """Two sellers, three products, all in stock."""
    repo = current_domain.repository_for(ProductListing)
    for product_id, title, seller_id, category_id, price in [
        ("prod-mug", "Mug", "seller-1", "kitchen", 8.0),
        ("prod-pan", "Pan", "seller-1", "kitchen", 30.0),
        ("prod-book", "Book", "seller-2", "books", 12.5),
    ]:
        repo.add(
            ProductListing(
                product_id=product_id,
                title=title,
                seller_id=seller_id,
                category_id=category_id,
                price=price,
                stock=10,
                status="Active",
            )
        )
    return ["prod-mug", "prod-pan", "prod-book"]


@pytest.fixture()
def cart_id(client):
    response = client.post("/carts", json={"customer_id": "cust-api-001"})
    assert response.status_code == 201
    return response.json()["cart_id"]
