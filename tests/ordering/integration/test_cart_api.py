"""Integration tests for the cart endpoints."""

from ordering.cart.cart import ShoppingCart
from protean.utils.globals import current_domain


class TestCartLifecycleEndpoints:
    def test_new_cart_is_empty(self, client, cart_id):
        response = client.get(f"/carts/{cart_id}")
        assert response.status_code == 200
        data = response.json()
        assert data["customer_id"] == "cust-api-001"
        assert data["status"] == "Active"
        assert data["items"] == []
        assert data["total"] == 0.0

    def test_add_items_and_read_summary(self, client, cart_id, listed_products):
        client.post(f"/carts/{cart_id}/items", json={"product_id": "prod-mug", "quantity": 2})
        client.post(f"/carts/{cart_id}/items", json={"product_id": "prod-book"})

        data = client.get(f"/carts/{cart_id}").json()
        assert data["count"] == 2
        assert data["total"] == 28.5
        mug = next(line for line in data["items"] if line["product_id"] == "prod-mug")
        assert mug["title"] == "Mug"
        assert mug["line_total"] == 16.0
        assert mug["available"] is True

    def test_adding_beyond_stock_returns_400(self, client, cart_id, listed_products):
        response = client.post(f"/carts/{cart_id}/items", json={"product_id": "prod-mug", "quantity": 11})
        assert response.status_code == 400

    def test_unknown_product_returns_400(self, client, cart_id):
        response = client.post(f"/carts/{cart_id}/items", json={"product_id": "prod-ghost"})
        assert response.status_code == 400

    def test_zero_quantity_is_rejected_by_schema(self, client, cart_id, listed_products):
        response = client.post(f"/carts/{cart_id}/items", json={"product_id": "prod-mug", "quantity": 0})
        assert response.status_code == 422

    def test_update_quantity(self, client, cart_id, listed_products):
        client.post(f"/carts/{cart_id}/items", json={"product_id": "prod-mug"})
        response = client.put(f"/carts/{cart_id}/items/prod-mug", json={"quantity": 4})
        assert response.status_code == 200

        cart = current_domain.repository_for(ShoppingCart).get(cart_id)
        assert cart.items[0].quantity == 4

    def test_update_to_zero_removes_line(self, client, cart_id, listed_products):
        client.post(f"/carts/{cart_id}/items", json={"product_id": "prod-mug"})
        client.put(f"/carts/{cart_id}/items/prod-mug", json={"quantity": 0})
        assert client.get(f"/carts/{cart_id}").json()["items"] == []

    def test_remove_and_clear(self, client, cart_id, listed_products):
        client.post(f"/carts/{cart_id}/items", json={"product_id": "prod-mug"})
        client.post(f"/carts/{cart_id}/items", json={"product_id": "prod-pan"})

        assert client.delete(f"/carts/{cart_id}/items/prod-mug").status_code == 200
        assert [line["product_id"] for line in client.get(f"/carts/{cart_id}").json()["items"]] == ["prod-pan"]

        assert client.delete(f"/carts/{cart_id}/items").status_code == 200
        assert client.get(f"/carts/{cart_id}").json()["items"] == []

    def test_abandon(self, client, cart_id, listed_products):
        client.post(f"/carts/{cart_id}/items", json={"product_id": "prod-mug"})
        assert client.put(f"/carts/{cart_id}/abandon").status_code == 200
        assert client.get(f"/carts/{cart_id}").json()["status"] == "Abandoned"

        response = client.post(f"/carts/{cart_id}/items", json={"product_id": "prod-pan"})
        assert response.status_code == 400

    def test_unknown_cart_returns_404(self, client):
        assert client.get("/carts/does-not-exist").status_code == 404


class TestDetectAbandonedCartsEndpoint:
    def test_idle_carts_are_abandoned(self, client, cart_id, listed_products):
        client.post(f"/carts/{cart_id}/items", json={"product_id": "prod-mug"})

        response = client.post(
            "/maintenance/detect-abandoned-carts",
            json={"idle_threshold_hours": 1, "as_of": "2099-01-01T00:00:00+00:00"},
        )
        assert response.status_code == 200
        assert response.json()["abandoned_count"] == 1
        assert client.get(f"/carts/{cart_id}").json()["status"] == "Abandoned"

    def test_threshold_below_one_is_rejected(self, client):
        response = client.post("/maintenance/detect-abandoned-carts", json={"idle_threshold_hours": 0})
        assert response.status_code == 422
