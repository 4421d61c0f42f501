"""Catalogue domain load test scenarios.

A seller journey that lists a product, reprices it, restocks it and
finally withdraws it. Steps execute in order; each depends on the
previous step succeeding.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import product_data, stock_adjustment_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ProductState


class ProductLifecycleJourney(SequentialTaskSet):
    """Create Product -> Change Price -> Adjust Stock -> Discontinue.

    Generates 4 events: ProductAdded, ProductPriceChanged,
    ProductStockAdjusted, ProductDiscontinued.
    """

    def on_start(self):
        self.state = ProductState()

    @task
    def create_product(self):
        with self.client.post(
            "/products",
            json=product_data(),
            catch_response=True,
            name="POST /products",
        ) as resp:
            if resp.status_code == 201:
                self.state.product_id = resp.json()["product_id"]
            else:
                resp.failure(f"Create product failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def change_price(self):
        with self.client.put(
            f"/products/{self.state.product_id}/price",
            json={"price": round(random.uniform(4.99, 149.99), 2)},
            catch_response=True,
            name="PUT /products/{id}/price",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Change price failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def adjust_stock(self):
        with self.client.put(
            f"/products/{self.state.product_id}/stock",
            json=stock_adjustment_data(),
            catch_response=True,
            name="PUT /products/{id}/stock",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Adjust stock failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def read_product(self):
        with self.client.get(
            f"/products/{self.state.product_id}",
            catch_response=True,
            name="GET /products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get product failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def discontinue(self):
        with self.client.put(
            f"/products/{self.state.product_id}/discontinue",
            catch_response=True,
            name="PUT /products/{id}/discontinue",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = "Discontinued"
            else:
                resp.failure(f"Discontinue failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class CatalogueUser(HttpUser):
    """Seller activity on its own."""

    wait_time = between(1, 3)
    tasks = [ProductLifecycleJourney]
