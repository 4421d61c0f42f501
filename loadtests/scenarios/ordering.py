"""Ordering domain load test scenarios.

Shoppers list products as sellers first, then cart them once the ordering
side has caught up with the catalogue. Product listings reach Ordering
asynchronously, so the first add-to-cart of a product is retried briefly.
"""

import random
import time

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    SELLERS,
    cancellation_reason,
    cart_item_data,
    checkout_data,
    customer_id,
    product_data,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState

LISTING_RETRIES = 5
LISTING_RETRY_DELAY = 0.5


class ShoppingJourney(SequentialTaskSet):
    """Common steps: list two products from different sellers, create a cart, fill it."""

    def on_start(self):
        self.state = ShopperState(customer_id=customer_id())

    def list_products(self):
        for seller_id in random.sample(SELLERS, 2):
            with self.client.post(
                "/products",
                json=product_data(seller_id=seller_id),
                catch_response=True,
                name="POST /products",
            ) as resp:
                if resp.status_code == 201:
                    self.state.product_ids.append(resp.json()["product_id"])
                else:
                    resp.failure(f"Create product failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()

    def create_cart(self):
        with self.client.post(
            "/carts",
            json={"customer_id": self.state.customer_id},
            catch_response=True,
            name="POST /carts",
        ) as resp:
            if resp.status_code == 201:
                self.state.cart_id = resp.json()["cart_id"]
            else:
                resp.failure(f"Create cart failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    def fill_cart(self):
        for product_id in self.state.product_ids:
            for attempt in range(LISTING_RETRIES):
                with self.client.post(
                    f"/carts/{self.state.cart_id}/items",
                    json=cart_item_data(product_id),
                    catch_response=True,
                    name="POST /carts/{id}/items",
                ) as resp:
                    if resp.status_code == 200:
                        break
                    if attempt < LISTING_RETRIES - 1 and "Product not found" in resp.text:
                        resp.success()
                        time.sleep(LISTING_RETRY_DELAY)
                        continue
                    resp.failure(f"Add cart item failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()


class CartAbandonmentJourney(ShoppingJourney):
    """List Products -> Create Cart -> Add Items -> Update Quantity -> View -> Abandon.

    Generates events: CartCreated, CartItemAdded (x2), CartQuantityUpdated, CartAbandoned.
    """

    @task
    def prepare(self):
        self.list_products()
        self.create_cart()
        self.fill_cart()

    @task
    def update_quantity(self):
        with self.client.put(
            f"/carts/{self.state.cart_id}/items/{self.state.product_ids[0]}",
            json={"quantity": 1},
            catch_response=True,
            name="PUT /carts/{id}/items/{product_id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update quantity failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def view_cart(self):
        with self.client.get(
            f"/carts/{self.state.cart_id}",
            catch_response=True,
            name="GET /carts/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get cart failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def abandon(self):
        with self.client.put(
            f"/carts/{self.state.cart_id}/abandon",
            catch_response=True,
            name="PUT /carts/{id}/abandon",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Abandon cart failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class SplitCheckoutJourney(ShoppingJourney):
    """List Products -> Fill Cart -> Preview Split -> Checkout -> List Orders -> (maybe) Cancel.

    Two sellers in the cart produce two orders sharing one checkout.
    """

    @task
    def prepare(self):
        self.list_products()
        self.create_cart()
        self.fill_cart()

    @task
    def preview(self):
        with self.client.post(
            f"/carts/{self.state.cart_id}/split-preview",
            json=checkout_data(),
            catch_response=True,
            name="POST /carts/{id}/split-preview",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Split preview failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def checkout(self):
        with self.client.post(
            f"/carts/{self.state.cart_id}/checkout",
            json=checkout_data(),
            catch_response=True,
            name="POST /carts/{id}/checkout",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.checkout_id = body["checkout_id"]
                self.state.order_ids = body["order_ids"]
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def list_orders(self):
        with self.client.get(
            "/orders",
            params={"customer_id": self.state.customer_id},
            catch_response=True,
            name="GET /orders",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"List orders failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def maybe_cancel(self):
        if random.random() > 0.2:
            return
        with self.client.put(
            f"/orders/{self.state.order_ids[-1]}/cancel",
            json={"reason": cancellation_reason()},
            catch_response=True,
            name="PUT /orders/{id}/cancel",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Cancel order failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class AbandonmentAnalyticsJourney(SequentialTaskSet):
    """Back-office: sweep idle carts, then read the abandonment report."""

    @task
    def detect(self):
        with self.client.post(
            "/maintenance/detect-abandoned-carts",
            json={},
            catch_response=True,
            name="POST /maintenance/detect-abandoned-carts",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Detection failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def report(self):
        with self.client.get(
            "/analytics/cart-abandonment",
            params={"seller_id": random.choice(SELLERS)},
            catch_response=True,
            name="GET /analytics/cart-abandonment",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Abandonment report failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class OrderingUser(HttpUser):
    """Shoppers only: abandoned carts and split checkouts."""

    wait_time = between(1, 3)
    tasks = {CartAbandonmentJourney: 2, SplitCheckoutJourney: 3}
