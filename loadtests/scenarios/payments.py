"""Payments domain load test scenarios.

Installment journeys run against a fresh checkout. Plans are opened by
the Payments engine when it sees OrderPlaced; the journey also opens the
plan itself, which is a no-op once the engine has caught up.
"""

import random

from locust import HttpUser, between, task

from loadtests.data_generators import checkout_data, installment_amounts, partial_payment_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import PaymentPlanState
from loadtests.scenarios.ordering import ShoppingJourney


class InstallmentJourney(ShoppingJourney):
    """Checkout -> Open Plan -> Pay in 2-4 installments -> Check Status.

    The final completion settles the plan, which confirms the order.
    """

    def on_start(self):
        super().on_start()
        self.plan = PaymentPlanState(customer_id=self.state.customer_id)

    @task
    def checkout(self):
        self.list_products()
        self.create_cart()
        self.fill_cart()
        with self.client.post(
            f"/carts/{self.state.cart_id}/checkout",
            json=checkout_data(split_by_seller=False),
            catch_response=True,
            name="POST /carts/{id}/checkout",
        ) as resp:
            if resp.status_code == 201:
                self.plan.order_id = resp.json()["order_ids"][0]
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def open_plan(self):
        with self.client.get(
            f"/orders/{self.plan.order_id}",
            catch_response=True,
            name="GET /orders/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get order failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
            self.plan.total_amount = resp.json()["grand_total"]

        with self.client.post(
            "/payments/plans",
            json={
                "order_id": self.plan.order_id,
                "customer_id": self.plan.customer_id,
                "total_amount": self.plan.total_amount,
            },
            catch_response=True,
            name="POST /payments/plans",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Open plan failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def pay_installments(self):
        for amount in installment_amounts(self.plan.total_amount, random.randint(2, 4)):
            with self.client.post(
                f"/payments/orders/{self.plan.order_id}/partial-payments",
                json=partial_payment_data(amount),
                headers=self.plan.headers,
                catch_response=True,
                name="POST /payments/orders/{id}/partial-payments",
            ) as resp:
                if resp.status_code != 201:
                    resp.failure(f"Create installment failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()
                partial_payment_id = resp.json()["partial_payment_id"]
                self.plan.partial_payment_ids.append(partial_payment_id)

            with self.client.put(
                f"/payments/orders/{self.plan.order_id}/partial-payments/{partial_payment_id}/complete",
                headers=self.plan.headers,
                catch_response=True,
                name="PUT /payments/orders/{id}/partial-payments/{pp}/complete",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Complete installment failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def check_status(self):
        with self.client.get(
            f"/payments/orders/{self.plan.order_id}/partial-payments",
            headers=self.plan.headers,
            catch_response=True,
            name="GET /payments/orders/{id}/partial-payments",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Payment status failed: {resp.status_code} — {extract_error_detail(resp)}")
            elif resp.json()["status"] != "Settled":
                resp.failure(f"Plan not settled after full payment: {resp.json()['remaining_amount']} remaining")

    @task
    def done(self):
        self.interrupt()


class PaymentsUser(HttpUser):
    """Customers paying for orders in installments."""

    wait_time = between(1, 3)
    tasks = [InstallmentJourney]
