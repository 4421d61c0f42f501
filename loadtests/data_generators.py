"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
and match the exact field names expected by the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

SELLERS = [f"seller-{n:03d}" for n in range(1, 6)]
CATEGORIES = ["cat-apparel", "cat-books", "cat-kitchen", "cat-audio"]
PAYMENT_METHODS = ["credit_card", "debit_card", "bank_transfer", "wallet"]

# ---------- Catalogue Domain ----------


def product_data(seller_id: str | None = None) -> dict:
    """Generate a CreateProductRequest payload with enough stock for several carts."""
    return {
        "title": fake.catch_phrase()[:255],
        "seller_id": seller_id or random.choice(SELLERS),
        "category_id": random.choice(CATEGORIES),
        "price": round(random.uniform(4.99, 149.99), 2),
        "stock": random.randint(50, 500),
    }


def stock_adjustment_data() -> dict:
    return {"delta": random.randint(5, 50), "reason": "Restock from supplier"}


# ---------- Ordering Domain ----------


def customer_id() -> str:
    return f"cust-lt-{uuid.uuid4().hex[:8]}"


def cart_item_data(product_id: str) -> dict:
    return {"product_id": product_id, "quantity": random.randint(1, 3)}


def address_data() -> dict:
    """Generate an AddressSchema payload."""
    return {
        "street": fake.street_address()[:255],
        "city": fake.city()[:100],
        "state": fake.state_abbr(),
        "postal_code": fake.postcode()[:20],
        "country": "US",
    }


def checkout_data(**overrides) -> dict:
    """Generate a CheckoutRequest payload; splits by seller unless overridden."""
    payload = {
        "shipping_address": address_data(),
        "split_by_seller": True,
        "split_by_address": False,
        "split_by_delivery_date": False,
        "shipping_per_split": round(random.choice([0.0, 4.99, 7.5]), 2),
    }
    payload.update(overrides)
    return payload


def cancellation_reason() -> str:
    return random.choice(["Ordered by mistake", "Found a better price", "Delivery too slow"])


# ---------- Payments Domain ----------


def installment_amounts(total: float, parts: int) -> list[float]:
    """Split ``total`` into ``parts`` installments that add up exactly."""
    base = round(total / parts, 2)
    amounts = [base] * (parts - 1)
    amounts.append(round(total - base * (parts - 1), 2))
    return [a for a in amounts if a > 0]


def partial_payment_data(amount: float) -> dict:
    return {
        "amount": amount,
        "payment_method": random.choice(PAYMENT_METHODS),
        "transaction_id": f"txn-{uuid.uuid4().hex[:12]}",
    }
