"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
State tracks entity IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ProductState:
    """Tracks state for a single simulated product lifecycle."""

    product_id: str | None = None
    current_status: str = "Active"


@dataclass
class ShopperState:
    """Tracks a customer from browsing through checkout."""

    customer_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    cart_id: str | None = None
    checkout_id: str | None = None
    order_ids: list[str] = field(default_factory=list)


@dataclass
class PaymentPlanState:
    """Tracks installments paid against one order."""

    order_id: str | None = None
    customer_id: str | None = None
    total_amount: float = 0.0
    partial_payment_ids: list[str] = field(default_factory=list)

    @property
    def headers(self) -> dict:
        return {"X-Customer-Id": self.customer_id}
