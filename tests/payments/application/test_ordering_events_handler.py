"""Application tests for OrderingPaymentPlanEventHandler — Payments reacts to Ordering events."""

import json
from datetime import UTC, datetime

from payments.plan.ordering_events import OrderingPaymentPlanEventHandler
from payments.plan.queries import get_plan
from shared.events.ordering import OrderPlaced


def _order_placed(order_id="ord-evt-001", grand_total=42.5):
    return OrderPlaced(
        order_id=order_id,
        checkout_id="chk-evt-001",
        customer_id="cust-evt-001",
        seller_id="seller-1",
        items=json.dumps([{"product_id": "prod-1", "quantity": 1, "unit_price": 37.5}]),
        subtotal=37.5,
        shipping_cost=5.0,
        grand_total=grand_total,
        currency="USD",
        placed_at=datetime.now(UTC),
    )


class TestOrderPlaced:
    def test_opens_plan_for_grand_total(self):
        OrderingPaymentPlanEventHandler().on_order_placed(_order_placed())

        plan = get_plan("ord-evt-001")
        assert plan.customer_id == "cust-evt-001"
        assert plan.total_amount == 42.5
        assert plan.status == "Open"

    def test_redelivery_is_idempotent(self):
        handler = OrderingPaymentPlanEventHandler()
        handler.on_order_placed(_order_placed())
        handler.on_order_placed(_order_placed(grand_total=99.0))

        assert get_plan("ord-evt-001").total_amount == 42.5

    def test_free_order_plan_is_settled(self):
        OrderingPaymentPlanEventHandler().on_order_placed(_order_placed(order_id="ord-evt-free", grand_total=0.0))

        plan = get_plan("ord-evt-free")
        assert plan.status == "Settled"
        assert plan.remaining_amount == 0.0
