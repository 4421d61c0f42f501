"""Tests for the cart abandonment aggregation."""

from datetime import UTC, datetime, timedelta

from ordering.cart.analytics import (
    AbandonmentFilters,
    CartLine,
    OrderRecord,
    ProductInfo,
    calculate_cart_abandonment_metrics,
)

NOW = datetime(2024, 6, 10, 12, 0, tzinfo=UTC)

LISTINGS = {
    "p1": ProductInfo(product_id="p1", title="Kettle", price=30.0, seller_id="s1", category_id="kitchen"),
    "p2": ProductInfo(product_id="p2", title="Toaster", price=20.0, seller_id="s2", category_id="kitchen"),
    "p3": ProductInfo(product_id="p3", title="Lamp", price=15.0, seller_id="s2", category_id="lighting"),
}


def _line(customer_id, product_id, quantity=1, hours_ago=1):
    return CartLine(
        customer_id=customer_id,
        product_id=product_id,
        quantity=quantity,
        added_at=NOW - timedelta(hours=hours_ago),
    )


def _order(customer_id, *product_ids, status="Pending", hours_ago=1):
    return OrderRecord(
        customer_id=customer_id,
        product_ids=list(product_ids),
        status=status,
        created_at=NOW - timedelta(hours=hours_ago),
    )


class TestAbandonmentClassification:
    def test_customer_who_bought_any_line_is_not_abandoned(self):
        lines = [_line("c1", "p1"), _line("c1", "p2"), _line("c2", "p3", quantity=2)]
        orders = [_order("c1", "p2")]

        metrics = calculate_cart_abandonment_metrics(lines, orders, LISTINGS, now=NOW)

        assert metrics.total_abandoned_carts == 1
        assert metrics.abandoned_cart_value == 30.0
        assert metrics.abandonment_rate == 50.0
        assert metrics.average_abandoned_cart_value == 30.0

    def test_cancelled_and_failed_orders_do_not_count_as_purchases(self):
        lines = [_line("c1", "p1"), _line("c2", "p2")]
        orders = [_order("c1", "p1", status="Cancelled"), _order("c2", "p2", status="Payment_Failed")]

        metrics = calculate_cart_abandonment_metrics(lines, orders, LISTINGS, now=NOW)

        assert metrics.total_abandoned_carts == 2

    def test_purchase_by_another_customer_does_not_count(self):
        metrics = calculate_cart_abandonment_metrics(
            [_line("c1", "p1")],
            [_order("c2", "p1")],
            LISTINGS,
            now=NOW,
        )
        assert metrics.total_abandoned_carts == 1

    def test_no_cart_lines(self):
        metrics = calculate_cart_abandonment_metrics([], [], LISTINGS, now=NOW)
        assert metrics.total_abandoned_carts == 0
        assert metrics.abandonment_rate == 0.0
        assert metrics.average_abandoned_cart_value == 0.0
        assert metrics.top_abandoned_products == []

    def test_unknown_product_valued_at_zero_and_named_by_id(self):
        metrics = calculate_cart_abandonment_metrics([_line("c1", "ghost", quantity=3)], [], LISTINGS, now=NOW)

        assert metrics.abandoned_cart_value == 0.0
        assert metrics.top_abandoned_products[0].product_name == "ghost"


class TestWindow:
    def test_lines_and_orders_outside_default_window_are_ignored(self):
        lines = [_line("c1", "p1", hours_ago=24 * 8), _line("c2", "p2")]
        orders = [_order("c2", "p2", hours_ago=24 * 9)]

        metrics = calculate_cart_abandonment_metrics(lines, orders, LISTINGS, now=NOW)

        # c1's line is too old; c2's order is too old to reconcile the line
        assert metrics.total_abandoned_carts == 1
        assert metrics.abandonment_rate == 100.0

    def test_explicit_window(self):
        lines = [_line("c1", "p1", hours_ago=24 * 20)]
        filters = AbandonmentFilters(start_date=NOW - timedelta(days=30), end_date=NOW - timedelta(days=10))

        metrics = calculate_cart_abandonment_metrics(lines, [], LISTINGS, filters=filters, now=NOW)

        assert metrics.total_abandoned_carts == 1
        assert metrics.abandonment_by_timeframe.last_7_days == 0


class TestFilters:
    def test_seller_filter_keeps_carts_with_matching_product(self):
        lines = [_line("c1", "p1"), _line("c2", "p2"), _line("c3", "p3")]
        metrics = calculate_cart_abandonment_metrics(
            lines, [], LISTINGS, filters=AbandonmentFilters(seller_id="s2"), now=NOW
        )

        assert metrics.total_abandoned_carts == 2
        assert round(metrics.abandonment_rate, 2) == 66.67

    def test_seller_and_category_must_both_match(self):
        lines = [_line("c1", "p2"), _line("c2", "p3")]
        metrics = calculate_cart_abandonment_metrics(
            lines,
            [],
            LISTINGS,
            filters=AbandonmentFilters(seller_id="s2", category_id="lighting"),
            now=NOW,
        )
        assert metrics.total_abandoned_carts == 1


class TestBreakdowns:
    def test_timeframe_buckets_use_oldest_line(self):
        lines = [
            _line("c1", "p1", hours_ago=2),
            _line("c2", "p2", hours_ago=30),
            _line("c2", "p3", hours_ago=3),
            _line("c3", "p3", hours_ago=100),
        ]
        metrics = calculate_cart_abandonment_metrics(lines, [], LISTINGS, now=NOW)

        assert metrics.abandonment_by_timeframe.last_24_hours == 1
        assert metrics.abandonment_by_timeframe.last_48_hours == 2
        assert metrics.abandonment_by_timeframe.last_7_days == 3

    def test_top_abandoned_products_sorted_and_limited(self):
        lines = [
            _line("c1", "p3"),
            _line("c2", "p3", quantity=2),
            _line("c2", "p1"),
            _line("c3", "p2"),
            _line("c3", "p3"),
        ]
        metrics = calculate_cart_abandonment_metrics(lines, [], LISTINGS, now=NOW, top_n=2)

        top = metrics.top_abandoned_products
        assert len(top) == 2
        assert top[0].product_id == "p3"
        assert top[0].product_name == "Lamp"
        assert top[0].abandonment_count == 3
        assert top[0].total_value == 60.0

    def test_to_dict(self):
        metrics = calculate_cart_abandonment_metrics([_line("c1", "p1")], [], LISTINGS, now=NOW)
        data = metrics.to_dict()
        assert data["top_abandoned_products"][0]["product_id"] == "p1"
        assert data["abandonment_by_timeframe"]["last_24_hours"] == 1
