"""Payments bounded context — partial-payment plans.

An order can be paid in several installments. Each order gets a payment
plan that tracks the installments made against it, the balance still due,
and when the order is fully paid.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

payments = Domain(name="payments")
