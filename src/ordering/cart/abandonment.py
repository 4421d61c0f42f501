"""Cart abandonment detection — command and handler for flagging idle carts.

Designed to be triggered periodically by an external scheduler (cron, K8s
CronJob) via the maintenance API endpoint. Queries the CartView projection
for active carts idle beyond the threshold and dispatches AbandonCart
commands for each.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean import handle
from protean.exceptions import InvalidOperationError, ValidationError
from protean.fields import DateTime, Integer
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import custom_setting, ordering
from ordering.projections.cart_view import CartView
from ordering.utils.time import as_utc

logger = structlog.get_logger(__name__)


@ordering.command(part_of="ShoppingCart")
class DetectAbandonedCarts:
    """Flag active carts idle beyond the specified threshold."""

    idle_threshold_hours = Integer(min_value=1)  # Defaults to custom.abandoned_cart_idle_hours
    as_of = DateTime()  # Optional: defaults to now


@ordering.command_handler(part_of=ShoppingCart)
class DetectAbandonedCartsHandler:
    @handle(DetectAbandonedCarts)
    def detect_abandoned_carts(self, command):
        as_of = as_utc(command.as_of) if command.as_of else datetime.now(UTC)
        threshold_hours = command.idle_threshold_hours or custom_setting("abandoned_cart_idle_hours", 24)
        cutoff = as_of - timedelta(hours=threshold_hours)

        logger.info(
            "Checking for abandoned carts",
            cutoff=cutoff.isoformat(),
            threshold_hours=threshold_hours,
        )

        active_carts = current_domain.repository_for(CartView)._dao.query.filter(status="Active").all().items

        abandoned = [
            cart
            for cart in active_carts
            if cart.updated_at and as_utc(cart.updated_at) <= cutoff and (cart.item_count or 0) > 0
        ]

        if not abandoned:
            logger.info("No abandoned carts found")
            return 0

        from ordering.cart.management import AbandonCart

        abandoned_count = 0
        for cart in abandoned:
            try:
                current_domain.process(
                    AbandonCart(cart_id=str(cart.cart_id)),
                    asynchronous=False,
                )
                abandoned_count += 1
                logger.info(
                    "Marked cart as abandoned",
                    cart_id=str(cart.cart_id),
                    customer_id=str(cart.customer_id) if cart.customer_id else None,
                    item_count=cart.item_count,
                    last_updated=str(cart.updated_at),
                )
            except (ValidationError, InvalidOperationError) as exc:
                logger.warning(
                    "Failed to abandon cart",
                    cart_id=str(cart.cart_id),
                    error=str(exc),
                )

        logger.info("Cart abandonment detection complete", abandoned_count=abandoned_count)
        return abandoned_count
