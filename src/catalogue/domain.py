"""Catalogue bounded context — products offered by marketplace sellers.

Owns product pricing, stock levels and sale status. Other domains consume
its events instead of querying it directly.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
catalogue = Domain(name="catalogue")
