"""Protean Engine runner for the marketplace domains.

Starts Engine workers that process events asynchronously:
- OutboxProcessor: polls outbox table, publishes events to Redis Streams
- StreamSubscriptions: reads Redis Streams, invokes projectors and event handlers

Cross-domain flows depend on every engine running: Ordering consumes
Catalogue and Payments events, Payments consumes Ordering events.

Usage:
    python src/server.py                     # Run all domain engines
    python src/server.py --domain ordering   # Run only the ordering engine
"""

import argparse
import asyncio

from protean.server.engine import Engine

DOMAIN_NAMES = ["catalogue", "ordering", "payments"]


def _get_domain(name):
    """Import and initialize a domain by name."""
    if name == "catalogue":
        from catalogue.domain import catalogue

        catalogue.init()
        return catalogue
    elif name == "ordering":
        from ordering.domain import ordering

        ordering.init()
        return ordering
    elif name == "payments":
        from payments.domain import payments

        payments.init()
        return payments
    else:
        raise ValueError(f"Unknown domain: {name}")


async def run(domain_names):
    engines = []
    for name in domain_names:
        domain = _get_domain(name)
        engines.append(Engine(domain))

    await asyncio.gather(*(engine.run() for engine in engines))


def main():
    parser = argparse.ArgumentParser(description="Marketplace Engine runner")
    parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        help="Run a single domain engine (default: run all)",
    )
    args = parser.parse_args()

    domain_names = [args.domain] if args.domain else DOMAIN_NAMES

    asyncio.run(run(domain_names))


if __name__ == "__main__":
    main()
