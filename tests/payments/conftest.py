import pytest
from protean.integrations.pytest import DomainFixture
from shared.db import drop_db, setup_db


@pytest.fixture(scope="session")
def payments_bed():
    from payments.domain import payments

    bed = DomainFixture(payments)
    bed.setup()
    setup_db(payments)
    yield bed
    drop_db(payments)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(payments_bed):
    """Run each test inside the domain context and start it from empty stores."""
    with payments_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()
