import pytest
from protean.integrations.pytest import DomainFixture
from shared.db import drop_db, setup_db


@pytest.fixture(scope="session")
def catalogue_bed():
    from catalogue.domain import catalogue

    bed = DomainFixture(catalogue)
    bed.setup()
    setup_db(catalogue)
    yield bed
    drop_db(catalogue)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(catalogue_bed):
    """Run each test inside the domain context and start it from empty stores."""
    with catalogue_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()
