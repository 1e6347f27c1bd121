import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def pharmacy_bed():
    from pharmacy.domain import pharmacy

    bed = DomainFixture(pharmacy)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(pharmacy_bed):
    with pharmacy_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
