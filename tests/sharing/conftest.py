import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def sharing_bed():
    from sharing.domain import sharing

    bed = DomainFixture(sharing)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(sharing_bed):
    with sharing_bed.domain_context():
        yield
