"""Fixtures for the id generator contract.

Every generator the service can be wired with is run through the same
checks; the ULID generator additionally promises ordered output.
"""

import pytest

from shortener.adapters.id_generators import (
    SimpleIdGenerator,
    TokenSlugGenerator,
    ULIDGenerator,
)

GENERATORS = {
    "ulid": ULIDGenerator,
    "token": TokenSlugGenerator,
    "simple": SimpleIdGenerator,
}


@pytest.fixture(params=sorted(GENERATORS))
def id_generator(request: pytest.FixtureRequest):
    """A new instance of each generator in turn."""
    return GENERATORS[request.param]()


@pytest.fixture
def ulid_generator() -> ULIDGenerator:
    """The generator used for event ids."""
    return ULIDGenerator()
