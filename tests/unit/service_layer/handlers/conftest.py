"""Fixtures for the handler tests."""

import pytest

from .fakes import bootstrap_test_bus


@pytest.fixture
def bus_params() -> dict:
    """Keyword arguments for `bootstrap_test_bus`; override per test class."""
    return {}


@pytest.fixture
def make_test_bus(bus_params):  # pylint: disable=redefined-outer-name
    """Return a function building a bus over a fresh fake unit of work."""
    return lambda: bootstrap_test_bus(**bus_params)
