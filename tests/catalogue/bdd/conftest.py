"""Shared BDD fixtures for the catalogue."""

import pytest


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def shoppers():
    """Shoppers created by the scenario, keyed by name."""
    return {}
