"""Shared BDD fixtures for the cart."""

import pytest


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def products():
    """Products created by the scenario, keyed by name."""
    return {}
