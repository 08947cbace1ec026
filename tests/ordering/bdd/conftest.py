"""Shared BDD fixtures for ordering."""

import pytest


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def products():
    """Products created by the scenario, keyed by name."""
    return {}


@pytest.fixture()
def placed():
    """Ids of orders placed by the scenario, in placement order."""
    return []
