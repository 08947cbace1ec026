"""Shared BDD fixtures and step definitions for identity."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from storefront.identity.authentication import AuthenticateUser, LoginOutcome
from storefront.identity.registration import RegisterUser
from storefront.identity.user import User


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a registered shopper "{email}" with password "{password}"'),
    target_fixture="shopper",
)
def registered_shopper(email, password):
    user_id = current_domain.process(
        RegisterUser(name="Test Shopper", email=email, password=password),
        asynchronous=False,
    )
    return current_domain.repository_for(User).get(user_id)


@given("a shopper with an empty cart", target_fixture="shopper")
def shopper_with_empty_cart():
    user = User.register(name="Cart Shopper", email="cart@example.com", password="secret123")
    user._events.clear()
    return user


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the action fails with a validation error on "{field}"'))
def action_fails_on_field(error, field):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)
    assert field in error["exc"].messages


@then(parsers.cfparse('the shopper can log in with password "{password}"'))
def shopper_can_log_in(shopper, password):
    result = current_domain.process(AuthenticateUser(email=shopper.email, password=password), asynchronous=False)
    assert result["outcome"] == LoginOutcome.SUCCESS.value
