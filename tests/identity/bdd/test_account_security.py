"""BDD tests for registration, login lockout and password reset."""

from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when

from storefront.identity.authentication import AuthenticateUser
from storefront.identity.recovery import ForgotPassword, ResetPassword
from storefront.identity.registration import RegisterUser

scenarios("features/account_security.feature")


@given("the shopper requested a password reset", target_fixture="reset_token")
def requested_reset(shopper):
    return current_domain.process(ForgotPassword(email=shopper.email), asynchronous=False)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('someone registers with email "{email}"'))
def someone_registers(email, error):
    try:
        current_domain.process(
            RegisterUser(name="Someone Else", email=email, password="another1"),
            asynchronous=False,
        )
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse("the shopper fails to log in {times:d} times"))
def fails_to_log_in(shopper, times):
    for _ in range(times):
        current_domain.process(AuthenticateUser(email=shopper.email, password="wrong-pass"), asynchronous=False)


@when(parsers.cfparse('the shopper logs in with password "{password}"'), target_fixture="login_result")
def logs_in(shopper, password):
    return current_domain.process(AuthenticateUser(email=shopper.email, password=password), asynchronous=False)


@when(parsers.cfparse('the shopper resets the password to "{password}"'))
def resets_password(reset_token, password, error):
    try:
        current_domain.process(ResetPassword(token=reset_token, password=password), asynchronous=False)
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the login outcome is "{outcome}"'))
def login_outcome_is(login_result, outcome):
    assert login_result["outcome"] == outcome
