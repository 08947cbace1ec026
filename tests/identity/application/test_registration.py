"""Application tests for registration via domain.process()."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from storefront.identity.registration import RegisterUser
from storefront.identity.user import User


class TestRegisterUserFlow:
    def test_register_user_happy_path(self):
        command = RegisterUser(name="Ayesha Khan", email="ayesha@example.com", password="secret123")
        user_id = current_domain.process(command, asynchronous=False)

        user = current_domain.repository_for(User).get(user_id)
        assert user.email == "ayesha@example.com"
        assert user.is_verified is False
        assert user.email_verification_token is not None

    def test_verification_email_is_sent(self, mailer):
        current_domain.process(
            RegisterUser(name="Ayesha Khan", email="ayesha@example.com", password="secret123"),
            asynchronous=False,
        )

        sent = mailer.sent_to("ayesha@example.com")
        assert len(sent) == 1
        assert "/verify-email/" in sent[0]["body"]

    def test_duplicate_email_is_rejected(self, make_user):
        make_user(email="ayesha@example.com")

        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                RegisterUser(name="Someone Else", email="AYESHA@example.com", password="another1"),
                asynchronous=False,
            )
        assert exc.value.messages["email"] == ["User already exists with this email"]

    def test_duplicate_email_wins_over_other_errors(self, make_user):
        make_user(email="ayesha@example.com")

        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                RegisterUser(name="X", email="ayesha@example.com", password="123"),
                asynchronous=False,
            )
        assert "email" in exc.value.messages

    def test_failed_mail_delivery_does_not_fail_registration(self, mailer):
        mailer.configure(should_succeed=False)

        user_id = current_domain.process(
            RegisterUser(name="Ayesha Khan", email="ayesha@example.com", password="secret123"),
            asynchronous=False,
        )

        assert current_domain.repository_for(User).get(user_id) is not None
