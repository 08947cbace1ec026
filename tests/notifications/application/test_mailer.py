from types import SimpleNamespace

from storefront.config import get_settings
from storefront.notifications.channel import set_mailer
from storefront.notifications.mailer import (
    reset_url,
    send_order_confirmation,
    send_password_reset_email,
    send_verification_email,
    verification_url,
)


def _order():
    return SimpleNamespace(
        id="order-1",
        order_items=[SimpleNamespace(name="Clay Mask", quantity=2, price=1200.0)],
        items_price=2400.0,
        shipping_price=0.0,
        tax_price=120.0,
        total_price=2520.0,
        payment_method="COD",
    )


class TestLinks:
    def test_links_point_at_the_frontend(self):
        frontend = get_settings().frontend_url

        assert verification_url("abc") == f"{frontend}/verify-email/abc"
        assert reset_url("abc") == f"{frontend}/reset-password/abc"


class TestAccountEmails:
    def test_verification_email(self, mailer):
        assert send_verification_email("Ayesha", "ayesha@example.com", "raw-token") is True

        [message] = mailer.sent_to("ayesha@example.com")
        assert message["subject"] == "Verify your email address"
        assert verification_url("raw-token") in message["body"]
        assert "24 hours" in message["body"]

    def test_password_reset_email(self, mailer):
        assert send_password_reset_email("Ayesha", "ayesha@example.com", "raw-token") is True

        [message] = mailer.sent_to("ayesha@example.com")
        assert message["subject"] == "Password reset"
        assert reset_url("raw-token") in message["body"]
        assert "10 minutes" in message["body"]


class TestOrderConfirmation:
    def test_lists_lines_and_totals(self, mailer):
        assert send_order_confirmation("Ayesha", "ayesha@example.com", _order()) is True

        [message] = mailer.sent_to("ayesha@example.com")
        assert message["subject"] == "Order confirmation order-1"
        assert "2 x Clay Mask @ 1200.00" in message["body"]
        assert "Total:    2520.00" in message["body"]
        assert "/order/order-1" in message["body"]


class TestDeliveryFailures:
    def test_failed_delivery_returns_false(self, mailer):
        mailer.configure(should_succeed=False)

        assert send_verification_email("Ayesha", "ayesha@example.com", "raw-token") is False
        assert mailer.sent_emails == []

    def test_raising_adapter_returns_false(self):
        class BrokenMailer:
            def send(self, to, subject, body):
                raise ConnectionError("SMTP relay unreachable")

        set_mailer(BrokenMailer())

        assert send_password_reset_email("Ayesha", "ayesha@example.com", "raw-token") is False
