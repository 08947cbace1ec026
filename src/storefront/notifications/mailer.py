"""Outbound account and order emails.

Bodies are plain text. A failed delivery is logged and reported back to
the caller as False; it never fails the request that triggered it.
"""

from storefront.config import get_settings
from storefront.notifications.channel import get_mailer
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _deliver(to: str, subject: str, body: str, kind: str) -> bool:
    try:
        result = get_mailer().send(to=to, subject=subject, body=body)
    except Exception as exc:
        logger.error("Email delivery raised", kind=kind, to=to, error=str(exc))
        return False

    if result.get("status") != "sent":
        logger.error("Email delivery failed", kind=kind, to=to, error=result.get("error"))
        return False

    logger.info("Email sent", kind=kind, to=to, message_id=result.get("message_id"))
    return True


def verification_url(raw_token: str) -> str:
    return f"{get_settings().frontend_url}/verify-email/{raw_token}"


def reset_url(raw_token: str) -> str:
    return f"{get_settings().frontend_url}/reset-password/{raw_token}"


def send_verification_email(name: str, email: str, raw_token: str) -> bool:
    body = (
        f"Hi {name},\n\n"
        "Please confirm your email address by opening the link below. "
        "The link is valid for 24 hours.\n\n"
        f"{verification_url(raw_token)}\n"
    )
    return _deliver(email, "Verify your email address", body, kind="verification")


def send_password_reset_email(name: str, email: str, raw_token: str) -> bool:
    body = (
        f"Hi {name},\n\n"
        "A password reset was requested for your account. The link below "
        "expires in 10 minutes. Ignore this message if you did not ask for it.\n\n"
        f"{reset_url(raw_token)}\n"
    )
    return _deliver(email, "Password reset", body, kind="password_reset")


def send_order_confirmation(name: str, email: str, order) -> bool:
    lines = [f"  {item.quantity} x {item.name} @ {item.price:.2f}" for item in order.order_items]
    body = "\n".join(
        [
            f"Hi {name},",
            "",
            f"Thank you for your order {order.id}.",
            "",
            *lines,
            "",
            f"Items:    {order.items_price:.2f}",
            f"Shipping: {order.shipping_price:.2f}",
            f"Tax:      {order.tax_price:.2f}",
            f"Total:    {order.total_price:.2f}",
            f"Payment:  {order.payment_method}",
            "",
            f"Track your order at {get_settings().frontend_url}/order/{order.id}",
        ]
    )
    return _deliver(email, f"Order confirmation {order.id}", body, kind="order_confirmation")
