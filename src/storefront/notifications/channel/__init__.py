"""Mailer registry.

Hands out a single email adapter per process. The fake adapter is the
default; `EMAIL_BACKEND=smtp` switches to SMTP delivery.
"""

from storefront.config import get_settings
from storefront.notifications.channel.email_port import EmailPort

_mailer: EmailPort | None = None


def get_mailer() -> EmailPort:
    global _mailer
    if _mailer is None:
        settings = get_settings()
        if settings.email_backend == "smtp":
            from storefront.notifications.channel.smtp_email import SmtpEmailAdapter

            _mailer = SmtpEmailAdapter(
                host=settings.email_host,
                port=settings.email_port,
                username=settings.email_user,
                password=settings.email_password,
                sender=settings.email_from,
            )
        elif settings.email_backend == "fake":
            from storefront.notifications.channel.fake_email import FakeEmailAdapter

            _mailer = FakeEmailAdapter()
        else:
            raise ValueError(f"Unknown email backend: {settings.email_backend}")
    return _mailer


def set_mailer(mailer: EmailPort) -> None:
    global _mailer
    _mailer = mailer


def reset_mailer() -> None:
    global _mailer
    _mailer = None
