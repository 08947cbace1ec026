"""Card gateway registry.

`PAYMENT_GATEWAY=stripe` selects the Stripe adapter; anything else falls
back to the fake gateway used in development and tests.
"""

from storefront.config import get_settings
from storefront.payments.gateway.port import CardGateway

_current_gateway: CardGateway | None = None


def get_gateway() -> CardGateway:
    global _current_gateway
    if _current_gateway is None:
        settings = get_settings()
        if settings.payment_gateway == "stripe":
            from storefront.payments.gateway.stripe_adapter import StripeGateway

            _current_gateway = StripeGateway(api_key=settings.stripe_secret_key)
        else:
            from storefront.payments.gateway.fake_adapter import FakeGateway

            _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: CardGateway) -> None:
    """Override the active gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    global _current_gateway
    _current_gateway = None
