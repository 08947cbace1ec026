"""Stripe card gateway adapter, built on the stripe-python SDK."""

import stripe

from storefront.payments.gateway.port import CardGateway, PaymentGatewayError, PaymentIntent
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class StripeGateway(CardGateway):
    def __init__(self, api_key: str | None) -> None:
        self.api_key = api_key

    def create_payment_intent(self, amount: int, currency: str, metadata: dict | None = None) -> PaymentIntent:
        if not self.api_key:
            raise PaymentGatewayError("Stripe is not configured")

        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.api_key,
                amount=amount,
                currency=currency,
                metadata=metadata or {},
            )
        except stripe.StripeError as exc:
            logger.error("Stripe rejected payment intent", amount=amount, currency=currency, error=str(exc))
            raise PaymentGatewayError(exc.user_message or str(exc)) from exc

        return PaymentIntent(
            intent_id=intent.id,
            client_secret=intent.client_secret,
            amount=intent.amount,
            currency=intent.currency,
            status=intent.status,
        )
