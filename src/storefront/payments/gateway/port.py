"""Card gateway port.

Amounts cross this boundary in minor currency units (paisa, cents).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class PaymentGatewayError(Exception):
    """The gateway refused or failed to create the payment intent."""


@dataclass(frozen=True)
class PaymentIntent:
    intent_id: str
    client_secret: str
    amount: int
    currency: str
    status: str


def to_minor_units(amount: float) -> int:
    return int(round(amount * 100))


class CardGateway(ABC):
    @abstractmethod
    def create_payment_intent(self, amount: int, currency: str, metadata: dict | None = None) -> PaymentIntent:
        """Open a payment intent for `amount` minor units and return its client secret."""
        ...
