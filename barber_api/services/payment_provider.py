"""Payment provider abstraction with Stripe and in-memory adapters.

The Stripe adapter talks to the real API through the official library.
The fake adapter keeps intents in memory and is meant for local
development and tests, where no Stripe credentials exist.
"""
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

import stripe

from barber_api.api.middleware.error_handler import PaymentProviderException
from barber_api.lib.logging import get_logger
from barber_api.lib.settings import settings


logger = get_logger(__name__)

# Intent states after which a fresh intent must be created
TERMINAL_INTENT_STATUSES = frozenset({"succeeded", "canceled"})


@dataclass
class PaymentIntent:
    """Provider-neutral view of a payment intent."""
    id: str
    client_secret: Optional[str]
    status: str
    amount: int
    currency: str

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_INTENT_STATUSES


class PaymentProvider(ABC):
    """Abstract base class for payment intent providers."""

    @abstractmethod
    def create_intent(self, amount_cents: int, currency: str, metadata: Dict[str, str]) -> PaymentIntent:
        """Create a payment intent for a fixed amount.

        Raises:
            PaymentProviderException: If the provider call fails
        """

    @abstractmethod
    def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        """Fetch the current state of an existing intent.

        Raises:
            PaymentProviderException: If the provider call fails
        """

    @abstractmethod
    def cancel_intent(self, intent_id: str) -> PaymentIntent:
        """Cancel an intent that will never be confirmed.

        Raises:
            PaymentProviderException: If the provider call fails
        """


class StripePaymentProvider(PaymentProvider):
    """Stripe PaymentIntents adapter.

    Requires STRIPE_SECRET_KEY.
    """

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key or settings.stripe_secret_key
        if not self.api_key:
            raise ValueError(
                "Stripe secret key not configured. "
                "Set STRIPE_SECRET_KEY environment variable."
            )

    @staticmethod
    def _to_intent(obj) -> PaymentIntent:
        return PaymentIntent(
            id=obj.id,
            client_secret=obj.client_secret,
            status=obj.status,
            amount=obj.amount,
            currency=obj.currency,
        )

    def create_intent(self, amount_cents: int, currency: str, metadata: Dict[str, str]) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_cents,
                currency=currency,
                metadata=metadata,
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error("Stripe error while creating payment intent", exc_info=True)
            raise PaymentProviderException(
                "Failed to create payment intent",
                details={"provider": "stripe", "reason": str(e.user_message or e)},
            ) from e
        return self._to_intent(intent)

    def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id, api_key=self.api_key)
        except stripe.StripeError as e:
            logger.error("Stripe error while retrieving payment intent", exc_info=True)
            raise PaymentProviderException(
                "Failed to retrieve payment intent",
                details={"provider": "stripe", "payment_intent_id": intent_id},
            ) from e
        return self._to_intent(intent)

    def cancel_intent(self, intent_id: str) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.cancel(intent_id, api_key=self.api_key)
        except stripe.StripeError as e:
            logger.error("Stripe error while canceling payment intent", exc_info=True)
            raise PaymentProviderException(
                "Failed to cancel payment intent",
                details={"provider": "stripe", "payment_intent_id": intent_id},
            ) from e
        return self._to_intent(intent)


class FakePaymentProvider(PaymentProvider):
    """In-memory provider for development and tests.

    Intents start in `requires_payment_method`; `set_status` lets tests
    simulate a confirmed or canceled payment.
    """

    def __init__(self):
        self.intents: Dict[str, PaymentIntent] = {}

    def create_intent(self, amount_cents: int, currency: str, metadata: Dict[str, str]) -> PaymentIntent:
        intent_id = f"pi_fake_{secrets.token_hex(8)}"
        intent = PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_{secrets.token_hex(8)}",
            status="requires_payment_method",
            amount=amount_cents,
            currency=currency,
        )
        self.intents[intent_id] = intent
        logger.info("Fake payment intent created", extra={"payment_intent_id": intent_id, "amount": amount_cents})
        return intent

    def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        intent = self.intents.get(intent_id)
        if intent is None:
            raise PaymentProviderException(
                "Failed to retrieve payment intent",
                details={"provider": "fake", "payment_intent_id": intent_id},
            )
        return intent

    def cancel_intent(self, intent_id: str) -> PaymentIntent:
        intent = self.retrieve_intent(intent_id)
        intent.status = "canceled"
        return intent

    def set_status(self, intent_id: str, status: str) -> None:
        self.retrieve_intent(intent_id).status = status


_provider: Optional[PaymentProvider] = None


def get_payment_provider() -> PaymentProvider:
    """Return the configured provider, building it on first use."""
    global _provider
    if _provider is None:
        if settings.payment_provider == "stripe":
            _provider = StripePaymentProvider()
        elif settings.payment_provider == "fake":
            _provider = FakePaymentProvider()
        else:
            raise ValueError(f"Unknown payment provider: {settings.payment_provider}")
        logger.info("Payment provider initialized", extra={"provider": settings.payment_provider})
    return _provider
