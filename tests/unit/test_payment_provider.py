"""Tests for payment provider adapters."""
from unittest.mock import MagicMock, patch

import pytest
import stripe

from barber_api.api.middleware.error_handler import PaymentProviderException
from barber_api.lib.settings import settings
from barber_api.services import payment_provider
from barber_api.services.payment_provider import (
    FakePaymentProvider,
    PaymentIntent,
    StripePaymentProvider,
    get_payment_provider,
)


def _stripe_intent(status="requires_payment_method"):
    return MagicMock(
        id="pi_123",
        client_secret="pi_123_secret_abc",
        status=status,
        amount=3500,
        currency="cad",
    )


@pytest.mark.unit
def test_intent_terminal_statuses():
    assert PaymentIntent("pi_1", None, "succeeded", 100, "cad").is_terminal
    assert PaymentIntent("pi_1", None, "canceled", 100, "cad").is_terminal
    assert not PaymentIntent("pi_1", None, "requires_payment_method", 100, "cad").is_terminal
    assert not PaymentIntent("pi_1", None, "processing", 100, "cad").is_terminal


@pytest.mark.unit
def test_fake_provider_lifecycle():
    provider = FakePaymentProvider()

    intent = provider.create_intent(amount_cents=3500, currency="cad", metadata={"bookingId": "b1"})

    assert intent.id.startswith("pi_fake_")
    assert intent.client_secret.startswith(intent.id)
    assert intent.status == "requires_payment_method"
    assert provider.retrieve_intent(intent.id) is intent

    provider.cancel_intent(intent.id)
    assert provider.retrieve_intent(intent.id).status == "canceled"


@pytest.mark.unit
def test_fake_provider_unknown_intent():
    with pytest.raises(PaymentProviderException):
        FakePaymentProvider().retrieve_intent("pi_missing")


@pytest.mark.unit
def test_stripe_provider_requires_key(monkeypatch):
    monkeypatch.setattr(settings, "stripe_secret_key", "")

    with pytest.raises(ValueError, match="STRIPE_SECRET_KEY"):
        StripePaymentProvider()


@pytest.mark.unit
def test_stripe_create_intent():
    """Amount, currency and metadata are passed through with the configured key."""
    provider = StripePaymentProvider(api_key="sk_test_123")

    with patch.object(stripe.PaymentIntent, "create", return_value=_stripe_intent()) as mock_create:
        intent = provider.create_intent(amount_cents=3500, currency="cad", metadata={"bookingId": "b1"})

    mock_create.assert_called_once_with(
        amount=3500,
        currency="cad",
        metadata={"bookingId": "b1"},
        api_key="sk_test_123",
    )
    assert intent == PaymentIntent("pi_123", "pi_123_secret_abc", "requires_payment_method", 3500, "cad")


@pytest.mark.unit
def test_stripe_retrieve_and_cancel():
    provider = StripePaymentProvider(api_key="sk_test_123")

    with patch.object(stripe.PaymentIntent, "retrieve", return_value=_stripe_intent("succeeded")) as mock_retrieve:
        assert provider.retrieve_intent("pi_123").is_terminal
    mock_retrieve.assert_called_once_with("pi_123", api_key="sk_test_123")

    with patch.object(stripe.PaymentIntent, "cancel", return_value=_stripe_intent("canceled")) as mock_cancel:
        assert provider.cancel_intent("pi_123").status == "canceled"
    mock_cancel.assert_called_once_with("pi_123", api_key="sk_test_123")


@pytest.mark.unit
def test_stripe_errors_become_provider_exceptions():
    provider = StripePaymentProvider(api_key="sk_test_123")

    with patch.object(stripe.PaymentIntent, "create", side_effect=stripe.StripeError("boom")):
        with pytest.raises(PaymentProviderException) as exc_info:
            provider.create_intent(amount_cents=3500, currency="cad", metadata={})

    assert exc_info.value.status_code == 502
    assert exc_info.value.details["provider"] == "stripe"


@pytest.mark.unit
def test_get_payment_provider_from_settings(monkeypatch):
    monkeypatch.setattr(payment_provider, "_provider", None)
    monkeypatch.setattr(settings, "payment_provider", "fake")

    provider = get_payment_provider()

    assert isinstance(provider, FakePaymentProvider)
    assert get_payment_provider() is provider


@pytest.mark.unit
def test_get_payment_provider_unknown_name(monkeypatch):
    monkeypatch.setattr(payment_provider, "_provider", None)
    monkeypatch.setattr(settings, "payment_provider", "paypal")

    with pytest.raises(ValueError, match="Unknown payment provider"):
        get_payment_provider()
