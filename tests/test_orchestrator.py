"""Unit tests for checkout orchestration with a substitute provider."""

import asyncio
import re
from decimal import Decimal

from momopay.services.checkout.errors import ProviderError
from momopay.services.checkout.schemas import PaymentMethod, ValidatedPaymentRequest
from momopay.services.checkout.service import CheckoutOrchestrator

TXN_RE = re.compile(r"TXN-\d+-\d+")


def test_wave_checkout_success(cfg, stub_provider, wave_request):
    """A Wave checkout returns the provider's redirect and transaction id."""

    result = asyncio.run(CheckoutOrchestrator(stub_provider, cfg).initiate(wave_request))

    assert result.success is True
    assert result.redirect_url == "https://paydunya.com/checkout/123456"
    # The caller sees the provider's id, not the locally generated correlation id.
    assert result.transaction_id == "PROV-TXN-1"
    assert result.message == "Payment initiated successfully"
    assert result.error is None

    (call,) = stub_provider.calls
    assert call.amount == Decimal("5000")
    assert call.description == "Test Product"
    assert call.currency == "XOF"
    assert call.payment_method is PaymentMethod.WAVE
    assert call.authorization_code is None
    assert call.customer.first_name == "John"
    assert call.customer.phone_number == "+221771234567"
    assert TXN_RE.fullmatch(call.transaction_id)


def test_orange_money_forwards_authorization_code(cfg, stub_provider, wave_request):
    """Orange Money passes the OTP authorization code to the provider."""

    request = wave_request.model_copy(
        update={"payment_method": PaymentMethod.ORANGE_MONEY, "authorization_code": "123456"}
    )

    result = asyncio.run(CheckoutOrchestrator(stub_provider, cfg).initiate(request))

    assert result.success is True
    assert stub_provider.calls[0].payment_method is PaymentMethod.ORANGE_MONEY
    assert stub_provider.calls[0].authorization_code == "123456"


def test_provider_error_becomes_failed_result(cfg, stub_provider, wave_request):
    """Provider errors are reported as a failed result, never raised."""

    stub_provider.error = ProviderError("Payment provider API error")

    result = asyncio.run(CheckoutOrchestrator(stub_provider, cfg).initiate(wave_request))

    assert result.success is False
    assert result.error == "Payment provider API error"
    assert result.error_code == "PROVIDER_ERROR"
    assert result.message == "Payment initiation failed"
    assert result.redirect_url is None
    assert TXN_RE.fullmatch(result.transaction_id)


def test_failure_gets_fresh_transaction_id(cfg, stub_provider, wave_request, monkeypatch):
    """A failed attempt reports a new id, distinct from the one sent to the provider."""

    ids = iter(["TXN-1-1", "TXN-2-2"])
    monkeypatch.setattr("momopay.services.checkout.service.generate_transaction_id", lambda: next(ids))
    stub_provider.error = ProviderError("Network timeout")

    result = asyncio.run(CheckoutOrchestrator(stub_provider, cfg).initiate(wave_request))

    assert stub_provider.calls[0].transaction_id == "TXN-1-1"
    assert result.transaction_id == "TXN-2-2"


def test_unexpected_error_without_message(cfg, stub_provider, wave_request):
    """Exceptions without text get a generic error message."""

    stub_provider.error = RuntimeError()

    result = asyncio.run(CheckoutOrchestrator(stub_provider, cfg).initiate(wave_request))

    assert result.success is False
    assert result.error == "Unknown error occurred"
    assert result.error_code == "UNEXPECTED_ERROR"


def test_orange_money_without_code_fails_before_provider(cfg, stub_provider):
    """A hand-built Orange Money request without a code never reaches the provider."""

    request = ValidatedPaymentRequest.model_construct(
        first_name="John",
        last_name="Doe",
        phone_number="+221771234567",
        payment_method=PaymentMethod.ORANGE_MONEY,
        amount=Decimal("5000"),
        product_name="Test Product",
        authorization_code=None,
    )

    result = asyncio.run(CheckoutOrchestrator(stub_provider, cfg).initiate(request))

    assert result.success is False
    assert result.error == "Authorization code is required for Orange Money payments"
    assert result.error_code == "AUTHORIZATION_CODE_MISSING"
    assert stub_provider.calls == []


def test_unsupported_method_fails_before_provider(cfg, stub_provider):
    """An unknown method on a hand-built request fails without a provider call."""

    request = ValidatedPaymentRequest.model_construct(
        first_name="John",
        last_name="Doe",
        phone_number="+221771234567",
        payment_method="UNSUPPORTED_METHOD",
        amount=Decimal("5000"),
        product_name="Test Product",
        authorization_code=None,
    )

    result = asyncio.run(CheckoutOrchestrator(stub_provider, cfg).initiate(request))

    assert result.success is False
    assert result.error == "Unsupported payment method: UNSUPPORTED_METHOD"
    assert result.error_code == "UNSUPPORTED_PAYMENT_METHOD"
    assert stub_provider.calls == []


def test_concurrent_attempts_get_distinct_ids(cfg, stub_provider, wave_request):
    """Concurrent attempts each get their own correlation id."""

    orchestrator = CheckoutOrchestrator(stub_provider, cfg)

    async def run_attempts():
        return await asyncio.gather(*(orchestrator.initiate(wave_request) for _ in range(3)))

    results = asyncio.run(run_attempts())

    assert all(r.success for r in results)
    ids = [call.transaction_id for call in stub_provider.calls]
    assert len(set(ids)) == 3
    for txn in ids:
        assert TXN_RE.fullmatch(txn)
        assert 0 <= int(txn.rsplit("-", 1)[1]) < 10000
