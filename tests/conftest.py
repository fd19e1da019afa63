"""Shared fixtures: deterministic settings and a scriptable provider."""

import os

# Must be set before `momopay.common.config` builds the process settings.
os.environ["OTEL_ENABLED"] = "false"
os.environ["PROVIDER_BACKEND"] = "simulated"
os.environ["CURRENCY"] = "XOF"

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402

from momopay.common.config import CommonSettings  # noqa: E402
from momopay.services.checkout.schemas import (  # noqa: E402
    CheckoutResult,
    PaymentMethod,
    TransactionStatus,
    ValidatedPaymentRequest,
)


class StubProvider:
    """Records checkout calls and replies with `result` or raises `error`."""

    def __init__(self) -> None:
        self.calls = []
        self.error: Exception | None = None
        self.result = CheckoutResult(
            transaction_id="PROV-TXN-1",
            transaction_reference="REF-1",
            transaction_status=TransactionStatus.PENDING,
            transaction_amount=Decimal("5000"),
            transaction_currency="XOF",
            redirect_url="https://paydunya.com/checkout/123456",
        )

    async def checkout_mobile_money(self, request):
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def cfg() -> CommonSettings:
    return CommonSettings(
        _env_file=None,
        currency="XOF",
        provider_backend="simulated",
        otel_enabled=False,
        paydunya_master_key="test-master-key",
        paydunya_private_key="test-private-key",
        paydunya_public_key="test-public-key",
        paydunya_token="test-token",
    )


@pytest.fixture
def stub_provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def wave_request() -> ValidatedPaymentRequest:
    return ValidatedPaymentRequest(
        first_name="John",
        last_name="Doe",
        phone_number="+221771234567",
        payment_method=PaymentMethod.WAVE,
        amount=Decimal("5000"),
        product_name="Test Product",
    )


@pytest.fixture
def valid_form() -> dict[str, str]:
    return {
        "firstName": "John",
        "lastName": "Doe",
        "phoneNumber": "+221771234567",
        "paymentMethod": "WAVE",
        "amount": "5000",
        "productName": "Premium Subscription",
    }
