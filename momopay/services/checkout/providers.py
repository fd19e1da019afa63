"""Mobile-money provider adapters.

The orchestrator depends only on `MobileMoneyProvider`: one async operation
that either returns a `CheckoutResult` or raises `ProviderError` carrying a
human-readable message. Timeouts belong to the transport of each adapter.
"""

from decimal import Decimal
from typing import Protocol

import httpx

from momopay.common.config import CommonSettings
from momopay.common.logging import logger
from momopay.services.checkout.errors import ProviderError, UnsupportedPaymentMethodError
from momopay.services.checkout.schemas import (
    AMOUNT_QUANTUM,
    CheckoutResult,
    MobileMoneyCheckout,
    PaymentMethod,
    TransactionStatus,
    amount_in_range,
)

_PAYDUNYA_BASE_URLS = {
    "test": "https://app.paydunya.com/sandbox-api/v1",
    "live": "https://app.paydunya.com/api/v1",
}
_PAYDUNYA_SOFTPAY_PATHS = {
    PaymentMethod.WAVE: "/softpay/wave-senegal",
    PaymentMethod.ORANGE_MONEY: "/softpay/new-orange-money-senegal",
}
_SENEGAL_DIAL_CODE = "221"


class MobileMoneyProvider(Protocol):
    """Capability: attempt a mobile-money checkout."""

    async def checkout_mobile_money(self, request: MobileMoneyCheckout) -> CheckoutResult:
        ...


def _json_amount(amount: Decimal) -> int | float:
    if not amount_in_range(amount):
        raise ProviderError(f"Amount {amount} is outside the range Paydunya accepts")
    cents = amount.quantize(AMOUNT_QUANTUM)
    if cents == cents.to_integral_value():
        return int(cents)
    return float(cents)


def _national_number(phone_number: str) -> str:
    """Softpay endpoints take the Senegalese national number without dial code."""

    digits = phone_number.lstrip("+")
    if digits.startswith(_SENEGAL_DIAL_CODE) and len(digits) > 9:
        return digits[len(_SENEGAL_DIAL_CODE):]
    return digits


class PaydunyaProvider:
    """Paydunya checkout-invoice + softpay flow over HTTP.

    1. create a checkout invoice and obtain its token;
    2. push the invoice to the customer's wallet through the softpay endpoint
       of the selected method.

    Wave answers with a URL the customer must visit; Orange Money OTP
    payments complete without a redirect.
    """

    name = "paydunya"

    def __init__(self, cfg: CommonSettings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.cfg = cfg
        self.base_url = _PAYDUNYA_BASE_URLS[cfg.paydunya_mode]
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "PAYDUNYA-MASTER-KEY": self.cfg.paydunya_master_key,
            "PAYDUNYA-PRIVATE-KEY": self.cfg.paydunya_private_key,
            "PAYDUNYA-PUBLIC-KEY": self.cfg.paydunya_public_key,
            "PAYDUNYA-TOKEN": self.cfg.paydunya_token,
        }

    async def _post(self, client: httpx.AsyncClient, path: str, payload: dict) -> dict:
        try:
            resp = await client.post(path, json=payload)
        except httpx.HTTPError as exc:
            raise ProviderError(f"Paydunya request failed: {exc}") from exc
        if resp.status_code >= 400:
            raise ProviderError(f"Paydunya returned HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError as exc:
            raise ProviderError("Paydunya returned an invalid response") from exc

    async def _create_invoice(self, client: httpx.AsyncClient, request: MobileMoneyCheckout) -> str:
        reply = await self._post(
            client,
            "/checkout-invoice/create",
            {
                "invoice": {
                    "total_amount": _json_amount(request.amount),
                    "description": request.description,
                },
                "store": {"name": self.cfg.paydunya_store_name},
                "custom_data": {
                    "transaction_id": request.transaction_id,
                    "currency": request.currency,
                },
            },
        )
        if reply.get("response_code") != "00" or not reply.get("token"):
            raise ProviderError(reply.get("response_text") or "Paydunya could not create the invoice")
        return reply["token"]

    def _softpay_payload(self, request: MobileMoneyCheckout, invoice_token: str) -> dict:
        customer = request.customer
        full_name = f"{customer.first_name} {customer.last_name}"
        phone = _national_number(customer.phone_number)
        if request.payment_method is PaymentMethod.WAVE:
            return {
                "wave_senegal_fullName": full_name,
                "wave_senegal_email": "",
                "wave_senegal_phone": phone,
                "wave_senegal_payment_token": invoice_token,
            }
        return {
            "customer_name": full_name,
            "customer_email": "",
            "phone_number": phone,
            "authorization_code": request.authorization_code,
            "invoice_token": invoice_token,
            "api_type": "OTPCODE",
        }

    async def checkout_mobile_money(self, request: MobileMoneyCheckout) -> CheckoutResult:
        softpay_path = _PAYDUNYA_SOFTPAY_PATHS.get(request.payment_method)
        if softpay_path is None:
            raise UnsupportedPaymentMethodError(request.payment_method)

        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=self.cfg.provider_timeout_seconds,
            transport=self._transport,
        ) as client:
            invoice_token = await self._create_invoice(client, request)
            reply = await self._post(client, softpay_path, self._softpay_payload(request, invoice_token))

        if not reply.get("success"):
            raise ProviderError(reply.get("message") or "Paydunya declined the payment")
        redirect_url = reply.get("url") or None
        logger.info(
            "paydunya softpay accepted transaction_id=%s invoice_token=%s redirect=%s",
            request.transaction_id,
            invoice_token,
            bool(redirect_url),
        )
        return CheckoutResult(
            transaction_id=request.transaction_id,
            transaction_reference=invoice_token,
            transaction_status=TransactionStatus.PENDING if redirect_url else TransactionStatus.SUCCESS,
            transaction_amount=request.amount,
            transaction_currency=request.currency,
            redirect_url=redirect_url,
        )


class SimulatedProvider:
    """Deterministic local stand-in for the real provider.

    Customers whose first name starts with `force-decline` or `force-timeout`
    get the matching failure; Wave checkouts redirect to a fake checkout page
    and Orange Money checkouts complete immediately.
    """

    name = "simulated"

    def __init__(self, checkout_url: str) -> None:
        self.checkout_url = checkout_url.rstrip("/")

    async def checkout_mobile_money(self, request: MobileMoneyCheckout) -> CheckoutResult:
        first_name = request.customer.first_name.lower()
        if first_name.startswith("force-timeout"):
            raise ProviderError("Provider request timed out")
        if first_name.startswith("force-decline"):
            raise ProviderError("Payment declined by provider")

        reference = f"SIM-{request.transaction_id}"
        redirect_url = None
        if request.payment_method is PaymentMethod.WAVE:
            redirect_url = f"{self.checkout_url}/{reference}"
        return CheckoutResult(
            transaction_id=request.transaction_id,
            transaction_reference=reference,
            transaction_status=TransactionStatus.PENDING if redirect_url else TransactionStatus.SUCCESS,
            transaction_amount=request.amount,
            transaction_currency=request.currency,
            redirect_url=redirect_url,
        )


def build_provider(cfg: CommonSettings) -> MobileMoneyProvider:
    """Select the provider backend named in configuration."""

    if cfg.provider_backend == "simulated":
        return SimulatedProvider(cfg.simulated_checkout_url)
    return PaydunyaProvider(cfg)
