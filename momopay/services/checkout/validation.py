"""Ordered validation rules turning normalized input into a payment request.

Rules run in a fixed order and the first failure wins; violations are not
accumulated. Each failure names its rule so callers can count and label it.

Phone numbers are checked strictly here even though the payment form accepts
friendlier formats (spaces, dashes, national numbers) for display. The
asymmetry is intentional; the submit-time check is the authoritative one.
"""

import re
from decimal import Decimal

from momopay.services.checkout.errors import PaymentValidationError
from momopay.services.checkout.schemas import (
    E164_PHONE_PATTERN,
    DisplayContext,
    NormalizedPaymentInput,
    PaymentMethod,
    ValidatedPaymentRequest,
    amount_in_range,
)

PHONE_RE = re.compile(E164_PHONE_PATTERN)

MSG_REQUIRED = "All fields are required"
MSG_AMOUNT = "Amount must be a positive number"
MSG_PHONE = "Invalid phone number format. Use international format (e.g., +221771234567)"
MSG_METHOD = "Invalid payment method. Supported methods: WAVE, ORANGE_MONEY"
MSG_AUTH_CODE = "Authorization code is required for Orange Money payments"
MSG_PRODUCT_CONTEXT = "Both amount and productName are required query parameters"


def _check_amount(amount: Decimal) -> Decimal:
    if not amount_in_range(amount):
        raise PaymentValidationError("amount", MSG_AMOUNT)
    return amount


def validate_payment_input(data: NormalizedPaymentInput) -> ValidatedPaymentRequest:
    """Apply presence, amount, phone and payment-method rules in order.

    Raises `PaymentValidationError` for the first rule that fails.
    """

    required = (
        data.first_name,
        data.last_name,
        data.phone_number,
        data.payment_method.strip(),
        data.amount_text,
        data.product_name,
    )
    if not all(required):
        raise PaymentValidationError("presence", MSG_REQUIRED)

    amount = _check_amount(data.amount)

    if not PHONE_RE.fullmatch(data.phone_number):
        raise PaymentValidationError("phone", MSG_PHONE)

    method = PaymentMethod.parse(data.payment_method)
    if method is None:
        raise PaymentValidationError("payment_method", MSG_METHOD)

    authorization_code = None
    if method is PaymentMethod.ORANGE_MONEY:
        if not data.authorization_code:
            raise PaymentValidationError("authorization_code", MSG_AUTH_CODE)
        authorization_code = data.authorization_code

    return ValidatedPaymentRequest(
        first_name=data.first_name,
        last_name=data.last_name,
        phone_number=data.phone_number,
        payment_method=method,
        amount=amount,
        product_name=data.product_name,
        authorization_code=authorization_code,
    )


def validate_product_context(ctx: DisplayContext) -> tuple[Decimal, str]:
    """Check the product context needed to show the payment form."""

    if not ctx.amount_text or not ctx.product_name:
        raise PaymentValidationError("presence", MSG_PRODUCT_CONTEXT)
    return _check_amount(ctx.amount), ctx.product_name
