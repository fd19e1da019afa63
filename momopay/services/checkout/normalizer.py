"""Coerce raw string form/query fields into typed, trimmed values.

Nothing here rejects input: unparseable amounts become `Decimal("NaN")` and
missing fields become empty strings. Rejection belongs to `validation`.
"""

import re
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation

from momopay.services.checkout.schemas import DisplayContext, NormalizedPaymentInput, PaymentMethod

# Plain ASCII decimal literal with optional sign and exponent; no digit
# separators or non-ASCII digits.
AMOUNT_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _text(source: Mapping[str, str], key: str) -> str:
    value = source.get(key)
    return value.strip() if isinstance(value, str) else ""


def parse_amount(text: str) -> Decimal:
    """Parse a decimal amount, returning NaN instead of raising."""

    if not isinstance(text, str) or not AMOUNT_RE.fullmatch(text):
        return Decimal("NaN")
    try:
        return Decimal(text)
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("NaN")


def normalize_form(form: Mapping[str, str]) -> NormalizedPaymentInput:
    """Typed view of a `POST /payment/process` submission."""

    amount_text = _text(form, "amount")
    raw_method = form.get("paymentMethod")
    return NormalizedPaymentInput(
        first_name=_text(form, "firstName"),
        last_name=_text(form, "lastName"),
        phone_number=_text(form, "phoneNumber"),
        # Case is left alone; canonicalization happens during validation.
        payment_method=raw_method if isinstance(raw_method, str) else "",
        amount_text=amount_text,
        amount=parse_amount(amount_text),
        product_name=_text(form, "productName"),
        authorization_code=_text(form, "authorizationCode"),
    )


def normalize_display_query(params: Mapping[str, str]) -> DisplayContext:
    """Typed view of `GET /payment` query parameters.

    Prefill values are accepted leniently: the phone number is kept exactly as
    typed (spaces, dashes, national format) and an unsupported payment method
    is dropped instead of rejected.
    """

    amount_text = _text(params, "amount")
    return DisplayContext(
        amount_text=amount_text,
        amount=parse_amount(amount_text),
        product_name=_text(params, "productName"),
        first_name=_text(params, "firstName"),
        last_name=_text(params, "lastName"),
        phone_number=_text(params, "phoneNumber"),
        payment_method=PaymentMethod.parse(_text(params, "paymentMethod")),
    )
