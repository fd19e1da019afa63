"""Unit tests for form/query normalization."""

from decimal import Decimal

from momopay.services.checkout.normalizer import normalize_display_query, normalize_form, parse_amount
from momopay.services.checkout.schemas import PaymentMethod


def test_form_fields_are_trimmed_but_method_case_is_kept():
    """Fields are trimmed; the method token keeps its case."""

    data = normalize_form(
        {
            "firstName": "  John ",
            "lastName": "Doe\t",
            "phoneNumber": " +221771234567 ",
            "paymentMethod": "wave",
            "amount": " 5000 ",
            "productName": " Premium ",
            "authorizationCode": " 1234 ",
        }
    )

    assert data.first_name == "John"
    assert data.last_name == "Doe"
    assert data.phone_number == "+221771234567"
    assert data.payment_method == "wave"
    assert data.amount_text == "5000"
    assert data.amount == Decimal("5000")
    assert data.product_name == "Premium"
    assert data.authorization_code == "1234"


def test_missing_fields_become_empty_and_never_raise():
    """Missing fields normalize to empty values."""

    data = normalize_form({})

    assert data.first_name == ""
    assert data.payment_method == ""
    assert data.authorization_code == ""
    assert data.amount.is_nan()


def test_unparseable_amount_becomes_nan():
    """Unparseable amounts become NaN."""

    assert parse_amount("abc").is_nan()
    assert parse_amount("").is_nan()
    assert parse_amount("99.99") == Decimal("99.99")


def test_display_query_keeps_lenient_phone_formats():
    """Display prefill keeps the phone exactly as typed."""

    ctx = normalize_display_query(
        {"amount": "5000", "productName": "Test", "phoneNumber": "+221 77 123 45 67"}
    )

    assert ctx.phone_number == "+221 77 123 45 67"
    assert ctx.payment_method is None


def test_display_query_preselects_supported_method_case_insensitively():
    """Only supported methods are preselected, in any case."""

    assert normalize_display_query({"paymentMethod": "orange_money"}).payment_method is PaymentMethod.ORANGE_MONEY
    assert normalize_display_query({"paymentMethod": "INVALID_METHOD"}).payment_method is None


def test_amount_must_be_a_plain_ascii_number():
    """Digit separators and non-ASCII digits are not amounts."""

    assert parse_amount("1_000").is_nan()
    assert parse_amount("１００").is_nan()
    assert parse_amount("1 000").is_nan()
    assert parse_amount("0x10").is_nan()
    assert parse_amount("5e3") == Decimal("5000")
    assert parse_amount(".5") == Decimal("0.5")
    assert parse_amount("-1") == Decimal("-1")
