"""Request/response schemas for one checkout attempt.

Each request owns its chain exclusively:
form -> `NormalizedPaymentInput` -> `ValidatedPaymentRequest` -> `PaymentResult`.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Strict submit-time phone format. Display-time prepopulation is lenient on purpose.
E164_PHONE_PATTERN = r"^\+?[0-9]{10,15}$"

# Amounts are checkout prices: at most 12 integer digits and 2 decimal places.
MAX_AMOUNT = Decimal("999999999999.99")
AMOUNT_QUANTUM = Decimal("0.01")


def amount_in_range(amount: Decimal) -> bool:
    """Finite, positive, at most `MAX_AMOUNT` and no finer than a cent."""

    if not amount.is_finite() or amount <= 0 or amount > MAX_AMOUNT:
        return False
    return amount == amount.quantize(AMOUNT_QUANTUM)


class PaymentMethod(str, Enum):
    WAVE = "WAVE"
    ORANGE_MONEY = "ORANGE_MONEY"

    @classmethod
    def parse(cls, token: str) -> "PaymentMethod | None":
        """Case-insensitive lookup; `None` when the token is not supported."""

        try:
            return cls(token.strip().upper())
        except ValueError:
            return None


class TransactionStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class NormalizedPaymentInput:
    """Best-effort typed view of a submitted form; nothing here is validated yet."""

    first_name: str
    last_name: str
    phone_number: str
    payment_method: str
    amount_text: str
    amount: Decimal
    product_name: str
    authorization_code: str


@dataclass(frozen=True)
class DisplayContext:
    """Product context and optional prefill values for the payment form."""

    amount_text: str
    amount: Decimal
    product_name: str
    first_name: str = ""
    last_name: str = ""
    phone_number: str = ""
    payment_method: PaymentMethod | None = None


class ValidatedPaymentRequest(BaseModel):
    """Payment request that passed the validation policy.

    Produced by `validation.validate_payment_input`. The model re-checks its
    invariants so a hand-built instance cannot carry invalid values.
    """

    model_config = ConfigDict(frozen=True)

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone_number: str = Field(pattern=E164_PHONE_PATTERN)
    payment_method: PaymentMethod
    amount: Decimal = Field(gt=0, allow_inf_nan=False)
    product_name: str = Field(min_length=1)
    authorization_code: str | None = None

    @field_validator("amount")
    @classmethod
    def _amount_in_range(cls, value: Decimal) -> Decimal:
        if not amount_in_range(value):
            raise ValueError(f"amount must be positive, at most {MAX_AMOUNT} and in whole cents")
        return value

    @model_validator(mode="after")
    def _authorization_code_iff_orange_money(self) -> "ValidatedPaymentRequest":
        required = self.payment_method is PaymentMethod.ORANGE_MONEY
        present = bool(self.authorization_code and self.authorization_code.strip())
        if required != present:
            raise ValueError("authorization_code must be set for ORANGE_MONEY and only for ORANGE_MONEY")
        return self


class Customer(BaseModel):
    first_name: str
    last_name: str
    phone_number: str


class MobileMoneyCheckout(BaseModel):
    """Normalized parameters handed to the provider's mobile-money checkout."""

    amount: Decimal
    description: str
    currency: str
    transaction_id: str
    customer: Customer
    payment_method: PaymentMethod
    authorization_code: str | None = None


class CheckoutResult(BaseModel):
    """Provider reply for an accepted checkout."""

    transaction_id: str
    transaction_reference: str
    transaction_status: TransactionStatus
    transaction_amount: Decimal
    transaction_currency: str
    redirect_url: str | None = None


class PaymentResult(BaseModel):
    """Uniform outcome of one checkout attempt, consumed once by the presenter."""

    model_config = ConfigDict(frozen=True)

    success: bool
    transaction_id: str
    redirect_url: str | None = None
    message: str | None = None
    error: str | None = None
    error_code: str | None = None
