"""Error taxonomy for checkout attempts.

Input errors are raised by the validation policy and surface as HTTP 400.
`CheckoutError` subclasses are orchestration failures: the orchestrator
captures them into a failed `PaymentResult` and they surface as HTTP 500.
"""


class PaymentValidationError(ValueError):
    """A form or query value failed one validation rule."""

    def __init__(self, rule: str, message: str) -> None:
        super().__init__(message)
        self.rule = rule
        self.message = message


class CheckoutError(Exception):
    """Base for failures after validation; `error_code` is for observability only."""

    error_code = "UNEXPECTED_ERROR"


class ProviderError(CheckoutError):
    """The payment provider rejected the checkout or could not be reached."""

    error_code = "PROVIDER_ERROR"


class MissingAuthorizationCodeError(CheckoutError):
    error_code = "AUTHORIZATION_CODE_MISSING"

    def __init__(self) -> None:
        super().__init__("Authorization code is required for Orange Money payments")


class UnsupportedPaymentMethodError(CheckoutError):
    error_code = "UNSUPPORTED_PAYMENT_METHOD"

    def __init__(self, method: object) -> None:
        super().__init__(f"Unsupported payment method: {getattr(method, 'value', method)}")
        self.method = method
