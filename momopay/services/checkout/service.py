"""Checkout orchestration.

Builds the provider call from a validated request, invokes the provider once
and maps every outcome (success, provider failure, local pre-check failure,
unexpected exception) to a `PaymentResult`. Nothing is retried or persisted.
"""

from momopay.common.config import CommonSettings
from momopay.common.logging import logger, transaction_id_ctx
from momopay.common.metrics import (
    payment_failure_total,
    payment_latency_seconds,
    payment_requests_total,
    payment_success_total,
)
from momopay.common.tracing import tracer
from momopay.services.checkout.errors import (
    CheckoutError,
    MissingAuthorizationCodeError,
    UnsupportedPaymentMethodError,
)
from momopay.services.checkout.providers import MobileMoneyProvider
from momopay.services.checkout.schemas import (
    Customer,
    MobileMoneyCheckout,
    PaymentMethod,
    PaymentResult,
    ValidatedPaymentRequest,
)
from momopay.services.checkout.transaction_id import generate_transaction_id

MSG_INITIATED = "Payment initiated successfully"
MSG_FAILED = "Payment initiation failed"
MSG_UNKNOWN_ERROR = "Unknown error occurred"


def _method_label(method: object) -> str:
    return str(getattr(method, "value", method))


class CheckoutOrchestrator:
    """Owns the lifecycle of one checkout attempt; holds no per-attempt state."""

    def __init__(self, provider: MobileMoneyProvider, cfg: CommonSettings) -> None:
        self.provider = provider
        self.cfg = cfg
        self.service_name = cfg.service_name

    def _build_checkout(self, request: ValidatedPaymentRequest, transaction_id: str) -> MobileMoneyCheckout:
        """Dispatch on payment method; raise locally before any provider call."""

        common = {
            "amount": request.amount,
            "description": request.product_name,
            "currency": self.cfg.currency,
            "transaction_id": transaction_id,
            "customer": Customer(
                first_name=request.first_name,
                last_name=request.last_name,
                phone_number=request.phone_number,
            ),
        }
        if request.payment_method is PaymentMethod.WAVE:
            return MobileMoneyCheckout(**common, payment_method=PaymentMethod.WAVE)
        if request.payment_method is PaymentMethod.ORANGE_MONEY:
            # Validation already enforces this; kept as a guard for direct callers.
            if not request.authorization_code:
                raise MissingAuthorizationCodeError()
            return MobileMoneyCheckout(
                **common,
                payment_method=PaymentMethod.ORANGE_MONEY,
                authorization_code=request.authorization_code,
            )
        raise UnsupportedPaymentMethodError(request.payment_method)

    async def initiate(self, request: ValidatedPaymentRequest) -> PaymentResult:
        """Run one checkout attempt. Never raises."""

        method = _method_label(request.payment_method)
        try:
            transaction_id = generate_transaction_id()
            transaction_id_ctx.set(transaction_id)
            payment_requests_total.labels(service=self.service_name, payment_method=method).inc()
            logger.info(
                "payment initiation started transaction_id=%s amount=%s product=%s method=%s customer=%s",
                transaction_id,
                request.amount,
                request.product_name,
                method,
                f"{request.first_name} {request.last_name}",
            )

            checkout = self._build_checkout(request, transaction_id)
            with tracer.start_as_current_span("provider.checkout_mobile_money") as span:
                span.set_attribute("payment.method", method)
                span.set_attribute("payment.transaction_id", transaction_id)
                with payment_latency_seconds.labels(service=self.service_name).time():
                    result = await self.provider.checkout_mobile_money(checkout)

            logger.info(
                "payment initiated transaction_id=%s reference=%s status=%s",
                transaction_id,
                result.transaction_reference,
                result.transaction_status.value,
            )
            payment_success_total.labels(service=self.service_name, payment_method=method).inc()
            return PaymentResult(
                success=True,
                redirect_url=result.redirect_url,
                transaction_id=result.transaction_id,
                message=MSG_INITIATED,
            )
        except Exception as exc:
            return self._failure(exc, method)

    def _failure(self, exc: Exception, method: str) -> PaymentResult:
        """Map any failure to a result carrying a fresh correlation id."""

        error_code = exc.error_code if isinstance(exc, CheckoutError) else CheckoutError.error_code
        error = str(exc) or MSG_UNKNOWN_ERROR
        transaction_id = generate_transaction_id()
        if isinstance(exc, CheckoutError):
            logger.warning(
                "payment initiation failed transaction_id=%s method=%s error_code=%s error=%s",
                transaction_id,
                method,
                error_code,
                error,
            )
        else:
            logger.exception(
                "payment initiation failed unexpectedly transaction_id=%s method=%s",
                transaction_id,
                method,
            )
        payment_failure_total.labels(service=self.service_name, error_code=error_code).inc()
        return PaymentResult(
            success=False,
            transaction_id=transaction_id,
            error=error,
            error_code=error_code,
            message=MSG_FAILED,
        )
