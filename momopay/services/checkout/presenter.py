"""Map checkout outcomes to HTTP responses."""

from fastapi.responses import HTMLResponse, RedirectResponse

from momopay.common.config import CommonSettings
from momopay.services.checkout.errors import PaymentValidationError
from momopay.services.checkout.schemas import (
    NormalizedPaymentInput,
    PaymentMethod,
    PaymentResult,
    ValidatedPaymentRequest,
    amount_in_range,
)
from momopay.services.checkout.templates import render_error_page, render_payment_form, render_success_page

SUBMIT_HEADINGS = {
    "presence": "Missing required fields",
    "amount": "Invalid amount",
    "phone": "Invalid phone number",
    "payment_method": "Invalid payment method",
    "authorization_code": "Authorization code required",
}
DISPLAY_HEADINGS = {
    "presence": "Missing required parameters",
    "amount": "Invalid amount",
}


def present_result(result: PaymentResult, request: ValidatedPaymentRequest, cfg: CommonSettings):
    """Redirect, success page or failure page for one orchestrated attempt."""

    if not result.success:
        return HTMLResponse(
            render_error_page(
                title="Payment processing error",
                message="Payment processing failed",
                details=result.error or "Please try again later",
                reference=result.transaction_id,
            ),
            status_code=500,
        )
    if result.redirect_url:
        return RedirectResponse(result.redirect_url, status_code=302)
    return HTMLResponse(
        render_success_page(
            transaction_id=result.transaction_id,
            amount=request.amount,
            product_name=request.product_name,
            currency=cfg.currency,
        )
    )


def _product_context_ok(data: NormalizedPaymentInput) -> bool:
    return bool(data.product_name) and amount_in_range(data.amount)


def present_validation_failure(data: NormalizedPaymentInput, exc: PaymentValidationError, cfg: CommonSettings):
    """400 response for a rejected submission.

    The form is re-rendered with the previous values when the product context
    still holds; otherwise there is no form to go back to and an error page is
    shown instead.
    """

    heading = SUBMIT_HEADINGS.get(exc.rule, "Invalid form data")
    if not _product_context_ok(data):
        return HTMLResponse(render_error_page(message=heading, details=exc.message), status_code=400)
    return HTMLResponse(
        render_payment_form(
            amount=data.amount,
            product_name=data.product_name,
            currency=cfg.currency,
            error_title=heading,
            error=exc.message,
            first_name=data.first_name,
            last_name=data.last_name,
            phone_number=data.phone_number,
            payment_method=PaymentMethod.parse(data.payment_method),
            phone_initial_country=cfg.phone_initial_country,
            phone_preferred_countries=cfg.phone_preferred_countries,
        ),
        status_code=400,
    )


def present_display_failure(exc: PaymentValidationError) -> HTMLResponse:
    heading = DISPLAY_HEADINGS.get(exc.rule, "Invalid request")
    return HTMLResponse(render_error_page(message=heading, details=exc.message), status_code=400)


def present_unexpected_error(message: str, details: str) -> HTMLResponse:
    return HTMLResponse(render_error_page(title=message, message=message, details=details), status_code=500)
