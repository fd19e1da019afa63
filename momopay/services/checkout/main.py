"""HTTP surface of the checkout portal.

`GET /payment` shows the payment form for a product, `POST /payment/process`
validates the submission, runs one checkout attempt and redirects or renders
the outcome.
"""

from time import perf_counter
from uuid import uuid4

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse

from momopay.common.config import settings
from momopay.common.logging import configure_logging, logger, trace_id_ctx
from momopay.common.metrics import (
    http_request_duration_seconds,
    http_requests_total,
    metrics_response,
    validation_failures_total,
)
from momopay.common.startup import log_startup_config
from momopay.common.tracing import instrument_app, setup_tracing
from momopay.services.checkout.errors import PaymentValidationError
from momopay.services.checkout.normalizer import normalize_display_query, normalize_form
from momopay.services.checkout.presenter import (
    present_display_failure,
    present_result,
    present_unexpected_error,
    present_validation_failure,
)
from momopay.services.checkout.providers import build_provider
from momopay.services.checkout.service import CheckoutOrchestrator
from momopay.services.checkout.templates import render_error_page, render_payment_form
from momopay.services.checkout.validation import validate_payment_input, validate_product_context

configure_logging()
setup_tracing(settings)
log_startup_config(
    settings,
    [
        "service_name",
        "paydunya_mode",
        "paydunya_master_key",
        "paydunya_private_key",
        "paydunya_public_key",
        "paydunya_token",
        "currency",
        "provider_backend",
    ],
)
orchestrator = CheckoutOrchestrator(build_provider(settings), settings)
app = FastAPI(title="Mobile Money Checkout Portal")
instrument_app(app, settings)


def get_orchestrator() -> CheckoutOrchestrator:
    """Dependency hook; tests override it with a substitute provider/config."""

    return orchestrator


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    """Bind a trace id and record request count and latency for every HTTP call."""

    trace_id_ctx.set(request.headers.get("x-correlation-id") or str(uuid4()))
    start = perf_counter()
    route = request.url.path
    method = request.method
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        route_obj = request.scope.get("route")
        if route_obj is not None and getattr(route_obj, "path", None):
            route = route_obj.path
        return response
    finally:
        elapsed = max(0.0, perf_counter() - start)
        http_request_duration_seconds.labels(
            service=settings.service_name,
            route=route,
            method=method,
        ).observe(elapsed)
        http_requests_total.labels(
            service=settings.service_name,
            route=route,
            method=method,
            status_code=str(status_code),
        ).inc()


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception("unhandled error path=%s", request.url.path)
    return HTMLResponse(
        render_error_page(
            title="Server Error",
            message="Server Error",
            details="An unexpected error occurred. Please try again later.",
        ),
        status_code=500,
    )


@app.get("/payment", response_class=HTMLResponse)
def show_payment_form(request: Request):
    """Render the form for `amount` + `productName`, prefilled from optional query params."""

    try:
        ctx = normalize_display_query(request.query_params)
        try:
            amount, product_name = validate_product_context(ctx)
        except PaymentValidationError as exc:
            validation_failures_total.labels(
                service=settings.service_name, boundary="display", rule=exc.rule
            ).inc()
            return present_display_failure(exc)
        return HTMLResponse(
            render_payment_form(
                amount=amount,
                product_name=product_name,
                currency=settings.currency,
                first_name=ctx.first_name,
                last_name=ctx.last_name,
                phone_number=ctx.phone_number,
                payment_method=ctx.payment_method,
                phone_initial_country=settings.phone_initial_country,
                phone_preferred_countries=settings.phone_preferred_countries,
            )
        )
    except Exception:
        logger.exception("error displaying payment form")
        return present_unexpected_error(
            "Server error", "Unable to display payment form. Please try again later."
        )


@app.post("/payment/process")
async def process_payment(request: Request, service: CheckoutOrchestrator = Depends(get_orchestrator)):
    """Validate the submitted form and run one checkout attempt."""

    data = normalize_form(await request.form())
    try:
        validated = validate_payment_input(data)
    except PaymentValidationError as exc:
        logger.info("payment form rejected rule=%s reason=%s", exc.rule, exc.message)
        validation_failures_total.labels(service=settings.service_name, boundary="submit", rule=exc.rule).inc()
        return present_validation_failure(data, exc, settings)

    try:
        result = await service.initiate(validated)
    except Exception:
        logger.exception("error processing payment")
        return present_unexpected_error(
            "Payment processing error", "An unexpected error occurred. Please try again later."
        )
    return present_result(result, validated, settings)


@app.get("/metrics")
def metrics():
    """Prometheus scrape endpoint."""

    return metrics_response()


@app.get("/health")
def health():
    """Container health probe endpoint."""

    return {"ok": True}


def run() -> None:
    """Console entrypoint: serve the portal with uvicorn."""

    logger.info(
        "checkout portal starting port=%s mode=%s currency=%s form_url=http://localhost:%s/payment?amount=1000&productName=Test+Product",
        settings.port,
        settings.paydunya_mode,
        settings.currency,
        settings.port,
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
