"""Prometheus metric definitions for the checkout portal."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


payment_requests_total = Counter(
    "payment_requests_total",
    "Total payment initiation attempts",
    ["service", "payment_method"],
)
payment_success_total = Counter(
    "payment_success_total",
    "Total payment initiations accepted by the provider",
    ["service", "payment_method"],
)
payment_failure_total = Counter(
    "payment_failure_total",
    "Total failed payment initiations",
    ["service", "error_code"],
)
payment_latency_seconds = Histogram("payment_latency_seconds", "Provider checkout latency seconds", ["service"])
validation_failures_total = Counter(
    "validation_failures_total",
    "Rejected form submissions by failing rule",
    ["service", "boundary", "rule"],
)
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
