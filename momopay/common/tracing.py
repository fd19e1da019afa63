"""OpenTelemetry wiring for the checkout service, switched by `OTEL_ENABLED`."""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from momopay.common.config import CommonSettings

# Provider calls are wrapped in spans from this tracer; it stays a no-op until
# `setup_tracing` registers a real provider.
tracer = trace.get_tracer("momopay.checkout")


def setup_tracing(cfg: CommonSettings) -> TracerProvider | None:
    """Register a tracer provider exporting over OTLP HTTP, if enabled."""

    if not cfg.otel_enabled:
        return None
    resource = Resource.create(
        {
            "service.name": cfg.service_name,
            "deployment.environment": cfg.paydunya_mode,
        }
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=cfg.otel_exporter_otlp_endpoint)))
    trace.set_tracer_provider(provider)
    return provider


def instrument_app(app: FastAPI, cfg: CommonSettings) -> None:
    """Attach request spans, skipping probe and scrape endpoints."""

    if cfg.otel_enabled:
        FastAPIInstrumentor.instrument_app(app, excluded_urls="health,metrics")
