"""OpenTelemetry tracing setup with Phoenix and OpenInference Pydantic AI."""

from formulab.config import (
    DEPLOYMENT_ENVIRONMENT,
    PHOENIX_API_KEY,
    PHOENIX_COLLECTOR_ENDPOINT,
    PHOENIX_ENABLED,
    PHOENIX_PROJECT_NAME,
)
from formulab.utils.logger import get_logger

logger = get_logger("formulab.utils.tracing")
_initialized = False
_tracer_provider = None


def _resolve_endpoint() -> str:
    """Ensure HTTP endpoint includes /v1/traces path (OTLP spec)."""
    endpoint = PHOENIX_COLLECTOR_ENDPOINT.rstrip("/")
    if not endpoint.endswith("/v1/traces"):
        endpoint = f"{endpoint}/v1/traces"
    return endpoint


def _build_resource():
    """Build Resource with service identity and Phoenix project name."""
    from openinference.semconv.resource import ResourceAttributes as OIResourceAttributes
    from opentelemetry.sdk.resources import Resource

    return Resource.create(
        {
            "service.name": PHOENIX_PROJECT_NAME,
            "service.version": "0.1.0",
            "deployment.environment": DEPLOYMENT_ENVIRONMENT,
            OIResourceAttributes.PROJECT_NAME: PHOENIX_PROJECT_NAME,
        }
    )


def _build_pipeline():
    """
    Build TracerProvider with OpenInferenceSpanProcessor first, then export to Phoenix.
    Order ensures Pydantic AI spans are enriched with OpenInference attributes before export.
    """
    from openinference.instrumentation.pydantic_ai import (
        OpenInferenceSpanProcessor,
        is_openinference_span,
    )
    from opentelemetry import trace
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    headers = None
    if PHOENIX_API_KEY:
        headers = {"authorization": f"Bearer {PHOENIX_API_KEY}"}

    provider = TracerProvider(resource=_build_resource())
    provider.add_span_processor(OpenInferenceSpanProcessor(span_filter=is_openinference_span))
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=_resolve_endpoint(), headers=headers))
    )
    trace.set_tracer_provider(provider)
    return provider


def init_tracing() -> None:
    """Initialize Phoenix OTEL tracing (call once at startup). No-op unless PHOENIX_ENABLED."""
    global _initialized, _tracer_provider
    if _initialized or not PHOENIX_ENABLED:
        return

    from pydantic_ai import Agent

    _tracer_provider = _build_pipeline()
    Agent.instrument_all()
    _initialized = True
    logger.info("tracing.initialized", endpoint=_resolve_endpoint(), project=PHOENIX_PROJECT_NAME)


def get_tracer():
    """Return the OpenTelemetry tracer (no-op until init_tracing has run)."""
    from opentelemetry import trace

    return trace.get_tracer("formulab", "0.1.0")


def shutdown_tracing() -> None:
    """Flush and shutdown the tracer provider so spans are exported before process exit."""
    global _initialized, _tracer_provider
    if _tracer_provider is None:
        return
    _tracer_provider.force_flush(timeout_millis=5000)
    _tracer_provider.shutdown()
    _tracer_provider = None
    _initialized = False
