"""
OpenTelemetry distributed tracing for the admission webhook.

This module provides:
- Tracer provider setup with an OTLP exporter
- Extraction of the W3C trace context sent by the API server
- A tracer accessor that is a no-op while tracing is disabled

Usage:
    from admission_webhook.observability.tracing import get_tracer, setup_tracing

    setup_tracing(enabled=True)

    tracer = get_tracer(__name__)
    with tracer.start_as_current_span("my_operation"):
        ...
"""

import logging
from collections.abc import Mapping

from opentelemetry import context, trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.trace import Tracer
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

logger = logging.getLogger(__name__)

# Module-level state
_tracer_provider: TracerProvider | None = None
_initialized: bool = False


def setup_tracing(
    enabled: bool = False,
    endpoint: str = "http://localhost:4317",
    service_name: str = "admission-webhook",
    sample_rate: float = 1.0,
    insecure: bool = True,
    use_simple_processor: bool = False,
) -> TracerProvider | None:
    """
    Initialize OpenTelemetry tracing for the webhook.

    Args:
        enabled: Enable tracing (if False, returns None and does nothing)
        endpoint: OTLP collector endpoint (gRPC)
        service_name: Service name for traces
        sample_rate: Sampling rate (0.0-1.0, 1.0 = 100% of traces)
        insecure: Use insecure connection (no TLS)
        use_simple_processor: Use SimpleSpanProcessor instead of BatchSpanProcessor
                              (useful for testing to ensure immediate export)

    Returns:
        TracerProvider if enabled, None otherwise
    """
    global _tracer_provider, _initialized

    if _initialized:
        logger.debug("Tracing already initialized, skipping")
        return _tracer_provider

    if not enabled:
        logger.info("OpenTelemetry tracing is disabled")
        _initialized = True
        return None

    logger.info(
        f"Initializing OpenTelemetry tracing: endpoint={endpoint}, "
        f"service={service_name}, sample_rate={sample_rate}"
    )

    resource = Resource.create(
        {
            "service.name": service_name,
            "deployment.environment": "kubernetes",
        }
    )

    # ParentBased keeps the API server's sampling decision for propagated traces
    sampler = ParentBased(root=TraceIdRatioBased(sample_rate))
    _tracer_provider = TracerProvider(resource=resource, sampler=sampler)

    exporter = OTLPSpanExporter(endpoint=endpoint, insecure=insecure)
    if use_simple_processor:
        processor = SimpleSpanProcessor(exporter)
    else:
        processor = BatchSpanProcessor(exporter)
    _tracer_provider.add_span_processor(processor)

    trace.set_tracer_provider(_tracer_provider)

    _initialized = True
    logger.info("OpenTelemetry tracing initialized successfully")

    return _tracer_provider


def shutdown_tracing() -> None:
    """Shutdown tracing and flush any pending spans."""
    global _tracer_provider, _initialized

    if _tracer_provider is not None:
        logger.info("Shutting down OpenTelemetry tracing")
        _tracer_provider.shutdown()
        _tracer_provider = None

    _initialized = False


def get_tracer(name: str = __name__) -> Tracer:
    """
    Get a tracer instance for creating spans.

    Returns:
        Tracer instance (no-op if tracing is disabled)
    """
    return trace.get_tracer(name)


def extract_trace_context(headers: Mapping[str, str]) -> context.Context:
    """
    Extract the W3C trace context from incoming request headers.

    Returns:
        Context to use as parent of the server span (empty if no traceparent)
    """
    return TraceContextTextMapPropagator().extract(carrier=headers)


def is_tracing_enabled() -> bool:
    """Check if tracing is currently enabled and initialized."""
    return _initialized and _tracer_provider is not None
