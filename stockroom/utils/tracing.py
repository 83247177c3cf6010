"""OpenTelemetry tracing: OTLP/HTTP export of workflow and sweep spans when enabled."""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from stockroom import __version__
from stockroom.config import (
    DEPLOYMENT_ENVIRONMENT,
    OTEL_EXPORTER_ENDPOINT,
    OTEL_SERVICE_NAME,
    TRACING_ENABLED,
)

logger = logging.getLogger(__name__)
_initialized = False
_tracer_provider = None


def _build_provider():
    """TracerProvider with service identity and a batching OTLP/HTTP exporter."""
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    resource = Resource.create(
        {
            "service.name": OTEL_SERVICE_NAME,
            "service.version": __version__,
            "deployment.environment": DEPLOYMENT_ENVIRONMENT,
        }
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=OTEL_EXPORTER_ENDPOINT)))
    return provider


def init_tracing() -> None:
    """Install the global tracer provider (call once at startup). No-op unless TRACING_ENABLED."""
    global _initialized, _tracer_provider
    if _initialized or not TRACING_ENABLED:
        return
    _tracer_provider = _build_provider()
    trace.set_tracer_provider(_tracer_provider)
    logger.info("Tracing enabled, exporting to %s", OTEL_EXPORTER_ENDPOINT)
    _initialized = True


def get_tracer():
    return trace.get_tracer("stockroom", __version__)


@contextmanager
def traced(name: str, **attributes: Any) -> Iterator[Any]:
    """Run a block inside a span; exceptions mark the span as errored and propagate."""
    with get_tracer().start_as_current_span(
        name, record_exception=False, set_status_on_exception=False
    ) as span:
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(key, value if isinstance(value, (str, int, float, bool)) else str(value))
        try:
            yield span
        except Exception as exc:
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            span.record_exception(exc)
            raise


def shutdown_tracing() -> None:
    """Flush and shutdown the tracer provider so spans are exported before process exit."""
    if _tracer_provider is None:
        return
    _tracer_provider.force_flush(timeout_millis=5000)
    _tracer_provider.shutdown()
