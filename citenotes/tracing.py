"""
OpenTelemetry Tracing Setup
===========================
Configures tracing for reference-list rendering.

Spans are exported over OTLP/HTTP when ENABLE_TRACING=true; otherwise the
global no-op tracer is used and the span helpers below are harmless.
"""

import atexit
from typing import Any, Mapping, Optional

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource, SERVICE_NAME

from citenotes.config import TRACING

SERVICE_NAME_VALUE = TRACING.SERVICE_NAME
OTLP_ENDPOINT = TRACING.OTLP_ENDPOINT
ENABLE_TRACING = TRACING.ENABLED

_provider: Optional[TracerProvider] = None
_tracer = None


def _cleanup_tracing() -> None:
    """Shutdown the tracer provider to flush pending spans."""
    if _provider is not None:
        try:
            _provider.shutdown()
        except Exception:
            pass  # Best effort cleanup


def setup_tracing(service_name: str = SERVICE_NAME_VALUE) -> trace.Tracer:
    """
    Initialize OpenTelemetry tracing with OTLP export.

    Args:
        service_name: Name of the service for trace identification

    Returns:
        Configured tracer instance
    """
    global _provider

    resource = Resource.create({SERVICE_NAME: service_name})
    _provider = TracerProvider(resource=resource)
    _provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=OTLP_ENDPOINT)))
    trace.set_tracer_provider(_provider)

    atexit.register(_cleanup_tracing)
    return trace.get_tracer(service_name)


def get_tracer(name: str = SERVICE_NAME_VALUE) -> trace.Tracer:
    """Get a tracer instance for creating spans."""
    return trace.get_tracer(name)


def init_tracing() -> trace.Tracer:
    """
    Initialize tracing if not already done.

    Returns:
        The global tracer instance (or NoOp tracer if disabled)
    """
    global _tracer
    if _tracer is None:
        if ENABLE_TRACING:
            _tracer = setup_tracing()
        else:
            _tracer = get_tracer()
    return _tracer


def safe_set_span_attributes(span: Any, attributes: Mapping[str, Any]) -> None:
    """Best-effort attribute setter for render spans.

    Scalars are set as-is, strings are truncated, anything else is
    stringified. Safe to call with a no-op span or ``None``.
    """
    setter = getattr(span, "set_attribute", None)
    if not callable(setter):
        return

    for key, value in attributes.items():
        if not key:
            continue
        try:
            if isinstance(value, str):
                setter(key, value[:1024])
            elif isinstance(value, (bool, int, float)):
                setter(key, value)
            elif value is not None:
                setter(key, str(value)[:1024])
        except Exception:
            # Never break rendering due to tracing.
            continue

