"""OpenTelemetry tracing helpers for accessaudit.

Provides a thin wrapper around the OpenTelemetry API so the rest of the
codebase can call ``get_tracer()`` without caring whether the SDK is
installed.  When the SDK is *not* configured the API returns no-op
implementations.

Usage::

    from accessaudit.utils.telemetry import get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("accessaudit.tool.call") as span:
        span.set_attribute(ATTR_TOOL_NAME, "audit_html")

To export spans, call :func:`configure_telemetry` once at startup with the
server's telemetry settings (requires the ``otel`` extra).
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from opentelemetry import trace

if TYPE_CHECKING:
    from accessaudit.config import TelemetrySettings

# ---------------------------------------------------------------------------
# Semantic attribute keys used throughout accessaudit instrumentation
# ---------------------------------------------------------------------------

ATTR_METHOD = "accessaudit.method"
ATTR_TOOL_NAME = "accessaudit.tool.name"
ATTR_BATCH_SIZE = "accessaudit.batch.size"
ATTR_RULE_COUNT = "accessaudit.rule.count"
ATTR_OUTCOME_TOTAL = "accessaudit.outcome.total"
ATTR_ERROR_KIND = "accessaudit.error.kind"

_INSTRUMENTATION_NAME = "accessaudit"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*.

    If the OpenTelemetry SDK has not been configured the returned tracer
    is a no-op.
    """
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)



def configure_telemetry(settings: TelemetrySettings, *, service_name: str) -> None:
    """Install an SDK tracer provider exporting to the destinations in *settings*.

    Console export writes JSON spans to stderr, since stdout belongs to the
    stdio transport.  OTLP export uses gRPC and needs
    ``opentelemetry-exporter-otlp``.

    Raises:
        ImportError: If the SDK or a requested exporter is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor
    except ImportError as exc:
        msg = "opentelemetry-sdk is required for tracing; install accessaudit[otel]"
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))

    if settings.console:
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter

        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))

    if settings.otlp_endpoint:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
        except ImportError as exc:
            msg = "opentelemetry-exporter-otlp is required for OTLP export"
            raise ImportError(msg) from exc
        exporter = OTLPSpanExporter(endpoint=settings.otlp_endpoint)
        provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)
