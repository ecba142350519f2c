"""
Telemetry module for OpenTelemetry + Application Insights.

Configures distributed tracing for the AI mediation pipeline.
Span attributes carry lengths, flags, severity and token counts only,
never user or model text; set_span_attributes() enforces that.
"""

import logging
import re

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = logging.getLogger(__name__)

SERVICE_NAME = "caretaker-ai"

# Labels are single tokens: "blocked", "gateway_error", "gpt-4.1-mini"
_LABEL_PATTERN = re.compile(r"[\w.:/-]{1,40}")

AttributeValue = str | bool | int | float

_tracer: trace.Tracer | None = None
_provider: TracerProvider | None = None


def setup_telemetry(connection_string: str) -> None:
    """
    Initialize OpenTelemetry with Application Insights exporter.

    The global tracer provider can only be installed once per process, so
    repeated calls (one per app startup in tests) reuse the first provider.

    Args:
        connection_string: Application Insights connection string.
                          If empty, spans are recorded but not exported.
    """
    global _tracer, _provider

    if _provider is not None:
        logger.debug("Telemetry already configured.")
        return

    provider = TracerProvider(resource=Resource.create({"service.name": SERVICE_NAME}))

    if not connection_string:
        logger.info("No connection string provided. Telemetry export disabled.")
    else:
        try:
            from azure.monitor.opentelemetry.exporter import (
                AzureMonitorTraceExporter,
            )
        except ImportError:
            logger.warning(
                "azure-monitor-opentelemetry-exporter not installed. "
                "Install the 'monitor' extra to export traces."
            )
        else:
            provider.add_span_processor(
                BatchSpanProcessor(
                    AzureMonitorTraceExporter(connection_string=connection_string)
                )
            )
            logger.info("Application Insights telemetry enabled.")

    trace.set_tracer_provider(provider)
    _provider = provider
    _tracer = trace.get_tracer(SERVICE_NAME)


def set_span_attributes(span: trace.Span, attributes: dict[str, AttributeValue]) -> None:
    """
    Attach attributes to a span without leaking user or model text.

    Numbers and booleans are kept as given. A string is kept only when it is
    a single-token label (severity, outcome, model name); any other string
    is recorded as its length under "<key>_length".
    """
    for key, value in attributes.items():
        if isinstance(value, str) and not _LABEL_PATTERN.fullmatch(value):
            span.set_attribute(f"{key}_length", len(value))
        else:
            span.set_attribute(key, value)


def get_tracer() -> trace.Tracer:
    """Return the application tracer, initializing a no-op if not set up."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(SERVICE_NAME)
    return _tracer
