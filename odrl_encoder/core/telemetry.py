"""
OpenTelemetry tracing helpers for the policy encoder.

Only the OpenTelemetry API is used here: spans are no-ops until the host
application installs a tracer provider (for example with the OTLP exporter
of the OpenTelemetry SDK).

Usage:
    from odrl_encoder.core.telemetry import get_tracer

    with get_tracer().start_as_current_span("odrl.encode_policy") as span:
        span.set_attribute("odrl.policy_type", "OFFER")
"""

from opentelemetry import trace

TRACER_NAME = "odrl_encoder"


def get_tracer() -> trace.Tracer:
    """Return the encoder tracer from the globally configured provider."""
    return trace.get_tracer(TRACER_NAME)


def get_trace_id() -> str | None:
    """
    Get the current trace ID as a hex string.

    Returns:
        32-character hex trace ID, or None when no span is recording
    """
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None
    return format(span_context.trace_id, "032x")


def get_span_id() -> str | None:
    """
    Get the current span ID as a hex string.

    Returns:
        16-character hex span ID, or None when no span is recording
    """
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None
    return format(span_context.span_id, "016x")
