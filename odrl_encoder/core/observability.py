"""
Observability module for the ODRL policy encoder.

Provides:
- Structured logging with JSON format and correlation IDs
- Correlation ID generation and propagation via context variables
- Prometheus metrics for policy encoding

Usage:
    from odrl_encoder.core.observability import (
        configure_structured_logging,
        set_correlation_id,
        metrics,
    )
"""

import json
import logging
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime

from prometheus_client import CollectorRegistry, Counter, Histogram

from odrl_encoder.core.telemetry import get_span_id, get_trace_id

# ============================================================================
# Context Variables
# ============================================================================

# Correlation ID - links all logs emitted for one caller operation
_correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """Generate a unique correlation ID (UUID4 string)."""
    return str(uuid.uuid4())


def get_correlation_id() -> str:
    """Get the current correlation ID from context."""
    return _correlation_id_ctx.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context."""
    _correlation_id_ctx.set(correlation_id)


# ============================================================================
# Structured Logging Configuration
# ============================================================================

# LogRecord attributes that are not user supplied extras
_RESERVED_RECORD_KEYS = frozenset(
    {
        "name",
        "msg",
        "message",
        "asctime",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs as JSON with standard fields:
    - timestamp: ISO 8601 format
    - level: Log level
    - logger: Logger name
    - message: Log message
    - correlation_id: Correlation ID (if set)
    - trace_id / span_id: OpenTelemetry ids (if a span is active)
    - exception: Exception type and message (if present)
    - extra: Any additional context from logging.extra
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = get_correlation_id()
        if correlation_id:
            log_entry["correlation_id"] = correlation_id

        trace_id = get_trace_id()
        if trace_id:
            log_entry["trace_id"] = trace_id
        span_id = get_span_id()
        if span_id:
            log_entry["span_id"] = span_id

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
            }

        log_entry["function"] = record.funcName
        log_entry["line"] = record.lineno

        extra_keys = {
            k: v for k, v in record.__dict__.items() if k not in _RESERVED_RECORD_KEYS
        }
        if extra_keys:
            log_entry["extra"] = extra_keys

        return json.dumps(log_entry, default=str)


def configure_structured_logging(level: str = "INFO", structured: bool = True) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: Emit JSON lines when True, plain text otherwise
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    if structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root_logger.addHandler(handler)


# ============================================================================
# Prometheus Metrics
# ============================================================================

# Use a custom registry to avoid conflicts with host application metrics
_registry = CollectorRegistry()


class Metrics:
    """
    Centralized metrics for the encoder.

    Metrics:
    - encoder_encodes_total: encodes by outcome
    - encoder_duration_seconds: encode latency
    - encoder_rules_count: rules (permissions + prohibitions + obligations) per policy
    - encoder_max_nesting_depth: deepest constraint/duty nesting per policy
    """

    def __init__(self, registry: CollectorRegistry) -> None:
        self.registry = registry

        self.encoder_encodes_total = Counter(
            "encoder_encodes_total",
            "Total policy encodes",
            ["status"],
            registry=self.registry,
        )

        self.encoder_duration_seconds = Histogram(
            "encoder_duration_seconds",
            "Policy encode duration in seconds",
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
            registry=self.registry,
        )

        self.encoder_rules_count = Histogram(
            "encoder_rules_count",
            "Number of rules in an encoded policy",
            buckets=(0, 1, 5, 10, 25, 50, 100, 250),
            registry=self.registry,
        )

        self.encoder_max_nesting_depth = Histogram(
            "encoder_max_nesting_depth",
            "Deepest constraint or duty nesting in an encoded policy",
            buckets=(1, 2, 4, 8, 16, 32, 64),
            registry=self.registry,
        )


# Global metrics instance
metrics = Metrics(_registry)
