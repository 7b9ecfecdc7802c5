"""OpenTelemetry integration for the desktop auth SDK.

Provides tracing spans and structured logging for the login flow.
Authorization codes, verifiers and tokens are never attached to logs
or span attributes.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from collections.abc import Generator

    from .config import TelemetryConfig

TRACER_NAME = "desktop-auth-sdk"
TRACER_VERSION = "0.1.0"

# Module-level tracer and logger
_tracer: trace.Tracer | None = None
_logger: structlog.BoundLogger | None = None


def get_tracer() -> trace.Tracer:
    """Get or create the SDK tracer."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME, TRACER_VERSION)
    return _tracer


def get_logger() -> structlog.BoundLogger:
    """Get or create the SDK logger."""
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(TRACER_NAME)
    return _logger


def configure_telemetry(config: TelemetryConfig) -> None:
    """Configure process-wide telemetry based on config.

    Opt-in for the host application; clients never call it.

    Args:
        config: Telemetry configuration.
    """
    global _tracer, _logger

    _tracer = create_tracer(config)
    if not config.enabled or not config.configure_logging:
        return

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _log_level_to_int(config.log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _logger = structlog.get_logger(config.service_name)


def _log_level_to_int(level: str) -> int:
    """Convert log level string to integer."""
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def create_tracer(config: TelemetryConfig) -> trace.Tracer:
    """Build a tracer for one client without touching the SDK globals.

    Args:
        config: Telemetry configuration of that client.

    Returns:
        A tracer named after the service, or a no-op tracer when disabled.
    """
    if not config.enabled:
        return trace.NoOpTracer()
    return trace.get_tracer(config.service_name, TRACER_VERSION)


@contextmanager
def trace_operation(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
    tracer: trace.Tracer | None = None,
) -> Generator[trace.Span, None, None]:
    """Context manager for tracing an operation.

    Args:
        name: Name of the operation.
        attributes: Optional span attributes.
        tracer: Tracer to use; defaults to the SDK tracer.

    Yields:
        The active span.
    """
    if tracer is None:
        tracer = get_tracer()
    with tracer.start_as_current_span(name) as span:
        if attributes:
            for key, value in attributes.items():
                if value is not None:
                    span.set_attribute(key, value)
        try:
            yield span
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise
