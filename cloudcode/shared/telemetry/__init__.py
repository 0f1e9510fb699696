"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from cloudcode.shared.telemetry.logging import setup_logging
from cloudcode.shared.telemetry.telemetry import TelemetryConfig
from cloudcode.shared.telemetry.tracing import (
    TracedOperation,
    add_span_attributes,
    traced,
)

__all__ = [
    "setup_logging",
    "TelemetryConfig",
    "traced",
    "add_span_attributes",
    "TracedOperation",
]
