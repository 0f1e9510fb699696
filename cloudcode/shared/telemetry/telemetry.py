"""OpenTelemetry tracing setup for the webhook service.

Spans come from FastAPI instrumentation (one per webhook call) and from
the ``traced`` engine entry points. Exported over OTLP gRPC or to the
console.
"""

import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

logger = logging.getLogger(__name__)


class TelemetryConfig:
    """Tracer provider plus the instrumentations this service uses.

    Exporters: console, otlp, or none.
    """

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.tracer_provider: TracerProvider | None = None

    def _exporter(self, exporter_type: str, otlp_endpoint: str | None) -> SpanExporter | None:
        if exporter_type == "none":
            return None
        if exporter_type == "otlp" and otlp_endpoint:
            logger.info("Using OTLP span exporter: %s", otlp_endpoint)
            return OTLPSpanExporter(
                endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
            )
        if exporter_type != "console":
            logger.warning("Unusable exporter '%s', using console", exporter_type)
        return ConsoleSpanExporter()

    def setup_telemetry(
        self,
        exporter_type: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> TracerProvider:
        """Install the global tracer provider.

        Args:
            exporter_type: "console", "otlp", or "none".
            otlp_endpoint: OTLP gRPC endpoint (e.g. http://localhost:4317).
            sample_rate: Sampling rate 0.0–1.0.
        """
        resource = Resource(
            attributes={
                SERVICE_NAME: self.service_name,
                SERVICE_VERSION: self.service_version,
                "deployment.environment": self.environment,
            }
        )
        self.tracer_provider = TracerProvider(
            resource=resource, sampler=TraceIdRatioBased(sample_rate)
        )
        exporter = self._exporter(exporter_type, otlp_endpoint)
        if exporter is not None:
            self.tracer_provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(self.tracer_provider)
        logger.info(
            "OpenTelemetry initialized: service=%s, version=%s, exporter=%s",
            self.service_name,
            self.service_version,
            exporter_type,
        )
        return self.tracer_provider

    def instrument_fastapi(self, app: FastAPI) -> None:
        """One span per webhook request; health probes excluded."""
        if self.tracer_provider is None:
            return
        FastAPIInstrumentor.instrument_app(
            app,
            tracer_provider=self.tracer_provider,
            excluded_urls="/health",
        )
        logger.info("FastAPI instrumentation enabled")

    def instrument_logging(self) -> None:
        """Add trace_id/span_id to log records."""
        if self.tracer_provider is None:
            return
        LoggingInstrumentor().instrument(tracer_provider=self.tracer_provider)
        logger.info("Logging instrumentation enabled")

    def shutdown(self) -> None:
        """Flush remaining spans."""
        if self.tracer_provider is not None:
            self.tracer_provider.shutdown()
            self.tracer_provider = None
