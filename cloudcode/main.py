"""FastAPI application entry point.

Wiring only: logging, telemetry, lifespan, exception handlers, routers.
No business logic here (SRP). See cloudcode.core.lifespan and
cloudcode.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and optionally
clear get_settings cache) before importing or calling create_app().
"""

from fastapi import FastAPI

from cloudcode.api.v1 import api_router
from cloudcode.core.config import get_settings
from cloudcode.core.exception_handlers import register_exception_handlers
from cloudcode.core.lifespan import create_lifespan
from cloudcode.shared.telemetry import TelemetryConfig, setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.telemetry = None

    register_exception_handlers(app)
    app.include_router(api_router)

    # Instrumentation adds middleware, which must happen before the app starts.
    if settings.telemetry_enabled:
        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        telemetry.instrument_logging()
        telemetry.instrument_fastapi(app)
        app.state.telemetry = telemetry

    return app


app = create_app()
