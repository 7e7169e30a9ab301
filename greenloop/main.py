"""GreenLoop Yield proof store service.

Serves the evidence ledger, live proof feed, toasts and proof inspector
to the dashboard UI.
"""

import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from greenloop.api.routes.evidence import router as evidence_router
from greenloop.api.routes.health import router as health_router
from greenloop.api.routes.inspector import router as inspector_router
from greenloop.api.routes.live_feed import router as live_feed_router
from greenloop.api.routes.monitoring import router as monitoring_router
from greenloop.api.routes.notifications import router as notifications_router
from greenloop.core.config import AppEnvironment, Settings, get_settings
from greenloop.core.errors import GreenLoopError, get_status_code
from greenloop.core.logging import setup_logging
from greenloop.core.tracing import (
    bind_contextvars_to_logging,
    clear_tracing_context,
    set_request_id,
    set_trace_parent,
)
from greenloop.services.container import build_container

logger = structlog.get_logger(__name__)


def _request_log_context(request: Request) -> dict[str, str]:
    return {
        "path": request.url.path,
        "method": request.method,
        "request_id": getattr(request.state, "request_id", ""),
        "client_host": request.client.host if request.client else "",
    }


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Build services on startup, stop the poller on shutdown."""
    settings = get_settings()
    setup_logging()

    logger.info(
        "Starting GreenLoop proof store",
        app=settings.app.name,
        env=settings.app.env.value,
        version=settings.app.version,
    )

    services = build_container(settings)
    await services.startup()
    app.state.settings = settings
    app.state.services = services

    yield

    await services.shutdown()
    logger.info("GreenLoop proof store stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    prefix = settings.app.api_prefix

    app = FastAPI(
        title="GreenLoop Yield Proof Store",
        description="Evidence ledger, live proof feed and proof surfacing for the GreenLoop dashboard.",
        version=settings.app.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.app.env != AppEnvironment.PROD else None,
        redoc_url="/redoc" if settings.app.env != AppEnvironment.PROD else None,
        openapi_url="/openapi.json" if settings.app.env != AppEnvironment.PROD else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_allowed_origins,
        allow_credentials=settings.security.cors_allow_credentials,
        allow_methods=settings.security.cors_allow_methods,
        allow_headers=settings.security.cors_allow_headers,
    )

    app.include_router(monitoring_router, prefix=prefix)
    app.include_router(health_router, prefix=prefix)
    app.include_router(evidence_router, prefix=prefix)
    app.include_router(live_feed_router, prefix=prefix)
    app.include_router(notifications_router, prefix=prefix)
    app.include_router(inspector_router, prefix=prefix)

    setup_telemetry(app, settings)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Propagate X-Request-ID and traceparent to logs and outbound calls."""
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        set_request_id(request_id)
        set_trace_parent(request.headers.get("traceparent"))
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(**bind_contextvars_to_logging())

        try:
            response = await call_next(request)
        finally:
            clear_tracing_context()
            structlog.contextvars.clear_contextvars()

        response.headers["X-Request-ID"] = request_id
        return response

    @app.middleware("http")
    async def security_headers_middleware(request: Request, call_next):
        """Set baseline security headers for all responses."""
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        return response

    @app.exception_handler(GreenLoopError)
    async def domain_error_handler(request: Request, exc: GreenLoopError) -> JSONResponse:
        """Handle domain-specific errors."""
        status_code = get_status_code(exc)
        logger.warning(
            "Domain exception",
            **_request_log_context(request),
            status_code=status_code,
            error_code=exc.code,
            error=exc.message,
            error_details=exc.details or {},
        )
        return JSONResponse(
            status_code=status_code,
            content={
                "detail": exc.message,
                "code": exc.code,
                **({"errors": exc.details} if exc.details else {}),
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "Unhandled exception",
            **_request_log_context(request),
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


def setup_telemetry(app: FastAPI, settings: Settings) -> None:
    """Setup OpenTelemetry instrumentation when an OTLP endpoint is configured."""
    if not settings.observability.otlp_endpoint:
        return

    from opentelemetry import trace
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
    from opentelemetry.sdk.resources import SERVICE_NAME, Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    resource = Resource(attributes={SERVICE_NAME: settings.observability.service_name})
    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(
        endpoint=settings.observability.otlp_endpoint,
        insecure=settings.observability.otlp_insecure,
    )
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app)


def run() -> None:
    """Run the application using uvicorn.

    Always a single worker: the process owns the only ledger and is the only
    writer to its storage.
    """
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "greenloop.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.app.env == AppEnvironment.LOCAL,
        workers=1,
        log_level=settings.app.log_level.lower(),
    )


if __name__ == "__main__":
    run()
