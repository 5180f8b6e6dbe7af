"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from valuation_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from valuation_gateway.api.v1 import assets, reports, tithe, valuation
from valuation_gateway.infrastructure.observability.logging import setup_logging
from valuation_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Valuation Gateway",
        description="Depreciation schedules, business valuation, tithe and period reports",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(assets.router, prefix="/v1", tags=["assets"])
    app.include_router(valuation.router, prefix="/v1", tags=["valuation"])
    app.include_router(tithe.router, prefix="/v1", tags=["tithe"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
